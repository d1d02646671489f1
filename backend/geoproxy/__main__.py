from geoproxy.main import run

run()
