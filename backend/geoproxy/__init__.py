"""GeoProxy: WiFi scan geolocation proxy with per-client cache and daily quota."""
