"""HTTP surface: Flask application and the server runner."""
