"""
main.py

Flask backend for Drophere: drop links that relay anonymous uploads to
the link owner's cloud storage.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, httpx, bcrypt, PyJWT, Jinja2
  - Infrastructure: Redis server (unless STORAGE_BACKEND=memory)

Notes:
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Uses application factory pattern for better testability
"""

from app_factory import create_app
from config.app_config import AppConfig

config = AppConfig()
app = create_app(config)

if __name__ == "__main__":
    app.run(host=config.host, port=config.port, debug=config.debug)
