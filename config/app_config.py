"""
Application Configuration

Reads application settings from environment variables.
"""

import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.debug = _env_bool("FLASK_DEBUG", "true")
        self.host = os.getenv("FLASK_HOST", "0.0.0.0")
        self.port = int(os.getenv("FLASK_PORT", 8080))

        # Persistence: "redis" or "memory"
        self.storage_backend = os.getenv("STORAGE_BACKEND", "redis").lower()
        self.redis_key_prefix = os.getenv("REDIS_KEY_PREFIX", "drophere")

        # Login tokens
        self.jwt_secret = os.getenv("JWT_SECRET", "")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_duration_hours = int(os.getenv("JWT_DURATION_HOURS", 24))

        # Mail: "sendgrid" or "console"
        self.mailer_backend = os.getenv("MAILER_BACKEND", "console").lower()
        self.sendgrid_api_key = os.getenv("SENDGRID_API_KEY", "")
        self.mail_template_path = os.getenv("MAIL_TEMPLATE_PATH") or None
        self.mailer_email = os.getenv("MAILER_EMAIL", "admin@drophere.link")
        self.mailer_name = os.getenv("MAILER_NAME", "Drophere Bot")

        # Password recovery
        self.recovery_token_expiry_minutes = int(
            os.getenv("PASSWORD_RECOVERY_TOKEN_EXPIRY_MINUTES", 5)
        )
        self.recovery_web_url = os.getenv(
            "PASSWORD_RECOVERY_WEB_URL", "http://localhost:3000/recover-password"
        )

        # Storage providers
        self.storage_root_directory = os.getenv("STORAGE_ROOT_DIRECTORY", "drophere")

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
