"""
Application Configuration

Values come from the environment (or a .env file next to the project),
falling back to an AWS Secrets Manager secret named by ENV_SECRETS.
"""

from functools import lru_cache
import os
import json
from pathlib import Path
from pydantic import computed_field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict
import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

# Populate os.environ before any Settings field default reads it
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_secret(secret_name: str, region_name: str) -> dict:
    """
    Fetch a JSON secret from AWS Secrets Manager and decode it.
    ClientError propagates to the caller.
    """
    client = boto3.session.Session().client(
        service_name="secretsmanager",
        region_name=region_name,
    )
    response = client.get_secret_value(SecretId=secret_name)
    return json.loads(response["SecretString"].replace("\n", ""))


# Define settings class for univeral access
class Settings(BaseSettings):
    APP_NAME: str = "Library Admin"
    LOG_LEVEL: str = "INFO"

    # Origin of the client single page application (CORS)
    client_origin: str | None = os.getenv("client_origin")

    # Blob storage for book images
    # "local" keeps files under STORAGE_ROOT, "s3" under STORAGE_BUCKET_URI
    STORAGE_BACKEND: str = "local"
    STORAGE_ROOT: str = "storage/public"
    STORAGE_BUCKET_URI: str = "s3://library-admin-public/"
    STORAGE_PUBLIC_URL: str = "/storage"

    # Upper bound of rows read from a single import file
    IMPORT_MAX_ROWS: int = 5000

    # Decoded ENV_SECRETS secret, fetched at most once per instance
    _secret_cache: dict | None = PrivateAttr(default=None)

    def _get_config_value(
        self,
        env_var_name: str,
        secret_key_name: str | None = None,
        default: str | None = None
    ) -> str | None:
        """
        Look a value up in the environment, then in the ENV_SECRETS
        secret (under secret_key_name, or env_var_name if not given).
        An unreadable secret counts as missing.
        """
        env_value = os.getenv(env_var_name)
        if env_value:
            return env_value

        env_secret = os.getenv("ENV_SECRETS")
        if not env_secret:
            return default

        try:
            if self._secret_cache is None:
                self._secret_cache = get_secret(env_secret, os.getenv("AWS_REGION", "us-east-1"))
        except ClientError:
            return default

        value = self._secret_cache.get(secret_key_name or env_var_name)
        return value if value is not None else default

    # SQLAlchemy - Create db connection string
    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Build database URI from env or secrets, defaults to a local sqlite file"""
        return self._get_config_value(
            "SQLALCHEMY_DATABASE_URI", default="sqlite:///library.db"
        )

    # AWS Credentials
    AWS_ACCESS_KEY_ID: str | None = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: str | None = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_REGION: str | None = os.getenv("AWS_REGION")

    # Read environment variables from .env file, if it exists
    # extra='ignore' prevents validation errors from extra env vars
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class InMemoryDbSettings(Settings):
    """Settings used by the test suite"""
    TESTING: bool = True
    LOG_LEVEL: str = "DEBUG"

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        return "sqlite:///:memory:"


# Export settings
@lru_cache
def get_settings() -> Settings:
    """
    Get settings instance, cached for performance
    """
    if os.getenv("SETTINGS_MODE") == "test":
        return InMemoryDbSettings()
    return Settings()
