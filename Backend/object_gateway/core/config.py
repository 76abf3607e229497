from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application Configuration Settings.
    This class defines the configuration variables used throughout the gateway.
    Values are loaded from environment variables or a .env file.
    """

    # Name of the bucket exposed by the gateway. Required at startup.
    S3_BUCKET_NAME: str = ""

    # Custom storage endpoint (MinIO, Ceph, DigitalOcean Spaces...).
    # Leave empty to use the default AWS endpoint for the region.
    S3_ENDPOINT: Optional[str] = None

    # Static credentials. When both are empty, boto3 falls back to its
    # default credential chain (env, shared config, instance role).
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None

    # Region used for request signing.
    S3_REGION: str = "us-east-1"

    # Connect/read timeout (seconds) applied to every backend call.
    STORAGE_TIMEOUT: float = 30.0

    # HTTP server binding.
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    LOG_LEVEL: str = "INFO"

    class Config:
        """
        Pydantic configuration class.
        """
        # Instruct Pydantic to load settings from a file named ".env"
        env_file = ".env"


# Create a globally accessible settings instance
settings = Settings()
