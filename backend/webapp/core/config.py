from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # MySQL / Aurora-MySQL
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = ""
    db_password: str = ""
    db_name: Optional[str] = None
    db_pool_maxsize: int = 5

    # S3
    s3_bucket: str = ""
    aws_region: str = "us-east-1"

    # StatsD (CloudWatch agent listener by default)
    statsd_enabled: bool = True
    statsd_host: str = "127.0.0.1"
    statsd_port: int = 8125
    statsd_prefix: Optional[str] = None

    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Upper bound for any single database or S3 call
    io_timeout_seconds: float = Field(default=10.0, ge=5.0, le=30.0)

    max_upload_bytes: int = 5 * 1024 * 1024
    upload_field_name: str = "profilePic"

    cors_origins: List[str] = []

    class Config:
        env_file = ".env"
