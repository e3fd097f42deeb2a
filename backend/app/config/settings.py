"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Support Bot API"
    app_version: str = "1.0.0"
    debug: bool = True
    api_prefix: str = "/api"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day

    # Storage
    local_storage_path: str = "./data"

    # AWS - static keys are optional, boto3 falls back to its credential chain
    aws_region: str = "ap-south-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    genai_function_name: Optional[str] = None
    s3_bucket: Optional[str] = None

    # Debug sessions - fixed window, never taken from the request
    debug_log_group_template: str = "/aws/lambda/{resource_id}"
    debug_log_limit: int = 5
    debug_metric_namespace: str = "AWS/Lambda"
    debug_metric_name: str = "Invocations"
    debug_metric_dimension: str = "FunctionName"
    debug_metric_statistic: str = "Sum"
    debug_metric_window_seconds: int = 3600
    debug_metric_period_seconds: int = 300

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/supportbot.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
