"""Configuration for the callwire client."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .retry import RetryPolicy


class CallwireConfig(BaseSettings):
    """Configuration for callwire transports.

    All settings can be configured via environment variables with CALLWIRE_ prefix.

    Transport Selection:
        - transport="auto" (default): Uses Lambda if CALLWIRE_LAMBDA_FUNCTION is set,
          Firestore if CALLWIRE_FIRESTORE_PROJECT is set, otherwise HTTP
        - transport="http": Forces the REST transport
        - transport="lambda": Forces Lambda direct invocation
        - transport="firestore": Forces the Firestore document transport

    HTTP Transport:
        - CALLWIRE_API_URL: Base URL of the REST API
        - CALLWIRE_OAUTH_*: OAuth client credentials

    Lambda Transport:
        - CALLWIRE_LAMBDA_FUNCTION: Lambda function name or ARN
        - CALLWIRE_AWS_PROFILE/CALLWIRE_AWS_REGION: AWS credentials configuration

    Storage:
        - CALLWIRE_STORAGE=s3 with CALLWIRE_S3_BUCKET
    """

    model_config = SettingsConfigDict(
        env_prefix="CALLWIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport selection
    transport: str = Field(
        default="auto",
        description="Transport mode: 'http', 'lambda', 'firestore', or 'auto'",
    )

    # HTTP transport settings
    api_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("api_url", "CALLWIRE_API_URL", "CALLWIRE_URL"),
    )
    timeout: float = Field(default=60.0, ge=1.0, le=300.0)

    # OAuth settings (for HTTP transport)
    oauth_client_id: str | None = Field(default=None)
    oauth_client_secret: str | None = Field(default=None)
    oauth_token_url: str | None = Field(default=None)
    oauth_scope: str | None = Field(default=None)

    # Lambda transport settings
    lambda_function_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lambda_function_name", "CALLWIRE_LAMBDA_FUNCTION"),
        description="Lambda function name or ARN for direct invocation",
    )
    aws_profile: str | None = Field(
        default=None,
        description="AWS profile name (uses default credential chain if not set)",
    )
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region for Lambda and S3",
    )
    lambda_timeout: float = Field(
        default=60.0,
        ge=1.0,
        le=900.0,  # Lambda max is 15 minutes
        description="Read timeout for Lambda invocations (seconds)",
    )

    # Firestore transport settings
    firestore_project: str | None = Field(default=None)
    firestore_database: str | None = Field(
        default=None,
        description="Firestore database id (uses '(default)' if not set)",
    )
    firestore_root_path: str = Field(
        default="",
        description="Prefix prepended to every document path",
    )

    # Storage settings
    storage: str = Field(default="none", description="Storage backend: 'none' or 's3'")
    s3_bucket: str | None = Field(default=None)
    s3_prefix: str = Field(default="")
    s3_url_expiry: int = Field(
        default=3600,
        ge=1,
        le=604800,  # presigned URLs are valid for at most 7 days
        description="Lifetime of URLs returned by upload (seconds)",
    )
    max_download_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    # Retry settings
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_base_delay: float = Field(default=0.5, ge=0.0)
    retry_max_delay: float | None = Field(default=None, ge=0.0)

    log_level: str = Field(default="INFO")

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        """Validate transport mode is one of the allowed values."""
        valid = {"http", "lambda", "firestore", "auto"}
        if v.lower() not in valid:
            raise ValueError(f"Invalid transport: {v}. Must be one of {valid}")
        return v.lower()

    @field_validator("storage")
    @classmethod
    def validate_storage(cls, v: str) -> str:
        """Validate storage backend is one of the allowed values."""
        valid = {"none", "s3"}
        if v.lower() not in valid:
            raise ValueError(f"Invalid storage: {v}. Must be one of {valid}")
        return v.lower()

    @field_validator("api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format and strip trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @property
    def resolved_transport(self) -> str:
        """Determine actual transport to use.

        Returns:
            "http", "lambda" or "firestore" based on configuration.

        When transport is "auto":
            - Returns "lambda" if lambda_function_name is set
            - Returns "firestore" if firestore_project is set
            - Returns "http" otherwise
        """
        if self.transport != "auto":
            return self.transport
        if self.lambda_function_name:
            return "lambda"
        if self.firestore_project:
            return "firestore"
        return "http"

    @property
    def oauth_enabled(self) -> bool:
        """Check if OAuth is configured for HTTP transport."""
        return all([
            self.oauth_client_id,
            self.oauth_client_secret,
            self.oauth_token_url,
        ])

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy built from the retry settings."""
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
        )

    def validate_config(self) -> None:
        """Validate that required config is present for selected transport.

        Call this after construction to get helpful error messages about
        missing configuration.

        Raises:
            ValueError: If configuration is incomplete for the selected
                transport or storage backend.
        """
        transport = self.resolved_transport

        if transport == "lambda" and not self.lambda_function_name:
            raise ValueError(
                "Lambda transport requires CALLWIRE_LAMBDA_FUNCTION to be set. "
                "Example: CALLWIRE_LAMBDA_FUNCTION=my-api"
            )
        # HTTP transport: api_url has a default, firestore falls back to the
        # project from the environment's credentials

        if self.storage == "s3" and not self.s3_bucket:
            raise ValueError(
                "S3 storage requires CALLWIRE_S3_BUCKET to be set. "
                "Example: CALLWIRE_S3_BUCKET=my-uploads"
            )
