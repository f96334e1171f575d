"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ENDPOINT_URL = "https://observatory-7kdhmtcbfq-oa.a.run.app/notifications/email"


class CredentialStrategy(str, Enum):
    """Where the delivery bearer token comes from."""

    ENVIRONMENT = "environment"
    STORE = "store"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class DeploymentConfig(BaseModel):
    """Selects the deployment variant of the relay pipeline."""

    trigger_collection: str = Field(
        "email_requests",
        min_length=1,
        description="Collection whose document-set events trigger delivery",
    )
    credential_strategy: CredentialStrategy = Field(
        CredentialStrategy.ENVIRONMENT,
        description="Token source: process environment or store lookup",
    )

    @field_validator("trigger_collection")
    @classmethod
    def strip_collection(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("trigger_collection cannot be empty or whitespace-only")
        return stripped

    model_config = {"use_enum_values": True, "validate_default": True}


class NotificationsConfig(BaseModel):
    """Outbound notification API settings."""

    endpoint_url: str = Field(DEFAULT_ENDPOINT_URL, description="Email notification endpoint")
    timeout_seconds: float = Field(
        5.0, gt=0, le=60, description="Timeout for the outbound call (seconds)"
    )
    max_response_bytes: int = Field(
        1000, ge=1, description="Largest response body accepted from the API"
    )
    idempotency_prefix: str = Field(
        "futura", min_length=1, description="Prefix of the idempotency-key header value"
    )

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped.startswith(("https://", "http://")):
            raise ValueError(f"endpoint_url must be an http(s) URL, got: {v!r}")
        return stripped


class CredentialsConfig(BaseModel):
    """Token lookup settings for both credential strategies."""

    env_var: str = Field("NOTIFICATIONS_TOKEN", min_length=1)
    collection: str = Field("ENV_VARS", min_length=1)
    primary_document: str = Field("prod", min_length=1)
    fallback_document: str = Field("dev", min_length=1)
    token_field: str = Field("NOTIFICATIONS_TOKEN", min_length=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class RelayConfig(BaseModel):
    """Root configuration object for the notification relay."""

    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_trigger_not_credential_collection(self):
        """Credential records must never be mistaken for email requests."""
        if self.deployment.trigger_collection == self.credentials.collection:
            raise ValueError(
                "deployment.trigger_collection must differ from credentials.collection "
                f"({self.credentials.collection})"
            )
        return self
