from pathlib import Path

from pydantic import SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from certcheck.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Run settings loaded from environment variables, .env and CLI overrides."""

    # Trust authority API
    certcheck_client_id: str
    certcheck_client_secret: SecretStr
    certcheck_fi_reference_id: str
    certcheck_check_url: str
    certcheck_api_version: str = "1"
    certcheck_http_timeout: float | None = None  # None = wait for the authority indefinitely

    # E-mail notifications
    certcheck_email_to: str
    certcheck_email_user: str
    certcheck_email_password: SecretStr
    certcheck_email_server: str
    certcheck_email_port: int
    certcheck_email_no_ssl: bool = False

    # Certificate directories
    certcheck_initial_dir: Path
    certcheck_regular_dir: Path
    certcheck_invalid_dir: Path
    certcheck_keep_failed: bool = False

    # Logging
    certcheck_log_level: str = "info"

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator(
        "certcheck_client_id",
        "certcheck_fi_reference_id",
        "certcheck_check_url",
        "certcheck_email_to",
        "certcheck_email_user",
        "certcheck_email_server",
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("certcheck_check_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("must be an http:// or https:// URL")
        return value

    @field_validator("certcheck_email_port")
    @classmethod
    def _valid_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError("must be between 1 and 65535")
        return value

    @model_validator(mode="after")
    def _distinct_directories(self) -> "Settings":
        dirs = [
            self.certcheck_initial_dir.resolve(),
            self.certcheck_regular_dir.resolve(),
            self.certcheck_invalid_dir.resolve(),
        ]
        if len(set(dirs)) != len(dirs):
            raise ValueError("initial, regular and invalid directories must be distinct")
        return self


def load_settings(**overrides) -> Settings:
    """Build Settings, letting non-None overrides win over the environment.

    Raises ConfigurationError naming every missing or invalid setting.
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "settings"
            problems.append(f"{field}: {err['msg']}")
        raise ConfigurationError(
            message="Invalid configuration: " + "; ".join(problems),
            details={"errors": problems},
        ) from e
