"""Settings for the TimePRO MCP server."""
from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .derivation import BreakUnit, TimeEncoding, WireFormat
from .errors import ConfigurationError

REQUIRED_ENV = {
    "TIMEPRO_API_URL": "TimePRO base URL (e.g., https://ssw.sswtimepro.com)",
    "TIMEPRO_API_KEY": "Your personal access token",
    "TIMEPRO_TENANT_ID": "Your tenant ID",
}


class Settings(BaseSettings):
    api_url:   str = Field(alias="TIMEPRO_API_URL")
    api_key:   str = Field(alias="TIMEPRO_API_KEY", repr=False)
    tenant_id: str = Field(alias="TIMEPRO_TENANT_ID")

    time_format: TimeEncoding = Field(default=TimeEncoding.DATETIME, alias="TIMEPRO_TIME_FORMAT")
    break_unit:  BreakUnit = Field(default=BreakUnit.HOURS, alias="TIMEPRO_BREAK_UNIT")
    sales_tax_pct: float = Field(default=0.1, ge=0, le=1, alias="TIMEPRO_SALES_TAX_PCT")
    request_timeout: float | None = Field(default=None, gt=0, alias="TIMEPRO_REQUEST_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_url", "api_key", "tenant_id")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @property
    def wire_format(self) -> WireFormat:
        return WireFormat(time_encoding=self.time_format, break_unit=self.break_unit)


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment and .env, failing fast on anything missing."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    try:
        return Settings()
    except ValidationError as e:
        problems = []
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else "settings"
            hint = REQUIRED_ENV.get(name)
            problems.append(f"  {name} - {hint}" if hint else f"  {name}: {err['msg']}")
        raise ConfigurationError(
            "Missing or invalid environment variables. Please set:\n" + "\n".join(problems)
        ) from e
