import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    APP_NAME: str = "patternlab"
    LOG_LEVEL: str = "INFO"
    STRICT_TRANSITIONS: bool = False
    TRANSITION_LOG_PATH: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("STRICT_TRANSITIONS", mode="before")
    @classmethod
    def normalize_strict(cls, value: object) -> bool:
        if isinstance(value, bool):
            return value

        if isinstance(value, str):
            normalized = value.strip().lower()

            true_values = {"1", "true", "yes", "on", "strict"}
            false_values = {"0", "false", "no", "off", "lenient"}

            if normalized in true_values:
                return True
            if normalized in false_values:
                return False

            accepted = sorted(true_values | false_values)
            raise ValueError(
                "Invalid STRICT_TRANSITIONS value. Accepted values: "
                + ", ".join(accepted)
            )

        raise ValueError("Invalid STRICT_TRANSITIONS value type. Expected bool or string.")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        normalized = str(value).strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(
                "Invalid LOG_LEVEL value. Accepted values: " + ", ".join(_LOG_LEVELS)
            )
        return normalized

    @field_validator("TRANSITION_LOG_PATH", mode="before")
    @classmethod
    def empty_path_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # init kwargs > .env file > OS environment > file secrets
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL to the package logger hierarchy."""
    logging.getLogger("patternlab").setLevel(settings.LOG_LEVEL)
