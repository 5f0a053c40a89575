from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_DATA_DIR = ".article-reader"
CONFIG_FILE_RELATIVE_PATH = Path(".config") / "article-reader" / "config.yaml"
_DATA_DIR_RELATIVE_DEFAULTS: tuple[tuple[str, Path], ...] = (("log_dir", Path("logs")),)
_PATH_FIELDS: tuple[str, ...] = (
    "data_dir",
    *(field_name for field_name, _ in _DATA_DIR_RELATIVE_DEFAULTS),
)
_BOOLEAN_COERCION_FIELDS: tuple[str, ...] = ("telemetry_enabled",)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def config_file_path() -> Path:
    return Path.home() / CONFIG_FILE_RELATIVE_PATH


def _resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _parse_bool_with_default(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower() if isinstance(value, int | str) else ""
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _normalize_optional_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


class AppSettings(BaseSettings):
    """
    Runtime configuration for the reader.

    Sources, highest priority first: constructor arguments, `ARTICLE_READER_*`
    environment variables, a local `.env` file, then
    `~/.config/article-reader/config.yaml`. The Gemini key additionally honours
    `GEMINI_API_KEY`.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTICLE_READER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Paths.
    data_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR),
        description="Root runtime directory for logs.",
    )

    # Article retrieval.
    fetch_timeout_seconds: float = Field(
        default=6.0,
        gt=0,
        description="Timeout for the article HTTP fetch. A timeout fails the whole request.",
    )
    fetch_user_agent: str = Field(
        default="article-reader/0.1",
        description="User-Agent sent when fetching articles.",
    )

    # Summaries.
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ARTICLE_READER_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description=(
            "Gemini API key used for article summaries. Without it summaries degrade "
            "to an inline error notice."
        ),
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-lite",
        description="Gemini model used for summaries.",
    )
    summary_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for summary requests.",
    )

    # Terminal layout.
    default_indentation_symbol: str = Field(
        default="  ",
        description="Prefix applied to every rendered block.",
    )
    max_width: int = Field(
        default=80,
        ge=20,
        le=400,
        description="Upper bound for the CLI rendering width (the terminal width is used when smaller).",
    )

    # Logging.
    log_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR) / "logs",
        description="Directory for log files. Defaults to `${ARTICLE_READER_DATA_DIR}/logs`.",
    )
    log_level: str = Field(
        default="INFO",
        description="Console log level.",
    )

    # Telemetry.
    telemetry_enabled: bool = Field(
        default=True,
        description="Enable lightweight internal telemetry events.",
    )
    telemetry_sink: Literal["none", "log"] = Field(
        default="log",
        description=(
            "Telemetry sink backend. `log` emits structured telemetry locally; "
            "`none` disables sink output."
        ),
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=config_file_path()),
            file_secret_settings,
        )

    @field_validator("telemetry_sink", mode="before")
    @classmethod
    def _normalize_telemetry_sink(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("ARTICLE_READER_TELEMETRY_SINK must be a string.")
        normalized = value.strip().lower()
        if normalized in {"none", "log"}:
            return normalized
        raise ValueError("ARTICLE_READER_TELEMETRY_SINK must be set to: none, log.")

    @field_validator("fetch_user_agent", mode="before")
    @classmethod
    def _normalize_user_agent(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("ARTICLE_READER_FETCH_USER_AGENT must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("ARTICLE_READER_FETCH_USER_AGENT must not be empty.")
        return normalized

    @field_validator(*_PATH_FIELDS, mode="before")
    @classmethod
    def _normalize_paths(cls, value: Any) -> Any:
        if value is None:
            return None
        return _resolve_path(value)

    @field_validator(*_BOOLEAN_COERCION_FIELDS, mode="before")
    @classmethod
    def _normalize_booleans(cls, value: Any, info: ValidationInfo) -> bool:
        field_name = info.field_name
        assert field_name is not None
        default_value = cls.model_fields[field_name].default
        assert isinstance(default_value, bool)
        return _parse_bool_with_default(value, default=default_value)

    @field_validator("gemini_api_key", mode="before")
    @classmethod
    def _normalize_optional_strings(cls, value: Any) -> str | None:
        return _normalize_optional_text(value)


def _apply_path_defaults(settings: AppSettings) -> AppSettings:
    updates: dict[str, Path] = {}
    for field_name, relative_default in _DATA_DIR_RELATIVE_DEFAULTS:
        if field_name in settings.model_fields_set:
            continue
        updates[field_name] = settings.data_dir / relative_default
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def _resolve_path_fields(settings: AppSettings) -> AppSettings:
    resolved_updates = {
        field_name: _resolve_path(getattr(settings, field_name))
        for field_name in _PATH_FIELDS
    }
    return settings.model_copy(update=resolved_updates)


def load_settings() -> AppSettings:
    settings = AppSettings()
    settings = _apply_path_defaults(settings)
    return _resolve_path_fields(settings)
