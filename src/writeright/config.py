"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if "server" in data:
            flattened["host"] = data["server"].get("host")
            flattened["port"] = data["server"].get("port")
        if "storage" in data:
            flattened["storage_backend"] = data["storage"].get("backend")
            flattened["data_dir"] = data["storage"].get("data_dir")
        if "assistant" in data:
            flattened["default_context"] = data["assistant"].get("default_context")
            flattened["default_user_id"] = data["assistant"].get("default_user_id")
        if "openai" in data:
            flattened["rewrite_model"] = data["openai"].get("rewrite_model")
            flattened["rewrite_timeout_seconds"] = data["openai"].get("rewrite_timeout_seconds")

        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI (optional: None disables LLM rewriting)
    openai_api_key: str | None = Field(default=None)
    rewrite_model: str = Field(default="gpt-4o-mini")
    rewrite_timeout_seconds: float = Field(default=30.0)

    # Authentication (optional: None disables auth)
    app_secret: str | None = Field(default=None)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Preference storage
    storage_backend: Literal["memory", "json"] = Field(default="memory")
    data_dir: Path = Field(default=Path("data/preferences"))

    # Assistant defaults
    default_context: str = Field(default="casual")
    default_user_id: str = Field(default="anonymous")

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def preferences_dir(self) -> Path:
        if self.data_dir.is_absolute():
            return self.data_dir
        return self.project_root / self.data_dir

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()


@functools.lru_cache
def load_style_map() -> dict[str, dict[str, list[str]]]:
    """Load register-to-register style changes from YAML file."""
    styles_path = _find_project_root() / "config" / "styles.yaml"
    if not styles_path.exists():
        raise FileNotFoundError(f"Styles file not found: {styles_path}")
    with open(styles_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data.get("styles", {})
