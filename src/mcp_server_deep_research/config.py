"""Configuration management using Pydantic settings with optional file persistence."""

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Paths ---

APP_NAME = "mcp-server-deep-research"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/mcp-server-deep-research)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / ".config")).expanduser()
    else:
        base = Path("~/.config").expanduser()

    return base / APP_NAME


CONFIG_FILE = get_config_dir() / "config.json"


def load_config_file() -> dict[str, Any]:
    """Load settings from the JSON config file if it exists."""
    if not CONFIG_FILE.exists():
        return {}

    try:
        text = CONFIG_FILE.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        return json.loads(text)
    except (OSError, json.JSONDecodeError):
        return {}


def save_config_file(config_data: dict[str, Any]) -> None:
    """Save settings to the JSON config file."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(config_data, indent=2), encoding="utf-8")


# Standard environment variable names for the Gemini API key (first match wins)
STANDARD_ENV_VAR_NAMES: list[str] = ["GEMINI_API_KEY", "GOOGLE_API_KEY"]

DEFAULT_AGENT = "deep-research-pro-preview-12-2025"
DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiSettings(BaseSettings):
    """Gemini Interactions API and grounded model configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_GEMINI_")

    agent: str = Field(default=DEFAULT_AGENT, description="Deep research agent id")
    model: str = Field(default=DEFAULT_MODEL, description="Fast model used for search-grounded answers")
    temperature: float = Field(default=0.7, description="Sampling temperature for grounded answers")
    api_key: Optional[SecretStr] = Field(default=None, description="Generic API key override (highest priority)")

    def get_api_key(self) -> Optional[str]:
        """Resolve API key with priority: MCP_GEMINI_API_KEY > GEMINI_API_KEY > GOOGLE_API_KEY.

        Returns:
            The resolved API key or None if not found.
        """
        if self.api_key:
            return self.api_key.get_secret_value()

        for var_name in STANDARD_ENV_VAR_NAMES:
            key = os.environ.get(var_name)
            if key:
                return key
        return None


TransportType = Literal["stdio", "streamable-http", "sse"]


class ServerSettings(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_SERVER_")

    logging_level: str = Field(default="INFO")
    transport: TransportType = Field(default="stdio", description="MCP transport: stdio, streamable-http, or sse")
    host: str = Field(default="127.0.0.1", description="Host for HTTP transports")
    port: int = Field(default=8384, description="Port for HTTP transports")


class AppSettings(BaseSettings):
    """Root application settings.

    Priority: Environment Variables > Config File > Defaults
    """

    model_config = SettingsConfigDict(env_prefix="MCP_", extra="ignore")

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    def save(self) -> Path:
        """Save current configuration to file (excluding secrets)."""
        data = self.model_dump(mode="json", exclude_none=True)
        if "gemini" in data and "api_key" in data["gemini"]:
            del data["gemini"]["api_key"]
        save_config_file(data)
        return CONFIG_FILE


def _merge_section(settings_cls: type[BaseSettings], file_values: Any) -> BaseSettings:
    """Build one settings section, using file values only for fields the environment leaves unset."""
    if not isinstance(file_values, dict):
        return settings_cls()

    # Init kwargs outrank env vars in pydantic-settings, so drop the ones env already sets
    from_env = settings_cls()
    defaults = {
        name: value for name, value in file_values.items() if name in settings_cls.model_fields and name not in from_env.model_fields_set
    }
    return settings_cls(**defaults)


def _load_settings() -> AppSettings:
    """Load settings with file config as base, env vars overlay."""
    file_data = load_config_file()
    if not isinstance(file_data, dict):
        file_data = {}
    return AppSettings(
        gemini=_merge_section(GeminiSettings, file_data.get("gemini")),
        server=_merge_section(ServerSettings, file_data.get("server")),
    )


settings = _load_settings()
