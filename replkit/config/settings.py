"""
settings.py

This module provides application configuration management for replkit.

Features:
- Centralized application configuration using Pydantic settings
- Environment overrides with the RPL_ prefix
- Optional JSON config file in the user's config directory
- Constants for application-wide use

Precedence (highest first):
1. Values passed to `App(...)` directly
2. Environment variables (`RPL_PROMPT`, `RPL_ALLOWNESTED`, ...)
3. `config.json` in the user config directory

Usage:
Import appsettings for application configuration values.
"""

from pathlib import Path
from typing import Final
from appdirs import user_config_dir
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from replkit.models.dataModel import InterruptBehavior

# Set up the configuration directory and file using appdirs
CONFIG_DIR: Final[Path] = Path(user_config_dir("replkit", ""))
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.json"

HISTORY_FILE: Final[str] = str(Path.home() / ".replkit_history")
HISTORY_LENGTH: Final[int] = 1000
EXIT_COMMANDS: Final[tuple[str, ...]] = ("exit", "quit", "q")
HELP_COMMAND: Final[str] = "help"
NESTED_PROMPT_FORMAT: Final[str] = "({level}) {prompt}"


class App(BaseSettings):
    """
    Application settings model.

    Attributes:
        beQuiet: Suppress detailed logging output
        debug_mode: Show tracebacks for command errors and always log
        prompt: Prompt shown at the top-level session
        history_file: Where line history persists between sessions
        historyLength: Maximum number of history lines kept on disk
        commandMarker: Prefix marking a line as an explicit command
        ctrlCBehavior: What a single Ctrl-C shows
        doubleCtrlCTimeout: Seconds within which a second Ctrl-C exits
        allowNested: Whether `interactive` may start a session inside one
        nestedPromptFormat: Prompt for nested sessions; `{level}` and
            `{prompt}` are substituted; an unusable format falls back to
            the default
    """

    beQuiet: bool = True
    debug_mode: bool = False

    prompt: str = "> "
    history_file: str = HISTORY_FILE
    historyLength: int = Field(default=HISTORY_LENGTH, ge=0)
    commandMarker: str = Field(default="/", min_length=1)

    ctrlCBehavior: InterruptBehavior = InterruptBehavior.CLEAR_PROMPT
    doubleCtrlCTimeout: float = Field(default=0.5, gt=0)

    allowNested: bool = False
    nestedPromptFormat: str = NESTED_PROMPT_FORMAT

    model_config = SettingsConfigDict(
        env_prefix="RPL_",  # Environment variables with this prefix override settings
        case_sensitive=False,  # Allow case-insensitive environment variables
        extra="ignore",
        json_file=CONFIG_FILE,
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
            JsonConfigSettingsSource(settings_cls),
        )


# Create the application settings instance
appsettings: Final[App] = App()
