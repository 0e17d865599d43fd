"""Resolution configuration and optional file-based defaults"""

import configparser
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from semver_release.constants import (
    APP_NAME,
    DEFAULT_DELEGATION_TIMEOUT,
    DEFAULT_MAINLINE_BRANCH,
    DEFAULT_REMOTE_NAME,
    RunMode,
)

CONFIG_SECTION = "semver"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

if platform.system() == "Darwin":
    # macOS
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ResolutionConfig(BaseModel):
    """
    Immutable settings for one resolution pass.

    Built once, before resolution starts, and passed to the orchestrator.
    """

    model_config = ConfigDict(frozen=True)

    run_mode: RunMode = RunMode.NATIVE
    branch_version: Optional[str] = None
    metadata: str = ""
    branch_conversion_url: Optional[str] = None
    mainline_branch: str = DEFAULT_MAINLINE_BRANCH
    check_remote_tags: bool = True
    remote_name: str = DEFAULT_REMOTE_NAME
    scm_username: Optional[str] = Field(default=None, repr=False)
    scm_password: Optional[str] = Field(default=None, repr=False)
    delegation_timeout: float = Field(default=DEFAULT_DELEGATION_TIMEOUT, gt=0)

    @field_validator("run_mode", mode="before")
    @classmethod
    def _convert_run_mode(cls, value: Any) -> RunMode:
        if isinstance(value, RunMode):
            return value
        return RunMode.from_name(value)

    @field_validator("metadata", mode="before")
    @classmethod
    def _empty_metadata(cls, value: Any) -> str:
        return value or ""


class ConfigAccessor:
    """
    A dict-like accessor for the configuration file.

    Missing files, sections or keys are not errors; callers get the default.

    Usage:
        config = ConfigAccessor()
        value = config.get('semver', 'run_mode', default='NATIVE')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Path to the configuration file. If None, uses the default path.
        """
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except KeyError:
            return default

    def getboolean(self, section: str, key: str, default: bool) -> bool:
        try:
            return self.config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
        except ValueError as e:
            raise ValueError(
                f"Invalid boolean for [{section}] {key} in {self.config_path}"
            ) from e

    def sections(self) -> list:
        return self.config.sections()


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> ResolutionConfig:
    """
    Build a ResolutionConfig from the config file, with overrides on top.

    Overrides whose value is None are ignored so that unset command line
    options fall back to the file, then to the model defaults.
    """
    accessor = ConfigAccessor(config_path)

    values: dict = {}
    for name in ResolutionConfig.model_fields:
        if name == "check_remote_tags":
            continue
        value = accessor.get(CONFIG_SECTION, name)
        if value is not None:
            values[name] = value
    values["check_remote_tags"] = accessor.getboolean(
        CONFIG_SECTION, "check_remote_tags", True
    )

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ResolutionConfig(**values)
