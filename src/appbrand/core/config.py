#!/usr/bin/env python3
"""
APPBRAND CONFIG - The Identity Card
-----------------------------------
Loads the declarative rebrand document and validates it into an
immutable RebrandConfig. Every check happens here, before a single
project file is opened for patching.

Required keys: application_name, flavor, packageName, version, build.
Identity values must be YAML strings: an unquoted 1.10 or 007 is read by
the YAML loader as a number and would lose its digits, so it is rejected.

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic import ValidationError as SchemaError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from appbrand.core.errors import ConfigError, FlavorError, IdentifierError
from appbrand.core.models import PackagePath

logger = logging.getLogger("appbrand.config")

DEFAULT_CONFIG_NAME = "appbrand.yaml"

# major.minor.patch, the only shape pubspec accepts ahead of +build
VERSION_PATTERN = re.compile(r'^\d+\.\d+\.\d+$')
BUILD_PATTERN = re.compile(r'^\d+$')


class Flavor(str, Enum):
    """Closed set of deployment flavors."""
    DEV = "dev"
    UAT = "uat"
    PROD = "prod"


# Identifier written into the envName constant for each flavor
ENV_SUFFIXES = {
    Flavor.DEV: "dev",
    Flavor.UAT: "uat",
    Flavor.PROD: "prod",
}

DEFAULT_ICON_PATHS = {
    Flavor.DEV: "assets/icons/app_icon_dev.png",
    Flavor.UAT: "assets/icons/app_icon_uat.png",
    Flavor.PROD: "assets/icons/app_icon.png",
}

DEFAULT_ICON_COMMAND = "dart run flutter_launcher_icons"
DEFAULT_PUB_GET_COMMAND = "flutter pub get"


def resolve_flavor(token: Any) -> Flavor:
    """
    Maps a raw flavor token onto the Flavor enum.
    Unknown or absent input is rejected here rather than defaulted.
    """
    raw = str(token).strip().lower() if token is not None else ""
    for flavor in Flavor:
        if raw == flavor.value:
            return flavor
    accepted = ", ".join(f.value for f in Flavor)
    raise FlavorError(f"Unrecognized flavor '{token}'. Expected one of: {accepted}")


def env_suffix(flavor: Flavor) -> str:
    try:
        return ENV_SUFFIXES[flavor]
    except KeyError:
        raise FlavorError(f"No environment suffix registered for flavor '{flavor}'")


class ToolsConfig(BaseModel):
    """External tools run once the new identity is committed."""

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    enabled: bool = True
    icon_command: StrictStr = Field(default=DEFAULT_ICON_COMMAND, min_length=1)
    pub_get_command: StrictStr = Field(default=DEFAULT_PUB_GET_COMMAND, min_length=1)


class RebrandConfig(BaseModel):
    """
    The single source of identity for a run.
    Created once by the engine and handed to every patcher.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    application_name: StrictStr = Field(min_length=1)                     # Display name under the launcher icon
    flavor: Flavor                                                         # Active deployment flavor
    package_name: StrictStr = Field(alias="packageName", min_length=1)     # Reverse-DNS identifier, e.g. com.acme.app
    version: StrictStr = Field(min_length=1)                               # major.minor.patch, e.g. 1.4.0
    build: StrictStr = Field(min_length=1)                                 # Numeric build token, e.g. 42
    icon_paths: Dict[Flavor, str] = Field(default_factory=lambda: dict(DEFAULT_ICON_PATHS))
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    @field_validator("flavor", mode="before")
    @classmethod
    def resolve_flavor_token(cls, value: Any) -> Flavor:
        try:
            return resolve_flavor(value)
        except FlavorError as e:
            raise ValueError(str(e))

    @field_validator("package_name")
    @classmethod
    def check_identifier(cls, value: str) -> str:
        PackagePath(value)
        return value

    @field_validator("version")
    @classmethod
    def check_version(cls, value: str) -> str:
        if not VERSION_PATTERN.match(value):
            raise ValueError(f"Version '{value}' is not in major.minor.patch form (e.g. 1.2.3)")
        return value

    @field_validator("build")
    @classmethod
    def check_build(cls, value: str) -> str:
        if not BUILD_PATTERN.match(value):
            raise ValueError(f"Build '{value}' is not a numeric token")
        return value

    @field_validator("icon_paths", mode="before")
    @classmethod
    def merge_icon_paths(cls, value: Any) -> Dict[Flavor, str]:
        if value is None:
            return dict(DEFAULT_ICON_PATHS)
        if not isinstance(value, dict):
            raise ValueError("'icon_paths' must map flavor names to image paths")
        merged = dict(DEFAULT_ICON_PATHS)
        for token, path in value.items():
            try:
                merged[resolve_flavor(token)] = path
            except FlavorError as e:
                raise ValueError(str(e))
        return merged

    @field_validator("tools", mode="before")
    @classmethod
    def default_tools(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def package_path(self) -> PackagePath:
        return PackagePath(self.package_name)

    @property
    def version_string(self) -> str:
        return f"{self.version}+{self.build}"

    @property
    def dart_package_name(self) -> str:
        """pubspec 'name' value derived from the display name."""
        slug = re.sub(r'[^a-z0-9]+', '_', self.application_name.lower()).strip('_')
        if not slug or slug[0].isdigit():
            slug = f"app_{slug}"
        return slug

    @property
    def icon_path(self) -> str:
        return self.icon_paths[self.flavor]

    @property
    def icon_command(self) -> str:
        return self.tools.icon_command

    @property
    def pub_get_command(self) -> str:
        return self.tools.pub_get_command

    @property
    def run_tools(self) -> bool:
        return self.tools.enabled

    @classmethod
    def from_mapping(cls, data: Any) -> "RebrandConfig":
        """Validates a loaded document. Raises ConfigError on any defect."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping of keys to values")
        try:
            return cls.model_validate(data)
        except SchemaError as e:
            raise _config_error(e)


def _config_error(exc: SchemaError) -> ConfigError:
    """Translates the first schema violation into the AppBrand error family."""
    error = exc.errors()[0]
    loc = error["loc"]
    field = ".".join(str(part) for part in loc) or "document"
    kind = error["type"]

    if kind == "missing":
        message = f"Missing required configuration field '{field}'"
    elif kind == "string_too_short":
        message = f"Required configuration field '{field}' is empty"
    elif kind == "string_type":
        message = f"Configuration field '{field}' must be a quoted string, got {error['input']!r}"
    elif kind == "value_error":
        message = str(error["ctx"]["error"])
    else:
        message = f"Configuration field '{field}': {error['msg']}"

    top = loc[0] if loc else None
    if top in ("flavor", "icon_paths") and kind == "value_error":
        return FlavorError(message)
    if top == "packageName" and kind == "value_error":
        return IdentifierError(message)
    return ConfigError(message)


def load_config(path: Path) -> RebrandConfig:
    """Reads the YAML document at `path` and validates it."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    yaml = YAML(typ='safe')
    try:
        data = yaml.load(path.read_text(encoding='utf-8-sig'))
    except YAMLError as e:
        raise ConfigError(f"Configuration file {path} is malformed: {e}")

    if data is None:
        raise ConfigError(f"Configuration file {path} is empty")

    config = RebrandConfig.from_mapping(data)
    logger.info(f"Loaded configuration for '{config.application_name}' ({config.package_name}, {config.flavor.value})")
    return config


def find_config(project_root: Path, explicit: Optional[Path] = None) -> Path:
    if explicit is not None:
        return Path(explicit)
    return Path(project_root) / DEFAULT_CONFIG_NAME
