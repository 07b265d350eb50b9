"""Layered configuration loading for the Crowdin file sync tool."""

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, TypeVar

SECTION_SEPARATOR = ":"
ENV_SECTION_SEPARATOR = "__"

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Credentials(ABC):
    """Base class for credentials that travel as query parameters."""

    @abstractmethod
    def query_params(self) -> dict[str, str]:
        """Return the query parameters that authorize a request."""


@dataclass(frozen=True)
class ProjectCredentials(Credentials):
    """Project identifier and API key, bound from the ``project`` section."""

    project_id: str = ""
    project_key: str = ""

    def query_params(self) -> dict[str, str]:
        return {"key": self.project_key}


@dataclass(frozen=True)
class AccountCredentials(Credentials):
    """Account login and API key, bound from the ``account`` section."""

    login_name: str = ""
    account_key: str = ""

    def query_params(self) -> dict[str, str]:
        return {"login": self.login_name, "account-key": self.account_key}


def _normalize(key: str) -> str:
    return key.lower()


def _flatten(value: Any, prefix: str, out: dict[str, str]) -> None:
    """Flatten nested JSON into ``section:Key`` entries.

    Objects contribute their keys, arrays contribute their indexes, and
    scalars are stored as strings.
    """
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, list):
        items = ((str(i), v) for i, v in enumerate(value))
    else:
        if value is None:
            text = ""
        elif isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        out[prefix] = text
        return

    for key, child in items:
        path = f"{prefix}{SECTION_SEPARATOR}{key}" if prefix else str(key)
        _flatten(child, path, out)


class Configuration:
    """A merged key/value view over ordered configuration sources.

    Keys are case-insensitive. Original casing of the highest priority
    source is kept for section listings.
    """

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values: dict[str, tuple[str, str]] = {}
        if values:
            self.update(values)

    def update(self, values: Mapping[str, str]) -> None:
        """Layer ``values`` on top of the current entries."""
        for key, value in values.items():
            self._values[_normalize(key)] = (key, value)

    def get_string(self, key: str, default: str | None = None) -> str | None:
        """Return the raw value stored at ``key``, or ``default``."""
        entry = self._values.get(_normalize(key))
        if entry is None:
            return default
        return entry[1]

    def __getitem__(self, key: str) -> str | None:
        return self.get_string(key)

    def get_section(self, key: str) -> dict[str, str]:
        """Return the direct children of section ``key``.

        Args:
            key: Section name, e.g. ``project``.

        Returns:
            Dictionary mapping child key (original casing) to its value.
        """
        prefix = _normalize(key) + SECTION_SEPARATOR
        section: dict[str, str] = {}
        for normalized, (original, value) in self._values.items():
            if not normalized.startswith(prefix):
                continue
            child = original[len(prefix):]
            if SECTION_SEPARATOR in child:
                continue
            section[child] = value
        return section

    def bind(self, key: str, cls: type[T]) -> T:
        """Bind section ``key`` into the dataclass ``cls``.

        Field names are matched to section keys ignoring case and
        underscores, so ``project_id`` binds ``ProjectId``. Missing
        fields are left empty.
        """
        section = {
            child.replace("_", "").lower(): value
            for child, value in self.get_section(key).items()
        }
        kwargs = {}
        for f in fields(cls):
            kwargs[f.name] = section.get(f.name.replace("_", "").lower(), "")
        return cls(**kwargs)


def load_json_settings(settings_path: str) -> dict[str, str]:
    """Load an optional JSON settings file as flattened entries.

    Args:
        settings_path: Path to the JSON file.

    Returns:
        Flattened settings, or an empty dict if the file does not exist.

    Raises:
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    path = Path(settings_path)
    if not path.is_file():
        logger.debug("Settings file %s not found, skipping", settings_path)
        return {}

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    values: dict[str, str] = {}
    _flatten(raw, "", values)
    return values


def environment_settings(environ: Mapping[str, str]) -> dict[str, str]:
    """Map environment variables to configuration keys.

    ``__`` in a variable name separates sections, so ``project__ProjectId``
    becomes ``project:ProjectId``.
    """
    return {
        name.replace(ENV_SECTION_SEPARATOR, SECTION_SEPARATOR): value
        for name, value in environ.items()
    }


def load_configuration(
    settings_path: str = "appsettings.json",
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, str] | None = None,
) -> Configuration:
    """Build the merged configuration.

    Sources are layered lowest priority first: the JSON settings file,
    environment variables, then command-line overrides.

    Args:
        settings_path: Path to the optional JSON settings file.
        environ: Environment mapping, defaults to ``os.environ``.
        overrides: Values given on the command line.

    Returns:
        The merged Configuration.
    """
    if environ is None:
        environ = os.environ

    config = Configuration(load_json_settings(settings_path))
    config.update(environment_settings(environ))
    if overrides:
        config.update(overrides)
    return config
