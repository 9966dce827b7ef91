"""
Completion settings.

Defaults can be overridden per workspace with a `.hackcomplete.yml` file
and by the client through LSP `initializationOptions`:

    search_limit: 100
    max_match_depth: 32
    symbol_extensions: [".php", ".hack", ".hh"]
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from hackcomplete.completion.globals import DEFAULT_SEARCH_LIMIT
from hackcomplete.completion.ranking import DEFAULT_MAX_MATCH_DEPTH
from hackcomplete.errors import HackCompleteError

SETTINGS_FILE = ".hackcomplete.yml"


class SettingsError(HackCompleteError):
    """The workspace settings file is malformed."""


@dataclass(frozen=True)
class CompletionSettings:
    # Cap on symbol index hits per query
    search_limit: int = DEFAULT_SEARCH_LIMIT

    # How many nested return types to look through for expected-type matches
    max_match_depth: int = DEFAULT_MAX_MATCH_DEPTH

    # Files scanned into the workspace symbol index
    symbol_extensions: tuple[str, ...] = (".php", ".hack", ".hh")

    def merged(self, overrides: dict[str, Any]) -> CompletionSettings:
        """Return a copy with known keys from `overrides` applied."""
        if not isinstance(overrides, dict):
            raise SettingsError(
                f"Settings must be a mapping, got {type(overrides).__name__}"
            )

        known = {f.name for f in fields(self)}
        values: dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in known or value is None:
                continue
            if key == "symbol_extensions":
                if not isinstance(value, (list, tuple)) or not all(
                    isinstance(ext, str) for ext in value
                ):
                    raise SettingsError(f"{key} must be a list of strings")
                value = tuple(value)
            elif isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise SettingsError(f"{key} must be a non-negative integer")
            values[key] = value
        return replace(self, **values)


def load_settings(
    workspace_root: Path | None,
    initialization_options: dict[str, Any] | None = None,
) -> CompletionSettings:
    """
    Load settings for a workspace.

    Args:
        workspace_root: Directory that may hold `.hackcomplete.yml`
        initialization_options: Client options, applied last

    Returns:
        The effective CompletionSettings
    """
    settings = CompletionSettings()

    if workspace_root is not None:
        settings_file = workspace_root / SETTINGS_FILE
        if settings_file.is_file():
            try:
                with open(settings_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise SettingsError(f"Invalid {settings_file}: {e}") from e
            if not isinstance(data, dict):
                raise SettingsError(f"{settings_file} must contain a mapping")
            settings = settings.merged(data)

    if initialization_options:
        settings = settings.merged(initialization_options)

    return settings
