from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .constants import (
    DEFAULT_BULLET,
    DEFAULT_DONE,
    DEFAULT_HALF,
    DEFAULT_HEADLINES,
)
from .models import BulletsConfig, Checkboxes, CheckboxSymbol, Symbols


class ConfigError(ValueError):
    """Raised when a setup override has the wrong shape."""


DEFAULTS: dict[str, Any] = {
    "show_current_line": False,
    "symbols": {
        "headlines": list(DEFAULT_HEADLINES),
        "checkboxes": {
            "half": list(DEFAULT_HALF),
            "done": list(DEFAULT_DONE),
            # Accepted for older configs; unchecked boxes are never replaced.
            "undone": None,
        },
        "bullet": DEFAULT_BULLET,
    },
    "indent": True,
}

# Older option name for show_current_line.
LEGACY_ALIASES = {"concealcursor": "show_current_line"}


def deep_merge(base: dict[str, Any], override: Mapping[str, Any], path: str = "") -> dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        where = f"{path}.{key}" if path else str(key)
        if key not in base:
            raise ConfigError(f"Unknown option '{where}'")
        if isinstance(base[key], dict):
            if not isinstance(value, Mapping):
                raise ConfigError(f"Option '{where}' must be a table, got {type(value).__name__}")
            out[key] = deep_merge(base[key], value, where)
        else:
            out[key] = value
    return out


def _resolve_aliases(overrides: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(overrides)
    for old, new in LEGACY_ALIASES.items():
        if old in out:
            value = out.pop(old)
            out.setdefault(new, value)
    return out


def _resolve_headlines(value: Any) -> tuple[str, ...]:
    if callable(value):
        transform: Callable[[tuple[str, ...]], Sequence[str] | None] = value
        value = transform(DEFAULT_HEADLINES)
        if value is None:
            return DEFAULT_HEADLINES
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigError("Option 'symbols.headlines' must be a list of strings or a function")
    if not all(isinstance(glyph, str) for glyph in value):
        raise ConfigError("Option 'symbols.headlines' must only contain strings")
    return tuple(value)


def _checkbox(name: str, value: Any) -> CheckboxSymbol:
    if isinstance(value, CheckboxSymbol):
        return value
    if isinstance(value, str) or not isinstance(value, Sequence) or len(value) != 2:
        raise ConfigError(f"Option 'symbols.checkboxes.{name}' must be a (glyph, highlight) pair")
    glyph, style = value
    if not isinstance(glyph, str) or not isinstance(style, str):
        raise ConfigError(f"Option 'symbols.checkboxes.{name}' must contain two strings")
    return CheckboxSymbol(glyph, style)


def _flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"Option '{name}' must be a boolean, got {type(value).__name__}")
    return value


def build_config(overrides: Mapping[str, Any] | None = None) -> BulletsConfig:
    """Merge a sparse user override onto the defaults.

    Every call starts again from DEFAULTS, so a second call never sees the
    values of an earlier one. A callable ``symbols.headlines`` is invoked once
    here with the default glyphs and its result stored as plain data.
    """
    if overrides is None:
        overrides = {}
    if not isinstance(overrides, Mapping):
        raise ConfigError(f"Setup options must be a table, got {type(overrides).__name__}")

    merged = deep_merge(copy.deepcopy(DEFAULTS), _resolve_aliases(overrides))
    symbols = merged["symbols"]
    bullet = symbols["bullet"]
    if not isinstance(bullet, str):
        raise ConfigError("Option 'symbols.bullet' must be a string")

    return BulletsConfig(
        symbols=Symbols(
            headlines=_resolve_headlines(symbols["headlines"]),
            checkboxes=Checkboxes(
                done=_checkbox("done", symbols["checkboxes"]["done"]),
                half=_checkbox("half", symbols["checkboxes"]["half"]),
            ),
            bullet=bullet,
        ),
        indent=_flag("indent", merged["indent"]),
        show_current_line=_flag("show_current_line", merged["show_current_line"]),
    )
