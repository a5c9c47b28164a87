"""File-backed bankroll and settings persistence.

Preferences live in a single JSON object file. Money is stored as a string so
a saved bankroll reads back as exactly the same Decimal.
"""

from __future__ import annotations

import json
from dataclasses import fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import BANKROLL_KEY, SETTINGS_KEYS
from .errors import InvalidConfigurationError
from .settings import GameSettings, parse_setting, to_decimal


class PreferencesStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
            fh.write("\n")

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def contains(self, key: str) -> bool:
        return key in self._read()


# Bankroll


def get_saved_bankroll(store: PreferencesStore) -> Optional[Decimal]:
    raw = store.get(BANKROLL_KEY)
    if raw is None:
        return None
    try:
        return to_decimal(raw)
    except InvalidConfigurationError:
        return None


def load_bankroll(store: PreferencesStore, default: Any) -> Decimal:
    saved = get_saved_bankroll(store)
    return saved if saved is not None else to_decimal(default)


def save_bankroll(store: PreferencesStore, amount: Any) -> None:
    store.set(BANKROLL_KEY, str(amount))


def reset_bankroll(store: PreferencesStore) -> None:
    store.remove(BANKROLL_KEY)


def has_saved_bankroll(store: PreferencesStore) -> bool:
    return store.contains(BANKROLL_KEY)


# Settings


def load_settings(store: PreferencesStore) -> GameSettings:
    """Saved settings over the defaults.

    A stored value that does not parse as its field's type is ignored and the
    default is used. Raises InvalidConfigurationError when the parsed values
    do not make a valid table.
    """
    data = store._read()
    values: Dict[str, Any] = {}
    for name, key in SETTINGS_KEYS.items():
        if key not in data:
            continue
        try:
            values[name] = parse_setting(name, data[key])
        except InvalidConfigurationError:
            continue
    return GameSettings(**values)


def save_settings(store: PreferencesStore, settings: GameSettings) -> None:
    data = store._read()
    for f in fields(settings):
        value = getattr(settings, f.name)
        data[SETTINGS_KEYS[f.name]] = str(value) if isinstance(value, Decimal) else value
    store._write(data)


def reset_settings(store: PreferencesStore) -> None:
    data = store._read()
    for key in SETTINGS_KEYS.values():
        data.pop(key, None)
    store._write(data)
