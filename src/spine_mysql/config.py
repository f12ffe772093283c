"""
Key-value configuration used by every spine-mysql component.

:class:`ConfigParams` is a flat, ordered ``dict[str, Any]`` whose keys use
dots to express sections (``connection.host``, ``options.max_page_size``).
Components receive one in ``configure()`` and pick out the keys and
sections they care about.

Examples:
    >>> config = ConfigParams.from_tuples(
    ...     "connection.host", "localhost",
    ...     "connection.port", 3306,
    ...     "options.max_page_size", 50,
    ... )
    >>> dict(config.get_section("connection"))
    {'host': 'localhost', 'port': 3306}
    >>> config.get_as_integer_with_default("options.max_page_size", 100)
    50

Tags:
    configuration, config-params, sections, spine-mysql
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

_TRUE_STRINGS = {"1", "true", "yes", "on", "t", "y"}
_FALSE_STRINGS = {"0", "false", "no", "off", "f", "n"}


def to_nullable_string(value: Any) -> str | None:
    """Render a config value as a string; booleans become ``true``/``false``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_nullable_integer(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except ValueError:
        return None


def to_nullable_boolean(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


def _flatten(target: dict[str, Any], prefix: str, value: Mapping[str, Any]) -> None:
    for key, item in value.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(item, Mapping):
            _flatten(target, full_key, item)
        else:
            target[full_key] = item


class ConfigParams(dict):
    """Flat configuration map with dotted section keys."""

    def __init__(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None):
        super().__init__()
        if values is not None:
            items = values.items() if isinstance(values, Mapping) else values
            for key, value in items:
                dict.__setitem__(self, str(key), value)

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_tuples(cls, *tuples: Any) -> ConfigParams:
        """Create config from alternating ``key, value`` arguments."""
        if len(tuples) % 2 != 0:
            raise ValueError("from_tuples expects an even number of arguments")
        return cls(zip(tuples[0::2], tuples[1::2], strict=True))

    @classmethod
    def from_string(cls, line: str | None) -> ConfigParams:
        """Parse ``key1=value1;key2=value2`` strings."""
        values: dict[str, Any] = {}
        for token in (line or "").split(";"):
            if not token:
                continue
            key, sep, value = token.partition("=")
            values[key.strip()] = value.strip() if sep else None
        return cls(values)

    @classmethod
    def from_value(cls, value: Mapping[str, Any] | None) -> ConfigParams:
        """Flatten a nested mapping into dotted keys."""
        values: dict[str, Any] = {}
        _flatten(values, "", value or {})
        return cls(values)

    @classmethod
    def merge_configs(cls, *configs: Mapping[str, Any] | None) -> ConfigParams:
        """Merge configs left to right; later values win."""
        values: dict[str, Any] = {}
        for config in configs:
            if config:
                values.update(config)
        return cls(values)

    # -- Sections -----------------------------------------------------------

    def get_section_names(self) -> list[str]:
        names: list[str] = []
        for key in self.keys():
            name = key.split(".", 1)[0] if "." in key else None
            if name and name not in names:
                names.append(name)
        return names

    def get_section(self, section: str) -> ConfigParams:
        """Return the keys under ``section.`` with the prefix removed."""
        prefix = section + "."
        return ConfigParams(
            (key[len(prefix):], value) for key, value in self.items() if key.startswith(prefix)
        )

    def add_section(self, section: str, values: Mapping[str, Any]) -> None:
        prefix = section + "." if section else ""
        for key, value in values.items():
            self[prefix + key] = value

    def set_defaults(self, defaults: Mapping[str, Any]) -> ConfigParams:
        """Return a copy with ``defaults`` filled in for missing keys."""
        return ConfigParams.merge_configs(defaults, self)

    def override(self, other: Mapping[str, Any] | None) -> ConfigParams:
        """Return a copy with ``other`` applied on top."""
        return ConfigParams.merge_configs(self, other)

    def get_keys(self) -> list[str]:
        return list(self.keys())

    # -- Typed getters ------------------------------------------------------

    def get_as_object(self, key: str) -> Any:
        return self.get(key)

    def get_as_nullable_string(self, key: str) -> str | None:
        return to_nullable_string(self.get(key))

    def get_as_string(self, key: str, default: str = "") -> str:
        value = self.get_as_nullable_string(key)
        return value if value is not None else default

    def get_as_nullable_integer(self, key: str) -> int | None:
        return to_nullable_integer(self.get(key))

    def get_as_integer_with_default(self, key: str, default: int) -> int:
        value = self.get_as_nullable_integer(key)
        return value if value is not None else default

    def get_as_nullable_boolean(self, key: str) -> bool | None:
        return to_nullable_boolean(self.get(key))

    def get_as_boolean_with_default(self, key: str, default: bool) -> bool:
        value = self.get_as_nullable_boolean(key)
        return value if value is not None else default

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"


__all__ = [
    "ConfigParams",
    "to_nullable_string",
    "to_nullable_integer",
    "to_nullable_boolean",
]
