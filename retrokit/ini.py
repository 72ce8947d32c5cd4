"""A small INI reader/writer for engine and mod configuration files."""

from __future__ import annotations

import enum
import os
import re
import struct
from dataclasses import dataclass, field
from typing import Optional, Union

_C_WHITESPACE = " \t\n\v\f\r"
_SECTION_RE = re.compile(r"\[([^\[\]]+)")
_KEY_VALUE_RE = re.compile(r"([^;=]+)=(.*)", re.DOTALL)
_VALUE_RE = re.compile(r"[^\t\r\n]+")
_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class ItemType(enum.IntEnum):
    """How an item's value was set, which decides how it is written."""

    STRING = 0
    INT = 1
    FLOAT = 2
    BOOL = 3
    COMMENT = 4


@dataclass
class ConfigItem:
    """One key/value pair (or comment) and the section it belongs to."""

    section: str = ""
    key: str = ""
    value: str = ""
    has_section: bool = False
    type: ItemType = field(default=ItemType.STRING)


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _parse_value(rest: str) -> Optional[str]:
    """Read a value the way ``key= value`` and then ``key=value`` would."""
    match = _VALUE_RE.match(rest.lstrip(_C_WHITESPACE))
    if match:
        return match.group(0)
    match = _VALUE_RE.match(rest)
    if match:
        return match.group(0)
    return None


class IniParser:
    """An ordered collection of configuration items grouped by section."""

    def __init__(self) -> None:
        self.items: list[ConfigItem] = []

    @classmethod
    def parse(cls, text: str) -> "IniParser":
        """Build a parser from INI text."""
        parser = cls()
        section = ""
        has_section = False
        for line in text.split("\n"):
            if line.startswith("#"):
                continue
            section_match = _SECTION_RE.match(line)
            if section_match:
                section = section_match.group(1)
                has_section = True
                continue
            kv_match = _KEY_VALUE_RE.match(line)
            if not kv_match:
                continue
            value = _parse_value(kv_match.group(2))
            if value is None:
                continue
            parser.items.append(
                ConfigItem(
                    section=section if has_section else "",
                    key=kv_match.group(1),
                    value=value,
                    has_section=has_section,
                )
            )
        return parser

    @classmethod
    def load(cls, path: Union[str, os.PathLike]) -> "IniParser":
        """Read and parse an INI file; raises OSError if it cannot be opened."""
        with open(path, "r", encoding="utf-8", newline="") as handle:
            return cls.parse(handle.read())

    def _find(self, section: str, key: str) -> Optional[ConfigItem]:
        return next(
            (item for item in self.items if item.section == section and item.key == key),
            None,
        )

    def get_string(self, section, key, default=None):
        """Return the raw value of ``key`` in ``section``, or ``default``."""
        item = self._find(section, key)
        return item.value if item else default

    def get_integer(self, section, key, default=None):
        """Return the value read as a C integer (leading digits), or ``default``."""
        item = self._find(section, key)
        return _atoi(item.value) if item else default

    def get_float(self, section, key, default=None):
        """Return the value read as a C float (leading number), or ``default``."""
        item = self._find(section, key)
        return _atof(item.value) if item else default

    def get_bool(self, section, key, default=None):
        """Return True for ``true`` (any case) or ``1``, False otherwise, or ``default``."""
        item = self._find(section, key)
        if item is None:
            return default
        return item.value.lower() == "true" or item.value == "1"

    def _set(self, section: str, key: str, value: str, item_type: ItemType) -> None:
        item = self._find(section, key)
        if item is None:
            item = ConfigItem()
            self.items.append(item)
        item.section = section
        item.key = key
        item.value = value
        item.type = item_type

    def set_string(self, section, key, value):
        """Set ``key`` in ``section`` to a string, adding it if missing."""
        self._set(section, key, str(value), ItemType.STRING)

    def set_integer(self, section, key, value):
        """Set ``key`` in ``section`` to an integer."""
        self._set(section, key, str(int(value)), ItemType.INT)

    def set_float(self, section, key, value):
        """Set ``key`` in ``section`` to a single-precision float with six decimals."""
        self._set(section, key, f"{_to_float32(float(value)):.6f}", ItemType.FLOAT)

    def set_bool(self, section, key, value):
        """Set ``key`` in ``section`` to ``true`` or ``false``."""
        self._set(section, key, "true" if value else "false", ItemType.BOOL)

    def set_comment(self, section, key, comment):
        """Store a comment under ``key`` in ``section``; it is written as ``; comment``."""
        self._set(section, key, str(comment), ItemType.COMMENT)

    @staticmethod
    def _format(item: ConfigItem) -> str:
        if item.type == ItemType.COMMENT:
            return f"; {item.value}\n"
        return f"{item.key}={item.value}\n"

    def dumps(self) -> str:
        """Render the items as INI text: sectionless items first, then each section."""
        sections: list[str] = []
        for item in self.items:
            if item.section and item.section not in sections:
                sections.append(item.section)

        parts = [self._format(item) for item in self.items if item.section == ""]
        parts.append("\n")
        for index, section in enumerate(sections):
            parts.append(f"[{section}]\n")
            parts.extend(self._format(item) for item in self.items if item.section == section)
            if index + 1 < len(sections):
                parts.append("\n")
        return "".join(parts)

    def write(self, path: Union[str, os.PathLike]) -> None:
        """Write the INI text to ``path``; raises OSError if it cannot be written."""
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(self.dumps())