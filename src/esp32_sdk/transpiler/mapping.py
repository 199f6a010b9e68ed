"""
Identifier Mapping (Override Table)
===================================

Exact-match overrides for identifiers in the Go source. A key is either a
bare name ("ledPin") or a dotted selector ("digital.Low"); its value is the
text written to the sketch instead ("LOW").

File Format
-----------
A flat JSON object whose keys and values are all strings:

    {
        "digital.Low": "LOW",
        "digital.High": "HIGH",
        "timer.Delay": "delay"
    }

Anything else (invalid JSON, a list at the top level, a number as value)
is rejected with MappingFormatError. A table is never partially loaded.

Lookup Rules
------------
- Whole-string match only. There is no prefix, suffix or case-insensitive
  matching.
- A key that is not present passes through unchanged.

Example Usage
-------------
>>> from esp32_sdk.transpiler.mapping import IdentifierMapping
>>> mapping = IdentifierMapping.from_dict({"digital.Low": "LOW"})
>>> mapping.apply("digital.Low")
'LOW'
>>> mapping.apply("digital.low")
'digital.low'
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union
import json
import logging

from esp32_sdk.transpiler.errors import MappingLoadError, MappingFormatError

logger = logging.getLogger(__name__)


# Rules shipped with the package
DEFAULT_MAPPING_PATH = Path(__file__).parent / "mapping.json"


@dataclass(frozen=True)
class IdentifierMapping:
    """
    Immutable table of identifier overrides.

    Instances are safe to share between translation runs.

    Attributes:
        rules: Read-only view of key -> replacement
        filename: Where the rules came from ("<dict>" for in-memory rules)
    """
    rules: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    filename: str = "<dict>"

    @classmethod
    def from_dict(cls, rules: Mapping[Any, Any], filename: str = "<dict>") -> "IdentifierMapping":
        """
        Build a mapping from an in-memory dictionary.

        Raises:
            MappingFormatError: If any key or value is not a string
        """
        if not isinstance(rules, Mapping):
            raise MappingFormatError(
                filename,
                f"expected a JSON object, got {_json_type_name(rules)}",
            )

        for key, value in rules.items():
            if not isinstance(key, str):
                raise MappingFormatError(filename, f"key {key!r} is not a string")
            if not isinstance(value, str):
                raise MappingFormatError(
                    filename,
                    f"value for '{key}' must be a string, got {_json_type_name(value)}",
                )

        return cls(rules=MappingProxyType(dict(rules)), filename=filename)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "IdentifierMapping":
        """
        Load a mapping from a JSON file.

        Args:
            path: Path to the JSON file

        Returns:
            The loaded mapping

        Raises:
            MappingLoadError: If the file is missing or unreadable
            MappingFormatError: If the file is not a flat object of strings
        """
        path = Path(path)
        filename = str(path)

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise MappingLoadError(
                filename,
                "file not found",
                hint="pass an existing JSON file with --mapping",
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise MappingLoadError(filename, str(e)) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MappingFormatError(
                filename,
                f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
            ) from e

        mapping = cls.from_dict(data, filename)
        logger.debug(f"Loaded {len(mapping)} identifier rules from {filename}")
        return mapping

    def lookup(self, key: str) -> Optional[str]:
        """Return the replacement for key, or None if there is none."""
        return self.rules.get(key)

    def apply(self, key: str) -> str:
        """Return the replacement for key, or key itself."""
        return self.rules.get(key, key)

    def __contains__(self, key: object) -> bool:
        return key in self.rules

    def __len__(self) -> int:
        return len(self.rules)


def _json_type_name(value: Any) -> str:
    """Name a decoded JSON value's type the way JSON spells it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


# Bundled mapping, loaded on first use
_default_mapping: Optional[IdentifierMapping] = None


def default_mapping() -> IdentifierMapping:
    """
    Return the bundled identifier mapping.

    Loaded on first use and shared for the rest of the process.
    """
    global _default_mapping
    if _default_mapping is None:
        _default_mapping = IdentifierMapping.from_file(DEFAULT_MAPPING_PATH)
    return _default_mapping
