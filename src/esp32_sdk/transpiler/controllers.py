"""
Controller Registry
===================

Known hardware facilities and how the sketch refers to them.

Each Controller ties the package name used in Go source ("serial",
"wifi") to the global object the Arduino core exposes ("Serial", "WiFi")
and to the header that declares it. Facilities built into the core need
no include; their header is None.

Default Controllers
-------------------
| Key    | Object   | Header      |
|--------|----------|-------------|
| serial | Serial   | (built in)  |
| wifi   | WiFi     | <WiFi.h>    |

Keys are compared case-sensitively.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class Controller:
    """
    One hardware facility.

    Attributes:
        key: Package name in Go source, e.g. "wifi"
        object_name: Sketch object name, e.g. "WiFi"
        header: Include target with its brackets, e.g. "<WiFi.h>", or None
    """
    key: str
    object_name: str
    header: Optional[str] = None


class ControllerRegistry:
    """
    Immutable lookup from facility key to Controller.

    Usage:
        registry = ControllerRegistry([Controller("serial", "Serial")])
        registry.lookup("serial").object_name   # 'Serial'
    """

    def __init__(self, controllers: Iterable[Controller]):
        table = {}
        for controller in controllers:
            if controller.key in table:
                raise ValueError(f"duplicate controller key '{controller.key}'")
            table[controller.key] = controller
        self._controllers = MappingProxyType(table)

    def lookup(self, key: str) -> Optional[Controller]:
        """Return the controller registered under key, or None."""
        return self._controllers.get(key)

    def keys(self) -> list[str]:
        """Registered keys in registration order."""
        return list(self._controllers)

    def __contains__(self, key: object) -> bool:
        return key in self._controllers

    def __iter__(self) -> Iterator[Controller]:
        return iter(self._controllers.values())

    def __len__(self) -> int:
        return len(self._controllers)

    def __repr__(self) -> str:
        return f"ControllerRegistry({', '.join(self.keys())})"


DEFAULT_CONTROLLERS: tuple[Controller, ...] = (
    Controller("serial", "Serial"),
    Controller("wifi", "WiFi", "<WiFi.h>"),
)

DEFAULT_REGISTRY = ControllerRegistry(DEFAULT_CONTROLLERS)
