"""
Import Resolver
===============

Turns Go import declarations into sketch '#include' directives.

Only the last path segment matters. It is looked up in the controller
registry and the facility's header, if it has one, is included once no
matter how many imports name it. Aliases are ignored.

    import "github.com/andygeiss/esp32/api/controller/serial"  -> nothing
    import wifi "github.com/andygeiss/esp32/api/controller/wifi" -> <WiFi.h>
    import "github.com/andygeiss/esp32/api/controller/timer"  -> nothing

Unknown segments never raise.
"""

from typing import Iterable
import logging

from esp32_sdk.transpiler.ast import ImportSpec
from esp32_sdk.transpiler.controllers import ControllerRegistry

logger = logging.getLogger(__name__)


def trailing_segment(path: str) -> str:
    """Return the component after the last '/' of an import path."""
    return path.rsplit("/", 1)[-1]


def resolve_includes(imports: Iterable[ImportSpec], registry: ControllerRegistry) -> list[str]:
    """
    Collect the headers required by a program's imports.

    Args:
        imports: Import specs in source order
        registry: Facilities to look the segments up in

    Returns:
        Header literals such as "<WiFi.h>", each once, in first-seen order
    """
    headers: list[str] = []
    seen: set[str] = set()

    for spec in imports:
        segment = trailing_segment(spec.path)
        controller = registry.lookup(segment)

        if controller is None:
            logger.debug(f"Import '{spec.path}' is not a known controller, skipped")
            continue
        if controller.header is None:
            logger.debug(f"Import '{spec.path}' is built in, no include needed")
            continue
        if controller.header in seen:
            continue

        seen.add(controller.header)
        headers.append(controller.header)

    return headers
