"""
Identifier and Selector Resolution
==================================

Decides what a Go name becomes in the sketch.

Resolution Order
----------------
For a selector 'left.right':

1. Exact override for "left.right" in the identifier mapping. The
   replacement is used as is and nothing else is consulted.
2. 'left' is a registered controller: the controller's object name is
   joined with 'right', first letter lower-cased.
       serial.Begin -> Serial.begin
3. Otherwise both parts are kept exactly as written.
       pkg.Bar -> pkg.Bar

A bare identifier only goes through step 1. The registry is never
consulted for it.
"""

import logging

from esp32_sdk.transpiler.controllers import ControllerRegistry
from esp32_sdk.transpiler.mapping import IdentifierMapping

logger = logging.getLogger(__name__)


def lower_first(text: str) -> str:
    """Lower-case only the first character: 'LocalIP' -> 'localIP'."""
    return text[:1].lower() + text[1:]


class IdentifierResolver:
    """
    Applies the identifier mapping and controller registry to names.

    Attributes:
        mapping: Exact-match overrides
        registry: Known hardware facilities
    """

    def __init__(self, mapping: IdentifierMapping, registry: ControllerRegistry):
        self.mapping = mapping
        self.registry = registry

    def resolve_identifier(self, name: str) -> str:
        """Translate a bare identifier."""
        return self.mapping.apply(name)

    def resolve_selector(self, left: str, right: str) -> str:
        """Translate 'left.right' where left is a bare identifier."""
        dotted = f"{left}.{right}"

        override = self.mapping.lookup(dotted)
        if override is not None:
            return override

        controller = self.registry.lookup(left)
        if controller is not None:
            resolved = f"{controller.object_name}.{lower_first(right)}"
            logger.debug(f"Resolved {dotted} to {resolved} via controller '{left}'")
            return resolved

        return dotted
