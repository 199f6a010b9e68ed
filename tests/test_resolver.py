"""
Name Resolution Tests
=====================

Tests for the controller registry, the import resolver and the
identifier/selector resolver.
"""

import pytest

from esp32_sdk.errors import SourceLocation
from esp32_sdk.transpiler.ast import ImportSpec
from esp32_sdk.transpiler.controllers import (
    Controller,
    ControllerRegistry,
    DEFAULT_CONTROLLERS,
    DEFAULT_REGISTRY,
)
from esp32_sdk.transpiler.imports import trailing_segment, resolve_includes
from esp32_sdk.transpiler.mapping import IdentifierMapping
from esp32_sdk.transpiler.resolver import IdentifierResolver, lower_first


def make_imports(*paths: str) -> list[ImportSpec]:
    """Build import specs for the given paths."""
    return [
        ImportSpec(location=SourceLocation("test.go", i + 2, 1), path=path)
        for i, path in enumerate(paths)
    ]


# =============================================================================
# Controller Registry
# =============================================================================

class TestControllerRegistry:
    """Tests for facility lookup."""

    def test_default_serial(self):
        """serial is built in and needs no header."""
        controller = DEFAULT_REGISTRY.lookup("serial")
        assert controller.object_name == "Serial"
        assert controller.header is None

    def test_default_wifi(self):
        """wifi needs the WiFi header."""
        controller = DEFAULT_REGISTRY.lookup("wifi")
        assert controller.object_name == "WiFi"
        assert controller.header == "<WiFi.h>"

    def test_case_sensitive(self):
        """Keys match case-sensitively."""
        assert DEFAULT_REGISTRY.lookup("Serial") is None
        assert "WiFi" not in DEFAULT_REGISTRY
        assert "wifi" in DEFAULT_REGISTRY

    def test_unknown_key(self):
        """Unregistered keys give None."""
        assert DEFAULT_REGISTRY.lookup("timer") is None

    def test_keys_in_registration_order(self):
        """keys() and iteration follow registration order."""
        assert DEFAULT_REGISTRY.keys() == ["serial", "wifi"]
        assert list(DEFAULT_REGISTRY) == list(DEFAULT_CONTROLLERS)
        assert len(DEFAULT_REGISTRY) == 2

    def test_duplicate_key_rejected(self):
        """A key can be registered only once."""
        with pytest.raises(ValueError, match="duplicate controller key 'serial'"):
            ControllerRegistry([Controller("serial", "Serial"), Controller("serial", "Serial2")])

    def test_controller_is_frozen(self):
        """Controllers are immutable."""
        with pytest.raises(AttributeError):
            DEFAULT_REGISTRY.lookup("wifi").header = "<Other.h>"


# =============================================================================
# Import Resolver
# =============================================================================

class TestImportResolver:
    """Tests for turning imports into includes."""

    def test_trailing_segment(self):
        """The last path component is the facility key."""
        assert trailing_segment("github.com/andygeiss/esp32/api/controller/wifi") == "wifi"
        assert trailing_segment("wifi") == "wifi"

    def test_header_facility_included(self):
        """An import of a header-requiring facility yields its header."""
        imports = make_imports("github.com/andygeiss/esp32/api/controller/wifi")
        assert resolve_includes(imports, DEFAULT_REGISTRY) == ["<WiFi.h>"]

    def test_builtin_and_unknown_contribute_nothing(self):
        """Built-in and unknown facilities are skipped without error."""
        imports = make_imports(
            "github.com/andygeiss/esp32-mqtt/api/controller",
            "github.com/andygeiss/esp32-mqtt/api/controller/serial",
            "github.com/andygeiss/esp32/api/controller/timer",
        )
        assert resolve_includes(imports, DEFAULT_REGISTRY) == []

    def test_mixed_imports(self):
        """Only the wifi import contributes."""
        imports = make_imports(
            "github.com/andygeiss/esp32-mqtt/api/controller",
            "github.com/andygeiss/esp32-mqtt/api/controller/serial",
            "github.com/andygeiss/esp32/api/controller/timer",
            "github.com/andygeiss/esp32/api/controller/wifi",
        )
        assert resolve_includes(imports, DEFAULT_REGISTRY) == ["<WiFi.h>"]

    def test_headers_deduplicated(self):
        """A header is included once however often it is imported."""
        imports = make_imports("a/wifi", "b/wifi", "c/wifi")
        assert resolve_includes(imports, DEFAULT_REGISTRY) == ["<WiFi.h>"]

    def test_alias_ignored(self):
        """The alias does not change which facility is imported."""
        imports = [
            ImportSpec(location=SourceLocation("test.go", 2, 1), path="x/wifi", alias="net"),
        ]
        assert resolve_includes(imports, DEFAULT_REGISTRY) == ["<WiFi.h>"]

    def test_encounter_order(self):
        """Headers come out in first-seen order."""
        registry = ControllerRegistry([
            Controller("wifi", "WiFi", "<WiFi.h>"),
            Controller("display", "Display", '"Display.h"'),
        ])
        imports = make_imports("a/display", "a/wifi", "b/display")
        assert resolve_includes(imports, registry) == ['"Display.h"', "<WiFi.h>"]

    def test_no_imports(self):
        """No imports, no includes."""
        assert resolve_includes([], DEFAULT_REGISTRY) == []


# =============================================================================
# Identifier and Selector Resolver
# =============================================================================

class TestIdentifierResolver:
    """Tests for override, registry and pass-through resolution."""

    def make_resolver(self, rules=None, registry=DEFAULT_REGISTRY) -> IdentifierResolver:
        return IdentifierResolver(IdentifierMapping.from_dict(rules or {}), registry)

    def test_lower_first(self):
        """Only the first character is lowered."""
        assert lower_first("LocalIP") == "localIP"
        assert lower_first("Begin") == "begin"
        assert lower_first("println") == "println"
        assert lower_first("") == ""

    def test_registry_selector(self):
        """A registered facility becomes its object with a lower-camel member."""
        resolver = self.make_resolver()
        assert resolver.resolve_selector("serial", "Begin") == "Serial.begin"
        assert resolver.resolve_selector("wifi", "LocalIP") == "WiFi.localIP"

    def test_override_beats_registry(self):
        """An exact override wins over the registry."""
        resolver = self.make_resolver({"serial.Begin": "startSerial"})
        assert resolver.resolve_selector("serial", "Begin") == "startSerial"
        assert resolver.resolve_selector("serial", "Println") == "Serial.println"

    def test_override_for_constant(self):
        """A facility constant resolves entirely through its override."""
        resolver = self.make_resolver({"digital.Low": "LOW"})
        assert resolver.resolve_selector("digital", "Low") == "LOW"

    def test_unknown_selector_passes_through(self):
        """User packages keep their casing on both sides."""
        resolver = self.make_resolver()
        assert resolver.resolve_selector("pkg", "Bar") == "pkg.Bar"
        assert resolver.resolve_selector("foo", "Bar") == "foo.Bar"

    def test_bare_identifier_ignores_registry(self):
        """Bare names are never looked up in the registry."""
        resolver = self.make_resolver()
        assert resolver.resolve_identifier("serial") == "serial"
        assert resolver.resolve_identifier("wifi") == "wifi"

    def test_bare_identifier_override(self):
        """Bare names are replaced on an exact override."""
        resolver = self.make_resolver({"ledPin": "LED_BUILTIN"})
        assert resolver.resolve_identifier("ledPin") == "LED_BUILTIN"
        assert resolver.resolve_identifier("ledPins") == "ledPins"

    def test_custom_registry(self):
        """A caller-supplied registry is used for selectors."""
        registry = ControllerRegistry([Controller("display", "Display", "<Display.h>")])
        resolver = self.make_resolver(registry=registry)
        assert resolver.resolve_selector("display", "Clear") == "Display.clear"
        assert resolver.resolve_selector("serial", "Begin") == "serial.Begin"
