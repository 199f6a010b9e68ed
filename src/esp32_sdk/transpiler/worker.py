"""
Sketch Transpiler Main Module
=============================

This module drives one translation run from Go source to an Arduino
sketch:

    Source → Lex → Parse → Resolve imports → Generate → Entry points → Sketch

Usage
-----
Command line:
    $ espc blink.go -o blink.ino

Programmatic:
    >>> from esp32_sdk.transpiler import transpile
    >>> print(transpile('package main\\nfunc setup() { serial.Begin(115200) }'))
    void setup() {
        Serial.begin(115200);
    }

Entry Points
------------
The Arduino runtime calls setup() once and loop() forever, so a sketch
must define both. When the source declares no functions at all, empty
loop() and setup() are appended. When it declares at least one, nothing
is added and function names are not inspected.

Failure Handling
----------------
Every failure raises before anything is written: the output stream gets
either the whole sketch in one write or nothing.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union
import io
import logging

from esp32_sdk.transpiler.ast import ProgramNode
from esp32_sdk.transpiler.codegen import CodeGenerator
from esp32_sdk.transpiler.controllers import ControllerRegistry, DEFAULT_REGISTRY
from esp32_sdk.transpiler.errors import TranspilerIOError
from esp32_sdk.transpiler.imports import resolve_includes
from esp32_sdk.transpiler.mapping import IdentifierMapping, default_mapping
from esp32_sdk.transpiler.parser import parse_source
from esp32_sdk.transpiler.resolver import IdentifierResolver

logger = logging.getLogger(__name__)


# =============================================================================
# Translation Orchestrator
# =============================================================================

class Worker:
    """
    Runs one translation from a source stream to an output stream.

    Example:
        with open("blink.go", "rb") as src, open("blink.ino", "w") as dst:
            Worker(src, dst, default_mapping(), filename="blink.go").start()

    Attributes:
        source_stream: Readable stream of Go source (text or UTF-8 bytes)
        output_stream: Writable stream for the sketch. io text streams receive
            str, any other sink UTF-8 bytes
        mapping: Identifier overrides
        registry: Known hardware facilities
        filename: Source name used in error messages
        program: The parsed program, set by start()
    """

    def __init__(
        self,
        source_stream: Union[TextIO, BinaryIO],
        output_stream: Union[TextIO, BinaryIO],
        mapping: IdentifierMapping,
        registry: ControllerRegistry = DEFAULT_REGISTRY,
        filename: str = "<input>",
        indent: str = "    ",
    ):
        self.source_stream = source_stream
        self.output_stream = output_stream
        self.mapping = mapping
        self.registry = registry
        self.filename = filename
        self.indent = indent
        self.program: Optional[ProgramNode] = None

    def start(self) -> str:
        """
        Read, translate and write the sketch.

        Returns:
            The sketch text that was written

        Raises:
            TranspilerIOError: If reading, decoding or writing fails
            SketchSyntaxError: If the source is malformed
            UnsupportedFeatureError: If the source leaves the supported subset
            SketchCompilationError: If several errors were found
        """
        source = self._read()

        self.program = parse_source(source, self.filename)
        logger.debug(
            f"Parsed {self.filename}: {len(self.program.imports)} imports, "
            f"{len(self.program.declarations)} declarations"
        )

        sketch = self.translate(self.program)
        self._write(sketch)
        return sketch

    def translate(self, program: ProgramNode) -> str:
        """
        Translate an already parsed program to sketch text.

        Includes come first, then every top-level declaration in source
        order, then the empty entry points if no function was declared.
        """
        headers = resolve_includes(program.imports, self.registry)
        generator = CodeGenerator(IdentifierResolver(self.mapping, self.registry), self.indent)

        sections = [generator.generate(program, headers)]

        if not program.functions:
            logger.debug("No functions declared, adding empty loop() and setup()")
            sections.append(generator.generate_entry_points())

        return "\n".join(section for section in sections if section)

    def _read(self) -> str:
        """Read the whole source stream as text."""
        try:
            data = self.source_stream.read()
        except (OSError, ValueError) as e:
            raise TranspilerIOError(f"reading {self.filename}", str(e)) from e

        if isinstance(data, (bytes, bytearray)):
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TranspilerIOError(
                    f"reading {self.filename}",
                    f"source is not valid UTF-8 (byte {e.start})",
                ) from e
        return data

    def _write(self, sketch: str) -> None:
        """Write the sketch in a single call."""
        stream = self.output_stream
        try:
            if isinstance(stream, io.TextIOBase):
                stream.write(sketch)
            else:
                stream.write(sketch.encode("utf-8"))
        except (OSError, ValueError, TypeError) as e:
            raise TranspilerIOError("writing sketch", str(e)) from e


# =============================================================================
# Configured Transpiler
# =============================================================================

@dataclass
class TranspilerOptions:
    """
    Transpiler configuration options.

    Attributes:
        mapping_file: JSON identifier mapping (None uses the bundled rules)
        indent: Text for one indentation level in the sketch
        registry: Known hardware facilities
    """
    mapping_file: Optional[str] = None
    indent: str = "    "
    registry: ControllerRegistry = DEFAULT_REGISTRY


@dataclass
class TranspilerResult:
    """
    Result of a translation.

    Attributes:
        filename: Source filename
        sketch: Generated sketch text
        ast: The parsed program
        includes: Include targets written at the top of the sketch
        entry_points_added: True if empty loop() and setup() were appended
    """
    filename: str = ""
    sketch: str = ""
    ast: Optional[ProgramNode] = None
    includes: list[str] = field(default_factory=list)
    entry_points_added: bool = False


class SketchTranspiler:
    """
    Go-to-sketch transpiler configured by TranspilerOptions.

    Example:
        transpiler = SketchTranspiler()
        result = transpiler.transpile_file("blink.go", "blink.ino")
        print(result.sketch)

    Attributes:
        options: Transpiler configuration options
        mapping: The identifier mapping in use
    """

    def __init__(
        self,
        options: Optional[TranspilerOptions] = None,
        mapping: Optional[IdentifierMapping] = None,
    ):
        """
        Initialize the transpiler.

        Args:
            options: Configuration (uses defaults if None)
            mapping: Mapping to use instead of options.mapping_file

        Raises:
            MappingLoadError: If options.mapping_file cannot be loaded
        """
        self.options = options or TranspilerOptions()

        if mapping is not None:
            self.mapping = mapping
        elif self.options.mapping_file:
            self.mapping = IdentifierMapping.from_file(self.options.mapping_file)
        else:
            self.mapping = default_mapping()

    def transpile_source(self, source: str, filename: str = "<input>") -> TranspilerResult:
        """
        Translate Go source text.

        Args:
            source: Go source code
            filename: Source filename for error messages

        Returns:
            TranspilerResult with the sketch and the parsed program
        """
        output = io.StringIO()
        worker = self._worker(io.StringIO(source), output, filename)
        worker.start()
        return self._result(worker, output.getvalue())

    def transpile_file(
        self,
        filepath: Union[str, Path],
        output_path: Union[str, Path, None] = None,
    ) -> TranspilerResult:
        """
        Translate a Go source file, optionally writing the sketch.

        Args:
            filepath: Path to the Go source file
            output_path: Where to write the sketch (not written if None)

        Returns:
            TranspilerResult with the sketch and the parsed program

        Raises:
            FileNotFoundError: If the source file does not exist
            TranspilerIOError: If the source cannot be read or the sketch
                cannot be written
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        output = io.StringIO()
        try:
            with path.open("rb") as source_stream:
                worker = self._worker(source_stream, output, str(path))
                worker.start()
        except IsADirectoryError as e:
            raise TranspilerIOError(f"reading {path}", str(e)) from e

        result = self._result(worker, output.getvalue())

        if output_path is not None:
            try:
                Path(output_path).write_text(result.sketch, encoding="utf-8")
            except OSError as e:
                raise TranspilerIOError(f"writing {output_path}", str(e)) from e
            logger.debug(f"Wrote {len(result.sketch)} bytes to {output_path}")

        return result

    def _worker(self, source_stream, output_stream, filename: str) -> Worker:
        return Worker(
            source_stream,
            output_stream,
            self.mapping,
            registry=self.options.registry,
            filename=filename,
            indent=self.options.indent,
        )

    def _result(self, worker: Worker, sketch: str) -> TranspilerResult:
        program = worker.program
        return TranspilerResult(
            filename=worker.filename,
            sketch=sketch,
            ast=program,
            includes=resolve_includes(program.imports, worker.registry),
            entry_points_added=not program.functions,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def transpile(
    source: str,
    mapping: Optional[IdentifierMapping] = None,
    filename: str = "<input>",
) -> str:
    """
    Translate Go source text to a sketch.

    Args:
        source: Go source code
        mapping: Identifier overrides (bundled rules if None)
        filename: Source filename for error messages

    Returns:
        Sketch text
    """
    return SketchTranspiler(mapping=mapping).transpile_source(source, filename).sketch


def transpile_file(
    path: Union[str, Path],
    output_path: Union[str, Path, None] = None,
    mapping: Optional[IdentifierMapping] = None,
) -> str:
    """
    Translate a Go source file to a sketch.

    Args:
        path: Path to the Go source file
        output_path: Where to write the sketch (not written if None)
        mapping: Identifier overrides (bundled rules if None)

    Returns:
        Sketch text
    """
    return SketchTranspiler(mapping=mapping).transpile_file(path, output_path).sketch
