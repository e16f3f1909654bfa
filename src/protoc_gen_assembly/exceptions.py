"""Errors raised while generating assembly scaffolds.

Every error aborts the whole generation run. There is no partial output.
"""

from __future__ import annotations

from typing import override


class GenerationError(Exception):
    """Base class for all errors of the generator."""

    stage = "generate"


class DecodeError(GenerationError):
    """Raised when the request bytes cannot be parsed as a CodeGeneratorRequest."""

    stage = "decode"


class EncodeError(GenerationError):
    """Raised when the CodeGeneratorResponse cannot be serialized."""

    stage = "encode"


class ConfigurationError(GenerationError):
    """Raised for invalid `go_package` options or plugin parameters."""

    stage = "configure"


class FormatterNotFoundError(GenerationError):
    """Raised when the gofmt executable cannot be found."""

    stage = "canonicalize"


class MalformedSourceError(GenerationError):
    """Raised when gofmt rejects the rendered source text.

    Attributes:
        source (str): The rendered text that failed to canonicalize.
        explanation (str): The diagnostic that gofmt emitted.
        file_name (str): The name of the generated file, if known.
    """

    stage = "canonicalize"

    def __init__(self, source: str, explanation: str, file_name: str = ""):
        super().__init__(explanation)
        self.source = source
        self.explanation = explanation
        self.file_name = file_name

    @override
    def __str__(self) -> str:
        # gofmt reports one line per syntax error, the first is enough for a diagnostic.
        first_line = self.explanation.strip().splitlines()[0] if self.explanation.strip() else "unknown error"
        target = f" '{self.file_name}'" if self.file_name else ""
        return f"unable to gofmt generated source{target}: {first_line}"
