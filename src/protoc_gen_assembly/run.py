"""Top-level module for scaffold generation.

The pipeline reads the whole request, renders and canonicalizes every service, and
only then writes the response. Any error aborts the run before output is written.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import BinaryIO

from google.protobuf import message
from google.protobuf.compiler import plugin_pb2

from protoc_gen_assembly.config import GeneratorOptions, parse_parameter
from protoc_gen_assembly.exceptions import (
    DecodeError,
    EncodeError,
    FormatterNotFoundError,
    MalformedSourceError,
)
from protoc_gen_assembly.helper import resolve_naming
from protoc_gen_assembly.proto_types import GO_SUFFIX
from protoc_gen_assembly.writer import Writer
from protoc_gen_assembly.writer_dto import GeneratedUnit, ServiceGenerationContext

logger = logging.getLogger(__name__)


def decode_request(stream: BinaryIO) -> plugin_pb2.CodeGeneratorRequest:
    """Read and unmarshal the request.

    Args:
        stream (BinaryIO): The input stream, read to completion.

    Raises:
        OSError: If the stream cannot be read.
        DecodeError: If the bytes are not a CodeGeneratorRequest.

    Returns:
        plugin_pb2.CodeGeneratorRequest: The request.
    """
    data = stream.read()

    try:
        request = plugin_pb2.CodeGeneratorRequest.FromString(data)
    except message.DecodeError as e:
        raise DecodeError(f"unable to parse input as a CodeGeneratorRequest: {e}") from e

    logger.info("Decoded request with %d file(s).", len(request.proto_file))
    return request


def parse_request(request: plugin_pb2.CodeGeneratorRequest) -> list[ServiceGenerationContext]:
    """Wrangle the request into one context per service.

    Names are resolved once per file, for every file, so that an invalid option
    aborts the run even when the file declares no services.

    Args:
        request (plugin_pb2.CodeGeneratorRequest): The decoded request.

    Raises:
        ConfigurationError: If a file has an invalid `go_package` option.

    Returns:
        list[ServiceGenerationContext]: The services of all files, in input order.
    """
    contexts: list[ServiceGenerationContext] = []

    for proto_file in request.proto_file:
        naming = resolve_naming(proto_file)

        if not proto_file.service:
            logger.debug("Skipping '%s', it declares no services.", proto_file.name)
            continue

        for service in proto_file.service:
            contexts.append(ServiceGenerationContext.create(service, proto_file, naming))

    return contexts


def format_outputs(raw_input: str, gofmt: str = "gofmt", file_name: str = "") -> str:
    """Formats raw input using gofmt.

    Args:
        raw_input (str): The unformatted input.
        gofmt (str): The gofmt executable.
        file_name (str): Name of the generated file, used in diagnostics.

    Raises:
        FormatterNotFoundError: If gofmt is missing or not executable.
        MalformedSourceError: If gofmt rejects the input.

    Returns:
        str: The formatted outputs.
    """
    with tempfile.NamedTemporaryFile(mode="w", suffix=GO_SUFFIX, delete=False, encoding="utf-8") as f:
        temp_path = Path(f.name)
        f.write(raw_input)

    try:
        subprocess.run(
            [gofmt, "-w", str(temp_path)],
            capture_output=True,
            text=True,
            check=True,
        )

        return temp_path.read_text(encoding="utf-8")

    except (FileNotFoundError, PermissionError) as e:
        raise FormatterNotFoundError(
            f"gofmt not found or not executable at '{gofmt}', please install Go or pass gofmt=<path>"
        ) from e
    except subprocess.CalledProcessError as e:
        # gofmt refers to the temporary file in its diagnostics.
        explanation = (e.stderr or "").replace(str(temp_path), "<generated>")
        raise MalformedSourceError(raw_input, explanation, file_name) from e

    finally:
        temp_path.unlink(missing_ok=True)


def generate_units(contexts: list[ServiceGenerationContext], options: GeneratorOptions) -> list[GeneratedUnit]:
    """Render and canonicalize every service.

    Args:
        contexts (list[ServiceGenerationContext]): The services to render.
        options (GeneratorOptions): The generator options.

    Raises:
        MalformedSourceError: If a rendered unit fails to canonicalize.

    Returns:
        list[GeneratedUnit]: The canonicalized units, in input order.
    """
    units: list[GeneratedUnit] = []

    for context in contexts:
        unit = Writer(context).generate()
        content = format_outputs(unit.content, options.gofmt, unit.file_name)
        units.append(GeneratedUnit(file_name=unit.file_name, content=content))
        logger.info("Generated '%s' for service '%s'.", unit.file_name, context.service_name)

    return units


def generate_response(units: list[GeneratedUnit]) -> plugin_pb2.CodeGeneratorResponse:
    """Package the generated units into a response."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    for unit in units:
        response.file.add(name=unit.file_name, content=unit.content)

    return response


def encode_response(response: plugin_pb2.CodeGeneratorResponse, stream: BinaryIO) -> None:
    """Marshal the response and write it.

    Args:
        response (plugin_pb2.CodeGeneratorResponse): The response.
        stream (BinaryIO): The output stream.

    Raises:
        EncodeError: If the response cannot be serialized.
        OSError: If the stream cannot be written.
    """
    try:
        data = response.SerializeToString()
    except message.EncodeError as e:
        raise EncodeError(f"unable to marshal response to protobuf: {e}") from e

    stream.write(data)
    stream.flush()

    logger.info("Wrote response with %d file(s).", len(response.file))


def run(stdin: BinaryIO, stdout: BinaryIO) -> None:
    """Run the generator on a single request.

    Args:
        stdin (BinaryIO): The stream that carries the serialized CodeGeneratorRequest.
        stdout (BinaryIO): The stream that receives the serialized CodeGeneratorResponse.
    """
    request = decode_request(stdin)

    options = parse_parameter(request.parameter)
    logging.getLogger("protoc_gen_assembly").setLevel(options.log_level.upper())
    logger.debug("Parsed plugin parameter %r into %s.", request.parameter, options)

    contexts = parse_request(request)
    units = generate_units(contexts, options)

    encode_response(generate_response(units), stdout)
