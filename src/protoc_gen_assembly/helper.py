"""Helper functionality for resolving names and classifying methods of descriptors."""

from __future__ import annotations

import logging
import posixpath

from google.protobuf.descriptor_pb2 import FileDescriptorProto, MethodDescriptorProto

from protoc_gen_assembly.exceptions import ConfigurationError
from protoc_gen_assembly.proto_types import GENERATED_FILE_SUFFIX, PROTO_SOURCE_SUFFIXES, STREAM_SUFFIX, InteractionShape
from protoc_gen_assembly.writer_dto import ResolvedNaming

logger = logging.getLogger(__name__)


def base_name(name: str) -> str:
    """Returns the last path element of the name, with the last dotted suffix removed.

    E.g. `a/b/c.proto` becomes `c`.

    Args:
        name (str): A slash-separated file name.

    Returns:
        str: The base name.
    """
    name = name.rsplit("/", 1)[-1]

    if "." in name:
        name = name.rsplit(".", 1)[0]

    return name


def replace_proto_suffix(name: str) -> str:
    """Replace a `.proto`/`.protodevel` suffix with the generated file suffix.

    Names without a recognized suffix only get the generated file suffix appended.

    Args:
        name (str): The name of the interface-definition file.

    Returns:
        str: The name of the generated file.
    """
    for suffix in PROTO_SOURCE_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break

    return name + GENERATED_FILE_SUFFIX


def go_package_option(file: FileDescriptorProto) -> tuple[str, str, bool]:
    """Interprets the `go_package` option of a file.

    - Without an option, ("", "", False) is returned.
    - A simple name (no slash) yields ("", name, True); "name;alias" also yields ("", name, True).
    - A slash implies an import path: ("a/b/pkg", "pkg", True).
    - A single semicolon splits import path and package name: "a/b/pkg;name" yields ("a/b/pkg", "name", True).

    Args:
        file (FileDescriptorProto): The file descriptor.

    Raises:
        ConfigurationError: If the option contains more than one semicolon.

    Returns:
        tuple[str, str, bool]: Import path, package name, and whether the option was present.
    """
    option = file.options.go_package
    if not option:
        return "", "", False

    if option.count(";") > 1:
        raise ConfigurationError(f"go_package '{option}' of '{file.name}' contains more than 1 ';'")

    # Without a slash there is no import path, a semicolon-delimited suffix is ignored.
    if "/" not in option:
        return "", option.split(";")[0], True

    if ";" in option:
        import_path, package = option.split(";")
        if not package:
            package = import_path.rsplit("/", 1)[-1]
        return import_path, package, True

    return option, option.rsplit("/", 1)[-1], True


def go_package_name(file: FileDescriptorProto) -> str:
    """The Go package of the generated file.

    Precedence: the `go_package` option, the package clause, the base name of the file.
    """
    _, package, ok = go_package_option(file)
    if ok:
        return package

    if file.package:
        return file.package

    return base_name(file.name)


def go_file_name(file: FileDescriptorProto) -> str:
    """The output name of the generated Go file.

    An import path in the `go_package` option replaces the directory of the file.
    """
    name = replace_proto_suffix(file.name)

    import_path, _, ok = go_package_option(file)
    if ok and import_path:
        return posixpath.join(import_path, posixpath.basename(name))

    return name


def resolve_naming(file: FileDescriptorProto) -> ResolvedNaming:
    """Resolve the output package and file path of a file.

    Args:
        file (FileDescriptorProto): The file descriptor.

    Raises:
        ConfigurationError: If the `go_package` option is invalid.

    Returns:
        ResolvedNaming: The resolved names.
    """
    naming = ResolvedNaming(output_package=go_package_name(file), output_file_path=go_file_name(file))
    logger.debug("Resolved '%s' to package '%s' in '%s'.", file.name, naming.output_package, naming.output_file_path)
    return naming


def interaction_shape(method: MethodDescriptorProto) -> str:
    """Classify a method by its streaming flags.

    Args:
        method (MethodDescriptorProto): The method descriptor.

    Returns:
        str: One of the `InteractionShape` values.
    """
    if method.client_streaming and method.server_streaming:
        return InteractionShape.BIDI_STREAMING

    if method.client_streaming:
        return InteractionShape.CLIENT_STREAMING

    if method.server_streaming:
        return InteractionShape.SERVER_STREAMING

    return InteractionShape.UNARY


def trim_type(type_name: str, package_name: str) -> str:
    """Strip the `.<package>.` qualifier from a type reference.

    Only the exact prefix is removed. Types of other packages keep their qualifier.
    Without a package clause, types live in the root scope and only the leading dot is removed.
    This departs from an exact `.<package>.` match, which would be `..` and never strip anything,
    so that root-scoped types in a file without package clause still render as valid Go.

    Args:
        type_name (str): A fully qualified type reference, e.g. `.helloworld.HelloRequest`.
        package_name (str): The package clause of the file that declares the method.

    Returns:
        str: The trimmed type name.
    """
    if not package_name:
        return type_name.removeprefix(".")

    return type_name.removeprefix(f".{package_name}.")


def stream_type_name(service_name: str, method_name: str) -> str:
    """Name of the stream interface that gRPC generates for a streaming method."""
    return f"{service_name}_{method_name}{STREAM_SUFFIX}"
