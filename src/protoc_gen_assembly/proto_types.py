"""Constants that are common to protobuf descriptors and the generated Go sources."""

from __future__ import annotations

# Suffixes of interface-definition files that are dropped from generated file names.
PROTO_SOURCE_SUFFIXES = (".proto", ".protodevel")

# Fixed marker that separates generated output from hand-written sources.
ASSEMBLY_SUFFIX = ".assembly"
GO_SUFFIX = ".go"
GENERATED_FILE_SUFFIX = ASSEMBLY_SUFFIX + GO_SUFFIX

TYPE_SUFFIX = "Assembly"
METHOD_SUFFIX = "Method"
STREAM_SUFFIX = "Server"


class InteractionShape:
    """Calling conventions of a gRPC method."""

    UNARY = "unary"
    SERVER_STREAMING = "server_streaming"
    CLIENT_STREAMING = "client_streaming"
    BIDI_STREAMING = "bidi_streaming"
