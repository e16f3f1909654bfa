"""Command-line interface of the protoc plugin.

`protoc` starts the plugin without arguments, writes a CodeGeneratorRequest to its
stdin, and reads a CodeGeneratorResponse from its stdout. Diagnostics go to stderr.

Usage:
    protoc --plugin=protoc-gen-assembly --assembly_out=. --assembly_opt=gofmt=/usr/local/go/bin/gofmt foo.proto
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import BinaryIO

from protoc_gen_assembly import __version__
from protoc_gen_assembly.exceptions import GenerationError, MalformedSourceError
from protoc_gen_assembly.run import run

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Generator options are not passed as arguments, but on the request.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(
        prog="protoc-gen-assembly",
        description="protoc plugin that generates pluggable gRPC server scaffolds for Go.",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(
    argv: Sequence[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """Entry point of the plugin.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.
        stdin (BinaryIO | None, optional): Request stream. Defaults to the binary stdin.
        stdout (BinaryIO | None, optional): Response stream. Defaults to the binary stdout.

    Returns:
        int: Error code.
    """
    logging.basicConfig(level=logging.WARNING, format="%(name)s: %(levelname)s: %(message)s")

    parser = setup_parser()
    parser.parse_args(argv)

    try:
        run(stdin or sys.stdin.buffer, stdout or sys.stdout.buffer)

    except MalformedSourceError as e:
        logger.error("%s: %s", e.stage, e)
        logger.debug("Offending source:\n%s", e.source)
        return 1
    except GenerationError as e:
        logger.error("%s: %s", e.stage, e)
        return 1
    except OSError as e:
        logger.error("io: %s", e)
        return 1

    return 0
