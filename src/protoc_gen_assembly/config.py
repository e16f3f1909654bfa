"""Generator options, parsed from the plugin parameter string.

`protoc` passes everything given with `--assembly_opt=` (or after the colon of
`--assembly_out=`) as one comma-separated string on the request. Each `key=value`
pair is translated into a `--key value` argument and parsed with argparse.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from protoc_gen_assembly.exceptions import ConfigurationError

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class GeneratorOptions:
    """Options that control a generation run."""

    gofmt: str = "gofmt"
    log_level: str = "warning"


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parameter parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(
        prog="protoc-gen-assembly", add_help=False, allow_abbrev=False, exit_on_error=False
    )

    parser.add_argument(
        "--gofmt",
        type=str,
        default=GeneratorOptions.gofmt,
        help="path to the gofmt executable used to canonicalize generated sources.",
    )

    parser.add_argument(
        "--log_level",
        "--log-level",
        dest="log_level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=GeneratorOptions.log_level,
        help="level of the diagnostics written to stderr.",
    )

    return parser


def _parameter_to_argv(parameter: str) -> list[str]:
    argv: list[str] = []

    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue

        key, separator, value = item.partition("=")
        if not separator or not key:
            raise ConfigurationError(f"plugin parameter '{item}' is not of the form key=value")

        argv.extend((f"--{key.strip()}", value.strip()))

    return argv


def parse_parameter(parameter: str) -> GeneratorOptions:
    """Parse the plugin parameter string of a request.

    Args:
        parameter (str): The comma-separated `key=value` list, may be empty.

    Raises:
        ConfigurationError: If a key is unknown or a value is invalid.

    Returns:
        GeneratorOptions: The parsed options.
    """
    parser = setup_parser()

    try:
        args, unknown = parser.parse_known_args(_parameter_to_argv(parameter))
    except argparse.ArgumentError as e:
        raise ConfigurationError(f"invalid plugin parameter: {e}") from e

    if unknown:
        raise ConfigurationError(f"unknown plugin parameter(s): {' '.join(unknown)}")

    return GeneratorOptions(gofmt=args.gofmt, log_level=args.log_level)
