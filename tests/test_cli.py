"""Tests for the plugin entry point.

`main` is always called with an explicit empty argv, otherwise it would parse the
arguments of the pytest process.
"""

from __future__ import annotations

import io
import logging
import subprocess
import sys
from unittest.mock import Mock

import pytest
from google.protobuf.compiler import plugin_pb2

from protoc_gen_assembly import __version__
from protoc_gen_assembly.cli import main, setup_parser


def test_success_writes_response(make_request, greeter_file, fake_gofmt):
    request = make_request([greeter_file], parameter=f"gofmt={fake_gofmt}")
    stdout = io.BytesIO()

    assert main([], io.BytesIO(request.SerializeToString()), stdout) == 0

    response = plugin_pb2.CodeGeneratorResponse.FromString(stdout.getvalue())
    assert [f.name for f in response.file] == ["a/b.assembly.go"]


def test_decode_error(caplog):
    stdout = io.BytesIO()

    with caplog.at_level(logging.ERROR):
        assert main([], io.BytesIO(b"\x0a\x05abc"), stdout) == 1

    assert stdout.getvalue() == b""
    assert any(record.getMessage().startswith("decode: ") for record in caplog.records)


def test_configuration_error(make_request, make_file, make_method, caplog):
    file = make_file(go_package="github.com/org/pkg;a;b", services={"Greeter": [make_method()]})
    stdout = io.BytesIO()

    with caplog.at_level(logging.ERROR):
        assert main([], io.BytesIO(make_request([file]).SerializeToString()), stdout) == 1

    assert stdout.getvalue() == b""
    assert any("more than 1 ';'" in record.getMessage() for record in caplog.records)


def test_malformed_source(make_request, greeter_file, rejecting_gofmt, caplog):
    request = make_request([greeter_file], parameter=f"gofmt={rejecting_gofmt}")
    stdout = io.BytesIO()

    with caplog.at_level(logging.ERROR):
        assert main([], io.BytesIO(request.SerializeToString()), stdout) == 1

    assert stdout.getvalue() == b""
    messages = [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR]
    assert messages == [
        "canonicalize: unable to gofmt generated source 'a/b.assembly.go': <generated>:3:9: expected ';', found '.'"
    ]


def test_missing_formatter(make_request, greeter_file, tmp_path, caplog):
    request = make_request([greeter_file], parameter=f"gofmt={tmp_path / 'missing'}")

    with caplog.at_level(logging.ERROR):
        assert main([], io.BytesIO(request.SerializeToString()), io.BytesIO()) == 1

    assert any("gofmt not found" in record.getMessage() for record in caplog.records)


def test_read_error(caplog):
    stdin = Mock(**{"read.side_effect": OSError("stdin closed")})
    stdout = io.BytesIO()

    with caplog.at_level(logging.ERROR):
        assert main([], stdin, stdout) == 1

    assert stdout.getvalue() == b""
    assert [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR] == [
        "io: stdin closed"
    ]


def test_write_error(make_request, greeter_file, fake_gofmt, caplog):
    request = make_request([greeter_file], parameter=f"gofmt={fake_gofmt}")
    stdout = Mock(**{"write.side_effect": OSError("broken pipe")})

    with caplog.at_level(logging.ERROR):
        assert main([], io.BytesIO(request.SerializeToString()), stdout) == 1

    stdout.write.assert_called_once()
    assert [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR] == [
        "io: broken pipe"
    ]


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        setup_parser().parse_args(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_module_entry_point(make_request, greeter_file, fake_gofmt):
    request = make_request([greeter_file], parameter=f"gofmt={fake_gofmt}")

    result = subprocess.run(
        [sys.executable, "-m", "protoc_gen_assembly"],
        input=request.SerializeToString(),
        capture_output=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr.decode()
    response = plugin_pb2.CodeGeneratorResponse.FromString(result.stdout)
    assert "type GreeterAssembly struct" in response.file[0].content


def test_module_entry_point_failure():
    result = subprocess.run(
        [sys.executable, "-m", "protoc_gen_assembly"],
        input=b"\x0a\x05abc",
        capture_output=True,
        check=False,
    )

    assert result.returncode == 1
    assert result.stdout == b""
    lines = result.stderr.decode().strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("protoc_gen_assembly.cli: ERROR: decode: unable to parse input")
