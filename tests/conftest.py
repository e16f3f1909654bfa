"""Pytest configuration and fixtures for protoc-gen-assembly tests."""

from __future__ import annotations

import stat
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor_pb2 import FileDescriptorProto, MethodDescriptorProto, ServiceDescriptorProto


def _write_script(path: Path, body: str) -> str:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def make_method() -> Callable[..., MethodDescriptorProto]:
    """Factory for method descriptors."""

    def _make(
        name: str = "SayHello",
        input_type: str = ".helloworld.HelloRequest",
        output_type: str = ".helloworld.HelloReply",
        client_streaming: bool = False,
        server_streaming: bool = False,
    ) -> MethodDescriptorProto:
        return MethodDescriptorProto(
            name=name,
            input_type=input_type,
            output_type=output_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
        )

    return _make


@pytest.fixture
def make_file() -> Callable[..., FileDescriptorProto]:
    """Factory for file descriptors.

    Services are given as a mapping of service name to a list of method descriptors.
    """

    def _make(
        name: str = "a/b.proto",
        package: str = "",
        go_package: str = "",
        services: dict[str, Sequence[MethodDescriptorProto]] | None = None,
    ) -> FileDescriptorProto:
        file = FileDescriptorProto(name=name)
        if package:
            file.package = package
        if go_package:
            file.options.go_package = go_package

        for service_name, methods in (services or {}).items():
            file.service.append(ServiceDescriptorProto(name=service_name, method=list(methods)))

        return file

    return _make


@pytest.fixture
def greeter_file(make_file, make_method) -> FileDescriptorProto:
    """`a/b.proto` without package clause or option, with a unary `Greeter.SayHello`."""
    return make_file(
        services={"Greeter": [make_method(input_type=".HelloRequest", output_type=".HelloReply")]},
    )


@pytest.fixture
def make_request() -> Callable[..., plugin_pb2.CodeGeneratorRequest]:
    """Factory for code generator requests."""

    def _make(files: Sequence[FileDescriptorProto], parameter: str = "") -> plugin_pb2.CodeGeneratorRequest:
        request = plugin_pb2.CodeGeneratorRequest(proto_file=list(files))
        request.file_to_generate.extend(file.name for file in files)
        if parameter:
            request.parameter = parameter
        return request

    return _make


@pytest.fixture
def fake_gofmt(tmp_path: Path) -> str:
    """A gofmt stand-in that accepts every input and leaves it unchanged."""
    return _write_script(tmp_path / "fake-gofmt", "exit 0\n")


@pytest.fixture
def marking_gofmt(tmp_path: Path) -> str:
    """A gofmt stand-in that appends a marker line to the file it rewrites."""
    return _write_script(tmp_path / "marking-gofmt", 'printf "// formatted\\n" >> "$2"\n')


@pytest.fixture
def rejecting_gofmt(tmp_path: Path) -> str:
    """A gofmt stand-in that rejects every input like gofmt does for syntax errors."""
    return _write_script(
        tmp_path / "rejecting-gofmt",
        "echo \"$2:3:9: expected ';', found '.'\" >&2\nexit 2\n",
    )
