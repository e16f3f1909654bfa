from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.protobuf.descriptor_pb2 import FileDescriptorProto, MethodDescriptorProto, ServiceDescriptorProto


@dataclass(frozen=True)
class ResolvedNaming:
    """Output names of one interface-definition file.

    Attributes:
        output_package: The Go package of the generated files (e.g. "helloworld")
        output_file_path: The path of the generated files (e.g. "a/b.assembly.go")
    """

    output_package: str
    output_file_path: str


@dataclass(frozen=True)
class MethodInfo:
    """A classified RPC method, as used by the template.

    Attributes:
        name: The method name (e.g. "SayHello")
        shape: One of the `InteractionShape` values
        input_type: The raw input type reference (e.g. ".helloworld.HelloRequest")
        output_type: The raw output type reference
        trimmed_input: The input type without the package qualifier (e.g. "HelloRequest")
        trimmed_output: The output type without the package qualifier
        stream_name: The stream handle type (e.g. "Greeter_SayHelloServer")
    """

    name: str
    shape: str
    input_type: str
    output_type: str
    trimmed_input: str
    trimmed_output: str
    stream_name: str

    @classmethod
    def create(cls, method: MethodDescriptorProto, service_name: str, package_name: str) -> MethodInfo:
        """Factory method that classifies a method descriptor.

        Args:
            method: The method descriptor
            service_name: The name of the owning service
            package_name: The package clause of the owning file

        Returns:
            A fully initialized MethodInfo
        """
        from protoc_gen_assembly import helper

        return cls(
            name=method.name,
            shape=helper.interaction_shape(method),
            input_type=method.input_type,
            output_type=method.output_type,
            trimmed_input=helper.trim_type(method.input_type, package_name),
            trimmed_output=helper.trim_type(method.output_type, package_name),
            stream_name=helper.stream_type_name(service_name, method.name),
        )


@dataclass(frozen=True)
class ServiceGenerationContext:
    """Everything the template needs to render one service.

    Attributes:
        service_name: The service name (e.g. "Greeter")
        proto_name: The name of the declaring file (e.g. "a/b.proto")
        package_name: The package clause of the declaring file, may be empty
        naming: The resolved output names of the declaring file
        methods: The classified methods, in declaration order
    """

    service_name: str
    proto_name: str
    package_name: str
    naming: ResolvedNaming
    methods: tuple[MethodInfo, ...]

    @classmethod
    def create(
        cls,
        service: ServiceDescriptorProto,
        file: FileDescriptorProto,
        naming: ResolvedNaming,
    ) -> ServiceGenerationContext:
        """Factory method to create the context of a service, classifying all of its methods."""
        methods = tuple(MethodInfo.create(method, service.name, file.package) for method in service.method)

        return cls(
            service_name=service.name,
            proto_name=file.name,
            package_name=file.package,
            naming=naming,
            methods=methods,
        )


@dataclass(frozen=True)
class GeneratedUnit:
    """A generated file.

    Attributes:
        file_name: The output path of the file
        content: The source text, raw or canonicalized
    """

    file_name: str
    content: str
