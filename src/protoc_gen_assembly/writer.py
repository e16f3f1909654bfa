"""Render Go scaffolds for gRPC services.

The template is loaded and parsed once, when this module is imported. A broken
template therefore fails at startup instead of in the middle of a run.
"""

from __future__ import annotations

import logging

import jinja2

from protoc_gen_assembly.proto_types import METHOD_SUFFIX, TYPE_SUFFIX, InteractionShape
from protoc_gen_assembly.writer_dto import GeneratedUnit, ServiceGenerationContext

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "assembly.go.j2"

_environment = jinja2.Environment(
    loader=jinja2.PackageLoader("protoc_gen_assembly", "templates"),
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)
TEMPLATE = _environment.get_template(TEMPLATE_NAME)


class Writer:
    """A class that renders the scaffold of a single service."""

    def __init__(self, context: ServiceGenerationContext):
        """Initialize the writer with a service context.

        Args:
            context (ServiceGenerationContext): The service to render, with its resolved names and methods.
        """
        self.context = context

    @property
    def type_name(self) -> str:
        """Name of the generated composite type, e.g. `GreeterAssembly`."""
        return f"{self.context.service_name}{TYPE_SUFFIX}"

    @property
    def has_unary(self) -> bool:
        """Whether any method takes a call context, which requires the `context` import."""
        return any(method.shape == InteractionShape.UNARY for method in self.context.methods)

    def dumps_go(self) -> str:
        """Render the raw, not yet canonicalized, Go source.

        Returns:
            str: The rendered source.
        """
        source = TEMPLATE.render(
            service_name=self.context.service_name,
            proto_name=self.context.proto_name,
            go_package=self.context.naming.output_package,
            methods=self.context.methods,
            has_unary=self.has_unary,
            shapes=InteractionShape,
            type_suffix=TYPE_SUFFIX,
            method_suffix=METHOD_SUFFIX,
        )
        logger.debug("Rendered %s for '%s':\n%s", self.type_name, self.context.proto_name, source)
        return source

    def generate(self) -> GeneratedUnit:
        """Render the service into a generated unit, named after its file."""
        return GeneratedUnit(file_name=self.context.naming.output_file_path, content=self.dumps_go())
