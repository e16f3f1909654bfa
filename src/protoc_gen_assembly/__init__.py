"""A protoc plugin that generates pluggable gRPC server scaffolds for Go."""

__version__ = "0.1.0"
