"""Runtime compilation of Protobuf schema definitions."""

import importlib.resources
import tempfile
from pathlib import Path

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message
from grpc_tools import protoc

from .exceptions import SchemaParseError

PROTO_FILE_NAME = "schema.proto"


class ProtobufSchema:
    """A ``.proto`` definition compiled into a private descriptor pool.

    The first top-level message of the file is the record type. Message
    types are indexed by their position among all messages of the file
    (nested ones included) ordered by full name, which is the index written
    in front of Glue Protobuf payloads.
    """

    def __init__(self, definition: str):
        self.definition = definition
        self._pool = descriptor_pool.DescriptorPool()
        file_proto = None
        for proto in _compile(definition).file:
            self._pool.Add(proto)
            if proto.name == PROTO_FILE_NAME:
                file_proto = proto

        if file_proto is None or not file_proto.message_type:
            raise SchemaParseError("Protobuf schema does not define any message")

        prefix = f"{file_proto.package}." if file_proto.package else ""
        self.root = self._pool.FindMessageTypeByName(prefix + file_proto.message_type[0].name)
        self.message_types = ordered_messages(self.root.file)

    def new_message(self, descriptor: Descriptor | None = None) -> Message:
        return message_factory.GetMessageClass(descriptor or self.root)()

    def descriptor_at(self, index: int) -> Descriptor:
        if not 0 <= index < len(self.message_types):
            raise SchemaParseError(f"No message with index {index} in schema")
        return self.message_types[index]


def ordered_messages(file_descriptor) -> list[Descriptor]:
    """All messages of a file, nested ones included, ordered by full name."""
    found = []
    pending = list(file_descriptor.message_types_by_name.values())
    while pending:
        descriptor = pending.pop()
        found.append(descriptor)
        pending.extend(descriptor.nested_types)
    return sorted(found, key=lambda d: d.full_name)


def message_index(descriptor: Descriptor) -> int:
    for index, candidate in enumerate(ordered_messages(descriptor.file)):
        if candidate.full_name == descriptor.full_name:
            return index
    raise SchemaParseError(f"Message {descriptor.full_name} is not defined by its file")


def _compile(definition: str) -> descriptor_pb2.FileDescriptorSet:
    include_dir = str(importlib.resources.files("grpc_tools") / "_proto")
    with tempfile.TemporaryDirectory() as workdir:
        source = Path(workdir) / PROTO_FILE_NAME
        source.write_text(definition, encoding="utf-8")
        output = Path(workdir) / "schema.desc"
        status = protoc.main([
            "protoc",
            f"--proto_path={workdir}",
            f"--proto_path={include_dir}",
            "--include_imports",
            f"--descriptor_set_out={output}",
            str(source),
        ])
        if status != 0 or not output.exists():
            raise SchemaParseError(f"Failed to compile Protobuf schema (protoc exit code {status})")
        return descriptor_pb2.FileDescriptorSet.FromString(output.read_bytes())
