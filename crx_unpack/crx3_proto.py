"""Protobuf messages of the CRX3 signed header (see proto/crx3.proto)."""
from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory

_PACKAGE = "crx_file"

_OPTIONAL = descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL
_REPEATED = descriptor_pb2.FieldDescriptorProto.LABEL_REPEATED
_BYTES = descriptor_pb2.FieldDescriptorProto.TYPE_BYTES
_MESSAGE = descriptor_pb2.FieldDescriptorProto.TYPE_MESSAGE


def _add_field(message, name, number, label, field_type, type_name=None):
    field = message.field.add()
    field.name = name
    field.number = number
    field.label = label
    field.type = field_type
    if type_name:
        field.type_name = type_name


def _build_file():
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "crx_unpack/crx3.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    proof_type = f".{_PACKAGE}.AsymmetricKeyProof"
    header = file_proto.message_type.add()
    header.name = "CrxFileHeader"
    _add_field(header, "sha256_with_rsa", 2, _REPEATED, _MESSAGE, proof_type)
    _add_field(header, "sha256_with_ecdsa", 3, _REPEATED, _MESSAGE, proof_type)
    _add_field(header, "signed_header_data", 10000, _OPTIONAL, _BYTES)

    proof = file_proto.message_type.add()
    proof.name = "AsymmetricKeyProof"
    _add_field(proof, "public_key", 1, _OPTIONAL, _BYTES)
    _add_field(proof, "signature", 2, _OPTIONAL, _BYTES)

    signed_data = file_proto.message_type.add()
    signed_data.name = "SignedData"
    _add_field(signed_data, "crx_id", 1, _OPTIONAL, _BYTES)
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


CrxFileHeader = _message_class("CrxFileHeader")
AsymmetricKeyProof = _message_class("AsymmetricKeyProof")
SignedData = _message_class("SignedData")
