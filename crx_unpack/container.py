"""CRX container parsing.

A CRX file is a small header followed by an ordinary ZIP archive::

    CRX2: "Cr24" | 2 | pubkey_len | sig_len | pubkey | signature | zip
    CRX3: "Cr24" | 3 | header_len | CrxFileHeader (protobuf)   | zip

All integers are 32-bit little-endian. addons.opera.com builds CRX3 files
by prepending a CRX3 header to a complete CRX2 file, so the bytes after a
CRX3 header may be another container instead of the ZIP data.
"""
import base64
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import (MalformedHeader, NestingTooDeep, NotACrxContainer,
                     TruncatedContainer, TruncatedMagic,
                     UnsupportedVersion)
from .identity import Crx3IdentityDecoder, IdentityDecoder

logger = logging.getLogger(__name__)

MAGIC = b"Cr24"
ZIP_LOCAL_HEADER = b"PK\x03\x04"
ZIP_END_OF_CENTRAL_DIR = b"PK\x05\x06"
DEFAULT_MAX_DEPTH = 8

DEFAULT_IDENTITY_DECODER = Crx3IdentityDecoder()


class FormatVersion(enum.IntEnum):
    V2 = 2
    V3 = 3


@dataclass(frozen=True)
class HeaderDescriptor:
    format_version: FormatVersion
    declared_section_length: int
    zip_payload_offset: int
    signature_length: int = 0


@dataclass(frozen=True)
class CrxHeader:
    descriptor: HeaderDescriptor
    identity: bytes
    nested: bool


def is_maybe_zip_data(data) -> bool:
    """Guess whether a buffer is a ZIP archive rather than a CRX."""
    if bytes(data[:4]) == ZIP_LOCAL_HEADER:
        return True
    # the end of central directory record sits in the last 64 KiB
    tail_start = max(0, len(data) - 0xFFFF - 22)
    return bytes(data[tail_start:]).rfind(ZIP_END_OF_CENTRAL_DIR) != -1


def _read_u32(view, offset, field):
    if offset + 4 > len(view):
        raise MalformedHeader(
            f"Container ends at byte {len(view)} while reading {field} at byte {offset}")
    return int.from_bytes(view[offset:offset + 4], byteorder="little")


def _check_magic(view):
    if len(view) < 4:
        raise TruncatedMagic(f"Container is only {len(view)} bytes long")
    if view[:4] == MAGIC:
        return
    if is_maybe_zip_data(view):
        raise NotACrxContainer("Input is not a CRX file, but possibly a ZIP file")
    raise NotACrxContainer("Invalid header: Does not start with Cr24")


def parse_descriptor(container_bytes) -> HeaderDescriptor:
    """Validate the fixed header prefix and compute where the ZIP data starts."""
    view = memoryview(container_bytes)
    _check_magic(view)

    version = _read_u32(view, 4, "format version")
    if version not in (FormatVersion.V2, FormatVersion.V3):
        raise UnsupportedVersion(version)
    version = FormatVersion(version)

    # public key length for CRX2, protobuf header length for CRX3
    header_extra = _read_u32(view, 8, "header length")
    if version == FormatVersion.V2:
        signature_length = _read_u32(view, 12, "signature length")
        offset = 16 + header_extra + signature_length
    else:
        signature_length = 0
        offset = 12 + header_extra

    if offset > len(view):
        raise TruncatedContainer(offset, len(view))
    return HeaderDescriptor(version, header_extra, offset, signature_length)


def read_header(container_bytes, *, identity_decoder: Optional[IdentityDecoder] = DEFAULT_IDENTITY_DECODER) -> CrxHeader:
    """Parse the header of one container layer, including its identity token.

    ``identity_decoder`` handles CRX3 headers; pass None to skip CRX3 identity
    extraction altogether. A missing identity is reported as ``b""``.
    """
    view = memoryview(container_bytes)
    descriptor = parse_descriptor(view)
    offset = descriptor.zip_payload_offset

    if descriptor.format_version == FormatVersion.V2:
        identity = bytes(view[16:16 + descriptor.declared_section_length])
    elif identity_decoder is not None:
        try:
            identity = identity_decoder.derive_identity(bytes(view[12:offset]))
        except Exception as e:
            logger.debug("Cannot derive CRX3 identity with %r: %s", identity_decoder, e)
            identity = b""
    else:
        identity = b""

    nested = (descriptor.format_version == FormatVersion.V3
              and view[offset:offset + 4] == MAGIC)
    return CrxHeader(descriptor, identity, nested)


def convert(container_bytes, expected_identity: Optional[bytes] = None, *,
            identity_decoder: Optional[IdentityDecoder] = DEFAULT_IDENTITY_DECODER,
            max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Strip the CRX header(s) and return the embedded ZIP archive.

    Nested containers are unwrapped up to ``max_depth`` layers and the
    innermost payload is returned. ``expected_identity`` is the public key
    of an enclosing layer; a different key only produces a warning since
    signatures are never verified.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be zero or more, got {max_depth}")
    view = memoryview(container_bytes)
    for depth in range(max_depth + 1):
        header = read_header(view, identity_decoder=identity_decoder)
        if expected_identity and header.identity and header.identity != expected_identity:
            logger.warning("Nested CRX: pubkey mismatch at depth %d; found %s",
                           depth, base64.b64encode(header.identity).decode())

        offset = header.descriptor.zip_payload_offset
        if not header.nested:
            return bytes(view[offset:])

        logger.info("Nested CRX: Expected zip data, but found another CRX file at byte %d", offset)
        view = view[offset:]
        expected_identity = header.identity
    raise NestingTooDeep(max_depth)
