import hashlib
import io
import struct
import zipfile

import pytest

from crx_unpack.crx3_proto import CrxFileHeader, SignedData


def build_crx2(payload, public_key=b"K" * 20, signature=b"S" * 12):
    return (b"Cr24" + struct.pack("<III", 2, len(public_key), len(signature))
            + public_key + signature + payload)


def build_crx3(payload, header=b""):
    return b"Cr24" + struct.pack("<II", 3, len(header)) + header + payload


def build_crx3_header(*public_keys, signer=None):
    """Serialize a CrxFileHeader whose crx_id names ``signer``."""
    header = CrxFileHeader()
    for key in public_keys:
        proof = header.sha256_with_rsa.add()
        proof.public_key = key
        proof.signature = b"\x00" * 8
    if signer is not None:
        signed_data = SignedData()
        signed_data.crx_id = hashlib.sha256(signer).digest()[:16]
        header.signed_header_data = signed_data.SerializeToString()
    return header.SerializeToString()


@pytest.fixture
def zip_bytes():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("manifest.json", '{"name": "test", "version": "1.0", "manifest_version": 3}')
        archive.writestr("background.js", "console.log('hello');")
    return buffer.getvalue()


@pytest.fixture
def rsa_key():
    return b"0\x82\x01\"0\r\x06\t*\x86H\x86\xf7\r\x01\x01\x01\x05\x00" + bytes(range(64))
