import hashlib
import logging
from typing import Protocol

from google.protobuf.message import DecodeError

from .crx3_proto import CrxFileHeader, SignedData

logger = logging.getLogger(__name__)

CRX_ID_LENGTH = 16


class IdentityDecoder(Protocol):
    """Derives the signer's public key from a CRX3 signed header region."""

    def derive_identity(self, signed_header: bytes) -> bytes:
        ...


def to_component_id(crx_id: bytes) -> str:
    # each hex digit 0-f becomes a letter a-p
    return ''.join(chr(ord('a') + int(c, 16)) for c in crx_id.hex())


def extension_id(public_key: bytes) -> str:
    """Calculate the extension ID Chrome assigns to a public key."""
    crx_id = hashlib.sha256(public_key).digest()[:CRX_ID_LENGTH]
    return to_component_id(crx_id)


class Crx3IdentityDecoder:
    """Reads the public key out of a ``CrxFileHeader`` protobuf message.

    A header can carry several key proofs. The signer is the one whose
    SHA-256 prefix equals the ``crx_id`` stored in ``signed_header_data``.
    Every failure is reported as an empty identity, never raised.
    """

    def derive_identity(self, signed_header: bytes) -> bytes:
        header = CrxFileHeader()
        try:
            header.ParseFromString(signed_header)
        except DecodeError as e:
            logger.debug("proto: cannot parse CRX3 header: %s", e)
            return b""

        public_keys = [proof.public_key
                       for proof in list(header.sha256_with_rsa) + list(header.sha256_with_ecdsa)
                       if proof.public_key]
        if not public_keys:
            logger.debug("proto: Did not find any public key")
            return b""

        crx_id = self.read_crx_id(header.signed_header_data)
        if not crx_id:
            logger.debug("proto: Did not find crx_id")
            return b""

        for pub_key in public_keys:
            if hashlib.sha256(pub_key).digest()[:CRX_ID_LENGTH] == crx_id:
                return bytes(pub_key)
        logger.debug("proto: None of the public keys matched with crx_id %s", crx_id.hex())
        return b""

    @staticmethod
    def read_crx_id(signed_header_data: bytes) -> bytes:
        signed_data = SignedData()
        try:
            signed_data.ParseFromString(signed_header_data)
        except DecodeError as e:
            logger.debug("proto: cannot parse signed_header_data: %s", e)
            return b""
        if len(signed_data.crx_id) != CRX_ID_LENGTH:
            if signed_data.crx_id:
                logger.debug("proto: Unexpected crx_id length %d", len(signed_data.crx_id))
            return b""
        return bytes(signed_data.crx_id)
