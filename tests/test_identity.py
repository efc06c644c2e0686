import hashlib

from conftest import build_crx3_header
from crx_unpack.crx3_proto import CrxFileHeader, SignedData
from crx_unpack.identity import Crx3IdentityDecoder, extension_id, to_component_id


class TestExtensionId:

    def test_component_id_alphabet(self):
        assert to_component_id(bytes([0x01, 0x23, 0x45, 0x67, 0x89, 0xab, 0xcd, 0xef])) == "abcdefghijklmnop"

    def test_extension_id_from_key(self, rsa_key):
        digest = hashlib.sha256(rsa_key).hexdigest()[:32]
        expected = "".join(chr(ord("a") + int(c, 16)) for c in digest)
        result = extension_id(rsa_key)
        assert result == expected
        assert len(result) == 32
        assert set(result) <= set("abcdefghijklmnop")


class TestCrx3IdentityDecoder:

    def test_picks_key_matching_crx_id(self, rsa_key):
        other = b"unrelated key"
        header = build_crx3_header(other, rsa_key, signer=rsa_key)
        assert Crx3IdentityDecoder().derive_identity(header) == rsa_key

    def test_ecdsa_proofs_are_considered(self, rsa_key):
        header = CrxFileHeader()
        header.sha256_with_ecdsa.add(public_key=rsa_key, signature=b"sig")
        header.signed_header_data = SignedData(
            crx_id=hashlib.sha256(rsa_key).digest()[:16]).SerializeToString()
        assert Crx3IdentityDecoder().derive_identity(header.SerializeToString()) == rsa_key

    def test_no_matching_key(self, rsa_key):
        header = build_crx3_header(rsa_key, signer=b"someone else")
        assert Crx3IdentityDecoder().derive_identity(header) == b""

    def test_missing_crx_id(self, rsa_key):
        header = build_crx3_header(rsa_key)
        assert Crx3IdentityDecoder().derive_identity(header) == b""

    def test_missing_public_keys(self, rsa_key):
        header = build_crx3_header(signer=rsa_key)
        assert Crx3IdentityDecoder().derive_identity(header) == b""

    def test_empty_header(self):
        assert Crx3IdentityDecoder().derive_identity(b"") == b""

    def test_garbage_header(self):
        assert Crx3IdentityDecoder().derive_identity(b"\xff" * 10) == b""

    def test_wrong_crx_id_length(self):
        data = SignedData(crx_id=b"\x01\x02\x03").SerializeToString()
        assert Crx3IdentityDecoder.read_crx_id(data) == b""
