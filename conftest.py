import pytest

import pgpy
from pgpy.constants import (
    CompressionAlgorithm,
    HashAlgorithm,
    KeyFlags,
    PubKeyAlgorithm,
    SymmetricKeyAlgorithm,
)

from context import SecretContext

ALICE_PASSPHRASE = "alice-passphrase"
BOB_PASSPHRASE = "bob-passphrase"


def _new_protected_key(name: str, email: str, passphrase: str) -> pgpy.PGPKey:
    """Generates a passphrase protected RSA key that can sign and encrypt."""
    key = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048)
    uid = pgpy.PGPUID.new(name, email=email)
    key.add_uid(
        uid,
        usage={KeyFlags.Sign, KeyFlags.EncryptCommunications, KeyFlags.EncryptStorage},
        hashes=[HashAlgorithm.SHA256],
        ciphers=[SymmetricKeyAlgorithm.AES256],
        compression=[CompressionAlgorithm.ZLIB, CompressionAlgorithm.Uncompressed],
    )
    key.protect(passphrase, SymmetricKeyAlgorithm.AES256, HashAlgorithm.SHA256)
    return key


@pytest.fixture(scope="session")
def pgp_keys():
    """Fixture to generate the alice and bob key pairs once per test session."""
    yield {
        "alice": _new_protected_key("Alice", "alice@example.com", ALICE_PASSPHRASE),
        "bob": _new_protected_key("Bob", "bob@example.com", BOB_PASSPHRASE),
    }


@pytest.fixture(scope="session")
def key_rings(tmp_path_factory, pgp_keys):
    """
    Fixture writing an armored private ring and an armored public ring that
    both hold alice followed by bob.
    """
    ring_dir = tmp_path_factory.mktemp("rings")
    secring_path = ring_dir / "secring.asc"
    pubring_path = ring_dir / "pubring.asc"

    with open(secring_path, "w") as f:
        f.write(str(pgp_keys["alice"]) + "\n")
        f.write(str(pgp_keys["bob"]) + "\n")
    with open(pubring_path, "w") as f:
        f.write(str(pgp_keys["alice"].pubkey) + "\n")
        f.write(str(pgp_keys["bob"].pubkey) + "\n")

    yield secring_path, pubring_path


@pytest.fixture
def secret_root(tmp_path):
    """Fixture for an empty project root with an empty files/ directory."""
    root = tmp_path / "secrets"
    (root / "files").mkdir(parents=True)
    yield root


@pytest.fixture
def make_context(key_rings):
    """Fixture returning a factory for loaded SecretContexts over a root."""
    secring_path, pubring_path = key_rings

    def _make(root, password=ALICE_PASSPHRASE):
        ctx = SecretContext(
            secure_ring_path=str(secring_path),
            directory_root=str(root),
            public_ring_path=str(pubring_path),
        )
        ctx.read_key_ring()
        ctx.read_public_ring()
        ctx.password = password
        return ctx

    return _make
