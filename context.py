import abc
import contextlib
import getpass
import os
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

import pgpy
from pgpy.errors import PGPDecryptionError

from errors import DecryptionError
from keyring_store import load_private_ring, load_public_ring
from settings import settings


@dataclass(frozen=True)
class FileSuffixes:
    """The suffix pair telling encrypted files from plaintext files."""
    encrypted: str = ".gpg"
    plaintext: str = ".txt"

    @classmethod
    def from_settings(cls) -> "FileSuffixes":
        return cls(encrypted=settings.ENCRYPTED_SUFFIX, plaintext=settings.PLAINTEXT_SUFFIX)

    def is_encrypted(self, name: str) -> bool:
        return os.path.splitext(name)[1] == self.encrypted

    def is_plaintext(self, name: str) -> bool:
        return os.path.splitext(name)[1] == self.plaintext

    def to_plaintext_name(self, name: str) -> str:
        return os.path.splitext(os.path.basename(name))[0] + self.plaintext

    def to_encrypted_name(self, name: str) -> str:
        return os.path.splitext(os.path.basename(name))[0] + self.encrypted


class KeyUnlocker(abc.ABC):
    """Capability handed to the decrypt engine to unlock one candidate key."""

    @abc.abstractmethod
    def unlock(self, key: pgpy.PGPKey):
        """Returns a context manager holding the key unlocked."""


class PassphraseUnlocker(KeyUnlocker):

    def __init__(self, passphrase: Optional[str]):
        self._passphrase = passphrase

    @contextlib.contextmanager
    def unlock(self, key: pgpy.PGPKey) -> Iterator[pgpy.PGPKey]:
        """
        Unlocks the key for the duration of the with block and locks it again
        afterwards. Raises DecryptionError if the passphrase does not match.
        """
        if not key.is_protected:
            yield key
            return
        if self._passphrase is None:
            raise DecryptionError(f"No passphrase available for key {key.fingerprint.keyid}")
        try:
            with key.unlock(self._passphrase):
                yield key
        except PGPDecryptionError as e:
            raise DecryptionError(f"Invalid password for key {key.fingerprint.keyid}") from e


@dataclass
class SecretContext:
    """
    Per-run state: key ring paths, the directory root and the loaded key
    material. Created once by the caller and passed to every operation.
    """
    secure_ring_path: str
    directory_root: str
    public_ring_path: Optional[str] = None
    suffixes: FileSuffixes = field(default_factory=FileSuffixes)

    private_ring: List[pgpy.PGPKey] = field(default_factory=list)
    public_ring: List[pgpy.PGPKey] = field(default_factory=list)
    password: Optional[str] = field(default=None, repr=False)

    @property
    def files_path(self) -> str:
        return os.path.join(self.directory_root, settings.FILES_DIRECTORY)

    def read_key_ring(self) -> List[pgpy.PGPKey]:
        self.private_ring = load_private_ring(self.secure_ring_path)
        return self.private_ring

    def read_public_ring(self) -> List[pgpy.PGPKey]:
        self.public_ring = load_public_ring(self.public_ring_path or settings.PUBRING_PATH)
        return self.public_ring

    def get_password(self, prompt: Optional[Callable[[str], str]] = None) -> str:
        if settings.PASSPHRASE is not None:
            self.password = settings.PASSPHRASE
        else:
            self.password = (prompt or getpass.getpass)(settings.PROMPT)
        return self.password

    def unlocker(self) -> KeyUnlocker:
        return PassphraseUnlocker(self.password)
