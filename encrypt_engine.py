import os
import sys
import tempfile
from typing import List

import pgpy
from pgpy.constants import SymmetricKeyAlgorithm
from pgpy.errors import PGPEncryptionError, PGPError

from errors import EncryptionError

SESSION_CIPHER = SymmetricKeyAlgorithm.AES256


def _public_half(entity: pgpy.PGPKey) -> pgpy.PGPKey:
    return entity if entity.is_public else entity.pubkey


def encrypt_message(plaintext: bytes, recipients: List[pgpy.PGPKey]) -> pgpy.PGPMessage:
    """Encrypts plaintext to every recipient with one shared session key."""
    message = pgpy.PGPMessage.new(plaintext, format="b")
    sessionkey = SESSION_CIPHER.gen_key()
    for entity in recipients:
        message = _public_half(entity).encrypt(message, cipher=SESSION_CIPHER, sessionkey=sessionkey)
    del sessionkey
    return message


def encrypt_file(plaintext_path: str, recipients: List[pgpy.PGPKey], dest_path: str):
    """
    Encrypts a plaintext file for the given recipients and writes the armored
    message to dest_path, creating its directory if needed.
    The output is written to a temporary file and renamed into place.
    """
    if not recipients:
        raise EncryptionError(f"No recipients to encrypt {plaintext_path} for")

    print(f"Encrypting file: {plaintext_path}", file=sys.stderr)
    tmp_path = None
    try:
        with open(plaintext_path, "rb") as f:
            plaintext = f.read()

        armored = str(encrypt_message(plaintext, recipients))

        dest_dir = os.path.dirname(dest_path) or "."
        os.makedirs(dest_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=dest_dir, prefix=".", suffix=".part")
        with os.fdopen(fd, "w", encoding="ascii") as f:
            f.write(armored)
        os.replace(tmp_path, dest_path)
        tmp_path = None

        print(f"File encrypted to: {dest_path}", file=sys.stderr)

    except (OSError, ValueError, PGPError, PGPEncryptionError) as e:
        print(f"Error encrypting {plaintext_path}: {e}", file=sys.stderr)
        raise EncryptionError(f"Cannot encrypt {plaintext_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
