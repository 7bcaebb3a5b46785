import io
import sys
from typing import BinaryIO, List, Optional

import pgpy
from pgpy.errors import PGPDecryptionError, PGPError

# PyCryptodome hash for ciphertext digests in error reports
from Cryptodome.Hash import SHA256

from context import SecretContext
from errors import DecryptionError, InvalidRecipientError
from keyring_store import key_ids, resolve_by_identity


def ciphertext_digest(data: bytes) -> str:
    """Short SHA-256 of a ciphertext, safe to show in error messages."""
    return SHA256.new(data).hexdigest()[:16]


def _plaintext_bytes(decrypted: pgpy.PGPMessage) -> bytes:
    """The literal data bytes exactly as they were encrypted."""
    payload = decrypted.message
    if isinstance(payload, str):
        # pgpy decodes 't' literals as latin-1 and 'u' literals as UTF-8
        literal_format = getattr(decrypted._message, "format", "u")
        return payload.encode("latin-1" if literal_format == "t" else "utf-8")
    return bytes(payload)


def candidate_keys(ctx: SecretContext, recipient: Optional[str] = None) -> List[pgpy.PGPKey]:
    """
    The private keys to try: the whole private ring, or only the entity
    holding the recipient identity when one is given.
    """
    if recipient is None:
        return list(ctx.private_ring)
    entity = resolve_by_identity(ctx.private_ring, recipient)
    if entity is None:
        raise InvalidRecipientError(recipient)
    return [entity]


def decrypt_file(file_path: str, ctx: SecretContext, recipient: Optional[str] = None) -> BinaryIO:
    """
    Decrypts a single armored OpenPGP file with the context's private ring.
    Returns a stream positioned at the start of the plaintext.

    Raises DecryptionError if no candidate key unlocks with the context's
    passphrase, and InvalidRecipientError if the requested recipient is not
    in the private ring.
    """
    candidates = candidate_keys(ctx, recipient)

    with open(file_path, "rb") as f:
        data = f.read()
    digest = ciphertext_digest(data)

    try:
        message = pgpy.PGPMessage.from_blob(data)
    except Exception as e:
        print(f"Error: {file_path} is not a valid OpenPGP message.", file=sys.stderr)
        raise DecryptionError(f"Cannot read message {file_path} (sha256[:16]={digest}): {e}") from e

    if not message.is_encrypted:
        raise DecryptionError(f"Message is not encrypted: {file_path} (sha256[:16]={digest})")

    encrypters = set(message.encrypters)
    matching = [entity for entity in candidates if key_ids(entity) & encrypters]

    unlocker = ctx.unlocker()
    failures = []
    for entity in matching:
        try:
            with unlocker.unlock(entity):
                decrypted = entity.decrypt(message)
        except (DecryptionError, PGPDecryptionError, PGPError, ValueError) as e:
            failures.append(f"{entity.fingerprint.keyid}: {e}")
            continue
        return io.BytesIO(_plaintext_bytes(decrypted))

    print(f"Error: Could not decrypt {file_path}. Password is incorrect or no private key matches.", file=sys.stderr)
    detail = "; ".join(failures) if failures else "no private key for this message"
    raise DecryptionError(
        f"invalid password or no private key for {file_path} (sha256[:16]={digest}): {detail}"
    )
