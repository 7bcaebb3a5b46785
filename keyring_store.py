import re
import sys
from typing import List, Optional, Set

import pgpy

from errors import KeyRingReadError
from paths import expand_path

ARMORED_KEY_BLOCK = re.compile(
    r"-----BEGIN PGP (PUBLIC|PRIVATE) KEY BLOCK-----.*?-----END PGP \1 KEY BLOCK-----",
    re.DOTALL,
)


def _parse_key_blob(blob) -> List[pgpy.PGPKey]:
    # from_blob returns the first key plus an ordered dict of every other key in the blob
    parsed = pgpy.PGPKey.from_blob(blob)
    if isinstance(parsed, tuple):
        first, others = parsed
    else:
        first, others = parsed, {}
    keys = [first]
    keys.extend(k for k in others.values() if k is not first)
    return [k for k in keys if k.is_primary]


def parse_key_ring(data: bytes) -> List[pgpy.PGPKey]:
    """
    Parses a key ring into its primary keys, in file order.

    Accepts a binary ring (concatenated key packets, as written by gpg) or
    text holding one or more ASCII armored key blocks.
    """
    text = data.decode("latin-1")
    blocks = [m.group(0) for m in ARMORED_KEY_BLOCK.finditer(text)]
    if blocks:
        ring = []
        for block in blocks:
            ring.extend(_parse_key_blob(block))
        return ring
    return _parse_key_blob(data)


def read_key_ring(path: str) -> List[pgpy.PGPKey]:
    ring_path = expand_path(path)
    try:
        with open(ring_path, "rb") as ring_file:
            data = ring_file.read()
    except OSError as e:
        print(f"Error: Key ring not readable: {ring_path}", file=sys.stderr)
        raise KeyRingReadError(f"Cannot read key ring {ring_path}: {e}") from e

    if not data.strip():
        raise KeyRingReadError(f"Key ring is empty: {ring_path}")

    try:
        ring = parse_key_ring(data)
    except Exception as e:
        print(f"Error: Malformed key ring {ring_path}: {e}", file=sys.stderr)
        raise KeyRingReadError(f"Malformed key ring {ring_path}: {e}") from e

    if not ring:
        raise KeyRingReadError(f"No keys found in key ring: {ring_path}")
    return ring


def load_private_ring(path: str) -> List[pgpy.PGPKey]:
    return read_key_ring(path)


def load_public_ring(path: str) -> List[pgpy.PGPKey]:
    return read_key_ring(path)


def resolve_by_identity(ring: List[pgpy.PGPKey], identity: str) -> Optional[pgpy.PGPKey]:
    """Returns the first entity holding a user ID with this email, or None."""
    for entity in ring:
        for uid in entity.userids:
            if uid.email == identity:
                return entity
    return None


def key_ids(entity: pgpy.PGPKey) -> Set[str]:
    """Key IDs of the primary key and all of its subkeys."""
    ids = {entity.fingerprint.keyid}
    ids.update(entity.subkeys.keys())
    return ids
