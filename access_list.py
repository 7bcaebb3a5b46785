import os
from typing import List

import pgpy

from errors import UnknownRecipientError
from keyring_store import resolve_by_identity
from settings import settings


def read_access_list(project_root: str) -> List[str]:
    """
    Reads the recipient identities from the project's access list.
    Blank lines and lines starting with # are skipped.
    """
    access_list_path = os.path.join(project_root, settings.ACCESS_LIST_NAME)
    identities = []
    with open(access_list_path, "r", encoding="utf-8") as f:
        for line in f:
            identity = line.strip()
            if not identity or identity.startswith("#"):
                continue
            identities.append(identity)
    return identities


def resolve_access_list(project_root: str, public_ring: List[pgpy.PGPKey]) -> List[pgpy.PGPKey]:
    """
    Resolves every access list identity against the public ring.
    Raises UnknownRecipientError on the first identity without a key, so a
    partial recipient set is never returned.
    """
    recipients = []
    for identity in read_access_list(project_root):
        entity = resolve_by_identity(public_ring, identity)
        if entity is None:
            raise UnknownRecipientError(identity)
        recipients.append(entity)
    return recipients
