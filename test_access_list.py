import pytest

from access_list import read_access_list, resolve_access_list
from errors import UnknownRecipientError
from keyring_store import load_public_ring


@pytest.fixture
def public_ring(key_rings):
    _, pubring_path = key_rings
    yield load_public_ring(str(pubring_path))


def test_comments_and_blank_lines_are_skipped(secret_root, public_ring, pgp_keys):
    """Test that '# not a key' and blank lines never trigger UnknownRecipientError."""
    (secret_root / "access-list.conf").write_text(
        "# not a key\n"
        "\n"
        "   bob@example.com  \n"
        "   \n"
        "alice@example.com\n"
    )

    assert read_access_list(str(secret_root)) == ["bob@example.com", "alice@example.com"]
    recipients = resolve_access_list(str(secret_root), public_ring)
    assert [r.fingerprint for r in recipients] == [pgp_keys["bob"].fingerprint, pgp_keys["alice"].fingerprint]


def test_unknown_identity_fails_whole_resolution(secret_root, public_ring):
    (secret_root / "access-list.conf").write_text(
        "alice@example.com\n"
        "mallory@example.com\n"
        "bob@example.com\n"
    )

    with pytest.raises(UnknownRecipientError) as excinfo:
        resolve_access_list(str(secret_root), public_ring)
    assert excinfo.value.identity == "mallory@example.com"


def test_empty_access_list_resolves_to_no_recipients(secret_root, public_ring):
    (secret_root / "access-list.conf").write_text("# nobody yet\n")
    assert resolve_access_list(str(secret_root), public_ring) == []


def test_missing_access_list_raises(secret_root, public_ring):
    with pytest.raises(FileNotFoundError):
        resolve_access_list(str(secret_root), public_ring)
