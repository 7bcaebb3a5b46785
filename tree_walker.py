import os
import re
import shutil
import sys
from typing import BinaryIO, Callable, Iterator, List, Optional

from access_list import resolve_access_list
from context import SecretContext
from decrypt_engine import decrypt_file
from encrypt_engine import encrypt_file
from errors import RegexCompileError


def walk_files(top: str, predicate: Callable[[str], bool]) -> Iterator[str]:
    """
    Yields paths of files under top whose name satisfies predicate, in
    lexical order. Raises FileNotFoundError if top is not a directory.
    """
    if not os.path.isdir(top):
        raise FileNotFoundError(f"Directory not found: {top}")

    def _raise(err):
        raise err

    for dirpath, dirnames, filenames in os.walk(top, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            if predicate(name):
                yield os.path.join(dirpath, name)


def compile_regex(pattern: Optional[str]) -> Optional[re.Pattern]:
    """Compiles a search pattern over decoded lines. An empty pattern means no search."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise RegexCompileError(f"Invalid regex {pattern!r}: {e}") from e


def scan_lines(path: str, stream: BinaryIO, regex: re.Pattern, out: BinaryIO) -> bool:
    """
    Writes the matching lines of stream as <lineNumber>:<line>, preceded by
    the path on the first match and followed by a blank line after the last.
    Returns True if anything matched.
    """
    found_match = False
    for line_number, raw in enumerate(stream, start=1):
        line = raw.rstrip(b"\n")
        if line.endswith(b"\r"):
            line = line[:-1]
        # match by character; invalid UTF-8 bytes decode to lone surrogates
        if regex.search(line.decode("utf-8", errors="surrogateescape")) is None:
            continue
        if not found_match:
            out.write(path.encode("utf-8") + b"\n")
            found_match = True
        out.write(str(line_number).encode("ascii") + b":" + line + b"\n")

    if found_match:
        out.write(b"\n")
    return found_match


def find_regex(ctx: SecretContext, pattern: Optional[str], out: BinaryIO, recipient: Optional[str] = None):
    """
    Search mode. Decrypts every encrypted file under <root>/files and writes
    the matching lines to out, or the whole plaintext when no pattern is given.
    """
    regex = compile_regex(pattern)

    for path in walk_files(ctx.files_path, ctx.suffixes.is_encrypted):
        stream = decrypt_file(path, ctx, recipient)
        with stream:
            if regex is not None:
                scan_lines(path, stream, regex, out)
            else:
                shutil.copyfileobj(stream, out)
    out.flush()


def decrypt_root(ctx: SecretContext, recipient: Optional[str] = None) -> List[str]:
    """
    Decrypts every encrypted file under <root>/files into <root>/<base><plaintext suffix>.
    Returns the written paths.
    """
    written = []
    for path in walk_files(ctx.files_path, ctx.suffixes.is_encrypted):
        print(f"Decrypting file: {path}", file=sys.stderr)
        dest_path = os.path.join(ctx.directory_root, ctx.suffixes.to_plaintext_name(path))
        stream = decrypt_file(path, ctx, recipient)
        fd = os.open(dest_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with stream, os.fdopen(fd, "wb") as f:
            shutil.copyfileobj(stream, f)
        print(f"File decrypted to: {dest_path}", file=sys.stderr)
        written.append(dest_path)
    return written


def encrypt_root(ctx: SecretContext) -> List[str]:
    """
    Encrypts every plaintext file under <root> for the access list recipients
    into <root>/files/<base><encrypted suffix>. The access list is resolved
    before any file is written.
    """
    recipients = resolve_access_list(ctx.directory_root, ctx.public_ring)

    # collect first so files written below are not picked up by the walk
    sources = list(walk_files(ctx.directory_root, ctx.suffixes.is_plaintext))
    os.makedirs(ctx.files_path, exist_ok=True)

    written = []
    for path in sources:
        dest_path = os.path.join(ctx.files_path, ctx.suffixes.to_encrypted_name(path))
        encrypt_file(path, recipients, dest_path)
        written.append(dest_path)
    return written
