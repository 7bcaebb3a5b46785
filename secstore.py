import argparse
import sys

# Import settings from the settings.py file
from settings import settings

from context import FileSuffixes, SecretContext
from errors import SecstoreError
from tree_walker import decrypt_root, encrypt_root, find_regex

__version__ = "1.0.1"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secstore",
        description="Search, decrypt or encrypt a directory of OpenPGP encrypted secrets.",
    )
    parser.add_argument("-s", dest="directory_root", default="", help="Directory")
    parser.add_argument("-g", dest="regex", default="", help="Regex String")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-d", dest="decrypt", action="store_true",
                      help="Decrypt files/*.gpg into the directory root")
    mode.add_argument("-e", dest="encrypt", action="store_true",
                      help="Encrypt *.txt in the directory root for the access list into files/")
    parser.add_argument("-r", dest="recipient", default=None,
                        help="Only decrypt with the private key of this email address")
    parser.add_argument("--secring", default=None, help="Private key ring path")
    parser.add_argument("--pubring", default=None, help="Public key ring path")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args, out=None) -> None:
    """Runs one secstore invocation for already parsed arguments."""
    ctx = SecretContext(
        secure_ring_path=args.secring or settings.SECRING_PATH,
        directory_root=args.directory_root,
        public_ring_path=args.pubring or settings.PUBRING_PATH,
        suffixes=FileSuffixes.from_settings(),
    )

    if args.encrypt:
        ctx.read_public_ring()
        encrypt_root(ctx)
        return

    ctx.read_key_ring()
    ctx.get_password()

    if args.decrypt:
        decrypt_root(ctx, args.recipient)
    else:
        find_regex(ctx, args.regex, out if out is not None else sys.stdout.buffer, args.recipient)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.directory_root:
        parser.print_usage(sys.stderr)
        print("Root directory must be specified", file=sys.stderr)
        return 1

    try:
        run(args)
    except (SecstoreError, OSError) as e:
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
