import argparse
import getpass
import logging
import os
import sys

from sslenv_crypto import (
    DEFAULT_CIPHER,
    SSL,
    SSLError,
    open_file,
    random_string,
    seal_file,
)

# Default RSA key file paths
RSA_default_public_key_path = '~/.ssh/public_rsa.pem'
RSA_default_private_key_path = '~/.ssh/private_rsa.pem'

log = logging.getLogger('sslenv')


def _default_key(path):
    expanded = os.path.expanduser(path)
    return expanded if os.path.exists(expanded) else None


def build_parser():
    parser = argparse.ArgumentParser(description="RSA-AES envelope encryption tool")

    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument('-e', '--encrypt', action='store_true', help='Seal file with the public key (only the private key can open it)')
    action_group.add_argument('-d', '--decrypt', action='store_true', help='Open a file sealed with --encrypt using the private key')
    action_group.add_argument('-s', '--sign', action='store_true', help='Seal file with the private key (any public key holder can open it)')
    action_group.add_argument('-u', '--unseal', action='store_true', help='Open a file sealed with --sign using the public key')
    action_group.add_argument('--random', type=int, metavar='N', help='Print a random string of N characters')

    parser.add_argument('--public-key', help=f'RSA public key file, Default:{RSA_default_public_key_path}')
    parser.add_argument('--private-key', help=f'RSA private key file, Default:{RSA_default_private_key_path}')
    parser.add_argument('--passphrase', nargs='?', const='', help='Private key passphrase (prompted when given without a value)')
    parser.add_argument('-c', '--cipher', default=DEFAULT_CIPHER, help=f'Symmetric cipher, Default:{DEFAULT_CIPHER}')

    parser.add_argument('file', nargs='?', help='File to seal or open')
    parser.add_argument('-o', '--output', help='Output file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    if args.random is not None:
        print(random_string(args.random))
        return 0

    if not (args.encrypt or args.decrypt or args.sign or args.unseal):
        parser.print_help()
        return 0

    if not args.file:
        parser.error("-e, -d, -s or -u requires a file.")

    needs_public = args.encrypt or args.unseal
    if needs_public:
        public_key = args.public_key or _default_key(RSA_default_public_key_path)
        private_key = None
        if not public_key:
            parser.error("--public-key is required (no default key found).")
    else:
        public_key = None
        private_key = args.private_key or _default_key(RSA_default_private_key_path)
        if not private_key:
            parser.error("--private-key is required (no default key found).")

    passphrase = args.passphrase
    if passphrase == '':
        passphrase = getpass.getpass("Enter private key passphrase: ")

    try:
        ssl = SSL(public_key, private_key, passphrase, args.cipher)
        if args.encrypt:
            out = seal_file(ssl, args.file, args.output, direction='public')
            print(f"File '{args.file}' successfully encrypted to '{out}'")
        elif args.sign:
            out = seal_file(ssl, args.file, args.output, direction='private')
            print(f"File '{args.file}' successfully signed to '{out}'")
        elif args.decrypt:
            out = open_file(ssl, args.file, args.output, direction='public')
            print(f"File '{args.file}' successfully decrypted to '{out}'")
        else:
            out = open_file(ssl, args.file, args.output, direction='private')
            print(f"File '{args.file}' successfully unsealed to '{out}'")
    except (SSLError, OSError, ValueError) as e:
        log.debug("Operation failed", exc_info=True)
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
