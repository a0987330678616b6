#!/usr/bin/env python3
"""
Main entry point for certmaker.

Generates an RSA key (passphrase protected plus an unlocked copy), a CSR
and optionally a self-signed CA with a server certificate carrying Subject
Alternative Names. Can also decode existing CSR and certificate files.
"""

import argparse
import logging
import sys

from . import __version__
from .common.config import DEFAULT_EXPIRE_DAYS, DEFAULT_KEY_BITS, Mode, Options
from .common.errors import CertmakerError
from .common.utils import setup_logging
from .generator import CertificateGenerator
from .inspector import inspect_file

logger = logging.getLogger(__name__)

# Options that only make sense when creating key material
CREATE_ONLY = ('force', 'output_dir', 'key_length', 'passphrase', 'subject',
               'self_signed', 'alt_names', 'days', 'fqdn')


class CertmakerArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: '{value}'")
    return number


def build_parser():
    parser = CertmakerArgumentParser(
        prog='certmaker',
        description="Generate an RSA key, a CSR and optionally a self-signed CA "
                    "and server certificate, or decode existing CSR/CRT files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Key and CSR in ./www.example.org/<today>/
  certmaker -n www.example.org -s "/C=US/O=Example/CN=www.example.org"

  # Local CA plus a server certificate valid for two names
  certmaker -n example.org -S -A "*.example.org,example.com" -D 730

  # Decode existing files
  certmaker -c example.org/2024-01-31/example.org.csr
  certmaker -C example.org/2024-01-31/example.org.crt
        """
    )

    parser.add_argument(
        '-n', '--fqdn',
        help='Fully Qualified Domain Name of the certificate subject (required to create)'
    )
    parser.add_argument(
        '-o', '--output-dir',
        help='Output directory (default: <FQDN>/<YYYY-MM-DD>/)'
    )
    parser.add_argument(
        '-l', '--key-length',
        type=positive_int,
        metavar='KEY_BIT_LENGTH',
        help=f'RSA key length in bits (default: {DEFAULT_KEY_BITS})'
    )
    parser.add_argument(
        '-p', '--passphrase',
        metavar='KEY_PASS_PHRASE',
        help='Passphrase for the private key (prompted for when omitted)'
    )
    parser.add_argument(
        '-s', '--subject',
        help='X.509 subject, e.g. "/C=US/O=Example/CN=example.org"'
    )
    parser.add_argument(
        '-S', '--self-signed',
        action='store_true',
        help='Create a self-signed CA and sign a server certificate with it'
    )
    parser.add_argument(
        '-A', '--alt-names',
        metavar='SUBJECT_ALT_NAMES',
        help='Comma-separated DNS names added to the subjectAltName after the FQDN'
    )
    parser.add_argument(
        '-D', '--days',
        type=positive_int,
        metavar='EXPIRE_DAYS',
        help=f'Certificate validity in days (default: {DEFAULT_EXPIRE_DAYS})'
    )
    parser.add_argument(
        '-f', '--force',
        action='store_true',
        help='Overwrite an existing private key'
    )

    checks = parser.add_mutually_exclusive_group()
    checks.add_argument(
        '-c', '--check-csr',
        metavar='CSR_FILE',
        help='Print the contents of a CSR file'
    )
    checks.add_argument(
        '-C', '--check-crt',
        metavar='CRT_FILE',
        help='Print the contents of a certificate file'
    )

    parser.add_argument(
        '--openssl',
        help='openssl executable to use (default: $CERTMAKER_OPENSSL or openssl)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def parse_arguments(argv=None):
    """Parse and validate command-line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.check_csr or args.check_crt:
        used = [name for name in CREATE_ONLY if getattr(args, name) not in (None, False)]
        if used:
            flags = ', '.join('--' + name.replace('_', '-') for name in used)
            parser.error(f"{flags} cannot be combined with -c/-C")
    elif not args.fqdn:
        parser.error("the following arguments are required: -n/--fqdn")

    if args.key_length is None:
        args.key_length = DEFAULT_KEY_BITS
    if args.days is None:
        args.days = DEFAULT_EXPIRE_DAYS
    return args


def run(options: Options):
    if options.mode is Mode.CREATE:
        CertificateGenerator(options).generate()
    else:
        inspect_file(options)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    options = Options.from_args(args)
    setup_logging(options.verbose)

    try:
        run(options)
        return 0
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except CertmakerError as e:
        logger.error(str(e))
        logger.debug("Traceback:", exc_info=True)
        return e.exit_code
    except OSError as e:
        logger.error(f"{e.strerror}: {e.filename}" if e.filename else str(e))
        logger.debug("Traceback:", exc_info=True)
        return 1
    except Exception as e:
        logger.error(f"Error: {e}")
        logger.debug("Traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
