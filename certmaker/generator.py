#!/usr/bin/env python3
"""
Certificate generation procedure.

Creates, in the output directory:
- a passphrase protected RSA key and an unlocked copy of it
- a certificate signing request
- optionally a self-signed CA certificate and a server certificate
  signed by it, carrying Subject Alternative Names
"""

import getpass
import logging
import os

from .common.config import Options, PASSPHRASE_ENV
from .common.errors import KeyExistsError, PassphraseError
from .common.openssl import OpenSSL
from .common.pki import describe_certificate, describe_csr, verify_key_pair
from .common.utils import list_directory, random_seed_file, restrict_permissions


class CertificateGenerator:
    """Runs the key, CSR and certificate generation steps for one FQDN."""

    def __init__(self, options: Options, toolkit: OpenSSL = None):
        """
        Initialize the generator.

        Args:
            options (Options): Frozen configuration for this run
            toolkit (OpenSSL): openssl wrapper (defaults to options.openssl)
        """
        self.options = options
        self.toolkit = toolkit or OpenSSL(options.openssl)
        self.logger = logging.getLogger(__name__)

    def prepare_output_dir(self):
        """Create the output directory and its parents if needed."""
        self.options.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Output directory: {self.options.output_dir}")

    def check_existing_key(self):
        """Refuse to clobber an existing key unless --force was given."""
        key_path = self.options.key_path
        if not key_path.exists():
            return
        if not self.options.force:
            raise KeyExistsError(key_path)
        self.logger.warning(f"Overwriting existing key material in {self.options.output_dir}")

    def obtain_passphrase(self) -> str:
        """
        Return the key passphrase from -p, the environment or a prompt.

        Raises:
            PassphraseError: The prompt failed, the entries differ or the
                passphrase is empty
        """
        passphrase = self.options.passphrase or os.getenv(PASSPHRASE_ENV)
        if passphrase:
            return passphrase

        try:
            passphrase = getpass.getpass(f"Enter pass phrase for {self.options.pass_key_path.name}: ")
            confirm = getpass.getpass("Verifying - Enter pass phrase: ")
        except (EOFError, OSError) as e:
            raise PassphraseError(f"Unable to read pass phrase: {e}")

        if passphrase != confirm:
            raise PassphraseError("Pass phrases do not match")
        if not passphrase:
            raise PassphraseError("Pass phrase must not be empty")
        return passphrase

    def generate_private_key(self, passphrase: str, seed=None):
        """Generate the protected key, then derive the unlocked copy."""
        opts = self.options
        self.logger.info(f"Generating {opts.key_bits}-bit RSA private key")

        self.toolkit.genrsa(opts.pass_key_path, opts.key_bits, passphrase, seed)
        restrict_permissions(opts.pass_key_path)
        self.logger.info(f"Saved: {opts.pass_key_path}")

        self.toolkit.unlock_key(opts.pass_key_path, opts.key_path, passphrase)
        restrict_permissions(opts.key_path)
        self.logger.info(f"Saved: {opts.key_path}")

        verify_key_pair(opts.pass_key_path, opts.key_path, passphrase)

    def generate_csr(self):
        opts = self.options
        self.logger.info(f"Generating CSR for: {opts.fqdn}")
        self.toolkit.new_csr(opts.key_path, opts.csr_path, opts.subject)
        self.logger.info(f"Saved: {opts.csr_path}")
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"CSR details: {describe_csr(opts.csr_path)}")

    def create_ca_certificate(self):
        """Self-sign the CSR with its own key to act as the local CA."""
        opts = self.options
        self.logger.info(f"Creating self-signed CA certificate ({opts.expire_days} days)")
        self.toolkit.self_sign_csr(opts.csr_path, opts.key_path, opts.ca_crt_path, opts.expire_days)
        self.logger.info(f"Saved: {opts.ca_crt_path}")

    def write_san_file(self):
        """Write the openssl extension file carrying subjectAltName."""
        opts = self.options
        line = ", ".join(opts.san_entries)
        with open(opts.san_path, 'w') as f:
            f.write(f"subjectAltName = {line}\n")
        self.logger.info(f"Subject Alternative Names: {line}")

    def sign_server_certificate(self):
        opts = self.options
        self.logger.info(f"Signing server certificate for: {opts.fqdn}")
        self.toolkit.sign_csr(
            opts.csr_path, opts.ca_crt_path, opts.key_path, opts.crt_path,
            opts.expire_days, extfile=opts.san_path, serial=1,
        )
        self.logger.info(f"Saved: {opts.crt_path}")

    def log_certificate_summary(self):
        details = describe_certificate(self.options.crt_path)
        self.logger.info("=" * 60)
        self.logger.info(f"Subject: {details['subject']}")
        self.logger.info(f"Issuer: {details['issuer']}")
        self.logger.info(f"Serial: {details['serial']}")
        self.logger.info(f"Valid until: {details['not_after']:%Y-%m-%d %H:%M:%S} UTC")
        self.logger.info(f"DNS names: {', '.join(details['dns_names'])}")
        self.logger.info("=" * 60)

    def generate(self):
        """
        Run the whole procedure.

        The random seed file only exists inside this call; it is removed
        however the procedure ends.
        """
        opts = self.options
        self.logger.info(f"Starting key generation for: {opts.fqdn}")

        self.prepare_output_dir()
        self.check_existing_key()

        with random_seed_file(opts.output_dir) as seed:
            passphrase = self.obtain_passphrase()
            self.generate_private_key(passphrase, seed)
            self.generate_csr()

            if opts.self_signed:
                self.create_ca_certificate()
                self.write_san_file()
                self.sign_server_certificate()
                self.toolkit.print_csr(opts.csr_path)
                self.toolkit.print_certificate(opts.crt_path)
            else:
                self.toolkit.print_csr(opts.csr_path)

        list_directory(opts.output_dir)

        if opts.self_signed:
            self.log_certificate_summary()
        self.logger.info("Key generation complete!")
