#!/usr/bin/env python3
"""
Thin wrapper around the openssl command line toolkit.

Each method maps to one openssl subcommand invocation. Commands inherit
stdin/stdout/stderr so interactive ``req`` prompts, text dumps and openssl's
own error messages reach the user unchanged.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from .config import DEFAULT_OPENSSL
from .errors import ToolkitError, ToolkitNotFoundError

# Name of the variable used to hand the passphrase to openssl (-passin/-passout env:)
PASSPHRASE_VAR = "CERTMAKER_OPENSSL_PASS"


class OpenSSL:
    """Runs openssl subcommands and raises ToolkitError on failure."""

    def __init__(self, executable: str = DEFAULT_OPENSSL):
        self.executable = executable
        self._resolved = None
        self.logger = logging.getLogger(__name__)

    def resolve(self) -> str:
        """Return the full path of the executable, looking it up on first use."""
        if self._resolved is None:
            resolved = shutil.which(self.executable)
            if resolved is None:
                raise ToolkitNotFoundError(self.executable)
            self._resolved = resolved
        return self._resolved

    def run(self, args: List[str], passphrase: Optional[str] = None):
        """
        Run ``openssl <args>``.

        Args:
            args: Subcommand and its arguments
            passphrase: Exported to the child as PASSPHRASE_VAR when given

        Raises:
            ToolkitNotFoundError: openssl is not installed
            ToolkitError: openssl exited with a non-zero status
        """
        cmd = [self.resolve()] + [str(arg) for arg in args]
        env: Optional[Dict[str, str]] = None
        if passphrase is not None:
            env = dict(os.environ)
            env[PASSPHRASE_VAR] = passphrase

        self.logger.debug(f"Running command: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, env=env)
        except FileNotFoundError:
            raise ToolkitNotFoundError(self.executable)
        self.logger.debug(f"Return code: {result.returncode}")

        if result.returncode != 0:
            raise ToolkitError(result.returncode, [self.executable] + cmd[1:])
        return result.returncode

    def genrsa(self, out: Path, bits: int, passphrase: str, seed: Optional[Path] = None):
        """Generate an AES-256 encrypted RSA private key."""
        args = ["genrsa", "-aes256", "-passout", f"env:{PASSPHRASE_VAR}", "-out", out]
        if seed is not None:
            args += ["-rand", seed]
        args.append(bits)
        return self.run(args, passphrase=passphrase)

    def unlock_key(self, protected: Path, out: Path, passphrase: str):
        """Write an unencrypted copy of a passphrase-protected RSA key."""
        return self.run(
            ["rsa", "-in", protected, "-passin", f"env:{PASSPHRASE_VAR}", "-out", out],
            passphrase=passphrase,
        )

    def new_csr(self, key: Path, out: Path, subject: Optional[str] = None):
        """Create a CSR; without a subject openssl prompts for the DN fields."""
        args = ["req", "-new", "-sha256", "-key", key, "-out", out]
        if subject:
            args += ["-subj", subject]
        return self.run(args)

    def self_sign_csr(self, csr: Path, key: Path, out: Path, days: int):
        """Turn a CSR into a self-signed certificate using its own key."""
        return self.run([
            "req", "-x509", "-sha256", "-in", csr, "-key", key,
            "-days", days, "-out", out,
        ])

    def sign_csr(self, csr: Path, ca_crt: Path, ca_key: Path, out: Path,
                 days: int, extfile: Optional[Path] = None, serial: int = 1):
        """Issue a certificate for a CSR signed by the given CA."""
        args = [
            "x509", "-req", "-sha256", "-in", csr,
            "-CA", ca_crt, "-CAkey", ca_key,
            "-set_serial", serial, "-days", days, "-out", out,
        ]
        if extfile is not None:
            args += ["-extfile", extfile]
        return self.run(args)

    def print_csr(self, path: Path):
        """Print a human-readable decode of a CSR."""
        return self.run(["req", "-in", path, "-noout", "-text"])

    def print_certificate(self, path: Path):
        """Print a human-readable decode of an X.509 certificate."""
        return self.run(["x509", "-in", path, "-noout", "-text"])
