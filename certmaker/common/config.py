#!/usr/bin/env python3
"""Configuration for a certmaker run."""

import os
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_KEY_BITS = 2048
DEFAULT_EXPIRE_DAYS = 365
DEFAULT_OPENSSL = "openssl"

PASSPHRASE_ENV = "CERTMAKER_KEY_PASSPHRASE"
OPENSSL_ENV = "CERTMAKER_OPENSSL"

SAN_FILENAME = "subjectAltName.txt"


class Mode(Enum):
    CREATE = "create"
    CSR_CHECK = "csr_check"
    CRT_CHECK = "crt_check"


def default_output_dir(fqdn: str, today: Optional[date] = None) -> Path:
    """Return ``<fqdn>/<YYYY-MM-DD>`` relative to the working directory."""
    today = today or date.today()
    return Path(fqdn) / today.isoformat()


def split_alt_names(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated list of DNS names, dropping blanks."""
    if not value:
        return ()
    return tuple(name.strip() for name in value.split(",") if name.strip())


@dataclass(frozen=True)
class Options:
    """
    Immutable settings for one invocation.

    Built once by the option parser and handed to the generator or the
    inspector; nothing mutates it afterwards.
    """

    mode: Mode = Mode.CREATE
    fqdn: Optional[str] = None
    output_dir: Optional[Path] = None
    key_bits: int = DEFAULT_KEY_BITS
    passphrase: Optional[str] = field(default=None, repr=False)
    subject: Optional[str] = None
    self_signed: bool = False
    alt_names: Tuple[str, ...] = ()
    expire_days: int = DEFAULT_EXPIRE_DAYS
    force: bool = False
    check_file: Optional[Path] = None
    verbose: bool = False
    openssl: str = DEFAULT_OPENSSL

    @classmethod
    def from_args(cls, args, today: Optional[date] = None) -> "Options":
        """
        Build options from a parsed argparse namespace.

        Args:
            args: Namespace returned by the certmaker argument parser
            today: Date used for the default output directory (defaults to today)

        Returns:
            Options: The frozen configuration
        """
        openssl = args.openssl or os.getenv(OPENSSL_ENV) or DEFAULT_OPENSSL

        if args.check_csr:
            return cls(mode=Mode.CSR_CHECK, check_file=Path(args.check_csr),
                       verbose=args.verbose, openssl=openssl)
        if args.check_crt:
            return cls(mode=Mode.CRT_CHECK, check_file=Path(args.check_crt),
                       verbose=args.verbose, openssl=openssl)

        if args.output_dir:
            output_dir = Path(args.output_dir)
        else:
            output_dir = default_output_dir(args.fqdn, today)

        return cls(
            mode=Mode.CREATE,
            fqdn=args.fqdn,
            output_dir=output_dir,
            key_bits=args.key_length,
            passphrase=args.passphrase or None,
            subject=args.subject or None,
            self_signed=args.self_signed,
            alt_names=split_alt_names(args.alt_names),
            expire_days=args.days,
            force=args.force,
            verbose=args.verbose,
            openssl=openssl,
        )

    def _artifact(self, suffix: str) -> Path:
        return self.output_dir / f"{self.fqdn}{suffix}"

    @property
    def pass_key_path(self) -> Path:
        return self._artifact("-pass.key")

    @property
    def key_path(self) -> Path:
        return self._artifact(".key")

    @property
    def csr_path(self) -> Path:
        return self._artifact(".csr")

    @property
    def ca_crt_path(self) -> Path:
        return self._artifact(".ca.crt")

    @property
    def crt_path(self) -> Path:
        return self._artifact(".crt")

    @property
    def san_path(self) -> Path:
        return self.output_dir / SAN_FILENAME

    @property
    def san_entries(self) -> Tuple[str, ...]:
        """The FQDN followed by every alternate name, each as ``DNS:<name>``."""
        return tuple(f"DNS:{name}" for name in (self.fqdn,) + self.alt_names)
