#!/usr/bin/env python3
"""Read-only checks on the keys, CSRs and certificates openssl produced."""

import logging
from pathlib import Path
from typing import Dict, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from .errors import KeyMismatchError

logger = logging.getLogger(__name__)


def _load_private_key(path: Path, passphrase: Optional[str] = None):
    with open(path, 'rb') as f:
        data = f.read()
    password = passphrase.encode() if passphrase is not None else None
    return serialization.load_pem_private_key(data, password, default_backend())


def verify_key_pair(protected: Path, unlocked: Path, passphrase: str):
    """
    Check that the unlocked key is the same key pair as the protected one.

    Args:
        protected: Passphrase-protected PEM key
        unlocked: Unencrypted PEM key derived from it
        passphrase: Passphrase of the protected key

    Raises:
        KeyMismatchError: The keys cannot be loaded or differ
    """
    try:
        protected_key = _load_private_key(protected, passphrase)
        unlocked_key = _load_private_key(unlocked)
    except (ValueError, TypeError) as e:
        raise KeyMismatchError(f"Unable to load private keys for comparison: {e}")

    if protected_key.public_key().public_numbers() != unlocked_key.public_key().public_numbers():
        raise KeyMismatchError(f"{unlocked} does not match {protected}")
    logger.debug(f"Verified {unlocked} matches {protected}")


def _dns_names(extensions) -> list:
    try:
        san = extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    return san.value.get_values_for_type(x509.DNSName)


def describe_certificate(path: Path) -> Dict:
    """
    Summarise a PEM certificate.

    Returns:
        dict: subject, issuer, serial, not_before, not_after and dns_names
    """
    with open(path, 'rb') as f:
        cert = x509.load_pem_x509_certificate(f.read(), default_backend())
    return {
        'subject': cert.subject.rfc4514_string(),
        'issuer': cert.issuer.rfc4514_string(),
        'serial': cert.serial_number,
        'not_before': cert.not_valid_before_utc,
        'not_after': cert.not_valid_after_utc,
        'dns_names': _dns_names(cert.extensions),
    }


def describe_csr(path: Path) -> Dict:
    """Summarise a PEM certificate signing request."""
    with open(path, 'rb') as f:
        csr = x509.load_pem_x509_csr(f.read(), default_backend())
    return {
        'subject': csr.subject.rfc4514_string(),
        'key_size': csr.public_key().key_size,
        'signature_valid': csr.is_signature_valid,
    }
