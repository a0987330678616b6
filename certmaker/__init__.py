"""
certmaker

Generates TLS key material with the openssl toolkit:
- RSA private key, passphrase protected, plus an unlocked copy
- Certificate Signing Request
- Optional self-signed CA and server certificate with Subject Alternative Names

Existing CSR and certificate files can be decoded with the check modes.
"""

__version__ = "1.0.0"

from .main import main
from .common import Mode, Options, OpenSSL
from .generator import CertificateGenerator
from .inspector import inspect_file

__all__ = [
    'main',
    'Mode',
    'Options',
    'OpenSSL',
    'CertificateGenerator',
    'inspect_file'
]
