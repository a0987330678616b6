"""Common building blocks for certmaker."""

from .config import Mode, Options, default_output_dir, split_alt_names
from .errors import (
    CertmakerError,
    CheckFileNotFoundError,
    KeyExistsError,
    KeyMismatchError,
    PassphraseError,
    ToolkitError,
    ToolkitNotFoundError
)
from .openssl import OpenSSL
from .utils import setup_logging, random_seed_file, restrict_permissions, list_directory

__all__ = [
    'Mode',
    'Options',
    'default_output_dir',
    'split_alt_names',
    'CertmakerError',
    'CheckFileNotFoundError',
    'KeyExistsError',
    'KeyMismatchError',
    'PassphraseError',
    'ToolkitError',
    'ToolkitNotFoundError',
    'OpenSSL',
    'setup_logging',
    'random_seed_file',
    'restrict_permissions',
    'list_directory'
]
