#!/usr/bin/env python3
"""Read-only inspection of existing CSR and certificate files."""

import logging

from .common.config import Mode, Options
from .common.errors import CheckFileNotFoundError
from .common.openssl import OpenSSL

logger = logging.getLogger(__name__)


def inspect_file(options: Options, toolkit: OpenSSL = None):
    """
    Print a human-readable decode of the file named by the options.

    Args:
        options: Options in CSR_CHECK or CRT_CHECK mode
        toolkit: openssl wrapper (defaults to options.openssl)

    Raises:
        CheckFileNotFoundError: The file does not exist
        ToolkitError: openssl could not parse the file
    """
    toolkit = toolkit or OpenSSL(options.openssl)
    path = options.check_file
    if not path.is_file():
        raise CheckFileNotFoundError(path)

    if options.mode is Mode.CSR_CHECK:
        logger.debug(f"Decoding certificate signing request: {path}")
        toolkit.print_csr(path)
    elif options.mode is Mode.CRT_CHECK:
        logger.debug(f"Decoding certificate: {path}")
        toolkit.print_certificate(path)
    else:
        raise ValueError(f"Not a check mode: {options.mode}")
