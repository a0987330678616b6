#!/usr/bin/env python3
"""Exceptions raised by certmaker, each mapped to a process exit code."""


class CertmakerError(Exception):
    """Base class for user-facing certmaker failures."""

    exit_code = 1


class KeyExistsError(CertmakerError):
    """The unlocked private key already exists and --force was not given."""

    def __init__(self, key_path):
        self.key_path = key_path
        super().__init__(
            f"Private key already exists: {key_path} (use -f to overwrite)"
        )


class PassphraseError(CertmakerError):
    """The key passphrase could not be obtained or is unusable."""


class CheckFileNotFoundError(CertmakerError):
    """The file given to -c/-C does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"File not found: {path}")


class KeyMismatchError(CertmakerError):
    """The unlocked key does not belong to the passphrase-protected key."""


class ToolkitNotFoundError(CertmakerError):
    """The openssl executable is not available."""

    exit_code = 127

    def __init__(self, executable):
        self.executable = executable
        super().__init__(
            f"'{executable}' not found. Install OpenSSL or set CERTMAKER_OPENSSL."
        )


class ToolkitError(CertmakerError):
    """An openssl subcommand exited with a non-zero status."""

    def __init__(self, returncode, cmd):
        self.returncode = returncode
        self.cmd = cmd
        # negative codes mean the subprocess was killed by a signal
        self.exit_code = returncode if returncode > 0 else 128 - returncode
        super().__init__(
            f"Command '{' '.join(cmd)}' failed with exit status {returncode}"
        )
