#!/usr/bin/env python3
"""Common utility functions for certmaker."""

import logging
import os
import signal
import stat
import sys
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

SEED_PREFIX = ".rnd-"
SEED_SIZE = 2048
OWNER_ONLY = 0o600

# Signals that would otherwise kill the process without unwinding the stack
CLEANUP_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
        force=True,
    )


def restrict_permissions(path):
    """Make a file readable and writable by its owner only."""
    os.chmod(path, OWNER_ONLY)
    logger.debug(f"Set mode 600 on {path}")


def _raise_system_exit(signum, frame):
    raise SystemExit(128 + signum)


@contextmanager
def random_seed_file(directory):
    """
    Create a temporary random-seed file and guarantee its removal.

    The file is deleted when the block exits normally, on an exception,
    on KeyboardInterrupt, and on SIGTERM/SIGHUP, which are turned into
    SystemExit for the lifetime of the block.

    Args:
        directory: Directory in which the seed file is created

    Yields:
        Path: Location of the seed file
    """
    previous = {}
    seed_path = None
    try:
        # signal handlers can only be installed from the main thread
        if threading.current_thread() is threading.main_thread():
            for signum in CLEANUP_SIGNALS:
                previous[signum] = signal.signal(signum, _raise_system_exit)

        # hold termination signals until the path is recorded for cleanup
        blocked = bool(previous) and hasattr(signal, "pthread_sigmask")
        if blocked:
            signal.pthread_sigmask(signal.SIG_BLOCK, CLEANUP_SIGNALS)
        try:
            fd, name = tempfile.mkstemp(prefix=SEED_PREFIX, dir=str(directory))
            seed_path = Path(name)
            f = os.fdopen(fd, "wb")
        finally:
            if blocked:
                signal.pthread_sigmask(signal.SIG_UNBLOCK, CLEANUP_SIGNALS)
        with f:
            f.write(os.urandom(SEED_SIZE))
        logger.debug(f"Created random seed file: {seed_path}")
        yield seed_path
    finally:
        if seed_path is not None:
            try:
                seed_path.unlink()
                logger.debug(f"Removed random seed file: {seed_path}")
            except FileNotFoundError:
                pass
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def list_directory(directory, out=None):
    """
    Print the contents of a directory in an ``ls -l`` like format.

    Args:
        directory: Directory to list
        out: Stream to write to (defaults to sys.stdout)
    """
    out = out or sys.stdout
    directory = Path(directory)
    print(f"\n{directory}:", file=out)
    for entry in sorted(directory.iterdir()):
        info = entry.stat()
        modified = datetime.fromtimestamp(info.st_mtime).strftime('%Y-%m-%d %H:%M')
        print(
            f"{stat.filemode(info.st_mode)} {info.st_size:>8} {modified} {entry.name}",
            file=out,
        )
