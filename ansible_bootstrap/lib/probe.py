from __future__ import annotations

import logging
from typing import Optional, Sequence

from .host import Host

logger = logging.getLogger(__name__)


def command_exists(host: Host, name: str) -> bool:
    return host.which(name) is not None


def command_output(host: Host, argv: Sequence[str]) -> Optional[str]:
    """Return the stripped combined output of a command, or None if it failed."""

    r = host.query(argv)
    if r.returncode != 0:
        return None
    # Older interpreters print --version to stderr.
    return r.stdout.strip() or r.stderr.strip()


def version_matches(host: Host, argv: Sequence[str], expected: str) -> bool:
    out = command_output(host, argv)
    if out is None:
        return False
    matched = expected in out.split()
    logger.debug("Version probe %s -> %r (expected %s)", argv[0], out, expected)
    return matched


def python_ssl_version(host: Host, python: str) -> Optional[str]:
    return command_output(host, [python, "-c", "import ssl; print(ssl.OPENSSL_VERSION)"])
