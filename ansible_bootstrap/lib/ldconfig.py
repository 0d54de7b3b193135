from __future__ import annotations

import logging

from ..errors import BuildError, CommandError
from .host import Host

logger = logging.getLogger(__name__)

LD_SO_CONF_DIR = "/etc/ld.so.conf.d"


def conf_path(name: str) -> str:
    return f"{LD_SO_CONF_DIR}/{name}.conf"


def is_registered(host: Host, name: str, lib_dir: str) -> bool:
    text = host.read_text(conf_path(name))
    if text is None:
        return False
    return lib_dir in [line.strip() for line in text.splitlines()]


def register_lib_dir(host: Host, name: str, lib_dir: str) -> None:
    """Add lib_dir to the dynamic linker search path and refresh its cache."""

    host.write_text(conf_path(name), lib_dir + "\n")
    try:
        host.run(["ldconfig"])
    except CommandError as e:
        raise BuildError(f"ldconfig failed: {e}") from e
    logger.info("Registered %s with the dynamic linker (%s)", lib_dir, conf_path(name))
