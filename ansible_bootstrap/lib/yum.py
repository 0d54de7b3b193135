from __future__ import annotations

import logging
from typing import Sequence

from ..errors import CommandError, PackageManagerError
from .host import Host

logger = logging.getLogger(__name__)


def _yum(host: Host, argv: Sequence[str]) -> None:
    try:
        host.run(["yum", *argv])
    except CommandError as e:
        raise PackageManagerError(str(e)) from e


def yum_remove(host: Host, packages: Sequence[str]) -> None:
    if not packages:
        return
    _yum(host, ["remove", "-y", *packages])


def yum_install(host: Host, packages: Sequence[str]) -> None:
    if not packages:
        return
    _yum(host, ["install", "-y", *packages])


def yum_groupinstall(host: Host, group: str) -> None:
    _yum(host, ["groupinstall", "-y", group])


def yum_clean_all(host: Host) -> None:
    _yum(host, ["clean", "all"])


def yum_makecache(host: Host) -> None:
    _yum(host, ["makecache"])


def yum_update(host: Host) -> None:
    _yum(host, ["update", "-y"])


def yum_has_pending_updates(host: Host) -> bool:
    """Return True if yum reports packages to update.

    `yum check-update` exits 100 when updates are available and 0 when the
    host is current; anything else is a failure to query.
    """
    r = host.query(["yum", "check-update", "-q"])
    if r.returncode == 0:
        return False
    if r.returncode == 100:
        return True
    raise PackageManagerError(f"yum check-update failed ({r.returncode}): {r.stderr.strip()}")


def rpm_is_installed(host: Host, package: str) -> bool:
    return host.query(["rpm", "-q", package]).returncode == 0


def rpm_missing(host: Host, packages: Sequence[str]) -> list[str]:
    return [p for p in packages if not rpm_is_installed(host, p)]
