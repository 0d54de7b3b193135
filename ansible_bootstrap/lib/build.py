from __future__ import annotations

import logging
import posixpath
from typing import Mapping, Optional, Sequence

from ..errors import BuildError, CommandError
from .host import Host

logger = logging.getLogger(__name__)


def _build_cmd(host: Host, argv: Sequence[str], *, cwd: Optional[str] = None, what: str) -> None:
    try:
        host.run(argv, cwd=cwd)
    except CommandError as e:
        raise BuildError(f"{what} failed: {e}") from e


def extract_tarball(host: Host, archive: str, dest_dir: str) -> None:
    _build_cmd(host, ["tar", "-xzf", archive, "-C", dest_dir], what=f"Extracting {archive}")


def configure(
    host: Host,
    source_dir: str,
    options: Sequence[str],
    *,
    script: str = "./configure",
    variables: Optional[Mapping[str, str]] = None,
) -> None:
    """Run a configure script; variables are passed as VAR=value arguments."""

    argv = [script, *options]
    for k, v in (variables or {}).items():
        argv.append(f"{k}={v}")
    _build_cmd(host, argv, cwd=source_dir, what=f"Configuring {source_dir}")


def make(host: Host, source_dir: str, *, jobs: Optional[int] = None) -> None:
    n = jobs if jobs else host.cpu_count()
    _build_cmd(host, ["make", f"-j{n}"], cwd=source_dir, what=f"Compiling {source_dir}")


def make_install(host: Host, source_dir: str, *, target: str = "install") -> None:
    _build_cmd(host, ["make", target], cwd=source_dir, what=f"make {target} in {source_dir}")


def make_clean(host: Host, source_dir: str) -> None:
    """Remove previous build artifacts; a tree that was never configured has none."""

    if not host.exists(posixpath.join(source_dir, "Makefile")):
        logger.info("No Makefile in %s; nothing to clean", source_dir)
        return
    r = host.run(["make", "clean"], cwd=source_dir, check=False)
    if r.returncode != 0:
        logger.warning("make clean failed in %s (%s); continuing", source_dir, r.returncode)
