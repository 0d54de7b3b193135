from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


class Host:
    """Handle on the machine being provisioned.

    Every probe and action goes through this object rather than touching the
    system directly, so steps can be exercised against an in-memory fake.
    With dry_run set, mutating calls only log what they would do; read-only
    calls still observe the real system.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CmdResult:
        return run_cmd(argv, check=check, cwd=cwd, env=env, dry_run=self.dry_run)

    def query(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[str] = None,
    ) -> CmdResult:
        """Run a read-only command; never raises on non-zero exit, runs in dry-run too."""
        return run_cmd(argv, check=False, cwd=cwd)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str) -> Optional[str]:
        p = Path(path)
        if not p.is_file():
            return None
        return p.read_text(encoding="utf-8")

    def write_text(self, path: str, contents: str) -> None:
        p = Path(path)
        if self.dry_run:
            logger.info("Would write %s", str(p))
            return
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(contents, encoding="utf-8")
        logger.info("Wrote %s", str(p))

    def makedirs(self, path: str) -> None:
        if self.dry_run:
            logger.info("Would create directory %s", path)
            return
        Path(path).mkdir(parents=True, exist_ok=True)

    def cpu_count(self) -> int:
        return os.cpu_count() or 1
