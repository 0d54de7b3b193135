from __future__ import annotations

import posixpath
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

import pytest

from ansible_bootstrap.config import ProvisionConfig
from ansible_bootstrap.errors import CommandError
from ansible_bootstrap.lib.command import CmdResult
from ansible_bootstrap.lib.host import Host


class FakeHost(Host):
    """In-memory host: files, PATH and scripted command results.

    Mutating commands (run) land in `calls`; probes (query) in `queries`.
    `fail()` makes any command starting with the given argv prefix fail.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        super().__init__(dry_run=dry_run)
        self.files: Dict[str, str] = {}
        self.on_path: Set[str] = set()
        self.calls: List[List[str]] = []
        self.queries: List[List[str]] = []
        self.cwds: List[Optional[str]] = []
        self.cpus = 4
        self._failures: List[Tuple[Tuple[str, ...], CmdResult]] = []

    def fail(self, *prefix: str, returncode: int = 1, stderr: str = "boom") -> None:
        self._failures.append((tuple(prefix), CmdResult(list(prefix), returncode, "", stderr)))

    def _failure_for(self, argv: Sequence[str]) -> Optional[CmdResult]:
        for prefix, result in self._failures:
            if tuple(argv[: len(prefix)]) == prefix:
                return CmdResult(list(argv), result.returncode, "", result.stderr)
        return None

    def simulate(self, argv: List[str], cwd: Optional[str]) -> CmdResult:
        return CmdResult(argv, 0, "", "")

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(cwd)
        if self.dry_run:
            return CmdResult(argv, 0, "", "")
        r = self._failure_for(argv) or self.simulate(argv, cwd)
        if check and r.returncode != 0:
            raise CommandError(argv, r.returncode, r.stderr)
        return r

    def query(self, argv: Sequence[str], *, cwd: Optional[str] = None) -> CmdResult:
        argv = list(argv)
        self.queries.append(argv)
        return self._failure_for(argv) or self.simulate(argv, cwd)

    def which(self, name: str) -> Optional[str]:
        return f"/usr/local/bin/{name}" if name in self.on_path else None

    def exists(self, path: str) -> bool:
        return path in self.files or any(f.startswith(path.rstrip("/") + "/") for f in self.files)

    def read_text(self, path: str) -> Optional[str]:
        return self.files.get(path)

    def write_text(self, path: str, contents: str) -> None:
        self.calls.append(["<write>", path])
        self.cwds.append(None)
        if not self.dry_run:
            self.files[path] = contents

    def makedirs(self, path: str) -> None:
        pass

    def cpu_count(self) -> int:
        return self.cpus

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.calls)


class FakeCentOS(FakeHost):
    """A fresh CentOS 7 box whose commands change its own fake state."""

    def __init__(self, cfg: ProvisionConfig, *, dry_run: bool = False) -> None:
        super().__init__(dry_run=dry_run)
        self.cfg = cfg
        self.rpms: Set[str] = {"ansible", "bash", "yum"}
        self.pending_updates = True
        self.pip_packages: Set[str] = set()
        self.python_ssl = f"OpenSSL {cfg.openssl_version}  11 Sep 2023"

    def snapshot(self) -> tuple:
        return (
            dict(self.files),
            frozenset(self.on_path),
            frozenset(self.rpms),
            self.pending_updates,
            frozenset(self.pip_packages),
        )

    def simulate(self, argv: List[str], cwd: Optional[str]) -> CmdResult:
        cfg = self.cfg
        ok = CmdResult(argv, 0, "", "")
        cmd, args = argv[0], argv[1:]

        if cmd == "rpm" and args[:1] == ["-q"]:
            return CmdResult(argv, 0 if args[1] in self.rpms else 1, "", "")
        if cmd == "yum":
            sub = args[0]
            if sub == "remove":
                self.rpms.difference_update(args[2:])
            elif sub == "install":
                self.rpms.update(args[2:])
            elif sub == "groupinstall":
                self.on_path.update(["gcc", "make"])
            elif sub == "update":
                self.pending_updates = False
            elif sub == "check-update":
                return CmdResult(argv, 100 if self.pending_updates else 0, "", "")
            return ok
        if cmd == "wget":
            self.files[args[2]] = "tarball"
            return ok
        if cmd == "mv":
            self.files[args[2]] = self.files.pop(args[1])
            return ok
        if cmd == "rm":
            self.files.pop(args[-1], None)
            return ok
        if cmd in {"./config", "./configure"}:
            self.files[posixpath.join(cwd or "", "Makefile")] = ""
            return ok
        if cmd == "make" and args == ["install"]:
            self.files[f"{cfg.openssl_prefix}/bin/openssl"] = ""
            return ok
        if cmd == "make" and args == ["altinstall"]:
            self.files[cfg.python_path] = ""
            self.files[cfg.pip_path] = ""
            return ok
        if cmd == f"{cfg.openssl_prefix}/bin/openssl" and args == ["version"]:
            return CmdResult(argv, 0, f"OpenSSL {cfg.openssl_version}  11 Sep 2023\n", "")
        if cmd == cfg.python_path:
            if cmd not in self.files:
                return CmdResult(argv, 127, "", "not found")
            if args == ["--version"]:
                return CmdResult(argv, 0, f"Python {cfg.python_version}\n", "")
            return CmdResult(argv, 0, self.python_ssl + "\n", "")
        if cmd == cfg.pip_path:
            if args[0] == "install":
                self.pip_packages.add(args[-1])
                self.files[cfg.ansible_path] = ""
                return ok
            if args[0] == "show":
                return CmdResult(argv, 0 if args[1] in self.pip_packages else 1, "", "")
        if cmd == cfg.ansible_path:
            if cmd not in self.files:
                return CmdResult(argv, 127, "", "not found")
            return CmdResult(argv, 0, "ansible [core 2.17.0]\n  python version = 3.11.11\n", "")
        return ok


@pytest.fixture
def cfg() -> ProvisionConfig:
    return ProvisionConfig(raw={})


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def centos(cfg: ProvisionConfig) -> FakeCentOS:
    return FakeCentOS(cfg)
