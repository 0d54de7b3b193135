from __future__ import annotations

from typing import Sequence


class CommandError(RuntimeError):
    """An external command exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class ProvisionError(RuntimeError):
    """Base class for failures surfaced by a provisioning step."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class PackageManagerError(ProvisionError):
    pass


class DownloadError(ProvisionError):
    pass


class BuildError(ProvisionError):
    pass


class VerificationError(ProvisionError):
    pass


__all__ = [
    "CommandError",
    "ProvisionError",
    "PackageManagerError",
    "DownloadError",
    "BuildError",
    "VerificationError",
]
