from __future__ import annotations

import logging
import re

from ..config import ProvisionConfig
from ..errors import CommandError, PackageManagerError, VerificationError
from ..lib.host import Host
from ..lib.probe import command_output

logger = logging.getLogger(__name__)


class InstallAnsibleStep:
    step_id = "70_install_ansible"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    def _dist_name(self) -> str:
        # "ansible-core==2.17.0" -> "ansible-core"
        return re.split(r"[\[=<>!~; ]", self.cfg.ansible_package, maxsplit=1)[0]

    def precondition(self, host: Host) -> bool:
        if self.cfg.ansible_upgrade:
            return False
        if not host.exists(self.cfg.ansible_path):
            return False
        pip = self.cfg.pip_path
        return host.exists(pip) and host.query([pip, "show", self._dist_name()]).ok

    def run(self, host: Host) -> None:
        pip = self.cfg.pip_path
        if host.dry_run and not host.exists(pip):
            logger.info("Dry run: %s would be installed by the Python build", pip)
        elif not host.exists(pip):
            raise VerificationError(f"{pip} not found; pip for Python {self.cfg.python_version} is not installed")

        argv = [pip, "install"]
        if self.cfg.ansible_upgrade:
            argv.append("--upgrade")
        argv.append(self.cfg.ansible_package)
        try:
            host.run(argv)
        except CommandError as e:
            raise PackageManagerError(f"pip install {self.cfg.ansible_package} failed: {e}") from e

    def postcondition(self, host: Host) -> bool:
        ansible = self.cfg.ansible_path
        if not host.exists(ansible):
            logger.error("%s not found after install", ansible)
            return False
        out = command_output(host, [ansible, "--version"])
        if out is None:
            return False
        logger.info("Installed: %s", out.splitlines()[0] if out else "ansible")
        return True
