from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.host import Host
from ..lib.yum import rpm_is_installed, yum_remove

logger = logging.getLogger(__name__)


class RemoveYumAnsibleStep:
    """Drop distro-packaged Ansible so the pip-installed one wins on PATH."""

    step_id = "10_remove_yum_ansible"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    def _installed(self, host: Host) -> list[str]:
        return [p for p in self.cfg.remove_packages if rpm_is_installed(host, p)]

    def precondition(self, host: Host) -> bool:
        return not self._installed(host)

    def run(self, host: Host) -> None:
        installed = self._installed(host)
        yum_remove(host, installed)
        logger.info("Removed yum packages: %s", ", ".join(installed))

    def postcondition(self, host: Host) -> bool:
        return self.precondition(host)
