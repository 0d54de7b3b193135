from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.host import Host
from ..lib.probe import command_exists
from ..lib.yum import rpm_missing, yum_groupinstall, yum_install

logger = logging.getLogger(__name__)


class InstallBuildDepsStep:
    step_id = "40_install_build_deps"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    def _missing_tools(self, host: Host) -> list[str]:
        return [t for t in self.cfg.required_tools if not command_exists(host, t)]

    def precondition(self, host: Host) -> bool:
        return not self._missing_tools(host) and not rpm_missing(host, self.cfg.build_deps)

    def run(self, host: Host) -> None:
        yum_groupinstall(host, self.cfg.dev_group)
        yum_install(host, self.cfg.build_deps)

    def postcondition(self, host: Host) -> bool:
        missing = self._missing_tools(host) + rpm_missing(host, self.cfg.build_deps)
        if missing:
            logger.error("Still missing after install: %s", ", ".join(missing))
        return not missing
