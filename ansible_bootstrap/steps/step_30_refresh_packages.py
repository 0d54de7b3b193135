from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.host import Host
from ..lib.yum import yum_clean_all, yum_has_pending_updates, yum_makecache, yum_update

logger = logging.getLogger(__name__)


class RefreshPackagesStep:
    """Rebuild the yum cache against the configured repos and apply updates."""

    step_id = "30_refresh_packages"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    def precondition(self, host: Host) -> bool:
        return not yum_has_pending_updates(host)

    def run(self, host: Host) -> None:
        yum_clean_all(host)
        yum_makecache(host)
        yum_update(host)

    def postcondition(self, host: Host) -> bool:
        return not yum_has_pending_updates(host)
