from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.host import Host
from ..lib.repos import render_repo_file, repo_file_matches, write_repo_file

logger = logging.getLogger(__name__)


class ConfigureReposStep:
    step_id = "20_configure_repos"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg
        self.contents = render_repo_file(cfg.repo_sections)

    def precondition(self, host: Host) -> bool:
        return repo_file_matches(host, self.cfg.repo_file, self.contents)

    def run(self, host: Host) -> None:
        write_repo_file(host, self.cfg.repo_file, self.contents)

    def postcondition(self, host: Host) -> bool:
        return self.precondition(host)
