from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .host import Host

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoSection:
    repo_id: str
    name: str
    baseurl: str
    gpgkey: str
    gpgcheck: bool = True
    enabled: bool = True


def render_repo_file(sections: Sequence[RepoSection]) -> str:
    """Render a yum .repo file; sections are separated by a blank line."""

    blocks: list[str] = []
    for s in sections:
        blocks.append(
            "\n".join(
                [
                    f"[{s.repo_id}]",
                    f"name={s.name}",
                    f"baseurl={s.baseurl}",
                    f"gpgcheck={int(s.gpgcheck)}",
                    f"gpgkey={s.gpgkey}",
                    f"enabled={int(s.enabled)}",
                ]
            )
        )
    return "\n\n".join(blocks) + "\n"


def repo_file_matches(host: Host, path: str, contents: str) -> bool:
    return host.read_text(path) == contents


def write_repo_file(host: Host, path: str, contents: str) -> None:
    host.write_text(path, contents)
    logger.info("Configured yum repositories in %s", path)
