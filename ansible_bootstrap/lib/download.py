from __future__ import annotations

import logging
import posixpath
from urllib.parse import urlparse

from ..errors import CommandError, DownloadError
from .host import Host

logger = logging.getLogger(__name__)


def fetch(host: Host, url: str, dest_dir: str) -> str:
    """Download url into dest_dir unless the file is already there.

    The transfer lands in a `.part` file that is renamed once complete, so an
    interrupted download is never mistaken for a finished one.
    Returns the local path.
    """

    filename = posixpath.basename(urlparse(url).path)
    if not filename:
        raise DownloadError(f"Cannot derive a file name from {url!r}")

    dest = posixpath.join(dest_dir, filename)
    if host.exists(dest):
        logger.info("Already downloaded: %s", dest)
        return dest

    partial = dest + ".part"
    host.makedirs(dest_dir)
    try:
        host.run(["wget", "-q", "-O", partial, url])
    except CommandError as e:
        host.run(["rm", "-f", partial], check=False)
        raise DownloadError(f"Failed to download {url}: {e}") from e

    try:
        host.run(["mv", "-f", partial, dest])
    except CommandError as e:
        raise DownloadError(f"Failed to move {partial} into place: {e}") from e

    logger.info("Downloaded %s -> %s", url, dest)
    return dest
