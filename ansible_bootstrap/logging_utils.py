from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

DEFAULT_LOG_PATH = "/var/log/ansible-bootstrap.log"
FALLBACK_LOG_NAME = "ansible-bootstrap.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)

# Handlers installed by the last configure_logging() call.
_installed: List[logging.Handler] = []


def _open_log_file(path: Path) -> Optional[logging.FileHandler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(str(path))
    except OSError:
        return None


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    *,
    verbose: bool = False,
    also_console: bool = True,
) -> Optional[str]:
    """Send logs to a file and the console.

    The file always records at DEBUG, so the output of every command the
    provisioner ran ends up in it. The console shows step progress at INFO,
    or everything when verbose is set.

    The log goes to log_path, else ./ansible-bootstrap.log, else nowhere
    (console only). Returns the file actually used, or None.
    Calling it again replaces the handlers from the previous call.
    """

    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
        h.close()
    _installed.clear()
    root.setLevel(logging.DEBUG)

    chosen: Optional[str] = None
    for candidate in (Path(log_path), Path.cwd() / FALLBACK_LOG_NAME):
        file_handler = _open_log_file(candidate)
        if file_handler is not None:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(_FORMAT)
            _installed.append(file_handler)
            chosen = str(candidate)
            break

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(logging.DEBUG if verbose else logging.INFO)
        console.setFormatter(_FORMAT)
        _installed.append(console)

    for h in _installed:
        root.addHandler(h)

    log = logging.getLogger(__name__)
    if chosen is None:
        log.warning("No writable log file (tried %s and ./%s); logging to console only", log_path, FALLBACK_LOG_NAME)
    elif chosen != str(Path(log_path)):
        log.warning("Cannot write %s; logging to %s instead", log_path, chosen)
    else:
        log.info("Logging to %s", chosen)
    return chosen
