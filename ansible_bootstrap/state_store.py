from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

MAX_RUNS_KEPT = 20


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    if _detect_format(p) == "json":
        data = json.loads(p.read_text(encoding="utf-8"))
    else:
        import yaml

        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) == "json":
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    else:
        import yaml

        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys without overriding existing values."""

    state.setdefault("version", 1)
    state.setdefault("runs", [])
    state.setdefault("last_run", None)
    state.setdefault("errors", [])
    return state


def record_run(state: Dict[str, Any], report: Dict[str, Any]) -> None:
    """Append a run report; only the most recent runs are kept."""

    entry = dict(report)
    entry["finished_at"] = datetime.now(timezone.utc).isoformat()

    runs = state.setdefault("runs", [])
    runs.append(entry)
    del runs[:-MAX_RUNS_KEPT]
    state["last_run"] = entry

    failed_step = entry.get("failed_step")
    if failed_step:
        reason = next(
            (s.get("reason") for s in entry.get("steps") or [] if s.get("step") == failed_step),
            None,
        )
        errors = state.setdefault("errors", [])
        errors.append({"step": failed_step, "error": reason, "at": entry["finished_at"]})
        del errors[:-MAX_RUNS_KEPT]
