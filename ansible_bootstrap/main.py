from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config import ProvisionConfig, load_config
from .lib.host import Host
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import SequenceReport, Step, check_bounds, run_pipeline
from .state_store import ensure_defaults, load_state, record_run, save_state
from .steps import (
    BuildOpenSSLStep,
    BuildPythonStep,
    ConfigureReposStep,
    InstallAnsibleStep,
    InstallBuildDepsStep,
    RefreshPackagesStep,
    RemoveYumAnsibleStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "/var/lib/ansible-bootstrap/state.json"


def build_steps(cfg: ProvisionConfig) -> List[Step]:
    return [
        RemoveYumAnsibleStep(cfg),
        ConfigureReposStep(cfg),
        RefreshPackagesStep(cfg),
        InstallBuildDepsStep(cfg),
        BuildOpenSSLStep(cfg),
        BuildPythonStep(cfg),
        InstallAnsibleStep(cfg),
    ]


def run(
    *,
    cfg: ProvisionConfig,
    host: Host,
    state_path: Optional[str] = DEFAULT_STATE_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> SequenceReport:
    """Run the provisioning sequence and record the outcome in the state file."""

    report = run_pipeline(
        host=host,
        steps=build_steps(cfg),
        start_at=start_at,
        stop_after=stop_after,
        force=force,
    )

    if state_path and not host.dry_run:
        try:
            state = ensure_defaults(load_state(state_path))
            record_run(state, report.to_dict())
            save_state(state_path, state)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Could not record run in %s: %s", state_path, e)

    return report


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="ansible-bootstrap",
        description="Build OpenSSL and Python from source on CentOS 7 and install Ansible with pip.",
    )
    p.add_argument("--config", default=None, help="YAML file overriding versions, paths and package lists")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_build_openssl)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Run steps even if already satisfied")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    p.add_argument("--list-steps", action="store_true", help="Print step ids in order and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Show command output on the console")

    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config)
        steps = build_steps(cfg)
    except (OSError, ValueError) as e:
        p.error(f"--config: {e}")

    try:
        check_bounds(steps, args.start_at, args.stop_after)
    except ValueError as e:
        p.error(str(e))

    if args.list_steps:
        for step in steps:
            print(step.step_id)
        return 0

    configure_logging(log_path=args.log, verbose=bool(args.verbose))

    report = run(
        cfg=cfg,
        host=Host(dry_run=bool(args.dry_run)),
        state_path=args.state,
        start_at=args.start_at,
        stop_after=args.stop_after,
        force=bool(args.force),
    )

    failed = report.failed
    if failed is not None:
        print(f"step {failed.step_id} failed: {failed.reason}", file=sys.stderr)
        return 1

    logger.info(
        "Provisioning complete (ran=%s skipped=%s)",
        ",".join(report.ran_steps) or "-",
        ",".join(report.skipped_steps) or "-",
    )
    if args.dry_run:
        print("Dry run complete; no changes were made.")
    else:
        print(f"Provisioning complete. Python {cfg.python_version} and Ansible are installed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
