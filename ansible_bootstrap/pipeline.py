from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .errors import ProvisionError, VerificationError
from .lib.host import Host

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent provisioning step.

    precondition and postcondition only observe the host; run mutates it.
    """

    step_id: str

    def precondition(self, host: Host) -> bool:
        ...

    def run(self, host: Host) -> None:
        ...

    def postcondition(self, host: Host) -> bool:
        ...


@dataclass
class FunctionStep:
    """A Step assembled from plain callables."""

    step_id: str
    action: Callable[[Host], None]
    check: Callable[[Host], bool] = lambda host: False
    verify: Callable[[Host], bool] = lambda host: True

    def precondition(self, host: Host) -> bool:
        return self.check(host)

    def run(self, host: Host) -> None:
        self.action(host)

    def postcondition(self, host: Host) -> bool:
        return self.verify(host)


class Outcome(str, enum.Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    step_id: str
    outcome: Outcome
    reason: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"step": self.step_id, "outcome": self.outcome.value}
        if self.reason is not None:
            d["reason"] = self.reason
        if self.error_kind is not None:
            d["error_kind"] = self.error_kind
        return d


@dataclass
class SequenceReport:
    results: List[StepResult] = field(default_factory=list)

    @property
    def failed(self) -> Optional[StepResult]:
        for r in self.results:
            if r.outcome is Outcome.FAILED:
                return r
        return None

    @property
    def ok(self) -> bool:
        return self.failed is None

    @property
    def ran_steps(self) -> List[str]:
        return [r.step_id for r in self.results if r.outcome is Outcome.SUCCEEDED]

    @property
    def skipped_steps(self) -> List[str]:
        return [r.step_id for r in self.results if r.outcome is Outcome.SKIPPED]

    def to_dict(self) -> Dict[str, Any]:
        failed = self.failed
        return {
            "ok": self.ok,
            "failed_step": failed.step_id if failed else None,
            "steps": [r.to_dict() for r in self.results],
        }


def _failure(step_id: str, exc: BaseException) -> StepResult:
    kind = exc.kind if isinstance(exc, ProvisionError) else type(exc).__name__
    return StepResult(step_id=step_id, outcome=Outcome.FAILED, reason=f"{kind}: {exc}", error_kind=kind)


def check_bounds(steps: Sequence[Step], start_at: Optional[str], stop_after: Optional[str]) -> None:
    """Reject unknown step ids and a stop_after that comes before start_at."""

    ids = [s.step_id for s in steps]
    for flag, step_id in (("start_at", start_at), ("stop_after", stop_after)):
        if step_id is not None and step_id not in ids:
            raise ValueError(f"{flag}: unknown step {step_id!r} (choose from {', '.join(ids)})")
    if start_at is not None and stop_after is not None and ids.index(stop_after) < ids.index(start_at):
        raise ValueError(f"stop_after {stop_after!r} comes before start_at {start_at!r}")


def run_pipeline(
    *,
    host: Host,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> SequenceReport:
    """Run steps in order; skip satisfied ones, stop at the first failure.

    Nothing is retried and nothing already done is undone.
    """

    check_bounds(steps, start_at, stop_after)

    report = SequenceReport()
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        try:
            satisfied = (not force) and step.precondition(host)
        except Exception as e:
            logger.exception("Precondition of %s could not be evaluated", step.step_id)
            report.results.append(_failure(step.step_id, e))
            break

        if satisfied:
            logger.info("Skipping step %s (already satisfied)", step.step_id)
            report.results.append(StepResult(step_id=step.step_id, outcome=Outcome.SKIPPED))
        else:
            logger.info("Running step %s", step.step_id)
            try:
                step.run(host)
            except Exception as e:
                logger.error("Step %s failed: %s", step.step_id, e)
                report.results.append(_failure(step.step_id, e))
                break

            if host.dry_run:
                logger.info("Dry run: not verifying %s", step.step_id)
            else:
                try:
                    if not step.postcondition(host):
                        raise VerificationError("verification failed")
                except Exception as e:
                    logger.error("Step %s did not verify: %s", step.step_id, e)
                    if not isinstance(e, VerificationError):
                        e = VerificationError(str(e))
                    report.results.append(_failure(step.step_id, e))
                    break

            report.results.append(StepResult(step_id=step.step_id, outcome=Outcome.SUCCEEDED))

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return report
