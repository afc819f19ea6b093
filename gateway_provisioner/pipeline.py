from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import ProvisionCtx
from .logging_utils import log_success
from .state_store import mark_step_completed

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step: check, then (maybe) act."""

    step_id: str
    title: str

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        ...

    def run(self, ctx: ProvisionCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]


def select_steps(steps: Sequence[Step], *, start_at: Optional[str], stop_after: Optional[str]) -> List[Step]:
    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ValueError(f"Unknown step_id {wanted!r} (known: {', '.join(ids)})")

    selected: List[Step] = []
    started = start_at is None
    for step in steps:
        if not started and step.step_id == start_at:
            started = True
        if started:
            selected.append(step)
        if stop_after is not None and step.step_id == stop_after:
            break
    return selected


def run_pipeline(
    ctx: ProvisionCtx,
    steps: Sequence[Step],
    *,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order; steps whose end state already holds are offered a skip."""

    ran: List[str] = []
    skipped: List[str] = []

    for step in select_steps(steps, start_at=start_at, stop_after=stop_after):
        ctx.state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("=== %s ===", step.title)

        if step.is_satisfied(ctx) and not ctx.prompter.confirm(
            f"{step.title}: already done. Redo it?", default=False
        ):
            logger.info("Skipping step %s (already satisfied)", step.step_id)
            skipped.append(step.step_id)
        else:
            logger.debug("Running step %s", step.step_id)
            step.run(ctx)
            ran.append(step.step_id)
            log_success(logger, "%s: done", step.title)

        mark_step_completed(ctx.state, step.step_id)

    ctx.state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
