from __future__ import annotations

import logging
from pathlib import Path

from ..lib.prompt import Prompter
from ..logging_utils import log_success
from .artifacts import ArtifactSet
from .decision import LocalState, Outcome, assess, decision_for, resolve
from .fetch import Fetcher, fetch_artifact_set
from .reassemble import reassemble

logger = logging.getLogger(__name__)


def purge(artifact_set: ArtifactSet, workdir: Path) -> None:
    removed = []
    for name in (*artifact_set.all_files, *artifact_set.scratch_files):
        p = workdir / name
        if p.exists():
            p.unlink()
            removed.append(name)
    if removed:
        logger.info("Removed stale files: %s", ", ".join(removed))


def acquire(
    artifact_set: ArtifactSet,
    *,
    workdir: Path,
    fetcher: Fetcher,
    prompter: Prompter,
    keep_parts: bool = False,
) -> Path:
    """Ensure a verified combined artifact exists in ``workdir``; return its path."""

    workdir.mkdir(parents=True, exist_ok=True)
    assessment = assess(artifact_set, workdir)
    state = assessment.state
    logger.info("Local state for %s: %s", artifact_set.name, state.value)

    request = decision_for(state)
    reuse = prompter.confirm(request.question, default=True) if request else None
    outcome = resolve(state, reuse)
    logger.debug("Decision %s -> %s", request.key if request else "auto", outcome.value)

    if outcome is Outcome.USE_EXISTING and state is LocalState.COMBINED_VALID:
        log_success(logger, "Reusing verified %s", artifact_set.combined)
        return workdir / artifact_set.combined

    if outcome is Outcome.FETCH_REQUIRED:
        if state is not LocalState.NO_LOCAL_DATA and reuse is None:
            logger.warning("Local files for %s are incomplete or corrupt; fetching fresh copies", artifact_set.name)
        purge(artifact_set, workdir)
        fetch_artifact_set(artifact_set, workdir, fetcher)
        log_success(logger, "Download completed")
    else:
        logger.info("Reusing verified parts for %s", artifact_set.name)

    return reassemble(artifact_set, workdir, keep_parts=keep_parts)
