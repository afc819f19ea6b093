"""Acquisition decision engine.

Maps what is on disk to an acquisition action. Pure: it never prompts and
never touches the network. The operator boundary lives in ``acquire``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from ..errors import ValidationError
from .artifacts import ArtifactSet, Verification
from .manifest import load_manifest, verify_named

logger = logging.getLogger(__name__)


class LocalState(str, Enum):
    NO_LOCAL_DATA = "no_local_data"
    PARTS_VALID = "parts_valid"
    PARTS_INVALID = "parts_invalid"
    COMBINED_VALID = "combined_valid"
    COMBINED_INVALID = "combined_invalid"


class Outcome(str, Enum):
    USE_EXISTING = "use_existing"
    FETCH_REQUIRED = "fetch_required"


@dataclass(frozen=True)
class Assessment:
    state: LocalState
    results: Dict[str, Verification] = field(default_factory=dict)


@dataclass(frozen=True)
class DecisionRequest:
    key: str
    question: str


def assess(artifact_set: ArtifactSet, workdir: Path) -> Assessment:
    """Classify the local copy of an artifact set.

    The combined artifact is checked first; when it is present the parts are
    never looked at.
    """

    combined_path = workdir / artifact_set.combined
    results: Dict[str, Verification] = {}

    combined_manifest = _load_quiet(workdir / artifact_set.combined_manifest)

    if combined_path.exists():
        v = verify_named(workdir, artifact_set.combined, combined_manifest)
        results[artifact_set.combined] = v
        state = LocalState.COMBINED_VALID if v is Verification.VALID else LocalState.COMBINED_INVALID
        return Assessment(state=state, results=results)

    present = [n for n in artifact_set.all_files if (workdir / n).exists()]
    present += [n for n in artifact_set.scratch_files if (workdir / n).exists()]
    if not present:
        return Assessment(state=LocalState.NO_LOCAL_DATA, results=results)

    parts_manifest = _load_quiet(workdir / artifact_set.parts_manifest)
    for part in artifact_set.ordered_parts:
        results[part] = verify_named(workdir, part, parts_manifest)

    complete = (
        combined_manifest is not None
        and artifact_set.combined in combined_manifest
        and parts_manifest is not None
        and all(v is Verification.VALID for v in results.values())
    )
    state = LocalState.PARTS_VALID if complete else LocalState.PARTS_INVALID
    return Assessment(state=state, results=results)


def decision_for(state: LocalState) -> Optional[DecisionRequest]:
    if state is LocalState.COMBINED_VALID:
        return DecisionRequest(
            key="D1",
            question="A verified combined artifact already exists. Reuse it instead of downloading again?",
        )
    if state is LocalState.PARTS_VALID:
        return DecisionRequest(
            key="D2",
            question="Verified artifact parts already exist. Reuse them instead of downloading again?",
        )
    return None


def resolve(state: LocalState, reuse: Optional[bool]) -> Outcome:
    """Terminal decision. Invalid or partial state is never reused."""

    if state in {LocalState.COMBINED_VALID, LocalState.PARTS_VALID} and reuse:
        return Outcome.USE_EXISTING
    return Outcome.FETCH_REQUIRED


def _load_quiet(path: Path) -> Optional[Dict[str, str]]:
    # A corrupt manifest is treated like a missing one: the set gets re-fetched.
    try:
        return load_manifest(path)
    except (ValidationError, ValueError, OSError) as e:
        logger.warning("Ignoring unreadable manifest %s: %s", path.name, e)
        return None
