from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..errors import ValidationError
from ..logging_utils import log_success
from .artifacts import ASSEMBLY_SUFFIX, ArtifactSet, Verification
from .manifest import load_manifest, verify_file, verify_named

logger = logging.getLogger(__name__)


def reassemble(artifact_set: ArtifactSet, workdir: Path, *, keep_parts: bool = False) -> Path:
    """Concatenate verified parts into the combined artifact.

    Every part must verify against the parts manifest before concatenation,
    and the result must verify against the combined manifest before it is
    renamed into place.
    """

    parts_manifest = load_manifest(workdir / artifact_set.parts_manifest)
    if parts_manifest is None:
        raise ValidationError(f"Missing parts manifest {artifact_set.parts_manifest}")
    combined_manifest = load_manifest(workdir / artifact_set.combined_manifest)
    if combined_manifest is None or artifact_set.combined not in combined_manifest:
        raise ValidationError(f"No entry for {artifact_set.combined} in {artifact_set.combined_manifest}")

    for part in artifact_set.ordered_parts:
        v = verify_named(workdir, part, parts_manifest)
        if v is not Verification.VALID:
            raise ValidationError(f"Part {part} failed verification ({v.value})")
    log_success(logger, "All %d parts verified", len(artifact_set.parts))

    combined = workdir / artifact_set.combined
    tmp = workdir / f"{artifact_set.combined}{ASSEMBLY_SUFFIX}"
    logger.info("Reassembling %s", artifact_set.combined)
    with tmp.open("wb") as out:
        for part in artifact_set.ordered_parts:
            with (workdir / part).open("rb") as src:
                shutil.copyfileobj(src, out)

    v = verify_file(tmp, combined_manifest[artifact_set.combined])
    if v is not Verification.VALID:
        tmp.unlink(missing_ok=True)
        raise ValidationError(f"Reassembled {artifact_set.combined} failed verification")
    os.replace(tmp, combined)
    log_success(logger, "Combined artifact verified: %s", combined)

    if not keep_parts:
        logger.info("Cleaning up part files")
        for name in (*artifact_set.ordered_parts, artifact_set.parts_manifest):
            (workdir / name).unlink(missing_ok=True)

    return combined
