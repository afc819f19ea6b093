from __future__ import annotations

import logging
from pathlib import Path

from ..acquisition import acquire
from ..context import ProvisionCtx
from ..errors import PreconditionError

logger = logging.getLogger(__name__)


class AcquireKernelStep:
    step_id = "10_acquire_kernel"
    title = "Step 1: Download and verify the custom kernel"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        # A retained archive goes through the reuse prompts instead.
        if ctx.cfg.keep_combined:
            return False
        return (Path(ctx.cfg.install_root) / "Makefile").exists()

    def run(self, ctx: ProvisionCtx) -> None:
        artifact_set = ctx.cfg.artifact_set
        if ctx.dry_run:
            ctx.kernel_archive = ctx.workdir / artifact_set.combined
            logger.info("Would acquire %s into %s", artifact_set.combined, ctx.workdir)
            return
        if ctx.fetcher is None:
            raise PreconditionError("No fetcher configured for artifact download")

        logger.info("The kernel is split into %d parts due to size limitations.", len(artifact_set.parts))
        ctx.kernel_archive = acquire(
            artifact_set,
            workdir=ctx.workdir,
            fetcher=ctx.fetcher,
            prompter=ctx.prompter,
            keep_parts=ctx.cfg.keep_parts,
        )
        ctx.decisions["kernel_archive"] = str(ctx.kernel_archive)
