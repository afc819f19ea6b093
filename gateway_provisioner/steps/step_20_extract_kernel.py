from __future__ import annotations

import logging
from pathlib import Path

from ..acquisition import purge
from ..context import ProvisionCtx
from ..errors import PreconditionError
from ..lib.command import run_cmd
from ..lib.files import make_dir

logger = logging.getLogger(__name__)


class ExtractKernelStep:
    step_id = "20_extract_kernel"
    title = "Step 2: Extract the kernel tree"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return (Path(ctx.cfg.install_root) / "Makefile").exists()

    def run(self, ctx: ProvisionCtx) -> None:
        archive = ctx.kernel_archive or ctx.workdir / ctx.cfg.artifact_set.combined
        if not archive.exists() and not ctx.dry_run:
            raise PreconditionError(f"Kernel archive missing: {archive}; run 10_acquire_kernel first")

        install_root = ctx.cfg.install_root
        logger.info("Extracting kernel to %s", install_root)
        make_dir(install_root, sudo=ctx.sudo, dry_run=ctx.dry_run)
        run_cmd(ctx.priv(["tar", "-xJf", str(archive), "-C", install_root]), dry_run=ctx.dry_run)

        if not ctx.cfg.keep_combined and not ctx.dry_run:
            logger.info("Removing kernel archive (acquisition.keep_combined=false)")
            purge(ctx.cfg.artifact_set, ctx.workdir)
