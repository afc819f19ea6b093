from __future__ import annotations

import logging
from pathlib import Path

from ..context import ProvisionCtx
from ..errors import PreconditionError
from ..lib.command import run_cmd
from ..lib.grub import update_grub

logger = logging.getLogger(__name__)


class InstallKernelStep:
    step_id = "30_install_kernel"
    title = "Step 3: Install the custom kernel"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return any(Path(ctx.cfg.boot_dir).glob(f"vmlinuz-{ctx.cfg.kernel_version}-*"))

    def run(self, ctx: ProvisionCtx) -> None:
        install_root = ctx.cfg.install_root
        if not (Path(install_root) / "Makefile").exists() and not ctx.dry_run:
            raise PreconditionError(f"No kernel tree at {install_root}; run 20_extract_kernel first")

        logger.warning("Installing kernel modules; this may take several minutes.")
        run_cmd(ctx.priv(["make", "modules_install"]), cwd=install_root, capture=False, dry_run=ctx.dry_run)
        logger.info("Installing kernel...")
        run_cmd(ctx.priv(["make", "install"]), cwd=install_root, capture=False, dry_run=ctx.dry_run)
        update_grub(sudo=ctx.sudo, dry_run=ctx.dry_run)
