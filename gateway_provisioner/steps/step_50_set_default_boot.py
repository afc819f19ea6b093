from __future__ import annotations

import logging
from pathlib import Path

from ..context import ProvisionCtx
from ..errors import PreconditionError
from ..lib.files import copy_file, read_text, write_text
from ..lib.grub import default_selects, set_grub_default, update_grub

logger = logging.getLogger(__name__)


class SetDefaultBootStep:
    step_id = "50_set_default_boot"
    title = "Step 5: Boot the Wireguard kernel by default"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        text = read_text(ctx.cfg.grub_default, sudo=ctx.sudo) or ""
        return default_selects(text, ctx.cfg.grub_title)

    def run(self, ctx: ProvisionCtx) -> None:
        path = ctx.cfg.grub_default
        current = read_text(path, sudo=ctx.sudo)
        if current is None:
            if not ctx.dry_run:
                raise PreconditionError(f"GRUB configuration file not found: {path}")
            current = ""

        # Only the first backup is ever written.
        backup = f"{path}.backup"
        if Path(backup).exists():
            logger.info("Backup already present: %s", backup)
        elif current:
            copy_file(path, backup, sudo=ctx.sudo, dry_run=ctx.dry_run)
            logger.info("Backed up %s -> %s", path, backup)

        write_text(path, set_grub_default(current, ctx.cfg.grub_title), sudo=ctx.sudo, dry_run=ctx.dry_run)
        update_grub(sudo=ctx.sudo, dry_run=ctx.dry_run)
