from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.files import read_text, write_text
from ..lib.grub import find_installed_kernel, has_entry, render_custom_entry, root_uuid, update_grub

logger = logging.getLogger(__name__)


class CreateGrubEntryStep:
    step_id = "40_create_grub_entry"
    title = "Step 4: Create the custom GRUB entry"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        text = read_text(ctx.cfg.grub_custom, sudo=ctx.sudo) or ""
        return has_entry(text, ctx.cfg.grub_title)

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        if ctx.dry_run:
            release = f"{cfg.kernel_version}-dry-run"
        else:
            release = find_installed_kernel(cfg.boot_dir, cfg.kernel_version)
        uuid = root_uuid(dry_run=ctx.dry_run)
        logger.info("Root filesystem UUID: %s", uuid)

        entry = render_custom_entry(
            title=cfg.grub_title,
            kernel_release=release,
            root_uuid=uuid,
            cmdline=cfg.kernel_cmdline,
        )
        write_text(cfg.grub_custom, entry, sudo=ctx.sudo, append=True, dry_run=ctx.dry_run)
        ctx.decisions["kernel_release"] = release
        ctx.decisions["root_uuid"] = uuid
        update_grub(sudo=ctx.sudo, dry_run=ctx.dry_run)
