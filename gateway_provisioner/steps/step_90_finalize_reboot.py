from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)

NEXT_STEPS = (
    "1. Reboot the system",
    "2. Run gateway-verify to confirm the Wireguard kernel is running",
    "3. Run gateway-wg0 to configure the VPN connection",
)


class FinalizeRebootStep:
    step_id = "90_finalize_reboot"
    title = "Installation complete"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return False

    def run(self, ctx: ProvisionCtx) -> None:
        logger.info("Finalize summary: %s", ctx.decisions)
        logger.warning("You must reboot to use the new kernel with Wireguard support.")
        for line in NEXT_STEPS:
            logger.info("  %s", line)

        if ctx.prompter.confirm("Would you like to reboot now?", default=False):
            logger.info("Rebooting system...")
            run_cmd(ctx.priv(["reboot"]), dry_run=ctx.dry_run)
        else:
            logger.info("Please remember to reboot when convenient.")
