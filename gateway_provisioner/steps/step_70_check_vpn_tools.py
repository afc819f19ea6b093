from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..errors import PreconditionError
from ..lib.command import run_cmd
from ..lib.pkg import have_commands
from ..logging_utils import log_success

logger = logging.getLogger(__name__)


class CheckVpnToolsStep:
    step_id = "70_check_vpn_tools"
    title = "Step 7: Test the Wireguard installation"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return False

    def run(self, ctx: ProvisionCtx) -> None:
        if run_cmd(ctx.priv(["modprobe", "wireguard"]), check=False, dry_run=ctx.dry_run).ok:
            log_success(logger, "Wireguard module loaded successfully.")
        else:
            logger.warning("Wireguard module not available in the running kernel; expected until reboot.")

        if ctx.dry_run:
            return
        if not have_commands("wg"):
            raise PreconditionError("Wireguard tools not found.")
        version = run_cmd(["wg", "--version"], check=False).stdout.strip()
        log_success(logger, "Wireguard tools are available: %s", version or "unknown version")
