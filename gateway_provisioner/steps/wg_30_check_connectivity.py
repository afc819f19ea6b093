from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.wireguard import ping
from ..logging_utils import log_success

logger = logging.getLogger(__name__)


class CheckConnectivityStep:
    step_id = "wg_30_check_connectivity"
    title = "Test connectivity to the VPN server"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return False

    def run(self, ctx: ProvisionCtx) -> None:
        host = ctx.prompter.ask("Enter the VPN server domain or IP to test connectivity")
        if not host:
            logger.warning("No host given; skipping connectivity test.")
            return
        if ctx.dry_run:
            logger.info("Would ping %s", host)
            return
        if ping(host):
            log_success(logger, "Successfully connected to VPN server (%s).", host)
        else:
            logger.warning("Could not ping VPN server (%s). This might be normal depending on firewall rules.", host)
            ctx.warn({"connectivity": "ping_failed", "host": host})
