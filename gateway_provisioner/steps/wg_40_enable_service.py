from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..errors import CommandError, PreconditionError
from ..lib.command import run_cmd
from ..lib.wireguard import service_enabled, service_name
from ..logging_utils import log_success

logger = logging.getLogger(__name__)


class EnableServiceStep:
    step_id = "wg_40_enable_service"
    title = "Enable WireGuard on boot"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return service_enabled(ctx.cfg.vpn_interface, dry_run=ctx.dry_run)

    def run(self, ctx: ProvisionCtx) -> None:
        svc = service_name(ctx.cfg.vpn_interface)
        try:
            run_cmd(ctx.priv(["systemctl", "enable", svc]), dry_run=ctx.dry_run)
        except CommandError as e:
            raise PreconditionError(f"Failed to enable {svc}") from e

        if ctx.dry_run:
            return
        if service_enabled(ctx.cfg.vpn_interface):
            log_success(logger, "WireGuard service is enabled for startup.")
        else:
            logger.warning("WireGuard service is not enabled for startup.")
