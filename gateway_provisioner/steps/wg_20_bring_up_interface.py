from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..errors import CommandError, PreconditionError
from ..lib.wireguard import interface_is_up, quick, show_interface

logger = logging.getLogger(__name__)


class BringUpInterfaceStep:
    step_id = "wg_20_bring_up_interface"
    title = "Bring up the WireGuard interface"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return interface_is_up(ctx.cfg.vpn_interface, sudo=ctx.sudo, dry_run=ctx.dry_run)

    def run(self, ctx: ProvisionCtx) -> None:
        iface = ctx.cfg.vpn_interface
        if interface_is_up(iface, sudo=ctx.sudo, dry_run=ctx.dry_run):
            logger.warning("Interface %s is already up. Stopping it first...", iface)
            quick("down", iface, sudo=ctx.sudo, check=False, dry_run=ctx.dry_run)

        try:
            quick("up", iface, sudo=ctx.sudo, dry_run=ctx.dry_run)
        except CommandError as e:
            raise PreconditionError(f"Failed to bring up WireGuard interface {iface}") from e

        if ctx.dry_run:
            return
        if not interface_is_up(iface, sudo=ctx.sudo):
            raise PreconditionError(f"WireGuard interface {iface} is not active.")
        for line in show_interface(iface, sudo=ctx.sudo).splitlines():
            logger.info("  %s", line)
