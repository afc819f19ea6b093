from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import detect_package_manager, have_commands, install_packages

logger = logging.getLogger(__name__)


class InstallVpnToolsStep:
    step_id = "60_install_vpn_tools"
    title = "Step 6: Install Wireguard tools"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return have_commands("wg", "resolvconf")

    def run(self, ctx: ProvisionCtx) -> None:
        manager = detect_package_manager()
        packages = ctx.cfg.vpn_packages(manager)
        logger.info("Installing %s", ", ".join(packages))
        install_packages(packages, manager=manager, sudo=ctx.sudo, dry_run=ctx.dry_run)
        ctx.decisions["package_manager"] = manager
