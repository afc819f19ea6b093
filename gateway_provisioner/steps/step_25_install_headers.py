from __future__ import annotations

import logging
import platform

from ..context import ProvisionCtx
from ..lib.headers import build_link_ok, find_headers_package, headers_complete, install_headers
from ..logging_utils import log_success

logger = logging.getLogger(__name__)


class InstallHeadersStep:
    step_id = "25_install_headers"
    title = "Step 2b: Install kernel headers"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        if not ctx.cfg.headers_package_dir:
            return False
        return build_link_ok(ctx.cfg.modules_dir, platform.release())

    def run(self, ctx: ProvisionCtx) -> None:
        package_dir = ctx.cfg.headers_package_dir
        if not package_dir:
            logger.info("No headers.package_dir configured; skipping headers install")
            return

        pkg = find_headers_package(package_dir)
        release = platform.release()
        install_dir = install_headers(
            pkg,
            usr_src=ctx.cfg.usr_src,
            modules_dir=ctx.cfg.modules_dir,
            release=release,
            sudo=ctx.sudo,
            dry_run=ctx.dry_run,
        )
        ctx.decisions["headers_version"] = pkg.version

        if ctx.dry_run:
            return
        if headers_complete(install_dir):
            log_success(logger, "Headers installed with full build environment: %s", install_dir)
        else:
            logger.warning("Headers installation may be incomplete (missing version.h or Makefile)")
            ctx.warn({"headers": "incomplete", "install_dir": install_dir})
        if not build_link_ok(ctx.cfg.modules_dir, release):
            logger.warning("Module build symlink may be missing for %s", release)
