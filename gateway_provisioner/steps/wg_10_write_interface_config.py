from __future__ import annotations

import logging
import time
from pathlib import Path

from ..context import ProvisionCtx
from ..errors import ValidationError
from ..lib.files import copy_file, make_dir, read_text, write_text
from ..lib.wireguard import normalize_config, summarize, validate_peer_config
from ..logging_utils import log_success

logger = logging.getLogger(__name__)

PASTE_INSTRUCTIONS = """\
=== WireGuard Peer Configuration Input ===
  1. Log into the VPN server
  2. Create a new peer configuration
  3. Copy the Peer Configuration File contents
  4. Paste the contents below

The configuration should look similar to:
  [Interface]
  PrivateKey = ...
  Address = ...
  DNS = ...
  [Peer]
  PublicKey = ...
  Endpoint = ...
  AllowedIPs = ...

When finished, press Ctrl+D on a new line to complete input:"""


def config_path(ctx: ProvisionCtx) -> str:
    return str(Path(ctx.cfg.wireguard_dir) / f"{ctx.cfg.vpn_interface}.conf")


class WriteInterfaceConfigStep:
    step_id = "wg_10_write_interface_config"
    title = "Write the WireGuard interface configuration"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        text = read_text(config_path(ctx), sudo=ctx.sudo)
        if not text:
            return False
        try:
            validate_peer_config(text)
        except ValidationError:
            return False
        return True

    def run(self, ctx: ProvisionCtx) -> None:
        path = config_path(ctx)
        make_dir(ctx.cfg.wireguard_dir, sudo=ctx.sudo, mode=0o700, dry_run=ctx.dry_run)

        if Path(path).exists():
            backup = f"{path}.backup.{time.strftime('%Y%m%d_%H%M%S')}"
            logger.warning("Existing configuration found. Creating backup...")
            copy_file(path, backup, sudo=ctx.sudo, dry_run=ctx.dry_run)
            log_success(logger, "Backup created: %s", backup)

        text = normalize_config(ctx.prompter.read_block(PASTE_INSTRUCTIONS))
        validate_peer_config(text)

        write_text(path, text, sudo=ctx.sudo, mode=0o600, dry_run=ctx.dry_run)
        log_success(logger, "Configuration saved to: %s", path)

        summary = summarize(text)
        logger.info("Configuration summary:")
        logger.info("  IP Address: %s", summary["Address"] or "-")
        logger.info("  Endpoint: %s", summary["Endpoint"] or "-")
        ctx.decisions["vpn_endpoint"] = summary["Endpoint"]
