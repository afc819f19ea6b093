from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ProvisionConfig
from .errors import PreconditionError
from .lib.pkg import have_commands
from .lib.prompt import ConsolePrompter, Prompter
from .lib.wireguard import management_commands
from .logging_utils import DEFAULT_LOG_PATH, configure_logging, log_success
from .main import DEFAULT_STATE_PATH, common_parser, execute, exit_code, make_prompter
from .pipeline import Step
from .steps import BringUpInterfaceStep, CheckConnectivityStep, EnableServiceStep, WriteInterfaceConfigStep

logger = logging.getLogger(__name__)

INTRO = """\
WireGuard configuration setup.
This will write the interface configuration from a pasted peer file,
bring the interface up and enable it on boot."""


def build_steps() -> List[Step]:
    return [
        WriteInterfaceConfigStep(),
        BringUpInterfaceStep(),
        CheckConnectivityStep(),
        EnableServiceStep(),
    ]


def check_wireguard_installed(cfg: ProvisionConfig) -> None:
    logger.info("Checking if WireGuard is installed...")
    if not have_commands("wg-quick"):
        raise PreconditionError(
            "WireGuard is not installed. Please install WireGuard first (gateway-provision)."
        )
    if not have_commands("wg"):
        raise PreconditionError("WireGuard tools are not installed properly.")
    log_success(logger, "WireGuard is installed.")


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    dry_run: bool = False,
    prompter: Optional[Prompter] = None,
) -> Dict[str, Any]:
    configure_logging(log_path=log_path)
    ctx = execute(
        intro=INTRO,
        steps=build_steps(),
        config_path=config_path,
        state_path=state_path,
        workdir=".",
        dry_run=dry_run,
        prompter=prompter or ConsolePrompter(),
        preflight=check_wireguard_installed,
    )

    log_success(logger, "WireGuard configuration completed successfully!")
    logger.info("=== WireGuard Management Commands ===")
    conf = str(Path(ctx.cfg.wireguard_dir) / f"{ctx.cfg.vpn_interface}.conf")
    for line in management_commands(ctx.cfg.vpn_interface, conf):
        logger.info("  %s", line)
    return ctx.state


def main(argv: Optional[list[str]] = None) -> int:
    p = common_parser("gateway-wg0")
    args = p.parse_args(argv)
    return exit_code(
        lambda: run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            dry_run=bool(args.dry_run),
            prompter=make_prompter(bool(args.yes)),
        )
    )


if __name__ == "__main__":
    raise SystemExit(main())
