from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .acquisition.fetch import Fetcher, HttpFetcher
from .config import ProvisionConfig, load_config
from .context import ProvisionCtx
from .errors import OperatorCancelled, ProvisionError
from .lib.privilege import ensure_privileges
from .lib.prompt import AssumeYesPrompter, ConsolePrompter, Prompter, require_continue
from .logging_utils import DEFAULT_LOG_PATH, configure_logging, log_success
from .pipeline import Step, run_pipeline
from .state_store import ensure_defaults, load_state, record_error, save_state
from .steps import (
    AcquireKernelStep,
    CheckVpnToolsStep,
    CreateGrubEntryStep,
    ExtractKernelStep,
    FinalizeRebootStep,
    InstallHeadersStep,
    InstallKernelStep,
    InstallVpnToolsStep,
    SetDefaultBootStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = ".gateway-provisioner/state.json"

INTRO = """\
Wireguard installation for Node G5 (CompuLab IOT-GATE-IMX8PLUS).
This will:
  1. Download the custom Linux kernel with Wireguard support
  2. Install the kernel and configure GRUB
  3. Set the Wireguard kernel as the default boot option
  4. Install Wireguard tools and dependencies
Prerequisites: Debian 11, internet connection, sudo privileges, 2GB free disk space."""


def build_steps() -> List[Step]:
    return [
        AcquireKernelStep(),
        ExtractKernelStep(),
        InstallHeadersStep(),
        InstallKernelStep(),
        CreateGrubEntryStep(),
        SetDefaultBootStep(),
        InstallVpnToolsStep(),
        CheckVpnToolsStep(),
        FinalizeRebootStep(),
    ]


def make_prompter(assume_yes: bool) -> Prompter:
    return AssumeYesPrompter() if assume_yes else ConsolePrompter()


def make_fetcher(cfg: ProvisionConfig) -> Fetcher:
    return HttpFetcher(
        timeout_s=cfg.fetch_timeout_s,
        attempts=cfg.fetch_attempts,
        backoff_s=cfg.fetch_backoff_s,
    )


def execute(
    *,
    intro: str,
    steps: Sequence[Step],
    config_path: Optional[str],
    state_path: str,
    workdir: str,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    prompter: Prompter,
    fetcher: Optional[Fetcher] = None,
    preflight: Optional[Callable[[ProvisionConfig], None]] = None,
) -> ProvisionCtx:
    """Shared program body: gate, privilege check, pipeline, persisted state."""

    try:
        state = ensure_defaults(load_state(state_path))
    except (OSError, ValueError) as e:
        logger.error("Unreadable state file %s: %s", state_path, e)
        raise ProvisionError(f"Unreadable state file {state_path}") from e

    try:
        cfg = load_config(config_path)
        require_continue(prompter, intro)
        if preflight is not None:
            preflight(cfg)
        sudo = ensure_privileges(dry_run=dry_run)

        ctx = ProvisionCtx(
            cfg=cfg,
            prompter=prompter,
            workdir=Path(workdir).resolve(),
            fetcher=fetcher if fetcher is not None else make_fetcher(cfg),
            sudo=sudo,
            dry_run=dry_run,
            state=state,
        )
        result = run_pipeline(ctx, steps, start_at=start_at, stop_after=stop_after)
        logger.debug("Ran %s; skipped %s", result.ran_steps, result.skipped_steps)
        return ctx
    except OperatorCancelled:
        raise
    except Exception as e:
        logger.exception("Provisioning failed: %s", e)
        record_error(state, e)
        raise
    finally:
        save_state(state_path, state)


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    workdir: str = ".",
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    prompter: Optional[Prompter] = None,
    fetcher: Optional[Fetcher] = None,
) -> Dict[str, Any]:
    """Run the kernel + VPN tools install pipeline, persisting state."""

    configure_logging(log_path=log_path)
    ctx = execute(
        intro=INTRO,
        steps=build_steps(),
        config_path=config_path,
        state_path=state_path,
        workdir=workdir,
        start_at=start_at,
        stop_after=stop_after,
        dry_run=dry_run,
        prompter=prompter or ConsolePrompter(),
        fetcher=fetcher,
    )
    log_success(logger, "Custom Linux kernel with Wireguard support has been installed")
    return ctx.state


def common_parser(prog: str) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=prog)
    p.add_argument("--config", default=None, help="Path to provisioning config (YAML)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to provisioning state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("--yes", action="store_true", help="Accept the default answer at every prompt")
    return p


def exit_code(fn: Callable[[], Any]) -> int:
    try:
        fn()
        return 0
    except OperatorCancelled as e:
        logger.info("%s", e)
        return 0
    except (ProvisionError, OSError, ValueError):
        # Already logged where it was raised.
        return 1
    except KeyboardInterrupt:
        return 130


def main(argv: Optional[list[str]] = None) -> int:
    p = common_parser("gateway-provision")
    p.add_argument("--workdir", default=".", help="Directory for downloaded kernel artifacts")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 30_install_kernel)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")

    args = p.parse_args(argv)

    return exit_code(
        lambda: run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            workdir=args.workdir,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
            prompter=make_prompter(bool(args.yes)),
        )
    )


if __name__ == "__main__":
    raise SystemExit(main())
