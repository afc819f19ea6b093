"""Post-reboot verification of the Wireguard kernel and tooling."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import ProvisionConfig, load_config
from .lib.command import run_cmd
from .lib.files import read_text
from .lib.grub import default_selects, has_entry
from .lib.pkg import have_commands
from .lib.privilege import is_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging, log_success
from .main import common_parser, exit_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    name: str
    passed: bool
    message: str


def check_kernel_release(cfg: ProvisionConfig, release: Optional[str] = None) -> CheckResult:
    release = release or platform.release()
    logger.info("Current kernel version: %s", release)
    if cfg.kernel_version in release:
        return CheckResult("kernel release", True, "Running custom kernel with Wireguard support")
    return CheckResult(
        "kernel release",
        False,
        f"Not running the expected Wireguard kernel (expected {cfg.kernel_version}-*, current {release})",
    )


def check_module(sudo: Sequence[str]) -> CheckResult:
    ok = run_cmd([*sudo, "modprobe", "wireguard"], check=False).ok
    return CheckResult(
        "wireguard module",
        ok,
        "Wireguard kernel module loaded successfully" if ok else "Failed to load Wireguard kernel module",
    )


def check_tool(name: str, label: str) -> CheckResult:
    ok = have_commands(name)
    return CheckResult(label, ok, f"{label} is installed and available" if ok else f"{label} not found")


def check_grub_default(cfg: ProvisionConfig) -> CheckResult:
    text = read_text(cfg.grub_default)
    if text is None:
        return CheckResult("grub default", False, "GRUB configuration file not found")
    ok = default_selects(text, cfg.grub_title)
    return CheckResult(
        "grub default",
        ok,
        "GRUB is configured to boot Wireguard kernel by default" if ok else "GRUB default is not set to Wireguard kernel",
    )


def check_grub_entry(cfg: ProvisionConfig) -> CheckResult:
    text = read_text(cfg.grub_custom)
    if text is None:
        return CheckResult("grub entry", False, "Custom GRUB configuration file not found")
    ok = has_entry(text, cfg.grub_title)
    return CheckResult(
        "grub entry",
        ok,
        "Custom Wireguard GRUB entry found" if ok else "Custom Wireguard GRUB entry not found",
    )


def check_boot_files(cfg: ProvisionConfig) -> CheckResult:
    boot = Path(cfg.boot_dir)
    v = cfg.kernel_version
    ok = any(boot.glob(f"vmlinuz-{v}-*")) and any(boot.glob(f"initrd.img-{v}-*"))
    return CheckResult(
        "kernel files",
        ok,
        f"Wireguard kernel files found in {boot}" if ok else f"Wireguard kernel files missing from {boot}",
    )


def check_interface_creation(sudo: Sequence[str]) -> CheckResult:
    ok = run_cmd([*sudo, "ip", "link", "add", "dev", "wg-test", "type", "wireguard"], check=False).ok
    if ok:
        run_cmd([*sudo, "ip", "link", "delete", "dev", "wg-test"], check=False)
    return CheckResult(
        "interface creation",
        ok,
        "Wireguard interface creation test passed" if ok else "Failed to create Wireguard test interface",
    )


def run_checks(cfg: ProvisionConfig, *, sudo: Sequence[str] = ()) -> List[CheckResult]:
    checks: List[Callable[[], CheckResult]] = [
        lambda: check_kernel_release(cfg),
        lambda: check_module(sudo),
        lambda: check_tool("wg", "Wireguard tools"),
        lambda: check_tool("resolvconf", "Resolvconf"),
        lambda: check_grub_default(cfg),
        lambda: check_grub_entry(cfg),
        lambda: check_boot_files(cfg),
        lambda: check_interface_creation(sudo),
    ]
    results: List[CheckResult] = []
    for check in checks:
        r = check()
        if r.passed:
            log_success(logger, r.message)
        else:
            logger.error(r.message)
        results.append(r)
        if r.name == "Wireguard tools" and r.passed:
            version = run_cmd(["wg", "--version"], check=False).stdout.strip()
            logger.info("Wireguard version: %s", version or "Unknown")
    return results


def report(results: Sequence[CheckResult]) -> bool:
    """Log the summary; True only when every check passed."""

    passed = sum(1 for r in results if r.passed)
    total = len(results)
    logger.info("Checks passed: %d/%d", passed, total)
    if passed == total:
        log_success(logger, "All verification checks passed! Your Wireguard installation is working correctly.")
        return True
    if passed > total // 2:
        logger.warning("Most checks passed, but some issues were found. Please review the failed checks above.")
    else:
        logger.error("Multiple verification checks failed. Please review the installation or run it again.")
    return False


def run(*, config_path: Optional[str] = None, log_path: str = DEFAULT_LOG_PATH) -> List[CheckResult]:
    configure_logging(log_path=log_path)
    cfg = load_config(config_path)
    results = run_checks(cfg, sudo=[] if is_root() else ["sudo"])
    report(results)
    return results


def main(argv: Optional[list[str]] = None) -> int:
    p = common_parser("gateway-verify")
    args = p.parse_args(argv)

    results: List[CheckResult] = []
    code = exit_code(lambda: results.extend(run(config_path=args.config, log_path=args.log)))
    if code:
        return code
    return 0 if all(r.passed for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
