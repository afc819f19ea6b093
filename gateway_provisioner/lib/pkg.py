from __future__ import annotations

import logging
import shutil
from typing import Optional, Sequence

from ..errors import PreconditionError
from .command import run_cmd

logger = logging.getLogger(__name__)

# Detection order; first hit wins.
SUPPORTED_MANAGERS = ("apt", "dnf", "yum", "pacman")


def detect_package_manager() -> str:
    for name in SUPPORTED_MANAGERS:
        if shutil.which(name):
            logger.info("Detected package manager: %s", name)
            return name
    raise PreconditionError(
        f"Unsupported package manager (looked for {', '.join(SUPPORTED_MANAGERS)}). "
        "Please install dependencies manually."
    )


def install_argv(manager: str, packages: Sequence[str]) -> list[str]:
    if manager == "apt":
        return ["apt", "install", "-y", *packages]
    if manager in {"dnf", "yum"}:
        return [manager, "install", "-y", *packages]
    if manager == "pacman":
        return ["pacman", "-Sy", "--needed", "--noconfirm", *packages]
    raise PreconditionError(f"Unsupported package manager: {manager}")


def install_packages(
    packages: Sequence[str],
    *,
    manager: Optional[str] = None,
    sudo: Sequence[str] = (),
    dry_run: bool = False,
) -> str:
    """Install packages with the detected (or given) manager; return the manager used."""

    if not packages:
        return manager or ""
    pm = manager or detect_package_manager()
    if pm == "apt":
        run_cmd([*sudo, "apt", "update"], capture=False, dry_run=dry_run)
    run_cmd([*sudo, *install_argv(pm, packages)], capture=False, dry_run=dry_run)
    return pm


def have_commands(*names: str) -> bool:
    return all(shutil.which(n) for n in names)
