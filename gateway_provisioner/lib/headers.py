from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import PreconditionError
from .command import run_cmd
from .files import copy_tree, make_dir, symlink

logger = logging.getLogger(__name__)

PREFIX = "linux-headers-"


@dataclass(frozen=True)
class HeadersPackage:
    path: Path
    version: str


def find_headers_package(package_dir: str) -> HeadersPackage:
    candidates = sorted(p for p in Path(package_dir).glob(f"**/{PREFIX}*") if p.is_dir())
    if not candidates:
        raise PreconditionError(f"No kernel headers directory found under {package_dir}")
    first = candidates[0]
    return HeadersPackage(path=first, version=first.name[len(PREFIX):])


def build_link_ok(modules_dir: str, release: str) -> bool:
    """True when /lib/modules/<release>/build is a symlink to a usable tree."""

    link = Path(modules_dir) / release / "build"
    if not link.is_symlink():
        return False
    target = link.resolve()
    return target.is_dir() and (target / "Makefile").exists()


def install_headers(
    pkg: HeadersPackage,
    *,
    usr_src: str,
    modules_dir: str,
    release: str,
    sudo: Sequence[str] = (),
    dry_run: bool = False,
) -> str:
    """Install a headers tree and the module build symlinks; return the install dir."""

    install_dir = str(Path(usr_src) / f"{PREFIX}{pkg.version}")
    logger.info("Installing kernel headers %s -> %s", pkg.path, install_dir)

    make_dir(install_dir, sudo=sudo, dry_run=dry_run)
    copy_tree(str(pkg.path), install_dir, sudo=sudo, dry_run=dry_run)
    if sudo:
        run_cmd([*sudo, "chown", "-R", "root:root", install_dir], dry_run=dry_run)

    logger.info("Creating symlinks for kernel: %s", release)
    release_dir = str(Path(modules_dir) / release)
    make_dir(release_dir, sudo=sudo, dry_run=dry_run)
    symlink(install_dir, f"{release_dir}/build", sudo=sudo, dry_run=dry_run)
    symlink(install_dir, f"{release_dir}/source", sudo=sudo, dry_run=dry_run)
    symlink(install_dir, str(Path(usr_src) / f"{PREFIX}compulab"), sudo=sudo, dry_run=dry_run)
    if release != pkg.version:
        symlink(install_dir, str(Path(usr_src) / f"{PREFIX}{release}"), sudo=sudo, dry_run=dry_run)
    return install_dir


def headers_complete(install_dir: str) -> bool:
    d = Path(install_dir)
    return (d / "include/linux/version.h").exists() and (d / "Makefile").exists()
