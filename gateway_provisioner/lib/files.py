"""File writes that may need elevated privileges.

With an empty sudo prefix (running as root, or in tests against a scratch
tree) files are written directly; otherwise the write goes through
``sudo tee`` / ``sudo cp``.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def write_text(
    path: str,
    contents: str,
    *,
    sudo: Sequence[str] = (),
    append: bool = False,
    mode: Optional[int] = None,
    dry_run: bool = False,
) -> None:
    if dry_run:
        logger.info("Would %s %s", "append to" if append else "write", path)
        return

    if not sudo:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a" if append else "w", encoding="utf-8") as f:
            f.write(contents)
        if mode is not None:
            os.chmod(p, mode)
        return

    argv = [*sudo, "tee"]
    if append:
        argv.append("-a")
    run_cmd([*argv, path], input_text=contents)
    if mode is not None:
        run_cmd([*sudo, "chmod", f"{mode:o}", path])


def read_text(path: str, *, sudo: Sequence[str] = ()) -> Optional[str]:
    """Return file contents, or None if the file does not exist."""

    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except PermissionError:
        if not sudo:
            raise
    r = run_cmd([*sudo, "cat", path], check=False)
    return r.stdout if r.ok else None


def copy_file(src: str, dst: str, *, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return
    if sudo:
        run_cmd([*sudo, "cp", "-p", src, dst])
    else:
        shutil.copy2(src, dst)


def make_dir(path: str, *, sudo: Sequence[str] = (), mode: Optional[int] = None, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would create directory %s", path)
        return
    if sudo:
        run_cmd([*sudo, "mkdir", "-p", path])
        if mode is not None:
            run_cmd([*sudo, "chmod", f"{mode:o}", path])
        return
    Path(path).mkdir(parents=True, exist_ok=True)
    if mode is not None:
        os.chmod(path, mode)


def copy_tree(src: str, dst: str, *, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(src)

    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return

    if sudo:
        run_cmd([*sudo, "mkdir", "-p", str(d)])
        run_cmd([*sudo, "cp", "-a", f"{s}/.", str(d)])
        return

    d.mkdir(parents=True, exist_ok=True)
    for item in s.rglob("*"):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_symlink():
            out.parent.mkdir(parents=True, exist_ok=True)
            if out.is_symlink() or out.exists():
                out.unlink()
            out.symlink_to(os.readlink(item))
        elif item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)


def symlink(target: str, link: str, *, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    """Equivalent of ``ln -sfn target link``."""

    if dry_run:
        logger.info("Would link %s -> %s", link, target)
        return
    if sudo:
        run_cmd([*sudo, "ln", "-sfn", target, link])
        return
    p = Path(link)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.is_symlink() or p.exists():
        p.unlink()
    p.symlink_to(target)
