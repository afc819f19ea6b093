from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from ..errors import PreconditionError
from .command import run_cmd

logger = logging.getLogger(__name__)

_GRUB_DEFAULT_RE = re.compile(r"^GRUB_DEFAULT=.*$", re.MULTILINE)


def render_custom_entry(
    *,
    title: str,
    kernel_release: str,
    root_uuid: str,
    cmdline: str,
) -> str:
    """Render a 40_custom menuentry stanza for the installed kernel."""

    return (
        "\n"
        "# Custom Wireguard Kernel Entry\n"
        f"menuentry '{title}' --class debian --class gnu-linux --class gnu --class os {{\n"
        "        load_video\n"
        "        insmod gzio\n"
        "        if [ x$grub_platform = xxen ]; then insmod xzio; insmod lzopio; fi\n"
        "        insmod part_gpt\n"
        "        insmod ext2\n"
        f"        search --no-floppy --fs-uuid --set=root {root_uuid}\n"
        f"        echo    'Loading {_short_title(title)}...'\n"
        f"        linux   /boot/vmlinuz-{kernel_release} root=UUID={root_uuid} ro  {cmdline}\n"
        "        echo    'Loading initial ramdisk ...'\n"
        f"        initrd  /boot/initrd.img-{kernel_release}\n"
        "}\n"
    )


def _short_title(title: str) -> str:
    # "Debian GNU/Linux, with Linux 5.15.32 [Wireguard]" -> "Linux 5.15.32 [Wireguard]"
    _, sep, tail = title.partition(", with ")
    return tail if sep else title


def has_entry(custom_text: str, title: str) -> bool:
    return f"menuentry '{title}'" in custom_text


def grub_default_line(title: str) -> str:
    return f'GRUB_DEFAULT="{title}"'


def set_grub_default(grub_text: str, title: str) -> str:
    """Point GRUB_DEFAULT at ``title``; append the line if it is missing."""

    line = grub_default_line(title)
    if _GRUB_DEFAULT_RE.search(grub_text):
        return _GRUB_DEFAULT_RE.sub(lambda _: line, grub_text, count=1)
    if grub_text and not grub_text.endswith("\n"):
        grub_text += "\n"
    return grub_text + line + "\n"


def default_selects(grub_text: str, title: str) -> bool:
    m = _GRUB_DEFAULT_RE.search(grub_text)
    return bool(m) and m.group(0).strip() == grub_default_line(title)


def find_installed_kernel(boot_dir: str, version: str) -> str:
    """Return the release string of the installed ``vmlinuz-<version>-*``."""

    images = sorted(Path(boot_dir).glob(f"vmlinuz-{version}-*"))
    if not images:
        raise PreconditionError(f"Could not find an installed kernel matching {boot_dir}/vmlinuz-{version}-*")
    release = images[0].name[len("vmlinuz-"):]
    logger.info("Found kernel version: %s", release)
    return release


def root_uuid(*, dry_run: bool = False) -> str:
    r = run_cmd(["findmnt", "-n", "-o", "UUID", "/"], check=False, dry_run=dry_run)
    uuid = (r.stdout or "").strip()
    if dry_run:
        return uuid or "00000000-0000-0000-0000-000000000000"
    if not r.ok or not uuid:
        raise PreconditionError("Could not determine root filesystem UUID")
    return uuid


def update_grub(*, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    logger.info("Updating GRUB configuration...")
    run_cmd([*sudo, "update-grub"], dry_run=dry_run)
