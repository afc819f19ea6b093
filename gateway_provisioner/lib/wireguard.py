from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Sequence

from ..errors import ValidationError
from .command import run_cmd

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\s*\[(?P<name>[A-Za-z]+)\]\s*$")
_KEY_RE = re.compile(r"^\s*(?P<key>[A-Za-z]+)\s*=\s*(?P<value>.*?)\s*$")


def normalize_config(text: str) -> str:
    """Strip trailing blank lines and end with exactly one newline."""

    return text.rstrip() + "\n" if text.strip() else ""


def sections(text: str) -> list[str]:
    out: list[str] = []
    for line in text.splitlines():
        m = _SECTION_RE.match(line)
        if m:
            out.append(m.group("name"))
    return out


def validate_peer_config(text: str) -> None:
    if not text.strip():
        raise ValidationError("No configuration provided.")
    found = sections(text)
    if "Interface" not in found:
        raise ValidationError("Invalid configuration format. Missing [Interface] section.")
    if "Peer" not in found:
        raise ValidationError("Invalid configuration format. Missing [Peer] section.")


def summarize(text: str) -> Dict[str, Optional[str]]:
    """First Address and Endpoint values, for the operator summary."""

    summary: Dict[str, Optional[str]] = {"Address": None, "Endpoint": None}
    for line in text.splitlines():
        m = _KEY_RE.match(line)
        if m and m.group("key") in summary and summary[m.group("key")] is None:
            summary[m.group("key")] = m.group("value").replace(" ", "")
    return summary


def interface_is_up(iface: str, *, sudo: Sequence[str] = (), dry_run: bool = False) -> bool:
    if dry_run:
        return False
    return run_cmd([*sudo, "wg", "show", iface], check=False).ok


def show_interface(iface: str, *, sudo: Sequence[str] = ()) -> str:
    return run_cmd([*sudo, "wg", "show", iface], check=False).stdout


def quick(action: str, iface: str, *, sudo: Sequence[str] = (), check: bool = True, dry_run: bool = False) -> bool:
    return run_cmd([*sudo, "wg-quick", action, iface], check=check, dry_run=dry_run).ok


def service_name(iface: str) -> str:
    return f"wg-quick@{iface}"


def service_enabled(iface: str, *, dry_run: bool = False) -> bool:
    if dry_run:
        return False
    return run_cmd(["systemctl", "is-enabled", service_name(iface)], check=False).ok


def ping(host: str, *, count: int = 3, timeout_s: int = 5) -> bool:
    return run_cmd(["ping", "-c", str(count), "-W", str(timeout_s), host], check=False).ok


def management_commands(iface: str, config_path: str) -> list[str]:
    svc = service_name(iface)
    return [
        f"View interface status:    wg show {iface}",
        f"Stop interface:           wg-quick down {iface}",
        f"Start interface:          wg-quick up {iface}",
        f"Restart interface:        wg-quick down {iface} && wg-quick up {iface}",
        f"Check service status:     systemctl status {svc}",
        f"View service logs:        journalctl -u {svc} -f",
        f"Configuration file:       {config_path}",
    ]
