from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .acquisition.artifacts import ArtifactSet

DEFAULT_BASE_URL = "https://github.com/dlinhle/compulab-imx8plus-linux-kernel-wireguard/raw/main"
DEFAULT_KERNEL_VERSION = "5.15.32"
DEFAULT_COMBINED = f"compulab-kernel-{DEFAULT_KERNEL_VERSION}-wireguard.tar.xz"

# Package names per package manager; order matters.
DEFAULT_VPN_PACKAGES: Dict[str, List[str]] = {
    "apt": ["resolvconf", "wireguard", "wireguard-tools"],
    "dnf": ["wireguard-tools"],
    "yum": ["wireguard-tools"],
    "pacman": ["wireguard-tools", "openresolv"],
}


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    # --- kernel artifact -------------------------------------------------

    @property
    def kernel_version(self) -> str:
        return str(self._section("kernel").get("version") or DEFAULT_KERNEL_VERSION)

    @property
    def grub_title(self) -> str:
        return str(
            self._section("kernel").get("grub_title")
            or f"Debian GNU/Linux, with Linux {self.kernel_version} [Wireguard]"
        )

    @property
    def kernel_cmdline(self) -> str:
        return str(
            self._section("kernel").get("cmdline")
            or "rootwait console=tty1 console=ttymxc1,115200n8 compulab=yes"
        )

    @property
    def artifact_set(self) -> ArtifactSet:
        art = self._section("artifact")
        combined = str(art.get("combined") or DEFAULT_COMBINED)
        parts = art.get("parts") or [f"{combined}.partaa", f"{combined}.partab"]
        return ArtifactSet(
            name=str(art.get("name") or "kernel"),
            base_url=str(art.get("base_url") or DEFAULT_BASE_URL),
            parts=tuple(str(p) for p in parts),
            combined=combined,
            parts_manifest=str(art.get("parts_manifest") or "SHA256SUMS-PARTS"),
            combined_manifest=str(art.get("combined_manifest") or "SHA256SUMS"),
        )

    # --- acquisition / fetch ---------------------------------------------

    @property
    def keep_parts(self) -> bool:
        return bool(self._section("acquisition").get("keep_parts", False))

    @property
    def keep_combined(self) -> bool:
        return bool(self._section("acquisition").get("keep_combined", True))

    @property
    def fetch_attempts(self) -> int:
        return int(self._section("fetch").get("attempts", 3))

    @property
    def fetch_timeout_s(self) -> float:
        return float(self._section("fetch").get("timeout_s", 60))

    @property
    def fetch_backoff_s(self) -> float:
        return float(self._section("fetch").get("backoff_s", 2))

    # --- system paths ----------------------------------------------------

    def _path(self, key: str, default: str) -> str:
        return str(self._section("paths").get(key) or default)

    @property
    def install_root(self) -> str:
        return self._path("install_root", "/linux-compulab")

    @property
    def boot_dir(self) -> str:
        return self._path("boot_dir", "/boot")

    @property
    def grub_custom(self) -> str:
        return self._path("grub_custom", "/etc/grub.d/40_custom")

    @property
    def grub_default(self) -> str:
        return self._path("grub_default", "/etc/default/grub")

    @property
    def usr_src(self) -> str:
        return self._path("usr_src", "/usr/src")

    @property
    def modules_dir(self) -> str:
        return self._path("modules_dir", "/lib/modules")

    @property
    def wireguard_dir(self) -> str:
        return self._path("wireguard_dir", "/etc/wireguard")

    # --- headers / vpn ---------------------------------------------------

    @property
    def headers_package_dir(self) -> Optional[str]:
        v = self._section("headers").get("package_dir")
        return str(v) if v else None

    @property
    def vpn_interface(self) -> str:
        return str(self._section("vpn").get("interface") or "wg0")

    def vpn_packages(self, manager: str) -> List[str]:
        configured = (self._section("vpn").get("packages") or {}).get(manager)
        if configured:
            return [str(p) for p in configured]
        return list(DEFAULT_VPN_PACKAGES.get(manager, ["wireguard-tools"]))


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load a YAML config; no path means built-in defaults."""

    if not path:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("provision config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return ProvisionConfig(raw=raw)
