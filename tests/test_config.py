from pathlib import Path

import pytest

from gateway_provisioner.config import ProvisionConfig, load_config


def test_defaults():
    cfg = load_config(None)
    assert cfg.kernel_version == "5.15.32"
    assert cfg.grub_title == "Debian GNU/Linux, with Linux 5.15.32 [Wireguard]"
    assert cfg.keep_parts is False
    assert cfg.keep_combined is True
    assert cfg.fetch_attempts == 3
    assert cfg.vpn_interface == "wg0"
    assert cfg.vpn_packages("apt") == ["resolvconf", "wireguard", "wireguard-tools"]

    art = cfg.artifact_set
    assert art.combined == "compulab-kernel-5.15.32-wireguard.tar.xz"
    assert art.ordered_parts == (
        "compulab-kernel-5.15.32-wireguard.tar.xz.partaa",
        "compulab-kernel-5.15.32-wireguard.tar.xz.partab",
    )
    assert art.url_for("SHA256SUMS").startswith("https://github.com/dlinhle/")


def test_overrides(tmp_path: Path):
    p = tmp_path / "provision.yaml"
    p.write_text(
        "kernel:\n"
        "  version: '6.1.0'\n"
        "acquisition:\n"
        "  keep_parts: true\n"
        "paths:\n"
        "  boot_dir: /tmp/boot\n"
        "vpn:\n"
        "  packages:\n"
        "    apt: [wireguard-tools]\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.kernel_version == "6.1.0"
    assert "6.1.0" in cfg.grub_title
    assert cfg.keep_parts is True
    assert cfg.boot_dir == "/tmp/boot"
    assert cfg.grub_default == "/etc/default/grub"
    assert cfg.vpn_packages("apt") == ["wireguard-tools"]
    assert cfg.vpn_packages("pacman") == ["wireguard-tools", "openresolv"]


def test_example_config_loads():
    example = Path(__file__).resolve().parent.parent / "provision_config.example.yaml"
    cfg = load_config(str(example))
    assert cfg.artifact_set == ProvisionConfig().artifact_set
    assert cfg.headers_package_dir is None


def test_load_config_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    json_file = tmp_path / "c.json"
    json_file.write_text("{}")
    with pytest.raises(ValueError):
        load_config(str(json_file))

    scalar = tmp_path / "c.yaml"
    scalar.write_text("just a string\n")
    with pytest.raises(ValueError):
        load_config(str(scalar))


def test_malformed_yaml_is_value_error(tmp_path: Path):
    bad = tmp_path / "c.yaml"
    bad.write_text("paths: [unclosed\n")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_config(str(bad))
