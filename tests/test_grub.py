from pathlib import Path

import pytest

from gateway_provisioner.errors import PreconditionError
from gateway_provisioner.lib import grub
from gateway_provisioner.lib.command import CmdResult

TITLE = "Debian GNU/Linux, with Linux 5.15.32 [Wireguard]"


def test_render_custom_entry():
    entry = grub.render_custom_entry(
        title=TITLE,
        kernel_release="5.15.32-compulab",
        root_uuid="1234-abcd",
        cmdline="rootwait compulab=yes",
    )
    assert entry.startswith("\n# Custom Wireguard Kernel Entry\n")
    assert f"menuentry '{TITLE}' --class debian" in entry
    assert "search --no-floppy --fs-uuid --set=root 1234-abcd" in entry
    assert "echo    'Loading Linux 5.15.32 [Wireguard]...'" in entry
    assert "linux   /boot/vmlinuz-5.15.32-compulab root=UUID=1234-abcd ro  rootwait compulab=yes" in entry
    assert "initrd  /boot/initrd.img-5.15.32-compulab" in entry
    assert entry.endswith("}\n")
    assert grub.has_entry(entry, TITLE)
    assert not grub.has_entry(entry, "Something else")


def test_set_grub_default_replaces_first_line():
    text = 'GRUB_DEFAULT=0\nGRUB_TIMEOUT=5\n'
    out = grub.set_grub_default(text, TITLE)
    assert out == f'GRUB_DEFAULT="{TITLE}"\nGRUB_TIMEOUT=5\n'
    assert grub.default_selects(out, TITLE)
    assert grub.set_grub_default(out, TITLE) == out


def test_set_grub_default_appends_when_missing():
    out = grub.set_grub_default("GRUB_TIMEOUT=5", TITLE)
    assert out == f'GRUB_TIMEOUT=5\nGRUB_DEFAULT="{TITLE}"\n'
    assert not grub.default_selects("GRUB_TIMEOUT=5\n", TITLE)


def test_find_installed_kernel(tmp_path: Path):
    (tmp_path / "vmlinuz-5.10.0-arm64").touch()
    (tmp_path / "vmlinuz-5.15.32-compulab").touch()
    assert grub.find_installed_kernel(str(tmp_path), "5.15.32") == "5.15.32-compulab"


def test_find_installed_kernel_missing(tmp_path: Path):
    with pytest.raises(PreconditionError):
        grub.find_installed_kernel(str(tmp_path), "5.15.32")


def test_root_uuid(monkeypatch):
    monkeypatch.setattr(grub, "run_cmd", lambda argv, **kw: CmdResult(list(argv), 0, "abcd-1234\n", ""))
    assert grub.root_uuid() == "abcd-1234"

    monkeypatch.setattr(grub, "run_cmd", lambda argv, **kw: CmdResult(list(argv), 1, "", "no"))
    with pytest.raises(PreconditionError):
        grub.root_uuid()


def test_root_uuid_dry_run():
    assert grub.root_uuid(dry_run=True) == "00000000-0000-0000-0000-000000000000"
