import os
from pathlib import Path

from gateway_provisioner.lib import files


def test_write_and_append(tmp_path: Path):
    p = tmp_path / "etc" / "grub.d" / "40_custom"
    files.write_text(str(p), "a\n")
    files.write_text(str(p), "b\n", append=True)
    assert p.read_text() == "a\nb\n"


def test_write_mode(tmp_path: Path):
    p = tmp_path / "wg0.conf"
    files.write_text(str(p), "[Interface]\n", mode=0o600)
    assert (p.stat().st_mode & 0o777) == 0o600


def test_write_through_sudo(monkeypatch):
    calls = []
    monkeypatch.setattr(files, "run_cmd", lambda argv, **kw: calls.append((list(argv), kw.get("input_text"))))
    files.write_text("/etc/x", "data", sudo=["sudo"], append=True, mode=0o600)
    assert calls == [
        (["sudo", "tee", "-a", "/etc/x"], "data"),
        (["sudo", "chmod", "600", "/etc/x"], None),
    ]


def test_dry_run_writes_nothing(tmp_path: Path):
    p = tmp_path / "x"
    files.write_text(str(p), "data", dry_run=True)
    files.make_dir(str(tmp_path / "d"), dry_run=True)
    assert not p.exists()
    assert not (tmp_path / "d").exists()


def test_read_text_missing(tmp_path: Path):
    assert files.read_text(str(tmp_path / "nope")) is None


def test_copy_tree_keeps_symlinks(tmp_path: Path):
    src = tmp_path / "src"
    (src / "include" / "linux").mkdir(parents=True)
    (src / "include" / "linux" / "version.h").write_text("#define X 1\n")
    os.symlink("include", src / "inc")
    dst = tmp_path / "dst"

    files.copy_tree(str(src), str(dst))

    assert (dst / "include" / "linux" / "version.h").read_text() == "#define X 1\n"
    assert (dst / "inc").is_symlink()
    assert os.readlink(dst / "inc") == "include"


def test_symlink_replaces(tmp_path: Path):
    link = tmp_path / "build"
    files.symlink("/old", str(link))
    files.symlink("/new", str(link))
    assert os.readlink(link) == "/new"
