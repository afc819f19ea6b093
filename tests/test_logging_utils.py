import logging
import sys
from pathlib import Path

from gateway_provisioner.logging_utils import StatusFormatter, configure_logging, log_success


def test_file_log_records_everything(tmp_path: Path):
    log_path = tmp_path / "logs" / "provision.log"
    assert configure_logging(log_path=str(log_path), also_console=False) == str(log_path)

    logger = logging.getLogger("gateway_provisioner.test")
    log_success(logger, "kernel %s installed", "5.15.32")
    logging.getLogger("gateway_provisioner.lib.command").info("CMD update-grub")
    for h in logging.getLogger().handlers:
        h.flush()

    text = log_path.read_text()
    assert "SUCCESS gateway_provisioner.test: kernel 5.15.32 installed" in text
    assert "CMD update-grub" in text


def test_configure_is_idempotent(tmp_path: Path):
    first = configure_logging(log_path=str(tmp_path / "a.log"), also_console=False)
    count = len(logging.getLogger().handlers)
    assert configure_logging(log_path=str(tmp_path / "b.log")) == first
    assert len(logging.getLogger().handlers) == count


def test_falls_back_to_cwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    blocker = tmp_path / "file"
    blocker.write_text("")
    chosen = configure_logging(log_path=str(blocker / "sub" / "x.log"), also_console=False)
    assert chosen == str(tmp_path / "gateway-provisioner.log")


def test_status_formatter_hides_tracebacks():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        exc_info = sys.exc_info()
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "Provisioning failed: %s", ("boom",), exc_info)
    assert StatusFormatter().format(record) == "[ERROR] Provisioning failed: boom"
