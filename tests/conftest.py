"""Shared fixtures: a two-part artifact set, a scripted operator and an in-memory remote."""

import hashlib
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from gateway_provisioner.acquisition import ArtifactSet, render_manifest
from gateway_provisioner.errors import TransportError


def sha(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakePrompter:
    """Answers confirmations from a script; falls back to the default when it runs out."""

    def __init__(
        self,
        answers: Iterable[bool] = (),
        *,
        block: str = "",
        replies: Iterable[str] = (),
    ) -> None:
        self.answers: List[bool] = list(answers)
        self.replies: List[str] = list(replies)
        self.block = block
        self.questions: List[str] = []

    def confirm(self, question: str, *, default: bool = False) -> bool:
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return default

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.replies.pop(0) if self.replies else ""

    def read_block(self, instructions: str) -> str:
        return self.block


class FakeFetcher:
    """Serves files from a dict; optionally fails on one filename."""

    def __init__(self, files: Dict[str, bytes], fail_on: Optional[str] = None) -> None:
        self.files = files
        self.fail_on = fail_on
        self.requested: List[str] = []

    def fetch(self, url: str, dest: Path) -> Path:
        name = url.rsplit("/", 1)[-1]
        self.requested.append(name)
        if name == self.fail_on:
            raise TransportError(f"Failed to download {url}: 503 Service Unavailable")
        dest.write_bytes(self.files[name])
        return dest


@pytest.fixture
def artifact_set() -> ArtifactSet:
    return ArtifactSet(
        name="kernel",
        base_url="https://downloads.example.invalid/kernel",
        parts=("kernel.tar.xz.partab", "kernel.tar.xz.partaa"),
        combined="kernel.tar.xz",
    )


@pytest.fixture
def remote(artifact_set: ArtifactSet) -> Dict[str, bytes]:
    part_a = bytes(range(250)) * 2
    part_b = bytes(reversed(range(250))) * 2
    combined = part_a + part_b
    return {
        "kernel.tar.xz.partaa": part_a,
        "kernel.tar.xz.partab": part_b,
        "kernel.tar.xz": combined,
        artifact_set.parts_manifest: render_manifest(
            {"kernel.tar.xz.partaa": sha(part_a), "kernel.tar.xz.partab": sha(part_b)}
        ).encode(),
        artifact_set.combined_manifest: render_manifest({"kernel.tar.xz": sha(combined)}).encode(),
    }


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    d = tmp_path / "work"
    d.mkdir()
    return d


def seed(workdir: Path, remote: Dict[str, bytes], *names: str) -> None:
    for name in names:
        (workdir / name).write_bytes(remote[name])


def snapshot(root: Path) -> Dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


@pytest.fixture(autouse=True)
def reset_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_gateway_configured", "_gateway_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
