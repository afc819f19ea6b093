from pathlib import Path

import pytest

from gateway_provisioner.acquisition import LocalState, acquire, assess, purge
from gateway_provisioner.errors import TransportError
from gateway_provisioner.lib.prompt import ConsolePrompter

from conftest import FakeFetcher, FakePrompter, seed, sha, snapshot


def run_acquire(artifact_set, workdir, fetcher, prompter, **kw) -> Path:
    return acquire(artifact_set, workdir=workdir, fetcher=fetcher, prompter=prompter, **kw)


def test_fresh_fetch(artifact_set, remote, workdir):
    fetcher = FakeFetcher(remote)
    prompter = FakePrompter()
    out = run_acquire(artifact_set, workdir, fetcher, prompter)

    assert out.read_bytes() == remote[artifact_set.combined]
    assert fetcher.requested == [
        "kernel.tar.xz.partaa",
        "kernel.tar.xz.partab",
        "SHA256SUMS",
        "SHA256SUMS-PARTS",
    ]
    assert prompter.questions == []


def test_valid_parts_reused_without_network(artifact_set, remote, workdir):
    seed(workdir, remote, *artifact_set.parts, artifact_set.parts_manifest, artifact_set.combined_manifest)
    fetcher = FakeFetcher(remote)
    prompter = FakePrompter([True])

    out = run_acquire(artifact_set, workdir, fetcher, prompter)

    assert fetcher.requested == []
    assert len(prompter.questions) == 1
    assert sha(out.read_bytes()) == sha(remote[artifact_set.combined])


def test_valid_parts_refetched_on_request(artifact_set, remote, workdir):
    seed(workdir, remote, *artifact_set.parts, artifact_set.parts_manifest, artifact_set.combined_manifest)
    fetcher = FakeFetcher(remote)

    run_acquire(artifact_set, workdir, fetcher, FakePrompter([False]))

    assert len(fetcher.requested) == 4


def test_valid_combined_reused(artifact_set, remote, workdir):
    seed(workdir, remote, artifact_set.combined, artifact_set.combined_manifest)
    before = snapshot(workdir)
    fetcher = FakeFetcher(remote)

    out = run_acquire(artifact_set, workdir, fetcher, FakePrompter([True]))

    assert out == workdir / artifact_set.combined
    assert fetcher.requested == []
    assert snapshot(workdir) == before


def test_valid_combined_refetched_when_operator_declines(artifact_set, remote, workdir):
    seed(workdir, remote, artifact_set.combined, artifact_set.combined_manifest)
    fetcher = FakeFetcher(remote)

    out = run_acquire(artifact_set, workdir, fetcher, FakePrompter([False]))

    assert len(fetcher.requested) == 4
    assert out.read_bytes() == remote[artifact_set.combined]


def test_invalid_combined_purged_without_prompt(artifact_set, remote, workdir):
    seed(workdir, remote, artifact_set.combined_manifest)
    (workdir / artifact_set.combined).write_bytes(b"corrupt")
    fetcher = FakeFetcher(remote)
    prompter = FakePrompter()

    out = run_acquire(artifact_set, workdir, fetcher, prompter)

    assert prompter.questions == []
    assert fetcher.requested[0] == "kernel.tar.xz.partaa"
    assert out.read_bytes() == remote[artifact_set.combined]


def test_invalid_part_purged_without_prompt(artifact_set, remote, workdir):
    seed(workdir, remote, *artifact_set.parts, artifact_set.parts_manifest, artifact_set.combined_manifest)
    (workdir / "kernel.tar.xz.partab").write_bytes(b"bitrot")
    fetcher = FakeFetcher(remote)
    prompter = FakePrompter()

    out = run_acquire(artifact_set, workdir, fetcher, prompter)

    assert prompter.questions == []
    assert len(fetcher.requested) == 4
    assert sha(out.read_bytes()) == sha(remote[artifact_set.combined])


def test_transport_failure_on_second_part(artifact_set, remote, workdir):
    fetcher = FakeFetcher(remote, fail_on="kernel.tar.xz.partab")

    with pytest.raises(TransportError):
        run_acquire(artifact_set, workdir, fetcher, FakePrompter())

    assert not (workdir / artifact_set.combined).exists()
    assert (workdir / "kernel.tar.xz.partaa").exists()
    assert assess(artifact_set, workdir).state is LocalState.PARTS_INVALID

    # The next run recovers from the leftover part.
    out = run_acquire(artifact_set, workdir, FakeFetcher(remote), FakePrompter())
    assert out.read_bytes() == remote[artifact_set.combined]


def test_corrupt_download_is_fatal(artifact_set, remote, workdir):
    bad = dict(remote)
    bad["kernel.tar.xz.partaa"] = b"\xff" * 500

    with pytest.raises(Exception, match="partaa"):
        run_acquire(artifact_set, workdir, FakeFetcher(bad), FakePrompter())
    assert not (workdir / artifact_set.combined).exists()


def test_two_reuse_runs_are_byte_identical(artifact_set, remote, workdir):
    run_acquire(artifact_set, workdir, FakeFetcher(remote), FakePrompter())
    first = snapshot(workdir)

    fetcher = FakeFetcher(remote)
    run_acquire(artifact_set, workdir, fetcher, FakePrompter([True]))

    assert fetcher.requested == []
    assert snapshot(workdir) == first


def test_keep_parts_then_reuse(artifact_set, remote, workdir):
    run_acquire(artifact_set, workdir, FakeFetcher(remote), FakePrompter(), keep_parts=True)
    assert (workdir / "kernel.tar.xz.partaa").exists()

    (workdir / artifact_set.combined).unlink()
    fetcher = FakeFetcher(remote)
    prompter = FakePrompter([True])
    run_acquire(artifact_set, workdir, fetcher, prompter, keep_parts=True)

    assert fetcher.requested == []
    assert "parts" in prompter.questions[0]


def test_purge_removes_scratch_files(artifact_set, remote, workdir):
    seed(workdir, remote, artifact_set.combined_manifest)
    (workdir / "kernel.tar.xz.assembling").write_bytes(b"x")
    (workdir / "unrelated.txt").write_text("keep me")

    purge(artifact_set, workdir)

    assert [p.name for p in workdir.iterdir()] == ["unrelated.txt"]


def test_closed_stdin_never_reuses(artifact_set, remote, workdir):
    def eof(prompt):
        raise EOFError

    seed(workdir, remote, artifact_set.combined, artifact_set.combined_manifest)
    fetcher = FakeFetcher(remote)

    run_acquire(artifact_set, workdir, fetcher, ConsolePrompter(input_fn=eof))

    assert len(fetcher.requested) == 4
