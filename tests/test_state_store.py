from pathlib import Path

import pytest

from gateway_provisioner.state_store import ensure_defaults, load_state, mark_step_completed, record_error, save_state


def test_missing_state_is_empty(tmp_path: Path):
    assert load_state(str(tmp_path / "state.json")) == {}


@pytest.mark.parametrize("name", ["state.json", "state.yaml"])
def test_round_trip(tmp_path: Path, name):
    path = str(tmp_path / "nested" / name)
    state = ensure_defaults({})
    mark_step_completed(state, "10_acquire_kernel")
    mark_step_completed(state, "10_acquire_kernel")
    save_state(path, state)

    loaded = load_state(path)
    assert loaded["execution"]["completed_steps"] == ["10_acquire_kernel"]
    assert loaded["version"] == 1


def test_save_is_deterministic(tmp_path: Path):
    path = tmp_path / "state.json"
    state = ensure_defaults({"b": 1, "a": 2})
    save_state(str(path), state)
    first = path.read_bytes()
    save_state(str(path), load_state(str(path)))
    assert path.read_bytes() == first


def test_non_mapping_state_rejected(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_state(str(path))


def test_ensure_defaults_keeps_existing():
    state = ensure_defaults({"execution": {"completed_steps": ["x"]}})
    assert state["execution"]["completed_steps"] == ["x"]
    assert state["execution"]["errors"] == []


def test_record_error_uses_current_step():
    state = ensure_defaults({})
    state["execution"]["current_step"] = "40_create_grub_entry"
    record_error(state, RuntimeError("no uuid"))
    record_error(state, ValueError("bad"), step="preflight")
    assert state["execution"]["errors"] == [
        {"step": "40_create_grub_entry", "error": "no uuid"},
        {"step": "preflight", "error": "bad"},
    ]


def test_malformed_yaml_state_is_value_error(tmp_path: Path):
    path = tmp_path / "state.yaml"
    path.write_text("execution: {completed_steps: [\n")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_state(str(path))
