"""Persisted provisioning state.

Written after every run, success or failure. The content is a pure
function of what happened (sorted keys, no timestamps), so two runs that
take the same decisions leave byte-identical files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

STATE_VERSION = 1


def _is_yaml(path: Path) -> bool:
    # Anything that is not .yaml/.yml is stored as JSON.
    return path.suffix.lower() in {".yaml", ".yml"}


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    text = p.read_text(encoding="utf-8")
    try:
        if _is_yaml(p):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text) if text.strip() else {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data).__name__}")
    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if _is_yaml(p):
        body = yaml.safe_dump(state, sort_keys=True)
    else:
        body = json.dumps(state, indent=2, sort_keys=True) + "\n"
    p.write_text(body, encoding="utf-8")
    logger.debug("State saved to %s", p)


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    state.setdefault("version", STATE_VERSION)
    exe = state.setdefault("execution", {})
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("decisions", {})
    exe.setdefault("errors", [])
    return state


def _execution(state: Dict[str, Any]) -> Dict[str, Any]:
    return state.setdefault("execution", {})


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    completed = _execution(state).setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def record_error(state: Dict[str, Any], error: BaseException, step: Optional[str] = None) -> None:
    exe = _execution(state)
    exe.setdefault("errors", []).append(
        {"step": step if step is not None else exe.get("current_step"), "error": str(error)}
    )
