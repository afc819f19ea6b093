from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .acquisition.fetch import Fetcher
from .config import ProvisionConfig
from .lib.prompt import Prompter


@dataclass
class ProvisionCtx:
    """Everything steps share, passed explicitly through the pipeline."""

    cfg: ProvisionConfig
    prompter: Prompter
    workdir: Path
    fetcher: Optional[Fetcher] = None
    sudo: List[str] = field(default_factory=list)
    dry_run: bool = False
    state: Dict[str, Any] = field(default_factory=dict)

    # Produced by 10_acquire_kernel, consumed by 20_extract_kernel.
    kernel_archive: Optional[Path] = None

    def priv(self, argv: Sequence[str]) -> List[str]:
        return [*self.sudo, *argv]

    @property
    def decisions(self) -> Dict[str, Any]:
        return self.state.setdefault("execution", {}).setdefault("decisions", {})

    def warn(self, entry: Dict[str, Any]) -> None:
        self.state.setdefault("execution", {}).setdefault("warnings", []).append(entry)
