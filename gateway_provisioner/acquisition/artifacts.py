from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Leftovers of an interrupted download or assembly.
DOWNLOAD_SUFFIX = ".download"
ASSEMBLY_SUFFIX = ".assembling"


class Verification(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ABSENT = "absent"


@dataclass(frozen=True)
class ArtifactSet:
    """A deliverable split into parts, plus its checksum manifests.

    ``parts`` concatenate (in lexical name order) into ``combined``.
    """

    name: str
    base_url: str
    parts: Tuple[str, ...]
    combined: str
    parts_manifest: str = "SHA256SUMS-PARTS"
    combined_manifest: str = "SHA256SUMS"

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError(f"ArtifactSet {self.name!r} declares no parts")
        if len(set(self.parts)) != len(self.parts):
            raise ValueError(f"ArtifactSet {self.name!r} has duplicate part names")

    def url_for(self, filename: str) -> str:
        return f"{self.base_url.rstrip('/')}/{filename}"

    @property
    def ordered_parts(self) -> Tuple[str, ...]:
        return tuple(sorted(self.parts))

    @property
    def all_files(self) -> Tuple[str, ...]:
        return (*self.ordered_parts, self.combined, self.parts_manifest, self.combined_manifest)

    @property
    def scratch_files(self) -> Tuple[str, ...]:
        names = [f"{n}{DOWNLOAD_SUFFIX}" for n in self.all_files]
        names.append(f"{self.combined}{ASSEMBLY_SUFFIX}")
        return tuple(names)
