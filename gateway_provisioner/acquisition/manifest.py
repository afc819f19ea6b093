"""SHA-256 manifests and file verification.

Manifest lines follow the sha256sum convention: ``<hex digest>  <filename>``
(two spaces), or ``<hex digest> *<filename>`` for binary mode.
"""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..errors import ValidationError
from .artifacts import Verification

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^(?P<digest>[0-9A-Fa-f]{64}) (?: |\*)(?P<name>.+)$")
_CHUNK = 65536


def parse_manifest(text: str) -> Dict[str, str]:
    entries: Dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        m = _LINE_RE.match(line)
        if not m:
            raise ValidationError(f"Malformed manifest line {lineno}: {line!r}")
        entries[m.group("name")] = m.group("digest").lower()
    return entries


def render_manifest(entries: Iterable[Tuple[str, str]] | Mapping[str, str]) -> str:
    items = entries.items() if isinstance(entries, Mapping) else entries
    return "".join(f"{digest.lower()}  {name}\n" for name, digest in items)


def load_manifest(path: Path) -> Optional[Dict[str, str]]:
    if not path.exists():
        return None
    return parse_manifest(path.read_text(encoding="utf-8"))


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_file(path: Path, expected: Optional[str]) -> Verification:
    """Verify a file against its expected SHA-256 (pure read)."""

    if not path.exists():
        return Verification.ABSENT
    if not expected:
        logger.debug("No manifest entry for %s", path.name)
        return Verification.INVALID
    try:
        actual = sha256_file(path)
    except OSError as e:
        logger.warning("Unable to read %s: %s", path, e)
        return Verification.INVALID
    if actual.lower() != expected.strip().lower():
        logger.debug("Digest mismatch for %s (expected=%s actual=%s)", path.name, expected, actual)
        return Verification.INVALID
    return Verification.VALID


def verify_named(workdir: Path, name: str, manifest: Optional[Mapping[str, str]]) -> Verification:
    return verify_file(workdir / name, (manifest or {}).get(name))
