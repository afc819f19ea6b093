from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Protocol

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import TransportError
from .artifacts import DOWNLOAD_SUFFIX, ArtifactSet

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class Fetcher(Protocol):
    def fetch(self, url: str, dest: Path) -> Path:
        ...


class HttpFetcher:
    """HTTP GET into a local file with bounded exponential-backoff retry."""

    def __init__(
        self,
        *,
        timeout_s: float = 60.0,
        attempts: int = 3,
        backoff_s: float = 2.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.attempts = max(1, attempts)
        self.backoff_s = backoff_s
        self.session = session or requests.Session()

    def _download(self, url: str, dest: Path) -> Path:
        tmp = dest.with_name(dest.name + DOWNLOAD_SUFFIX)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout_s, allow_redirects=True) as response:
                response.raise_for_status()
                with tmp.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException:
            tmp.unlink(missing_ok=True)
            raise
        os.replace(tmp, dest)
        return dest

    def fetch(self, url: str, dest: Path) -> Path:
        logger.info("Downloading %s", url)
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.backoff_s, min=0, max=60),
            retry=retry_if_exception_type(requests.RequestException),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            path = retrying(self._download, url, dest)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download {url}: {e}") from e
        logger.debug("Saved %s (%d bytes)", path, path.stat().st_size)
        return path


def fetch_artifact_set(artifact_set: ArtifactSet, workdir: Path, fetcher: Fetcher) -> List[Path]:
    """Download every declared file of a set into ``workdir``.

    The first failure aborts; files already downloaded stay on disk.
    """

    workdir.mkdir(parents=True, exist_ok=True)
    names = [*artifact_set.ordered_parts, artifact_set.combined_manifest, artifact_set.parts_manifest]
    fetched: List[Path] = []
    for name in names:
        fetched.append(fetcher.fetch(artifact_set.url_for(name), workdir / name))
    return fetched
