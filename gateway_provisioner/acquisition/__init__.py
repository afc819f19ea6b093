from .acquire import acquire, purge
from .artifacts import ArtifactSet, Verification
from .decision import Assessment, DecisionRequest, LocalState, Outcome, assess, decision_for, resolve
from .fetch import Fetcher, HttpFetcher, fetch_artifact_set
from .manifest import load_manifest, parse_manifest, render_manifest, sha256_file, verify_file
from .reassemble import reassemble

__all__ = [
    "ArtifactSet",
    "Assessment",
    "DecisionRequest",
    "Fetcher",
    "HttpFetcher",
    "LocalState",
    "Outcome",
    "Verification",
    "acquire",
    "assess",
    "decision_for",
    "fetch_artifact_set",
    "load_manifest",
    "parse_manifest",
    "purge",
    "reassemble",
    "render_manifest",
    "resolve",
    "sha256_file",
    "verify_file",
]
