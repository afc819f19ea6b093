from __future__ import annotations


class ProvisionError(RuntimeError):
    """Base for every fatal provisioning failure."""


class ValidationError(ProvisionError):
    """Digest mismatch, corrupt artifact or malformed operator input."""


class TransportError(ProvisionError):
    """Network fetch failed (non-2xx, connection failure, timeout)."""


class PrivilegeError(ProvisionError):
    """Elevated privileges could not be obtained."""


class PreconditionError(ProvisionError):
    """An expected artifact, tool or system state is absent."""


class CommandError(ProvisionError):
    """An external command exited non-zero."""

    def __init__(self, message: str, *, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class OperatorCancelled(ProvisionError):
    """The operator declined to continue. Not a failure."""
