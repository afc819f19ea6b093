"""Gateway provisioner (Python-first, check-then-act).

Provisions a CompuLab IOT-GATE-IMX8PLUS gateway with a WireGuard-enabled
kernel and the WireGuard tooling.

Core design goals:
- Checksum-gated artifact reuse
- Idempotent steps with an operator-visible skip gate
- Fatal on any unverified state
- Centralized logging
"""

__all__ = []
