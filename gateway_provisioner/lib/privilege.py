from __future__ import annotations

import logging
import os
from typing import List

from ..errors import PrivilegeError
from ..logging_utils import log_success
from .command import run_cmd

logger = logging.getLogger(__name__)


def is_root() -> bool:
    return os.geteuid() == 0


def ensure_privileges(*, dry_run: bool = False) -> List[str]:
    """Obtain elevated rights once; return the argv prefix for privileged commands.

    Root needs no prefix. Otherwise sudo is tried non-interactively first,
    then with a password prompt.
    """

    if is_root():
        logger.info("Running as root")
        return []

    if dry_run:
        logger.info("Dry run: assuming sudo is available")
        return ["sudo"]

    if run_cmd(["sudo", "-n", "true"], check=False).ok:
        log_success(logger, "sudo privileges available")
        return ["sudo"]

    logger.info("This program requires sudo privileges. You may be prompted for your password.")
    if run_cmd(["sudo", "true"], check=False, capture=False).ok:
        log_success(logger, "sudo privileges obtained")
        return ["sudo"]

    raise PrivilegeError("Failed to obtain sudo privileges")
