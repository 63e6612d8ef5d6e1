"""Blocking execution of the audiowaveform binary.

The argument vector is always passed as a list, never through a shell.
"""
from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from ..errors import ProcessFailedError, ProcessTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


def run_process(argv: Sequence[str], timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Run ``argv`` and return its standard output.

    Args:
        argv: Executable path followed by one element per argument
        timeout: Seconds to wait before the child is killed

    Returns:
        The captured standard output, unchanged

    Raises:
        ProcessFailedError: The process could not be started or exited non-zero
        ProcessTimeoutError: The process was still running after ``timeout``
    """
    argv = [str(a) for a in argv]
    logger.debug("Running: %s", argv)
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        logger.error("Could not start %s: %s", argv[0], e)
        raise ProcessFailedError(None, str(e), argv) from e

    # Leaving the with-block closes the pipes and waits for the child
    with proc:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            proc.kill()
            proc.communicate()
            logger.error("%s timed out after %s seconds", argv[0], timeout)
            raise ProcessTimeoutError(timeout, argv) from e

    if proc.returncode != 0:
        logger.error("%s failed with code %s: %s", argv[0], proc.returncode, stderr.strip())
        raise ProcessFailedError(proc.returncode, stderr, argv)
    return stdout
