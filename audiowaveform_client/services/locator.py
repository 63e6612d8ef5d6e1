"""Binary locators used to find the audiowaveform executable.

A locator has a single ``resolve(name) -> path`` method returning the full
path of the binary. The client takes one as a constructor argument so tests
can substitute ``StaticLocator`` instead of probing the host.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod

from ..errors import LookupFailedError, NotFoundError

logger = logging.getLogger(__name__)


class BinaryLocator(ABC):
    @abstractmethod
    def resolve(self, name: str) -> str:
        """Return the full path of ``name`` or raise a ``DiscoveryError``."""


class WhereisLocator(BinaryLocator):
    """Locate binaries with ``whereis -b``.

    ``whereis`` echoes the queried name followed by the matches, e.g.
    ``audiowaveform: /usr/bin/audiowaveform``; the first match wins.
    """

    def __init__(self, command: str = 'whereis', timeout: float = 10):
        self.command = command
        self.timeout = timeout

    def run_lookup(self, name: str) -> str:
        cmd = [self.command, '-b', name]
        logger.debug("Running lookup: %s", ' '.join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise LookupFailedError(
                f"{self.command} exited with code {e.returncode}: {(e.stderr or '').strip()}"
            ) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise LookupFailedError(f"Could not run {self.command}: {e}") from e
        return result.stdout

    def resolve(self, name: str) -> str:
        output = self.run_lookup(name).strip()
        return parse_whereis_output(name, output)


def parse_whereis_output(name: str, output: str) -> str:
    """Return the first path reported by ``whereis`` for ``name``."""
    if len(output) < len(name) + 2:
        raise NotFoundError(f"Command {name} not found. Do you have `{name}` installed?")
    entries = output.split()
    if len(entries) < 2:
        raise NotFoundError(f"Command {name} not found")
    return entries[1]


class WhichLocator(BinaryLocator):
    """Locate binaries on PATH with ``shutil.which``."""

    def __init__(self, path=None):
        self.path = path

    def resolve(self, name: str) -> str:
        found = shutil.which(name, path=self.path)
        if found is None:
            raise NotFoundError(f"Command {name} not found on PATH")
        return found


class StaticLocator(BinaryLocator):
    """Always answer with a fixed location.

    ``location`` may be the binary itself or the directory holding it.
    """

    def __init__(self, location: str):
        self.location = location

    def resolve(self, name: str) -> str:
        if os.path.basename(self.location.rstrip(os.sep)) == name:
            return self.location
        return os.path.join(self.location, name)


LOCATORS = {
    'whereis': WhereisLocator,
    'which': WhichLocator,
}


def get_locator(kind: str = 'whereis', binary_path: str = None) -> BinaryLocator:
    """Build the locator selected by configuration; an explicit path wins."""
    if binary_path:
        return StaticLocator(binary_path)
    try:
        return LOCATORS[kind]()
    except KeyError:
        raise ValueError(f"Unknown locator: {kind!r} (choose from {', '.join(LOCATORS)})")
