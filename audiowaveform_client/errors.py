"""
Error types raised by the audiowaveform client
"""
from typing import Optional, Sequence


class AudiowaveformError(Exception):
    """Base class for every error raised by this package"""


class DiscoveryError(AudiowaveformError):
    """The audiowaveform binary could not be located on the host"""


class NotFoundError(DiscoveryError):
    """The lookup ran but did not report the binary"""


class LookupFailedError(DiscoveryError):
    """The lookup utility itself failed"""


class InvalidOptionError(AudiowaveformError, ValueError):
    """An option value is outside its documented domain"""

    def __init__(self, option: str, value, message: str):
        super().__init__(message)
        self.option = option
        self.value = value


class ProcessFailedError(AudiowaveformError):
    """The binary ran (or failed to start) and did not exit cleanly"""

    def __init__(self, exit_code: Optional[int], stderr: str = '', argv: Sequence[str] = ()):
        self.exit_code = exit_code
        self.stderr = stderr
        self.argv = list(argv)
        if exit_code is None:
            message = f"audiowaveform could not be started: {stderr}"
        else:
            message = f"audiowaveform exited with code {exit_code}"
            if stderr.strip():
                message += f": {stderr.strip()}"
        super().__init__(message)


class ProcessTimeoutError(AudiowaveformError, TimeoutError):
    """The binary did not finish within the timeout and was killed"""

    def __init__(self, timeout: float, argv: Sequence[str] = ()):
        super().__init__(f"audiowaveform did not finish within {timeout} seconds")
        self.timeout = timeout
        self.argv = list(argv)


class ClientStateError(AudiowaveformError):
    """A client was reused after execution or executed concurrently"""


class WaveformDataError(AudiowaveformError):
    """A waveform data file could not be parsed"""


class ConfigError(AudiowaveformError):
    """The configuration file could not be loaded"""
