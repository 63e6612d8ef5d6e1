"""
Fluent client for the audiowaveform command line tool

    client = AudiowaveformClient()
    client.set_input_filename('episode.mp3').set_output_filename('episode.png') \\
          .set_width(1800).set_height(140).set_colors('audition')
    client.execute()

A client is single-use: once ``execute`` has been called, further setters or
another ``execute`` raise ``ClientStateError``. Build a new client per
invocation.
"""
import logging
import os
import threading
from typing import List, Optional, Union

from .core.options import RULES_BY_FIELD, Option, WaveformOptions, render
from .errors import ClientStateError
from .services.locator import BinaryLocator, WhereisLocator
from .services.process import DEFAULT_TIMEOUT, run_process

logger = logging.getLogger(__name__)

BINARY_NAME = 'audiowaveform'
DEFAULT_PATH = '/usr/bin'


class AudiowaveformClient:
    """Accumulates validated options and runs audiowaveform once"""

    def __init__(self, locator: Optional[BinaryLocator] = None,
                 binary_name: str = BINARY_NAME, public_path: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        """
        Args:
            locator: Used once to find the binary (``whereis -b`` by default)
            binary_name: Name of the executable
            public_path: Directory of the executable; skips discovery when given
            timeout: Default timeout in seconds for ``execute``
        """
        self._binary_name = binary_name
        self._public_path = DEFAULT_PATH
        self._locator = locator or WhereisLocator()
        self._options: List[Option] = []
        self._executed = False
        self._lock = threading.Lock()
        self.timeout = timeout

        if public_path is not None:
            self._public_path = public_path
        else:
            self.detect_and_set_path()

    def detect_and_set_path(self) -> str:
        """Find the binary with the locator and remember its directory."""
        resolved = self._locator.resolve(self._binary_name)
        self.set_public_path(os.path.dirname(resolved))
        message = f"Using `{self._binary_name}` from `{self._public_path}`."
        logger.info(message)
        return message

    def get_public_path(self) -> str:
        return self._public_path

    def set_public_path(self, public_path: str) -> None:
        self._public_path = public_path

    def get_binary_name(self) -> str:
        return self._binary_name

    def set_binary_name(self, binary_name: str) -> None:
        self._binary_name = binary_name

    @property
    def executable(self) -> str:
        return os.path.join(self._public_path, self._binary_name)

    @property
    def options(self) -> List[Option]:
        return list(self._options)

    @property
    def arguments(self) -> List[str]:
        """Accumulated argv tokens, in the order the setters were called"""
        return render(self._options)

    @property
    def executed(self) -> bool:
        return self._executed

    def _ensure_configurable(self) -> None:
        if self._executed:
            raise ClientStateError("This client has already been executed; create a new one")

    def _add(self, field: str, value=None) -> 'AudiowaveformClient':
        self._ensure_configurable()
        # make() validates before anything is appended
        self._options.append(RULES_BY_FIELD[field].make(value))
        return self

    def apply_options(self, options: WaveformOptions) -> 'AudiowaveformClient':
        """Append every option set on ``options``; nothing is added if one is invalid."""
        self._ensure_configurable()
        self._options.extend(options.to_options())
        return self

    def set_help(self):
        return self._add('help')

    def set_quiet(self):
        """Disables status messages."""
        return self._add('quiet')

    def set_input_filename(self, name: str):
        """
        Input file: MP3, WAV, FLAC, Ogg Vorbis, Opus or a binary waveform
        data file. The extension decides how audiowaveform reads it.
        """
        return self._add('input_filename', name)

    def set_output_filename(self, name: str):
        """Output file: .wav, .dat, .png or .json"""
        return self._add('output_filename', name)

    def set_input_format(self, fmt: str):
        return self._add('input_format', fmt)

    def set_output_format(self, fmt: str):
        return self._add('output_format', fmt)

    def set_split_channels(self):
        return self._add('split_channels')

    def set_zoom(self, level: Union[int, str]):
        """Samples per pixel, or 'auto' to fit the image width."""
        return self._add('zoom', level)

    def set_pixels_per_second(self, pixels: int):
        return self._add('pixels_per_second', pixels)

    def set_bits(self, bits: int):
        return self._add('bits', bits)

    def set_start(self, start: float):
        return self._add('start', start)

    def set_end(self, end: float):
        return self._add('end', end)

    def set_width(self, width: int):
        return self._add('width', width)

    def set_height(self, height: int):
        return self._add('height', height)

    def set_colors(self, scheme: str):
        """
        Color scheme for waveform images: 'audacity' (blue waveform on a grey
        background) or 'audition' (green waveform on a dark background).
        """
        return self._add('colors', scheme)

    def set_waveform_color(self, color: str):
        """Waveform color as rrggbb[aa]; defaults to the color scheme."""
        return self._add('waveform_color', color)

    def set_border_color(self, color: str):
        return self._add('border_color', color)

    def set_background_color(self, color: str):
        return self._add('background_color', color)

    def set_axis_label_color(self, color: str):
        return self._add('axis_label_color', color)

    def set_waveform_style(self, style: str):
        return self._add('waveform_style', style)

    def set_bar_width(self, width: int):
        return self._add('bar_width', width)

    def set_bar_gap(self, gap: int):
        return self._add('bar_gap', gap)

    def set_bar_style(self, style: str):
        return self._add('bar_style', style)

    def set_no_axis_labels(self):
        return self._add('no_axis_labels')

    def set_with_axis_labels(self):
        return self._add('with_axis_labels')

    def set_amplitude_scale(self, scale: Union[float, str]):
        return self._add('amplitude_scale', scale)

    def set_compression(self, level: int):
        """PNG compression level: 0 (none) to 9 (best), or -1 (default)."""
        return self._add('compression', level)

    def set_raw_samplerate(self, rate: int):
        return self._add('raw_samplerate', rate)

    def set_raw_channels(self, channels: int):
        return self._add('raw_channels', channels)

    def set_raw_format(self, fmt: str):
        return self._add('raw_format', fmt)

    def build_argv(self) -> List[str]:
        return [self.executable] + self.arguments

    def execute(self, timeout: Optional[float] = None) -> str:
        """
        Run audiowaveform with the accumulated options.

        Returns:
            The standard output of the process

        Raises:
            ClientStateError: The client was already executed or is executing
            ProcessFailedError: Non-zero exit or the binary could not start
            ProcessTimeoutError: The binary was killed after the timeout
        """
        if not self._lock.acquire(blocking=False):
            raise ClientStateError("This client is already executing")
        try:
            self._ensure_configurable()
            self._executed = True
            return run_process(self.build_argv(), timeout=self.timeout if timeout is None else timeout)
        finally:
            self._lock.release()

    def get_version(self, timeout: Optional[float] = None) -> str:
        """Returns the version banner of audiowaveform"""
        self._add('version')
        return self.execute(timeout=timeout).strip()
