"""
Readers for the waveform data files written by audiowaveform (.dat and .json)

Binary layout (little-endian):
    int32  version (1 or 2)
    uint32 flags (bit 0 set: 8-bit samples, clear: 16-bit)
    int32  sample rate
    int32  samples per pixel
    uint32 length (number of min/max pairs per channel)
    int32  channels (version 2 only)
followed by ``length`` points, each holding a min/max pair per channel.
"""
from __future__ import annotations

import json
import logging
import struct
from dataclasses import dataclass
from typing import Dict

import numpy as np

from .core.options import file_extension
from .errors import WaveformDataError

logger = logging.getLogger(__name__)

_HEADER_V1 = struct.Struct('<iIiiI')
_CHANNELS = struct.Struct('<i')
_FLAG_8_BIT = 0x1


@dataclass
class WaveformData:
    version: int
    channels: int
    sample_rate: int
    samples_per_pixel: int
    bits: int
    # shape (length, channels, 2): [..., 0] is min, [..., 1] is max
    samples: np.ndarray

    @property
    def length(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Duration in seconds covered by the data"""
        if not self.sample_rate:
            return 0.0
        return self.length * self.samples_per_pixel / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        """Return the ``(length, 2)`` min/max array for one channel."""
        if not 0 <= index < self.channels:
            raise IndexError(f"Channel {index} out of range (0..{self.channels - 1})")
        return self.samples[:, index, :]

    def summary(self) -> Dict[str, object]:
        # widen first so abs(-128) / abs(-32768) do not wrap
        peak = int(np.abs(self.samples.astype(np.int32)).max()) if self.samples.size else 0
        return {
            'version': self.version,
            'channels': self.channels,
            'sample_rate': self.sample_rate,
            'samples_per_pixel': self.samples_per_pixel,
            'bits': self.bits,
            'length': self.length,
            'duration': round(self.duration, 3),
            'peak': peak,
        }


def _shape(values: np.ndarray, length: int, channels: int) -> np.ndarray:
    expected = length * channels * 2
    if values.size != expected:
        raise WaveformDataError(
            f"Expected {expected} values for {length} points x {channels} channels, got {values.size}"
        )
    return values.reshape(length, channels, 2)


def _json_values(raw, bits: int) -> np.ndarray:
    """Flat list of ints within the signed range of ``bits``."""
    if not isinstance(raw, list):
        raise WaveformDataError("Invalid JSON waveform data: 'data' must be a list")
    try:
        values = np.asarray(raw)
    except (ValueError, TypeError, OverflowError) as e:
        raise WaveformDataError(f"Invalid JSON waveform data: {e}") from e
    if values.size == 0:
        return values.astype(np.int16)
    if values.ndim != 1 or not np.issubdtype(values.dtype, np.integer):
        raise WaveformDataError("Invalid JSON waveform data: 'data' must be a flat list of integers")
    info = np.iinfo(np.int8 if bits == 8 else np.int16)
    low, high = int(values.min()), int(values.max())
    if low < info.min or high > info.max:
        raise WaveformDataError(
            f"Invalid JSON waveform data: values {low}..{high} exceed the {bits}-bit range"
        )
    return values.astype(np.int16)


def parse_dat(data: bytes) -> WaveformData:
    """Parse the binary waveform data format."""
    if len(data) < _HEADER_V1.size:
        raise WaveformDataError("Waveform data is too short for a header")
    version, flags, sample_rate, samples_per_pixel, length = _HEADER_V1.unpack_from(data, 0)
    offset = _HEADER_V1.size
    if version == 1:
        channels = 1
    elif version == 2:
        if len(data) < offset + _CHANNELS.size:
            raise WaveformDataError("Waveform data is too short for a version 2 header")
        (channels,) = _CHANNELS.unpack_from(data, offset)
        offset += _CHANNELS.size
    else:
        raise WaveformDataError(f"Unsupported waveform data version: {version}")
    if channels < 1:
        raise WaveformDataError(f"Invalid channel count: {channels}")

    bits = 8 if flags & _FLAG_8_BIT else 16
    dtype = np.dtype('i1') if bits == 8 else np.dtype('<i2')
    body = data[offset:]
    if len(body) % dtype.itemsize:
        raise WaveformDataError("Waveform data body is truncated")
    values = np.frombuffer(body, dtype=dtype)
    samples = _shape(values, length, channels)
    return WaveformData(version, channels, sample_rate, samples_per_pixel, bits, samples)


def parse_json(text: str) -> WaveformData:
    """Parse the JSON waveform data format."""
    try:
        doc = json.loads(text)
        version = int(doc.get('version', 1))
        channels = int(doc.get('channels', 1))
        sample_rate = int(doc['sample_rate'])
        samples_per_pixel = int(doc['samples_per_pixel'])
        bits = int(doc['bits'])
        length = int(doc['length'])
        raw = doc['data']
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise WaveformDataError(f"Invalid JSON waveform data: {e}") from e
    if bits not in (8, 16):
        raise WaveformDataError(f"Unsupported bit depth: {bits}")
    values = _json_values(raw, bits)
    samples = _shape(values, length, channels)
    return WaveformData(version, channels, sample_rate, samples_per_pixel, bits, samples)


def load_waveform(path: str) -> WaveformData:
    """Read a .dat or .json file produced by audiowaveform."""
    ext = file_extension(path)
    logger.debug("Loading waveform data from %s", path)
    try:
        if ext == 'dat':
            with open(path, 'rb') as f:
                return parse_dat(f.read())
        if ext == 'json':
            with open(path, 'r', encoding='utf-8') as f:
                return parse_json(f.read())
    except OSError as e:
        raise WaveformDataError(f"Could not read {path}: {e}") from e
    raise WaveformDataError(f"Not a waveform data file: {path}")
