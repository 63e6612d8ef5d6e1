"""Option rule table, validators and argument rendering.

Everything here is side-effect free: validators either return the value to
pass through or raise ``InvalidOptionError``, and ``build_arguments`` turns a
``WaveformOptions`` record into the ``--key=value`` tokens handed to the
binary.
"""
from __future__ import annotations

import os
import string
from dataclasses import dataclass, fields
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidOptionError


INPUT_TYPES = ('mp3', 'wav', 'flac', 'ogg', 'opus', 'oga', 'dat')
OUTPUT_TYPES = ('wav', 'dat', 'png', 'json')
# --input-format also accepts raw sample data (see --raw-format)
INPUT_FORMATS = INPUT_TYPES + ('raw',)
COLOR_SCHEMES = ('audacity', 'audition')
WAVEFORM_STYLES = ('normal', 'bars')
BAR_STYLES = ('square', 'rounded')
RAW_FORMATS = (
    's8', 'u8',
    's16le', 's16be',
    's24le', 's24be',
    's32le', 's32be',
    'f32le', 'f32be',
    'f64le', 'f64be',
)
BITS = (8, 16)
COMPRESSION_RANGE = (-1, 9)
COLOR_LENGTHS = (6, 8)


@dataclass(frozen=True)
class Flag:
    """A bare switch such as ``--quiet``"""
    name: str

    def render(self) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class KeyValue:
    """A ``--name=value`` argument"""
    name: str
    value: object

    def render(self) -> str:
        return f"--{self.name}={self.value}"


Option = Union[Flag, KeyValue]


def file_extension(name: str) -> str:
    """Return the lowercase extension of ``name`` (empty when there is none).

    Only the last path component is considered, so ``dir.d/file`` has no
    extension while ``.mp3`` has ``mp3``.
    """
    base = os.path.basename(str(name))
    if '.' not in base:
        return ''
    return base.rsplit('.', 1)[1].lower()


def _allowed(values) -> str:
    return ', '.join(str(v) for v in values)


def check_input_filename(option: str, value: str) -> str:
    if file_extension(value) not in INPUT_TYPES:
        raise InvalidOptionError(
            option, value,
            f"File does not have one of the allowed input types ({_allowed(INPUT_TYPES)})",
        )
    return value


def check_output_filename(option: str, value: str) -> str:
    if file_extension(value) not in OUTPUT_TYPES:
        raise InvalidOptionError(
            option, value,
            f"File does not have one of the allowed output types ({_allowed(OUTPUT_TYPES)})",
        )
    return value


def _format_name(value: str) -> str:
    # A bare format name is its own extension: 'mp3' and 'x.mp3' both give 'mp3'
    text = str(value)
    return file_extension(text) or text.strip().lower()


def check_input_format(option: str, value: str) -> str:
    fmt = _format_name(value)
    if fmt not in INPUT_FORMATS:
        raise InvalidOptionError(
            option, value,
            f"Input format is not one of the allowed types ({_allowed(INPUT_FORMATS)})",
        )
    return fmt


def check_output_format(option: str, value: str) -> str:
    fmt = _format_name(value)
    if fmt not in OUTPUT_TYPES:
        raise InvalidOptionError(
            option, value,
            f"Output format is not one of the allowed types ({_allowed(OUTPUT_TYPES)})",
        )
    return fmt


def _choice(allowed: Tuple[str, ...], label: str) -> Callable[[str, str], str]:
    def check(option: str, value: str) -> str:
        if value not in allowed:
            raise InvalidOptionError(
                option, value,
                f"The {label} you passed is not valid. Allowed values are {_allowed(allowed)}.",
            )
        return value
    return check


check_colors = _choice(COLOR_SCHEMES, 'color scheme')
check_waveform_style = _choice(WAVEFORM_STYLES, 'waveform style')
check_bar_style = _choice(BAR_STYLES, 'bar style')
check_raw_format = _choice(RAW_FORMATS, 'raw sample format')


def check_int(option: str, value) -> int:
    # bool is an int subclass but never a meaningful flag value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptionError(option, value, f"--{option} expects an integer, got {value!r}")
    return value


def check_number(option: str, value) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionError(option, value, f"--{option} expects a number, got {value!r}")
    return value


def check_zoom(option: str, value) -> Union[int, str]:
    if value == 'auto':
        return value
    return check_int(option, value)


def check_amplitude_scale(option: str, value) -> Union[int, float, str]:
    if value == 'auto':
        return value
    return check_number(option, value)


def check_bits(option: str, value) -> int:
    check_int(option, value)
    if value not in BITS:
        raise InvalidOptionError(option, value, "Bits do not have an allowed value (8 or 16).")
    return value


def check_compression(option: str, value) -> int:
    low, high = COMPRESSION_RANGE
    check_int(option, value)
    if not low <= value <= high:
        raise InvalidOptionError(
            option, value,
            f"Compression level must be between {low} and {high}, got {value}.",
        )
    return value


def check_rgb_color_code(option: str, value: str) -> str:
    """Accept ``rrggbb`` or ``rrggbbaa`` hex color codes."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # YAML reads unquoted 000000 / 123456 as numbers, losing digits
        raise InvalidOptionError(
            option, value,
            f"Color codes must be strings, got the number {value!r}; "
            f"quote the value in YAML (e.g. '000000').",
        )
    if not isinstance(value, str) or len(value) not in COLOR_LENGTHS:
        raise InvalidOptionError(
            option, value,
            "The color you passed is not valid. Allowed colors have to be rrggbb or rrggbbaa.",
        )
    if any(ch not in string.hexdigits for ch in value):
        raise InvalidOptionError(
            option, value,
            f"The color you passed contains non-hexadecimal characters: {value!r}.",
        )
    return value


@dataclass(frozen=True)
class OptionRule:
    """One row of the rule table: a record field, its flag and its validator.

    A rule without a validator is a bare flag.
    """
    field: str
    flag: str
    validator: Optional[Callable] = None

    @property
    def is_flag(self) -> bool:
        return self.validator is None

    def make(self, value=None) -> Option:
        if self.is_flag:
            return Flag(self.flag)
        return KeyValue(self.flag, self.validator(self.flag, value))


RULES: Tuple[OptionRule, ...] = (
    OptionRule('help', 'help'),
    OptionRule('version', 'version'),
    OptionRule('quiet', 'quiet'),
    OptionRule('input_filename', 'input-filename', check_input_filename),
    OptionRule('output_filename', 'output-filename', check_output_filename),
    OptionRule('input_format', 'input-format', check_input_format),
    OptionRule('output_format', 'output-format', check_output_format),
    OptionRule('split_channels', 'split-channels'),
    OptionRule('zoom', 'zoom', check_zoom),
    OptionRule('pixels_per_second', 'pixels-per-second', check_int),
    OptionRule('bits', 'bits', check_bits),
    OptionRule('start', 'start', check_number),
    OptionRule('end', 'end', check_number),
    OptionRule('width', 'width', check_int),
    OptionRule('height', 'height', check_int),
    OptionRule('colors', 'colors', check_colors),
    OptionRule('waveform_color', 'waveform-color', check_rgb_color_code),
    OptionRule('border_color', 'border-color', check_rgb_color_code),
    OptionRule('background_color', 'background-color', check_rgb_color_code),
    OptionRule('axis_label_color', 'axis-label-color', check_rgb_color_code),
    OptionRule('waveform_style', 'waveform-style', check_waveform_style),
    OptionRule('bar_width', 'bar-width', check_int),
    OptionRule('bar_gap', 'bar-gap', check_int),
    OptionRule('bar_style', 'bar-style', check_bar_style),
    OptionRule('no_axis_labels', 'no-axis-labels'),
    OptionRule('with_axis_labels', 'with-axis-labels'),
    OptionRule('amplitude_scale', 'amplitude-scale', check_amplitude_scale),
    OptionRule('compression', 'compression', check_compression),
    OptionRule('raw_samplerate', 'raw-samplerate', check_int),
    OptionRule('raw_channels', 'raw-channels', check_int),
    OptionRule('raw_format', 'raw-format', check_raw_format),
)

RULES_BY_FIELD: Dict[str, OptionRule] = {rule.field: rule for rule in RULES}


@dataclass(frozen=True)
class WaveformOptions:
    """Explicit option record; ``None`` / ``False`` fields are omitted."""
    help: bool = False
    version: bool = False
    quiet: bool = False
    input_filename: Optional[str] = None
    output_filename: Optional[str] = None
    input_format: Optional[str] = None
    output_format: Optional[str] = None
    split_channels: bool = False
    zoom: Optional[Union[int, str]] = None
    pixels_per_second: Optional[int] = None
    bits: Optional[int] = None
    start: Optional[float] = None
    end: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    colors: Optional[str] = None
    waveform_color: Optional[str] = None
    border_color: Optional[str] = None
    background_color: Optional[str] = None
    axis_label_color: Optional[str] = None
    waveform_style: Optional[str] = None
    bar_width: Optional[int] = None
    bar_gap: Optional[int] = None
    bar_style: Optional[str] = None
    no_axis_labels: bool = False
    with_axis_labels: bool = False
    amplitude_scale: Optional[Union[float, str]] = None
    compression: Optional[int] = None
    raw_samplerate: Optional[int] = None
    raw_channels: Optional[int] = None
    raw_format: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, object]]) -> 'WaveformOptions':
        """Build a record from a plain dict (e.g. YAML), accepting kebab-case keys too."""
        if mapping is not None and not isinstance(mapping, Mapping):
            raise InvalidOptionError('options', mapping, "Options must be a mapping of option names to values")
        values = {}
        for key, value in (mapping or {}).items():
            name = str(key).replace('-', '_')
            if name not in RULES_BY_FIELD:
                raise InvalidOptionError(str(key), value, f"Unknown option: {key}")
            values[name] = value
        return cls(**values)

    def to_options(self) -> List[Option]:
        """Validate every set field and return the options in rule order."""
        result: List[Option] = []
        for f in fields(self):
            rule = RULES_BY_FIELD[f.name]
            value = getattr(self, f.name)
            if rule.is_flag:
                if value:
                    result.append(rule.make())
            elif value is not None:
                result.append(rule.make(value))
        return result


def render(options) -> List[str]:
    """Render options into discrete argv tokens."""
    return [opt.render() for opt in options]


def build_arguments(options: WaveformOptions) -> List[str]:
    return render(options.to_options())
