"""
Command-line interface for the audiowaveform client
"""
import argparse
import logging
import os
import shlex
import sys

from .client import AudiowaveformClient
from .config import Config
from .core.options import (
    BAR_STYLES,
    COLOR_SCHEMES,
    RAW_FORMATS,
    WAVEFORM_STYLES,
    WaveformOptions,
    file_extension,
)
from .errors import (
    ConfigError,
    DiscoveryError,
    InvalidOptionError,
    ProcessFailedError,
    ProcessTimeoutError,
    WaveformDataError,
)
from .services.locator import get_locator
from .waveform_data import load_waveform

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_OPTION = 2
EXIT_DISCOVERY = 3
EXIT_PROCESS = 4
EXIT_TIMEOUT = 5

# argparse dest -> WaveformOptions field, for everything passed to the binary
OPTION_ARGS = (
    'tool_help', 'quiet', 'input_filename', 'output_filename', 'input_format',
    'output_format', 'split_channels', 'zoom', 'pixels_per_second', 'bits',
    'start', 'end', 'width', 'height', 'colors', 'waveform_color', 'border_color',
    'background_color', 'axis_label_color', 'waveform_style', 'bar_width',
    'bar_gap', 'bar_style', 'no_axis_labels', 'with_axis_labels',
    'amplitude_scale', 'compression', 'raw_samplerate', 'raw_channels', 'raw_format',
)


def _int_or_auto(value):
    if value == 'auto':
        return value
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer or 'auto', got {value!r}")


def _float_or_auto(value):
    if value == 'auto':
        return value
    try:
        return float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number or 'auto', got {value!r}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='audiowaveform-client',
        description='Validate options and run audiowaveform',
    )
    parser.add_argument('--config', type=str, help='Path to the YAML configuration file')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], help='Logging level (default: WARNING)')
    parser.add_argument('--timeout', type=float, help='Seconds before audiowaveform is killed (default: 120)')
    parser.add_argument('--binary-path', type=str, help='Directory or full path of audiowaveform (skips discovery)')
    parser.add_argument('--binary-name', type=str, help='Executable name (default: audiowaveform)')
    parser.add_argument('--locator', type=str, choices=['whereis', 'which'], help='How to discover the binary (default: whereis)')
    parser.add_argument('--dry-run', action='store_true', help='Print the command line without running it')
    parser.add_argument('--print-version', action='store_true', help='Print the audiowaveform version and exit')

    tool = parser.add_argument_group('audiowaveform options')
    tool.add_argument('--tool-help', action='store_true', help='Pass --help to audiowaveform')
    tool.add_argument('-q', '--quiet', action='store_true', help='Disable progress and information messages')
    tool.add_argument('-i', '--input-filename', type=str, help='Input file (.mp3, .wav, .flac, .ogg, .oga, .opus, .dat)')
    tool.add_argument('-o', '--output-filename', type=str, help='Output file (.wav, .dat, .png, .json)')
    tool.add_argument('--input-format', type=str, help='Input format (mp3, wav, flac, ogg, oga, opus, dat, raw)')
    tool.add_argument('--output-format', type=str, help='Output format (wav, dat, png, json)')
    tool.add_argument('--split-channels', action='store_true', help='Output multi-channel waveform data or images')
    tool.add_argument('-z', '--zoom', type=_int_or_auto, help="Samples per pixel, or 'auto'")
    tool.add_argument('--pixels-per-second', type=int, help='Zoom level in pixels per second')
    tool.add_argument('-b', '--bits', type=int, help='Bits (8 or 16)')
    tool.add_argument('-s', '--start', type=float, help='Start time (seconds)')
    tool.add_argument('-e', '--end', type=float, help='End time (seconds)')
    tool.add_argument('-w', '--width', type=int, help='Image width (pixels)')
    tool.add_argument('--height', type=int, help='Image height (pixels)')
    tool.add_argument('-c', '--colors', type=str, help=f"Color scheme ({' or '.join(COLOR_SCHEMES)})")
    tool.add_argument('--waveform-color', type=str, help='Waveform color (rrggbb[aa])')
    tool.add_argument('--border-color', type=str, help='Border color (rrggbb[aa])')
    tool.add_argument('--background-color', type=str, help='Background color (rrggbb[aa])')
    tool.add_argument('--axis-label-color', type=str, help='Axis label color (rrggbb[aa])')
    tool.add_argument('--waveform-style', type=str, help=f"Waveform style ({' or '.join(WAVEFORM_STYLES)})")
    tool.add_argument('--bar-width', type=int, help='Bar width (pixels)')
    tool.add_argument('--bar-gap', type=int, help='Gap between bars (pixels)')
    tool.add_argument('--bar-style', type=str, help=f"Bar style ({' or '.join(BAR_STYLES)})")
    labels_group = tool.add_mutually_exclusive_group()
    labels_group.add_argument('--no-axis-labels', action='store_true', help='Render the image without axis labels')
    labels_group.add_argument('--with-axis-labels', action='store_true', help='Render the image with axis labels')
    tool.add_argument('--amplitude-scale', type=_float_or_auto, help="Amplitude scale, or 'auto'")
    tool.add_argument('--compression', type=int, help='PNG compression level: 0 (none) to 9 (best), or -1 (default)')
    tool.add_argument('--raw-samplerate', type=int, help='Sample rate of raw input (Hz)')
    tool.add_argument('--raw-channels', type=int, help='Channel count of raw input')
    tool.add_argument('--raw-format', type=str, help=f"Raw sample format ({', '.join(RAW_FORMATS)})")
    return parser


def _find_default_config():
    cwd = os.getcwd()
    for candidate in (os.path.join(cwd, 'config.yml'), os.path.join(cwd, 'config.yaml')):
        if os.path.exists(candidate):
            return candidate
    return None


def _option_values(args):
    values = {}
    for dest in OPTION_ARGS:
        field = 'help' if dest == 'tool_help' else dest
        values[field] = getattr(args, dest)
    return values


def _log_waveform_summary(output_filename):
    if file_extension(output_filename) not in ('dat', 'json') or not os.path.exists(output_filename):
        return
    try:
        summary = load_waveform(output_filename).summary()
    except WaveformDataError as e:
        logger.warning("Could not read back %s: %s", output_filename, e)
        return
    logger.info("Waveform data %s: %s", output_filename, summary)


def run(config):
    """Build a client from ``config`` and run it; returns an exit code."""
    locator = get_locator(config.get('locator', 'whereis'), config.get('binary_path'))
    client = AudiowaveformClient(
        locator=locator,
        binary_name=config.get('binary_name', 'audiowaveform'),
        timeout=config.get('timeout', 120),
    )

    if config.get('print_version'):
        print(client.get_version())
        return EXIT_OK

    options = WaveformOptions.from_mapping(config.get('options'))
    client.apply_options(options)

    if config.get('dry_run'):
        print(' '.join(shlex.quote(a) for a in client.build_argv()))
        return EXIT_OK

    output = client.execute()
    if output:
        print(output, end='' if output.endswith('\n') else '\n')
    if options.output_filename:
        _log_waveform_summary(options.output_filename)
    return EXIT_OK


def main(argv=None):
    """Main CLI function"""
    # Default to WARNING; --log-level or the config raise it after parsing
    logging.basicConfig(level=logging.WARNING)
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config(config_file=args.config or _find_default_config())
        config.update_from_args({
            'log_level': args.log_level,
            'timeout': args.timeout,
            'binary_path': args.binary_path,
            'binary_name': args.binary_name,
            'locator': args.locator,
            'dry_run': args.dry_run or None,
            'print_version': args.print_version or None,
        })
        config.update_options(_option_values(args))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    log_level = config.get('log_level')
    if log_level:
        logging.getLogger().setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    try:
        return run(config)
    except InvalidOptionError as e:
        print(f"Invalid option --{e.option}: {e}", file=sys.stderr)
        return EXIT_INVALID_OPTION
    except DiscoveryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DISCOVERY
    except ProcessTimeoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_TIMEOUT
    except ProcessFailedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_PROCESS
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_OPTION


if __name__ == "__main__":
    sys.exit(main())
