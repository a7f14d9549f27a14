"""

convert.py

Converting instrument exports to the wavelength explicit format. Each file goes
through the same three steps: the instrument container reads the export into a
measurement table, the table is checked and reshaped, and the result is written
next to the input (or to the requested output).

Command line usage:

  glotconv -i fluorescence --sync-delay 12 --ns-per-channel 0.0244 decay.txt
  glotconv run1.csv run2.csv

"""
from typing import List, Optional

import argparse
import logging
import os

from .config import converter_config, load_config, resolve_delimiter
from .errors import ConversionError
from .formats.explicit import output_path
from .formats.fluorescence import fluorescence_container
from .formats.transient import transient_container
from .logger import setup_logging
from .version import __version__

logger = logging.getLogger(__name__)

INSTRUMENTS = {
    "transient": transient_container,
    "fluorescence": fluorescence_container,
}


def convert_file(
    source: str,
    instrument: Optional[str] = None,
    output: Optional[str] = None,
    config: Optional[converter_config] = None,
) -> str:
    """
    Converting a single instrument file, returning the path of the written
    file. Nothing is written unless the whole file was read and reshaped.
    """
    if config is None:
        config = converter_config()
    if instrument is None:
        instrument = config.instrument
    if instrument not in INSTRUMENTS:
        raise ConversionError(f"Unknown instrument {instrument!r}, expected one of {', '.join(INSTRUMENTS)}")

    source = str(source)
    if output is None:
        output = output_path(source, config.suffix)
    output = str(output)
    if os.path.abspath(output) == os.path.abspath(source):
        raise ConversionError(f"Output would overwrite the input file {source}")

    container = INSTRUMENTS[instrument].from_txt(source, config.settings_for(instrument))
    return container.save_to_file(
        output,
        delimiter=resolve_delimiter(config.delimiter),
        preamble=config.preamble,
        comment=config.comment,
    )


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glotconv",
        description="Converting instrument exports to the Glotaran wavelength explicit format.",
    )
    parser.add_argument("input", type=str, nargs="+", help="input instrument file(s)")
    parser.add_argument(
        "-i", "--instrument", choices=sorted(INSTRUMENTS), default=None,
        help="instrument that produced the input (default: transient)",
    )
    parser.add_argument("-o", "--output", type=str, default=None, help="output file (single input only)")
    parser.add_argument("--config", type=str, default=None, help="JSON configuration file")
    parser.add_argument("--sync-delay", type=float, default=None, help="fluorometer sync delay [channels]")
    parser.add_argument("--ns-per-channel", type=float, default=None, help="fluorometer channel width [ns]")
    parser.add_argument("--delimiter", choices=["tab", "space"], default=None, help="output cell delimiter")
    parser.add_argument(
        "--preamble", action="store_true", default=None, help="write the Glotaran header lines before the table"
    )
    parser.add_argument("--comment", type=str, default=None, help="comment line of the Glotaran header")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output")
    parser.add_argument("--log-file", type=str, default=None, help="also write a debug log to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_arguments(config: converter_config, args: argparse.Namespace) -> converter_config:
    """
    Command line values take precedence over the configuration file.
    """
    if args.instrument is not None:
        config.instrument = args.instrument
    if args.sync_delay is not None:
        config.fluorescence.sync_delay = args.sync_delay
    if args.ns_per_channel is not None:
        config.fluorescence.ns_per_channel = args.ns_per_channel
    if args.delimiter is not None:
        config.delimiter = args.delimiter
    if args.preamble is not None:
        config.preamble = args.preamble
    if args.comment is not None:
        config.comment = args.comment
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    if args.output is not None and len(args.input) > 1:
        parser.error("--output can only be used with a single input file")

    try:
        config = load_config(args.config) if args.config else converter_config()
    except ConversionError as err:
        setup_logging("INFO", args.log_file)
        logger.error(f"Cannot load configuration: {err}")
        return 1
    config = _apply_arguments(config, args)
    setup_logging(config.log_level, args.log_file)

    failed = 0
    for idx, in_f in enumerate(args.input):
        logger.info(f"Converting file {in_f} [{idx+1}/{len(args.input)}]")
        try:
            out_f = convert_file(in_f, output=args.output, config=config)
        except ConversionError as err:
            logger.error(f"Failed to convert {in_f}: {err}")
            failed += 1
            continue
        logger.info(f"Saved {out_f}")

    return 1 if failed else 0
