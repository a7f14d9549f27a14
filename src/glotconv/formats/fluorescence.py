"""

fluorescence.py

Reading the tab separated decay export of the time-resolved (TCSPC)
fluorometer. The first row holds the column labels; the first column is the
prompt (instrument response) and is dropped, the other columns are the decays
recorded at the wavelength given in their label. Each following row is one
timing channel, the time axis is not stored in the file but reconstructed from
the channel index:

  t[n] = int((n - sync_delay) * ns_per_channel)

truncated toward zero, in ns.

"""
from typing import Optional
from dataclasses import dataclass

import logging

import numpy

from ..errors import ParseError
from .common import read_rows, to_floats, wavelength_columns
from .explicit import output_path, write_explicit
from .table import measurement_table, reshape, table_runinfo

logger = logging.getLogger(__name__)


@dataclass
class fluorescence_settings:
    """
    Timing calibration of the acquisition
    """

    delimiter: str = "\t"
    sync_delay: float = 0.0
    ns_per_channel: float = 1.0
    encoding: str = "latin-1"


def channel_times(n_channels: int, sync_delay: float, ns_per_channel: float) -> numpy.ndarray:
    channels = numpy.arange(n_channels, dtype=numpy.float64)
    # + 0.0 maps -0.0 to 0.0
    return numpy.trunc((channels - sync_delay) * ns_per_channel) + 0.0


@dataclass
class fluorescence_container:
    settings: fluorescence_settings
    table: measurement_table

    @staticmethod
    def from_txt(filepath: str, settings: Optional[fluorescence_settings] = None):
        if settings is None:
            settings = fluorescence_settings()
        filepath = str(filepath)
        rows = read_rows(filepath, settings.delimiter, settings.encoding)

        if not rows:
            raise ParseError(filepath, "Missing header row")
        header_line, labels = rows[0]
        columns = wavelength_columns(labels, first=1)  # Column 0 is the prompt
        if not columns:
            raise ParseError(filepath, "No wavelength found in the header row", header_line)
        indices = [idx for idx, _ in columns]
        wavelengths = numpy.array([w for _, w in columns], dtype=numpy.float64)

        body = rows[1:]
        if not body:
            raise ParseError(filepath, "No decay rows after the header")

        signals = numpy.empty((len(body), len(indices)), dtype=numpy.float64)
        for n, (line, cells) in enumerate(body):
            if len(cells) <= indices[-1]:
                raise ParseError(
                    filepath, f"Truncated row: {len(cells)} cells, expected at least {indices[-1] + 1}", line
                )
            signals[n] = to_floats([cells[i] for i in indices], filepath, line, what="count")
        times = channel_times(len(body), settings.sync_delay, settings.ns_per_channel)

        logger.debug(f"Read {filepath}: {len(times)} channels, {len(wavelengths)} wavelengths")
        runinfo = table_runinfo(instrument="fluorescence", source=filepath)
        return fluorescence_container(
            settings=settings,
            table=measurement_table.from_matrix(times, wavelengths, signals, runinfo),
        )

    def save_to_file(
        self, filename: Optional[str] = None, delimiter: str = "\t", preamble: bool = False, comment: str = ""
    ) -> str:
        if filename is None:
            filename = output_path(self.table.runinfo.source)
        return write_explicit(reshape(self.table, comment=comment), filename, delimiter, preamble)
