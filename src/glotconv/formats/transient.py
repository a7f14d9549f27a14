"""

transient.py

Reading the comma separated export of the transient absorption (laser flash
photolysis) spectrometer. The export layout is:

- A title line, ignored.
- A label row: the first column holds the time axis, the other columns are
  labelled with their probe wavelength (e.g. "400nm"). Columns without a
  wavelength in their label are not kept.
- A block of instrument metadata rows (8 rows by default), ignored.
- One row per time point: the time, then one absorbance change per column.
  Rows may carry extra empty trailing cells.

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
class transient_settings:
    """
    Layout of the spectrometer export. Row indices count non-blank rows.
    """

    delimiter: str = ","
    label_row: int = 1
    skip_rows: int = 8
    encoding: str = "latin-1"


@dataclass
class transient_container:
    settings: transient_settings
    table: measurement_table

    @staticmethod
    def from_txt(filepath: str, settings: Optional[transient_settings] = None):
        """
        Getting the time/wavelength table from the spectrometer export.
        """
        if settings is None:
            settings = transient_settings()
        filepath = str(filepath)
        rows = read_rows(filepath, settings.delimiter, settings.encoding)

        if len(rows) <= settings.label_row:
            raise ParseError(filepath, "Missing wavelength label row")
        label_line, labels = rows[settings.label_row]
        columns = wavelength_columns(labels, first=1)
        if not columns:
            raise ParseError(filepath, "No wavelength found in the label row", label_line)
        indices = [idx for idx, _ in columns]
        wavelengths = numpy.array([w for _, w in columns], dtype=numpy.float64)

        body = rows[settings.label_row + 1 + settings.skip_rows:]
        if not body:
            raise ParseError(filepath, "No data rows after the metadata block")

        times = numpy.empty(len(body), dtype=numpy.float64)
        signals = numpy.empty((len(body), len(indices)), dtype=numpy.float64)
        for n, (line, cells) in enumerate(body):
            if len(cells) <= indices[-1]:
                raise ParseError(
                    filepath, f"Truncated row: {len(cells)} cells, expected at least {indices[-1] + 1}", line
                )
            times[n] = to_floats(cells[:1], filepath, line, what="time")[0]
            signals[n] = to_floats([cells[i] for i in indices], filepath, line, what="signal")

        logger.debug(f"Read {filepath}: {len(times)} time points, {len(wavelengths)} wavelengths")
        runinfo = table_runinfo(instrument="transient", source=filepath)
        return transient_container(
            settings=settings,
            table=measurement_table.from_matrix(times, wavelengths, signals, runinfo),
        )

    def save_to_file(
        self, filename: Optional[str] = None, delimiter: str = "\t", preamble: bool = False, comment: str = ""
    ) -> str:
        """
        Saving the table in the wavelength explicit format, by default next to
        the input with the ".ascii" extension.
        """
        if filename is None:
            filename = output_path(self.table.runinfo.source)
        return write_explicit(reshape(self.table, comment=comment), filename, delimiter, preamble)
