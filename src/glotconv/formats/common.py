"""

common.py

Helpers shared by the instrument readers: splitting the delimited text export
into rows, recognizing wavelength labels, and converting text cells to numbers
with errors that point at the offending line.

"""
from typing import List, Optional, Sequence, Tuple

import csv
import re

import numpy

from ..errors import IoError, ParseError

# First number with at least three integer digits, e.g. "400nm" -> 400
__wavelength_pattern__ = re.compile(r"\d{3,}(?:\.\d+)?")


def wavelength_from_label(label: str) -> Optional[float]:
    """
    Extracting the wavelength from a column label, None if the label does not
    contain one.
    """
    match = __wavelength_pattern__.search(label)
    if match is None:
        return None
    return float(match.group(0))


def wavelength_columns(labels: Sequence[str], first: int = 1) -> List[Tuple[int, float]]:
    """
    Listing the (column index, wavelength) of the labels carrying a wavelength,
    starting from column `first`.
    """
    columns = []
    for idx in range(first, len(labels)):
        wavelength = wavelength_from_label(labels[idx])
        if wavelength is not None:
            columns.append((idx, wavelength))
    return columns


def read_rows(filepath: str, delimiter: str, encoding: str) -> List[Tuple[int, List[str]]]:
    """
    Reading the delimited text file into a list of (line number, cells). Rows
    may have different number of cells. Blank rows are dropped, and the cells
    are stripped of surrounding white space.
    """
    rows = []
    try:
        with open(filepath, "r", encoding=encoding, newline="") as f:
            reader = csv.reader(f, delimiter=delimiter)
            for cells in reader:
                cells = [c.strip() for c in cells]
                if not any(cells):
                    continue
                rows.append((reader.line_num, cells))
    except OSError as err:
        raise IoError(str(filepath), f"Cannot read input file ({err.strerror})") from err
    except UnicodeDecodeError as err:
        raise ParseError(str(filepath), f"File is not valid {encoding} text") from err
    except csv.Error as err:
        raise ParseError(str(filepath), f"Malformed delimited text ({err})") from err
    return rows


def to_floats(cells: Sequence[str], filepath: str, line: int, what: str = "value") -> numpy.ndarray:
    """
    Converting a sequence of text cells to a float64 array, raising a
    ParseError naming the first cell that is not a finite number. Instrument
    exports mark missing points with empty cells, so "nan" or "inf" are
    rejected as well.
    """
    try:
        values = numpy.array(cells, dtype=numpy.float64)
    except ValueError:
        for cell in cells:
            try:
                float(cell)
            except ValueError:
                raise ParseError(filepath, f"Non-numeric {what} {cell!r}", line) from None
        raise
    bad = numpy.flatnonzero(~numpy.isfinite(values))
    if len(bad):
        raise ParseError(filepath, f"Non-finite {what} {cells[bad[0]]!r}", line)
    return values
