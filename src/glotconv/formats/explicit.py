"""

explicit.py

The "wavelength explicit" ASCII format read by the Glotaran kinetic analysis
tool. The table part of the file has the wavelengths on the first row, followed
by one row per time point: the time value, then one signal per wavelength, in
the same order as the header row.

Glotaran itself also expects a short preamble in front of the table:

```
<file name>
<free comment line>
Wavelength explicit
Intervalnr <number of wavelengths>
```

which is written only on request (`preamble=True`); the reader accepts files
with or without it.

"""
from typing import List, Optional
from dataclasses import dataclass

import logging
import os

import numpy

from ..errors import IoError, ParseError, ShapeError

logger = logging.getLogger(__name__)

FORMAT_LINE = "Wavelength explicit"
INTERVAL_KEY = "intervalnr"


def format_number(value: float) -> str:
    """
    Shortest text that parses back to the same float, without the trailing
    ".0" of integral values (400.0 -> "400").
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


@dataclass
class explicit_document:
    wavelengths: numpy.ndarray
    times: numpy.ndarray
    signals: numpy.ndarray
    comment: str = ""

    def __post_init__(self):
        self.wavelengths = numpy.asarray(self.wavelengths, dtype=numpy.float64)
        self.times = numpy.asarray(self.times, dtype=numpy.float64)
        if self.wavelengths.ndim != 1 or self.times.ndim != 1:
            raise ShapeError("Wavelengths and times must be one dimensional")
        try:
            self.signals = numpy.asarray(self.signals, dtype=numpy.float64)
        except ValueError:
            raise ShapeError("Signal rows do not all have the same width") from None
        if self.signals.size == 0 and len(self.times) == 0:
            self.signals = self.signals.reshape(0, len(self.wavelengths))
        if self.signals.ndim != 2:
            raise ShapeError("Signals must be a (time x wavelength) matrix")
        if self.signals.shape[0] != len(self.times):
            raise ShapeError(f"{self.signals.shape[0]} signal rows for {len(self.times)} time points")
        if self.signals.shape[1] != len(self.wavelengths):
            raise ShapeError(
                f"Row width {self.signals.shape[1]} does not match header width {len(self.wavelengths)}"
            )

    @property
    def shape(self):
        return self.signals.shape

    def to_lines(self, delimiter: str = "\t", preamble: bool = False, filename: str = "") -> List[str]:
        lines = []
        if preamble:
            lines.extend([
                _single_line(filename),
                _single_line(self.comment),
                FORMAT_LINE,
                f"Intervalnr {len(self.wavelengths)}",
            ])
        lines.append(delimiter.join(format_number(w) for w in self.wavelengths))
        for time, row in zip(self.times, self.signals):
            lines.append(delimiter.join([format_number(time)] + [format_number(s) for s in row]))
        return lines

    def to_text(self, delimiter: str = "\t", preamble: bool = False, filename: str = "") -> str:
        return "\n".join(self.to_lines(delimiter, preamble, filename)) + "\n"

    @staticmethod
    def from_text(text: str, filepath: str = "<text>"):
        """
        Parsing wavelength explicit text back into a document. Cells may be
        separated by any white space.
        """
        lines = text.splitlines()
        start, comment, expected = 0, "", None

        # The preamble is detected by its format line, on one of the first 3 lines
        for idx, line in enumerate(lines[:3]):
            if line.strip().lower() == FORMAT_LINE.lower():
                comment = lines[1].strip() if idx >= 2 else ""
                start = idx + 1
                break
            if line.strip().lower() == "time explicit":
                raise ParseError(filepath, "Time explicit files are not supported", idx + 1)

        if start:
            while start < len(lines) and not lines[start].strip():
                start += 1
            if start == len(lines) or not lines[start].strip().lower().startswith(INTERVAL_KEY):
                raise ParseError(filepath, "Missing Intervalnr line after the format line", start + 1)
            fields = lines[start].split()
            if len(fields) != 2:
                raise ParseError(filepath, f"Malformed Intervalnr line {lines[start].strip()!r}", start + 1)
            try:
                expected = int(fields[1])
            except ValueError:
                raise ParseError(filepath, f"Non-integer interval count {fields[1]!r}", start + 1) from None
            start += 1

        header: Optional[numpy.ndarray] = None
        times, signals = [], []
        for idx in range(start, len(lines)):
            cells = lines[idx].split()
            if not cells:
                continue
            values = _parse_cells(cells, filepath, idx + 1)
            if header is None:
                header = values
                if expected is not None and expected != len(header):
                    raise ParseError(
                        filepath, f"Intervalnr {expected} does not match the {len(header)} wavelengths", idx + 1
                    )
                continue
            if len(values) != len(header) + 1:
                raise ParseError(
                    filepath, f"Row has {len(values) - 1} signals, header has {len(header)} wavelengths", idx + 1
                )
            times.append(values[0])
            signals.append(values[1:])

        if header is None:
            raise ParseError(filepath, "Missing wavelength header row")
        return explicit_document(
            wavelengths=header,
            times=numpy.array(times, dtype=numpy.float64),
            signals=numpy.array(signals, dtype=numpy.float64).reshape(len(times), len(header)),
            comment=comment,
        )


def _single_line(text: str) -> str:
    # Preamble fields are one line each
    return " ".join(str(text).splitlines())


def _parse_cells(cells: List[str], filepath: str, line: int) -> numpy.ndarray:
    try:
        return numpy.array(cells, dtype=numpy.float64)
    except ValueError:
        raise ParseError(filepath, f"Non-numeric cell in {' '.join(cells)!r}", line) from None


def output_path(source: str, suffix: str = ".ascii") -> str:
    """
    Output file name derived from the input by replacing its extension.
    """
    base, _ = os.path.splitext(str(source))
    return f"{base}{suffix}"


def write_explicit(
    document: explicit_document, filename: str, delimiter: str = "\t", preamble: bool = False
) -> str:
    """
    Writing the document to file, overwriting existing files. The text is fully
    rendered before the file is opened.
    """
    filename = str(filename)
    text = document.to_text(delimiter=delimiter, preamble=preamble, filename=os.path.basename(filename))
    try:
        with open(filename, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as err:
        raise IoError(filename, f"Cannot write output file ({err.strerror})") from err
    logger.debug(f"Wrote {document.shape[0]} x {document.shape[1]} table to {filename}")
    return filename


def read_explicit(filename: str, encoding: str = "utf-8") -> explicit_document:
    """
    Reading a wavelength explicit file back into a document.
    """
    filename = str(filename)
    try:
        with open(filename, "r", encoding=encoding) as f:
            text = f.read()
    except OSError as err:
        raise IoError(filename, f"Cannot read file ({err.strerror})") from err
    except UnicodeDecodeError as err:
        raise ParseError(filename, f"File is not valid {encoding} text") from err
    return explicit_document.from_text(text, filepath=filename)
