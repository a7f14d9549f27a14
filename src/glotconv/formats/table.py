"""

table.py

The measurement table is the in-memory form of an instrument file: one record
per time point, each holding the list of wavelengths it was measured at and the
matching signals. The lists are stored as awkward arrays so that a table can be
built from rows that do not (yet) agree on their columns; `reshape` is then
responsible for checking the rows agree before casting them into the regular
time-by-wavelength matrix of the wavelength explicit format.

"""
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

import collections.abc
import logging

import awkward
import numpy

from ..errors import ParseError, ShapeError
from .explicit import explicit_document

logger = logging.getLogger(__name__)

Pairs = Union[Mapping[float, float], Sequence[Tuple[float, float]]]


@dataclass
class table_runinfo:
    """
    Where the table came from.
    """

    instrument: str = ""
    source: str = "<table>"


@dataclass
class measurement_table:
    runinfo: table_runinfo
    data: awkward.Array

    def __len__(self) -> int:
        return len(self.data)

    @property
    def times(self) -> numpy.ndarray:
        return awkward.to_numpy(self.data.time)

    @staticmethod
    def from_rows(rows: Iterable[Tuple[float, Pairs]], runinfo: Optional[table_runinfo] = None):
        """
        Building the table from (time, pairs) rows, where pairs is either a
        {wavelength: signal} mapping or a sequence of (wavelength, signal)
        tuples. The order of the pairs is kept.
        """
        if runinfo is None:
            runinfo = table_runinfo()
        times, counts, wavelengths, signals = [], [], [], []
        for idx, (time, pairs) in enumerate(rows):
            if isinstance(pairs, collections.abc.Mapping):
                pairs = list(pairs.items())
            try:
                times.append(float(time))
                wavelengths.extend(float(w) for w, _ in pairs)
                signals.extend(float(s) for _, s in pairs)
            except (TypeError, ValueError) as err:
                raise ParseError(runinfo.source, f"Non-numeric entry in row {idx} ({err})") from None
            counts.append(len(pairs))

        counts = numpy.array(counts, dtype=numpy.int64)
        data = awkward.zip(
            {
                "time": numpy.array(times, dtype=numpy.float64),
                "wavelength": awkward.unflatten(numpy.array(wavelengths, dtype=numpy.float64), counts),
                "signal": awkward.unflatten(numpy.array(signals, dtype=numpy.float64), counts),
            },
            depth_limit=1,
        )
        return measurement_table(runinfo=runinfo, data=data)

    @staticmethod
    def from_matrix(times, wavelengths, signals, runinfo: Optional[table_runinfo] = None):
        """
        Building the table from a regular (time x wavelength) signal matrix, as
        produced by the instrument readers.
        """
        if runinfo is None:
            runinfo = table_runinfo()
        times = numpy.asarray(times, dtype=numpy.float64)
        wavelengths = numpy.asarray(wavelengths, dtype=numpy.float64)
        signals = numpy.asarray(signals, dtype=numpy.float64).reshape(len(times), len(wavelengths))
        grid = numpy.broadcast_to(wavelengths, signals.shape)
        data = awkward.zip(
            {
                "time": times,
                "wavelength": awkward.from_regular(awkward.from_numpy(numpy.array(grid)), axis=1),
                "signal": awkward.from_regular(awkward.from_numpy(signals), axis=1),
            },
            depth_limit=1,
        )
        return measurement_table(runinfo=runinfo, data=data)


def reshape(table: measurement_table, comment: str = "") -> explicit_document:
    """
    Checking that every row of the table has the same wavelengths, in the same
    order, and casting the table to the wavelength explicit layout: one row per
    time point (in table order), one column per wavelength (in the order of the
    first row).
    """
    data = table.data
    if len(data) == 0:
        raise ShapeError("Measurement table has no time points")

    n_wave = awkward.to_numpy(awkward.num(data.wavelength, axis=1))
    n_signal = awkward.to_numpy(awkward.num(data.signal, axis=1))
    bad = numpy.flatnonzero(n_wave != n_signal)
    if len(bad):
        row = int(bad[0])
        raise ShapeError(f"Row has {n_wave[row]} wavelengths but {n_signal[row]} signals", row=row)

    bad = numpy.flatnonzero(n_wave != n_wave[0])
    if len(bad):
        row = int(bad[0])
        raise ShapeError(f"Row has {n_wave[row]} wavelengths, expected {n_wave[0]}", row=row)
    if n_wave[0] == 0:
        raise ShapeError("Measurement table has no wavelength columns")

    wavelengths = awkward.to_numpy(awkward.to_regular(data.wavelength, axis=1))
    reference = wavelengths[0]
    if len(numpy.unique(reference)) != len(reference):
        raise ShapeError("Duplicated wavelength in the table columns", row=0)
    bad = numpy.flatnonzero(numpy.any(wavelengths != reference, axis=1))
    if len(bad):
        raise ShapeError("Row wavelengths differ from those of the first row", row=int(bad[0]))

    signals = awkward.to_numpy(awkward.to_regular(data.signal, axis=1))
    logger.debug(f"Reshaped {table.runinfo.source}: {signals.shape[0]} times x {signals.shape[1]} wavelengths")
    return explicit_document(
        wavelengths=numpy.array(reference),
        times=awkward.to_numpy(data.time),
        signals=numpy.array(signals),
        comment=comment,
    )
