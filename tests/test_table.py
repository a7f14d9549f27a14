import numpy as np
import pytest

from glotconv.errors import ParseError, ShapeError
from glotconv.formats.table import measurement_table, reshape, table_runinfo


def test_spec_example_renders():
    table = measurement_table.from_rows([
        (0, {400: 0.1, 450: 0.2}),
        (1, {400: 0.15, 450: 0.22}),
    ])
    doc = reshape(table)
    assert doc.to_text(delimiter=" ") == "400 450\n0 0.1 0.2\n1 0.15 0.22\n"


def test_from_rows_keeps_pair_order():
    table = measurement_table.from_rows([
        (0.5, [(500, 3.0), (400, 1.0)]),
        (1.5, [(500, 4.0), (400, 2.0)]),
    ], runinfo=table_runinfo(instrument="test", source="memory"))
    assert len(table) == 2
    assert table.data.fields == ["time", "wavelength", "signal"]
    np.testing.assert_array_equal(table.times, [0.5, 1.5])

    doc = reshape(table)
    np.testing.assert_array_equal(doc.wavelengths, [500, 400])
    np.testing.assert_array_equal(doc.signals, [[3.0, 1.0], [4.0, 2.0]])


def test_header_width_matches_every_row():
    rng = np.random.default_rng(1)
    wavelengths = np.arange(400, 700, 25, dtype=float)
    signals = rng.normal(size=(7, len(wavelengths)))
    table = measurement_table.from_matrix(np.linspace(0, 1, 7), wavelengths, signals)
    doc = reshape(table)
    lines = doc.to_text().splitlines()
    width = len(lines[0].split("\t"))
    assert width == len(wavelengths)
    assert all(len(line.split("\t")) == width + 1 for line in lines[1:])


def test_from_matrix_matches_from_rows():
    by_matrix = reshape(measurement_table.from_matrix([0, 1], [400, 450], [[0.1, 0.2], [0.15, 0.22]]))
    by_rows = reshape(measurement_table.from_rows([
        (0, {400: 0.1, 450: 0.2}),
        (1, {400: 0.15, 450: 0.22}),
    ]))
    np.testing.assert_array_equal(by_matrix.signals, by_rows.signals)
    np.testing.assert_array_equal(by_matrix.wavelengths, by_rows.wavelengths)
    np.testing.assert_array_equal(by_matrix.times, by_rows.times)


def test_mismatched_wavelength_count():
    table = measurement_table.from_rows([
        (0, {400: 0.1, 450: 0.2}),
        (1, {400: 0.15}),
    ])
    with pytest.raises(ShapeError) as exc:
        reshape(table)
    assert exc.value.row == 1


def test_mismatched_wavelength_order():
    table = measurement_table.from_rows([
        (0, [(400, 0.1), (450, 0.2)]),
        (1, [(450, 0.22), (400, 0.15)]),
        (2, [(400, 0.1), (450, 0.2)]),
    ])
    with pytest.raises(ShapeError) as exc:
        reshape(table)
    assert exc.value.row == 1


def test_mismatched_wavelength_set():
    table = measurement_table.from_rows([
        (0, {400: 0.1, 450: 0.2}),
        (1, {400: 0.15, 450: 0.22}),
        (2, {400: 0.15, 500: 0.22}),
    ])
    with pytest.raises(ShapeError) as exc:
        reshape(table)
    assert exc.value.row == 2


def test_duplicated_wavelength():
    table = measurement_table.from_rows([(0, [(400, 0.1), (400, 0.2)])])
    with pytest.raises(ShapeError):
        reshape(table)


def test_empty_table():
    with pytest.raises(ShapeError):
        reshape(measurement_table.from_rows([]))


def test_rows_without_wavelengths():
    with pytest.raises(ShapeError):
        reshape(measurement_table.from_rows([(0, {}), (1, {})]))


def test_non_numeric_signal_in_rows():
    with pytest.raises(ParseError):
        measurement_table.from_rows([(0, {400: "abc"})])


def test_comment_passed_to_document():
    table = measurement_table.from_rows([(0, {400: 1.0})])
    assert reshape(table, comment="sample A").comment == "sample A"
