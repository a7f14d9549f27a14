import numpy as np
import pytest

from glotconv.errors import IoError, ParseError
from glotconv.formats.explicit import read_explicit
from glotconv.formats.table import reshape
from glotconv.formats.transient import transient_container, transient_settings


def test_read_transient(transient_file):
    cont = transient_container.from_txt(transient_file)
    assert cont.table.runinfo.instrument == "transient"
    assert len(cont.table) == 3

    doc = reshape(cont.table)
    np.testing.assert_array_equal(doc.wavelengths, [400, 450, 500])
    np.testing.assert_array_equal(doc.times, [0, 1e-07, 2e-07])
    np.testing.assert_array_equal(doc.signals[1], [0.15, 0.22, 0.31])


def test_save_next_to_input(transient_file):
    out_f = transient_container.from_txt(transient_file).save_to_file()
    assert out_f == str(transient_file.with_suffix(".ascii"))
    lines = open(out_f).read().splitlines()
    assert lines[0] == "400\t450\t500"
    assert lines[1] == "0\t0.1\t0.2\t0.3"
    assert len(lines) == 4


def test_save_with_preamble(transient_file, tmp_path):
    out_f = transient_container.from_txt(transient_file).save_to_file(
        tmp_path / "out.ascii", preamble=True, comment="ZnTPP"
    )
    doc = read_explicit(out_f)
    assert doc.comment == "ZnTPP"
    assert doc.shape == (3, 3)


def test_label_without_wavelength_ignored(tmp_path, transient_text):
    text = transient_text.replace("450nm", "ref")
    path = tmp_path / "run.csv"
    path.write_text(text)
    doc = reshape(transient_container.from_txt(path).table)
    np.testing.assert_array_equal(doc.wavelengths, [400, 500])
    np.testing.assert_array_equal(doc.signals[0], [0.1, 0.3])


def test_custom_layout(tmp_path):
    path = tmp_path / "run.txt"
    path.write_text("t;412.5 nm;650 nm\nmeta;1;2\n0;1;2\n5;3;4\n")
    settings = transient_settings(delimiter=";", label_row=0, skip_rows=1)
    doc = reshape(transient_container.from_txt(path, settings).table)
    np.testing.assert_array_equal(doc.wavelengths, [412.5, 650])
    np.testing.assert_array_equal(doc.times, [0, 5])


def test_non_numeric_signal(tmp_path, transient_text):
    path = tmp_path / "run.csv"
    path.write_text(transient_text.replace("0.22", "n/a"))
    with pytest.raises(ParseError) as exc:
        transient_container.from_txt(path)
    assert exc.value.line == 12
    assert "n/a" in exc.value.message


def test_non_numeric_time(tmp_path, transient_text):
    path = tmp_path / "run.csv"
    path.write_text(transient_text.replace("1e-07,", "later,"))
    with pytest.raises(ParseError):
        transient_container.from_txt(path)


def test_truncated_row(tmp_path, transient_text):
    path = tmp_path / "run.csv"
    path.write_text(transient_text + "3e-07,0.1\n")
    with pytest.raises(ParseError) as exc:
        transient_container.from_txt(path)
    assert "Truncated" in exc.value.message


def test_empty_cell_is_not_zero(tmp_path, transient_text):
    path = tmp_path / "run.csv"
    path.write_text(transient_text.replace("0.31", ""))
    with pytest.raises(ParseError):
        transient_container.from_txt(path)


def test_missing_label_row(tmp_path):
    path = tmp_path / "run.csv"
    path.write_text("only a title\n")
    with pytest.raises(ParseError):
        transient_container.from_txt(path)


def test_no_wavelength_labels(tmp_path):
    path = tmp_path / "run.csv"
    path.write_text("title\n,a,b\n")
    with pytest.raises(ParseError):
        transient_container.from_txt(path)


def test_no_data_rows(tmp_path, transient_text):
    path = tmp_path / "run.csv"
    path.write_text("\n".join(transient_text.splitlines()[:10]) + "\n")
    with pytest.raises(ParseError):
        transient_container.from_txt(path)


def test_missing_file(tmp_path):
    with pytest.raises(IoError):
        transient_container.from_txt(tmp_path / "absent.csv")


@pytest.mark.parametrize("cell", ["nan", "inf", "-Infinity"])
def test_non_finite_signal(tmp_path, transient_text, cell):
    path = tmp_path / "run.csv"
    path.write_text(transient_text.replace("0.22", cell))
    with pytest.raises(ParseError) as exc:
        transient_container.from_txt(path)
    assert exc.value.line == 12
    assert cell in exc.value.message
