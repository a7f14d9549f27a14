"""Shared fixtures: synthetic instrument exports written to tmp_path."""

import pytest

from glotconv.logger import reset_logging

TRANSIENT_TEXT = """LFP run 42,,,,
,400nm,450nm,500nm,
Sample,ZnTPP in toluene,,,
Excitation,532,,,
Energy,5 mJ,,,
Averages,16,,,
Gain,10,,,
Offset,0,,,
Trigger,ext,,,
Date,2023-04-05,,,
0,0.1,0.2,0.3,
1e-07,0.15,0.22,0.31,

2e-07,0.12,0.21,0.305,
"""

FLUORESCENCE_TEXT = (
    "Prompt\t400 nm\t450 nm\n"
    "5\t10\t20\n"
    "7\t11\t21\n"
    "9\t12\t22\n"
)


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture()
def transient_text():
    return TRANSIENT_TEXT


@pytest.fixture()
def transient_file(tmp_path):
    path = tmp_path / "run42.csv"
    path.write_text(TRANSIENT_TEXT, encoding="latin-1")
    return path


@pytest.fixture()
def fluorescence_file(tmp_path):
    path = tmp_path / "decay.txt"
    path.write_text(FLUORESCENCE_TEXT, encoding="latin-1")
    return path
