import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

SAMPLE_VALUES = [
    "5", "1", "35", "55", "6", "3", "34", "76", "23", "64",
    "23", "1", "3", "6", "14", "13", "11", "25", "35", "45",
    "55", "25", "34", "54", "53", "52", "51", "45", "47", "36",
    "39", "8", "19", "56", "87", "76", "74", "73", "26", "45",
]


@pytest.fixture
def sample_records():
    return [{"value": v} for v in SAMPLE_VALUES]


@pytest.fixture
def date_records():
    return [
        {"value": "2004-01-15"},
        {"value": "2004-04-15"},
        {"value": "2004-12-01"},
        {"value": "2005-03-01"},
    ]
