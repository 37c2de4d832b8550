"""
Shared pytest fixtures for the jqplay test suite.

Nothing here needs a jq binary or network access: the interpreter and
the assistant are replaced by the scripted fakes in tests.fakes.
"""

import json

import pytest

from jqplay.models import PatternEntry, SynthesisTask
from tests.fakes import FakeInterpreter


@pytest.fixture
def fake_interpreter():
    return FakeInterpreter()


@pytest.fixture
def sample_json():
    return json.dumps({
        "users": [
            {"name": "Ada", "age": 36},
            {"name": "Linus", "age": 28},
        ],
        "count": 2,
    })


@pytest.fixture
def task():
    return SynthesisTask(
        input_json='{"a": [1, 2, 3]}',
        desired_output="6",
    )


@pytest.fixture
def small_catalog():
    return (
        PatternEntry("Field access", ".fieldname", "Access a specific field", "Basic"),
        PatternEntry("Equals", '.field == "value"', "Equality test", "Comparison"),
        PatternEntry("Sort", "sort", "Sort an array", "Sorting"),
    )
