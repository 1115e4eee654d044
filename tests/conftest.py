import copy
import random
import typing

import pytest

import luthier.progression


# Cm - Ab - Fm - G in C minor, 11 active steps.
_PAYLOAD: typing.Dict[str, typing.Any] = {
	"chords": ["Cm", "Ab", "Fm", "G"],
	"sequence": [
		{"step": 1, "note": "C2", "active": True, "gate": 0.9},
		{"step": 2, "note": None, "active": False, "gate": 0},
		{"step": 3, "note": "C2", "active": True, "gate": 0.4},
		{"step": 4, "note": "Eb2", "active": True, "gate": 0.6},
		{"step": 5, "note": "Ab1", "active": True, "gate": 1.0},
		{"step": 6, "note": None, "active": False, "gate": 0},
		{"step": 7, "note": "Ab2", "active": True, "gate": 0.3},
		{"step": 8, "note": None, "active": False, "gate": 0},
		{"step": 9, "note": "F2", "active": True, "gate": 0.8},
		{"step": 10, "note": None, "active": False, "gate": 0},
		{"step": 11, "note": "C2", "active": True, "gate": 0.5},
		{"step": 12, "note": "Ab2", "active": True, "gate": 0.5},
		{"step": 13, "note": "G2", "active": True, "gate": 1.0},
		{"step": 14, "note": None, "active": False, "gate": 0},
		{"step": 15, "note": "B1", "active": True, "gate": 0.7},
		{"step": 16, "note": "D2", "active": True, "gate": 0.6},
	],
}


def assert_consistent (progression: luthier.progression.Progression) -> None:

	"""Every step must be a clean rest or an active note with a gate in (0, 1]."""

	for step in progression.steps:
		assert step.active == (step.note is not None) == (step.gate > 0), step
		assert step.is_consistent(), step

	assert [step.position for step in progression.steps] == list(range(1, 17))


@pytest.fixture
def payload () -> typing.Dict[str, typing.Any]:

	"""A fresh copy of a valid generated payload."""

	return copy.deepcopy(_PAYLOAD)


@pytest.fixture
def populated (payload: typing.Dict[str, typing.Any]) -> luthier.progression.Progression:

	"""The validated progression for the sample payload."""

	return luthier.progression.progression_from_payload(payload)


@pytest.fixture
def rng () -> random.Random:

	"""A seeded random generator for repeatable edits."""

	return random.Random(42)
