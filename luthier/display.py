"""ASCII grid of a progression for logs and terminals.

Looks like::

	Cm       Ab       Fm       G
	|X . o . |O . . o |X . . . |o . O . |
	C2 Eb2 C2 G2 Ab2 F2 G2 B2

One cell per step: ``.`` for a rest and ``o``, ``O`` or ``X`` by gate
length. The note row lists the notes of the active steps in order.
"""

import typing

import luthier.progression


_CELL_WIDTH = 2
_REGION_WIDTH = luthier.progression.STEPS_PER_CHORD * _CELL_WIDTH + 1


def _gate_char (step: luthier.progression.SequenceStep) -> str:

	"""Map a step to one character: ``.`` rest, ``o`` short, ``O`` medium, ``X`` long."""

	if not step.active:
		return "."
	if step.gate < 0.5:
		return "o"
	if step.gate < 0.9:
		return "O"
	return "X"


def format_grid (progression: luthier.progression.Progression) -> str:

	"""Return a three-line text view: chords, step cells and notes."""

	chord_row = "".join(
		(chord or "-").ljust(_REGION_WIDTH) for chord in progression.chords
	).rstrip()

	regions: typing.List[str] = []

	for region in range(luthier.progression.CHORD_COUNT):
		start = region * luthier.progression.STEPS_PER_CHORD
		cells = progression.steps[start:start + luthier.progression.STEPS_PER_CHORD]
		regions.append(" ".join(_gate_char(step) for step in cells) + " ")

	step_row = "|" + "|".join(regions) + "|"

	note_row = " ".join(str(step.note) for step in progression.steps if step.active and step.note is not None)

	return "\n".join([chord_row, step_row, note_row or "(silent)"])
