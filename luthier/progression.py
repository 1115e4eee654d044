"""Immutable progression model: four chord slots over sixteen steps.

A ``Progression`` is a frozen snapshot. Edits never change a snapshot in
place; they build a new one with ``dataclasses.replace``, so a source
progression and any view derived from it never share mutable state.

The payload helpers validate what a generation provider hands over. A
payload with the wrong shape is rejected with ``InvalidProgressionShape``
rather than being trimmed, padded or repaired.
"""

import collections.abc
import dataclasses
import json
import typing

import luthier.pitch
import luthier.scales


STEP_COUNT = 16
CHORD_COUNT = 4
STEPS_PER_CHORD = STEP_COUNT // CHORD_COUNT
DEFAULT_GATE = 0.8


class InvalidProgressionShape (ValueError):

	"""A supplied progression does not have 4 chords and 16 consistent steps."""

	pass


@dataclasses.dataclass(frozen=True)
class SequenceStep:

	"""
	One step of the sequence.

	A step is either a rest (``active=False``, no note, gate 0) or an active
	note with a gate in (0, 1].
	"""

	position: int
	note: typing.Optional[luthier.pitch.Note] = None
	active: bool = False
	gate: float = 0.0


	@classmethod
	def rest (cls, position: int) -> "SequenceStep":

		"""Return an inactive step at a 1-based position."""

		return cls(position=position)


	@classmethod
	def play (cls, position: int, note: luthier.pitch.Note, gate: float = DEFAULT_GATE) -> "SequenceStep":

		"""Return an active step at a 1-based position."""

		return cls(position=position, note=note, active=True, gate=gate)


	def is_consistent (self) -> bool:

		"""True when active, note and gate agree with each other."""

		if not self.active:
			return self.note is None and self.gate == 0

		return self.note is not None and 0 < self.gate <= 1


def chord_index_for_step (index: int) -> int:

	"""Return the chord slot (0-3) that governs a 0-based step index."""

	if not 0 <= index < STEP_COUNT:
		raise IndexError(f"Step index {index} out of range 0..{STEP_COUNT - 1}")

	return index // STEPS_PER_CHORD


@dataclasses.dataclass(frozen=True)
class Progression:

	"""
	Four chord slots and the sixteen steps they govern.

	Construction checks the shape, step numbering and that every step is a
	clean rest or note, so no snapshot breaks those rules however it was built.
	"""

	chords: typing.Tuple[str, ...]
	steps: typing.Tuple[SequenceStep, ...]


	def __post_init__ (self) -> None:

		if len(self.chords) != CHORD_COUNT:
			raise InvalidProgressionShape(f"Expected {CHORD_COUNT} chords, got {len(self.chords)}")

		if len(self.steps) != STEP_COUNT:
			raise InvalidProgressionShape(f"Expected {STEP_COUNT} steps, got {len(self.steps)}")

		for i, step in enumerate(self.steps):
			if step.position != i + 1:
				raise InvalidProgressionShape(f"Step at index {i} has position {step.position!r}, expected {i + 1}")
			if not step.is_consistent():
				raise InvalidProgressionShape(f"Step {i + 1} mixes rest and note state: {step!r}")

		# Accept lists from callers but keep the snapshot hashable.
		object.__setattr__(self, "chords", tuple(self.chords))
		object.__setattr__(self, "steps", tuple(self.steps))


	@classmethod
	def empty (cls) -> "Progression":

		"""Return the initial state: blank chords and sixteen rests."""

		return cls(
			chords=("",) * CHORD_COUNT,
			steps=tuple(SequenceStep.rest(i + 1) for i in range(STEP_COUNT)),
		)


	@property
	def is_empty (self) -> bool:

		"""True while no chord progression has been supplied."""

		return all(chord == "" for chord in self.chords)


	@property
	def active_count (self) -> int:

		"""Number of active steps."""

		return sum(1 for step in self.steps if step.active)


	def chord_for_step (self, index: int) -> str:

		"""Return the chord token that governs a 0-based step index."""

		return self.chords[chord_index_for_step(index)]


	def with_step (self, index: int, step: SequenceStep) -> "Progression":

		"""Return a copy with one step replaced."""

		chord_index_for_step(index)
		steps = list(self.steps)
		steps[index] = step

		return dataclasses.replace(self, steps=tuple(steps))


	def with_steps (self, steps: typing.Iterable[SequenceStep]) -> "Progression":

		"""Return a copy with the whole sequence replaced."""

		return dataclasses.replace(self, steps=tuple(steps))


def _parse_step (index: int, raw: typing.Any) -> SequenceStep:

	if not isinstance(raw, collections.abc.Mapping):
		raise InvalidProgressionShape(f"Step {index + 1} is not an object: {raw!r}")

	missing = [key for key in ("note", "active", "gate") if key not in raw]

	if missing:
		raise InvalidProgressionShape(f"Step {index + 1} is missing {missing}")

	position = raw.get("step", index + 1)

	if position != index + 1:
		raise InvalidProgressionShape(f"Step at index {index} has position {position!r}, expected {index + 1}")

	active = raw["active"]
	gate = raw["gate"]

	if not isinstance(active, bool) or isinstance(gate, bool) or not isinstance(gate, (int, float)):
		raise InvalidProgressionShape(f"Step {index + 1} has malformed active/gate: {active!r}, {gate!r}")

	note = luthier.pitch.parse_note(raw["note"]) if raw["note"] is not None else None
	step = SequenceStep(position=index + 1, note=note, active=active, gate=float(gate))

	if not step.is_consistent():
		raise InvalidProgressionShape(
			f"Step {index + 1} is inconsistent: active={active!r}, note={raw['note']!r}, gate={gate!r}"
		)

	return step


def progression_from_payload (payload: typing.Mapping[str, typing.Any]) -> Progression:

	"""Validate a generated ``{"chords": [...], "sequence": [...]}`` payload.

	Raises:
		InvalidProgressionShape: Wrong number of chords or steps, missing
			fields, wrong step positions, or steps that mix rest and note state.
		luthier.pitch.InvalidNoteToken: A note or chord string is malformed.

	Example:
		```python
		progression = progression_from_payload({
			"chords": ["Cm", "Ab", "Fm", "G"],
			"sequence": [{"step": 1, "note": "C2", "active": True, "gate": 0.8}, ...],
		})
		```
	"""

	if not isinstance(payload, collections.abc.Mapping) or "chords" not in payload or "sequence" not in payload:
		raise InvalidProgressionShape("Payload must contain 'chords' and 'sequence'")

	chords = payload["chords"]
	sequence = payload["sequence"]

	if not isinstance(chords, (list, tuple)) or len(chords) != CHORD_COUNT:
		raise InvalidProgressionShape(f"Expected {CHORD_COUNT} chords, got {chords!r}")

	if not isinstance(sequence, (list, tuple)) or len(sequence) != STEP_COUNT:
		count = len(sequence) if isinstance(sequence, (list, tuple)) else sequence
		raise InvalidProgressionShape(f"Expected {STEP_COUNT} steps, got {count!r}")

	for chord in chords:
		if not isinstance(chord, str) or not luthier.scales.is_chord_token(chord):
			raise luthier.pitch.InvalidNoteToken(f"Invalid chord: {chord!r}")

	return Progression(
		chords=tuple(chords),
		steps=tuple(_parse_step(i, raw) for i, raw in enumerate(sequence)),
	)


def progression_from_json (text: str) -> Progression:

	"""Parse and validate a JSON payload from a generation provider."""

	try:
		payload = json.loads(text)
	except json.JSONDecodeError as exc:
		raise InvalidProgressionShape(f"Payload is not valid JSON: {exc}") from exc

	return progression_from_payload(payload)


def progression_to_payload (progression: Progression) -> typing.Dict[str, typing.Any]:

	"""Return the payload form of a progression, with notes as strings."""

	return {
		"chords": list(progression.chords),
		"sequence": [
			{
				"step": step.position,
				"note": str(step.note) if step.note is not None else None,
				"active": step.active,
				"gate": step.gate,
			}
			for step in progression.steps
		],
	}
