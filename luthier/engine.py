"""Edit operations on progression snapshots.

Each operation takes a ``Progression`` and returns a new one. Randomised
operations draw from a ``random.Random`` passed in by the caller, so a seeded
generator reproduces the same edit.

After every operation each step satisfies the rest/note invariant: a step is
either inactive with no note and gate 0, or active with a note and a gate in
(0, 1].

``re_rhythm`` and ``randomize_melody`` need chords to work from. On an empty
progression they log a warning and hand the input back unchanged.
"""

import logging
import random
import typing

import luthier.pitch
import luthier.progression
import luthier.scales
import luthier.sequence_utils


logger = logging.getLogger(__name__)


RANDOM_PULSES_MIN = 5
RANDOM_PULSES_MAX = 13
RANDOM_GATE_MIN = 0.6
RANDOM_GATE_RANGE = 0.4

NoteLike = typing.Union[luthier.pitch.Note, str]


def root_note_at (root_note: str, octave: int) -> luthier.pitch.Note:

	"""Return the key root as a note in the given octave.

	Raises:
		luthier.pitch.InvalidNoteToken: If the root is not a note name.
	"""

	return luthier.pitch.Note.from_name(root_note, octave)


def _check_index (index: int) -> None:

	if not 0 <= index < luthier.progression.STEP_COUNT:
		raise IndexError(f"Step index {index} out of range 0..{luthier.progression.STEP_COUNT - 1}")


def toggle_step (
	progression: luthier.progression.Progression,
	index: int,
	root_note: str,
	octave: int
) -> luthier.progression.Progression:

	"""Switch a step on (root note, default gate) or off.

	Example:
		```python
		p = toggle_step(Progression.empty(), 0, "C", 2)
		p.steps[0]  # → active, note C2, gate 0.8
		```
	"""

	_check_index(index)
	step = progression.steps[index]

	if step.active:
		new_step = luthier.progression.SequenceStep.rest(step.position)
	else:
		new_step = luthier.progression.SequenceStep.play(step.position, root_note_at(root_note, octave))

	return progression.with_step(index, new_step)


def set_note (
	progression: luthier.progression.Progression,
	index: int,
	note: typing.Optional[NoteLike]
) -> luthier.progression.Progression:

	"""Set or clear the note of a step.

	``None`` turns the step into a rest. A note turns it on, keeping its
	gate unless the gate was 0, in which case the default gate is used.
	"""

	_check_index(index)
	step = progression.steps[index]

	if note is None:
		return progression.with_step(index, luthier.progression.SequenceStep.rest(step.position))

	gate = step.gate if step.gate != 0 else luthier.progression.DEFAULT_GATE

	return progression.with_step(
		index,
		luthier.progression.SequenceStep.play(step.position, luthier.pitch.parse_note(note), gate=gate),
	)


def set_gate (
	progression: luthier.progression.Progression,
	index: int,
	gate: float
) -> luthier.progression.Progression:

	"""Change the gate of an active step.

	The caller clamps gate values (the editor offers 0.1 to 1.0). Rests have
	no gate to change, so a gate sent to a rest is ignored.

	Raises:
		ValueError: If the gate of an active step would fall outside (0, 1].
	"""

	_check_index(index)
	step = progression.steps[index]

	if not step.active:
		logger.warning(f"Ignoring gate {gate} for inactive step {step.position}")
		return progression

	if not 0 < gate <= 1:
		raise ValueError(f"Gate must be in (0, 1] for an active step, got {gate}")

	return progression.with_step(
		index,
		luthier.progression.SequenceStep.play(step.position, step.note, gate=float(gate)),
	)


def re_rhythm (
	progression: luthier.progression.Progression,
	pulses: int,
	root_note: str,
	octave: int,
	playable_notes: typing.Sequence[luthier.pitch.Note],
	rng: typing.Optional[random.Random] = None
) -> luthier.progression.Progression:

	"""Redistribute the active steps as a Euclidean rhythm with ``pulses`` hits.

	Steps that were already playing keep their note and gate. Steps that come
	alive get the default gate and a note chosen by melodic inverse
	proportionality: the more pulses, the more likely the root note, since a
	busy line reads as rhythm rather than melody. Otherwise the note is drawn
	from ``playable_notes`` in the working octave. Steps outside the pattern
	become rests.

	Parameters:
		progression: Current snapshot.
		pulses: Number of hits in the new 16-step pattern.
		root_note: Key root name (e.g. ``"C"``).
		octave: Working octave for new notes.
		playable_notes: Note palette, usually ``scales.playable_notes(root)``.
		rng: Random number generator instance (a fresh one when omitted).
	"""

	if progression.is_empty:
		logger.warning("Cannot change the rhythm of an empty progression. Generate one first.")
		return progression

	if rng is None:
		rng = random.Random()

	root = root_note_at(root_note, octave)
	pattern = luthier.sequence_utils.euclidean_pattern(luthier.progression.STEP_COUNT, pulses)
	candidates = luthier.scales.notes_in_octave(playable_notes, octave)
	root_probability = pulses / luthier.progression.STEP_COUNT

	steps: typing.List[luthier.progression.SequenceStep] = []

	for step, hit in zip(progression.steps, pattern):

		if not hit:
			steps.append(luthier.progression.SequenceStep.rest(step.position))
			continue

		if step.active:
			steps.append(step)
			continue

		if candidates and rng.random() >= root_probability:
			note = rng.choice(candidates)
		else:
			note = root

		steps.append(luthier.progression.SequenceStep.play(step.position, note))

	return progression.with_steps(steps)


def randomize_melody (
	progression: luthier.progression.Progression,
	root_note: str,
	octave: int,
	rng: typing.Optional[random.Random] = None,
	chords: typing.Optional[typing.Sequence[str]] = None
) -> luthier.progression.Progression:

	"""Replace the whole sequence with a random rhythm of chord tones.

	A pulse count between 5 and 13 sets a fresh Euclidean rhythm. Each hit
	plays a random tone of the chord governing its step, in the working
	octave, with a gate between 0.6 and 1.0. The chord slots are kept.

	Parameters:
		progression: Current snapshot.
		root_note: Key root, used to spell the chord tones.
		octave: Octave for every note.
		rng: Random number generator instance (a fresh one when omitted).
		chords: Chords to draw tones from. Defaults to the progression's own.
	"""

	if chords is None:
		chords = progression.chords

	if progression.is_empty or all(chord == "" for chord in chords):
		logger.warning("Cannot randomize a sequence without a chord progression. Generate one first.")
		return progression

	if rng is None:
		rng = random.Random()

	pulses = rng.randint(RANDOM_PULSES_MIN, RANDOM_PULSES_MAX)
	pattern = luthier.sequence_utils.euclidean_pattern(luthier.progression.STEP_COUNT, pulses)

	steps: typing.List[luthier.progression.SequenceStep] = []

	for i, hit in enumerate(pattern):

		position = i + 1
		chord = chords[luthier.progression.chord_index_for_step(i)]
		chord_notes = luthier.scales.notes_from_chord(chord, root_note) if hit and chord else []

		if not chord_notes:
			steps.append(luthier.progression.SequenceStep.rest(position))
			continue

		note = luthier.pitch.Note.from_name(rng.choice(chord_notes), octave)
		gate = RANDOM_GATE_MIN + rng.random() * RANDOM_GATE_RANGE

		steps.append(luthier.progression.SequenceStep.play(position, note, gate=gate))

	logger.debug(f"Randomized sequence with {pulses} pulses")

	return progression.with_steps(steps)
