"""Negative harmony: mirror notes and chords across the tonic/dominant axis.

The axis sits halfway between the key root and its perfect fifth. Reflecting
a pitch class ``p`` across it gives ``(root + fifth - p) mod 12``; reflecting
twice gives ``p`` back. Chords keep their shape but swap colour, so a major
triad mirrors onto a minor one and vice versa.

Everything here is a read-only view transform. Mirroring a progression
returns a new progression and never touches the one it was given.
"""

import dataclasses
import logging
import typing

import luthier.pitch
import luthier.progression
import luthier.scales


logger = logging.getLogger(__name__)


def axis_sum (root_pc: int) -> int:

	"""Return ``root + fifth`` for the axis of a key (C → 0 + 7 = 7)."""

	return root_pc + (root_pc + 7) % 12


def mirror_pitch_class (pc: int, root_pc: int) -> int:

	"""Reflect a pitch class across the axis of ``root_pc``."""

	return (axis_sum(root_pc) - pc) % 12


def _key_root_pc (key_root: str) -> typing.Optional[int]:

	base = luthier.pitch.note_base(key_root) if isinstance(key_root, str) else None

	if base is None or base not in luthier.pitch.NOTE_NAME_TO_PC:
		logger.warning(f"Invalid key root for negative harmony: {key_root!r}")
		return None

	return luthier.pitch.NOTE_NAME_TO_PC[base]


def mirror_note (note: luthier.pitch.Note, key_root: str) -> luthier.pitch.Note:

	"""Mirror a note's pitch class and keep its octave.

	Example:
		```python
		mirror_note(parse_note("E2"), "C")  # → Eb2
		```
	"""

	root_pc = _key_root_pc(key_root)

	if root_pc is None:
		return note

	spelling = luthier.pitch.spelling_for_key(key_root)
	pc = mirror_pitch_class(note.pc, root_pc)

	return luthier.pitch.Note(pc=pc, octave=note.octave, spelling=luthier.pitch.spell(pc, spelling))


def mirror_chord (token: str, key_root: str) -> str:

	"""Mirror a chord root and flip its quality.

	Empty slots stay empty and unreadable tokens come back unchanged.

	Example:
		```python
		mirror_chord("Cm", "C")  # → "G"
		mirror_chord("G", "C")   # → "Cm"
		```
	"""

	if not token:
		return token

	chord = luthier.scales.parse_chord(token)

	if chord is None:
		logger.warning(f"Cannot mirror chord: {token!r}")
		return token

	root_pc = _key_root_pc(key_root)

	if root_pc is None:
		return token

	spelling = luthier.pitch.spelling_for_key(key_root)
	pc = mirror_pitch_class(chord.root_pc, root_pc)
	quality = "major" if chord.quality == "minor" else "minor"

	return luthier.scales.Chord(root_pc=pc, quality=quality, root_name=luthier.pitch.spell(pc, spelling)).name()


def mirror_chords (chords: typing.Sequence[str], key_root: str) -> typing.Tuple[str, ...]:

	"""Mirror every chord slot."""

	return tuple(mirror_chord(chord, key_root) for chord in chords)


def mirror_sequence (
	steps: typing.Sequence[luthier.progression.SequenceStep],
	key_root: str
) -> typing.Tuple[luthier.progression.SequenceStep, ...]:

	"""Mirror the note of every active step; rests pass through unchanged."""

	return tuple(
		dataclasses.replace(step, note=mirror_note(step.note, key_root))
		if step.active and step.note is not None else step
		for step in steps
	)


def mirror_progression (progression: luthier.progression.Progression, key_root: str) -> luthier.progression.Progression:

	"""Return the negative-harmony view of a whole progression."""

	return luthier.progression.Progression(
		chords=mirror_chords(progression.chords, key_root),
		steps=mirror_sequence(progression.steps, key_root),
	)
