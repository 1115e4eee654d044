"""Scale, chord and triad derivation.

Everything here is derived from a root name and a mode (``"major"`` or
``"minor"``, natural minor only). Functions that derive note sets from
user-supplied strings never raise on a bad token: they log a warning (where
the editor would show one) and return an empty list.
"""

import dataclasses
import logging
import re
import typing

import luthier.pitch


logger = logging.getLogger(__name__)


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
}

CHORD_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 4, 7],
	"minor": [0, 3, 7],
}

CHORD_SUFFIX: typing.Dict[str, str] = {
	"major": "",
	"minor": "m",
}

_CHORD_PATTERN = re.compile(r"^([A-G][#b]?)(m)?$")


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	A major or minor triad, identified by root pitch class and quality.
	"""

	root_pc: int
	quality: str
	root_name: str = dataclasses.field(default="", compare=False)


	def intervals (self) -> typing.List[int]:

		"""
		Return the chord intervals for this chord quality.
		"""

		if self.quality not in CHORD_INTERVALS:
			raise ValueError(f"Unknown chord quality: {self.quality}")

		return CHORD_INTERVALS[self.quality]


	def triad (self) -> typing.List[int]:

		"""Return ``[root, third, fifth]`` as pitch classes."""

		return [(self.root_pc + interval) % 12 for interval in self.intervals()]


	def name (self) -> str:

		"""
		Return the chord token, e.g. ``"F#m"``.
		"""

		root_name = self.root_name or luthier.pitch.PC_TO_SHARP_NAME[self.root_pc % 12]

		return f"{root_name}{CHORD_SUFFIX[self.quality]}"


def parse_chord (token: str) -> typing.Optional[Chord]:

	"""Parse a chord token of the form ``[A-G][#b]?m?``.

	Returns:
		A ``Chord``, or ``None`` when the token does not match the grammar.

	Example:
		```python
		parse_chord("F#m")   # → Chord(root_pc=6, quality="minor")
		parse_chord("Bb")    # → Chord(root_pc=10, quality="major")
		parse_chord("Cmaj7") # → None
		```
	"""

	if not isinstance(token, str):
		return None

	match = _CHORD_PATTERN.match(token.strip())

	if not match:
		return None

	root_name = match.group(1)
	quality = "minor" if match.group(2) else "major"

	return Chord(root_pc=luthier.pitch.NOTE_NAME_TO_PC[root_name], quality=quality, root_name=root_name)


def is_chord_token (token: str) -> bool:

	"""True for an empty slot or a valid chord token."""

	return token == "" or parse_chord(token) is not None


def scale_notes (root: str, mode: str) -> typing.List[str]:

	"""Return the 7 note names of a scale, spelled for its key signature.

	Parameters:
		root: Root note name (e.g. ``"C"``, ``"f#"``, ``"Bb"``).
		mode: ``"major"`` or ``"minor"`` (natural minor).

	Returns:
		Note names without octave, starting on the root. Empty when the root
		cannot be parsed.

	Example:
		```python
		scale_notes("C", "minor")  # → ["C", "D", "Eb", "F", "G", "Ab", "Bb"]
		scale_notes("E", "major")  # → ["E", "F#", "G#", "A", "B", "C#", "D#"]
		```
	"""

	if mode not in SCALE_INTERVALS:
		raise ValueError(f"Unknown mode: {mode!r}. Available: {sorted(SCALE_INTERVALS)}")

	base = luthier.pitch.note_base(root) if isinstance(root, str) else None

	try:
		if base is None:
			raise luthier.pitch.InvalidNoteToken(root)
		start_pc = luthier.pitch.parse_pitch_class(base)
		spelling = luthier.pitch.spelling_for_scale(base, mode)
	except luthier.pitch.InvalidNoteToken:
		logger.warning(f"Invalid root note: {root!r}")
		return []

	return [luthier.pitch.spell(start_pc + interval, spelling) for interval in SCALE_INTERVALS[mode]]


def scale_pitch_classes (root: str, mode: str) -> typing.Set[int]:

	"""Return the set of pitch classes in a scale (empty for a bad root)."""

	return {luthier.pitch.NOTE_NAME_TO_PC[name] for name in scale_notes(root, mode)}


def playable_notes (root: str, octaves: typing.Sequence[int] = (1, 2)) -> typing.List[luthier.pitch.Note]:

	"""Return the note palette offered for a root across several octaves.

	The palette is the union of the natural minor and major scales on the
	root, deduplicated by pitch (the first spelling seen wins, minor first),
	sorted chromatically and repeated for each octave in the order given.

	Example:
		```python
		[str(n) for n in playable_notes("C", [2])]
		# → ["C2", "D2", "Eb2", "E2", "F2", "G2", "Ab2", "A2", "Bb2", "B2"]
		```
	"""

	by_pc: typing.Dict[int, str] = {}

	for name in scale_notes(root, "minor") + scale_notes(root, "major"):
		by_pc.setdefault(luthier.pitch.NOTE_NAME_TO_PC[name], name)

	if not by_pc:
		logger.warning(f"Could not generate notes for root: {root!r}")
		return []

	sorted_pcs = sorted(by_pc)

	return [
		luthier.pitch.Note(pc=pc, octave=octave, spelling=by_pc[pc])
		for octave in octaves
		for pc in sorted_pcs
	]


def notes_in_octave (notes: typing.Iterable[luthier.pitch.Note], octave: int) -> typing.List[luthier.pitch.Note]:

	"""Keep only the notes that sit in the given octave."""

	return [note for note in notes if note.octave == octave]


def chord_triad_indices (token: str) -> typing.List[int]:

	"""Return ``[root, third, fifth]`` pitch classes for a chord token.

	The third is 4 semitones above the root for major chords and 3 for minor.
	Returns an empty list when the token is not a chord.

	Example:
		```python
		chord_triad_indices("Am")  # → [9, 0, 4]
		chord_triad_indices("D")   # → [2, 6, 9]
		```
	"""

	chord = parse_chord(token)

	if chord is None:
		return []

	return chord.triad()


def notes_from_chord (token: str, key_root: str) -> typing.List[str]:

	"""Spell the three notes of a chord in the context of a key.

	The sharp/flat choice follows ``key_root``, not the chord's own root, so
	every chord of a progression is written the same way.

	Example:
		```python
		notes_from_chord("Am", "C")  # → ["A", "C", "E"]
		notes_from_chord("D", "F")   # → ["D", "Gb", "A"]
		```
	"""

	indices = chord_triad_indices(token)

	if not indices:
		return []

	spelling = luthier.pitch.spelling_for_key(key_root)

	return [luthier.pitch.spell(pc, spelling) for pc in indices]


def detect_scale (chords: typing.Sequence[str]) -> typing.Optional[str]:

	"""Guess the scale that best fits a chord progression.

	Every pitch class used by the chords is counted against the major and
	natural minor scale of each root from C to B. The first best score wins,
	so on ties major beats minor and lower roots beat higher ones.

	Returns:
		A name such as ``"C Minor"`` or ``"G Major"``, or ``None`` when no
		chord could be read.

	Example:
		```python
		detect_scale(["Am", "F", "C", "G"])  # → "C Major"
		```
	"""

	if not chords:
		return None

	used: typing.Set[int] = set()

	for chord in chords:
		used.update(chord_triad_indices(chord))

	best_name = ""
	best_score = -1

	for root in luthier.pitch.PC_TO_SHARP_NAME:
		for mode in ("major", "minor"):
			score = len(used & scale_pitch_classes(root, mode))
			if score > best_score:
				best_name = f"{root} {mode.capitalize()}"
				best_score = score

	return best_name if best_score > 0 else None
