"""Pitch class and note spelling utilities.

This module maps note names to pitch classes (0-11) and back, and decides
whether a tonal context is spelled with sharps or flats.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g. `"C"`, `"F#"`, `"Bb"`, `"Cb"`) to pitch classes
- `PC_TO_SHARP_NAME` / `PC_TO_FLAT_NAME`: Canonical spellings per pitch class
- `MAJOR_FLAT_KEYS` / `MINOR_FLAT_KEYS`: Key signatures spelled with flats

Spelling is always a pure function of the root name (and mode, where known).
It never depends on runtime state.
"""

import dataclasses
import enum
import re
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"B#": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"Fb": 4,
	"F": 5,
	"E#": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
	"Cb": 11,
}

PC_TO_SHARP_NAME: typing.List[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

PC_TO_FLAT_NAME: typing.List[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Circle of fifths: the minor set holds the relative minors of the major set.
MAJOR_FLAT_KEYS: typing.FrozenSet[str] = frozenset({"F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"})
MINOR_FLAT_KEYS: typing.FrozenSet[str] = frozenset({"D", "G", "C", "F", "Bb", "Eb", "Ab"})
FLAT_KEYS: typing.FrozenSet[str] = MAJOR_FLAT_KEYS | MINOR_FLAT_KEYS

MODES: typing.Tuple[str, ...] = ("major", "minor")

# Note strings carry a single octave digit.
OCTAVE_MIN = 0
OCTAVE_MAX = 9

_NOTE_BASE_PATTERN = re.compile(r"^[A-G][#b]?")
_NOTE_PATTERN = re.compile(r"^([A-G][#b]?)(\d)$")


class InvalidNoteToken (ValueError):

	"""A note, root or chord string does not match the note grammar."""

	pass


class Spelling (enum.Enum):

	"""Whether a tonal context writes accidentals as sharps or flats."""

	SHARPS = "sharps"
	FLATS = "flats"


	@property
	def names (self) -> typing.List[str]:

		"""The twelve note names for this spelling, indexed by pitch class."""

		return PC_TO_FLAT_NAME if self is Spelling.FLATS else PC_TO_SHARP_NAME


def sanitize_note_name (token: str) -> str:

	"""Normalise user-typed note names.

	The first letter is upper-cased and the rest lower-cased, and the words
	``sharp`` and ``flat`` become ``#`` and ``b``.

	Example:
		```python
		sanitize_note_name("bb")      # → "Bb"
		sanitize_note_name("fsharp")  # → "F#"
		```
	"""

	if not token:
		return ""

	rest = token[1:].lower().replace("sharp", "#").replace("flat", "b")

	return token[0].upper() + rest


def note_base (token: str) -> typing.Optional[str]:

	"""Return the leading ``[A-G][#b]?`` part of a sanitized token, or None."""

	match = _NOTE_BASE_PATTERN.match(sanitize_note_name(token.strip()))

	return match.group(0) if match else None


def parse_pitch_class (token: str) -> int:

	"""Return the pitch class (0-11) of a note name.

	Accepts ``[A-G]`` with an optional ``#`` or ``b``, including the
	enharmonic spellings ``E#``, ``Fb``, ``B#`` and ``Cb``.

	Raises:
		InvalidNoteToken: If the token is not a note name.

	Example:
		```python
		parse_pitch_class("C")   # → 0
		parse_pitch_class("gb")  # → 6
		parse_pitch_class("Cb")  # → 11
		```
	"""

	name = sanitize_note_name(token.strip()) if isinstance(token, str) else ""

	if name not in NOTE_NAME_TO_PC:
		raise InvalidNoteToken(f"Invalid note name: {token!r}. Expected e.g. 'C', 'F#', 'Bb'.")

	return NOTE_NAME_TO_PC[name]


def spelling_for_scale (root: str, mode: str) -> Spelling:

	"""Pick sharps or flats for a scale from its key signature.

	Roots written with a flat always use flats.

	Raises:
		InvalidNoteToken: If the root is not a note name.
		ValueError: If the mode is not ``"major"`` or ``"minor"``.
	"""

	if mode not in MODES:
		raise ValueError(f"Unknown mode: {mode!r}. Available: {list(MODES)}")

	name = sanitize_note_name(root.strip())
	parse_pitch_class(name)

	flat_keys = MAJOR_FLAT_KEYS if mode == "major" else MINOR_FLAT_KEYS

	if name in flat_keys or "b" in name:
		return Spelling.FLATS

	return Spelling.SHARPS


def spelling_for_key (root: str) -> Spelling:

	"""Pick sharps or flats for a tonal centre whose mode is not known.

	Used for chord tones and mirrored notes. A root that is a flat key in
	either mode (or is written with a flat) uses flats. Anything that does not
	start with a note name falls back to sharps.
	"""

	base = note_base(root) if isinstance(root, str) else None

	if base is None:
		return Spelling.SHARPS

	if "b" in base or base in FLAT_KEYS:
		return Spelling.FLATS

	return Spelling.SHARPS


def spell (pc: int, spelling: Spelling) -> str:

	"""Return the name of a pitch class in the given spelling."""

	return spelling.names[pc % 12]


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A pitch class in a specific octave.

	Equality and hashing ignore the spelling, so ``C#2`` and ``Db2`` are
	the same note.
	"""

	pc: int
	octave: int
	spelling: str = dataclasses.field(default="", compare=False)


	def __post_init__ (self) -> None:

		if not OCTAVE_MIN <= self.octave <= OCTAVE_MAX:
			raise InvalidNoteToken(f"Octave {self.octave} out of range {OCTAVE_MIN}..{OCTAVE_MAX}")


	@classmethod
	def from_name (cls, name: str, octave: int) -> "Note":

		"""Build a note from a note name and an octave number."""

		clean = sanitize_note_name(name.strip())

		return cls(pc=parse_pitch_class(clean), octave=octave, spelling=clean)


	@property
	def name (self) -> str:

		"""The note name without octave, falling back to the sharp spelling."""

		return self.spelling or PC_TO_SHARP_NAME[self.pc % 12]


	@property
	def midi (self) -> int:

		"""MIDI note number, with C4 = 60."""

		return (self.octave + 1) * 12 + self.pc


	def respell (self, spelling: Spelling) -> "Note":

		"""Return the same pitch written in another spelling."""

		return Note(pc=self.pc, octave=self.octave, spelling=spell(self.pc, spelling))


	def __str__ (self) -> str:

		return f"{self.name}{self.octave}"


def parse_note (token: typing.Union[str, Note]) -> Note:

	"""Parse a ``<Letter><#|b>?<octave>`` string such as ``"C#2"`` or ``"Bb0"``.

	Raises:
		InvalidNoteToken: If the token does not match the note grammar.
	"""

	if isinstance(token, Note):
		return token

	if not isinstance(token, str):
		raise InvalidNoteToken(f"Invalid note: {token!r}")

	match = _NOTE_PATTERN.match(sanitize_note_name(token.strip()))

	if not match:
		raise InvalidNoteToken(f"Invalid note: {token!r}. Expected e.g. 'C2', 'F#1', 'Bb0'.")

	return Note.from_name(match.group(1), int(match.group(2)))
