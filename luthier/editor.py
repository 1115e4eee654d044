import logging
import random
import threading
import typing

import luthier.engine
import luthier.negative_harmony
import luthier.pitch
import luthier.progression
import luthier.prompts
import luthier.scales


logger = logging.getLogger(__name__)


PALETTE_OCTAVES: typing.Tuple[int, ...] = (0, 1, 2, 3, 4)

Payload = typing.Union[luthier.progression.Progression, typing.Mapping[str, typing.Any], str]


def _check_octave (octave: int) -> int:

	if not luthier.pitch.OCTAVE_MIN <= octave <= luthier.pitch.OCTAVE_MAX:
		raise ValueError(f"Octave must be in {luthier.pitch.OCTAVE_MIN}..{luthier.pitch.OCTAVE_MAX}, got {octave}")

	return octave


class Editor:

	"""
	The editing session behind a bass-line sequencer screen.

	Holds the generation parameters (root, octave, scale type, pulse count,
	style) and the canonical "source" progression. The "display" progression
	is derived from the source on demand: the source itself, or its
	negative-harmony mirror when that mode is on. Edits always apply to the
	source.

	Edits and setters take a lock around their writes, so hosts that call in
	from several threads get last-writer-wins rather than torn updates.

	Example:
		```python
		editor = luthier.editor.Editor(root_note="E", octave=1, seed=7)
		editor.load(payload_from_provider)
		editor.set_pulses(11)
		editor.set_negative_harmony(True)
		editor.display.steps[0].note
		```
	"""

	def __init__ (
		self,
		root_note: str = "C",
		octave: int = 2,
		scale_type: str = "minor",
		pulses: int = 8,
		negative_harmony: bool = False,
		style: str = "industrial techno",
		famous_song: str = "",
		seed: typing.Optional[int] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Start a session with an empty progression.

		Parameters:
			root_note: Key root name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).
			octave: Working octave for new notes (0 to 9).
			scale_type: ``"major"`` or ``"minor"``.
			pulses: Pulse count shown in the editor and used for generation.
			negative_harmony: Show the mirrored view.
			style: Style name passed to the generation prompt.
			famous_song: Song to emulate in famous-song mode.
			seed: Seed for a private random generator.
			rng: Random number generator instance (overrides ``seed``).
		"""

		if scale_type not in luthier.scales.SCALE_INTERVALS:
			raise ValueError(f"Unknown scale type: {scale_type!r}")

		self.root_note = luthier.pitch.sanitize_note_name(root_note)
		luthier.pitch.parse_pitch_class(self.root_note)

		self.octave = _check_octave(octave)
		self.scale_type = scale_type
		self.pulses = pulses
		self.negative_harmony = negative_harmony
		self.style = style
		self.famous_song = famous_song
		self.rng = rng if rng is not None else random.Random(seed)

		self._lock = threading.Lock()
		self._source = luthier.progression.Progression.empty()
		self._display_cache: typing.Optional[typing.Tuple[luthier.progression.Progression, str, luthier.progression.Progression]] = None

	@property
	def source (self) -> luthier.progression.Progression:
		"""The canonical progression that edits apply to."""
		return self._source

	@property
	def display (self) -> luthier.progression.Progression:

		"""The progression to show and play.

		With negative harmony on, this is the mirror of the source around the
		current root, recomputed whenever the source or root changes.
		"""

		with self._lock:

			if not self.negative_harmony:
				return self._source

			cached = self._display_cache

			if cached is not None and cached[0] is self._source and cached[1] == self.root_note:
				return cached[2]

			mirrored = luthier.negative_harmony.mirror_progression(self._source, self.root_note)
			self._display_cache = (self._source, self.root_note, mirrored)

			return mirrored

	@property
	def is_empty (self) -> bool:
		"""True until a generated progression has been loaded."""
		return self._source.is_empty

	@property
	def playable_notes (self) -> typing.List[luthier.pitch.Note]:
		"""The note palette for the current root across octaves 0 to 4."""
		return luthier.scales.playable_notes(self.root_note, PALETTE_OCTAVES)

	@property
	def detected_scale (self) -> typing.Optional[str]:
		"""Best-fit scale for the displayed chords, e.g. ``"C Minor"``."""
		return luthier.scales.detect_scale(self.display.chords)

	def load (self, payload: Payload) -> luthier.progression.Progression:

		"""
		Replace the source with a generated progression.

		Accepts a ``Progression``, a payload mapping or JSON text. A payload
		that fails validation raises and leaves the session untouched.

		Raises:
			luthier.progression.InvalidProgressionShape: Wrong shape.
			luthier.pitch.InvalidNoteToken: Malformed note or chord.
		"""

		if isinstance(payload, luthier.progression.Progression):
			progression = payload
		elif isinstance(payload, str):
			progression = luthier.progression.progression_from_json(payload)
		else:
			progression = luthier.progression.progression_from_payload(payload)

		with self._lock:
			self._source = progression

		logger.info(f"Loaded progression {' '.join(c or '-' for c in progression.chords)} ({progression.active_count} active steps)")

		return progression

	def _apply (self, label: str, operation: typing.Callable[[luthier.progression.Progression], luthier.progression.Progression]) -> luthier.progression.Progression:

		with self._lock:
			self._source = operation(self._source)
			result = self._source

		logger.debug(f"{label}: {result.active_count} active steps")

		return result

	def toggle_step (self, index: int) -> luthier.progression.Progression:

		"""Switch a step on with the root note or off."""

		return self._apply(
			f"Toggled step {index + 1}",
			lambda p: luthier.engine.toggle_step(p, index, self.root_note, self.octave),
		)

	def set_note (self, index: int, note: typing.Optional[luthier.engine.NoteLike]) -> luthier.progression.Progression:

		"""Set a step's note, or clear it with ``None``."""

		return self._apply(f"Set note of step {index + 1}", lambda p: luthier.engine.set_note(p, index, note))

	def set_gate (self, index: int, gate: float) -> luthier.progression.Progression:

		"""Set a step's gate."""

		return self._apply(f"Set gate of step {index + 1}", lambda p: luthier.engine.set_gate(p, index, gate))

	def set_pulses (self, pulses: int) -> luthier.progression.Progression:

		"""Store a new pulse count and redistribute the rhythm to match."""

		with self._lock:
			self.pulses = pulses

		palette = self.playable_notes

		return self._apply(
			f"Pulses {pulses}",
			lambda p: luthier.engine.re_rhythm(p, pulses, self.root_note, self.octave, palette, rng=self.rng),
		)

	def randomize (self) -> luthier.progression.Progression:

		"""Write a new random sequence of chord tones over the current chords."""

		return self._apply(
			"Randomized sequence",
			lambda p: luthier.engine.randomize_melody(p, self.root_note, self.octave, rng=self.rng),
		)

	def set_negative_harmony (self, enabled: bool) -> None:

		"""Switch the mirrored display on or off."""

		with self._lock:
			self.negative_harmony = enabled

		logger.info(f"Negative harmony {'on' if enabled else 'off'}")

	def set_root_note (self, root_note: str) -> None:

		"""
		Change the key root.

		Raises:
			luthier.pitch.InvalidNoteToken: If the root is not a note name.
		"""

		name = luthier.pitch.sanitize_note_name(root_note)
		luthier.pitch.parse_pitch_class(name)

		with self._lock:
			self.root_note = name

		logger.info(f"Root note: {name}")

	def set_octave (self, octave: int) -> None:

		"""
		Change the working octave for new notes.

		Raises:
			ValueError: If the octave is outside 0..9, where note names stop
				having a single octave digit.
		"""

		_check_octave(octave)

		with self._lock:
			self.octave = octave

	def set_scale_type (self, scale_type: str) -> None:

		"""Change between ``"major"`` and ``"minor"``."""

		if scale_type not in luthier.scales.SCALE_INTERVALS:
			raise ValueError(f"Unknown scale type: {scale_type!r}")

		with self._lock:
			self.scale_type = scale_type

	def generation_prompt (self) -> str:

		"""Build the prompt a generation provider is asked with."""

		return luthier.prompts.build_prompt(
			root_note = self.root_note,
			negative_harmony = self.negative_harmony,
			octave = self.octave,
			scale_type = self.scale_type,
			style = self.style,
			pulses = self.pulses,
			famous_song = self.famous_song,
		)

	def snapshot (self) -> typing.Dict[str, typing.Any]:

		"""Return the displayed progression and session parameters as plain data."""

		data = luthier.progression.progression_to_payload(self.display)
		data.update(
			root_note = self.root_note,
			octave = self.octave,
			scale_type = self.scale_type,
			pulses = self.pulses,
			negative_harmony = self.negative_harmony,
			detected_scale = self.detected_scale,
		)

		return data
