"""What a player needs from a progression, and MIDI file rendering.

Playback runs on fixed 16th-note steps. Each tick reads the step at the
current position: an active step sounds its note for ``gate`` of the step
duration, a rest is silence. Tempo and transport belong to the player.

``progression_to_midi`` renders the same stream into a standard MIDI file
with ``mido`` so a pattern can be auditioned in a DAW or on hardware.
"""

import logging
import random
import typing

import mido

import luthier.progression


logger = logging.getLogger(__name__)


TICKS_PER_BEAT = 480
TICKS_PER_STEP = TICKS_PER_BEAT // 4

_MANIFESTO_ADJECTIVES = [
	"Rebelde", "Anarquista", "Radical", "Liberado", "Desafiante",
	"Subversivo", "Insurgente", "Apasionado", "SinCensura",
]

_MANIFESTO_NOUNS = [
	"Beso", "Disturbio", "Corazon", "Ritmo", "Verdad",
	"Himno", "Amor", "Igualdad", "Libertad", "Revolucion",
]


def step_at (progression: luthier.progression.Progression, tick: int) -> luthier.progression.SequenceStep:

	"""Return the step that plays on a running tick count (wraps every 16)."""

	return progression.steps[tick % luthier.progression.STEP_COUNT]


def effective_gate (step: luthier.progression.SequenceStep) -> float:

	"""The gate a player should use: the step's gate, or the default when it is 0."""

	return step.gate if step.gate > 0 else luthier.progression.DEFAULT_GATE


def step_duration (bpm: float) -> float:

	"""Seconds in one 16th-note step."""

	if bpm <= 0:
		raise ValueError(f"BPM must be positive, got {bpm}")

	return 60.0 / bpm / 4


def note_duration (step: luthier.progression.SequenceStep, bpm: float) -> float:

	"""Seconds an active step sounds; 0 for a rest."""

	if not step.active or step.note is None:
		return 0.0

	return step_duration(bpm) * effective_gate(step)


def progression_to_midi (
	progression: luthier.progression.Progression,
	bpm: float = 120,
	bars: int = 1,
	channel: int = 0,
	velocity: int = 100
) -> mido.MidiFile:

	"""Render a progression into a single-track MIDI file.

	Parameters:
		progression: The progression to render (usually the displayed one).
		bpm: Tempo written into the file.
		bars: How many times the 16-step pattern repeats.
		channel: MIDI channel (0-15).
		velocity: Note-on velocity for every note.

	Returns:
		A ``mido.MidiFile`` ready to ``save()``.
	"""

	mid = mido.MidiFile(type=1)
	mid.ticks_per_beat = TICKS_PER_BEAT

	track = mido.MidiTrack()
	mid.tracks.append(track)
	track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

	# (absolute tick, sort order, message) so note-offs land before note-ons at the same tick.
	events: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for bar in range(bars):
		for i, step in enumerate(progression.steps):

			if not step.active or step.note is None:
				continue

			start = (bar * luthier.progression.STEP_COUNT + i) * TICKS_PER_STEP
			length = max(1, int(TICKS_PER_STEP * effective_gate(step)))
			pitch = step.note.midi

			events.append((start, 1, mido.Message("note_on", channel=channel, note=pitch, velocity=velocity)))
			events.append((start + length, 0, mido.Message("note_off", channel=channel, note=pitch, velocity=0)))

	events.sort(key=lambda e: (e[0], e[1]))

	last_tick = 0

	for tick, _, message in events:
		track.append(message.copy(time=tick - last_tick))
		last_tick = tick

	end = bars * luthier.progression.STEP_COUNT * TICKS_PER_STEP
	track.append(mido.MetaMessage("end_of_track", time=max(0, end - last_tick)))

	return mid


def manifesto_name (rng: typing.Optional[random.Random] = None) -> str:

	"""Return a random ``Adjective-Noun-N`` name for an exported file."""

	if rng is None:
		rng = random.Random()

	return f"{rng.choice(_MANIFESTO_ADJECTIVES)}-{rng.choice(_MANIFESTO_NOUNS)}-{rng.randint(1, 1000)}"


def save_midi (
	progression: luthier.progression.Progression,
	filename: typing.Optional[str] = None,
	bpm: float = 120,
	bars: int = 1,
	channel: int = 0,
	velocity: int = 100,
	rng: typing.Optional[random.Random] = None
) -> str:

	"""Write a progression to a MIDI file and return its path.

	Without a filename, a random manifesto name is used.
	"""

	if not filename:
		filename = f"{manifesto_name(rng)}.mid"

	mid = progression_to_midi(progression, bpm=bpm, bars=bars, channel=channel, velocity=velocity)

	logger.info(f"Saving MIDI ({progression.active_count} notes per bar, {bars} bars) to {filename}...")
	mid.save(filename)

	return filename
