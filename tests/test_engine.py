import logging
import random

import pytest

import conftest
import luthier.engine
import luthier.pitch
import luthier.progression
import luthier.scales
import luthier.sequence_utils


@pytest.fixture
def blank_line () -> luthier.progression.Progression:

	"""Chords loaded but every step resting."""

	return luthier.progression.Progression(
		chords=("Cm", "Ab", "Fm", "G"),
		steps=luthier.progression.Progression.empty().steps,
	)


# ---------------------------------------------------------------------------
# toggle_step / set_note / set_gate
# ---------------------------------------------------------------------------

def test_toggle_step_on_and_off () -> None:

	"""Toggling a rest plays the root at the working octave; toggling again rests."""

	empty = luthier.progression.Progression.empty()

	on = luthier.engine.toggle_step(empty, 0, "C", 2)

	assert on.steps[0].active
	assert str(on.steps[0].note) == "C2"
	assert on.steps[0].gate == 0.8
	assert not empty.steps[0].active

	off = luthier.engine.toggle_step(on, 0, "C", 2)

	assert off.steps[0] == luthier.progression.SequenceStep.rest(1)
	conftest.assert_consistent(on)
	conftest.assert_consistent(off)


def test_toggle_step_works_without_chords () -> None:

	"""Manual steps do not need a chord progression."""

	progression = luthier.engine.toggle_step(luthier.progression.Progression.empty(), 7, "F#", 1)

	assert str(progression.steps[7].note) == "F#1"
	assert progression.steps[7].position == 8


def test_toggle_step_out_of_range (populated: luthier.progression.Progression) -> None:

	"""Indexes outside 0..15 raise IndexError."""

	with pytest.raises(IndexError):
		luthier.engine.toggle_step(populated, 16, "C", 2)


def test_set_note_none_rests_the_step (populated: luthier.progression.Progression) -> None:

	"""Clearing the note clears active and gate as well."""

	updated = luthier.engine.set_note(populated, 0, None)

	assert updated.steps[0] == luthier.progression.SequenceStep.rest(1)
	conftest.assert_consistent(updated)


def test_set_note_on_a_rest_uses_default_gate (populated: luthier.progression.Progression) -> None:

	"""A rest that gets a note comes alive with gate 0.8."""

	updated = luthier.engine.set_note(populated, 1, "D2")

	assert updated.steps[1].active
	assert str(updated.steps[1].note) == "D2"
	assert updated.steps[1].gate == 0.8


def test_set_note_keeps_existing_gate (populated: luthier.progression.Progression) -> None:

	"""Changing the note of an active step leaves its gate alone."""

	updated = luthier.engine.set_note(populated, 2, luthier.pitch.parse_note("G1"))

	assert str(updated.steps[2].note) == "G1"
	assert updated.steps[2].gate == 0.4


def test_set_note_rejects_bad_token (populated: luthier.progression.Progression) -> None:

	"""Malformed notes raise before anything changes."""

	with pytest.raises(luthier.pitch.InvalidNoteToken):
		luthier.engine.set_note(populated, 0, "X9")


def test_set_gate_active_step (populated: luthier.progression.Progression) -> None:

	"""The gate of an active step can be changed within (0, 1]."""

	updated = luthier.engine.set_gate(populated, 0, 0.25)

	assert updated.steps[0].gate == 0.25
	assert updated.steps[0].note == populated.steps[0].note
	assert populated.steps[0].gate == 0.9


@pytest.mark.parametrize("gate", [0, -0.1, 1.01])
def test_set_gate_out_of_range (populated: luthier.progression.Progression, gate: float) -> None:

	"""Gates outside (0, 1] on an active step are refused."""

	with pytest.raises(ValueError, match="Gate"):
		luthier.engine.set_gate(populated, 0, gate)


def test_set_gate_on_rest_is_ignored (populated: luthier.progression.Progression, caplog: pytest.LogCaptureFixture) -> None:

	"""A rest keeps gate 0 so the invariant holds."""

	with caplog.at_level(logging.WARNING, logger="luthier.engine"):
		updated = luthier.engine.set_gate(populated, 1, 0.7)

	assert updated is populated
	assert "inactive step 2" in caplog.text


# ---------------------------------------------------------------------------
# re_rhythm()
# ---------------------------------------------------------------------------

def test_re_rhythm_empty_progression_is_untouched (caplog: pytest.LogCaptureFixture) -> None:

	"""Without chords there is nothing to re-rhythm."""

	empty = luthier.progression.Progression.empty()

	with caplog.at_level(logging.WARNING, logger="luthier.engine"):
		result = luthier.engine.re_rhythm(empty, 8, "C", 2, luthier.scales.playable_notes("C"))

	assert result is empty
	assert "empty progression" in caplog.text


def test_re_rhythm_keeps_steps_that_stay_on (populated: luthier.progression.Progression, rng: random.Random) -> None:

	"""Steps 1, 5, 9 and 13 were already playing and keep their note and gate."""

	result = luthier.engine.re_rhythm(populated, 4, "C", 2, luthier.scales.playable_notes("C"), rng=rng)

	assert [i for i, step in enumerate(result.steps) if step.active] == [0, 4, 8, 12]

	for i in (0, 4, 8, 12):
		assert result.steps[i] == populated.steps[i]

	assert result.chords == populated.chords
	conftest.assert_consistent(result)


def test_re_rhythm_exact_pulse_count (populated: luthier.progression.Progression) -> None:

	"""The new active count always equals the requested pulses."""

	palette = luthier.scales.playable_notes("C", (0, 1, 2, 3, 4))

	for pulses in range(0, 17):
		result = luthier.engine.re_rhythm(populated, pulses, "C", 2, palette, rng=random.Random(pulses))
		assert result.active_count == pulses
		conftest.assert_consistent(result)


def test_re_rhythm_new_notes_come_from_the_working_octave (blank_line: luthier.progression.Progression) -> None:

	"""Fresh steps get the default gate and a palette note in the working octave."""

	palette = luthier.scales.playable_notes("C", (0, 1, 2, 3, 4))
	allowed = set(luthier.scales.notes_in_octave(palette, 2))

	result = luthier.engine.re_rhythm(blank_line, 6, "C", 2, palette, rng=random.Random(3))

	for step in result.steps:
		if step.active:
			assert step.note in allowed
			assert step.gate == 0.8


def test_re_rhythm_full_density_plays_the_root (blank_line: luthier.progression.Progression) -> None:

	"""At 16 pulses the root is always chosen."""

	result = luthier.engine.re_rhythm(blank_line, 16, "C", 2, luthier.scales.playable_notes("C", [2]), rng=random.Random(0))

	assert all(str(step.note) == "C2" for step in result.steps)


def test_re_rhythm_falls_back_to_root_without_palette (blank_line: luthier.progression.Progression) -> None:

	"""If no palette note sits in the working octave, the root is used."""

	result = luthier.engine.re_rhythm(blank_line, 5, "E", 3, luthier.scales.playable_notes("E", [1]), rng=random.Random(0))

	assert result.active_count == 5
	assert {str(step.note) for step in result.steps if step.active} == {"E3"}


def test_re_rhythm_is_reproducible (blank_line: luthier.progression.Progression) -> None:

	"""The same seed gives the same line."""

	palette = luthier.scales.playable_notes("A")

	first = luthier.engine.re_rhythm(blank_line, 9, "A", 1, palette, rng=random.Random(11))
	second = luthier.engine.re_rhythm(blank_line, 9, "A", 1, palette, rng=random.Random(11))

	assert first == second


# ---------------------------------------------------------------------------
# randomize_melody()
# ---------------------------------------------------------------------------

def test_randomize_empty_progression_is_untouched () -> None:

	"""Randomizing needs chords."""

	empty = luthier.progression.Progression.empty()

	assert luthier.engine.randomize_melody(empty, "C", 2, rng=random.Random(1)) is empty


def test_randomize_uses_chord_tones (populated: luthier.progression.Progression) -> None:

	"""Every note is a tone of the chord governing its step, in the working octave."""

	for seed in range(20):

		result = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(seed))

		assert luthier.engine.RANDOM_PULSES_MIN <= result.active_count <= luthier.engine.RANDOM_PULSES_MAX
		assert result.chords == populated.chords
		conftest.assert_consistent(result)

		for i, step in enumerate(result.steps):
			if step.active:
				assert step.note.pc in luthier.scales.chord_triad_indices(result.chord_for_step(i))
				assert step.note.octave == 2
				assert 0.6 <= step.gate <= 1.0


def test_randomize_rhythm_is_euclidean (populated: luthier.progression.Progression) -> None:

	"""The active steps form the Euclidean pattern for the drawn pulse count."""

	result = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(5))
	pattern = luthier.sequence_utils.euclidean_pattern(16, result.active_count)

	assert [step.active for step in result.steps] == pattern


def test_randomize_spells_in_key (populated: luthier.progression.Progression) -> None:

	"""Chord tones are spelled for the key, so C minor gets flats."""

	result = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(2))

	for step in result.steps:
		if step.active:
			assert "#" not in str(step.note)


def test_randomize_skips_blank_chord_slots (populated: luthier.progression.Progression) -> None:

	"""Steps under an empty chord slot rest."""

	result = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(4), chords=("Cm", "", "", ""))

	assert not any(step.active for step in result.steps[4:])
	assert result.steps[0].active


def test_randomize_all_blank_chords (populated: luthier.progression.Progression) -> None:

	"""Explicitly blank chords leave the progression alone."""

	assert luthier.engine.randomize_melody(populated, "C", 2, chords=("", "", "", "")) is populated


def test_randomize_is_reproducible (populated: luthier.progression.Progression) -> None:

	"""The same seed gives the same line."""

	first = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(99))
	second = luthier.engine.randomize_melody(populated, "C", 2, rng=random.Random(99))

	assert first == second


def test_toggle_step_refuses_octave_outside_note_format () -> None:

	"""A root in octave 10 has no note string, so nothing is written."""

	empty = luthier.progression.Progression.empty()

	with pytest.raises(luthier.pitch.InvalidNoteToken):
		luthier.engine.toggle_step(empty, 0, "C", 10)
