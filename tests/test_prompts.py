import luthier.prompts


def test_generic_prompt_pins_settings () -> None:

	"""Root, scale type, pulse count, octave and style descriptor all appear."""

	prompt = luthier.prompts.build_prompt("F#", False, 1, "minor", "acid techno", 9)

	assert "acid techno bassline" in prompt
	assert "root note 'F#' in a minor key" in prompt
	assert "exactly 9 active steps" in prompt
	assert "in octave 1" in prompt
	assert "TB-303" in prompt
	assert "'note' property should be null" in prompt
	assert "negative harmony" not in prompt


def test_negative_harmony_instruction_is_appended () -> None:

	"""Asking for negative harmony adds the mirroring instruction."""

	prompt = luthier.prompts.build_prompt("C", True, 2, "minor", "punk", 8)

	assert prompt.rstrip().endswith(luthier.prompts.NEGATIVE_HARMONY_INSTRUCTION)


def test_unknown_style_gets_generic_descriptor () -> None:

	"""Styles without a descriptor fall back to a generic one."""

	assert luthier.prompts.describe_style("polka") == luthier.prompts.DEFAULT_STYLE_DESCRIPTION
	assert luthier.prompts.DEFAULT_STYLE_DESCRIPTION in luthier.prompts.build_prompt("C", False, 2, "major", "polka", 8)


def test_famous_song_prompt () -> None:

	"""Famous-song mode names the song and treats the root as a tonal centre."""

	prompt = luthier.prompts.build_prompt(
		"E", False, 1, "minor", luthier.prompts.FAMOUS_SONG_STYLE, 7, famous_song="Seven Nation Army"
	)

	assert "inspired by the song 'Seven Nation Army'" in prompt
	assert "tonal center" in prompt
	assert "exactly 7 active steps" in prompt


def test_famous_song_mode_without_song_falls_back () -> None:

	"""A blank song name gives the generic prompt."""

	prompt = luthier.prompts.build_prompt("E", False, 1, "minor", luthier.prompts.FAMOUS_SONG_STYLE, 7, famous_song="  ")

	assert "inspired by the song" not in prompt
	assert luthier.prompts.DEFAULT_STYLE_DESCRIPTION in prompt


def test_style_catalogue () -> None:

	"""Every known style has a non-empty descriptor."""

	assert len(luthier.prompts.STYLE_DESCRIPTORS) == 18
	assert all(text for text in luthier.prompts.STYLE_DESCRIPTORS.values())


def test_response_schema_shape () -> None:

	"""The answer must be an object with chords and a step sequence."""

	schema = luthier.prompts.RESPONSE_SCHEMA

	assert schema["required"] == ["chords", "sequence"]
	assert schema["properties"]["sequence"]["items"]["required"] == ["step", "note", "active", "gate"]
