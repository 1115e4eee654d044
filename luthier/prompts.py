"""Request text for a generative progression provider.

The provider itself (and its network call) lives outside this package. This
module only builds what it is asked: a system instruction, a prompt that
pins the key, octave, pulse count and style, and the JSON shape the answer
must follow. Answers are validated with
``luthier.progression.progression_from_payload``.
"""

import typing


FAMOUS_SONG_STYLE = "riff de rock famoso"

DEFAULT_STYLE_DESCRIPTION = "groovy and rhythmic."

STYLE_DESCRIPTORS: typing.Dict[str, str] = {
	"acid techno": "hypnotic and squelchy, reminiscent of a Roland TB-303. The sequence should feature slides, accents, and a constantly modulating filter feel. It should be driving and repetitive.",
	"blues": "groovy and soulful. The sequence should follow a 12-bar blues structure rhythmically, emphasizing the root, fifth, and flat seventh.",
	"californian punk": "fast, melodic, and energetic, often with a pop-like catchiness. Basslines should be tight, following the root notes in a rapid, driving rhythm, typical of skate punk.",
	"charly garcía": "melodic, groovy, and highly musical, in the style of the basslines from Charly García's classic era (Serú Girán, early solo work). It should serve as both a solid foundation and a counter-melody to the chords. Incorporate arpeggios, walking bass elements, and tasteful syncopation to capture the progressive rock and tango-influenced feel. Think of the virtuosity and musicality of bassists like Pedro Aznar.",
	"classic rock": "a solid, groovy, and melodic bassline that locks in with the drums. It should be the foundation of the song, using root notes and fifths with some simple fills.",
	"ebm": "repetitive, danceable, and robotic with a strong 4/4 feel. Think body music.",
	"electro": "funky, syncopated, and robotic. Inspired by classic 808 drum machines and Kraftwerk. The bassline should be punchy and often uses staccato notes to create a distinct, groovy bounce.",
	"hard rock": "a powerful, driving, and often riff-based bassline. It should be punchy and aggressive, doubling the guitar riff or providing a heavy, solid low-end foundation.",
	"hardcore": "fast, distorted, and energetic with a relentless, pounding rhythm.",
	"industrial techno": "dark, dissonant, and groovy. The sequence should use syncopation and rests to create rhythmic tension.",
	"jazz": "groovy and walking. The sequence should feature syncopation and chromatic passing tones, reminiscent of a classic walking bassline.",
	"milonga": "faster, more syncopated, and with a lighter, more rolling feel than tango. Translate its characteristic rhythmic cells into a hypnotic, driving techno bassline. The feel should be relentless but groovy.",
	"minimal techno": "hypnotic, sparse, and subtle, focusing on gradual changes and a deep groove.",
	"progressive rock": "a complex, melodic, and technically demanding bassline with odd time signatures and frequent changes. It should be treated as a lead instrument, with intricate runs and counter-melodies.",
	"psychedelic rock": "a melodic, often improvisational-sounding bassline with a hypnotic feel. Use of arpeggios, scalar runs, and a more fluid rhythm is encouraged.",
	"punk": "simple, driving, and aggressive, using mostly root notes with a straightforward rhythm.",
	"seattle grunge": "heavy, distorted, and often sludgy with a slow to mid-tempo feel. Basslines should be thick, powerful, and closely follow the guitar riff, often using drop tunings and simple, impactful root note patterns.",
	"tango": "dramatic, passionate, and rhythmic, with a strong sense of tension and release. Adapt the characteristic 'habanera' rhythm and syncopation into a powerful, dark techno groove. Use staccato notes and sudden rests.",
}

SYSTEM_INSTRUCTION = (
	"You are 'Luthier', an AI with a punk rock attitude specializing in raw, powerful basslines for various "
	"electronic and rock genres. Your task is to generate chord progressions and 16-step sequences that hit hard "
	"and fit the requested style. For each note, define its gate (duration) to create a groovy, dynamic rhythm. "
	"If asked to emulate a specific song, analyze it and capture its essence. Respond only with the requested "
	"JSON object defined by the schema. Ensure the sequence has a strong, groovy, and aggressive feel appropriate "
	"for the specified genre or song."
)

NEGATIVE_HARMONY_INSTRUCTION = (
	"Apply the principles of negative harmony. The progression should be a reflection of a typical minor "
	"progression around the tonal axis, creating a sense of tension and resolution that feels 'inverted' or 'mirrored'."
)

RESPONSE_SCHEMA: typing.Dict[str, typing.Any] = {
	"type": "object",
	"properties": {
		"chords": {
			"type": "array",
			"description": "An array of 4 chord names as strings. e.g. ['Cm', 'G#m', 'Fm', 'A#m']",
			"items": {"type": "string"},
		},
		"sequence": {
			"type": "array",
			"description": "A 16-step sequencer pattern. Each step is an object.",
			"items": {
				"type": "object",
				"properties": {
					"step": {"type": "integer", "description": "The step number from 1 to 16."},
					"note": {"type": "string", "description": "The note to be played (e.g., 'C2', 'G#1'). Use null for rests."},
					"active": {"type": "boolean", "description": "True if the note is played, false for a rest."},
					"gate": {
						"type": "number",
						"description": "The gate length of the note as a multiplier of the step duration (0.1 to 1.0). For rests, this should be 0.",
					},
				},
				"required": ["step", "note", "active", "gate"],
			},
		},
	},
	"required": ["chords", "sequence"],
}


def describe_style (style: str) -> str:

	"""Return the descriptor for a style, or a generic one for unknown styles."""

	return STYLE_DESCRIPTORS.get(style, DEFAULT_STYLE_DESCRIPTION)


def build_prompt (
	root_note: str,
	negative_harmony: bool,
	octave: int,
	scale_type: str,
	style: str,
	pulses: int,
	famous_song: str = ""
) -> str:

	"""Build the generation prompt for the current editor settings.

	When ``style`` is ``FAMOUS_SONG_STYLE`` and a song is named, the prompt
	asks for a line inspired by that song with the root as tonal centre.
	Otherwise it describes the chosen style.

	Example:
		```python
		build_prompt("C", False, 2, "minor", "punk", 8)
		```
	"""

	negative = NEGATIVE_HARMONY_INSTRUCTION if negative_harmony else ""
	rests = (
		"For rests where no note is played, the 'note' property should be null, "
		"'active' should be false, and 'gate' should be 0."
	)

	if style == FAMOUS_SONG_STYLE and famous_song.strip():
		return (
			f"Generate a four-chord progression and a corresponding 16-step sequencer pattern for a bassline "
			f"inspired by the song '{famous_song}'. Analyze the original song's bassline and chord structure to "
			f"create a similar feel. The progression and sequence should be groovy and rhythmic, capturing the "
			f"essence of the original. The root note '{root_note}' in a {scale_type} key should be considered as a "
			f"starting point or tonal center, but the generated progression should prioritize emulating the song. "
			f"The 16-step sequence must contain exactly {pulses} active steps. For each active step, provide a "
			f"'gate' value between 0.2 and 1.0 to control the note's duration. A value of 1.0 means the note lasts "
			f"the full step. The sequence should use notes in octave {octave}. {rests} {negative}"
		)

	return (
		f"Generate a four-chord progression and a corresponding 16-step sequencer pattern for a {style} bassline "
		f"based on the root note '{root_note}' in a {scale_type} key. The progression and sequence should be "
		f"{describe_style(style)}. The 16-step sequence must contain exactly {pulses} active steps (notes). For "
		f"each active step, provide a 'gate' value between 0.2 and 1.0 to control the note's duration, creating a "
		f"dynamic and groovy rhythm. A value of 1.0 means the note lasts the full step. The sequence should "
		f"primarily use the root notes of the generated chords, in octave {octave}. {rests} {negative}"
	)
