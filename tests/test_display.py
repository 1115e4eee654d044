import luthier.display
import luthier.progression


def test_format_grid_populated (populated: luthier.progression.Progression) -> None:

	"""Chords sit over their regions and each step shows its gate class."""

	lines = luthier.display.format_grid(populated).split("\n")

	assert lines[0] == "Cm       Ab       Fm       G"
	assert lines[1] == "|X . o O |X . o . |O . O O |X . O O |"
	assert lines[2] == "C2 C2 Eb2 Ab1 Ab2 F2 C2 Ab2 G2 B1 D2"


def test_format_grid_empty () -> None:

	"""Blank chords show as dashes and a silent line says so."""

	lines = luthier.display.format_grid(luthier.progression.Progression.empty()).split("\n")

	assert lines[0] == "-        -        -        -"
	assert lines[1] == "|. . . . |. . . . |. . . . |. . . . |"
	assert lines[2] == "(silent)"


def test_chord_columns_line_up_with_regions (populated: luthier.progression.Progression) -> None:

	"""Each chord name starts at the bar line opening its region."""

	chord_row, step_row, _ = luthier.display.format_grid(populated).split("\n")
	region_starts = [i for i, char in enumerate(step_row[:-1]) if char == "|"]

	for chord, start in zip(populated.chords, region_starts):
		assert chord_row[start:start + len(chord)] == chord
