import json
import logging
import pathlib

import luthier
import luthier.display
import luthier.negative_harmony
import luthier.playback
import luthier.scales

logging.basicConfig(level=logging.INFO)

PAYLOAD = pathlib.Path(__file__).with_name("progression.json")

editor = luthier.Editor(root_note="C", octave=2, scale_type="minor", seed=7)
editor.load(json.loads(PAYLOAD.read_text()))

logging.info(f"Source ({editor.detected_scale}):\n{luthier.display.format_grid(editor.display)}")

# Thin the line out to a tresillo-like 5 hits, then flip to the negative view.
editor.set_pulses(5)
editor.set_negative_harmony(True)

logging.info(f"Mirrored ({editor.detected_scale}):\n{luthier.display.format_grid(editor.display)}")

# The mirror of the mirror is the source again.
back = luthier.negative_harmony.mirror_progression(editor.display, editor.root_note)
assert back.steps == editor.source.steps

# A fresh chord-tone line over the same chords.
editor.randomize()

palette = [str(n) for n in luthier.scales.playable_notes(editor.root_note, [editor.octave])]
logging.info(f"Palette: {' '.join(palette)}")

luthier.playback.save_midi(editor.display, "negative_line.mid", bpm=124, bars=4)
