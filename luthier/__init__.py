"""
Luthier - a bass-line step-sequencer engine for Python.

Luthier holds a 16-step bass pattern laid over four chords and keeps rhythm
and melody consistent while it is edited. Generation of the initial
progression is left to an external provider (Luthier builds the prompt and
validates the answer); everything after that is deterministic music theory
plus seeded randomness.

What it does:

- **Pitch and scales.** Note names to pitch classes and back, sharp/flat
  spelling chosen from the key signature, major and natural minor scales,
  a playable note palette, triads and best-fit scale detection.
- **Negative harmony.** Mirrors notes and chords across the tonic/dominant
  axis. Chords flip between major and minor. The mirror is a view, never an
  edit.
- **Euclidean rhythm.** Bresenham-style even distribution of pulses across
  steps.
- **Step editing.** Toggle steps, set notes and gates, redistribute the
  rhythm to a new pulse count, or randomize the whole line from chord tones.
  Every edit returns a new immutable snapshot.
- **Playback helpers.** Per-tick step lookup, gate durations and rendering
  to a standard MIDI file.

Minimal example:

    ```python
    import luthier

    editor = luthier.Editor(root_note="C", octave=2, seed=42)
    editor.load(payload)            # {"chords": [...4], "sequence": [...16]}
    editor.set_pulses(11)
    editor.set_negative_harmony(True)
    luthier.playback.save_midi(editor.display, "line.mid")
    ```

Package-level exports: ``Editor``, ``Progression``, ``SequenceStep``, ``Note``,
``euclidean_pattern``.
"""

import luthier.editor
import luthier.pitch
import luthier.playback
import luthier.progression
import luthier.sequence_utils


Editor = luthier.editor.Editor
Note = luthier.pitch.Note
Progression = luthier.progression.Progression
SequenceStep = luthier.progression.SequenceStep
euclidean_pattern = luthier.sequence_utils.euclidean_pattern
