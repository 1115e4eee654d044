import logging
import os
import typing

import yaml

import luthier.display
import luthier.editor
import luthier.pitch
import luthier.playback
import luthier.progression


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_editor (config: dict) -> luthier.editor.Editor:

	"""
	Create an editor from the ``editor`` section of the config.
	"""

	settings = config.get('editor', {}) or {}

	return luthier.editor.Editor(
		root_note = settings.get('root_note', 'C'),
		octave = settings.get('octave', 2),
		scale_type = settings.get('scale_type', 'minor'),
		pulses = settings.get('pulses', 8),
		negative_harmony = settings.get('negative_harmony', False),
		style = settings.get('style', 'industrial techno'),
		famous_song = settings.get('famous_song', ''),
		seed = settings.get('seed'),
	)


def apply_actions (editor: luthier.editor.Editor, actions: typing.List[typing.Any]) -> None:

	"""
	Run the configured edits in order.

	Each action is ``randomize``, ``{pulses: N}``, ``{toggle: N}`` (1-based
	step) or ``{negative_harmony: bool}``.
	"""

	for action in actions:

		if action == 'randomize':
			editor.randomize()
		elif isinstance(action, dict) and 'pulses' in action:
			editor.set_pulses(int(action['pulses']))
		elif isinstance(action, dict) and 'toggle' in action:
			editor.toggle_step(int(action['toggle']) - 1)
		elif isinstance(action, dict) and 'negative_harmony' in action:
			editor.set_negative_harmony(bool(action['negative_harmony']))
		else:
			logger.warning(f"Unknown action {action!r} ignored.")


def main () -> None:

	"""
	Main entry point: load a generated progression, edit it and render it to MIDI.
	"""

	logger.info("Luthier starting...")

	config = load_config()
	editor = build_editor(config)

	payload_path = (config.get('progression', {}) or {}).get('path')

	if payload_path:
		try:
			with open(payload_path, 'r') as f:
				editor.load(f.read())
		except (OSError, luthier.progression.InvalidProgressionShape, luthier.pitch.InvalidNoteToken) as e:
			logger.error(f"Rejected progression from {payload_path}: {e}")
			return
	else:
		logger.info("No progression configured. Prompt for a generation provider:")
		logger.info(editor.generation_prompt())
		return

	apply_actions(editor, config.get('actions', []) or [])

	display = editor.display
	logger.info(f"Detected scale: {editor.detected_scale}\n{luthier.display.format_grid(display)}")

	render = config.get('render', {}) or {}

	luthier.playback.save_midi(
		display,
		filename = render.get('filename'),
		bpm = render.get('bpm', 120),
		bars = render.get('bars', 4),
		rng = editor.rng,
	)


if __name__ == "__main__":
	main()
