import argparse
import dataclasses
import logging
import os
import random
import sys
import typing

import yaml

import notemaker.melody
import notemaker.notes
import notemaker.progression
import notemaker.scales
import notemaker.session
import notemaker.text_renderer
import notemaker.midi_file


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_config (config_path: str = 'notemaker.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def _dataclass_options (cls: typing.Any, section: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""Keep the keys of a config section that name fields of a dataclass."""

	names = {field.name for field in dataclasses.fields(cls)}
	unknown = sorted(set(section) - names)

	if unknown:
		logger.warning(f"Ignoring unknown {cls.__name__} settings: {', '.join(unknown)}")

	return {key: value for key, value in section.items() if key in names}


def render_options_from (section: typing.Dict[str, typing.Any]) -> notemaker.progression.RenderOptions:

	"""Build chord render options; ``pedal_role`` is given by name (e.g. ``fifth``)."""

	options = _dataclass_options(notemaker.progression.RenderOptions, section)

	if options.get('pedal_role') is not None:
		options['pedal_role'] = notemaker.notes.Role(str(options['pedal_role']).lower())

	return notemaker.progression.RenderOptions(**options)


def build_notes (command: str, config: dict, args: argparse.Namespace) -> typing.List[notemaker.notes.Note]:

	"""
	Run one generator and return its notes.
	"""

	key = notemaker.scales.key_name_to_pc(str(config.get('key', 'C')))
	scale = str(config.get('scale', 'Major'))
	rng = random.Random(args.seed)

	session = notemaker.session.Session(root=key, scale=scale, rng=rng)

	if command == 'chords':
		section = dict(config.get('chords', {}) or {})
		length = int(section.pop('length', 4))
		session.render_options = render_options_from(section)
		return session.generate_chords(length)

	if command == 'melody':
		section = config.get('melody', {}) or {}
		melody_config = notemaker.melody.MelodyConfig(**_dataclass_options(notemaker.melody.MelodyConfig, section))
		return session.generate_melody(melody_config)

	if command == 'text':
		section = config.get('text', {}) or {}
		text_config = notemaker.text_renderer.TextConfig(**_dataclass_options(notemaker.text_renderer.TextConfig, section))
		text_config.key = key
		text_config.steps = session.steps
		return notemaker.text_renderer.render_text(args.text, text_config)

	return session.scale_stack()


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the notemaker command line.
	"""

	parser = argparse.ArgumentParser(prog='notemaker', description="Generate chords, melodies and text as MIDI notes.")
	parser.add_argument('--config', default='notemaker.yaml', help="YAML settings file")
	parser.add_argument('--output', default='notemaker.mid', help="MIDI file to write")
	parser.add_argument('--seed', type=int, default=None, help="Random seed for repeatable output")

	commands = parser.add_subparsers(dest='command', required=True)
	commands.add_parser('chords', help="Chord progression")
	commands.add_parser('melody', help="Melody")
	text_parser = commands.add_parser('text', help="Text drawn in notes")
	text_parser.add_argument('text')
	commands.add_parser('stack', help="Muted stack of every scale note")

	args = parser.parse_args(argv)
	config = load_config(args.config)

	try:
		notes = build_notes(args.command, config, args)
	except ValueError as e:
		logger.error(f"Invalid settings: {e}")
		return 2

	bpm = (config.get('output') or {}).get('bpm', 120)

	try:
		notemaker.midi_file.write_midi_file(notes, args.output, bpm)
	except OSError as e:
		logger.error(f"Failed to save MIDI file: {e}")
		return 1

	return 0


if __name__ == '__main__':
	sys.exit(main())
