"""Write text into a piano roll.

Each character is drawn from a small bitmap font on a 5x8 grid, ``x`` to the
right and ``y`` downward (row 7 holds the descenders of ``,`` and ``;``).
Rows become pitches: the baseline row 6 is the root, and every row above it
climbs one scale degree, so the letters always sound in key.

- ``width`` stretches glyphs horizontally (steps per font column)
- ``height`` stretches them vertically (scale degrees per font row)
- ``gap`` adds steps between characters
- ``italic`` slants each row right by its height above the baseline

Rendering is deterministic.
"""

import dataclasses
import logging
import typing

import notemaker.constants
import notemaker.constants.durations
import notemaker.constants.velocity
import notemaker.errors
import notemaker.notes
import notemaker.scales


logger = logging.getLogger(__name__)


GLYPH_ADVANCE = 5
SPACE_ADVANCE = 4
BASELINE_ROW = 6

# Root of octave 0 (C1); the key and octave start are added on top.
TEXT_ROOT_NOTE = 24

Glyph = typing.List[typing.Tuple[int, int]]

FONT: typing.Dict[str, Glyph] = {
	"A": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (0, 6), (2, 0), (3, 6), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5), (1, 3), (2, 3)],
	"B": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 1), (3, 2), (3, 4), (3, 5)],
	"C": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (1, 6), (2, 0), (2, 6), (3, 0), (3, 6)],
	"D": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 6), (2, 0), (2, 6), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	"E": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 0), (3, 6)],
	"F": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 3), (2, 0), (2, 3), (3, 0)],
	"G": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (1, 6), (2, 0), (2, 6), (3, 0), (3, 3), (3, 4), (3, 5), (3, 6), (2, 3)],
	"H": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 3), (2, 3), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5), (3, 6)],
	"I": [(0, 0), (0, 6), (1, 0), (1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6), (2, 0), (2, 6)],
	"J": [(0, 5), (1, 6), (2, 0), (2, 6), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	"K": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 3), (2, 2), (2, 4), (3, 0), (3, 1), (3, 5), (3, 6)],
	"L": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 6), (2, 6), (3, 6)],
	"M": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 1), (2, 2), (1, 3), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5), (3, 6)],
	"N": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 1), (2, 2), (3, 3), (4, 0), (4, 1), (4, 2), (4, 3), (4, 4), (4, 5), (4, 6)],
	"O": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (1, 6), (2, 0), (2, 6), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	"P": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 3), (2, 0), (2, 3), (3, 1), (3, 2)],
	"Q": [(0, 1), (0, 2), (0, 3), (0, 4), (1, 0), (1, 5), (2, 0), (2, 5), (2, 4), (3, 1), (3, 2), (3, 3), (3, 5), (3, 6)],
	"R": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6), (1, 0), (1, 3), (2, 0), (2, 3), (3, 1), (3, 2), (3, 4), (3, 5), (3, 6)],
	"S": [(0, 1), (0, 2), (0, 6), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 0), (3, 4), (3, 5)],
	"T": [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (2, 1), (2, 2), (2, 3), (2, 4), (2, 5), (2, 6)],
	"U": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 6), (2, 6), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	"V": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (1, 5), (2, 5), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4)],
	"W": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 6), (2, 5), (1, 4), (3, 6), (4, 0), (4, 1), (4, 2), (4, 3), (4, 4), (4, 5)],
	"X": [(0, 0), (0, 1), (0, 5), (0, 6), (1, 2), (1, 4), (2, 3), (3, 2), (3, 4), (4, 0), (4, 1), (4, 5), (4, 6)],
	"Y": [(0, 0), (0, 1), (1, 2), (2, 3), (2, 4), (2, 5), (2, 6), (3, 2), (4, 0), (4, 1)],
	"Z": [(0, 0), (0, 6), (1, 0), (1, 5), (1, 6), (2, 0), (2, 4), (2, 6), (3, 0), (3, 3), (3, 6), (4, 0), (4, 1), (4, 2), (4, 6)],
	"0": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (1, 6), (2, 0), (2, 6), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	"1": [(1, 1), (2, 0), (2, 1), (2, 2), (2, 3), (2, 4), (2, 5), (2, 6), (1, 6), (3, 6)],
	"2": [(0, 1), (0, 6), (1, 0), (1, 6), (2, 0), (2, 5), (2, 6), (3, 0), (3, 4), (3, 3), (3, 2), (3, 1)],
	"3": [(0, 0), (0, 6), (1, 0), (1, 6), (2, 0), (2, 3), (2, 6), (3, 1), (3, 2), (3, 4), (3, 5)],
	"4": [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5), (3, 6)],
	"5": [(0, 0), (0, 1), (0, 2), (0, 3), (0, 6), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 0), (3, 4), (3, 5)],
	"6": [(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 0), (3, 4), (3, 5)],
	"7": [(0, 0), (1, 0), (2, 0), (3, 0), (3, 1), (3, 2), (2, 3), (2, 4), (1, 5), (1, 6)],
	"8": [(0, 1), (0, 2), (0, 4), (0, 5), (1, 0), (1, 3), (1, 6), (2, 0), (2, 3), (2, 6), (3, 1), (3, 2), (3, 4), (3, 5)],
	"9": [(0, 1), (0, 2), (1, 0), (1, 3), (2, 0), (2, 3), (3, 0), (3, 1), (3, 2), (3, 3), (3, 4), (3, 5)],
	".": [(1, 5), (1, 6), (2, 5), (2, 6)],
	",": [(1, 5), (1, 6), (1, 7), (2, 6), (2, 7)],
	"!": [(1, 0), (1, 1), (1, 2), (1, 3), (1, 4), (1, 6)],
	"?": [(0, 1), (1, 0), (2, 0), (3, 0), (3, 1), (3, 2), (2, 3), (2, 4), (2, 6)],
	"-": [(1, 3), (2, 3), (3, 3)],
	"+": [(1, 3), (2, 1), (2, 2), (2, 3), (2, 4), (2, 5), (3, 3)],
	"=": [(1, 2), (2, 2), (3, 2), (1, 4), (2, 4), (3, 4)],
	":": [(1, 2), (1, 3), (1, 5), (1, 6)],
	";": [(1, 2), (1, 3), (1, 5), (1, 6), (1, 7)],
}


@dataclasses.dataclass
class TextConfig:

	"""
	Parameters for :func:`render_text`.

	Attributes:
		key: Key pitch class (0 = C).
		steps: Scale steps of the mode.
		octave_start: Octave of the baseline; 3 puts C on middle C.
		width: Steps per font column (at least 1).
		height: Scale degrees per font row (at least 1).
		gap: Extra steps between characters.
		italic: Slant the glyphs.
		velocity: Velocity of every note.
		channel: MIDI channel tag of the notes.
	"""

	key: int = 0
	steps: typing.List[int] = dataclasses.field(default_factory=lambda: notemaker.scales.get_intervals("Major"))
	octave_start: int = 3
	width: int = 1
	height: int = 1
	gap: int = 3
	italic: bool = False
	velocity: int = notemaker.constants.velocity.DEFAULT_TEXT_VELOCITY
	channel: int = 0


def render_text (text: str, config: typing.Optional[TextConfig] = None) -> typing.List[notemaker.notes.Note]:

	"""Render a string as sixteenth notes.

	Input is upper-cased. Spaces and characters missing from :data:`FONT`
	leave a blank of ``4 * width`` steps; every glyph advances the cursor by
	``5 * width + gap``. Points that land outside the MIDI range are skipped.

	Parameters:
		text: Text to draw
		config: Key, scale and layout settings (defaults to :class:`TextConfig`)

	Returns:
		Notes ordered character by character, in glyph point order

	Example:
		```python
		notes = render_text("Hi", TextConfig(width=2, gap=2))
		```
	"""

	if config is None:
		config = TextConfig()

	if config.width < 1 or config.height < 1:
		raise notemaker.errors.InvalidParameterError(f"Text width and height must be at least 1, got {config.width}x{config.height}")

	if config.gap < 0:
		raise notemaker.errors.InvalidParameterError(f"Text gap cannot be negative, got {config.gap}")

	profile = notemaker.scales.to_semitone_profile(config.steps)
	root = TEXT_ROOT_NOTE + config.key + 12 * config.octave_start

	notes: typing.List[notemaker.notes.Note] = []
	cursor = 0
	skipped = 0

	for char in text.upper():

		glyph = FONT.get(char)

		if not glyph:
			cursor += SPACE_ADVANCE * config.width
			continue

		for x, y in glyph:

			row = BASELINE_ROW - y
			column = x * config.width

			if config.italic:
				column += row * config.width

			# Descender rows sit below the baseline and wrap to the degree under the root.
			pitch = notemaker.scales.scale_tone(root, profile, row * config.height)

			if pitch < notemaker.constants.MIDI_NOTE_MIN or pitch > notemaker.constants.MIDI_NOTE_MAX:
				skipped += 1
				continue

			notes.append(notemaker.notes.Note(
				pitch = pitch,
				position = round(cursor + column),
				length = notemaker.constants.durations.SIXTEENTH,
				velocity = config.velocity,
				channel = config.channel
			))

		cursor += GLYPH_ADVANCE * config.width + config.gap

	if skipped:
		logger.warning(f"Text: {skipped} points fell outside the MIDI range")

	logger.info(f"Text: {len(notes)} notes over {cursor} steps")

	return notes
