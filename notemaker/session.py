"""Caller-owned state for the generate / repaint / alternative workflow.

A :class:`Session` remembers the last chord progression and melody so they
can be drawn again with different extension settings, or varied, without
being regenerated. Every call returns a fresh note list; nothing is written
anywhere.

Example:
	```python
	import random
	import notemaker.progression
	import notemaker.session

	session = notemaker.session.Session(root=2, scale="Dorian", rng=random.Random(5))
	session.generate_chords(length=4)

	options = notemaker.progression.RenderOptions(add_seventh=True, revoice=True, min_interval=2)
	notes = session.repaint(options)
	```
"""

import dataclasses
import logging
import random
import typing

import notemaker.melody
import notemaker.notes
import notemaker.progression
import notemaker.scales


logger = logging.getLogger(__name__)


DEFAULT_ALTERNATIVE_PROBABILITY = 30.0


class Session:

	"""
	Key, scale and the most recent progression and melody.
	"""

	def __init__ (
		self,
		root: int = 0,
		scale: str = "Major",
		rng: typing.Optional[random.Random] = None,
		progression_config: typing.Optional[notemaker.progression.ProgressionConfig] = None,
		render_options: typing.Optional[notemaker.progression.RenderOptions] = None
	) -> None:

		"""
		Parameters:
			root: Key pitch class (0 = C)
			scale: Name of a scale in :data:`~notemaker.scales.SCALE_INTERVALS`
			rng: Random number generator shared by every generator call
			progression_config: Register, velocity and graph of the chords
			render_options: Extensions and voicing applied when drawing chords
		"""

		self.root = root
		self.steps = notemaker.scales.get_intervals(scale)
		self.rng = rng or random.Random()

		self.progression_config = progression_config or notemaker.progression.ProgressionConfig()
		self.render_options = render_options or notemaker.progression.RenderOptions()

		self.progression: notemaker.notes.Progression = []
		self.melody: typing.List[notemaker.notes.Note] = []
		self.melody_config: typing.Optional[notemaker.melody.MelodyConfig] = None


	def generate_chords (self, length: int = 4) -> typing.List[notemaker.notes.Note]:

		"""Generate a new progression and draw it with the current options."""

		self.progression = notemaker.progression.generate_chord_progression(
			self.root,
			self.steps,
			length,
			self.rng,
			self.progression_config
		)

		return self.repaint()


	def repaint (self, options: typing.Optional[notemaker.progression.RenderOptions] = None) -> typing.List[notemaker.notes.Note]:

		"""Draw the stored progression again, optionally with new options.

		New options replace the session's options. Returns an empty list if no
		progression has been generated yet.
		"""

		if options is not None:
			self.render_options = options

		if not self.progression:
			logger.debug("Nothing to repaint yet")
			return []

		rendered = notemaker.progression.render_progression(self.progression, self.render_options)

		return notemaker.notes.flatten(rendered)


	def generate_melody (self, config: typing.Optional[notemaker.melody.MelodyConfig] = None) -> typing.List[notemaker.notes.Note]:

		"""Generate a new melody in the session's key and scale.

		The config's ``root`` and ``steps`` are replaced by the session's.
		"""

		base = config or self.melody_config or notemaker.melody.MelodyConfig()
		self.melody_config = dataclasses.replace(base, root=self.root, steps=list(self.steps))

		generator = notemaker.melody.MelodyGenerator(self.melody_config, self.rng)
		self.melody = generator.generate()

		return list(self.melody)


	def repaint_melody (self) -> typing.List[notemaker.notes.Note]:

		"""Return the stored melody."""

		return list(self.melody)


	def alternative (self, probability: float = DEFAULT_ALTERNATIVE_PROBABILITY) -> typing.List[notemaker.notes.Note]:

		"""Vary the stored melody and keep the variation as the current melody.

		Parameters:
			probability: Chance (0-100) that each note moves a scale step
		"""

		if not self.melody:
			logger.debug("No melody to vary yet")
			return []

		assert self.melody_config is not None
		generator = notemaker.melody.MelodyGenerator(self.melody_config, self.rng)

		self.melody = notemaker.melody.alternative_melody(self.melody, generator.scale_notes, probability, self.rng)

		return list(self.melody)


	def scale_stack (self) -> typing.List[notemaker.notes.Note]:

		"""Return the muted stack of every scale pitch (see :func:`~notemaker.scales.scale_note_stack`)."""

		return notemaker.scales.scale_note_stack(notemaker.progression.DEFAULT_BASE_NOTE + self.root, self.steps)
