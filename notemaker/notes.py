"""Note, chord and role definitions.

A :class:`Note` is the unit every generator produces. Positions are in steps
(16th notes) and lengths in quarter notes. Construction clamps every field
into its legal range, so arithmetic on pitches or velocities can never produce
an invalid note; it is never rejected.

Chord tones carry a :class:`Role` so extension passes and the revoicer can
find the root, third, fifth and so on without relying on MIDI channel
numbers. ``ROLE_CHANNELS`` keeps the channel convention for hosts that draw
each role on its own channel.
"""

import dataclasses
import enum
import typing

import notemaker.constants
import notemaker.sequence_utils


class Role (enum.Enum):

	"""Musical role of a chord tone."""

	ROOT = "root"
	THIRD = "third"
	FIFTH = "fifth"
	SEVENTH = "seventh"
	TENTH = "tenth"
	BASS = "bass"


ROLE_CHANNELS: typing.Dict[Role, int] = {
	Role.ROOT: 0,
	Role.THIRD: 2,
	Role.FIFTH: 4,
	Role.SEVENTH: 6,
	Role.TENTH: 9,
	Role.BASS: 15,
}

# Shortest drawable note, one 64th note in quarter-note units.
MIN_LENGTH = 0.0625


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A timed, pitched note with optional expressive attributes.
	"""

	pitch: int
	position: float
	length: float
	velocity: int
	channel: int = 0
	role: typing.Optional[Role] = None
	release_velocity: typing.Optional[float] = None
	pressure: typing.Optional[float] = None
	timbre: typing.Optional[float] = None
	muted: bool = False


	def __post_init__ (self) -> None:

		"""
		Clamp every field into its legal range.
		"""

		# Frozen dataclass: write through object.__setattr__.
		object.__setattr__(self, "pitch", notemaker.sequence_utils.clamp_pitch(int(round(self.pitch))))
		object.__setattr__(self, "velocity", notemaker.sequence_utils.clamp_velocity(self.velocity))
		object.__setattr__(self, "channel", int(notemaker.sequence_utils.clamp(self.channel, notemaker.constants.MIDI_CHANNEL_MIN, notemaker.constants.MIDI_CHANNEL_MAX)))
		object.__setattr__(self, "position", max(0.0, float(self.position)))

		if self.length <= 0:
			# Decision path: a zero-length note still needs to be drawable.
			object.__setattr__(self, "length", MIN_LENGTH)

		if self.release_velocity is not None:
			object.__setattr__(self, "release_velocity", notemaker.sequence_utils.clamp(self.release_velocity, 0.0, 1.0))

		if self.pressure is not None:
			object.__setattr__(self, "pressure", notemaker.sequence_utils.clamp(self.pressure, 0.0, 1.0))

		if self.timbre is not None:
			object.__setattr__(self, "timbre", notemaker.sequence_utils.clamp(self.timbre, -1.0, 1.0))


	def transpose (self, semitones: int) -> "Note":

		"""
		Return a copy shifted by a number of semitones.
		"""

		return dataclasses.replace(self, pitch=self.pitch + semitones)


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	A chord built on a scale degree, one note per role.
	"""

	degree: int
	notes: typing.Tuple[Note, ...]


	def find (self, role: Role) -> typing.Optional[Note]:

		"""
		Return the first note with the given role, or None.
		"""

		for note in self.notes:
			if note.role == role:
				return note

		return None


	def pitches (self) -> typing.List[int]:

		"""
		Return the chord's pitches in note order.
		"""

		return [note.pitch for note in self.notes]


	def with_notes (self, notes: typing.Iterable[Note]) -> "Chord":

		"""
		Return a copy of this chord holding different notes.
		"""

		return dataclasses.replace(self, notes=tuple(notes))


Progression = typing.List[Chord]


def flatten (progression: typing.Iterable[Chord]) -> typing.List[Note]:

	"""Return every note of a progression as one flat list."""

	return [note for chord in progression for note in chord.notes]
