"""Write generated notes to a Standard MIDI File."""

import logging
import typing

import mido

import notemaker.constants.durations
import notemaker.notes


logger = logging.getLogger(__name__)


TICKS_PER_BEAT = 480
TICKS_PER_STEP = TICKS_PER_BEAT // notemaker.constants.durations.STEPS_PER_QUARTER


def note_messages (notes: typing.Iterable[notemaker.notes.Note]) -> typing.List[typing.Tuple[int, mido.Message]]:

	"""Return (absolute tick, message) pairs for every audible note, in time order.

	Muted notes are left out. At equal ticks note-offs come first so a note
	can end exactly where the next one on the same pitch starts.
	"""

	events: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for note in notes:

		if note.muted:
			continue

		start = int(round(note.position * TICKS_PER_STEP))
		end = start + max(1, int(round(note.length * TICKS_PER_BEAT)))

		events.append((start, 1, mido.Message('note_on', channel=note.channel, note=note.pitch, velocity=note.velocity)))
		events.append((end, 0, mido.Message('note_off', channel=note.channel, note=note.pitch, velocity=0)))

	events.sort(key=lambda x: (x[0], x[1]))

	return [(tick, message) for tick, _, message in events]


def build_midi_file (notes: typing.Iterable[notemaker.notes.Note], bpm: float = 120) -> mido.MidiFile:

	"""Build a single-track MIDI file holding the notes at the given tempo."""

	mid = mido.MidiFile(type=1)
	mid.ticks_per_beat = TICKS_PER_BEAT

	track = mido.MidiTrack()
	mid.tracks.append(track)

	track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=0))

	last_tick = 0

	for tick, message in note_messages(notes):
		message.time = tick - last_tick
		track.append(message)
		last_tick = tick

	track.append(mido.MetaMessage('end_of_track', time=0))

	return mid


def write_midi_file (notes: typing.Iterable[notemaker.notes.Note], path: str, bpm: float = 120) -> None:

	"""Save notes as a Standard MIDI File.

	Parameters:
		notes: Notes to write; positions in steps, lengths in quarter notes
		path: Output filename
		bpm: Tempo stored in the file

	Raises:
		OSError: If the file cannot be written.
	"""

	mid = build_midi_file(notes, bpm)

	logger.info(f"Saving {len(mid.tracks[0]) - 2} MIDI events to {path}...")

	mid.save(path)

	logger.info(f"Saved {path}")
