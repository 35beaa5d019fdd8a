"""Retrospective capture: remember what was just played.

A :class:`CaptureBuffer` listens to incoming MIDI all the time and keeps the
last eight bars of note events. Nothing has to be armed beforehand; when a
take was good, :meth:`CaptureBuffer.to_notes` turns the buffer into notes
placed relative to the start of the window that ends at the last key release.

Timestamps are milliseconds from any monotonic clock the host likes.

Example:
	```python
	import notemaker.retrospect

	buffer = notemaker.retrospect.CaptureBuffer(bpm=120)
	buffer.on_midi(0x90, 60, 100, 0)
	buffer.on_midi(0x80, 60, 0, 500)

	buffer.events()[0].duration  # 500
	notes = buffer.to_notes()
	```
"""

import dataclasses
import logging
import math
import typing

import mido

import notemaker.constants.durations
import notemaker.errors
import notemaker.notes


logger = logging.getLogger(__name__)


CAPTURE_BARS = 8
DEFAULT_BPM = 120.0
MS_PER_MINUTE = 60000.0


@dataclasses.dataclass
class CapturedEvent:

	"""
	A note-on seen by the buffer, and its duration once the key is released.
	"""

	pitch: int
	velocity: int
	channel: int
	timestamp: float
	paired: bool = False
	duration: typing.Optional[float] = None


class CaptureBuffer:

	"""
	Rolling record of the last eight bars of played notes.
	"""

	def __init__ (self, bpm: float = DEFAULT_BPM) -> None:

		"""
		Create an empty buffer.

		Parameters:
			bpm: Tempo used for the window length and for painting notes
		"""

		self._bpm = DEFAULT_BPM
		self.set_bpm(bpm)

		self._events: typing.List[CapturedEvent] = []
		self.last_update: typing.Optional[float] = None


	@property
	def bpm (self) -> float:

		return self._bpm


	def set_bpm (self, bpm: float) -> None:

		"""Change the tempo.

		Only the window length and future painting change; durations already
		measured stay as they are.
		"""

		if bpm <= 0:
			raise notemaker.errors.InvalidParameterError(f"Tempo must be positive, got {bpm}")

		self._bpm = float(bpm)


	def ms_per_quarter (self) -> float:

		return MS_PER_MINUTE / self._bpm


	def window_ms (self) -> float:

		"""Length of the capture window in milliseconds."""

		return CAPTURE_BARS * notemaker.constants.durations.QUARTERS_PER_BAR * self.ms_per_quarter()


	def events (self) -> typing.List[CapturedEvent]:

		"""Return the events currently held, oldest first."""

		return list(self._events)


	def clear (self) -> None:

		self._events.clear()
		self.last_update = None


	def on_midi (self, status: int, data1: int, data2: int, timestamp: float) -> None:

		"""Feed a raw three-byte MIDI message.

		Anything other than note-on and note-off is ignored.
		"""

		if status & 0xF0 not in (0x80, 0x90):
			return

		try:
			message = mido.Message.from_bytes([status, data1, data2])

		except ValueError as exc:
			raise notemaker.errors.InvalidParameterError(f"Malformed MIDI message {status:#04x} {data1} {data2}: {exc}") from exc

		self.on_message(message, timestamp)


	def on_message (self, message: mido.Message, timestamp: float) -> None:

		"""Feed a parsed mido message."""

		if message.type not in ("note_on", "note_off"):
			return

		# Expire first so a release can still close a note held past the window.
		self._expire(timestamp)

		if message.type == "note_on" and message.velocity > 0:
			self._events.append(CapturedEvent(
				pitch = message.note,
				velocity = message.velocity,
				channel = message.channel,
				timestamp = timestamp
			))

		else:
			self.last_update = timestamp
			self._pair(message.note, message.channel, timestamp)


	def _pair (self, pitch: int, channel: int, timestamp: float) -> None:

		"""Close the most recent open note with this pitch and channel."""

		for event in reversed(self._events):

			if not event.paired and event.pitch == pitch and event.channel == channel:
				event.paired = True
				event.duration = timestamp - event.timestamp
				return

		logger.debug(f"Note-off for {pitch} on channel {channel} has no matching note-on")


	def _expire (self, now: float) -> None:

		"""Drop finished events that started before the window.

		Keys still held are kept however long ago they were pressed, so their
		release can still be paired.
		"""

		cutoff = now - self.window_ms()

		self._events = [event for event in self._events if event.timestamp >= cutoff or not event.paired]


	def to_notes (self) -> typing.List[notemaker.notes.Note]:

		"""Paint the finished notes of the buffer.

		Positions are 16th steps from the start of the window that ends at the
		last note-off. Notes that began before that window are skipped and
		durations are capped at the window length.
		"""

		if self.last_update is None:
			return []

		window = self.window_ms()
		start = self.last_update - window
		ms_per_step = self.ms_per_quarter() / notemaker.constants.durations.STEPS_PER_QUARTER

		notes: typing.List[notemaker.notes.Note] = []

		for event in self._events:

			if not event.paired or event.duration is None:
				continue

			offset = event.timestamp - start

			if offset < 0:
				continue

			duration = min(event.duration, window)

			if duration <= 0:
				continue

			notes.append(notemaker.notes.Note(
				pitch = event.pitch,
				position = math.floor(offset / ms_per_step),
				length = duration / self.ms_per_quarter(),
				velocity = event.velocity,
				channel = event.channel
			))

		logger.info(f"Capture: painted {len(notes)} notes")

		return notes
