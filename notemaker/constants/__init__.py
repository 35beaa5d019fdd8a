"""Constants for notemaker.

- ``notemaker.constants.durations`` - step and quarter-note timing
- ``notemaker.constants.velocity`` - MIDI velocity defaults and limits

The MIDI range constants live here because every module needs them.
"""

MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127

MIDI_CHANNEL_MIN = 0
MIDI_CHANNEL_MAX = 15
