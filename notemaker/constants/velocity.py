"""MIDI velocity constants.

Velocity is the MIDI attack strength. Generated notes always land in
``MIN_VELOCITY``..``MAX_VELOCITY``; a velocity of 0 would read as a note-off.
"""

DEFAULT_CHORD_VELOCITY = 64     # Generated chord tones
DEFAULT_MELODY_VELOCITY = 80    # Baseline blended with randomness in melodies
DEFAULT_TEXT_VELOCITY = 60      # Rendered text glyphs

# Scale note stacks are written muted; the velocity only matters if unmuted.
STACK_VELOCITY = 60

MIN_VELOCITY = 1
MAX_VELOCITY = 127
