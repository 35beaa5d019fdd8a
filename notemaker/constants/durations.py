"""Step-based timing constants.

Positions are measured in **steps** (16th notes) and note lengths in
**quarter notes**, matching the note grid of a typical piano roll::

    import notemaker.constants.durations as dur

    # one bar of 4/4
    dur.STEPS_PER_BAR        # 16 steps

    # convert a note length to steps
    length * dur.STEPS_PER_QUARTER
"""

STEPS_PER_QUARTER = 4
STEPS_PER_BAR = 16
QUARTERS_PER_BAR = 4

# Note lengths in quarter notes.
SIXTEENTH = 0.25
EIGHTH = 0.5
QUARTER = 1.0
HALF = 2.0
WHOLE = 4.0
