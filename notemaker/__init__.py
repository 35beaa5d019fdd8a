"""
Notemaker - music-theory note generators for piano rolls.

Notemaker turns a key, a scale and a handful of musical settings into lists
of notes ready to draw into a clip or save as a MIDI file. It makes no sound
and talks to no device; a host decides where the notes go.

What it generates:

- **Chord progressions.** Diatonic triads chosen by a Markov chain over
  scale degrees, with optional sevenths, tenths and a bass note, and a
  voice-leading pass that moves voices by octaves so chords connect
  smoothly (with optional pedal tone).
- **Melodies.** Weighted scale degrees with strong-beat emphasis, rests,
  mixed note lengths, short repetitions and motif development (transpose,
  invert, reverse, octave shift), plus "alternative" variations of a melody.
- **Text.** Any string drawn in a bitmap font, each row of a letter mapped
  to a scale degree, in normal or italic type.
- **Scale tools.** A large table of western and non-western scales,
  ``register_scale()`` for your own, a muted note stack that shows the
  scale in the piano roll, and a quantizer that snaps step-grid notes into
  key without merging them.
- **Retrospective capture.** A rolling buffer of the last eight bars of
  played MIDI that can be turned into notes after the fact.

Minimal example:

    ```python
    import random
    import notemaker

    session = notemaker.Session(root=0, scale="Major", rng=random.Random(1))
    chords = session.generate_chords(length=4)
    melody = session.generate_melody(notemaker.MelodyConfig(bars=4, motif_chance=20))
    ```

Command line: ``python -m notemaker chords --config notemaker.yaml --output chords.mid``

Package-level exports: ``Session``, ``MelodyConfig``, ``RenderOptions``, ``Note``, ``register_scale``.
"""

import notemaker.melody
import notemaker.notes
import notemaker.progression
import notemaker.scales
import notemaker.session


Session = notemaker.session.Session
MelodyConfig = notemaker.melody.MelodyConfig
RenderOptions = notemaker.progression.RenderOptions
Note = notemaker.notes.Note
register_scale = notemaker.scales.register_scale
