"""Constants for scoreroll.

- ``scoreroll.constants.gm_instruments`` - General MIDI program names and the
  bundled instrument name dictionary used by :mod:`scoreroll.instruments`.

Timing and velocity defaults used across the pipeline live here directly.
"""

# Default time base when none is declared by a caller building documents by hand.
DEFAULT_PULSES_PER_QUARTER = 720

# Seed tempo written at tick 0 of the global track.
DEFAULT_BPM = 120.0

# Beat length used for the seed tempo when no global time signature exists.
DEFAULT_BEAT_LENGTH = 0.25

# Every materialized note is played at this velocity.
DEFAULT_VELOCITY = 100

# Defaults substituted for unparsable signature attributes.
DEFAULT_NUMERATOR = 4
DEFAULT_DENOMINATOR = 4
DEFAULT_ACCIDENTALS = 0

# General MIDI program range.
MIN_PROGRAM = 0
MAX_PROGRAM = 127

# Reserved marker message that ends repeat expansion.
FINE_MESSAGE = "fine"

# Default Goto activity: fire on the first visit only.
DEFAULT_ACTIVITY = "1"
