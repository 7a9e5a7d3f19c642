"""General MIDI instrument names and the bundled instrument name dictionary.

Two things live here:

1. **DEFAULT_NAMES** - the 128 General MIDI Level 1 program names, indexed by
   program number.  This is the fixed fallback table used when no dictionary
   is available, and for reverse lookups with ``use_default_table=True``::

       import scoreroll.constants.gm_instruments

       scoreroll.constants.gm_instruments.DEFAULT_NAMES[40]   # "Violin"

2. **DEFAULT_DICTIONARY** - dictionary text in the ``instruments.dict`` format
   read by :func:`scoreroll.instruments.parse_dictionary`.  Lines starting with
   ``%`` are comments, ``#<n>`` switches the program number that all following
   names map to, and every other non-empty line is one instrument name.  The
   bundled text covers the GM names plus common score labels in English,
   Italian, German and French.
"""

import typing


DEFAULT_NAMES: typing.List[str] = [
	"Acoustic Grand Piano", "Bright Acoustic Piano", "Electric Grand Piano", "Honkytonk Piano",
	"Electric Piano 1", "Electric Piano 2", "Harpsichord", "Clavinet",
	"Celesta", "Glockenspiel", "Music Box", "Vibraphone",
	"Marimba", "Xylophone", "Tubular Bells", "Dulcimer",
	"Drawbar Organ", "Percussive Organ", "Rock Organ", "Church Organ",
	"Reed Organ", "Accordion", "Harmonica", "Tango Accordion",
	"Acoustic Nylon Guitar", "Acoustic Steel Guitar", "Electric Jazz Guitar", "Electric Clean Guitar",
	"Electric Muted Guitar", "Overdriven Guitar", "Distorted Guitar", "Harmonic Guitar",
	"Acoustic Bass", "Fingered Electric Bass", "Picked Electric Bass", "Fretless Bass",
	"Slap Bass 1", "Slap Bass 2", "Synth Bass 1", "Synth Bass 2",
	"Violin", "Viola", "Cello", "Contrabass",
	"Tremolo Strings", "Pizzicato Strings", "Orchestral Harp", "Timpani",
	"String Ensemble 1", "String Ensemble 2", "Synth Strings 1", "Synth Strings 2",
	"Choir Aahs", "Voice Oohs", "Synth Choir", "Orchestra Hit",
	"Trumpet", "Trombone", "Tuba", "Muted Trumpet",
	"French Horn", "Brass Section", "Synth Brass 1", "Synth Brass 2",
	"Soprano Sax", "Alto Sax", "Tenor Sax", "Baritone Sax",
	"Oboe", "English Horn", "Bassoon", "Clarinet",
	"Piccolo", "Flute", "Recorder", "Pan Flute",
	"Blown Bottle", "Shakuhachi", "Whistle", "Ocarina",
	"Lead 1 Square", "Lead 2 Sawtooth", "Lead 3 Calliope", "Lead 4 Chiff",
	"Lead 5 Charang", "Lead 6 Voice", "Lead 7 Fifths", "Lead 8 (Bass + Lead)",
	"Pad 1 New Age", "Pad 2 Warm", "Pad 3 Polysynth", "Pad 4 Choir",
	"Pad 5 Bowed", "Pad 6 Metallic", "Pad 7 Halo", "Pad 8 Sweep",
	"FX 1 Rain", "FX 2 Soundtrack", "FX 3 Crystal", "FX 4 Atmosphere",
	"FX 5 Brightness", "FX 6 Goblins", "FX 7 Echoes", "FX 8 Scifi",
	"Sitar", "Banjo", "Shamisen", "Koto",
	"Kalimba", "Bagpipe", "Fiddle", "Shanai",
	"Tinkle Bell", "Agogo", "Steel Drums", "Woodblock",
	"Taiko Drum", "Melodic Tom", "Synth Drum", "Reverse Cymbal",
	"Guitar Fret Noise", "Breath Noise", "Seashore", "Bird Tweet",
	"Telephone Ring", "Helicopter", "Applause", "Gunshot",
]


# ─── Score labels beyond the GM names ────────────────────────────────
#
# Keyed by program number.  Order within a list matters only for reverse
# lookups, which return the first name registered for a program.

_EXTRA_NAMES: typing.Dict[int, typing.List[str]] = {
	0: ["piano", "pianoforte", "klavier", "flügel", "grand piano", "pf", "pno"],
	6: ["cembalo", "clavecin", "clavicembalo", "continuo", "basso continuo"],
	8: ["celeste"],
	9: ["glockenspiel", "campanelli", "carillon"],
	11: ["vibes"],
	14: ["tubular bells", "chimes", "campane", "glocken", "cloches"],
	19: ["organ", "orgel", "organo", "orgue", "pipe organ"],
	21: ["akkordeon", "fisarmonica", "accordéon"],
	24: ["guitar", "gitarre", "chitarra", "guitare", "classical guitar", "lute", "laute", "liuto", "theorbo"],
	32: ["bass guitar"],
	40: ["violin", "violino", "violine", "geige", "violon", "vl", "vln", "violin 1", "violin 2", "violino i", "violino ii"],
	41: ["viola", "bratsche", "alto", "va", "vla", "viola da gamba", "gambe"],
	42: ["cello", "violoncello", "violoncelle", "vc", "vlc"],
	43: ["contrabass", "double bass", "kontrabass", "contrabbasso", "contrebasse", "violone", "cb", "kb"],
	45: ["pizzicato"],
	46: ["harp", "harfe", "arpa", "harpe"],
	47: ["timpani", "pauken", "timbales", "kettledrums", "timp"],
	48: ["strings", "streicher", "archi", "cordes", "string orchestra"],
	52: ["choir", "chor", "coro", "chœur", "soprano", "alto voice", "tenor", "bass voice", "voice", "singstimme", "canto", "sopran", "tenore", "basso"],
	56: ["trumpet", "trompete", "tromba", "trompette", "clarino", "tpt"],
	57: ["trombone", "posaune", "tbn"],
	58: ["tuba", "basstuba"],
	60: ["horn", "french horn", "corno", "cor", "waldhorn", "hn"],
	61: ["brass"],
	64: ["soprano saxophone"],
	65: ["alto saxophone", "saxophone", "sax"],
	66: ["tenor saxophone"],
	67: ["baritone saxophone"],
	68: ["oboe", "oboi", "hautbois", "oboe d'amore", "ob"],
	69: ["english horn", "cor anglais", "englischhorn", "corno inglese"],
	70: ["bassoon", "fagott", "fagotto", "basson", "contrabassoon", "kontrafagott", "bsn"],
	71: ["clarinet", "klarinette", "clarinetto", "clarinette", "bass clarinet", "cl"],
	72: ["piccolo", "flauto piccolo", "ottavino", "petite flûte", "picc"],
	73: ["flute", "flöte", "querflöte", "flauto", "flûte", "traverso", "fl"],
	74: ["recorder", "blockflöte", "flauto dolce", "flûte à bec"],
	75: ["pan flute", "panflöte"],
	104: ["sitar"],
	105: ["banjo"],
	109: ["bagpipe", "dudelsack", "cornamusa"],
	110: ["fiddle"],
	115: ["woodblock", "temple blocks"],
	116: ["taiko"],
	117: ["tom-tom", "toms"],
	119: ["cymbal", "becken", "piatti", "cymbales"],
}


def _build_default_dictionary () -> str:

	"""Render the GM names and extra score labels as dictionary text."""

	lines = [
		"% scoreroll default instrument dictionary",
		"% #<program> switches the program number for all following names",
	]

	for program, name in enumerate(DEFAULT_NAMES):
		lines.append(f"#{program}")
		lines.append(name)
		lines.extend(_EXTRA_NAMES.get(program, []))

	return "\n".join(lines) + "\n"


DEFAULT_DICTIONARY: str = _build_default_dictionary()
