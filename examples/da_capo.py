import logging

import scoreroll
import scoreroll.timeline as tl

logging.basicConfig(level=logging.INFO)

PPQ = 480
BAR = 3 * PPQ

# A minuet in 3/4: an A section played twice, a B section, then da capo al fine.
#
#   |: A (2 bars) :| B (2 bars) D.C. al Fine
#                ^ fine

melody_a = [67, 69, 71, 72, 74, 72]
melody_b = [76, 74, 72, 71, 69, 67]

score = []
for i, pitch in enumerate(melody_a + melody_b):
	score.append(tl.Note(date=i * PPQ, pitch=pitch, duration=PPQ, identifier=f"n{i}"))

global_scope = tl.Scope(maps={
	tl.TIME_SIGNATURE_MAP: [tl.TimeSignature(date=0, numerator=3, denominator=4)],
	tl.KEY_SIGNATURE_MAP: [tl.KeySignature(date=0, accidentals=1)],
	tl.MARKER_MAP: [
		tl.Marker(date=0, message="A"),
		tl.Marker(date=2 * BAR, message="B"),
	],
	tl.SEQUENCING_MAP: [
		tl.Marker(date=0, message="start", identifier="start"),
		tl.Goto(date=2 * BAR, target_date=0, target_marker_id="start", activity="1"),
		tl.Marker(date=2 * BAR, message="fine"),
		tl.Goto(date=4 * BAR, target_date=0, target_marker_id="start", activity="1"),
	],
})

document = tl.Document(
	pulses_per_quarter = PPQ,
	global_scope = global_scope,
	parts = [tl.Scope(maps={tl.SCORE: score}, name="Oboe", channel=0)]
)

stream = scoreroll.convert(document, scoreroll.ConversionConfig(bpm=132))

if stream is not None:
	scoreroll.save_midi_file(stream, "minuet.mid")
