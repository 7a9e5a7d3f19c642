"""Encode an event stream as a Standard MIDI File using mido.

Each event group becomes one track of a type 1 file (global group first), and
the file's resolution is the stream's time base, so ticks are written as-is.
"""

import logging
import math
import typing

import mido

import scoreroll.events


logger = logging.getLogger(__name__)

# Major keys by number of sharps (positive) or flats (negative).
KEY_NAMES: typing.Dict[int, str] = {
	-7: "Cb", -6: "Gb", -5: "Db", -4: "Ab", -3: "Eb", -2: "Bb", -1: "F",
	0: "C",
	1: "G", 2: "D", 3: "A", 4: "E", 5: "B", 6: "F#", 7: "C#",
}


def key_name (accidentals: int) -> str:

	"""Return the major key name for a signed accidental count, clamped to [-7, 7]."""

	return KEY_NAMES[max(-7, min(7, accidentals))]


def quarter_note_tempo (bpm: float, beat_length: float) -> int:

	"""
	Convert a tempo in beats per minute to microseconds per quarter note.

	*beat_length* is the beat's length as a fraction of a whole note (0.25 for
	quarter-note beats, 0.125 for eighths).
	"""

	return mido.bpm2tempo(bpm * beat_length * 4)


def _power_of_two (denominator: int) -> int:

	"""Round a time signature denominator to the nearest power of two (at least 1)."""

	if denominator <= 0:
		return 4

	rounded = 2 ** round(math.log2(denominator))

	if rounded != denominator:
		logger.warning(f"Time signature denominator {denominator} is not a power of two; writing {rounded}")

	return rounded


def to_message (event: scoreroll.events.Event) -> typing.Union[mido.Message, mido.MetaMessage]:

	"""Convert one event to the matching mido message (delta time 0)."""

	if event.message_type == "note_on" or event.message_type == "note_off":
		return mido.Message(event.message_type, channel=event.channel, note=event.note, velocity=event.velocity)

	if event.message_type == "program_change":
		return mido.Message("program_change", channel=event.channel, program=event.program)

	if event.message_type == "set_tempo":
		return mido.MetaMessage("set_tempo", tempo=quarter_note_tempo(event.bpm, event.beat_length))

	if event.message_type == "time_signature":
		return mido.MetaMessage("time_signature", numerator=event.numerator, denominator=_power_of_two(event.denominator))

	if event.message_type == "key_signature":
		return mido.MetaMessage("key_signature", key=key_name(event.accidentals))

	if event.message_type == "marker":
		return mido.MetaMessage("marker", text=event.text)

	if event.message_type == "instrument_name":
		return mido.MetaMessage("instrument_name", name=event.text)

	raise ValueError(f"Cannot encode event type {event.message_type!r}")


def to_track (group: scoreroll.events.EventGroup) -> mido.MidiTrack:

	"""Build a track with delta times from an event group."""

	track = mido.MidiTrack()
	last_tick = 0

	for event in sorted(group.events, key=lambda e: e.tick):

		message = to_message(event)
		message.time = max(0, event.tick - last_tick)
		track.append(message)

		last_tick = max(last_tick, event.tick)

	return track


def to_midi_file (stream: scoreroll.events.EventStream) -> mido.MidiFile:

	"""Build a type 1 MIDI file with one track per event group."""

	mid = mido.MidiFile(type=1, ticks_per_beat=stream.pulses_per_quarter)

	for group in stream.groups:
		mid.tracks.append(to_track(group))

	return mid


def save_midi_file (stream: scoreroll.events.EventStream, filename: str) -> mido.MidiFile:

	"""Encode the stream and write it to *filename*.  Returns the MIDI file."""

	mid = to_midi_file(stream)

	logger.info(f"Saving MIDI file ({len(mid.tracks)} tracks) to {filename}...")

	try:
		mid.save(filename)
	except (OSError, ValueError) as e:
		logger.error(f"Failed to save MIDI file: {e}")
		raise

	logger.info(f"Saved {filename}")

	return mid
