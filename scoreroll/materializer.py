"""Turn a resolved document into an ordered event stream.

The global group receives a single seed tempo at tick 0 followed by the global
markers, time signatures and key signatures.  Each part with a MIDI channel
gets its own group with an instrument name, an optional program change, and a
note-on/note-off pair per score note.

Only the global scope contributes meta events; signatures and markers inside
parts are not materialized.  Parts without a channel produce no group.
"""

import logging
import math
import typing

import scoreroll.constants
import scoreroll.events
import scoreroll.instruments
import scoreroll.timeline


logger = logging.getLogger(__name__)


def round_half_up (value: float) -> int:

	"""Round to the nearest integer, halves rounding up (60.5 -> 61)."""

	return int(math.floor(value + 0.5))


def _initial_tempo (global_scope: scoreroll.timeline.Scope, bpm: float) -> scoreroll.events.Event:

	"""
	Seed tempo at tick 0.  The beat length is one over the denominator of the
	first global time signature, or a quarter note if there is none.
	"""

	beat_length = scoreroll.constants.DEFAULT_BEAT_LENGTH

	first = scoreroll.timeline.entry_at_after(global_scope.time_signature_map, 0.0, scoreroll.timeline.TimeSignature)

	if isinstance(first, scoreroll.timeline.TimeSignature) and first.denominator > 0:
		beat_length = 1.0 / first.denominator

	return scoreroll.events.Event(tick=0, message_type="set_tempo", bpm=bpm, beat_length=beat_length)


def _global_events (global_scope: scoreroll.timeline.Scope, group: scoreroll.events.EventGroup) -> None:

	"""Add markers, time signatures and key signatures from the global maps."""

	for entry in global_scope.marker_map:
		if isinstance(entry, scoreroll.timeline.Marker):
			group.add(scoreroll.events.Event(
				tick = round_half_up(entry.date),
				message_type = "marker",
				text = entry.message or "marker"
			))

	for entry in global_scope.time_signature_map:
		if isinstance(entry, scoreroll.timeline.TimeSignature):
			group.add(scoreroll.events.Event(
				tick = round_half_up(entry.date),
				message_type = "time_signature",
				numerator = entry.numerator,
				denominator = entry.denominator
			))

	for entry in global_scope.key_signature_map:
		if isinstance(entry, scoreroll.timeline.KeySignature):
			group.add(scoreroll.events.Event(
				tick = round_half_up(entry.date),
				message_type = "key_signature",
				accidentals = entry.accidentals
			))


def _part_events (
	part: scoreroll.timeline.Scope,
	channel: int,
	generate_program_changes: bool,
	instruments: typing.Optional[scoreroll.instruments.InstrumentDictionary]
) -> scoreroll.events.EventGroup:

	name = part.name or ""
	group = scoreroll.events.EventGroup(name)

	group.add(scoreroll.events.Event(tick=0, message_type="instrument_name", text=name))

	if generate_program_changes:
		program = instruments.resolve_program(name) if instruments is not None else scoreroll.constants.MIN_PROGRAM
		group.add(scoreroll.events.Event(tick=0, message_type="program_change", channel=channel, program=program))

	for entry in part.score:

		if not isinstance(entry, scoreroll.timeline.Note):
			continue

		pitch = round_half_up(entry.pitch)
		start = round_half_up(entry.date)
		end = start + round_half_up(entry.duration)

		group.add(scoreroll.events.Event(
			tick = start,
			message_type = "note_on",
			channel = channel,
			note = pitch,
			velocity = scoreroll.constants.DEFAULT_VELOCITY
		))

		group.add(scoreroll.events.Event(
			tick = end,
			message_type = "note_off",
			channel = channel,
			note = pitch,
			velocity = scoreroll.constants.DEFAULT_VELOCITY
		))

	return group


def materialize (
	document: typing.Optional[scoreroll.timeline.Document],
	bpm: float = scoreroll.constants.DEFAULT_BPM,
	generate_program_changes: bool = True,
	instruments: typing.Optional[scoreroll.instruments.InstrumentDictionary] = None
) -> typing.Optional[scoreroll.events.EventStream]:

	"""
	Build the event stream for a resolved document.

	Parameters:
		document: The document, with repeats already resolved.
		bpm: Tempo of the seed tempo event.
		generate_program_changes: When True, each part gets a program change
			chosen from its name.
		instruments: Dictionary used to pick program numbers.  Defaults to the
			bundled dictionary when program changes are requested.

	Returns:
		The event stream, or ``None`` if the document is absent or empty.
	"""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	if document is None or document.global_scope is None:
		logger.info("No document data to materialize")
		return None

	if generate_program_changes and instruments is None:
		instruments = scoreroll.instruments.InstrumentDictionary.default()

	stream = scoreroll.events.EventStream(pulses_per_quarter=document.pulses_per_quarter)

	stream.global_group.add(_initial_tempo(document.global_scope, bpm))
	_global_events(document.global_scope, stream.global_group)

	for index, part in enumerate(document.parts):

		if part.channel is None:
			logger.debug(f"Skipping part {index} ({part.name or 'unnamed'}): no MIDI channel")
			continue

		stream.part_groups.append(_part_events(part, part.channel, generate_program_changes, instruments))

	logger.info(f"Materialized {len(stream.part_groups)} part(s), {sum(len(g) for g in stream.groups)} events")

	return stream
