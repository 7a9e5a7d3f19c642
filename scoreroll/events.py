"""The ordered event stream produced by the materializer.

Events are tagged by ``message_type`` using the standard MIDI message names,
so an encoder can map them one-to-one onto MIDI messages:

	set_tempo, time_signature, key_signature, marker,
	instrument_name, program_change, note_on, note_off

Only the fields relevant to an event's type are meaningful; the rest keep
their defaults.
"""

import bisect
import dataclasses
import typing

import scoreroll.constants


MESSAGE_TYPES = frozenset({
	"set_tempo",
	"time_signature",
	"key_signature",
	"marker",
	"instrument_name",
	"program_change",
	"note_on",
	"note_off",
})


@dataclasses.dataclass (order=True)
class Event:

	"""
	A single event at an integer tick.
	"""

	tick: int
	message_type: str = dataclasses.field(compare=False)
	channel: int = dataclasses.field(compare=False, default=0)
	note: int = dataclasses.field(compare=False, default=0)
	velocity: int = dataclasses.field(compare=False, default=0)
	program: int = dataclasses.field(compare=False, default=0)
	text: str = dataclasses.field(compare=False, default="")
	bpm: float = dataclasses.field(compare=False, default=scoreroll.constants.DEFAULT_BPM)
	beat_length: float = dataclasses.field(compare=False, default=scoreroll.constants.DEFAULT_BEAT_LENGTH)
	numerator: int = dataclasses.field(compare=False, default=scoreroll.constants.DEFAULT_NUMERATOR)
	denominator: int = dataclasses.field(compare=False, default=scoreroll.constants.DEFAULT_DENOMINATOR)
	accidentals: int = dataclasses.field(compare=False, default=scoreroll.constants.DEFAULT_ACCIDENTALS)

	def __post_init__ (self) -> None:

		if self.message_type not in MESSAGE_TYPES:
			raise ValueError(f"Unknown event type {self.message_type!r}")


class EventGroup:

	"""
	The events of one output track, kept ordered by tick.

	Events on the same tick stay in the order they were added.
	"""

	def __init__ (self, name: str = "") -> None:

		self.name = name
		self.events: typing.List[Event] = []

	def add (self, event: Event) -> None:

		"""Insert an event after any existing events on the same tick."""

		bisect.insort_right(self.events, event, key=lambda e: e.tick)

	def of_type (self, message_type: str) -> typing.List[Event]:

		"""Return the events of one type, in order."""

		return [e for e in self.events if e.message_type == message_type]

	def __len__ (self) -> int:
		return len(self.events)

	def __iter__ (self) -> typing.Iterator[Event]:
		return iter(self.events)


@dataclasses.dataclass
class EventStream:

	"""
	The materialized performance: a global group followed by one group per part.

	``pulses_per_quarter`` is the time base the ticks are expressed in.
	"""

	pulses_per_quarter: int
	global_group: EventGroup = dataclasses.field(default_factory=lambda: EventGroup("global"))
	part_groups: typing.List[EventGroup] = dataclasses.field(default_factory=list)

	@property
	def groups (self) -> typing.List[EventGroup]:

		"""All groups in track order, global first."""

		return [self.global_group] + self.part_groups
