"""The timeline model shared by the resolver and the materializer.

A :class:`Document` holds one global :class:`Scope` and an ordered list of
part scopes.  Each scope owns a set of named maps, and every map is a list of
timed entries ordered by non-decreasing ``date`` (ticks).

Timed entries are plain dataclasses.  :data:`TimedEntry` is the union of all
entry kinds; code that needs kind-specific behaviour dispatches with
``isinstance`` against the concrete classes, while code that only needs the
position and identifier (the sequencing resolver) works on any member.
"""

import bisect
import dataclasses
import typing

import scoreroll.constants


# ─── Map names ───────────────────────────────────────────────────────

SCORE = "score"
KEY_SIGNATURE_MAP = "keySignatureMap"
TIME_SIGNATURE_MAP = "timeSignatureMap"
MARKER_MAP = "markerMap"
SEQUENCING_MAP = "sequencingMap"
MISC_MAP = "miscMap"

# Maps that are never expanded by the sequencing resolver.
UNEXPANDED_MAPS = frozenset({SEQUENCING_MAP, MISC_MAP})


# ─── Timed entries ───────────────────────────────────────────────────

@dataclasses.dataclass
class Note:

	"""
	A note in a part's score.  Pitch and duration stay real-valued until materialization.
	"""

	date: float
	pitch: float
	duration: float
	identifier: typing.Optional[str] = None


@dataclasses.dataclass
class KeySignature:

	"""A key signature given as a signed count of accidentals (sharps positive, flats negative)."""

	date: float
	accidentals: int = scoreroll.constants.DEFAULT_ACCIDENTALS
	identifier: typing.Optional[str] = None


@dataclasses.dataclass
class TimeSignature:

	date: float
	numerator: int = scoreroll.constants.DEFAULT_NUMERATOR
	denominator: int = scoreroll.constants.DEFAULT_DENOMINATOR
	identifier: typing.Optional[str] = None


@dataclasses.dataclass
class Marker:

	"""
	A text marker.  In a sequencing map it doubles as a jump target, and the
	message ``"fine"`` marks where repeat expansion ends.
	"""

	date: float
	message: str = ""
	identifier: typing.Optional[str] = None

	@property
	def is_fine (self) -> bool:

		"""True when this marker ends repeat expansion."""

		return self.message == scoreroll.constants.FINE_MESSAGE


@dataclasses.dataclass
class Goto:

	"""
	A jump directive.

	Attributes:
		date: Where the jump is taken.
		target_date: Where playback resumes.
		target_marker_id: Identifier of the marker at the target, or ``""`` for
			no marker constraint.
		activity: One character per visit; ``'1'`` means the jump fires on that
			visit.  Visits beyond the end of the string are inactive.
	"""

	date: float
	target_date: float
	target_marker_id: str = ""
	activity: str = scoreroll.constants.DEFAULT_ACTIVITY
	identifier: typing.Optional[str] = None

	def is_active (self, visit: int) -> bool:

		"""Return whether the jump fires on the given (0-based) visit."""

		return visit < len(self.activity) and self.activity[visit] == "1"


TimedEntry = typing.Union[Note, KeySignature, TimeSignature, Marker, Goto]
TimedMap = typing.List[TimedEntry]


# ─── Scopes and documents ────────────────────────────────────────────

@dataclasses.dataclass
class Scope:

	"""
	The global context or one part.

	``name`` and ``channel`` are only meaningful for parts.  ``maps`` holds every
	named map of the scope; a missing map and an empty map are equivalent.
	"""

	maps: typing.Dict[str, TimedMap] = dataclasses.field(default_factory=dict)
	name: typing.Optional[str] = None
	channel: typing.Optional[int] = None

	def get_map (self, name: str) -> TimedMap:

		"""Return the named map, or an empty list when the scope has none."""

		return self.maps.get(name, [])

	@property
	def score (self) -> TimedMap:
		return self.get_map(SCORE)

	@property
	def key_signature_map (self) -> TimedMap:
		return self.get_map(KEY_SIGNATURE_MAP)

	@property
	def time_signature_map (self) -> TimedMap:
		return self.get_map(TIME_SIGNATURE_MAP)

	@property
	def marker_map (self) -> TimedMap:
		return self.get_map(MARKER_MAP)

	@property
	def sequencing_map (self) -> TimedMap:
		return self.get_map(SEQUENCING_MAP)


@dataclasses.dataclass
class Document:

	"""
	A complete timeline: a global scope and the parts in track order.

	The time base (pulses per quarter note) is document-wide.  A document
	without a global scope is empty and yields no output.
	"""

	pulses_per_quarter: int = scoreroll.constants.DEFAULT_PULSES_PER_QUARTER
	global_scope: typing.Optional[Scope] = dataclasses.field(default_factory=Scope)
	parts: typing.List[Scope] = dataclasses.field(default_factory=list)

	@property
	def is_empty (self) -> bool:

		"""True when there is no global scope to read the header from."""

		return self.global_scope is None

	def scopes (self) -> typing.List[Scope]:

		"""Return the global scope (if any) followed by the parts."""

		result = [] if self.global_scope is None else [self.global_scope]
		result.extend(self.parts)
		return result

	def remove_empty_maps (self) -> int:

		"""
		Delete every map without entries from every scope.

		Returns the number of maps removed.
		"""

		removed = 0

		for scope in self.scopes():
			for name in [n for n, entries in scope.maps.items() if not entries]:
				del scope.maps[name]
				removed += 1

		return removed


# ─── Date lookups ────────────────────────────────────────────────────

def index_at_after (entries: TimedMap, date: float) -> int:

	"""
	Return the index of the first entry whose date is at or after *date*.

	Returns ``len(entries)`` when every entry is earlier.  Relies on the map
	being ordered by date.
	"""

	return bisect.bisect_left(entries, date, key=lambda entry: entry.date)


def entry_at_after (entries: TimedMap, date: float, kind: typing.Optional[type] = None) -> typing.Optional[TimedEntry]:

	"""Return the first entry (optionally of a given class) at or after *date*."""

	for entry in entries[index_at_after(entries, date):]:
		if kind is None or isinstance(entry, kind):
			return entry

	return None


def entry_before_at (entries: TimedMap, date: float, kind: typing.Optional[type] = None) -> typing.Optional[TimedEntry]:

	"""Return the last entry (optionally of a given class) at or before *date*."""

	end = bisect.bisect_right(entries, date, key=lambda entry: entry.date)

	for entry in reversed(entries[:end]):
		if kind is None or isinstance(entry, kind):
			return entry

	return None
