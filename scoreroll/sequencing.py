"""Repeat and jump expansion.

A scope's sequencing map holds :class:`~scoreroll.timeline.Marker` and
:class:`~scoreroll.timeline.Goto` directives.  Resolving a scope unrolls every
other map of that scope into a single linear timeline in playback order:
entries inside a repeated region are copied once per pass with their dates
shifted by the accumulated jump offset, and identifiers of repeated copies
get a ``_repetition<N>`` suffix so they stay unique.

How a pass works:

1. The first Goto (in date order) that is active on its first visit is
   selected.  Every Goto skipped on the way counts as visited.
2. Entries before the Goto's date are copied.  Taking the jump adds
   ``goto.date - goto.target_date`` to the offset and restarts the copy at
   the first entry at or after the target date.
3. The next active Goto is searched from the target date onwards, but only
   among Gotos listed after the target marker in the sequencing map.
   Inactive Gotos passed during the search count as visited.
4. When no active Goto remains, the rest of the map is copied up to the
   ``fine`` marker (if one lies ahead) or to the end.

Every Goto can fire at most ``len(activity)`` times, because each visit moves
its counter forward and visits past the end of the pattern are inactive, so a
pass always terminates.

Visit counters live in per-pass :class:`GotoState` records; the directive
entries themselves are never modified, so resolving is repeatable on fresh
documents.
"""

import dataclasses
import logging
import typing

import scoreroll.timeline


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class GotoState:

	"""
	Per-pass bookkeeping for one Goto directive.

	``position`` is the directive's index in the sequencing map and decides
	eligibility relative to the target marker; ``visits`` counts how often the
	Goto has been reached (fired or passed inactive).
	"""

	goto: scoreroll.timeline.Goto
	position: int
	visits: int = 0

	@property
	def active (self) -> bool:

		"""Whether the Goto fires on its current visit."""

		return self.goto.is_active(self.visits)


class DirectivePlan:

	"""
	Lookup tables built once from a sequencing map.

	Markers are indexed by identifier, Gotos are grouped by date (in ascending
	date order, keeping sequencing-map order within a date).  The plan itself
	is immutable; :meth:`new_states` hands out fresh visit counters for each
	map pass.
	"""

	def __init__ (self, directives: scoreroll.timeline.TimedMap) -> None:

		self.directives = list(directives)
		self.markers: typing.Dict[str, typing.Tuple[int, scoreroll.timeline.Marker]] = {}
		self._gotos: typing.List[typing.Tuple[int, scoreroll.timeline.Goto]] = []
		self.fine_markers: typing.List[scoreroll.timeline.Marker] = []

		for position, entry in enumerate(self.directives):

			if isinstance(entry, scoreroll.timeline.Marker):

				if entry.identifier:
					if entry.identifier in self.markers:
						logger.warning(f"Duplicate marker identifier '{entry.identifier}' in sequencing map; using the later one")
					self.markers[entry.identifier] = (position, entry)

				if entry.is_fine:
					self.fine_markers.append(entry)

			elif isinstance(entry, scoreroll.timeline.Goto):
				self._gotos.append((position, entry))

	@property
	def has_gotos (self) -> bool:
		return bool(self._gotos)

	def new_states (self) -> typing.List[typing.List[GotoState]]:

		"""
		Return fresh Goto states grouped by date, groups in ascending date order.
		"""

		groups: typing.Dict[float, typing.List[GotoState]] = {}

		for position, goto in self._gotos:
			groups.setdefault(goto.date, []).append(GotoState(goto=goto, position=position))

		return [groups[date] for date in sorted(groups)]

	def fine_date (self, from_date: float) -> typing.Optional[float]:

		"""Return the date of the first fine marker at or after *from_date*, if any."""

		for marker in self.fine_markers:
			if marker.date >= from_date:
				return marker.date

		return None


class _MapPass:

	"""
	Expands one map against a directive plan.

	Holds the cumulative date offset, the output list and the number of times
	each source entry has been copied so far.
	"""

	def __init__ (self, plan: DirectivePlan, source: scoreroll.timeline.TimedMap) -> None:

		self.plan = plan
		self.source = source
		self.groups = plan.new_states()
		self.output: scoreroll.timeline.TimedMap = []
		self.date_offset = 0.0
		self.copies: typing.Dict[int, int] = {}

	def _copy (self, index: int) -> None:

		"""Append a shifted copy of a source entry, renaming repeated identifiers."""

		entry = self.source[index]
		repetition = self.copies.get(index, 0)
		self.copies[index] = repetition + 1

		changes: typing.Dict[str, typing.Any] = {"date": entry.date + self.date_offset}

		if repetition > 0 and entry.identifier:
			changes["identifier"] = f"{entry.identifier}_repetition{repetition}"

		self.output.append(dataclasses.replace(entry, **changes))

	def _first_active (self) -> typing.Optional[GotoState]:

		"""Find the first Goto active on its first visit, counting the ones passed."""

		for group in self.groups:
			for state in group:
				if state.active:
					return state
				state.visits += 1

		return None

	def _next_active (self, after: GotoState) -> typing.Optional[GotoState]:

		"""
		Find the next active Goto after taking the jump of *after*.

		The search starts at the jump's target date and skips Gotos that precede
		the target marker in the sequencing map.
		"""

		goto = after.goto
		marker_position = -1

		if goto.target_marker_id:
			target = self.plan.markers.get(goto.target_marker_id)
			if target is None:
				logger.warning(f"Jump target marker '{goto.target_marker_id}' not found; ending repeat expansion")
				return None
			marker_position = target[0]

		for group in self.groups:

			if group[0].goto.date < goto.target_date:
				continue

			for state in group:

				if state.position < marker_position:
					continue

				if state.active:
					return state

				state.visits += 1

		return None

	def run (self) -> scoreroll.timeline.TimedMap:

		"""Expand the source map and return the new entry list."""

		index = 0
		resume_date = 0.0
		current = self._first_active()

		while current is not None:

			goto = current.goto

			while index < len(self.source) and self.source[index].date < goto.date:
				self._copy(index)
				index += 1

			self.date_offset += goto.date - goto.target_date
			index = scoreroll.timeline.index_at_after(self.source, goto.target_date)
			resume_date = goto.target_date
			current.visits += 1

			logger.debug(f"Jump at {goto.date} to {goto.target_date}, offset now {self.date_offset}")

			current = self._next_active(current)

		end_date = self.plan.fine_date(resume_date)

		while index < len(self.source):
			if end_date is not None and self.source[index].date >= end_date:
				break
			self._copy(index)
			index += 1

		return self.output


def apply_directives (directives: scoreroll.timeline.TimedMap, entries: scoreroll.timeline.TimedMap) -> typing.Optional[scoreroll.timeline.TimedMap]:

	"""
	Expand one map according to a sequencing map.

	Returns the expanded entry list, or ``None`` when the directives contain no
	Goto (nothing to expand; keep the map as it is).
	"""

	plan = DirectivePlan(directives)

	if not plan.has_gotos:
		return None

	return _MapPass(plan, entries).run()


def resolve_scope (scope: scoreroll.timeline.Scope, shared_directives: typing.Optional[scoreroll.timeline.TimedMap] = None) -> bool:

	"""
	Unroll every map of a scope in place.

	The scope's own non-empty sequencing map takes precedence; otherwise the
	shared (global) directives are used.  Without any directives the scope is
	left untouched.  When directives were found, the scope's own sequencing map
	is removed afterwards since it no longer applies.

	Returns True when at least one map was expanded.
	"""

	own = scope.sequencing_map
	directives = own if own else (shared_directives or [])

	if not directives:
		return False

	plan = DirectivePlan(directives)
	expanded = False

	if plan.has_gotos:

		for name, entries in list(scope.maps.items()):

			if name in scoreroll.timeline.UNEXPANDED_MAPS or not entries:
				continue

			scope.maps[name] = _MapPass(plan, entries).run()
			expanded = True

			logger.debug(f"Expanded {name}: {len(entries)} -> {len(scope.maps[name])} entries")

	scope.maps.pop(scoreroll.timeline.SEQUENCING_MAP, None)

	return expanded


def resolve_document (document: typing.Optional[scoreroll.timeline.Document]) -> typing.Optional[scoreroll.timeline.Document]:

	"""
	Unroll repeats and jumps in every scope of a document, in place.

	Parts use their own sequencing map if they have a non-empty one, and the
	global sequencing map otherwise.  The global scope uses its own.

	Returns the document, or ``None`` if there was no document data.
	"""

	if document is None or document.global_scope is None:
		return None

	shared = list(document.global_scope.sequencing_map)

	for index, part in enumerate(document.parts):
		if resolve_scope(part, shared):
			logger.info(f"Resolved repeats in part {index} ({part.name or 'unnamed'})")

	if resolve_scope(document.global_scope):
		logger.info("Resolved repeats in global maps")

	return document
