import copy
import typing

import pytest

import scoreroll.sequencing
import scoreroll.timeline


def _notes (*dates: float) -> scoreroll.timeline.TimedMap:

	"""Build a score with one note per date, identified n0, n1, ..."""

	return [
		scoreroll.timeline.Note(date=date, pitch=60 + i, duration=5, identifier=f"n{i}")
		for i, date in enumerate(dates)
	]


def _goto (date: float, target_date: float, activity: str = "1", target_marker_id: str = "") -> scoreroll.timeline.Goto:
	return scoreroll.timeline.Goto(date=date, target_date=target_date, target_marker_id=target_marker_id, activity=activity)


def _dates (entries: scoreroll.timeline.TimedMap) -> typing.List[float]:
	return [e.date for e in entries]


def _ids (entries: scoreroll.timeline.TimedMap) -> typing.List[typing.Optional[str]]:
	return [e.identifier for e in entries]


def _scope (score: scoreroll.timeline.TimedMap, directives: typing.Optional[scoreroll.timeline.TimedMap] = None) -> scoreroll.timeline.Scope:

	maps: typing.Dict[str, scoreroll.timeline.TimedMap] = {scoreroll.timeline.SCORE: score}

	if directives is not None:
		maps[scoreroll.timeline.SEQUENCING_MAP] = directives

	return scoreroll.timeline.Scope(maps=maps, name="Violin", channel=0)


# ─── Single repeats ──────────────────────────────────────────────────


def test_simple_repeat_plays_section_twice () -> None:

	"""A Goto at 10 back to 0 repeats [0, 10) and shifts everything after by 10."""

	result = scoreroll.sequencing.apply_directives([_goto(10, 0)], _notes(0, 5, 10, 15))

	assert result is not None
	assert _dates(result) == [0, 5, 10, 15, 20, 25]
	assert _ids(result) == ["n0", "n1", "n0_repetition1", "n1_repetition1", "n2", "n3"]


def test_repeat_keeps_entry_payload () -> None:

	"""Copies keep pitch and duration; only date and identifier change."""

	result = scoreroll.sequencing.apply_directives([_goto(10, 0)], _notes(0, 5, 10, 15))

	assert result is not None
	assert [n.pitch for n in result] == [60, 61, 60, 61, 62, 63]
	assert all(n.duration == 5 for n in result)


def test_activity_pattern_skips_second_visit () -> None:

	"""With activity "10" the jump fires once; the second visit passes through."""

	plan = scoreroll.sequencing.DirectivePlan([_goto(10, 0, "10")])
	map_pass = scoreroll.sequencing._MapPass(plan, _notes(0, 5, 10, 15))
	result = map_pass.run()

	assert _dates(result) == [0, 5, 10, 15, 20, 25]

	# One visit when it fired, one when it was passed inactive.
	assert map_pass.groups[0][0].visits == 2


def test_activity_pattern_fires_twice () -> None:

	"""With activity "11" the section is played three times."""

	result = scoreroll.sequencing.apply_directives([_goto(10, 0, "11")], _notes(0, 5, 10, 15))

	assert result is not None
	assert _dates(result) == [0, 5, 10, 15, 20, 25, 30, 35]
	assert _ids(result) == [
		"n0", "n1",
		"n0_repetition1", "n1_repetition1",
		"n0_repetition2", "n1_repetition2",
		"n2", "n3",
	]


def test_inactive_first_goto_is_not_taken () -> None:

	"""A Goto whose pattern starts with '0' does not fire on the first pass."""

	source = _notes(0, 5, 10, 15)
	result = scoreroll.sequencing.apply_directives([_goto(10, 0, "0")], source)

	assert result is not None
	assert _dates(result) == _dates(source)
	assert _ids(result) == _ids(source)


def test_entries_at_goto_date_follow_the_jump () -> None:

	"""An entry exactly on the Goto's date belongs after the jump, not before it."""

	result = scoreroll.sequencing.apply_directives([_goto(10, 0)], _notes(0, 10))

	assert result is not None
	assert _dates(result) == [0, 10, 20]
	assert _ids(result) == ["n0", "n0_repetition1", "n1"]


# ─── Endings and directive order ─────────────────────────────────────


def _volta_directives () -> scoreroll.timeline.TimedMap:

	"""Repeat [0, 20) with a first ending [10, 20) and a second ending from 20."""

	return [
		scoreroll.timeline.Marker(date=0, message="start", identifier="m0"),
		_goto(10, 20, "01"),
		_goto(20, 0, "10", target_marker_id="m0"),
	]


def test_first_and_second_endings () -> None:

	"""The second pass skips the first ending and continues with the second."""

	result = scoreroll.sequencing.apply_directives(_volta_directives(), _notes(0, 5, 10, 15, 20, 25))

	assert result is not None
	assert _dates(result) == [0, 5, 10, 15, 20, 25, 30, 35]
	assert _ids(result) == ["n0", "n1", "n2", "n3", "n0_repetition1", "n1_repetition1", "n4", "n5"]


def test_gotos_before_target_marker_are_not_eligible () -> None:

	"""After jumping to a marker, Gotos listed before that marker are ignored."""

	directives = [
		_goto(5, 8, "01"),
		scoreroll.timeline.Marker(date=0, message="start", identifier="m"),
		_goto(10, 0, "1", target_marker_id="m"),
	]

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 5, 10, 15))

	assert result is not None
	assert _dates(result) == [0, 5, 10, 15, 20, 25]


def test_gotos_are_eligible_without_target_marker () -> None:

	"""Without a target marker, the earlier Goto fires on its second visit."""

	directives = [
		_goto(5, 8, "01"),
		scoreroll.timeline.Marker(date=0, message="start", identifier="m"),
		_goto(10, 0, "1"),
	]

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 5, 10, 15))

	assert result is not None
	assert _dates(result) == [0, 5, 10, 17, 22]


def test_unknown_target_marker_ends_expansion () -> None:

	"""A jump to an unknown marker is taken, but no further jumps follow."""

	result = scoreroll.sequencing.apply_directives(
		[_goto(10, 0, "11", target_marker_id="missing")],
		_notes(0, 5, 10, 15)
	)

	assert result is not None
	assert _dates(result) == [0, 5, 10, 15, 20, 25]


def test_jump_target_after_last_entry () -> None:

	"""Jumping past the end of the map leaves nothing more to copy."""

	result = scoreroll.sequencing.apply_directives([_goto(5, 100)], _notes(0, 5, 10))

	assert result is not None
	assert _dates(result) == [0]


# ─── Fine ────────────────────────────────────────────────────────────


def test_da_capo_al_fine () -> None:

	"""After jumping back to the start, copying stops at the fine marker."""

	directives = [
		scoreroll.timeline.Marker(date=100, message="fine"),
		_goto(200, 0),
	]

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 50, 100, 150))

	assert result is not None
	assert _dates(result) == [0, 50, 100, 150, 200, 250]
	assert _ids(result)[-2:] == ["n0_repetition1", "n1_repetition1"]


def test_fine_without_active_jump () -> None:

	"""If no Goto fires, the map is still cut at the fine marker."""

	directives = [
		_goto(50, 0, "0"),
		scoreroll.timeline.Marker(date=100, message="fine"),
	]

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 50, 100, 150))

	assert result is not None
	assert _dates(result) == [0, 50]


def test_fine_before_resume_point_is_ignored () -> None:

	"""A fine marker behind the point where copying resumes does not cut the map."""

	directives = [
		scoreroll.timeline.Marker(date=10, message="fine"),
		_goto(20, 30),
	]

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 10, 30, 40))

	assert result is not None
	assert _dates(result) == [0, 10, 20, 30]


# ─── Scopes ──────────────────────────────────────────────────────────


def test_resolve_scope_without_gotos_is_a_no_op () -> None:

	"""Directives with markers only leave every map untouched."""

	score = _notes(0, 5, 10)
	snapshot = copy.deepcopy(score)
	scope = _scope(score, [scoreroll.timeline.Marker(date=0, message="start", identifier="m0")])

	assert scoreroll.sequencing.resolve_scope(scope) is False
	assert scope.maps[scoreroll.timeline.SCORE] is score
	assert score == snapshot
	assert scoreroll.timeline.SEQUENCING_MAP not in scope.maps


def test_resolve_scope_without_directives_leaves_scope () -> None:

	score = _notes(0, 5)
	scope = _scope(score)

	assert scoreroll.sequencing.resolve_scope(scope) is False
	assert scope.maps[scoreroll.timeline.SCORE] is score


def test_resolve_scope_expands_every_map () -> None:

	"""Each map gets its own pass with fresh visit counters."""

	scope = _scope(_notes(0, 5, 10, 15), [_goto(10, 0, "10")])
	scope.maps[scoreroll.timeline.MARKER_MAP] = [
		scoreroll.timeline.Marker(date=0, message="A", identifier="a"),
		scoreroll.timeline.Marker(date=10, message="B", identifier="b"),
	]

	assert scoreroll.sequencing.resolve_scope(scope) is True

	assert _dates(scope.score) == [0, 5, 10, 15, 20, 25]
	assert _dates(scope.marker_map) == [0, 10, 20]
	assert _ids(scope.marker_map) == ["a", "a_repetition1", "b"]
	assert scoreroll.timeline.SEQUENCING_MAP not in scope.maps


def test_resolve_scope_keeps_misc_map () -> None:

	misc = [scoreroll.timeline.Marker(date=0, message="misc")]
	scope = _scope(_notes(0, 5, 10), [_goto(10, 0)])
	scope.maps[scoreroll.timeline.MISC_MAP] = misc

	scoreroll.sequencing.resolve_scope(scope)

	assert scope.maps[scoreroll.timeline.MISC_MAP] is misc


def test_resolve_scope_is_idempotent () -> None:

	"""Resolving an already resolved scope changes nothing."""

	scope = _scope(_notes(0, 5, 10, 15), [_goto(10, 0)])

	scoreroll.sequencing.resolve_scope(scope)
	first = list(scope.score)

	assert scoreroll.sequencing.resolve_scope(scope) is False
	assert scope.score == first


def test_resolve_does_not_modify_directives () -> None:

	"""Visit counters are kept outside the directive entries."""

	directives = _volta_directives()
	snapshot = copy.deepcopy(directives)

	scoreroll.sequencing.apply_directives(directives, _notes(0, 5, 10, 15, 20, 25))
	scoreroll.sequencing.apply_directives(directives, _notes(0, 5, 10, 15, 20, 25))

	assert directives == snapshot


def test_own_directives_take_precedence_over_shared () -> None:

	shared = [_goto(10, 0, "11")]
	scope = _scope(_notes(0, 5, 10, 15), [_goto(10, 0, "1")])

	scoreroll.sequencing.resolve_scope(scope, shared)

	assert len(scope.score) == 6


def test_shared_directives_apply_when_scope_has_none () -> None:

	shared = [_goto(10, 0, "11")]
	scope = _scope(_notes(0, 5, 10, 15))

	scoreroll.sequencing.resolve_scope(scope, shared)

	assert len(scope.score) == 8


# ─── Documents ───────────────────────────────────────────────────────


def test_resolve_document_uses_global_directives () -> None:

	"""Parts without their own directives follow the global ones; global maps are expanded too."""

	global_scope = scoreroll.timeline.Scope(maps={
		scoreroll.timeline.SEQUENCING_MAP: [_goto(10, 0)],
		scoreroll.timeline.TIME_SIGNATURE_MAP: [scoreroll.timeline.TimeSignature(date=0, numerator=3, denominator=4)],
	})
	plain = _scope(_notes(0, 5, 10))
	own = _scope(_notes(0, 5, 10), [_goto(5, 0)])

	document = scoreroll.timeline.Document(pulses_per_quarter=480, global_scope=global_scope, parts=[plain, own])

	assert scoreroll.sequencing.resolve_document(document) is document

	assert _dates(plain.score) == [0, 5, 10, 15, 20]
	assert _dates(own.score) == [0, 5, 10, 15]
	assert _dates(global_scope.time_signature_map) == [0, 10]
	assert scoreroll.timeline.SEQUENCING_MAP not in global_scope.maps
	assert scoreroll.timeline.SEQUENCING_MAP not in own.maps


@pytest.mark.parametrize("document", [None, scoreroll.timeline.Document(global_scope=None)])
def test_resolve_document_without_data (document: typing.Optional[scoreroll.timeline.Document]) -> None:

	"""Absent or empty documents give the 'no data' result."""

	assert scoreroll.sequencing.resolve_document(document) is None


# ─── Output invariants ───────────────────────────────────────────────


@pytest.mark.parametrize("directives", [
	[_goto(10, 0)],
	[_goto(10, 0, "11")],
	_volta_directives(),
	[scoreroll.timeline.Marker(date=20, message="fine"), _goto(25, 0)],
])
def test_output_is_ordered_and_uniquely_identified (directives: scoreroll.timeline.TimedMap) -> None:

	"""Resolved dates never decrease, stay non-negative, and identifiers stay unique."""

	result = scoreroll.sequencing.apply_directives(directives, _notes(0, 5, 10, 15, 20, 25))

	assert result is not None

	dates = _dates(result)
	assert dates == sorted(dates)
	assert all(d >= 0 for d in dates)

	ids = _ids(result)
	assert len(ids) == len(set(ids))
