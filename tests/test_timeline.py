import scoreroll.timeline


def _map () -> scoreroll.timeline.TimedMap:

	return [
		scoreroll.timeline.Marker(date=0, message="A"),
		scoreroll.timeline.Note(date=0, pitch=60, duration=10),
		scoreroll.timeline.Note(date=10, pitch=62, duration=10),
		scoreroll.timeline.Marker(date=20, message="B"),
	]


def test_index_at_after () -> None:

	entries = _map()

	assert scoreroll.timeline.index_at_after(entries, 0) == 0
	assert scoreroll.timeline.index_at_after(entries, 5) == 2
	assert scoreroll.timeline.index_at_after(entries, 10) == 2
	assert scoreroll.timeline.index_at_after(entries, 25) == 4


def test_entry_at_after () -> None:

	entries = _map()

	assert scoreroll.timeline.entry_at_after(entries, 0) is entries[0]
	assert scoreroll.timeline.entry_at_after(entries, 0, scoreroll.timeline.Note) is entries[1]
	assert scoreroll.timeline.entry_at_after(entries, 1, scoreroll.timeline.Marker) is entries[3]
	assert scoreroll.timeline.entry_at_after(entries, 21) is None


def test_entry_before_at () -> None:

	entries = _map()

	assert scoreroll.timeline.entry_before_at(entries, 10) is entries[2]
	assert scoreroll.timeline.entry_before_at(entries, 15, scoreroll.timeline.Marker) is entries[0]
	assert scoreroll.timeline.entry_before_at(entries, -1) is None


def test_goto_activity () -> None:

	goto = scoreroll.timeline.Goto(date=10, target_date=0, activity="101")

	assert [goto.is_active(visit) for visit in range(5)] == [True, False, True, False, False]


def test_marker_fine () -> None:

	assert scoreroll.timeline.Marker(date=0, message="fine").is_fine
	assert not scoreroll.timeline.Marker(date=0, message="Fine?").is_fine


def test_missing_map_reads_as_empty () -> None:

	scope = scoreroll.timeline.Scope()

	assert scope.score == []
	assert scope.sequencing_map == []
	assert scoreroll.timeline.SCORE not in scope.maps


def test_remove_empty_maps () -> None:

	part = scoreroll.timeline.Scope(maps={"score": [], "markerMap": [scoreroll.timeline.Marker(date=0)]})
	document = scoreroll.timeline.Document(
		global_scope = scoreroll.timeline.Scope(maps={"sequencingMap": []}),
		parts = [part]
	)

	assert document.remove_empty_maps() == 2
	assert list(part.maps) == ["markerMap"]
	assert document.global_scope is not None and document.global_scope.maps == {}


def test_empty_document () -> None:

	assert scoreroll.timeline.Document(global_scope=None).is_empty
	assert not scoreroll.timeline.Document().is_empty
	assert scoreroll.timeline.Document(global_scope=None).scopes() == []
