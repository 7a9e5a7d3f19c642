"""Build a :class:`~scoreroll.timeline.Document` from plain data.

The importer that reads notation markup lives outside this package.  Its
output reaches us as nested mappings (typically loaded from JSON or YAML):

	{
		"pulsesPerQuarter": 720,
		"global": {
			"timeSignatureMap": [{"date": 0, "numerator": 3, "denominator": 4}],
			"sequencingMap": [
				{"type": "marker", "date": 0, "message": "start", "id": "m1"},
				{"type": "goto", "date": 2160, "targetDate": 0, "targetMarkerId": "#m1", "activity": "10"}
			]
		},
		"parts": [
			{"name": "Violin", "midi.channel": 0, "score": [{"date": 0, "pitch": 67, "duration": 720, "id": "n1"}]}
		]
	}

Maps may also be nested under a ``"maps"`` key.  Attribute names from the
original markup (``midi.date``, ``midi.pitch``, ``target.date``, ``target.id``,
``xml:id``) are accepted alongside the short names.

Optional data is handled leniently: unparsable numbers fall back to the
defaults in :mod:`scoreroll.constants` and a warning is logged.  Only a
missing time base is fatal.
"""

import json
import logging
import os
import typing

import yaml

import scoreroll.constants
import scoreroll.timeline


logger = logging.getLogger(__name__)


class DocumentError (ValueError):

	"""Raised when data required to build a document is missing."""


# Entry type implied by the map an entry lives in, when it has no "type" field.
MAP_ENTRY_TYPES: typing.Dict[str, str] = {
	scoreroll.timeline.SCORE: "note",
	scoreroll.timeline.KEY_SIGNATURE_MAP: "keySignature",
	scoreroll.timeline.TIME_SIGNATURE_MAP: "timeSignature",
	scoreroll.timeline.MARKER_MAP: "marker",
}

_MISSING = object()


def _field (raw: typing.Mapping[str, typing.Any], *names: str) -> typing.Any:

	"""Return the value of the first field present under any of *names*."""

	for name in names:
		if name in raw:
			return raw[name]

	return _MISSING


def _number (raw: typing.Mapping[str, typing.Any], names: typing.Tuple[str, ...], default: float, context: str) -> float:

	value = _field(raw, *names)

	if value is _MISSING:
		return default

	try:
		return float(value)
	except (TypeError, ValueError):
		logger.warning(f"Unparsable {names[0]} {value!r} in {context}; using {default}")
		return default


def _integer (raw: typing.Mapping[str, typing.Any], names: typing.Tuple[str, ...], default: int, context: str) -> int:

	"""Parse an integer attribute, accepting real-valued input rounded half-up."""

	value = _number(raw, names, float(default), context)
	return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _identifier (raw: typing.Mapping[str, typing.Any]) -> typing.Optional[str]:

	value = _field(raw, "id", "xml:id", "identifier")

	if value is _MISSING or value is None or value == "":
		return None

	return str(value)


def build_entry (raw: typing.Mapping[str, typing.Any], map_name: str) -> typing.Optional[scoreroll.timeline.TimedEntry]:

	"""
	Build one timed entry.

	Returns ``None`` (after logging) for entries that cannot be placed on the
	timeline: no parsable date, or an unknown type.
	"""

	context = f"{map_name} entry"
	entry_type = raw.get("type", MAP_ENTRY_TYPES.get(map_name))

	date_value = _field(raw, "date", "midi.date")

	try:
		date = float(date_value)  # type: ignore[arg-type]
	except (TypeError, ValueError):
		logger.warning(f"Dropping {context} without a valid date: {dict(raw)!r}")
		return None

	identifier = _identifier(raw)

	if entry_type == "note":
		return scoreroll.timeline.Note(
			date = date,
			pitch = _number(raw, ("pitch", "midi.pitch"), 0.0, context),
			duration = _number(raw, ("duration", "midi.duration"), 0.0, context),
			identifier = identifier
		)

	if entry_type == "keySignature":
		return scoreroll.timeline.KeySignature(
			date = date,
			accidentals = _integer(raw, ("accidentals",), scoreroll.constants.DEFAULT_ACCIDENTALS, context),
			identifier = identifier
		)

	if entry_type == "timeSignature":
		return scoreroll.timeline.TimeSignature(
			date = date,
			numerator = _integer(raw, ("numerator",), scoreroll.constants.DEFAULT_NUMERATOR, context),
			denominator = _integer(raw, ("denominator",), scoreroll.constants.DEFAULT_DENOMINATOR, context),
			identifier = identifier
		)

	if entry_type == "marker":
		message = raw.get("message")
		return scoreroll.timeline.Marker(
			date = date,
			message = "" if message is None else str(message),
			identifier = identifier
		)

	if entry_type == "goto":

		target_id = _field(raw, "targetMarkerId", "target.id")
		target_id = "" if target_id is _MISSING or target_id is None else str(target_id)

		activity = raw.get("activity")

		return scoreroll.timeline.Goto(
			date = date,
			target_date = _number(raw, ("targetDate", "target.date"), 0.0, context),
			target_marker_id = target_id[1:] if target_id.startswith("#") else target_id,
			activity = scoreroll.constants.DEFAULT_ACTIVITY if activity is None else str(activity),
			identifier = identifier
		)

	if entry_type == "rest":
		return None

	logger.warning(f"Dropping {context} of unknown type {entry_type!r}")
	return None


def build_map (entries: typing.Iterable[typing.Mapping[str, typing.Any]], map_name: str) -> scoreroll.timeline.TimedMap:

	"""Build a map, keeping entry order as given."""

	result: scoreroll.timeline.TimedMap = []

	for raw in entries:

		entry = build_entry(raw, map_name)

		if entry is None:
			continue

		if result and entry.date < result[-1].date:
			logger.warning(f"{map_name} is not ordered by date at {entry.date}")

		result.append(entry)

	return result


def _raw_maps (raw: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	if "maps" in raw:
		return dict(raw["maps"] or {})

	return {key: value for key, value in raw.items() if key == scoreroll.timeline.SCORE or key.endswith("Map")}


def build_scope (raw: typing.Optional[typing.Mapping[str, typing.Any]], is_part: bool = False) -> scoreroll.timeline.Scope:

	"""Build the global scope or a part scope."""

	raw = raw or {}
	scope = scoreroll.timeline.Scope()

	for map_name, entries in _raw_maps(raw).items():
		scope.maps[map_name] = build_map(entries or [], map_name)

	if not is_part:
		return scope

	name = raw.get("name")
	scope.name = None if name is None else str(name)

	channel = _field(raw, "midi.channel", "channel")

	if channel is not _MISSING and channel is not None:
		try:
			scope.channel = int(channel)
		except (TypeError, ValueError):
			logger.warning(f"Part {scope.name or 'unnamed'} has an unparsable channel {channel!r}; it will not be materialized")

	return scope


def build_document (data: typing.Optional[typing.Mapping[str, typing.Any]]) -> typing.Optional[scoreroll.timeline.Document]:

	"""
	Build a document from nested mappings.

	Returns ``None`` for absent or empty input.

	Raises:
		DocumentError: If the time base (pulses per quarter) is missing or not
			a positive integer.
	"""

	if not data:
		return None

	ppq_value = _field(data, "pulsesPerQuarter", "ppq")

	if ppq_value is _MISSING:
		ppq_value = _field(data.get("header") or {}, "pulsesPerQuarter", "ppq")

	if ppq_value is _MISSING:
		raise DocumentError("Document has no pulsesPerQuarter")

	try:
		ppq = int(ppq_value)
	except (TypeError, ValueError):
		raise DocumentError(f"Document has an invalid pulsesPerQuarter: {ppq_value!r}")

	if ppq <= 0:
		raise DocumentError(f"pulsesPerQuarter must be positive, got {ppq}")

	return scoreroll.timeline.Document(
		pulses_per_quarter = ppq,
		global_scope = build_scope(data.get("global")),
		parts = [build_scope(part, is_part=True) for part in data.get("parts") or []]
	)


def load_document (path: str) -> typing.Optional[scoreroll.timeline.Document]:

	"""Load a document from a ``.json``, ``.yaml`` or ``.yml`` file."""

	extension = os.path.splitext(path)[1].lower()

	with open(path, "r", encoding="utf-8") as f:
		if extension in (".yaml", ".yml"):
			data = yaml.safe_load(f)
		else:
			data = json.load(f)

	logger.info(f"Loaded document data from {path}")

	return build_document(data)
