"""End-to-end conversion: resolve repeats, materialize events, write MIDI.

Settings are collected in :class:`ConversionConfig`, which can be loaded from
a YAML file:

	# scoreroll.yaml
	conversion:
	  bpm: 96
	  generate_program_changes: true
	  distance_method: jaro_winkler
	  instrument_dictionary: my_instruments.dict
	  remove_empty_maps: true
"""

import dataclasses
import logging
import os
import typing

import yaml

import scoreroll.constants
import scoreroll.document_builder
import scoreroll.events
import scoreroll.instruments
import scoreroll.materializer
import scoreroll.midi_file
import scoreroll.sequencing
import scoreroll.string_distance
import scoreroll.timeline


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ConversionConfig:

	"""
	Options for :func:`convert`.

	Attributes:
		bpm: Tempo of the seed tempo event.
		generate_program_changes: Emit a program change per part, chosen from
			the part name.
		distance_method: String distance used for approximate instrument
			name matching (see :mod:`scoreroll.string_distance`).
		instrument_dictionary: Path to an instrument dictionary file.  The
			bundled dictionary is used when ``None``.
		resolve_sequencing: Unroll repeats and jumps before materializing.
		remove_empty_maps: Drop maps without entries after resolving.
	"""

	bpm: float = scoreroll.constants.DEFAULT_BPM
	generate_program_changes: bool = True
	distance_method: str = scoreroll.string_distance.DEFAULT_METHOD
	instrument_dictionary: typing.Optional[str] = None
	resolve_sequencing: bool = True
	remove_empty_maps: bool = False

	def __post_init__ (self) -> None:

		if self.bpm <= 0:
			raise ValueError("BPM must be positive")

		# Fail early on unknown names rather than in the middle of a conversion.
		scoreroll.string_distance.get_distance(self.distance_method)

	def instruments (self) -> scoreroll.instruments.InstrumentDictionary:

		"""Build the instrument dictionary these settings describe."""

		if self.instrument_dictionary is None:
			return scoreroll.instruments.InstrumentDictionary.default(self.distance_method)

		return scoreroll.instruments.InstrumentDictionary.from_file(self.instrument_dictionary, self.distance_method)


def load_config (config_path: str = "scoreroll.yaml") -> ConversionConfig:

	"""
	Load conversion settings from the ``conversion`` section of a YAML file.

	A missing file gives the default settings.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return ConversionConfig()

	with open(config_path, "r") as f:
		data = yaml.safe_load(f) or {}

	section = data.get("conversion", {}) or {}
	known = {field.name for field in dataclasses.fields(ConversionConfig)}

	for key in sorted(set(section) - known):
		logger.warning(f"Ignoring unknown setting '{key}' in {config_path}")

	return ConversionConfig(**{key: value for key, value in section.items() if key in known})


def convert (
	document: typing.Optional[scoreroll.timeline.Document],
	config: typing.Optional[ConversionConfig] = None,
	instruments: typing.Optional[scoreroll.instruments.InstrumentDictionary] = None
) -> typing.Optional[scoreroll.events.EventStream]:

	"""
	Resolve a document in place and materialize its event stream.

	Returns ``None`` when there is no document data.
	"""

	config = config or ConversionConfig()

	if document is None or document.is_empty:
		logger.info("Nothing to convert: document is empty")
		return None

	if config.resolve_sequencing:
		scoreroll.sequencing.resolve_document(document)

	if config.remove_empty_maps:
		document.remove_empty_maps()

	if config.generate_program_changes and instruments is None:
		instruments = config.instruments()

	return scoreroll.materializer.materialize(
		document,
		bpm = config.bpm,
		generate_program_changes = config.generate_program_changes,
		instruments = instruments
	)


def convert_file (input_path: str, output_path: str, config: typing.Optional[ConversionConfig] = None) -> typing.Optional[scoreroll.events.EventStream]:

	"""
	Convert a JSON or YAML document file to a MIDI file.

	Nothing is written when the input holds no document data.
	"""

	document = scoreroll.document_builder.load_document(input_path)
	stream = convert(document, config)

	if stream is None:
		logger.warning(f"{input_path} contains no document data; no MIDI file written")
		return None

	scoreroll.midi_file.save_midi_file(stream, output_path)

	return stream
