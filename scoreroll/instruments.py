"""Map free-text instrument names to General MIDI program numbers.

Part names in a score are free text ("Violino I", "Pauken", "Grand Piano").
:class:`InstrumentDictionary` resolves them to a program number by looking
for an exact (case-insensitive) entry in a name dictionary and, failing that,
picking the entry with the smallest string distance.

The dictionary is an explicit object: build it once with
:meth:`InstrumentDictionary.default` or :meth:`InstrumentDictionary.from_file`
and pass it to whatever needs program numbers.

Example:
	```python
	import scoreroll.instruments

	instruments = scoreroll.instruments.InstrumentDictionary.default()
	instruments.resolve_program("Violoncello")    # 42
	instruments.resolve_program("Trompete in B")  # nearest match: 56
	```
"""

import logging
import typing

import scoreroll.constants
import scoreroll.constants.gm_instruments
import scoreroll.string_distance


logger = logging.getLogger(__name__)


def _clamp_program (program: int) -> int:
	return max(scoreroll.constants.MIN_PROGRAM, min(scoreroll.constants.MAX_PROGRAM, program))


def parse_dictionary (text: str) -> typing.Dict[str, int]:

	"""
	Parse instrument dictionary text into a lower-case name -> program mapping.

	Blank lines and lines starting with ``%`` are ignored.  A line ``#<n>``
	makes all following names map to program *n* (clamped to [0, 127]).  Any
	other line is a name.  A name listed twice keeps its first position and
	takes the later program.
	"""

	names: typing.Dict[str, int] = {}
	program = scoreroll.constants.MIN_PROGRAM

	for line_number, raw in enumerate(text.splitlines(), 1):

		line = raw.strip()

		if not line or line.startswith("%"):
			continue

		if line.startswith("#"):
			try:
				program = _clamp_program(int("".join(line[1:].split())))
			except ValueError:
				logger.warning(f"Ignoring invalid program number on dictionary line {line_number}: {raw!r}")
			continue

		names[line.lower()] = program

	return names


def default_names () -> typing.Dict[str, int]:

	"""Return a name -> program mapping built from the 128 General MIDI names only."""

	return {name.lower(): program for program, name in enumerate(scoreroll.constants.gm_instruments.DEFAULT_NAMES)}


class InstrumentDictionary:

	"""
	A name -> program dictionary with approximate lookup.

	Parameters:
		names: Mapping of instrument names to program numbers.  Keys are
			matched case-insensitively.
		distance_method: Name of a metric in
			:data:`scoreroll.string_distance.DISTANCE_METHODS` or a callable
			``f(a, b) -> float``.  Defaults to the normalised Levenshtein distance.
	"""

	def __init__ (
		self,
		names: typing.Mapping[str, int],
		distance_method: typing.Union[str, scoreroll.string_distance.DistanceFn] = scoreroll.string_distance.DEFAULT_METHOD
	) -> None:

		self.names: typing.Dict[str, int] = {name.lower(): _clamp_program(program) for name, program in names.items()}
		self.distance = scoreroll.string_distance.get_distance(distance_method)

		# True when the General MIDI names stand in for an unreadable dictionary file.
		self.uses_default_table = False

	@classmethod
	def default (cls, distance_method: typing.Union[str, scoreroll.string_distance.DistanceFn] = scoreroll.string_distance.DEFAULT_METHOD) -> "InstrumentDictionary":

		"""Build the bundled dictionary (GM names plus common score labels)."""

		return cls(parse_dictionary(scoreroll.constants.gm_instruments.DEFAULT_DICTIONARY), distance_method)

	@classmethod
	def from_file (cls, path: str, distance_method: typing.Union[str, scoreroll.string_distance.DistanceFn] = scoreroll.string_distance.DEFAULT_METHOD) -> "InstrumentDictionary":

		"""
		Load a dictionary file.

		If the file cannot be read, an error is logged and the General MIDI
		default names are used instead.  Reverse lookups on such a dictionary
		return the General MIDI table entries.
		"""

		try:
			with open(path, "r", encoding="utf-8") as f:
				names = parse_dictionary(f.read())
		except OSError as e:
			logger.error(f"Could not read instrument dictionary {path}: {e}. Using General MIDI names.")
			instruments = cls(default_names(), distance_method)
			instruments.uses_default_table = True
			return instruments

		return cls(names, distance_method)

	def resolve_program (self, name: typing.Optional[str]) -> int:

		"""
		Return the program number best matching *name*.

		An empty or missing name gives program 0 (Acoustic Grand Piano).  An
		exact case-insensitive entry wins outright; otherwise the entry with the
		smallest distance is chosen, the first one found winning ties.
		"""

		if not name:
			return scoreroll.constants.MIN_PROGRAM

		key = name.lower()

		if key in self.names:
			return self.names[key]

		best_name = ""
		best_program = scoreroll.constants.MIN_PROGRAM
		best_distance = float("inf")

		for candidate, program in self.names.items():

			distance = self.distance(candidate, key)

			if distance == 0:
				best_name, best_program, best_distance = candidate, program, distance
				break

			if distance < best_distance:
				best_name, best_program, best_distance = candidate, program, distance

		logger.debug(f"'{name}' is mapped to '{best_name}' (program {best_program}) with distance {best_distance:.3f}")

		return best_program

	def resolve_name (self, program: int, use_default_table: bool = False) -> str:

		"""
		Return an instrument name for a program number.

		By default this is the first dictionary name registered for the program
		(``""`` if there is none).  With *use_default_table*, the General MIDI
		name is returned instead.

		Raises:
			ValueError: If the program is outside [0, 127].
		"""

		return resolve_name(program, use_default_table=use_default_table, dictionary=self)


def resolve_name (program: int, use_default_table: bool = False, dictionary: typing.Optional[InstrumentDictionary] = None) -> str:

	"""
	Reverse lookup that also works without a dictionary.

	Falls back to the General MIDI name table when *use_default_table* is set,
	when no dictionary is given, or when the dictionary file was unreadable.
	"""

	if not scoreroll.constants.MIN_PROGRAM <= program <= scoreroll.constants.MAX_PROGRAM:
		raise ValueError(f"Program number must be between 0 and 127, got {program}")

	if use_default_table or dictionary is None or dictionary.uses_default_table:
		return scoreroll.constants.gm_instruments.DEFAULT_NAMES[program]

	for name, candidate in dictionary.names.items():
		if candidate == program:
			return name

	return ""
