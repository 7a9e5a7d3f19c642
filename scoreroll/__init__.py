"""
scoreroll - unroll repeat structures in a score timeline and turn it into MIDI events.

A score written with repeats, da capo and dal segno jumps is compact: the
music that is played twice is written once.  scoreroll takes such a
timeline (an already-parsed document of notes, signatures, markers and jump
directives), unrolls it into the order it is actually performed, and
produces the ordered MIDI events for it.

Pipeline:

- **Sequencing resolver** (``scoreroll.sequencing``). Jump directives carry
  an activity pattern such as ``"10"`` (jump on the first visit, pass on the
  second), so first and second endings, nested repeats and "da capo al fine"
  all unroll into one linear timeline with monotonically increasing dates.
  Repeated copies get unique identifiers.
- **Event materializer** (``scoreroll.materializer``). Seed tempo, markers,
  signatures, per-part instrument names, program changes and note on/off
  pairs, tick-ordered per track.
- **Instrument resolver** (``scoreroll.instruments``). Maps free-text part
  names ("Violoncello", "Trompete in B") to General MIDI programs with
  approximate string matching.
- **MIDI output** (``scoreroll.midi_file``). Encodes the event stream with
  mido as a type 1 Standard MIDI File.

Minimal example:

    ```python
    import scoreroll

    document = scoreroll.load_document("piece.json")
    stream = scoreroll.convert(document, scoreroll.ConversionConfig(bpm=96))
    scoreroll.save_midi_file(stream, "piece.mid")
    ```

Package-level exports: ``ConversionConfig``, ``convert``, ``load_config``,
``load_document``, ``build_document``, ``resolve_document``, ``materialize``,
``InstrumentDictionary``, ``save_midi_file``.
"""

import scoreroll.conversion
import scoreroll.document_builder
import scoreroll.instruments
import scoreroll.materializer
import scoreroll.midi_file
import scoreroll.sequencing


ConversionConfig = scoreroll.conversion.ConversionConfig
convert = scoreroll.conversion.convert
load_config = scoreroll.conversion.load_config
load_document = scoreroll.document_builder.load_document
build_document = scoreroll.document_builder.build_document
resolve_document = scoreroll.sequencing.resolve_document
materialize = scoreroll.materializer.materialize
InstrumentDictionary = scoreroll.instruments.InstrumentDictionary
save_midi_file = scoreroll.midi_file.save_midi_file
