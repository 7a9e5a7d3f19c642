"""String distance metrics for approximate instrument name matching.

Every metric maps two strings to a non-negative float where ``0.0`` means the
strings are considered identical.  Some metrics are normalised to [0, 1]
(``normalized_levenshtein``, ``jaro_winkler``, ``metric_lcs``, ``ngram``,
``cosine``, ``jaccard``, ``sorensen_dice``); the others grow with the amount
of difference.

The metrics come from strsimpy.  ``ngram`` and ``qgram`` work on 2-character
shingles; ``cosine``, ``jaccard`` and ``sorensen_dice`` on 3-character ones.

Pass a name string or a plain callable anywhere a ``method`` is accepted:

    scoreroll.string_distance.get_distance("jaro_winkler")("violin", "viola")

    # Custom callable - receives two strings, returns a float:
    InstrumentDictionary.default(distance_method=lambda a, b: abs(len(a) - len(b)))
"""

import typing

import strsimpy.cosine
import strsimpy.damerau
import strsimpy.jaccard
import strsimpy.jaro_winkler
import strsimpy.levenshtein
import strsimpy.longest_common_subsequence
import strsimpy.metric_lcs
import strsimpy.ngram
import strsimpy.normalized_levenshtein
import strsimpy.qgram
import strsimpy.sorensen_dice


DistanceFn = typing.Callable[[str, str], float]

SHORT_SHINGLE_SIZE = 2
SHINGLE_SIZE = 3


# ─── Edit distances ──────────────────────────────────────────────────

levenshtein: DistanceFn = strsimpy.levenshtein.Levenshtein().distance
normalized_levenshtein: DistanceFn = strsimpy.normalized_levenshtein.NormalizedLevenshtein().distance

# Unrestricted variant: a transposed pair may be edited further.
damerau: DistanceFn = strsimpy.damerau.Damerau().distance


# ─── Similarity-based distances ──────────────────────────────────────

jaro_winkler: DistanceFn = strsimpy.jaro_winkler.JaroWinkler().distance
longest_common_subsequence: DistanceFn = strsimpy.longest_common_subsequence.LongestCommonSubsequence().distance
metric_lcs: DistanceFn = strsimpy.metric_lcs.MetricLCS().distance


# ─── Shingle-based distances ─────────────────────────────────────────

ngram: DistanceFn = strsimpy.ngram.NGram(SHORT_SHINGLE_SIZE).distance
qgram: DistanceFn = strsimpy.qgram.QGram(SHORT_SHINGLE_SIZE).distance
cosine: DistanceFn = strsimpy.cosine.Cosine(SHINGLE_SIZE).distance
jaccard: DistanceFn = strsimpy.jaccard.Jaccard(SHINGLE_SIZE).distance
sorensen_dice: DistanceFn = strsimpy.sorensen_dice.SorensenDice(SHINGLE_SIZE).distance


# ─── Registry ────────────────────────────────────────────────────────

DISTANCE_METHODS: typing.Dict[str, DistanceFn] = {
	"levenshtein":                levenshtein,
	"normalized_levenshtein":     normalized_levenshtein,
	"damerau":                    damerau,
	"jaro_winkler":               jaro_winkler,
	"longest_common_subsequence": longest_common_subsequence,
	"metric_lcs":                 metric_lcs,
	"ngram":                      ngram,
	"qgram":                      qgram,
	"cosine":                     cosine,
	"jaccard":                    jaccard,
	"sorensen_dice":              sorensen_dice,
}

DEFAULT_METHOD = "normalized_levenshtein"


def get_distance (method: typing.Union[str, DistanceFn]) -> DistanceFn:

	"""Return the distance function for *method*.

	*method* may be a name string (see :data:`DISTANCE_METHODS`) or any
	callable taking two strings and returning a float.

	Raises :class:`ValueError` for unknown string names.
	"""

	if callable(method):
		return method

	if method not in DISTANCE_METHODS:
		available = ", ".join(f'"{k}"' for k in sorted(DISTANCE_METHODS))
		raise ValueError(f"Unknown distance method {method!r}. Available methods: {available}")

	return DISTANCE_METHODS[method]
