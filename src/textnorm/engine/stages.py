"""Stage transforms for the normalization pipeline.

Each stage takes a :class:`~textnorm.models.MappedText` and returns a new one
whose ``starts``/``ends`` still hold one entry per output codepoint. Stages are
pure: a stage that changes nothing returns its input unchanged.

Map policy
----------
- Substitutions are 1:1 and leave the maps untouched.
- Deletions drop the deleted codepoints' entries; retained codepoints keep their
  own entries, so nothing is shifted arithmetically.
- Clusters (a whitespace run, a Unicode composition/decomposition group, an
  expanding case mapping) give every produced codepoint the cluster's first
  start and last end.

Codepoints a stage does not recognize pass through unchanged, including lone
surrogates and control characters.
"""

from __future__ import annotations

import unicodedata
from types import MappingProxyType
from typing import Callable

from textnorm.models import MappedText
from textnorm.options import UnicodeForm

Stage = Callable[[MappedText], MappedText]

NBSP_VARIANTS = frozenset(
    {
        "\u00a0",  # NO-BREAK SPACE
        "\u202f",  # NARROW NO-BREAK SPACE
        "\u2007",  # FIGURE SPACE
    }
)

SOFT_HYPHEN = "\u00ad"
_SOFT_HYPHENS = frozenset({SOFT_HYPHEN})

# Zero-width and directional marks commonly left behind by word processors.
ZERO_WIDTH_CHARS = frozenset(
    {
        "\u200b",  # ZERO WIDTH SPACE
        "\u200c",  # ZERO WIDTH NON-JOINER
        "\u200d",  # ZERO WIDTH JOINER
        "\u200e",  # LEFT-TO-RIGHT MARK
        "\u200f",  # RIGHT-TO-LEFT MARK
        "\u202a",
        "\u202b",
        "\u202c",
        "\u202d",
        "\u202e",
        "\u2060",  # WORD JOINER
        "\ufeff",  # ZERO WIDTH NO-BREAK SPACE / BOM
    }
)
JOINERS = frozenset({"\u200c", "\u200d"})
_ZERO_WIDTH_EXCEPT_JOINERS = ZERO_WIDTH_CHARS - JOINERS

QUOTE_DASH_REPLACEMENTS = MappingProxyType(
    {
        "\u201c": '"',
        "\u201d": '"',
        "\u2033": '"',  # double prime
        "\u2018": "'",
        "\u2019": "'",
        "\u2032": "'",  # prime
        "\u2013": "-",
        "\u2014": "-",
    }
)

WHITESPACE_CHARS = frozenset({" ", "\t", "\n", "\r"})

_NBSP_TABLE = MappingProxyType(str.maketrans({ch: " " for ch in NBSP_VARIANTS}))
_QUOTE_DASH_TABLE = MappingProxyType(str.maketrans(dict(QUOTE_DASH_REPLACEMENTS)))

# str.lower() applies full case mapping; U+0130 is the one codepoint whose full
# lowercase expands, so pin it to its simple mapping.
_SIMPLE_LOWER_OVERRIDES = MappingProxyType({"\u0130": "i"})

# No canonical composition pairs a codepoint below this with a preceding one.
_FIRST_COMBINING = 0x300


def _substitute(mapped: MappedText, table: MappingProxyType) -> MappedText:
    text = mapped.text.translate(table)
    if text == mapped.text:
        return mapped
    return MappedText(text=text, starts=mapped.starts, ends=mapped.ends)


def _delete(mapped: MappedText, doomed: frozenset[str]) -> MappedText:
    text = mapped.text
    keep = [idx for idx, ch in enumerate(text) if ch not in doomed]
    if len(keep) == len(text):
        return mapped
    return MappedText(
        text="".join(text[idx] for idx in keep),
        starts=tuple(mapped.starts[idx] for idx in keep),
        ends=tuple(mapped.ends[idx] for idx in keep),
    )


def _expand(
    mapped: MappedText, pieces: list[str], bounds: list[tuple[int, int]]
) -> MappedText:
    """Rebuild a MappedText from output pieces and their ``(i, j)`` input ranges."""
    starts: list[int] = []
    ends: list[int] = []
    for piece, (first, last) in zip(pieces, bounds):
        starts.extend([mapped.starts[first]] * len(piece))
        ends.extend([mapped.ends[last - 1]] * len(piece))
    return MappedText(text="".join(pieces), starts=tuple(starts), ends=tuple(ends))


def unify_nbsp(mapped: MappedText) -> MappedText:
    return _substitute(mapped, _NBSP_TABLE)


def remove_soft_hyphen(mapped: MappedText) -> MappedText:
    return _delete(mapped, _SOFT_HYPHENS)


def remove_zero_width(
    mapped: MappedText, *, preserve_joiners: bool = False
) -> MappedText:
    doomed = _ZERO_WIDTH_EXCEPT_JOINERS if preserve_joiners else ZERO_WIDTH_CHARS
    return _delete(mapped, doomed)


def normalize_quotes_and_dashes(mapped: MappedText) -> MappedText:
    return _substitute(mapped, _QUOTE_DASH_TABLE)


def _joins_cluster(cluster: str, ch: str, form: str) -> bool:
    if unicodedata.combining(ch):
        return True
    if ord(ch) < _FIRST_COMBINING:
        return False
    together = unicodedata.normalize(form, cluster + ch)
    apart = unicodedata.normalize(form, cluster) + unicodedata.normalize(form, ch)
    return together != apart


def apply_unicode_form(mapped: MappedText, *, form: UnicodeForm) -> MappedText:
    """Apply NFC/NFD, mapping each output codepoint to its source cluster.

    A cluster grows while the next codepoint is a combining mark or would
    compose/reorder with the cluster. Normalizing clusters independently must
    reproduce the whole-string result; if it ever does not, the whole text is
    treated as one cluster so the output is still the exact standard form.
    """
    text = mapped.text
    if unicodedata.is_normalized(form.value, text):
        return mapped

    pieces: list[str] = []
    bounds: list[tuple[int, int]] = []
    size = len(text)
    cursor = 0
    while cursor < size:
        end = cursor + 1
        while end < size and _joins_cluster(text[cursor:end], text[end], form.value):
            end += 1
        pieces.append(unicodedata.normalize(form.value, text[cursor:end]))
        bounds.append((cursor, end))
        cursor = end

    expected = unicodedata.normalize(form.value, text)
    if "".join(pieces) != expected:
        return _expand(mapped, [expected], [(0, size)])
    return _expand(mapped, pieces, bounds)


def _lower_char(ch: str) -> str:
    return _SIMPLE_LOWER_OVERRIDES.get(ch) or ch.lower()


def _lower(mapped: MappedText) -> MappedText:
    text = mapped.text
    if text.isascii():
        folded = text.lower()
        if folded == text:
            return mapped
        return MappedText(text=folded, starts=mapped.starts, ends=mapped.ends)

    pieces = [_lower_char(ch) for ch in text]
    if all(len(piece) == 1 for piece in pieces):
        folded = "".join(pieces)
        if folded == text:
            return mapped
        return MappedText(text=folded, starts=mapped.starts, ends=mapped.ends)
    return _expand(mapped, pieces, [(idx, idx + 1) for idx in range(len(text))])


def fold_case(mapped: MappedText, *, form: UnicodeForm | None = None) -> MappedText:
    """Lower-case every codepoint, keeping the text in ``form`` when one is set.

    Lower-casing can produce a new composable pair (``T`` + U+0308 becomes
    ``t`` + U+0308, which NFC composes to U+1E97), so the form is re-applied
    to the folded text.
    """
    folded = _lower(mapped)
    if form is None or folded is mapped:
        return folded
    return apply_unicode_form(folded, form=form)


def collapse_whitespace(mapped: MappedText) -> MappedText:
    text = mapped.text
    chars: list[str] = []
    starts: list[int] = []
    ends: list[int] = []
    in_run = False
    for idx, ch in enumerate(text):
        if ch in WHITESPACE_CHARS:
            if in_run:
                ends[-1] = mapped.ends[idx]
                continue
            in_run = True
            ch = " "
        else:
            in_run = False
        chars.append(ch)
        starts.append(mapped.starts[idx])
        ends.append(mapped.ends[idx])

    collapsed = "".join(chars)
    if collapsed == text:
        return mapped
    return MappedText(text=collapsed, starts=tuple(starts), ends=tuple(ends))
