"""Normalization pipeline for documents and queries.

Stages run in a fixed order, each gated by its option flag:

1. NBSP unification
2. Soft-hyphen removal
3. Zero-width removal
4. Quote/dash normalization
5. Unicode normalization form (NFC/NFD)
6. Case folding
7. Whitespace collapsing

Deletions and substitutions run before the normalization form so they never
split a combining sequence; case folding works on the canonical form and
re-applies it, since lower-casing can create new composable pairs; whitespace
collapses last because NBSP unification can introduce new spaces.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Mapping

from textnorm.engine.stages import (
    Stage,
    apply_unicode_form,
    collapse_whitespace,
    fold_case,
    normalize_quotes_and_dashes,
    remove_soft_hyphen,
    remove_zero_width,
    unify_nbsp,
)
from textnorm.models import MappedText, NormalizationResult
from textnorm.options import NormalizationOptions, resolve_options

OptionsLike = NormalizationOptions | Mapping[str, Any] | None


def build_stages(options: NormalizationOptions) -> tuple[Stage, ...]:
    stages: list[Stage] = []
    if options.unify_nbsp:
        stages.append(unify_nbsp)
    if options.remove_soft_hyphen:
        stages.append(remove_soft_hyphen)
    if options.remove_zero_width:
        stages.append(
            partial(remove_zero_width, preserve_joiners=options.preserve_joiners)
        )
    if options.normalize_quotes_and_dashes:
        stages.append(normalize_quotes_and_dashes)
    if options.unicode_form is not None:
        stages.append(partial(apply_unicode_form, form=options.unicode_form))
    if options.case_insensitive:
        stages.append(partial(fold_case, form=options.unicode_form))
    if options.normalize_whitespace:
        stages.append(collapse_whitespace)
    return tuple(stages)


def _run(text: str, options: OptionsLike) -> MappedText:
    # Options are validated before any stage touches the text.
    resolved = resolve_options(options)
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got {type(text).__name__}")
    mapped = MappedText.from_source(text)
    for stage in build_stages(resolved):
        mapped = stage(mapped)
    return mapped


def normalize_and_build_maps(
    text: str, options: OptionsLike = None
) -> NormalizationResult:
    """Normalize ``text`` and map every output codepoint back to the source.

    ``norm_to_orig[i]`` is the source offset of the first codepoint of the
    cluster that produced ``normalized_text[i]``; ``norm_to_orig_end[i]`` is the
    source offset just past that cluster.
    """
    mapped = _run(text, options)
    return NormalizationResult(
        normalized_text=mapped.text,
        norm_to_orig=mapped.starts,
        norm_to_orig_end=mapped.ends,
        source_length=len(text),
    )


def normalize_query(text: str, options: OptionsLike = None) -> str:
    """Normalize a query through the same stages used for documents."""
    return _run(text, options).text
