"""Normalization options.

Options form a closed, immutable configuration value. Every flag defaults to
its no-op value, so ``NormalizationOptions()`` leaves text untouched. The
``unicode_form`` field is the only one with a restricted domain; anything other
than ``None``, ``"NFC"`` or ``"NFD"`` is rejected when the options are built,
before any text is processed.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping

from textnorm.config import (
    SEARCH_CASE_INSENSITIVE,
    SEARCH_NORMALIZE_QUOTES,
    SEARCH_NORMALIZE_WHITESPACE,
    SEARCH_PRESERVE_JOINERS,
    SEARCH_REMOVE_SOFT_HYPHEN,
    SEARCH_REMOVE_ZERO_WIDTH,
    SEARCH_UNICODE_FORM,
    SEARCH_UNIFY_NBSP,
)


class ConfigurationError(ValueError):
    """Raised for options the engine does not recognize."""


class UnicodeForm(str, Enum):
    NFC = "NFC"
    NFD = "NFD"


_CAMEL_KEYS = {
    "unifyNbsp": "unify_nbsp",
    "removeSoftHyphen": "remove_soft_hyphen",
    "removeZeroWidth": "remove_zero_width",
    "normalizeQuotesAndDashes": "normalize_quotes_and_dashes",
    "caseInsensitive": "case_insensitive",
    "unicodeForm": "unicode_form",
    "normalizeWhitespace": "normalize_whitespace",
    "preserveJoiners": "preserve_joiners",
}


def _coerce_unicode_form(value: Any) -> UnicodeForm | None:
    if value is None or isinstance(value, UnicodeForm):
        return value
    if isinstance(value, str):
        try:
            return UnicodeForm(value)
        except ValueError:
            pass
    allowed = ", ".join(form.value for form in UnicodeForm)
    raise ConfigurationError(
        f"Unsupported unicode_form {value!r}; expected None or one of: {allowed}"
    )


@dataclass(frozen=True)
class NormalizationOptions:
    unify_nbsp: bool = False
    remove_soft_hyphen: bool = False
    remove_zero_width: bool = False
    normalize_quotes_and_dashes: bool = False
    case_insensitive: bool = False
    unicode_form: UnicodeForm | None = None
    normalize_whitespace: bool = False
    preserve_joiners: bool = False

    def __post_init__(self) -> None:
        for field_ in fields(self):
            if field_.name == "unicode_form":
                continue
            value = getattr(self, field_.name)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"Option {field_.name} must be a bool, got {type(value).__name__}"
                )
        # Frozen: assign the coerced enum through object.__setattr__.
        object.__setattr__(
            self, "unicode_form", _coerce_unicode_form(self.unicode_form)
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> NormalizationOptions:
        """Build options from camelCase or snake_case keys.

        Unknown keys are a configuration error rather than being ignored.
        """
        known = {field_.name for field_ in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown normalization option: {key!r}")
            values[name] = value
        return cls(**values)

    def replace(self, **changes: Any) -> NormalizationOptions:
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unify_nbsp": self.unify_nbsp,
            "remove_soft_hyphen": self.remove_soft_hyphen,
            "remove_zero_width": self.remove_zero_width,
            "normalize_quotes_and_dashes": self.normalize_quotes_and_dashes,
            "case_insensitive": self.case_insensitive,
            "unicode_form": self.unicode_form.value if self.unicode_form else None,
            "normalize_whitespace": self.normalize_whitespace,
            "preserve_joiners": self.preserve_joiners,
        }


NO_OP_OPTIONS = NormalizationOptions()

DOCUMENT_SEARCH_OPTIONS = NormalizationOptions(
    unify_nbsp=True,
    remove_soft_hyphen=True,
    remove_zero_width=True,
    normalize_quotes_and_dashes=True,
    unicode_form=UnicodeForm.NFC,
    normalize_whitespace=True,
)


def search_options() -> NormalizationOptions:
    """Document search preset with environment overrides applied."""
    return NormalizationOptions(
        unify_nbsp=SEARCH_UNIFY_NBSP,
        remove_soft_hyphen=SEARCH_REMOVE_SOFT_HYPHEN,
        remove_zero_width=SEARCH_REMOVE_ZERO_WIDTH,
        normalize_quotes_and_dashes=SEARCH_NORMALIZE_QUOTES,
        case_insensitive=SEARCH_CASE_INSENSITIVE,
        unicode_form=SEARCH_UNICODE_FORM,
        normalize_whitespace=SEARCH_NORMALIZE_WHITESPACE,
        preserve_joiners=SEARCH_PRESERVE_JOINERS,
    )


def resolve_options(
    options: NormalizationOptions | Mapping[str, Any] | None,
) -> NormalizationOptions:
    if options is None:
        return NO_OP_OPTIONS
    if isinstance(options, NormalizationOptions):
        return options
    if isinstance(options, Mapping):
        return NormalizationOptions.from_mapping(options)
    raise ConfigurationError(
        f"Expected NormalizationOptions or a mapping, got {type(options).__name__}"
    )
