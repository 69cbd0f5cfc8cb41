from __future__ import annotations

from textnorm.engine.stages import (
    apply_unicode_form,
    collapse_whitespace,
    fold_case,
    normalize_quotes_and_dashes,
    remove_soft_hyphen,
    remove_zero_width,
    unify_nbsp,
)
from textnorm.models import MappedText
from textnorm.options import UnicodeForm


def _mapped(text: str) -> MappedText:
    return MappedText.from_source(text)


def test_unify_nbsp_variants() -> None:
    mapped = unify_nbsp(_mapped("1\u00a0000\u202f000\u20072"))
    assert mapped.text == "1 000 000 2"
    assert mapped.starts == tuple(range(11))


def test_unchanged_stage_returns_input() -> None:
    mapped = _mapped("nothing to do")
    assert unify_nbsp(mapped) is mapped
    assert remove_soft_hyphen(mapped) is mapped
    assert apply_unicode_form(mapped, form=UnicodeForm.NFC) is mapped
    assert fold_case(mapped) is mapped
    assert collapse_whitespace(mapped) is mapped


def test_remove_soft_hyphen_keeps_own_offsets() -> None:
    mapped = remove_soft_hyphen(_mapped("con\u00adtra\u00adto"))
    assert mapped.text == "contrato"
    assert mapped.starts == (0, 1, 2, 4, 5, 6, 8, 9)
    assert mapped.ends == (1, 2, 3, 5, 6, 7, 9, 10)


def test_remove_zero_width_marks() -> None:
    raw = "a\u200bb\u200ec\u202ad\ufeffe\u200df"
    assert remove_zero_width(_mapped(raw)).text == "abcdef"


def test_remove_zero_width_can_preserve_joiners() -> None:
    raw = "\U0001f469\u200d\U0001f4bb\u200b!"
    mapped = remove_zero_width(_mapped(raw), preserve_joiners=True)
    assert mapped.text == "\U0001f469\u200d\U0001f4bb!"
    assert mapped.starts == (0, 1, 2, 4)


def test_quotes_dashes_and_primes() -> None:
    raw = "5\u2032 10\u2033 \u2013 \u201cok\u201d"
    mapped = normalize_quotes_and_dashes(_mapped(raw))
    assert mapped.text == "5' 10\" - \"ok\""


def test_nfd_expands_to_first_of_cluster() -> None:
    mapped = apply_unicode_form(_mapped("\u00e9x"), form=UnicodeForm.NFD)
    assert mapped.text == "e\u0301x"
    assert mapped.starts == (0, 0, 1)
    assert mapped.ends == (1, 1, 2)


def test_nfc_contracts_cluster() -> None:
    mapped = apply_unicode_form(_mapped("e\u0301x"), form=UnicodeForm.NFC)
    assert mapped.text == "\u00e9x"
    assert mapped.starts == (0, 2)
    assert mapped.ends == (2, 3)


def test_nfc_reorders_and_composes_marks() -> None:
    mapped = apply_unicode_form(_mapped("xa\u0302\u0323y"), form=UnicodeForm.NFC)
    assert mapped.text == "x\u1eady"
    assert mapped.starts == (0, 1, 4)
    assert mapped.ends == (1, 4, 5)


def test_nfc_composes_hangul_jamo() -> None:
    mapped = apply_unicode_form(_mapped("\u1100\u1161\u11a8!"), form=UnicodeForm.NFC)
    assert mapped.text == "\uac01!"
    assert mapped.starts == (0, 3)
    assert mapped.ends == (3, 4)


def test_nfc_singleton_keeps_position() -> None:
    mapped = apply_unicode_form(_mapped("1 \u212b"), form=UnicodeForm.NFC)
    assert mapped.text == "1 \u00c5"
    assert mapped.starts == (0, 1, 2)


def test_fold_case_is_one_to_one() -> None:
    mapped = fold_case(_mapped("\u0130STANBUL \u039f\u0394\u039f\u03a3"))
    assert mapped.text == "istanbul \u03bf\u03b4\u03bf\u03c3"
    assert mapped.starts == tuple(range(13))


def test_fold_case_ascii() -> None:
    mapped = fold_case(_mapped("C\u00f3digo CIVIL"))
    assert mapped.text == "c\u00f3digo civil"


def test_fold_case_reapplies_unicode_form() -> None:
    mapped = fold_case(_mapped("T\u0308x"), form=UnicodeForm.NFC)
    assert mapped.text == "\u1e97x"
    assert mapped.starts == (0, 2)
    assert mapped.ends == (2, 3)
    assert fold_case(_mapped("T\u0308x")).text == "t\u0308x"


def test_collapse_whitespace_keeps_edges() -> None:
    mapped = collapse_whitespace(_mapped("  a  "))
    assert mapped.text == " a "
    assert mapped.starts == (0, 2, 3)
    assert mapped.ends == (2, 3, 5)


def test_collapse_whitespace_handles_crlf() -> None:
    mapped = collapse_whitespace(_mapped("a\r\nb\tc"))
    assert mapped.text == "a b c"
    assert mapped.starts == (0, 1, 3, 4, 5)
