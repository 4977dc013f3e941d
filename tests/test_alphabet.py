import pytest

from mcp_random.engine.alphabet import CHARACTER_CLASSES, DEFAULT_CLASSES, build_charset
from mcp_random.engine.errors import EmptyAlphabetError, InvalidShapeError


def test_full_charset_in_canonical_order():
    charset = build_charset(DEFAULT_CLASSES)
    assert charset.startswith("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789")
    assert charset.endswith("!@#$%^&*()_+-=[]{}|;:,.<>?")
    assert len(charset) == 26 + 26 + 10 + 26


def test_selection_order_does_not_matter():
    assert build_charset(["numbers", "uppercase"]) == build_charset(["uppercase", "numbers"])
    assert build_charset(["numbers", "uppercase"]).startswith("ABC")


def test_exclude_similar_drops_confusable_glyphs():
    charset = build_charset(DEFAULT_CLASSES, exclude_similar=True)
    for glyph in "IOilo01":
        assert glyph not in charset
    # symbols have no reduced variant
    assert charset.endswith(CHARACTER_CLASSES["symbols"][0])


def test_empty_selection():
    with pytest.raises(EmptyAlphabetError):
        build_charset([])


def test_unknown_class():
    with pytest.raises(InvalidShapeError, match="emoji"):
        build_charset(["numbers", "emoji"])


def test_accepts_any_iterable_of_names():
    assert build_charset(name for name in ("numbers",)) == "0123456789"
    assert build_charset(("numbers", "numbers")) == "0123456789"
