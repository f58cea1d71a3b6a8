"""
Tests for single-label processing: validity criteria, CONTEXTJ/CONTEXTO
and the bidi rule.
"""

import pytest

from idnakit.core.config import IDNAOptions, PROFILES
from idnakit.core.table import default_table
from idnakit.modules.base import Direction
from idnakit.modules.label import LabelProcessor, is_bidi_domain
from idnakit.modules.status import StatusCode


def make_processor(**overrides):
    return LabelProcessor(default_table(), PROFILES["default"].replace(**overrides))


@pytest.fixture
def processor():
    return make_processor()


class TestMapping:
    """map_text on labels and domains."""

    def test_ascii_lowercased(self, processor):
        assert processor.map_text("ExAmPlE") == "example"

    def test_mapping_and_nfc(self, processor):
        assert processor.map_text("BÜCHER") == "bücher"
        assert processor.map_text("u\u0308") == "ü"

    def test_ignored_removed(self, processor):
        assert processor.map_text("ab\u00adc") == "abc"

    def test_deviation(self, processor):
        assert processor.map_text("faß") == "faß"
        assert processor.map_text("faß", transitional=True) == "fass"
        assert processor.map_text("a\u200db", transitional=True) == "ab"

    def test_mapped_to_deviation(self, processor):
        assert processor.map_text("FA\u1e9e") == "faß"
        assert processor.map_text("FA\u1e9e", transitional=True) == "fass"

    def test_disallowed_kept(self, processor):
        assert processor.map_text("a\ue000") == "a\ue000"


class TestHyphens:
    """V2 and V3."""

    def test_double_hyphen(self, processor):
        assert StatusCode.V2 in processor.execute("ab--cd").status

    def test_double_hyphen_unchecked(self):
        result = make_processor(check_hyphens=False).execute("ab--cd")
        assert result.success
        assert result.result == "ab--cd"

    def test_leading_trailing_hyphen(self, processor):
        assert StatusCode.V3 in processor.execute("-abc").status
        assert StatusCode.V3 in processor.execute("abc-").status
        assert make_processor(check_hyphens=False).execute("-abc").success

    def test_inner_hyphens(self, processor):
        assert processor.execute("abc-d-e").success


class TestPunycodeLabels:
    """'xn--' labels."""

    def test_decode(self, processor):
        result = processor.execute("xn--bcher-kva")
        assert result.success
        assert result.result == "bücher"

    def test_empty_payload(self, processor):
        assert processor.execute("xn--").status == (StatusCode.P4,)

    def test_ascii_payload(self, processor):
        assert StatusCode.P4 in processor.execute("xn--abc-").status

    def test_undecodable(self, processor):
        result = processor.execute("xn--" + "9" * 14)
        assert result.status == (StatusCode.P4,)
        assert result.result == "xn--" + "9" * 14

    def test_ignore_invalid_punycode(self):
        result = make_processor(ignore_invalid_punycode=True).execute("xn--" + "9" * 14)
        assert StatusCode.P4 not in result.status

    def test_decoded_label_is_nontransitional(self, processor):
        result = processor.execute("xn--zca", transitional=True)
        assert result.result == "ß"
        assert result.success
        assert StatusCode.DEVIATION in result.status

    def test_to_ascii(self, processor):
        assert processor.execute("bücher", Direction.TO_ASCII).ascii == "xn--bcher-kva"
        assert processor.execute("example", Direction.TO_ASCII).ascii == "example"
        assert processor.execute("bücher").ascii is None


class TestValidity:
    """V1, V5, V6, V7 and U1."""

    def test_not_nfc(self, processor):
        assert StatusCode.V1 in processor.validate("a\u0301")

    def test_full_stop(self, processor):
        assert StatusCode.V5 in processor.validate("a.b")

    def test_leading_mark(self, processor):
        assert StatusCode.V6 in processor.execute("\u0300a").status

    def test_disallowed(self, processor):
        result = processor.execute("a\ue000")
        assert result.status == (StatusCode.V7,)
        assert not result.success

    def test_std3(self, processor):
        assert processor.execute("a_b").success
        result = make_processor(use_std3=True).execute("a_b")
        assert StatusCode.U1 in result.status

    def test_informational_tokens(self, processor):
        result = processor.execute("faß")
        assert result.success
        assert StatusCode.DEVIATION in result.status
        assert StatusCode.XV8 in processor.execute("᧚").status


class TestJoiners:
    """CONTEXTJ rules."""

    def test_zwnj_without_context(self, processor):
        assert StatusCode.C1 in processor.execute("a\u200cb").status

    def test_zwnj_after_virama(self, processor):
        assert StatusCode.C1 not in processor.execute("क\u094d\u200cष").status

    def test_zwnj_between_joining_letters(self, processor):
        assert StatusCode.C1 not in processor.execute("ب\u200cب").status

    def test_zwj(self, processor):
        assert StatusCode.C2 in processor.execute("a\u200db").status
        assert StatusCode.C2 not in processor.execute("क\u094d\u200d").status

    def test_joiners_unchecked(self):
        result = make_processor(check_joiners=False).execute("a\u200cb")
        assert StatusCode.C1 not in result.status


class TestContexto:
    """CONTEXTO rules."""

    @pytest.mark.parametrize("label", [
        "l·l",
        "͵α",
        "א׳",
        "ア・",
        "٠١",
    ])
    def test_allowed(self, processor, label):
        assert StatusCode.CONTEXTO not in processor.execute(label).status

    @pytest.mark.parametrize("label", [
        "a·b",
        "͵a",
        "a׳",
        "a・",
        "٠۰",
    ])
    def test_violations(self, processor, label):
        assert StatusCode.CONTEXTO in processor.execute(label).status

    def test_unchecked(self):
        result = make_processor(check_contexto=False).execute("a·b")
        assert StatusCode.CONTEXTO not in result.status


class TestBidi:
    """RFC 5893 bidi rule."""

    def test_rtl_label(self):
        assert LabelProcessor.check_bidi("אב") == []
        assert LabelProcessor.check_bidi("ا\u0300") == []

    def test_ltr_label(self):
        assert LabelProcessor.check_bidi("abc") == []

    def test_rtl_with_ltr_character(self):
        assert LabelProcessor.check_bidi("אa") == [StatusCode.B2, StatusCode.B3]

    def test_first_character(self):
        assert LabelProcessor.check_bidi("1א") == [StatusCode.B1]
        assert LabelProcessor.check_bidi("\u0308") == [StatusCode.B1]

    def test_mixed_numbers(self):
        assert LabelProcessor.check_bidi("א1١") == [StatusCode.B4]

    def test_bidi_domain(self):
        assert is_bidi_domain(["abc", "א"])
        assert is_bidi_domain(["٠"])
        assert not is_bidi_domain(["abc", "bücher"])


def test_options_are_frozen():
    options = IDNAOptions()
    with pytest.raises(Exception):
        options.use_std3 = True
