"""
Tests for the RFC 3492 Punycode codec.
"""

import json
import random
from pathlib import Path

import pytest

from idnakit.core.errors import PunycodeError
from idnakit.core.punycode import BASE, INITIAL_BIAS, _DIGITS, _threshold, decode, encode, from_ace, to_ace

FIXTURES = Path(__file__).parent / "fixtures"


def load_vectors(name):
    with open(FIXTURES / name, encoding="utf-8") as f:
        return json.load(f)


VECTORS = load_vectors("punycode_tests.json")
BAD_VECTORS = load_vectors("bad_punycode_tests.json")


def encode_delta(delta):
    """Bootstring digits for a single delta with the initial bias"""
    output = []
    q = delta
    k = BASE
    while True:
        t = _threshold(k, INITIAL_BIAS)
        if q < t:
            break
        output.append(_DIGITS[t + (q - t) % (BASE - t)])
        q = (q - t) // (BASE - t)
        k += BASE
    output.append(_DIGITS[q])
    return "".join(output)


def random_scalar(rng):
    """Any Unicode scalar value, ASCII about one time in four"""
    if rng.random() < 0.25:
        return chr(rng.randint(0, 0x7F))
    while True:
        cp = rng.randint(0x80, 0x10FFFF)
        if not 0xD800 <= cp <= 0xDFFF:
            return chr(cp)


class TestVectors:
    """Known-answer tests."""

    @pytest.mark.parametrize("vector", VECTORS, ids=lambda v: v.get("description", v["encoded"])[:40])
    def test_decode(self, vector):
        assert decode(vector["encoded"]) == vector["decoded"]

    @pytest.mark.parametrize("vector", VECTORS, ids=lambda v: v.get("description", v["encoded"])[:40])
    def test_encode(self, vector):
        assert encode(vector["decoded"]) == vector["encoded"]

    @pytest.mark.parametrize("vector", BAD_VECTORS, ids=lambda v: v["description"])
    def test_encode_overflow(self, vector):
        with pytest.raises(PunycodeError) as exc:
            encode(vector["decoded"])
        assert exc.value.code == "A3"


class TestDecoding:
    """Decoder edge cases."""

    def test_round_trip(self):
        for text in ["bücher", "München", "例え", "ü-ë", "ａｂｃ", "\U0001f4a9"]:
            assert decode(encode(text)) == text

    def test_random_round_trip(self):
        rng = random.Random(3492)
        for _ in range(2000):
            chars = [random_scalar(rng) for _ in range(rng.randint(1, 12))]
            chars.insert(rng.randrange(len(chars) + 1), chr(rng.randint(0x10000, 0x10FFFF)))
            text = "".join(chars)
            assert decode(encode(text)) == text
            assert from_ace(to_ace(text)) == text

    def test_digits_case_insensitive(self):
        assert decode("BCHER-KVA") == "BüCHER"
        assert decode("TDA") == "ü"

    def test_overflow(self):
        with pytest.raises(PunycodeError):
            decode("9" * 14)

    def test_invalid_digit(self):
        with pytest.raises(PunycodeError):
            decode("abc-d_e")

    def test_truncated(self):
        with pytest.raises(PunycodeError):
            decode("bcher-kv9")

    def test_non_ascii(self):
        with pytest.raises(PunycodeError):
            decode("bü-kva")

    def test_surrogate_result(self):
        # 0xD800 - 0x80 = 55168 inserted at position 0
        with pytest.raises(PunycodeError):
            decode(encode_delta(0xD800 - 0x80))

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode("9" * 14)


class TestAce:
    """ACE prefix helpers."""

    def test_to_ace(self):
        assert to_ace("bücher") == "xn--bcher-kva"
        assert to_ace("ß") == "xn--zca"

    def test_to_ace_rejects_ascii(self):
        with pytest.raises(PunycodeError) as exc:
            to_ace("example")
        assert exc.value.code == "A3"

    def test_to_ace_rejects_surrogates(self):
        with pytest.raises(PunycodeError):
            to_ace("a\ud800")

    def test_from_ace(self):
        assert from_ace("xn--bcher-kva") == "bücher"
        assert from_ace("XN--bcher-kva") == "bücher"
        assert from_ace("bcher-kva") == "bücher"
