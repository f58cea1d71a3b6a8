"""
Punycode (RFC 3492): bootstring encoding of Unicode labels into [a-z0-9-].

`encode`/`decode` work on the bare bootstring; `to_ace`/`from_ace` add and
strip the "xn--" ACE prefix.
"""
from typing import List, Optional

from idnakit.core.errors import PunycodeError

BASE = 36
TMIN = 1
TMAX = 26
SKEW = 38
DAMP = 700
INITIAL_BIAS = 72
INITIAL_N = 0x80

DELIMITER = "-"
ACE_PREFIX = "xn--"

# Deltas and code points are bounded like 32-bit unsigned arithmetic
MAXINT = 0xFFFFFFFF

_DIGITS = "abcdefghijklmnopqrstuvwxyz0123456789"


def _adapt(delta: int, numpoints: int, first: bool) -> int:
    delta = delta // DAMP if first else delta // 2
    delta += delta // numpoints
    k = 0
    while delta > ((BASE - TMIN) * TMAX) // 2:
        delta //= BASE - TMIN
        k += BASE
    return k + (BASE - TMIN + 1) * delta // (delta + SKEW)


def _threshold(k: int, bias: int) -> int:
    if k <= bias:
        return TMIN
    if k >= bias + TMAX:
        return TMAX
    return k - bias


def _decode_digit(char: str) -> Optional[int]:
    o = ord(char)
    if 0x30 <= o <= 0x39:
        return o - 22
    if 0x41 <= o <= 0x5A:
        return o - 0x41
    if 0x61 <= o <= 0x7A:
        return o - 0x61
    return None


def encode(text: str) -> str:
    """
    Encode a string as a Punycode bootstring (without the ACE prefix).

    Args:
        text: Unicode text (e.g., 'bücher')

    Returns:
        ASCII bootstring (e.g., 'bcher-kva')

    Raises:
        PunycodeError: On surrogate code points or delta overflow (code "A3")
    """
    codepoints = [ord(c) for c in text]
    for cp in codepoints:
        if 0xD800 <= cp <= 0xDFFF:
            raise PunycodeError(f"Cannot encode surrogate U+{cp:04X}", code="A3")

    output: List[str] = [c for c in text if ord(c) < INITIAL_N]
    basic = handled = len(output)
    if basic:
        output.append(DELIMITER)

    n = INITIAL_N
    delta = 0
    bias = INITIAL_BIAS
    while handled < len(codepoints):
        m = min(cp for cp in codepoints if cp >= n)
        delta += (m - n) * (handled + 1)
        if delta > MAXINT:
            raise PunycodeError("Punycode encoding overflow", code="A3")
        n = m

        for cp in codepoints:
            if cp < n:
                delta += 1
                if delta > MAXINT:
                    raise PunycodeError("Punycode encoding overflow", code="A3")
            elif cp == n:
                q = delta
                k = BASE
                while True:
                    t = _threshold(k, bias)
                    if q < t:
                        break
                    output.append(_DIGITS[t + (q - t) % (BASE - t)])
                    q = (q - t) // (BASE - t)
                    k += BASE
                output.append(_DIGITS[q])
                bias = _adapt(delta, handled + 1, handled == basic)
                delta = 0
                handled += 1

        delta += 1
        n += 1

    return "".join(output)


def decode(text: str) -> str:
    """
    Decode a Punycode bootstring (without the ACE prefix).

    Basic code points before the last delimiter are copied as-is, case included.

    Raises:
        PunycodeError: On non-ASCII input, invalid digits, truncated input,
                       overflow or a decoded value that is not a scalar value
    """
    if not text.isascii():
        raise PunycodeError(f"Punycode input is not ASCII: {text!r}")

    b = text.rfind(DELIMITER)
    if b > 0:
        output = [ord(c) for c in text[:b]]
        pos = b + 1
    else:
        output = []
        pos = 0

    n = INITIAL_N
    i = 0
    bias = INITIAL_BIAS
    length = len(text)
    while pos < length:
        oldi = i
        w = 1
        k = BASE
        while True:
            if pos >= length:
                raise PunycodeError(f"Truncated punycode input: {text!r}")
            digit = _decode_digit(text[pos])
            if digit is None:
                raise PunycodeError(f"Invalid punycode digit {text[pos]!r} in {text!r}")
            pos += 1

            i += digit * w
            if i > MAXINT:
                raise PunycodeError(f"Punycode decoding overflow: {text!r}")
            t = _threshold(k, bias)
            if digit < t:
                break
            w *= BASE - t
            if w > MAXINT:
                raise PunycodeError(f"Punycode decoding overflow: {text!r}")
            k += BASE

        count = len(output) + 1
        bias = _adapt(i - oldi, count, oldi == 0)
        n += i // count
        i %= count
        if n > 0x10FFFF or 0xD800 <= n <= 0xDFFF:
            raise PunycodeError(f"Punycode decodes to an invalid code point: {text!r}")
        output.insert(i, n)
        i += 1

    return "".join(chr(cp) for cp in output)


def to_ace(label: str) -> str:
    """
    Encode a non-ASCII label to its ACE form ('bücher' -> 'xn--bcher-kva').

    Raises:
        PunycodeError: If the label is all ASCII, or cannot be encoded
    """
    if label.isascii():
        raise PunycodeError(f"Label {label!r} has no non-ASCII code point to encode", code="A3")
    return ACE_PREFIX + encode(label)


def from_ace(label: str) -> str:
    """Decode an ACE label; the 'xn--' prefix is optional and case-insensitive"""
    if label[:len(ACE_PREFIX)].lower() == ACE_PREFIX:
        label = label[len(ACE_PREFIX):]
    return decode(label)
