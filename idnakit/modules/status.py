from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from idnakit.core.errors import MappingError, PunycodeError, ValidityError


class StatusCode(Enum):
    """Status tokens, spelled as in the UTS #46 conformance data"""
    P4 = "P4"
    V1 = "V1"
    V2 = "V2"
    V3 = "V3"
    V4 = "V4"
    V5 = "V5"
    V6 = "V6"
    V7 = "V7"
    U1 = "U1"
    A3 = "A3"
    A4_1 = "A4_1"
    A4_2 = "A4_2"
    B1 = "B1"
    B2 = "B2"
    B3 = "B3"
    B4 = "B4"
    B5 = "B5"
    B6 = "B6"
    C1 = "C1"
    C2 = "C2"
    X4_2 = "X4_2"
    CONTEXTO = "CONTEXTO"
    # Informational only
    NV8 = "NV8"
    XV8 = "XV8"
    DEVIATION = "DEVIATION"

    @property
    def fatal(self) -> bool:
        return self not in _INFORMATIONAL

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_INFORMATIONAL = frozenset({StatusCode.NV8, StatusCode.XV8, StatusCode.DEVIATION})

_DESCRIPTIONS = {
    StatusCode.P4: "invalid punycode in an 'xn--' label",
    StatusCode.V1: "label is not in Normalization Form C",
    StatusCode.V2: "hyphens in the third and fourth positions",
    StatusCode.V3: "label begins or ends with a hyphen",
    StatusCode.V4: "decoded label begins with 'xn--'",
    StatusCode.V5: "label contains a full stop",
    StatusCode.V6: "label begins with a combining mark",
    StatusCode.V7: "disallowed code point",
    StatusCode.U1: "ASCII code point outside [a-z0-9-] under STD3 rules",
    StatusCode.A3: "label cannot be encoded as punycode",
    StatusCode.A4_1: "domain name is empty or longer than 253 octets",
    StatusCode.A4_2: "label is empty or longer than 63 octets",
    StatusCode.B1: "bidi: label does not start with L, R or AL",
    StatusCode.B2: "bidi: RTL label contains a disallowed direction class",
    StatusCode.B3: "bidi: RTL label has an invalid ending",
    StatusCode.B4: "bidi: RTL label mixes European and Arabic-Indic numbers",
    StatusCode.B5: "bidi: LTR label contains a disallowed direction class",
    StatusCode.B6: "bidi: LTR label has an invalid ending",
    StatusCode.C1: "ZERO WIDTH NON-JOINER outside its joining context",
    StatusCode.C2: "ZERO WIDTH JOINER not preceded by a virama",
    StatusCode.X4_2: "empty label",
    StatusCode.CONTEXTO: "CONTEXTO rule violated",
    StatusCode.NV8: "code point is not valid under IDNA2008",
    StatusCode.XV8: "code point is excluded from IDNA2008",
    StatusCode.DEVIATION: "deviation character kept (nontransitional processing)",
}

_PUNYCODE_CODES = frozenset({StatusCode.P4, StatusCode.A3})


class StatusReporter:
    """Ordered, duplicate-free collection of status codes"""

    def __init__(self, codes: Iterable[StatusCode] = ()):
        self._codes: Dict[StatusCode, None] = {}
        self.extend(codes)

    def add(self, code: StatusCode) -> None:
        self._codes.setdefault(code, None)

    def extend(self, codes: Iterable[StatusCode]) -> None:
        for code in codes:
            self.add(code)

    @property
    def codes(self) -> Tuple[StatusCode, ...]:
        return tuple(self._codes)

    @property
    def fatal(self) -> bool:
        return any(code.fatal for code in self._codes)

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __iter__(self) -> Iterator[StatusCode]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __repr__(self):
        return f"<StatusReporter {[code.value for code in self._codes]}>"


class LabelResult:
    """Outcome of processing a single label"""

    def __init__(
        self,
        source: str,
        result: str,
        status: Sequence[StatusCode] = (),
        ascii: Optional[str] = None
    ):
        self.source = source
        self.result = result
        self.status = tuple(status)
        self.ascii = ascii

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> Tuple[StatusCode, ...]:
        return tuple(code for code in self.status if code.fatal)

    def with_status(self, codes: Iterable[StatusCode]) -> "LabelResult":
        """Copy with additional status codes appended"""
        reporter = StatusReporter(self.status)
        reporter.extend(codes)
        return LabelResult(self.source, self.result, reporter.codes, self.ascii)

    def __repr__(self):
        codes = ",".join(code.value for code in self.status)
        return f"<LabelResult {self.result!r} success={self.success} status=[{codes}]>"


class DomainResult:
    """
    Outcome of ToUnicode/ToASCII for a whole domain name.

    The result string is always filled in, even on failure; check
    `success` before treating it as a usable domain name.
    """

    def __init__(
        self,
        domain: str,
        result: str,
        labels: Sequence[LabelResult],
        status: Sequence[StatusCode]
    ):
        self.domain = domain
        self.result = result
        self.labels = tuple(labels)
        self.status = tuple(status)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> Tuple[StatusCode, ...]:
        return tuple(code for code in self.status if code.fatal)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(code.value for code in self.status)

    def raise_for_status(self) -> "DomainResult":
        """
        Raise if the conversion failed.

        Returns:
            self, so calls can be chained

        Raises:
            MappingError: If the first error is a disallowed code point
            PunycodeError: If the first error is a punycode failure
            ValidityError: For every other error
        """
        errors = self.errors
        if not errors:
            return self

        codes = [code.value for code in errors]
        first = errors[0]
        message = f"Cannot convert {self.domain!r}: {first.description} [{', '.join(codes)}]"
        if first is StatusCode.V7:
            raise MappingError(message, domain=self.domain, codes=codes)
        if first in _PUNYCODE_CODES:
            raise PunycodeError(message, code=first.value, domain=self.domain, codes=codes)
        raise ValidityError(message, domain=self.domain, codes=codes)

    def __repr__(self):
        return f"<DomainResult {self.result!r} success={self.success} status=[{','.join(self.tokens)}]>"
