from typing import Iterable, List, Optional

from idnakit.core.errors import PunycodeError
from idnakit.core.punycode import ACE_PREFIX, from_ace, to_ace
from idnakit.core.table import Idna2008Status, Kind
from idnakit.core.unicode import bidi_class, is_mark, is_nfc, is_virama, joining_type, nfc, script
from idnakit.modules.base import BaseProcessor, Direction
from idnakit.modules.status import LabelResult, StatusCode, StatusReporter

ZWNJ = "\u200c"
ZWJ = "\u200d"
MIDDLE_DOT = "\u00b7"
GREEK_KERAIA = "\u0375"
HEBREW_GERESH = "\u05f3"
HEBREW_GERSHAYIM = "\u05f4"
KATAKANA_MIDDLE_DOT = "\u30fb"

STD3_ASCII = frozenset("abcdefghijklmnopqrstuvwxyz0123456789-")

# RFC 5893 bidi classes
RTL_CLASSES = frozenset({"R", "AL", "AN"})
RTL_ALLOWED = frozenset({"R", "AL", "AN", "EN", "ES", "CS", "ET", "ON", "BN", "NSM"})
RTL_ENDINGS = frozenset({"R", "AL", "EN", "AN"})
LTR_ALLOWED = frozenset({"L", "EN", "ES", "CS", "ET", "ON", "BN", "NSM"})
LTR_ENDINGS = frozenset({"L", "EN"})


def is_bidi_domain(labels: Iterable[str]) -> bool:
    """True if any label has a character of bidi class R, AL or AN"""
    return any(bidi_class(ch) in RTL_CLASSES for label in labels for ch in label)


def _is_arabic_indic_digit(ch: str) -> bool:
    return "\u0660" <= ch <= "\u0669"


def _is_extended_arabic_indic_digit(ch: str) -> bool:
    return "\u06f0" <= ch <= "\u06f9"


class LabelProcessor(BaseProcessor):
    """
    Processes one domain label: mapping, punycode conversion, validity
    criteria, CONTEXTJ/CONTEXTO rules and ACE encoding.

    The bidi rule depends on the other labels of the domain, so it is
    exposed separately through check_bidi().
    """

    @property
    def name(self) -> str:
        return "label"

    # ========================================
    # MAPPING
    # ========================================

    def map_text(self, text: str, transitional: Optional[bool] = None) -> str:
        """
        Apply the mapping table and NFC to a label or a whole domain.

        Disallowed code points are kept so validation can report them.

        Args:
            text: Raw input
            transitional: Map deviation characters; defaults to options.transitional

        Returns:
            Mapped, NFC-normalized text
        """
        if transitional is None:
            transitional = self.options.transitional

        if text.isascii():
            return text.lower()

        output = []
        for ch in text:
            entry = self.table.classify(ch)
            kind = entry.kind
            if kind is Kind.VALID or kind is Kind.DISALLOWED:
                output.append(ch)
            elif kind is Kind.MAPPED:
                replacement = entry.replacement
                if transitional:
                    # ẞ maps to ß, which is itself a deviation
                    replacement = "".join(self._deviate(c) for c in replacement)
                output.append(replacement)
            elif kind is Kind.DEVIATION:
                output.append(entry.replacement if transitional else ch)
        return nfc("".join(output))

    def _deviate(self, ch: str) -> str:
        entry = self.table.classify(ch)
        return entry.replacement if entry.kind is Kind.DEVIATION else ch

    # ========================================
    # PROCESSING
    # ========================================

    def execute(
        self,
        label: str,
        direction: Direction = Direction.TO_UNICODE,
        transitional: Optional[bool] = None,
        premapped: bool = False
    ) -> LabelResult:
        """
        Convert and validate a single label.

        Args:
            label: Label text, without separators
            direction: TO_UNICODE, or TO_ASCII to also produce the ACE form
            transitional: Override options.transitional
            premapped: The label already went through map_text()

        Returns:
            LabelResult with the Unicode form, the ACE form (TO_ASCII only)
            and every status code collected
        """
        options = self.options
        if transitional is None:
            transitional = options.transitional
        if not premapped:
            label = self.map_text(label, transitional)

        reporter = StatusReporter()
        result = label
        validate = True

        if label.startswith(ACE_PREFIX):
            try:
                result = from_ace(label)
            except PunycodeError as e:
                if not options.ignore_invalid_punycode:
                    self.logger.debug(f"Cannot decode {label!r}: {e}")
                    reporter.add(StatusCode.P4)
                    validate = False
            else:
                # Decoded labels are always validated nontransitionally
                transitional = False
                if not options.ignore_invalid_punycode and (not result or result.isascii()):
                    reporter.add(StatusCode.P4)

        if validate and result:
            reporter.extend(self.validate(result, transitional))

        ascii_label = None
        if direction is Direction.TO_ASCII:
            if result.isascii():
                ascii_label = result
            else:
                try:
                    ascii_label = to_ace(result)
                except PunycodeError as e:
                    self.logger.debug(f"Cannot encode {result!r}: {e}")
                    reporter.add(StatusCode.A3)

        return LabelResult(source=label, result=result, status=reporter.codes, ascii=ascii_label)

    # ========================================
    # VALIDATION
    # ========================================

    def validate(self, label: str, transitional: bool = False) -> List[StatusCode]:
        """
        Check a non-empty, mapped label against the validity criteria.

        Every check runs, so the returned list names every problem.

        Returns:
            Status codes in check order (fatal and informational)
        """
        options = self.options
        codes = []

        if not is_nfc(label):
            codes.append(StatusCode.V1)
        if options.check_hyphens:
            if label[2:4] == "--":
                codes.append(StatusCode.V2)
            if label.startswith("-") or label.endswith("-"):
                codes.append(StatusCode.V3)
        if label.startswith(ACE_PREFIX) and not options.ignore_invalid_punycode:
            codes.append(StatusCode.V4)
        if "." in label:
            codes.append(StatusCode.V5)
        if is_mark(label[0]):
            codes.append(StatusCode.V6)

        codes.extend(self._check_codepoints(label, transitional))

        if options.check_joiners:
            codes.extend(self._check_joiners(label))
        if options.check_contexto and self._violates_contexto(label):
            codes.append(StatusCode.CONTEXTO)
        return codes

    def _check_codepoints(self, label: str, transitional: bool) -> List[StatusCode]:
        codes = []
        for ch in label:
            entry = self.table.classify(ch)
            kind = entry.kind
            if kind is Kind.VALID:
                if entry.status is Idna2008Status.NV8:
                    codes.append(StatusCode.NV8)
                elif entry.status is Idna2008Status.XV8:
                    codes.append(StatusCode.XV8)
            elif kind is Kind.DEVIATION and not transitional:
                codes.append(StatusCode.DEVIATION)
            else:
                codes.append(StatusCode.V7)

            if self.options.use_std3 and ch.isascii() and ch not in STD3_ASCII:
                codes.append(StatusCode.U1)
        return codes

    def _check_joiners(self, label: str) -> List[StatusCode]:
        codes = []
        for i, ch in enumerate(label):
            if ch == ZWNJ:
                if i > 0 and is_virama(label[i - 1]):
                    continue
                if not self._zwnj_in_context(label, i):
                    codes.append(StatusCode.C1)
            elif ch == ZWJ:
                if i == 0 or not is_virama(label[i - 1]):
                    codes.append(StatusCode.C2)
        return codes

    @staticmethod
    def _zwnj_in_context(label: str, i: int) -> bool:
        # (L|D) T* ZWNJ T* (R|D)
        j = i - 1
        while j >= 0 and joining_type(label[j]) == "T":
            j -= 1
        if j < 0 or joining_type(label[j]) not in ("L", "D"):
            return False

        j = i + 1
        while j < len(label) and joining_type(label[j]) == "T":
            j += 1
        return j < len(label) and joining_type(label[j]) in ("R", "D")

    @staticmethod
    def _violates_contexto(label: str) -> bool:
        last = len(label) - 1
        for i, ch in enumerate(label):
            if ch == MIDDLE_DOT:
                if not (0 < i < last and label[i - 1] == "l" and label[i + 1] == "l"):
                    return True
            elif ch == GREEK_KERAIA:
                if i == last or script(label[i + 1]) != "Greek":
                    return True
            elif ch in (HEBREW_GERESH, HEBREW_GERSHAYIM):
                if i == 0 or script(label[i - 1]) != "Hebrew":
                    return True
            elif ch == KATAKANA_MIDDLE_DOT:
                if not any(script(c) in ("Hiragana", "Katakana", "Han") for c in label):
                    return True

        if any(_is_arabic_indic_digit(c) for c in label):
            return any(_is_extended_arabic_indic_digit(c) for c in label)
        return False

    # ========================================
    # BIDI
    # ========================================

    @staticmethod
    def check_bidi(label: str) -> List[StatusCode]:
        """
        RFC 5893 bidi rule for one label of a bidi domain name.

        A label failing B1 has no direction, so no other rule is checked.

        Returns:
            B1-B6 status codes; empty when the label passes
        """
        if not label:
            return []

        classes = [bidi_class(ch) for ch in label]
        rtl = classes[0] in ("R", "AL")
        if not rtl and classes[0] != "L":
            return [StatusCode.B1]

        codes = []
        ending = next((c for c in reversed(classes) if c != "NSM"), None)
        if rtl:
            if any(c not in RTL_ALLOWED for c in classes):
                codes.append(StatusCode.B2)
            if ending not in RTL_ENDINGS:
                codes.append(StatusCode.B3)
            if "EN" in classes and "AN" in classes:
                codes.append(StatusCode.B4)
        else:
            if any(c not in LTR_ALLOWED for c in classes):
                codes.append(StatusCode.B5)
            if ending not in LTR_ENDINGS:
                codes.append(StatusCode.B6)
        return codes
