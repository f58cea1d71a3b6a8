from typing import List, Optional, Union
import logging

from idnakit.core.config import IDNAOptions
from idnakit.core.errors import IDNAError
from idnakit.core.table import MappingTable
from idnakit.core.utils import is_valid_domain_length, is_valid_label_length, split_labels
from idnakit.modules.base import BaseProcessor, Direction
from idnakit.modules.label import LabelProcessor, is_bidi_domain
from idnakit.modules.status import DomainResult, LabelResult, StatusCode, StatusReporter


class DomainProcessor(BaseProcessor):
    """
    ToUnicode / ToASCII for whole domain names.

    The domain is mapped and normalized as one string (some mappings
    produce a full stop), split into labels, and each label is handed to
    the LabelProcessor. The bidi rule, empty-label and DNS length checks
    need every label and run here.

    Example:
        processor = DomainProcessor(default_table(), PROFILES["default"])
        processor.to_ascii("Bücher.example").result  # 'xn--bcher-kva.example'
    """

    def __init__(
        self,
        table: MappingTable,
        options: IDNAOptions,
        logger: Optional[logging.Logger] = None,
        label_processor: Optional[LabelProcessor] = None
    ):
        super().__init__(table, options, logger)
        self.label_processor = label_processor or LabelProcessor(table, options)

    @property
    def name(self) -> str:
        return "domain"

    def to_unicode(self, domain: Union[str, bytes]) -> DomainResult:
        return self.run(domain, Direction.TO_UNICODE)

    def to_ascii(self, domain: Union[str, bytes]) -> DomainResult:
        return self.run(domain, Direction.TO_ASCII)

    def pre_execute(self, value: Union[str, bytes]) -> str:
        """Accept UTF-8 bytes as well as str"""
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as e:
                raise IDNAError(f"Domain is not valid UTF-8: {e}") from e
        if not isinstance(value, str):
            raise TypeError(f"Domain must be str or bytes, not {type(value).__name__}")
        return value

    def execute(self, domain: str, direction: Direction = Direction.TO_UNICODE) -> DomainResult:
        """
        Convert a domain name.

        Args:
            domain: Domain name (e.g., 'Bücher.example', 'xn--bcher-kva.example')
            direction: TO_UNICODE or TO_ASCII

        Returns:
            DomainResult; labels that fail do not stop the others
        """
        mapped = self.label_processor.map_text(domain)
        labels = [
            self.label_processor.run(label, direction, premapped=True)
            for label in split_labels(mapped)
        ]

        if self.options.check_bidi:
            labels = self._check_bidi(labels)
        if direction is Direction.TO_UNICODE:
            labels = self._check_empty_labels(labels)
            result = ".".join(label.result for label in labels)
            domain_codes: List[StatusCode] = []
        else:
            result, labels, domain_codes = self._assemble_ascii(labels)

        reporter = StatusReporter()
        for label in labels:
            reporter.extend(label.status)
        reporter.extend(domain_codes)
        return DomainResult(domain=domain, result=result, labels=labels, status=reporter.codes)

    def _check_bidi(self, labels: List[LabelResult]) -> List[LabelResult]:
        if not is_bidi_domain(label.result for label in labels):
            return labels
        return [
            label.with_status(self.label_processor.check_bidi(label.result))
            for label in labels
        ]

    @staticmethod
    def _check_empty_labels(labels: List[LabelResult]) -> List[LabelResult]:
        # A trailing empty label is the root, unless it is the only label
        checked = []
        last = len(labels) - 1
        for i, label in enumerate(labels):
            if not label.result and not (i == last and i > 0):
                label = label.with_status([StatusCode.X4_2])
            checked.append(label)
        return checked

    def _assemble_ascii(self, labels: List[LabelResult]):
        parts = [label.ascii if label.ascii is not None else label.result for label in labels]
        result = ".".join(parts)
        if not self.options.verify_dns_length:
            return result, labels, []

        checked = []
        for label, part in zip(labels, parts):
            if not is_valid_label_length(part):
                label = label.with_status([StatusCode.A4_2])
            checked.append(label)

        domain_codes = []
        if not is_valid_domain_length(result):
            domain_codes.append(StatusCode.A4_1)
        return result, checked, domain_codes
