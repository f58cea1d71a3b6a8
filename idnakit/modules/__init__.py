from idnakit.modules.base import BaseProcessor, Direction
from idnakit.modules.label import LabelProcessor
from idnakit.modules.domain import DomainProcessor
from idnakit.modules.status import StatusCode, StatusReporter, LabelResult, DomainResult

__all__ = [
    'BaseProcessor',
    'Direction',
    'LabelProcessor',
    'DomainProcessor',
    'StatusCode',
    'StatusReporter',
    'LabelResult',
    'DomainResult'
]
