"""Public interface re-exports for ats_gate_core."""

from ats_gate_core.interfaces.requirements_cache import RequirementsCache
from ats_gate_core.interfaces.sink import EventSink
from ats_gate_core.interfaces.soft_fit import SoftFitProvider

__all__ = [
    "EventSink",
    "RequirementsCache",
    "SoftFitProvider",
]
