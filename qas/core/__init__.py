"""Core functionality module."""

from qas.core.constants import RequestLimits
from qas.core.inflight import InFlightGuard
from qas.core.keys import AggregateKey, BatchKey

__all__ = [
    "AggregateKey",
    "BatchKey",
    "InFlightGuard",
    "RequestLimits",
]
