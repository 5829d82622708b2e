"""Exceptions raised by the network builder, navigation, and join functions.

These are structural faults in the input data, not transient failures,
so nothing here is ever retried.
"""
from __future__ import annotations
from typing import Any, Iterable, List, Optional


class RiverNavigatorError(Exception):
    """Base class of all errors raised by river_navigator."""


class UnknownSegmentError(RiverNavigatorError, KeyError):
    """A query referenced a segment ID that is not in the network.

    Parameters
    ----------
    segment : Any
      The missing segment ID.
    """
    def __init__(self, segment: Any, message: Optional[str] = None) -> None:
        self.segment = segment
        if message is None:
            message = f'Segment {segment!r} is not in the network'
        super(UnknownSegmentError, self).__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class MalformedNetworkError(RiverNavigatorError, ValueError):
    """The segment table has dangling or inconsistent topology.

    Parameters
    ----------
    message : str
      Error message.
    segments : list, optional
      The offending segment IDs.
    """
    def __init__(self, message: str, segments: Optional[Iterable[Any]] = None) -> None:
        self.segments: List[Any] = list(segments) if segments is not None else []
        super(MalformedNetworkError, self).__init__(message)


class CyclicNetworkError(RiverNavigatorError, ValueError):
    """Downstream links form a cycle, so distances to the outlet are undefined."""
    def __init__(self, cycle: Iterable[Any]) -> None:
        self.cycle = list(cycle)
        super(CyclicNetworkError, self).__init__(
            f'Downstream links form a cycle through segments {self.cycle!r}')


class NonUniqueKeyError(RiverNavigatorError, ValueError):
    """The join key is not unique on the secondary table."""
    def __init__(self, key: str, duplicates: Iterable[Any]) -> None:
        self.key = key
        self.duplicates = list(duplicates)
        super(NonUniqueKeyError, self).__init__(
            f'Join key "{key}" is not unique on the secondary table, duplicated values: '
            f'{self.duplicates[:10]!r}')
