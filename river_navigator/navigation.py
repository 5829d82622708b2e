"""Upstream and downstream navigation of a Network.

All navigation modes share a single traversal primitive that expands
segments in order of increasing along-path distance from the start
segment.  The modes differ only in which neighbors of a segment are
followed:

UT
  Upstream with tributaries: all upstream contributors.
UM
  Upstream mainstem: the single contributor chosen by the mainstem policy.
DM
  Downstream mainstem: the downstream segment, unless it is the minor
  path of a divergence.
DD
  Downstream with diversions: the downstream segment and any minor
  (diversion) downstream segment.

"""
from __future__ import annotations
from typing import Any, Callable, Iterable, List, Literal, Optional, Tuple

import itertools
import logging
import pandas as pd
import sortedcontainers

import river_navigator.config
import river_navigator.sources.standard_names as names
from river_navigator.network import Network, sortedIDs
from river_navigator.errors import UnknownSegmentError

Mode = Literal['UT', 'UM', 'DM', 'DD']
MODES = ('UT', 'UM', 'DM', 'DD')

Policy = List[Tuple[str, bool]]


def _traverse(network: Network,
              start: Any,
              neighbors: Callable[[Any], List[Any]],
              distance: Optional[float] = None) -> List[Any]:
    """The traversal primitive.

    Parameters
    ----------
    network : Network
      The network to traverse.
    start : Any
      ID of the segment to start from.
    neighbors : Callable
      Given a segment ID, returns the IDs to follow next, in a
      deterministic order.
    distance : float, optional
      If provided, a path is no longer expanded once its cumulative
      length, including the start segment, meets or exceeds distance.
      The segment at which this happens is included.

    Returns
    -------
    list
      IDs of the segments visited, in order of increasing along-path
      distance (or number of segments, if no distance is provided),
      with ties broken by the order in which they were found.
    """
    network.checkSegment(start)

    if distance is None:
        cost = lambda sid: 1
    else:
        if distance < 0:
            raise ValueError(f"Navigation distance must be non-negative, not {distance}")
        cost = network.length

    # frontier of (cost to the upstream/downstream end of the segment, tiebreak, ID)
    counter = itertools.count()
    frontier = sortedcontainers.SortedList()
    frontier.add((cost(start), next(counter), start))
    best = {start: cost(start)}

    visited = set()
    result = []
    while len(frontier) > 0:
        along, _, sid = frontier.pop(0)
        if sid in visited:
            continue
        visited.add(sid)
        result.append(sid)

        if distance is not None and along >= distance:
            continue

        for nid in neighbors(sid):
            if nid in visited:
                continue
            nalong = along + cost(nid)
            if nid not in best or nalong < best[nid]:
                best[nid] = nalong
                frontier.add((nalong, next(counter), nid))
    return result


def _sortByPolicy(network: Network, candidates: List[Any], policy: Policy) -> List[Any]:
    """Sorts candidates so that the mainstem choice is first.

    Keys are applied as successive stable sorts, from the least to the
    most significant.  Missing values always sort last, and the lowest
    ID is always the final tie-break.
    """
    candidates = sortedIDs(candidates)
    for column, descending in reversed(policy):
        if column == names.ID:
            values = dict((c, c) for c in candidates)
        elif column in network.df.columns:
            values = dict((c, network.df.at[c, column]) for c in candidates)
        else:
            logging.debug(f'  mainstem policy column "{column}" not in network, skipping')
            continue

        present = [c for c in candidates if not pd.isna(values[c])]
        missing = [c for c in candidates if pd.isna(values[c])]
        candidates = sorted(present, key=lambda c: values[c], reverse=descending) + missing
    return candidates


def mainstemContributor(network: Network,
                        sid: Any,
                        policy: Optional[Policy] = None) -> Optional[Any]:
    """The upstream contributor of sid that continues the mainstem, or None.

    Contributors through major links are preferred; contributors
    through minor (diversion) links are only considered if there are
    no others.
    """
    if policy is None:
        policy = river_navigator.config.getMainstemPolicy()

    candidates = network.upstreamOf(sid, include_minor=False)
    if len(candidates) == 0:
        candidates = network.upstreamOf(sid, include_minor=True)
    if len(candidates) == 0:
        return None
    return _sortByPolicy(network, candidates, policy)[0]


#
# The four navigation modes
#
def upstreamTributaries(network: Network,
                        start: Any,
                        distance: Optional[float] = None,
                        include_diversions: bool = True) -> List[Any]:
    """All segments upstream of start, including start and all tributaries."""
    return _traverse(network, start,
                     lambda sid: network.upstreamOf(sid, include_minor=include_diversions),
                     distance)


def upstreamMainstem(network: Network,
                     start: Any,
                     distance: Optional[float] = None,
                     policy: Optional[Policy] = None) -> List[Any]:
    """Segments on the mainstem upstream of start, including start.

    Parameters
    ----------
    network : Network
      The network to navigate.
    start : Any
      ID of the start segment.
    distance : float, optional
      Navigation distance cutoff, in units of segment length.
    policy : list of (str, bool), optional
      Ordered (column, descending) keys picking the mainstem
      contributor at each confluence.  Defaults to
      river_navigator.config.getMainstemPolicy(), which is stream
      order, then drainage area, then lowest ID.

    Returns
    -------
    list
      IDs from start going upstream.
    """
    if policy is None:
        policy = river_navigator.config.getMainstemPolicy()

    def _next(sid):
        nid = mainstemContributor(network, sid, policy)
        return [] if nid is None else [nid]

    return _traverse(network, start, _next, distance)


def downstreamMainstem(network: Network,
                       start: Any,
                       distance: Optional[float] = None) -> List[Any]:
    """Segments downstream of start, including start, stopping before any diversion."""
    def _next(sid):
        return [d for d in network.downstreamOf(sid, include_minor=False)
                if not network.isMinorPath(d)]

    return _traverse(network, start, _next, distance)


def downstreamWithDiversions(network: Network,
                             start: Any,
                             distance: Optional[float] = None) -> List[Any]:
    """Segments downstream of start, including start and all diversions."""
    return _traverse(network, start,
                     lambda sid: network.downstreamOf(sid, include_minor=True),
                     distance)


#
# Generic entry points
#
def traverse(network: Network,
             start: Any,
             direction: Literal['upstream', 'downstream'],
             include_diversions: bool = True,
             distance: Optional[float] = None,
             mainstem: bool = False,
             policy: Optional[Policy] = None) -> List[Any]:
    """Navigate from start in a given direction.

    Parameters
    ----------
    network : Network
      The network to navigate.
    start : Any
      ID of the start segment.
    direction : str
      One of 'upstream' or 'downstream'.
    include_diversions : bool, optional
      Downstream, whether to follow minor (diversion) paths.
      Upstream, whether to include contributors through minor links.
    distance : float, optional
      Navigation distance cutoff.
    mainstem : bool, optional
      Upstream only, follow the mainstem rather than all tributaries.
    policy : list of (str, bool), optional
      Mainstem policy, see upstreamMainstem().

    Returns
    -------
    list
      IDs of the segments found, including start.

    Raises
    ------
    UnknownSegmentError
      If start is not in the network.
    """
    if direction == 'upstream':
        if mainstem:
            return upstreamMainstem(network, start, distance, policy)
        return upstreamTributaries(network, start, distance, include_diversions)
    elif direction == 'downstream':
        if include_diversions:
            return downstreamWithDiversions(network, start, distance)
        return downstreamMainstem(network, start, distance)
    else:
        raise ValueError(
            f"Invalid navigation direction '{direction}', must be 'upstream' or 'downstream'")


def checkMode(mode: Any) -> str:
    """Normalizes a mode string to upper case, raising ValueError if it is not a mode."""
    if not isinstance(mode, str) or mode.upper() not in MODES:
        raise ValueError(f"Invalid navigation mode {mode!r}, must be one of {MODES}")
    return mode.upper()


def navigate(network: Network,
             start: Any,
             mode: Mode = 'UT',
             distance: Optional[float] = None,
             policy: Optional[Policy] = None) -> List[Any]:
    """Navigate from start using an NLDI-style mode string, one of UT, UM, DM, or DD."""
    mode = checkMode(mode)
    if mode == 'UT':
        return upstreamTributaries(network, start, distance)
    elif mode == 'UM':
        return upstreamMainstem(network, start, distance, policy)
    elif mode == 'DM':
        return downstreamMainstem(network, start, distance)
    else:
        return downstreamWithDiversions(network, start, distance)


def navigateMany(network: Network,
                 starts: Iterable[Any],
                 mode: Mode = 'UT',
                 distance: Optional[float] = None,
                 policy: Optional[Policy] = None) -> pd.DataFrame:
    """Navigate from each of a collection of start segments.

    A start segment that is not in the network is logged and skipped,
    so one bad ID does not abort the batch.

    Returns
    -------
    pd.DataFrame
      Long-form table with columns start_ID and ID, one row per
      (start, found segment) pair, in navigation order.
    """
    mode = checkMode(mode)
    starts = list(starts)
    logging.info(f"Navigating {mode} from {len(starts)} segments")
    rows_start = []
    rows_id = []
    missing = 0
    for start in starts:
        try:
            found = navigate(network, start, mode, distance, policy)
        except UnknownSegmentError as err:
            logging.warning(f"  ...skipping navigation: {err}")
            missing += 1
            continue
        rows_start.extend(itertools.repeat(start, len(found)))
        rows_id.extend(found)

    if missing > 0:
        logging.info(f"... {missing} of {len(starts)} start segments were not in the network")
    return pd.DataFrame({names.START: pd.Series(rows_start, dtype=object),
                         names.ID: pd.Series(rows_id, dtype=object)})
