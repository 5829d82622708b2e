"""Quantities accumulated along downstream links of a Network.

All functions here walk the network from its terminal segments
upstream along major links, so they require those links to be
acyclic.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional

import logging
import numpy as np
import pandas as pd

import river_navigator.config
import river_navigator.sources.standard_names as names
from river_navigator.network import Network, sortedIDs
from river_navigator.errors import CyclicNetworkError

_IN_PROGRESS = 1
_DONE = 2


def checkAcyclic(network: Network) -> None:
    """Raises CyclicNetworkError if major downstream links form a cycle.

    Each segment has at most one downstream segment, so it suffices to
    walk downstream from every segment, marking segments in progress,
    until reaching a terminal or a segment already done.  Reaching a
    segment still in progress means the walk has looped.
    """
    state: Dict[Any, int] = dict()
    for sid in sortedIDs(network.ids):
        path = []
        node = sid
        while node is not None and node not in state:
            state[node] = _IN_PROGRESS
            path.append(node)
            node = network.downstream[node]

        if node is not None and state[node] == _IN_PROGRESS:
            cycle = path[path.index(node):]
            logging.debug(f"  found cycle: {cycle}")
            raise CyclicNetworkError(cycle)

        for p in path:
            state[p] = _DONE


def upstreamOrder(network: Network, include_boundary_exits: bool = True) -> List[Any]:
    """Segment IDs ordered so that every segment comes after its downstream segment.

    Terminals are processed in sorted order, and upstream contributors
    in sorted order, so the ordering is reproducible.  Segments that do
    not drain to a terminal (of the requested kind) are not included.
    """
    checkAcyclic(network)
    order = []
    for terminal in network.terminals(include_boundary_exits):
        stack = [terminal]
        while len(stack) > 0:
            sid = stack.pop()
            order.append(sid)
            stack.extend(reversed(sortedIDs(network.upstream[sid])))
    return order


def computePathLengths(network: Network,
                       include_boundary_exits: Optional[bool] = None) -> pd.Series:
    """Computes, for every segment, the distance along downstream links to its outlet.

    An outlet has pathlength 0, and a segment with downstream segment
    D has pathlength(D) + length.  Each disconnected subnetwork is
    measured to its own outlet.

    Parameters
    ----------
    network : Network
      The network to measure.
    include_boundary_exits : bool, optional
      If True, a segment whose downstream segment is outside of the
      modeled area is treated like an outlet.  If False, it and
      everything upstream of it get NaN.  Defaults to the
      include_boundary_exits config option.

    Returns
    -------
    pd.Series
      Pathlength, indexed by segment ID, in the order of the network's
      segment table.

    Raises
    ------
    CyclicNetworkError
      If major downstream links form a cycle.
    """
    if include_boundary_exits is None:
        include_boundary_exits = river_navigator.config.getIncludeBoundaryExits()

    logging.info("Computing pathlengths")
    pathlengths: Dict[Any, float] = dict()
    for sid in upstreamOrder(network, include_boundary_exits):
        down = network.downstream[sid]
        if down is None:
            pathlengths[sid] = 0.0
        else:
            pathlengths[sid] = pathlengths[down] + network.length(sid)

    if len(pathlengths) < len(network):
        logging.info(f"... {len(network) - len(pathlengths)} segments do not drain to an outlet")
    return pd.Series([pathlengths.get(sid, np.nan) for sid in network.ids],
                     index=network.ids, dtype=float, name=names.PATHLENGTH)


def accumulate(network: Network,
               to_accumulate: str,
               op: Callable = sum,
               name: Optional[str] = None) -> pd.Series:
    """Accumulates a property over each segment and everything upstream of it.

    Only major links are followed, so flow through a diversion is not
    counted twice.

    Parameters
    ----------
    network : Network
      The network to accumulate over.
    to_accumulate : str
      Name of the property to accumulate, e.g. catchment_area.
    op : Callable, optional
      Operation to use for accumulation, applied to a list of the
      segment's own value and the accumulated values of its upstream
      contributors.  Defaults to sum.
    name : str, optional
      Name of the returned Series, defaults to to_accumulate.

    Returns
    -------
    pd.Series
      The accumulated value, indexed by segment ID.
    """
    if to_accumulate not in network.df.columns:
        raise KeyError(f'Cannot accumulate "{to_accumulate}", not a property of the network')

    accumulated: Dict[Any, Any] = dict()
    for sid in reversed(upstreamOrder(network, True)):
        vals = [network.df.at[sid, to_accumulate]]
        vals.extend(accumulated[u] for u in sortedIDs(network.upstream[sid]))
        accumulated[sid] = op(vals)

    result = pd.Series([accumulated.get(sid, np.nan) for sid in network.ids],
                       index=network.ids, name=name if name is not None else to_accumulate)
    return result


def assignOrder(network: Network) -> pd.Series:
    """Working from leaves to trunk, compute Strahler stream order.

    Leaves have order 1.  At a confluence, the order is the maximum
    order of the contributors, plus one if two or more contributors
    share that maximum.  Only major links are followed.
    """
    order: Dict[Any, int] = dict()
    for sid in reversed(upstreamOrder(network, True)):
        child_orders = [order[u] for u in network.upstream[sid]]
        if len(child_orders) == 0:
            order[sid] = 1
        else:
            top = max(child_orders)
            order[sid] = top + 1 if child_orders.count(top) > 1 else top

    return pd.Series([order.get(sid, pd.NA) for sid in network.ids],
                     index=network.ids, dtype='Int64', name=names.ORDER)


def computeLevels(network: Network) -> pd.Series:
    """Number of downstream links between each segment and its terminal segment."""
    levels: Dict[Any, int] = dict()
    for sid in upstreamOrder(network, True):
        down = network.downstream[sid]
        levels[sid] = 0 if down is None else levels[down] + 1
    return pd.Series([levels.get(sid, pd.NA) for sid in network.ids],
                     index=network.ids, dtype='Int64', name=names.LEVEL)
