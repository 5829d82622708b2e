"""These high-level functions attempt to "do what the user means."
They group other, lower-level functions into common sets of
operations.  If the user needs to deviate from these, they can then
call the lower level functions.

This top level module provides functionality for building a flowline
network from a table of segments, navigating it upstream and
downstream, measuring distances to its outlets, and attaching those
results to segment and gage tables.

Data acquisition is not done here: segment tables are expected to come
from elsewhere (e.g. pynhd), and gages are expected to already be
snapped to a segment.

"""
from __future__ import annotations

__version__ = '0.1.0'

from typing import Any, Iterable, List, Literal, Optional
import logging
import pandas as pd

import river_navigator.config
import river_navigator.sources.standard_names as names
import river_navigator.sources.nhdplus

import river_navigator.network
from river_navigator.network import Network, createNetwork
import river_navigator.navigation
from river_navigator.navigation import navigate, navigateMany, traverse, \
    upstreamTributaries, upstreamMainstem, downstreamMainstem, downstreamWithDiversions
import river_navigator.pathlength
from river_navigator.pathlength import computePathLengths
import river_navigator.join

from river_navigator.errors import RiverNavigatorError, UnknownSegmentError, \
    MalformedNetworkError, CyclicNetworkError, NonUniqueKeyError


def getNetwork(segments : pd.DataFrame,
               dataset_name : Optional[str] = None,
               method : Literal['downstream_id', 'hydroseq'] = 'downstream_id',
               clip : bool = False,
               boundary_exits : Optional[Iterable[Any]] = None) -> Network:
    """Builds a network from a flowline table, standardizing its column names.

    Parameters
    ----------
    segments : pd.DataFrame
        Flowline table.
    dataset_name : str, optional
        If provided, the NHD product segments came from, one of
        'NHDPlus MR v2.1', 'NHDPlus HR', or 'NHD MR'; native column
        names are converted to standard names.
    method : str, optional
        How to form downstream links, see network.createNetwork().
    clip : bool, optional
        If True, the table was clipped to an area of interest, and all
        downstream links leaving it are boundary exits.
    boundary_exits : iterable, optional
        Specific downstream IDs that are boundary exits.

    Returns
    -------
    out : Network
    """
    if dataset_name is not None:
        segments = river_navigator.sources.nhdplus.addStandardNames(segments, dataset_name)
    return createNetwork(segments, method,
                         boundary_exits=boundary_exits,
                         allow_boundary_exits=clip)


def getSegmentsWithPathLengths(network : Network,
                               include_boundary_exits : Optional[bool] = None) -> pd.DataFrame:
    """The network's segment table with pathlength, level, and (if missing) stream order added."""
    df = network.df.copy()
    df[names.PATHLENGTH] = river_navigator.pathlength.computePathLengths(network,
                                                                         include_boundary_exits)
    df[names.LEVEL] = river_navigator.pathlength.computeLevels(network)
    if names.ORDER not in df.columns:
        df[names.ORDER] = river_navigator.pathlength.assignOrder(network)
    return df


def getGageAttributes(gages : pd.DataFrame,
                      network : Network,
                      reach_ID_column : str = names.REACH_ID,
                      columns : Optional[List[str]] = None) -> pd.DataFrame:
    """Adds the pathlength, stream order, and drainage area of each gage's segment.

    Parameters
    ----------
    gages : pd.DataFrame
        Gages, with a column of the ID of the segment each is snapped to.
    network : Network
        The network the gages are on.
    reach_ID_column : str, optional
        Name of the column holding the segment ID.
    columns : list of str, optional
        Segment properties to add.  Defaults to pathlength and whichever
        of stream order and drainage area are available.

    Returns
    -------
    out : pd.DataFrame
        gages, with segment properties added.  Gages on segments that
        are not in the network get pd.NA.
    """
    segments = getSegmentsWithPathLengths(network)
    if columns is None:
        columns = [c for c in [names.PATHLENGTH, names.ORDER, names.DRAINAGE_AREA]
                   if c in segments.columns]

    logging.info(f"Joining {columns} to {len(gages)} gages")
    secondary = pd.DataFrame(segments[columns])
    secondary[names.ID] = segments.index.to_numpy(dtype=object)
    return river_navigator.join.join(gages, secondary, reach_ID_column, right_key=names.ID)


def getGageNavigation(gages : pd.DataFrame,
                      network : Network,
                      mode : river_navigator.navigation.Mode = 'UT',
                      distance : Optional[float] = None,
                      reach_ID_column : str = names.REACH_ID) -> pd.DataFrame:
    """For each gage, the segments found by navigating from its segment.

    See river_navigator.join.joinNavigation().
    """
    return river_navigator.join.joinNavigation(gages, network, reach_ID_column, mode, distance)
