"""Module for building a flowline network from a table of segments.

A Network is an index over a DataFrame of segments.  Segments are
identified by the index of the DataFrame, and the topology is stored
as ID --> ID mappings rather than linked nodes.  Note that this module
knows how to work with the following properties, which are expected
to be spelled this way (see river_navigator.sources.standard_names) if
they exist.  Only the index and downstream_ID MUST exist.

index
  Must be the segment ID, unique.
downstream_ID
  ID of the downstream segment.  Null, or one of the configured
  outlet values, indicates an outlet.
downstream_minor_ID
  ID of the downstream segment of a minor (diversion) path leaving
  this segment.
boundary_exit : bool
  If True, the downstream_ID of this segment intentionally refers to a
  segment outside of the modeled area.
length : double
  Length of the segment, in a fixed unit (km for NHDPlus).
divergence : int
  0 for no divergence, 1 for the main path, 2 for the minor path.
stream_order : int
  See documentation for NHDPlus
drainage_area_sqkm : double
  Total upstream drainage area.

hydroseq : int
  See documentation for NHDPlus
dnhydroseq : int
  See documentation for NHDPlus

"""
from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Literal, Optional, Set

import logging
import numpy as np
import pandas as pd
import geopandas as gpd

import river_navigator.config
import river_navigator.sources.standard_names as names
from river_navigator.errors import MalformedNetworkError, UnknownSegmentError


def sortedIDs(ids: Iterable[Any]) -> List[Any]:
    """Sort segment IDs, falling back to string order for mixed types."""
    ids = list(ids)
    try:
        return sorted(ids)
    except TypeError:
        return sorted(ids, key=str)


class Network:
    """An immutable index of the upstream/downstream links of a set of segments.

    Do not mutate the DataFrame after construction; a Network is built
    once from a snapshot of segment attributes and all results are
    derived from it.
    """
    def __init__(self,
                 df: pd.DataFrame,
                 boundary_exits: Optional[Iterable[Any]] = None,
                 allow_boundary_exits: bool = False,
                 outlet_values: Optional[Iterable[Any]] = None):
        """Builds the forward and reverse indices.

        Parameters
        ----------
        df : pd.DataFrame or gpd.GeoDataFrame
          Table of segments.  If it has an ID column, that column is
          used as the index, otherwise the index is used as the ID.
          The table is copied.
        boundary_exits : iterable, optional
          Downstream IDs, absent from the table, that are intentional
          exits from the modeled area.
        allow_boundary_exits : bool, optional
          If True, every downstream ID absent from the table is treated
          as a boundary exit instead of an error.  Useful for networks
          clipped to an area of interest.
        outlet_values : iterable, optional
          Downstream IDs that mean "no downstream segment".  Defaults
          to river_navigator.config.getOutletValues().

        Raises
        ------
        MalformedNetworkError
          If IDs are duplicated, the downstream_ID column is missing,
          lengths are negative, or a downstream ID is dangling.
        """
        if outlet_values is None:
            outlet_values = river_navigator.config.getOutletValues()
        self._outlet_values = set(outlet_values)
        boundary_exits = set() if boundary_exits is None else set(boundary_exits)

        self.df = self._prepareDataFrame(df)
        self._canonical = dict((sid, sid) for sid in self.df.index)
        logging.info(f"Building network of {len(self.df)} segments")

        # forward and reverse indices, for major and minor links
        self.downstream: Dict[Any, Any] = dict()
        self.downstream_minor: Dict[Any, Any] = dict()
        self.upstream: Dict[Any, Set[Any]] = dict((sid, set()) for sid in self.df.index)
        self.upstream_minor: Dict[Any, Set[Any]] = dict((sid, set()) for sid in self.df.index)

        # segments whose downstream target leaves the modeled area, ID --> target
        self.boundary_exits: Dict[Any, Any] = dict()

        flagged = self.df[names.BOUNDARY_EXIT].fillna(False).astype(bool) \
            if names.BOUNDARY_EXIT in self.df else pd.Series(False, index=self.df.index)

        dangling = []
        for sid, target in zip(self.df.index, self.df[names.DOWNSTREAM_ID]):
            target = self._normalizeTarget(target)
            if target is not None and target not in self.upstream:
                if flagged[sid] or target in boundary_exits or allow_boundary_exits:
                    logging.debug(f"  segment {sid} exits the network to {target}")
                    self.boundary_exits[sid] = target
                    target = None
                else:
                    dangling.append((sid, target))
                    continue

            self.downstream[sid] = target
            if target is not None:
                self.upstream[target].add(sid)

        if names.DOWNSTREAM_MINOR_ID in self.df:
            for sid, target in zip(self.df.index, self.df[names.DOWNSTREAM_MINOR_ID]):
                target = self._normalizeTarget(target)
                if target is not None and target not in self.upstream:
                    if flagged[sid] or target in boundary_exits or allow_boundary_exits:
                        logging.debug(f"  segment {sid} diverts out of the network to {target}")
                        target = None
                    else:
                        dangling.append((sid, target))
                        continue
                self.downstream_minor[sid] = target
                if target is not None:
                    self.upstream_minor[target].add(sid)
        else:
            self.downstream_minor = dict((sid, None) for sid in self.df.index)

        if len(dangling) > 0:
            for sid, target in dangling:
                logging.debug(f"  segment {sid} has dangling downstream reference {target}")
            raise MalformedNetworkError(
                f"{len(dangling)} segments reference downstream segments that are not in the "
                f"network, e.g. {dangling[0][0]!r} --> {dangling[0][1]!r}.  Flag these as "
                "boundary exits if they intentionally leave the modeled area.",
                [sid for sid, _ in dangling])

        logging.info(f"... found {len(self.outlets())} outlets and {len(self.boundary_exits)} "
                     "boundary exits")

    def _prepareDataFrame(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        if names.ID in df.columns:
            df = df.set_index(names.ID, drop=False)
        else:
            df[names.ID] = df.index
        # an index level named like a column makes merges ambiguous
        df.index.name = None

        if df.index.has_duplicates:
            dups = df.index[df.index.duplicated()].unique()
            raise MalformedNetworkError(f"Segment IDs are not unique, e.g. {dups[0]!r}", dups)

        if names.DOWNSTREAM_ID not in df.columns:
            raise MalformedNetworkError(
                f'Segment table is missing the required "{names.DOWNSTREAM_ID}" column')

        if names.LENGTH not in df.columns and isinstance(df, gpd.GeoDataFrame) \
           and df.geometry.name in df.columns:
            if df.crs is not None and df.crs.is_geographic:
                logging.warning("Computing segment lengths from geometry in a geographic CRS, "
                                "lengths will be in degrees.")
            df[names.LENGTH] = df.geometry.length

        if names.LENGTH in df.columns:
            lengths = df[names.LENGTH]
            bad = df.index[lengths.isna() | (lengths < 0)]
            if len(bad) > 0:
                raise MalformedNetworkError(
                    f"Segment lengths must be non-negative, found {len(bad)} invalid lengths, "
                    f"e.g. on segment {bad[0]!r}", bad)
        return df

    def _normalizeTarget(self, target: Any) -> Any:
        if pd.isna(target):
            return None
        if isinstance(target, np.generic):
            target = target.item()
        if target in self._canonical:
            # e.g. 2.0 read from a float column refers to segment 2
            return self._canonical[target]
        if target in self._outlet_values:
            return None
        return target

    #
    # Container protocol
    #
    def __len__(self) -> int:
        return len(self.df)

    def __contains__(self, sid: Any) -> bool:
        return sid in self.upstream

    def __iter__(self) -> Iterator[Any]:
        return iter(self.df.index)

    def __getitem__(self, sid: Any) -> pd.Series:
        """The row of properties of a segment."""
        self.checkSegment(sid)
        return self.df.loc[sid]

    def checkSegment(self, sid: Any) -> None:
        """Raises UnknownSegmentError if sid is not in the network."""
        if sid not in self.upstream:
            raise UnknownSegmentError(sid)

    def get(self, sid: Any, name: str, default: Any = None) -> Any:
        """Faster/preferred getter for a single property of a segment."""
        if name not in self.df.columns:
            return default
        return self.df.at[sid, name]

    @property
    def ids(self) -> pd.Index:
        return self.df.index

    #
    # Topology queries
    #
    def hasLengths(self) -> bool:
        return names.LENGTH in self.df.columns

    def length(self, sid: Any) -> float:
        """Length of a segment."""
        if not self.hasLengths():
            raise MalformedNetworkError(
                f'Segment table has no "{names.LENGTH}" column or geometry to compute it from')
        return float(self.df.at[sid, names.LENGTH])

    def isMinorPath(self, sid: Any) -> bool:
        """Is this segment the minor path of a divergence?"""
        div = self.get(sid, names.DIVERGENCE)
        return div is not None and not pd.isna(div) and int(div) == names.DIVERGENCE_MINOR

    def downstreamOf(self, sid: Any, include_minor: bool = False) -> List[Any]:
        """Segments directly downstream of sid, the major link first."""
        self.checkSegment(sid)
        res = []
        if self.downstream[sid] is not None:
            res.append(self.downstream[sid])
        if include_minor and self.downstream_minor[sid] is not None \
           and self.downstream_minor[sid] not in res:
            res.append(self.downstream_minor[sid])
        return res

    def upstreamOf(self, sid: Any, include_minor: bool = True) -> List[Any]:
        """Segments directly upstream of sid, in sorted order."""
        self.checkSegment(sid)
        contributors = set(self.upstream[sid])
        if include_minor:
            contributors.update(self.upstream_minor[sid])
        return sortedIDs(contributors)

    def outlets(self) -> List[Any]:
        """Segments with no downstream segment, excluding boundary exits."""
        return sortedIDs(sid for sid, target in self.downstream.items()
                         if target is None and sid not in self.boundary_exits)

    def terminals(self, include_boundary_exits: bool = True) -> List[Any]:
        """Outlets, and optionally the segments that exit the modeled area."""
        if include_boundary_exits:
            return sortedIDs(sid for sid, target in self.downstream.items() if target is None)
        return self.outlets()

    def components(self) -> Dict[Any, List[Any]]:
        """Map from each terminal segment to the segments draining to it via major links.

        Segments on a cycle drain to no terminal and are not listed.
        """
        comps = dict()
        for terminal in self.terminals():
            members = []
            stack = [terminal]
            while len(stack) > 0:
                sid = stack.pop()
                members.append(sid)
                stack.extend(reversed(sortedIDs(self.upstream[sid])))
            comps[terminal] = members
        return comps

    def subset(self, ids: Iterable[Any]) -> pd.DataFrame:
        """The rows of the segment table for ids, in that order."""
        ids = list(ids)
        for sid in ids:
            self.checkSegment(sid)
        return self.df.loc[ids]

    def to_dataframe(self) -> pd.DataFrame:
        """The segment table, with downstream links normalized to the index."""
        df = self.df.copy()
        df[names.DOWNSTREAM_ID] = pd.Series(self.downstream, dtype=object)
        df[names.BOUNDARY_EXIT] = [sid in self.boundary_exits for sid in df.index]
        return df


#
# Factory functions
#
def _constructByHydroseq(df: pd.DataFrame) -> pd.DataFrame:
    """Converts NHDPlus hydroseq/dnhydroseq links into ID links.

    Unmatched downstream hydroseqs are left as-is, and are therefore
    reported as dangling unless flagged as boundary exits.
    """
    if names.HYDROSEQ not in df or names.DOWNSTREAM_HYDROSEQ not in df:
        raise MalformedNetworkError(
            f'Constructing by hydroseq requires "{names.HYDROSEQ}" and '
            f'"{names.DOWNSTREAM_HYDROSEQ}" columns')
    df = df.copy()
    if names.ID not in df.columns:
        df[names.ID] = df[names.HYDROSEQ]

    hs_to_id = dict(zip(df[names.HYDROSEQ], df[names.ID]))
    df[names.DOWNSTREAM_ID] = [hs_to_id.get(hs, hs) for hs in df[names.DOWNSTREAM_HYDROSEQ]]
    if names.DOWNSTREAM_MINOR_HYDROSEQ in df:
        df[names.DOWNSTREAM_MINOR_ID] = [
            hs_to_id.get(hs, hs) for hs in df[names.DOWNSTREAM_MINOR_HYDROSEQ]
        ]
    return df


def createNetwork(segments: pd.DataFrame,
                  method: Literal['downstream_id', 'hydroseq'] = 'downstream_id',
                  boundary_exits: Optional[Iterable[Any]] = None,
                  allow_boundary_exits: bool = False,
                  outlet_values: Optional[Iterable[Any]] = None) -> Network:
    """Constructs a Network from a table of segments.

    Parameters
    ----------
    segments : pd.DataFrame
      The segments to turn into a network.
    method : str, optional
      Provide the method for constructing links.  Valid are:

        * 'downstream_id' uses the downstream_ID column directly.
        * 'hydroseq' Valid only for NHDPlus data, this uses the
          NHDPlus VAA tables Hydrologic Sequence, the hydroseq and
          dnhydroseq columns (and dnminorhyd if present).
    boundary_exits, allow_boundary_exits, outlet_values
      See Network.

    Returns
    -------
    Network
    """
    if method == 'hydroseq':
        segments = _constructByHydroseq(segments)
    elif method != 'downstream_id':
        raise ValueError(
            f"Invalid method '{method}' for making a Network, must be one of "
            "'downstream_id' or 'hydroseq'")

    return Network(segments,
                   boundary_exits=boundary_exits,
                   allow_boundary_exits=allow_boundary_exits,
                   outlet_values=outlet_values)
