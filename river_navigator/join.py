"""Merging navigation and pathlength results onto segment and point-feature tables."""
from __future__ import annotations
from typing import Any, Iterable, Optional, Tuple

import logging
import numpy as np
import pandas as pd
import pandas.api.types
import geopandas as gpd

import river_navigator.sources.standard_names as names
import river_navigator.navigation
from river_navigator.network import Network
from river_navigator.errors import NonUniqueKeyError

_ROW = '_primary_row'
_MERGE = '_merge'


def join(primary: pd.DataFrame,
         secondary: pd.DataFrame,
         key: str,
         right_key: Optional[str] = None,
         fan_out: bool = False,
         indicator: bool = False,
         suffixes: Tuple[Optional[str], str] = (None, '_secondary')) -> pd.DataFrame:
    """Left join of secondary onto primary by key.

    Every row of primary is kept, in order and with its index.  Rows
    with no match in secondary get pd.NA in every secondary column;
    those columns are converted to nullable dtypes so the marker is
    explicit rather than a silent NaN.

    Parameters
    ----------
    primary : pd.DataFrame
      The table whose rows are all kept.
    secondary : pd.DataFrame
      The table whose attributes are added.
    key : str
      Name of the key column in primary.
    right_key : str, optional
      Name of the key column in secondary, defaults to key.  If
      different from key, it is dropped from the result.
    fan_out : bool, optional
      If True, allow key to be duplicated in secondary, producing one
      row per match.  Defaults to False.
    indicator : bool, optional
      If True, add a '_merge' column, 'both' or 'left_only'.
    suffixes : tuple, optional
      Suffixes for overlapping column names, as in pandas.merge.

    Returns
    -------
    pd.DataFrame
      The joined table, of the same type as primary.

    Raises
    ------
    KeyError
      If a key column is missing.
    NonUniqueKeyError
      If right_key is duplicated in secondary and fan_out is False.
    """
    if right_key is None:
        right_key = key
    if key not in primary.columns:
        raise KeyError(f'Join key "{key}" is not a column of the primary table')
    if right_key not in secondary.columns:
        raise KeyError(f'Join key "{right_key}" is not a column of the secondary table')

    duplicated = secondary[right_key].duplicated()
    if duplicated.any():
        dups = secondary.loc[duplicated, right_key].unique()
        if not fan_out:
            raise NonUniqueKeyError(right_key, dups)
        logging.debug(f"  joining one-to-many on {len(dups)} duplicated keys")

    # nullable dtypes, so that unmatched rows hold pd.NA
    secondary = pd.DataFrame(secondary).copy()
    for col in secondary.columns:
        if col == right_key:
            continue
        dtype = secondary[col].dtype
        if pandas.api.types.is_bool_dtype(dtype):
            secondary[col] = secondary[col].astype('boolean')
        elif pandas.api.types.is_integer_dtype(dtype):
            secondary[col] = secondary[col].astype('Int64')
        elif pandas.api.types.is_float_dtype(dtype):
            secondary[col] = secondary[col].astype('Float64')
        elif pandas.api.types.is_string_dtype(dtype) \
             and not pandas.api.types.is_object_dtype(dtype):
            # the NaN-backed str dtype of pandas >= 3
            secondary[col] = secondary[col].astype(pd.StringDtype())

    left = primary.copy()
    left[_ROW] = np.arange(len(primary))
    result = left.merge(secondary,
                        how='left',
                        left_on=key,
                        right_on=right_key,
                        suffixes=suffixes,
                        indicator=_MERGE)

    matched = (result[_MERGE] == 'both').to_numpy()
    new_columns = [c for c in result.columns if c not in left.columns and c != _MERGE]
    for col in new_columns:
        if isinstance(result[col].dtype, gpd.array.GeometryDtype):
            continue
        if pandas.api.types.is_object_dtype(result[col].dtype):
            result.loc[~matched, col] = pd.NA

    if right_key != key:
        if right_key in primary.columns:
            result = result.drop(columns=[right_key + suffixes[1]], errors='ignore')
        else:
            result = result.drop(columns=[right_key], errors='ignore')

    result.index = primary.index[result[_ROW].to_numpy()]
    result = result.drop(columns=[_ROW])
    if indicator:
        result[_MERGE] = result[_MERGE].astype(str)
    else:
        result = result.drop(columns=[_MERGE])

    num_missing = (~matched).sum()
    if num_missing > 0:
        logging.info(f"... {num_missing} of {len(primary)} rows had no match on \"{key}\"")
    return result


def joinPathLengths(segments: pd.DataFrame,
                    pathlengths: pd.Series,
                    key: str = names.ID) -> pd.DataFrame:
    """Adds a pathlength column to a segment table, matching on key."""
    secondary = pd.DataFrame({
        key: pathlengths.index.to_numpy(dtype=object),
        names.PATHLENGTH: pathlengths.to_numpy()
    })
    return join(segments, secondary, key)


def joinSegmentAttributes(points: pd.DataFrame,
                          network: Network,
                          columns: Iterable[str],
                          reach_ID_column: str = names.REACH_ID) -> pd.DataFrame:
    """Adds properties of the segment each point feature is on, e.g. a gage's stream order.

    Parameters
    ----------
    points : pd.DataFrame
      Point features, e.g. gages, with a column giving the ID of the
      segment they were snapped to.
    network : Network
      The network providing the segment properties.
    columns : iterable of str
      Segment properties to add.
    reach_ID_column : str, optional
      Column of points containing the segment ID.

    Returns
    -------
    pd.DataFrame
      points, with the requested columns added.  Points on segments
      not in the network get pd.NA.
    """
    columns = [c for c in columns if c != names.ID]
    missing = [c for c in columns if c not in network.df.columns]
    if len(missing) > 0:
        raise KeyError(f"Segment properties {missing} are not in the network")

    secondary = pd.DataFrame(network.df[columns])
    secondary[names.ID] = network.ids.to_numpy(dtype=object)
    return join(points, secondary, reach_ID_column, right_key=names.ID)


def joinNavigation(points: pd.DataFrame,
                   network: Network,
                   reach_ID_column: str = names.REACH_ID,
                   mode: river_navigator.navigation.Mode = 'UT',
                   distance: Optional[float] = None,
                   policy: Optional[river_navigator.navigation.Policy] = None) -> pd.DataFrame:
    """Navigates from the segment of each point feature, one row per point and segment found.

    Points whose segment is not in the network are kept, with pd.NA
    as the found segment.

    Returns
    -------
    pd.DataFrame
      points, fanned out one row per segment found, with columns
      navigation_mode and ID (the segment found) added.
    """
    if reach_ID_column not in points.columns:
        raise KeyError(f'Point features have no "{reach_ID_column}" column')

    mode = river_navigator.navigation.checkMode(mode)
    starts = points[reach_ID_column].dropna().unique()
    found = river_navigator.navigation.navigateMany(network, starts, mode, distance, policy)
    found[names.NAVIGATION_MODE] = mode
    return join(points, found, reach_ID_column, right_key=names.START, fan_out=True,
                suffixes=(None, '_segment'))
