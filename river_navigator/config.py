"""Configuration and global defaults."""
from __future__ import annotations
from typing import List, Set, Tuple, Any

import os
import configparser

import river_navigator.sources.standard_names as names


def getHome() -> str:
    return os.path.expanduser('~')


def getDefaultConfig() -> configparser.ConfigParser:
    """Dictionary of all config option defaults.

    Returns
    -------
    rcParams : configparser.ConfigParser
      A dict-like object containing parameters.
    """
    rcParams = configparser.ConfigParser()

    # downstream IDs that mean "no downstream segment".  NHDPlus uses
    # tocomid = 0 and dnhydroseq = 0 for terminal flowlines.
    rcParams['DEFAULT']['outlet_values'] = "0, -1"

    # how to pick the upstream mainstem contributor, first key wins
    rcParams['DEFAULT']['mainstem_policy'] = \
        f"{names.ORDER}:desc, {names.DRAINAGE_AREA}:desc, {names.ID}:asc"

    # if True, segments draining to a boundary exit get pathlength 0,
    # otherwise they have no outlet and get NaN
    rcParams['DEFAULT']['include_boundary_exits'] = "False"
    return rcParams


def getConfig() -> configparser.ConfigParser:
    rc = getDefaultConfig()
    try:
        rc['DEFAULT']['outlet_values'] = os.environ['RIVER_NAVIGATOR_OUTLET_VALUES']
    except KeyError:
        pass

    # paths to search for rc files
    rc_paths = [
        os.path.join(getHome(), '.river_navigatorrc'),
        os.path.join(os.getcwd(), '.river_navigatorrc'),
        os.path.join(os.getcwd(), 'river_navigatorrc'),
    ]

    # read the rc files
    rc.read(rc_paths)
    return rc


def _parseValue(token: str) -> Any:
    try:
        return int(token)
    except ValueError:
        return token


def getOutletValues() -> Set[Any]:
    """The set of downstream IDs treated as null, i.e. marking an outlet.

    Both the integer and string spelling of each value are included,
    so that string-typed IDs (e.g. '0') are also recognized.
    """
    values = set()
    for token in rcParams['DEFAULT']['outlet_values'].split(','):
        token = token.strip()
        if len(token) == 0:
            continue
        values.add(token)
        values.add(_parseValue(token))
    return values


def parseMainstemPolicy(policy: str) -> List[Tuple[str, bool]]:
    """Parse a policy string of the form "col:desc, col2:asc" into a
    list of (column, descending) tuples.
    """
    result = []
    for token in policy.split(','):
        token = token.strip()
        if len(token) == 0:
            continue
        if ':' in token:
            column, direction = [t.strip() for t in token.rsplit(':', 1)]
        else:
            column, direction = token, 'desc'

        if direction.lower() not in ('asc', 'desc'):
            raise ValueError(f'Invalid mainstem policy direction "{direction}" for column "{column}", '
                             'must be one of "asc" or "desc"')
        result.append((column, direction.lower() == 'desc'))
    return result


def getMainstemPolicy() -> List[Tuple[str, bool]]:
    """The configured mainstem policy as a list of (column, descending) tuples."""
    return parseMainstemPolicy(rcParams['DEFAULT']['mainstem_policy'])


def setMainstemPolicy(policy : str) -> None:
    """Sets the default mainstem tie-break policy, e.g. "stream_order:desc, ID:asc"."""
    parseMainstemPolicy(policy)
    rcParams['DEFAULT']['mainstem_policy'] = policy


def getIncludeBoundaryExits() -> bool:
    return rcParams['DEFAULT'].getboolean('include_boundary_exits')


# global config
rcParams = getConfig()
