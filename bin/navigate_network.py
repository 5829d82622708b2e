#!/usr/bin/env python3
"""Navigates a flowline network from one or more start segments.

Writes a CSV table of (start_ID, ID) pairs, with the pathlength of each
segment found, to stdout or to a file.
"""

import sys
import logging
import pandas as pd
import geopandas as gpd

import river_navigator
import river_navigator.ui
import river_navigator.sources.standard_names as names


def get_args():
    parser = river_navigator.ui.get_basic_argparse(__doc__)
    river_navigator.ui.segments_arg(parser)
    parser.add_argument('START', type=str, nargs='+',
                        help='IDs of the segments to start navigating from.')
    river_navigator.ui.navigation_options(parser)
    parser.add_argument('--boundary-exits-as-outlets', action='store_true',
                        help='Measure pathlengths to boundary exits, as if they were outlets.')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Output CSV file.  (default=stdout)')
    return parser.parse_args()


def read_segments(filename):
    if filename.lower().endswith('.csv'):
        return pd.read_csv(filename)
    return gpd.read_file(filename)


def _cast_start(value, ids):
    """Start IDs come in as strings; match the dtype of the segment IDs."""
    if value in ids:
        return value
    try:
        as_int = int(value)
    except ValueError:
        return value
    return as_int


if __name__ == '__main__':
    args = get_args()
    river_navigator.ui.setup_logging(args.verbosity, args.logfile)

    logging.info("")
    logging.info(f"Navigating {args.mode} in: {args.SEGMENTS}")
    logging.info("="*30)

    segments = read_segments(args.SEGMENTS)
    network = river_navigator.getNetwork(segments, args.dataset, args.method, clip=args.clip)

    starts = [_cast_start(s, network) for s in args.START]
    found = river_navigator.navigateMany(network, starts, args.mode, args.distance)
    pathlengths = river_navigator.computePathLengths(
        network, True if args.boundary_exits_as_outlets else None)
    found = river_navigator.join.joinPathLengths(found, pathlengths, names.ID)

    if args.output is None:
        found.to_csv(sys.stdout, index=False)
    else:
        found.to_csv(args.output, index=False)
        logging.info(f"Wrote {len(found)} rows to {args.output}")
