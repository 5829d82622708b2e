"""Functions useful within scripts, or helpers for the user interface."""
import logging
import argparse

import river_navigator.navigation
import river_navigator.sources.nhdplus

verb_to_level = {0:logging.WARNING,
                 1:logging.INFO,
                 2:logging.DEBUG,
                 3:logging.DEBUG}


def setup_logging(verbosity, logfile=None):
    """Sets the log level and log file."""
    level = verb_to_level[min(verbosity, 3)]

    if type(logfile) is str:
        raise RuntimeError("Developer error: use 'with open() as fid' construct instead.")

    if logfile is not None:
        logging.basicConfig(stream=logfile, level=level,
                            format='%(asctime)s - %(name)s - %(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=level,
                            format='%(asctime)s - %(name)s - %(levelname)s: %(message)s')


def get_basic_argparse(docstring):
    """Gets a basic argparse class with basic options for all scripts."""
    doclines = docstring.split('\n')
    try:
        first_empty = next(i for i,line in enumerate(doclines) if line.strip() == '')
    except StopIteration:
        description = docstring
        epilog = ''
    else:
        description = '\n'.join(doclines[0:first_empty])
        if len(doclines) > first_empty:
            epilog = '\n'.join(doclines[first_empty+1:])
        else:
            epilog = ''

    parser = argparse.ArgumentParser(description=description, epilog=epilog)
    parser.add_argument('-v', '--verbosity', action='count', default=1,
                        help='Increase output verbosity.  (default=1)')
    parser.add_argument('--logfile', type=argparse.FileType('w'),
                        help='Write logging to file instead of stdout')
    return parser


def segments_arg(parser):
    """Adds the segment table and its options to the parser."""
    parser.add_argument('SEGMENTS', type=str,
                        help='Segment table, any file readable by geopandas, or a CSV file.')
    parser.add_argument('--dataset', type=str, default=None,
                        choices=list(river_navigator.sources.nhdplus.renames.keys()),
                        help='NHD product the segment table came from, converts native column names.')
    parser.add_argument('--method', type=str, default='downstream_id',
                        choices=['downstream_id', 'hydroseq'],
                        help='How to form downstream links.  (default=downstream_id)')
    parser.add_argument('--clip', action='store_true',
                        help='Treat downstream links leaving the table as boundary exits.')


def navigation_options(parser):
    """Adds navigation mode and distance options to the parser."""
    parser.add_argument('--mode', type=str.upper, default='UT',
                        choices=river_navigator.navigation.MODES,
                        help='Navigation mode.  (default=UT)')
    parser.add_argument('--distance', type=float, default=None,
                        help='Navigation distance cutoff, in units of segment length.')
