"""Namespace defining a bunch of standard names for properties of flowline segments."""

# generic property names used everywhere
ID = 'ID'
NAME = 'name'

# segment topology
DOWNSTREAM_ID = 'downstream_ID'
DOWNSTREAM_MINOR_ID = 'downstream_minor_ID'
BOUNDARY_EXIT = 'boundary_exit'
DIVERGENCE = 'divergence'
HYDROSEQ = 'hydroseq'
UPSTREAM_HYDROSEQ = 'uphydroseq'
DOWNSTREAM_HYDROSEQ = 'dnhydroseq'
DOWNSTREAM_MINOR_HYDROSEQ = 'dnminorhyd'

# segment property names
LENGTH = 'length'
ORDER = 'stream_order'
DRAINAGE_AREA = 'drainage_area_sqkm'
CATCHMENT_AREA = 'catchment_area'

# divergence flag values, as in NHDPlus
DIVERGENCE_NONE = 0
DIVERGENCE_MAIN = 1
DIVERGENCE_MINOR = 2

# derived properties, not set by user
PATHLENGTH = 'pathlength'
LEVEL = 'level'
START = 'start_ID'
NAVIGATION_MODE = 'navigation_mode'

# point feature property names
REACH_ID = 'reach_ID'
