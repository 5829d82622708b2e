import pytest

import numpy as np
import pandas
import shapely.geometry
import geopandas

_tol = 1.e-7


def segments(ids, downstream, lengths=None, **kwargs):
    data = {'ID' : ids, 'downstream_ID' : downstream}
    if lengths is not None:
        data['length'] = lengths
    data.update(kwargs)
    return pandas.DataFrame(data)


# ===== simple networks =====

@pytest.fixture
def chain():
    # A --> B --> C --> D
    return segments(['A', 'B', 'C', 'D'],
                    ['B', 'C', 'D', None],
                    [2., 3., 5., 1.])


@pytest.fixture
def tributary():
    # A --> B --> C --> D, plus E --> B
    return segments(['A', 'B', 'C', 'D', 'E'],
                    ['B', 'C', 'D', None, 'B'],
                    [2., 3., 5., 1., 4.],
                    stream_order=[2, 2, 2, 2, 1],
                    drainage_area_sqkm=[10., 25., 30., 31., 12.],
                    catchment_area=[10., 3., 5., 1., 12.])


@pytest.fixture
def two_networks():
    # 1 --> 2 --> 3, and 11 --> 13 <-- 12, 13 --> 14
    return segments([1, 2, 3, 11, 12, 13, 14],
                    [2, 3, 0, 13, 13, 14, 0],
                    [1., 2., 4., 0.5, 1.5, 2.5, 3.5],
                    stream_order=[1, 1, 1, 1, 1, 2, 2])


@pytest.fixture
def diverted():
    # 1 splits into 2 (main path) and 3 (minor path), which rejoin at 4
    return segments([1, 2, 3, 4],
                    [2, 4, 4, None],
                    [1., 2., 3., 4.],
                    downstream_minor_ID=[3, None, None, None],
                    divergence=[0, 1, 2, 0],
                    stream_order=[1, 1, 1, 1],
                    drainage_area_sqkm=[1., 1., 0.5, 2.])


@pytest.fixture
def cyclic():
    # W --> X --> Y --> Z --> X
    return segments(['W', 'X', 'Y', 'Z'],
                    ['X', 'Y', 'Z', 'X'],
                    [1., 1., 1., 1.])


@pytest.fixture
def braided_stream():
    points = [[(1, 0), (0, 0)], [(2, 1), (1, 0)], [(3, 0), (2, 1)], [(4, 0), (3, 0)],
              [(2, -1), (1, 0)], [(3, 0), (2, -1)]]
    mls = list(shapely.geometry.MultiLineString(points).geoms)
    hydroseqs = [1, 2, 3, 6, 4, 5]
    dnstream = [-1, 1, 2, 3, 1, 4]
    dnminor = [0, 0, 0, 5, 0, 0]
    upstream = [2, 3, 6, -1, 5, 6]
    divergence = [0, 0, 1, 0, 0, 2]

    df = geopandas.GeoDataFrame({'index' : range(len(mls)),
                                 'hydroseq' : hydroseqs,
                                 'dnhydroseq' : dnstream,
                                 'dnminorhyd' : dnminor,
                                 'uphydroseq' : upstream,
                                 'divergence' : divergence,
                                 'stream_order' : [2, 2, 1, 1, 1, 1],
                                 'geometry' : mls}).set_index('index')
    return df


@pytest.fixture
def gages():
    return pandas.DataFrame({'site_no' : ['01', '02', '03'],
                             'reach_ID' : ['C', 'A', 'Q'],
                             'name' : ['lower', 'upper', 'elsewhere']},
                            index=[10, 20, 30])
