import pytest

from river_navigator.test.networks import *
import river_navigator
import river_navigator.sources.nhdplus
import river_navigator.sources.standard_names as names


@pytest.fixture
def waterdata():
    # flowline table as it comes from the WaterData nhdflowline_network layer
    return pandas.DataFrame({'comid' : [101, 102, 103, 104],
                             'tocomid' : [103, 103, 104, 0],
                             'lengthkm' : [1.5, 2.5, 1.0, 0.5],
                             'streamorde' : [1, 1, 2, 2],
                             'totdasqkm' : [2., 3., 6., 7.],
                             'areasqkm' : [2., 3., 1., 1.],
                             'divergence' : [0, 0, 0, 0],
                             'gnis_name' : ['Left Fork', 'Right Fork', 'Main', 'Main']})


def test_standard_names(waterdata):
    df = river_navigator.sources.nhdplus.addStandardNames(waterdata, 'NHDPlus MR v2.1')
    assert (list(df[names.ID]) == [101, 102, 103, 104])
    assert (list(df[names.DOWNSTREAM_ID]) == [103, 103, 104, 0])
    assert (list(df[names.LENGTH]) == [1.5, 2.5, 1.0, 0.5])
    assert (list(df[names.ORDER]) == [1, 1, 2, 2])
    assert (names.DRAINAGE_AREA in df)
    assert (names.CATCHMENT_AREA in df)
    assert (df.loc[0, names.NAME] == 'Left Fork')
    # native columns are kept, and the input is not modified
    assert ('comid' in df)
    assert (names.ID not in waterdata)


def test_standard_names_mr():
    df = pandas.DataFrame({'COMID' : [1, 2], 'Hydroseq' : [10, 20], 'DnHydroseq' : [0, 10],
                           'LENGTHKM' : [1., 2.]})
    df = river_navigator.sources.nhdplus.addStandardNames(df, 'NHD MR')
    net = river_navigator.network.createNetwork(df, method='hydroseq')
    assert (net.downstream == {1: None, 2: 1})


def test_standard_names_invalid(waterdata):
    with pytest.raises(ValueError):
        river_navigator.sources.nhdplus.addStandardNames(waterdata, 'NHD HR v3')


def test_get_network(waterdata):
    net = river_navigator.getNetwork(waterdata, 'NHDPlus MR v2.1')
    assert (net.outlets() == [104])
    assert (net.upstreamOf(103) == [101, 102])
    assert (river_navigator.computePathLengths(net).to_dict() ==
            {101: 2.5, 102: 3.5, 103: 1.0, 104: 0.})


def test_get_network_clip(waterdata):
    clipped = waterdata.iloc[0:3]
    with pytest.raises(river_navigator.MalformedNetworkError):
        river_navigator.getNetwork(clipped, 'NHDPlus MR v2.1')

    net = river_navigator.getNetwork(clipped, 'NHDPlus MR v2.1', clip=True)
    assert (net.boundary_exits == {103: 104})


def test_segments_with_pathlengths(waterdata):
    net = river_navigator.getNetwork(waterdata, 'NHDPlus MR v2.1')
    df = river_navigator.getSegmentsWithPathLengths(net)
    assert (list(df[names.PATHLENGTH]) == [2.5, 3.5, 1.0, 0.])
    assert (list(df[names.LEVEL]) == [2, 2, 1, 0])
    assert (list(df[names.ORDER]) == [1, 1, 2, 2])


def test_segments_with_pathlengths_assigns_order(chain):
    net = river_navigator.Network(chain)
    df = river_navigator.getSegmentsWithPathLengths(net)
    assert (list(df[names.ORDER]) == [1, 1, 1, 1])
