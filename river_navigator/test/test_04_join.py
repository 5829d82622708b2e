import pytest

from river_navigator.test.networks import *
import river_navigator
from river_navigator.network import Network
import river_navigator.join
from river_navigator.join import join
import river_navigator.pathlength
from river_navigator.errors import NonUniqueKeyError


@pytest.fixture
def primary():
    return pandas.DataFrame({'key' : ['a', 'b', 'c', 'd'],
                             'value' : [1, 2, 3, 4]}, index=[40, 30, 20, 10])


@pytest.fixture
def secondary():
    return pandas.DataFrame({'key' : ['c', 'a', 'x'],
                             'count' : [3, 1, 9],
                             'area' : [3.5, 1.5, 9.5],
                             'label' : ['C', 'A', 'X'],
                             'flag' : [True, False, True]})


def test_join(primary, secondary):
    res = join(primary, secondary, 'key')
    assert (list(res.index) == [40, 30, 20, 10])
    assert (list(res['key']) == ['a', 'b', 'c', 'd'])
    assert (list(res['value']) == [1, 2, 3, 4])
    assert (res.loc[40, 'count'] == 1)
    assert (res.loc[20, 'area'] == 3.5)
    assert (res.loc[20, 'label'] == 'C')
    assert (res.loc[20, 'flag'] == True)


def test_join_missing_marker(primary, secondary):
    res = join(primary, secondary, 'key')
    for col in ['count', 'area', 'label', 'flag']:
        assert (res.loc[30, col] is pandas.NA)
        assert (res.loc[10, col] is pandas.NA)
    assert (str(res['count'].dtype) == 'Int64')
    assert (str(res['area'].dtype) == 'Float64')
    assert (str(res['flag'].dtype) == 'boolean')


def test_join_inputs_unmodified(primary, secondary):
    p = primary.copy()
    s = secondary.copy()
    join(primary, secondary, 'key')
    pandas.testing.assert_frame_equal(p, primary)
    pandas.testing.assert_frame_equal(s, secondary)


def test_join_indicator(primary, secondary):
    res = join(primary, secondary, 'key', indicator=True)
    assert (list(res['_merge']) == ['both', 'left_only', 'both', 'left_only'])


def test_join_no_indicator(primary, secondary):
    res = join(primary, secondary, 'key')
    assert ('_merge' not in res.columns)
    assert ('_primary_row' not in res.columns)


def test_join_non_unique(primary, secondary):
    secondary = pandas.concat([secondary, secondary.iloc[[0]]])
    with pytest.raises(NonUniqueKeyError) as err:
        join(primary, secondary, 'key')
    assert (err.value.duplicates == ['c'])
    assert (isinstance(err.value, ValueError))


def test_join_fan_out(primary, secondary):
    extra = pandas.DataFrame({'key' : ['c'], 'count' : [33], 'area' : [33.5],
                              'label' : ['CC'], 'flag' : [False]})
    secondary = pandas.concat([secondary, extra])
    res = join(primary, secondary, 'key', fan_out=True)
    assert (len(res) == 5)
    assert (list(res.index) == [40, 30, 20, 20, 10])
    assert (list(res.loc[20, 'count']) == [3, 33])


def test_join_missing_key(primary, secondary):
    with pytest.raises(KeyError):
        join(primary, secondary, 'not_a_key')
    with pytest.raises(KeyError):
        join(primary, secondary, 'key', right_key='not_a_key')


def test_join_right_key(primary, secondary):
    secondary = secondary.rename(columns={'key' : 'other_key'})
    res = join(primary, secondary, 'key', right_key='other_key')
    assert ('other_key' not in res.columns)
    assert (list(res['key']) == ['a', 'b', 'c', 'd'])
    assert (res.loc[40, 'count'] == 1)


def test_join_overlapping_columns(primary, secondary):
    secondary['value'] = [30, 10, 90]
    res = join(primary, secondary, 'key')
    assert (list(res['value']) == [1, 2, 3, 4])
    assert (res.loc[40, 'value_secondary'] == 10)
    assert (res.loc[30, 'value_secondary'] is pandas.NA)


def test_join_missing_marker_strings():
    # inferred string columns are str (pandas >= 3) or object, both must get pd.NA
    primary = pandas.DataFrame({'key' : ['a', 'b']})
    secondary = pandas.DataFrame({'key' : ['a'],
                                  'label' : ['A'],
                                  'other' : pandas.Series(['AA'], dtype='string')})
    res = join(primary, secondary, 'key')
    assert (res.loc[0, 'label'] == 'A')
    assert (res.loc[0, 'other'] == 'AA')
    assert (res.loc[1, 'label'] is pandas.NA)
    assert (res.loc[1, 'other'] is pandas.NA)


def test_join_geodataframe(braided_stream):
    segs = braided_stream.copy()
    other = pandas.DataFrame({'hydroseq' : [1, 6], 'note' : ['outlet', 'top']})
    res = join(segs, other, 'hydroseq')
    assert (isinstance(res, geopandas.GeoDataFrame))
    assert (len(res) == len(segs))
    assert (res.loc[0, 'note'] == 'outlet')
    assert (res.loc[1, 'note'] is pandas.NA)


def test_join_pathlengths(tributary):
    net = Network(tributary)
    pathlengths = river_navigator.pathlength.computePathLengths(net)
    res = river_navigator.join.joinPathLengths(tributary, pathlengths)
    assert (list(res['ID']) == list(tributary['ID']))
    assert (list(res['pathlength']) == [10., 8., 5., 0., 12.])


def test_join_segment_attributes(tributary, gages):
    net = Network(tributary)
    res = river_navigator.join.joinSegmentAttributes(gages, net, ['stream_order', 'length'])
    assert (list(res.index) == [10, 20, 30])
    assert (list(res['site_no']) == ['01', '02', '03'])
    assert (res.loc[10, 'length'] == 5.)
    assert (res.loc[20, 'stream_order'] == 2)
    assert (res.loc[30, 'length'] is pandas.NA)
    assert ('ID' not in res.columns)


def test_join_segment_attributes_missing(tributary, gages):
    net = Network(tributary)
    with pytest.raises(KeyError):
        river_navigator.join.joinSegmentAttributes(gages, net, ['not_a_column'])


def test_join_navigation(tributary, gages):
    net = Network(tributary)
    res = river_navigator.join.joinNavigation(gages, net, mode='UT')
    assert (list(res.index) == [10, 10, 10, 10, 20, 30])
    assert (list(res.loc[10, 'ID']) == ['C', 'B', 'A', 'E'])
    assert (res.loc[20, 'ID'] == 'A')
    assert (res.loc[30, 'ID'] is pandas.NA)
    assert (res.loc[20, 'navigation_mode'] == 'UT')


def test_join_navigation_distance(tributary, gages):
    net = Network(tributary)
    res = river_navigator.join.joinNavigation(gages, net, mode='dm', distance=6.)
    assert (list(res.loc[10, 'ID']) == ['C', 'D'])
    assert (list(res.loc[20, 'ID']) == ['A', 'B', 'C'])


def test_gage_attributes(tributary, gages):
    net = Network(tributary)
    res = river_navigator.getGageAttributes(gages, net)
    assert (res.loc[10, 'pathlength'] == 5.)
    assert (res.loc[20, 'pathlength'] == 10.)
    assert (res.loc[20, 'stream_order'] == 2)
    assert (res.loc[20, 'drainage_area_sqkm'] == 10.)
    assert (res.loc[30, 'pathlength'] is pandas.NA)


def test_gage_navigation(tributary, gages):
    net = Network(tributary)
    res = river_navigator.getGageNavigation(gages, net, 'UM')
    assert (list(res.loc[10, 'ID']) == ['C', 'B', 'A'])


def test_join_navigation_invalid_mode(tributary, gages):
    net = Network(tributary)
    with pytest.raises(ValueError):
        river_navigator.join.joinNavigation(gages, net, mode=3)
