"""Standard names for the columns of NHDPlus flowline tables.

Flowline tables downloaded elsewhere (e.g. through pynhd) come with the
native column names of each NHDPlus product.  These maps convert them
to the names in river_navigator.sources.standard_names.
"""
from typing import Dict
import logging
import pandas as pd

import river_navigator.sources.standard_names as names

waterdata_renames = {'comid' : names.ID,
                     'tocomid' : names.DOWNSTREAM_ID,
                     'gnis_name' : names.NAME,
                     'lengthkm' : names.LENGTH,
                     'areasqkm' : names.CATCHMENT_AREA,
                     'streamorde' : names.ORDER,
                     'totdasqkm' : names.DRAINAGE_AREA,
                     'hydroseq' : names.HYDROSEQ,
                     'uphydroseq' : names.UPSTREAM_HYDROSEQ,
                     'dnhydroseq' : names.DOWNSTREAM_HYDROSEQ,
                     'dnminorhyd' : names.DOWNSTREAM_MINOR_HYDROSEQ,
                     'divergence' : names.DIVERGENCE,
                     }

hr_renames = {'nhdplusid' : names.ID,
              'gnis_name' : names.NAME,
              'lengthkm' : names.LENGTH,
              'areasqkm' : names.CATCHMENT_AREA,
              'streamorde' : names.ORDER,
              'totdasqkm' : names.DRAINAGE_AREA,
              'hydroseq' : names.HYDROSEQ,
              'uphydroseq' : names.UPSTREAM_HYDROSEQ,
              'dnhydroseq' : names.DOWNSTREAM_HYDROSEQ,
              'dnminorhyd' : names.DOWNSTREAM_MINOR_HYDROSEQ,
              'divergence' : names.DIVERGENCE,
              }

mr_renames = {'COMID' : names.ID,
              'GNIS_NAME' : names.NAME,
              'LENGTHKM' : names.LENGTH,
              'AreaSqKM' : names.CATCHMENT_AREA,
              'StreamOrde' : names.ORDER,
              'TotDASqKM' : names.DRAINAGE_AREA,
              'Hydroseq' : names.HYDROSEQ,
              'UpHydroseq' : names.UPSTREAM_HYDROSEQ,
              'DnHydroseq' : names.DOWNSTREAM_HYDROSEQ,
              'DnMinorHyd' : names.DOWNSTREAM_MINOR_HYDROSEQ,
              'Divergence' : names.DIVERGENCE,
              }

renames: Dict[str, Dict[str, str]] = {
    'NHDPlus MR v2.1' : waterdata_renames,
    'NHDPlus HR' : hr_renames,
    'NHD MR' : mr_renames,
}


def _tryRename(df, old, new):
    try:
        df[new] = df[old]
    except KeyError:
        pass


def addStandardNames(df : pd.DataFrame, dataset_name : str = 'NHDPlus MR v2.1') -> pd.DataFrame:
    """Convert native column names to standard names.

    Native columns are kept; standard-named copies are added.

    Parameters
    ----------
    df : pd.DataFrame
        Flowline table with native column names.
    dataset_name : str, optional
        NHD dataset name ('NHDPlus MR v2.1', 'NHDPlus HR', 'NHD MR').

    Returns
    -------
    pd.DataFrame
        A copy of df with standard column names added.
    """
    try:
        dataset_renames = renames[dataset_name]
    except KeyError:
        raise ValueError(f'Invalid NHD dataset_name "{dataset_name}", must be one of '
                         f'{list(renames.keys())}')

    df = df.copy()
    for k, v in dataset_renames.items():
        if k in df.columns and v in df.columns and k != v:
            logging.debug(f'  overwriting column "{v}" with native column "{k}"')
        _tryRename(df, k, v)
    return df
