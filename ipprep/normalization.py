"""
Transformation and normalization functions for the IP-MS preparation pipeline.

Zeros are treated as missing (below detection), intensities are
transformed elementwise (log2 by default) and each sample column is
centred (median by default).
"""

import numpy as np

from .errors import ConfigurationError


_TRANSFORMS = {
    'log2': np.log2,
    'log10': np.log10,
    'ln': np.log,
    'none': None,
}

_NORMALIZATIONS = ('median', 'mean', 'none')


def zero_to_missing(df, cols, diagnostics=None):
    """
    Replace literal zero intensities with NaN.

    A zero intensity means "not detected", not a measured zero. The total
    number of missing cells afterwards (pre-existing plus converted) is
    recorded as ``count_na``.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    cols : list of str
        Intensity columns.
    diagnostics : Diagnostics, optional

    Returns
    -------
    int
        Number of missing intensity cells.
    """
    values = df[cols].astype(float)
    n_zero = int((values == 0).sum().sum())
    df[cols] = values.mask(values == 0)

    count_na = int(df[cols].isna().sum().sum())

    if diagnostics is not None:
        diagnostics.record('count_na', count_na)
        diagnostics.note(f"Converted {n_zero} zero intensities to missing")
        diagnostics.note(f"{count_na} missing values across {len(cols)} samples")

    return count_na


def transform_ip(df, cols, method='log2', diagnostics=None):
    """
    Apply a monotonic elementwise transform to the intensity columns.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    cols : list of str
        Intensity columns.
    method : str or callable, optional
        'log2' (default), 'log10', 'ln', 'none', or a function taking and
        returning an array-like of the same shape. Missing values must pass
        through unchanged.
    diagnostics : Diagnostics, optional
    """
    if callable(method):
        func = method
        label = getattr(method, '__name__', 'custom')
    elif method in _TRANSFORMS:
        func = _TRANSFORMS[method]
        label = method
    else:
        raise ConfigurationError(
            f"Unknown transform '{method}'. Options: {', '.join(_TRANSFORMS)} or a callable"
        )

    if func is not None:
        df[cols] = func(df[cols].astype(float))

    if diagnostics is not None:
        diagnostics.note(f"{label} transformation applied")


def normalize_ip(df, cols, method='median', diagnostics=None):
    """
    Centre every intensity column to correct loading/run differences.

    Normalization options:
    - 'median': subtract the column median (default)
    - 'mean': subtract the column mean
    - 'none': leave the data untouched
    - callable: applied to each column Series, must return a Series

    Missing values are ignored for the statistic and stay missing.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    cols : list of str
        Intensity columns.
    method : str or callable, optional
        Normalization method (default: 'median').
    diagnostics : Diagnostics, optional
    """
    if not callable(method) and method not in _NORMALIZATIONS:
        raise ConfigurationError(
            f"Unknown normalization '{method}'. Options: {', '.join(_NORMALIZATIONS)} or a callable"
        )

    for col in cols:
        if callable(method):
            df[col] = method(df[col])
        elif method == 'median':
            df[col] = df[col] - df[col].median()
        elif method == 'mean':
            df[col] = df[col] - df[col].mean()

    if diagnostics is not None:
        label = getattr(method, '__name__', 'custom') if callable(method) else method
        diagnostics.note(f"{label} normalization applied")
