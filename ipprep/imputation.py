"""
Missing value handling for the IP-MS preparation pipeline.

Rows with missing intensities are either dropped or filled with draws
from a down-shifted, narrowed normal distribution that models values
below the instrument's detection limit.
"""

from collections.abc import Mapping
from numbers import Real

import numpy as np
import pandas as pd

from .errors import ConfigurationError


_PARAM_ALIASES = {
    'std_width': ('std_width', 'stdWidth', 'stdwidth'),
    'shift': ('shift',),
}


def _imputation_params(imputation):
    """Validate Gaussian imputation options and return (std_width, shift)."""
    if not isinstance(imputation, Mapping):
        raise ConfigurationError(
            f"imputation must be None or a mapping with 'std_width' and 'shift', got {imputation!r}"
        )

    known = {alias for aliases in _PARAM_ALIASES.values() for alias in aliases}
    unknown = [k for k in imputation if k not in known]
    if unknown:
        raise ConfigurationError(
            f"Use impute params \"std_width\" and \"shift\" only (got {', '.join(map(str, unknown))})."
        )

    params = {}
    for name, aliases in _PARAM_ALIASES.items():
        given = [a for a in aliases if a in imputation]
        if not given:
            raise ConfigurationError('Gaussian imputation requires both "std_width" and "shift".')
        if len(given) > 1:
            raise ConfigurationError(f"'{name}' given more than once ({', '.join(given)}).")
        value = imputation[given[0]]
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ConfigurationError(f"'{name}' must be a number, got {value!r}")
        params[name] = float(value)

    if params['std_width'] < 0:
        raise ConfigurationError(f"'std_width' must be >= 0, got {params['std_width']}")

    return params['std_width'], params['shift']


def drop_missing(df, cols, diagnostics=None):
    """
    Remove every row with a missing value in ``cols``.

    Returns
    -------
    pd.DataFrame
        Filtered copy.
    """
    complete = df[cols].notna().all(axis=1)
    n_dropped = int((~complete).sum())
    df = df[complete].copy()

    if diagnostics is not None:
        diagnostics.record('n_dropped', n_dropped)
        diagnostics.removed_rows('impute', n_dropped)
        diagnostics.note(f"Dropped {n_dropped} proteins with missing values")
        if n_dropped > 0:
            diagnostics.warn('impute', f"dropped {n_dropped} row(s) with missing values.", count=n_dropped)

    return df


def impute_gaussian(df, cols, std_width, shift, random_state=None, diagnostics=None):
    """
    Fill missing values with draws from a down-shifted normal distribution.

    For every column with mean mu and standard deviation sigma over its
    observed values, missing cells are drawn from
    N(mu + shift * sigma, (std_width * sigma)^2). Columns with fewer than
    two observed values use the statistics pooled over all ``cols``.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    cols : list of str
        Intensity columns.
    std_width : float
        Width of the imputation distribution relative to sigma (e.g. 0.5).
    shift : float
        Shift of the mean in units of sigma (e.g. -1.8).
    random_state : None, int or np.random.Generator, optional
        Seed or generator used for the draws.
    diagnostics : Diagnostics, optional

    Returns
    -------
    int
        Number of imputed cells.
    """
    rng = np.random.default_rng(random_state)

    pooled = pd.Series(df[cols].to_numpy(dtype=float).ravel()).dropna()
    imputed = pd.Series(False, index=df.index)
    n_imputed = 0

    for col in cols:
        missing = df[col].isna()
        n_missing = int(missing.sum())
        if n_missing == 0:
            continue

        observed = df.loc[~missing, col]
        if len(observed) < 2:
            observed = pooled
        if len(observed) < 2:
            if diagnostics is not None:
                diagnostics.warn(
                    'impute', f"too few observed values to impute column '{col}'", count=n_missing
                )
            continue

        mu, sigma = observed.mean(), observed.std()
        df.loc[missing, col] = rng.normal(loc=mu + shift * sigma, scale=std_width * sigma, size=n_missing)

        imputed |= missing
        n_imputed += n_missing

    df['imputed'] = imputed

    if diagnostics is not None:
        diagnostics.record('n_imputed', n_imputed)
        diagnostics.note(f"Imputed {n_imputed} values in {int(imputed.sum())} proteins "
                         f"(shift={shift}, std_width={std_width})")
        if n_imputed > 0:
            diagnostics.warn('impute', f"imputed {n_imputed} missing value(s).", count=n_imputed)

    return n_imputed


def impute_ip(df, cols, imputation=None, random_state=None, diagnostics=None):
    """
    Resolve missing intensities by dropping rows or by Gaussian imputation.

    Parameters
    ----------
    df : pd.DataFrame
        Working table.
    cols : list of str
        Intensity columns.
    imputation : dict, optional
        None drops incomplete rows; {'std_width': w, 'shift': s} imputes.
    random_state : None, int or np.random.Generator, optional
    diagnostics : Diagnostics, optional

    Returns
    -------
    pd.DataFrame
    """
    if imputation is None:
        return drop_missing(df, cols, diagnostics=diagnostics)

    std_width, shift = _imputation_params(imputation)
    impute_gaussian(df, cols, std_width, shift, random_state=random_state, diagnostics=diagnostics)
    return df
