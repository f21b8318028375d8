"""
Utility functions for the IP-MS preparation pipeline.

Internal helpers for configuration loading and reading input tables.
"""

import os

import pandas as pd
import yaml

from .errors import ConfigurationError


DEFAULT_CONFIG = {
    'bait': None,
    'control': 'mock',
    'cols': None,
    'imputation': None,
    'transform': 'log2',
    'normalization': 'median',
    'organism_filter': 'HUMAN',
    'peptide_threshold': 2,
    'filter_ignore': None,
    'first_col': 'gene',
    'split_accession': '-',
    'random_state': None,
    'raw': False,
    'verbose': False,
}

_READERS = {
    '.csv': lambda path: pd.read_csv(path),
    '.tsv': lambda path: pd.read_csv(path, sep='\t'),
    '.txt': lambda path: pd.read_csv(path, sep='\t'),
    '.xlsx': lambda path: pd.read_excel(path),
}


def _load_config(config_path):
    """Load YAML config file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f)


def _merge_config(options):
    """Overlay user options on DEFAULT_CONFIG, rejecting unknown keys."""
    options = options or {}
    unknown = sorted(set(options) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")

    config = dict(DEFAULT_CONFIG)
    config.update(options)
    return config


def _read_table(infile):
    """
    Return a private copy of the input table.

    Parameters
    ----------
    infile : pd.DataFrame or str
        In-memory table, or a path to a .csv, .tsv/.txt or .xlsx file.

    Returns
    -------
    pd.DataFrame
    """
    if isinstance(infile, pd.DataFrame):
        return infile.copy()

    if isinstance(infile, (str, os.PathLike)):
        path = os.fspath(infile)
        ext = os.path.splitext(path)[1].lower()
        if ext not in _READERS:
            raise ConfigurationError(
                f"Unsupported input file type '{ext}'. Use one of: {', '.join(sorted(_READERS))}"
            )
        if not os.path.exists(path):
            raise FileNotFoundError(f"Data file not found: {path}")
        return _READERS[ext](path)

    raise ConfigurationError(f"infile must be a DataFrame or a file path, got {type(infile).__name__}")
