"""
Data preparation pipeline for IP-MS bait vs control tables.

Resolves column roles, treats zeros as missing, transforms and
normalizes intensities, filters rows, resolves gene symbols, handles
missing values and computes per-replicate log fold changes.
"""

import os
import re

from .accession import resolve_accessions
from .columns import resolve_columns
from .diagnostics import Diagnostics
from .errors import ConfigurationError
from .filtering import filter_ip
from .foldchange import logfc_ip
from .imputation import _imputation_params, impute_ip
from .normalization import normalize_ip, transform_ip, zero_to_missing
from .utils import _load_config, _merge_config, _read_table


ACCESSION = 'accession'


def prepare(bait, infile, cols=None, imputation=None, transform='log2', normalization='median',
            organism_filter='HUMAN', raw=False, first_col='gene', control='mock',
            peptide_threshold=2, filter_ignore=None, split_accession='-', resolver=None,
            random_state=None, verbose=False):
    """
    Prepare an IP-MS intensity table for interaction analysis.

    This function:
    1. Resolves accession, bait, control and unique peptide columns
    2. Converts zero intensities to missing values
    3. Transforms intensities (log2 by default)
    4. Normalizes each sample (median centring by default)
    5. Filters rows by unique peptides and organism, honouring the ignore list
    6. Resolves UniProt accessions and gene symbols
    7. Drops or imputes missing values
    8. Calculates one log fold change per bait/control replicate pair

    Parameters
    ----------
    bait : str or list of str
        Label(s) matched against column names to find bait columns.
    infile : pd.DataFrame or str
        Input table or path to a .csv/.tsv/.xlsx file.
    cols : list of str, optional
        Explicit columns: accession, bait1, control1, bait2, control2, ...
    imputation : dict, optional
        None drops rows with missing values (default);
        {'std_width': 0.5, 'shift': -1.8} imputes from a shifted normal.
    transform : str or callable, optional
        Elementwise transform (default: 'log2').
    normalization : str or callable, optional
        Column-wise normalization (default: 'median').
    organism_filter : str, optional
        Substring required in accessions (default: 'HUMAN'); None disables.
    raw : bool, optional
        Return the full intermediate table and diagnostics (default: False).
    first_col : str, optional
        Name of the leading gene column in summary output (default: 'gene').
    control : str, optional
        Label of the control columns (default: 'mock').
    peptide_threshold : int, optional
        Minimum unique peptides (default: 2).
    filter_ignore : str or list of str, optional
        Accession patterns exempt from the peptide and organism filters.
    split_accession : str, optional
        Isoform separator in accessions (default: '-').
    resolver : object, optional
        Accession resolver with ``resolve(accessions) -> dict``; defaults to
        ``MyGeneResolver``.
    random_state : None, int or np.random.Generator, optional
        Seed or generator for Gaussian imputation.
    verbose : bool, optional
        Print progress (default: False).

    Returns
    -------
    pd.DataFrame or dict
        Summary table with gene, accession, uniprot, rep1..repN (and
        'imputed'), or in raw mode a dict with:
        - 'df': full intermediate table
        - 'info': counts, per-stage removals, events and column roles

    Raises
    ------
    ConfigurationError
        For invalid options or an unresolvable column layout.

    Example
    -------
    >>> result = prepare('BAIT', 'data/screen.csv', imputation={'std_width': 0.5, 'shift': -1.8},
    ...                  random_state=1)
    >>> result.columns.tolist()
    ['gene', 'accession', 'uniprot', 'rep1', 'rep2', 'imputed']
    """
    diagnostics = Diagnostics(verbose=verbose)

    if first_col in (ACCESSION, 'uniprot', 'imputed') or re.fullmatch(r'rep\d+', str(first_col)):
        raise ConfigurationError(f"first_col '{first_col}' clashes with an output column")
    if imputation is not None:
        _imputation_params(imputation)

    data = _read_table(infile)
    initial_protein_count = len(data)

    diagnostics.header("IP-MS DATA PREPARATION")
    diagnostics.note(f"Loaded {data.shape[0]} proteins, {data.shape[1]} columns")

    # =========================================================================
    # 1. RESOLVE COLUMN ROLES
    # =========================================================================
    diagnostics.step("[1/7] Identifying bait and control columns...")

    roles = resolve_columns(data, bait, control=control, cols=cols, diagnostics=diagnostics)
    intensity = roles.intensity

    work = data[intensity].copy()
    work.insert(0, ACCESSION, data[roles.accession])
    if roles.unique_peptides is not None and roles.unique_peptides not in work.columns:
        work[roles.unique_peptides] = data[roles.unique_peptides]

    diagnostics.note(f"{roles.n_pairs} bait/control replicate pairs")

    # =========================================================================
    # 2. ZEROS TO MISSING
    # =========================================================================
    diagnostics.step("[2/7] Converting zero intensities to missing...")
    zero_to_missing(work, intensity, diagnostics=diagnostics)

    # =========================================================================
    # 3. TRANSFORM AND NORMALIZE
    # =========================================================================
    diagnostics.step("[3/7] Transforming and normalizing intensities...")
    transform_ip(work, intensity, method=transform, diagnostics=diagnostics)
    normalize_ip(work, intensity, method=normalization, diagnostics=diagnostics)

    # =========================================================================
    # 4. QUALITY FILTERS
    # =========================================================================
    diagnostics.step("[4/7] Filtering by unique peptides and organism...")
    work = filter_ip(
        work, ACCESSION,
        peptide_col=roles.unique_peptides,
        peptide_threshold=peptide_threshold,
        organism=organism_filter,
        ignore=filter_ignore,
        diagnostics=diagnostics,
    )

    # =========================================================================
    # 5. GENE SYMBOLS
    # =========================================================================
    diagnostics.step("[5/7] Mapping accessions to gene symbols...")
    resolve_accessions(work, ACCESSION, resolver=resolver, split=split_accession,
                       diagnostics=diagnostics)

    # =========================================================================
    # 6. MISSING VALUES
    # =========================================================================
    diagnostics.step("[6/7] Handling missing values...")
    work = impute_ip(work, intensity, imputation=imputation, random_state=random_state,
                     diagnostics=diagnostics)

    # =========================================================================
    # 7. LOG FOLD CHANGE
    # =========================================================================
    diagnostics.step("[7/7] Calculating log fold changes...")
    fc_cols = logfc_ip(work, roles, diagnostics=diagnostics)

    total_rows_removed = initial_protein_count - len(work)

    diagnostics.header("DATA PREPARATION COMPLETE")
    diagnostics.note(f"Initial proteins:   {initial_protein_count}")
    diagnostics.note(f"Final proteins:     {len(work)}")
    diagnostics.note(f"Proteins removed:   {total_rows_removed}")

    if raw:
        return {
            'df': work,
            'info': diagnostics.to_dict(roles=roles, total_rows_removed=total_rows_removed),
        }

    diagnostics.emit_warnings()
    return _summarize(work, fc_cols, first_col)


def _summarize(df, fc_cols, first_col='gene'):
    """Keep identifier, fold change and imputation flag columns."""
    keep = ['gene', ACCESSION, 'uniprot'] + list(fc_cols)
    if 'imputed' in df.columns:
        keep.append('imputed')

    summary = df[keep].copy()
    if first_col is not None and first_col != 'gene':
        summary = summary.rename(columns={'gene': first_col})
    return summary


def prep_ip(config_path, infile=None, resolver=None):
    """
    Run ``prepare`` with options from a YAML configuration file.

    The file holds the input path under ``data_paths.input_file`` and the
    ``prepare`` options under a ``prepare`` block, for example::

        data_paths:
          input_file: data/raw/screen.csv
        prepare:
          bait: BAIT
          control: mock
          imputation:
            std_width: 0.5
            shift: -1.8
          random_state: 42

    Relative input paths are resolved against the config file location.

    Parameters
    ----------
    config_path : str
        Path to YAML configuration file.
    infile : pd.DataFrame or str, optional
        Overrides ``data_paths.input_file``.
    resolver : object, optional
        Accession resolver passed to ``prepare``.

    Returns
    -------
    pd.DataFrame or dict
        See ``prepare``.
    """
    config = _load_config(config_path) or {}
    options = _merge_config(config.get('prepare'))

    if infile is None:
        infile = config.get('data_paths', {}).get('input_file')
        if infile is None:
            raise ConfigurationError("No input table: set data_paths.input_file or pass infile")
        if not os.path.isabs(infile):
            infile = os.path.join(os.path.dirname(os.path.abspath(config_path)), infile)

    return prepare(infile=infile, resolver=resolver, **options)
