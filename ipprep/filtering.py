"""
Row quality filters for the IP-MS preparation pipeline.

Rows matched by the ignore list are flagged first and survive both the
unique-peptide threshold and the organism filter.
"""

import pandas as pd


def detect_ignored(accessions, ignore=None):
    """
    Flag accessions matching any entry of an ignore list.

    Parameters
    ----------
    accessions : pd.Series
        Raw accession strings.
    ignore : str or list of str, optional
        Regular expressions searched for in each accession.

    Returns
    -------
    pd.Series
        Boolean flags aligned with ``accessions``.

    Example
    -------
    >>> detect_ignored(pd.Series(['P1_HUMAN', 'P2_MOUSE']), ['P2']).tolist()
    [False, True]
    """
    flags = pd.Series(False, index=accessions.index)
    if ignore is None:
        return flags
    if isinstance(ignore, str):
        ignore = [ignore]

    text = accessions.astype(str)
    for pattern in ignore:
        flags |= text.str.contains(str(pattern), regex=True, na=False)
    return flags


def filter_peptides(df, peptide_col, threshold=2, diagnostics=None):
    """
    Keep rows with at least ``threshold`` unique peptides, or flagged rows.

    Skipped with a data-quality event when there is no peptide column.
    """
    if peptide_col is None:
        if diagnostics is not None:
            diagnostics.warn(
                'peptides',
                'No columns indicating amount of unique peptides! Quality check >unique peptides< skipped.'
            )
        return df

    before = len(df)
    df['enough_peptides'] = (df[peptide_col] >= threshold) | df['filter_ignore']
    df = df[df['enough_peptides']].copy()
    removed = before - len(df)

    if diagnostics is not None:
        diagnostics.removed_rows('peptides', removed)
        diagnostics.note(f"Removed {removed} proteins with < {threshold} unique peptides")
        diagnostics.note(f"Remaining: {len(df)} proteins")

    return df


def filter_organism(df, accession_col, organism='HUMAN', diagnostics=None):
    """
    Keep rows whose accession contains ``organism``, or flagged rows.

    Skipped with a data-quality event when ``organism`` is None.
    """
    if organism is None:
        if diagnostics is not None:
            diagnostics.warn('organism', 'No organism filter applied! Assuming all proteins are OK.')
        return df

    before = len(df)
    match = df[accession_col].astype(str).str.contains(organism, regex=False, na=False)
    df['organism_match'] = match | df['filter_ignore']
    df = df[df['organism_match']].copy()
    removed = before - len(df)

    if diagnostics is not None:
        diagnostics.removed_rows('organism', removed)
        diagnostics.note(f"Removed {removed} proteins without '{organism}' in the accession")
        diagnostics.note(f"Remaining: {len(df)} proteins")

    return df


def filter_ip(df, accession_col, peptide_col=None, peptide_threshold=2,
              organism='HUMAN', ignore=None, diagnostics=None):
    """
    Run the ignore-list, unique-peptide and organism filters in order.

    Parameters
    ----------
    df : pd.DataFrame
        Working table.
    accession_col : str
        Column holding raw accessions.
    peptide_col : str, optional
        Unique peptide count column; None skips the peptide filter.
    peptide_threshold : int, optional
        Minimum unique peptides (default: 2).
    organism : str, optional
        Substring required in the accession (default: 'HUMAN'); None
        disables the filter.
    ignore : str or list of str, optional
        Accession patterns exempt from both filters.
    diagnostics : Diagnostics, optional

    Returns
    -------
    pd.DataFrame
        Filtered copy with a ``filter_ignore`` column.
    """
    df['filter_ignore'] = detect_ignored(df[accession_col], ignore)
    n_ignored = int(df['filter_ignore'].sum())

    if diagnostics is not None:
        diagnostics.record('n_ignored', n_ignored)
        if n_ignored > 0:
            diagnostics.warn('filtering', f"{n_ignored} entries were ignored by the filters.", count=n_ignored)

    df = filter_peptides(df, peptide_col, threshold=peptide_threshold, diagnostics=diagnostics)
    df = filter_organism(df, accession_col, organism=organism, diagnostics=diagnostics)
    return df
