"""
Column role resolution for IP-MS intensity tables.

Classifies the raw header into an accession column, paired bait and
control intensity columns and an optional unique-peptide count column,
either from an explicit column list or by matching naming patterns.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class ColumnRoles:
    """Role assignment for the columns used by the pipeline."""

    accession: str
    bait: Tuple[str, ...]
    control: Tuple[str, ...]
    unique_peptides: Optional[str] = None

    def __post_init__(self):
        if len(self.bait) != len(self.control):
            raise ConfigurationError(
                f"disproportionate amount of bait ({len(self.bait)}) and "
                f"control ({len(self.control)}) columns"
            )
        if len(self.bait) < 2:
            raise ConfigurationError('expected at least two bait/control replicate pairs')

    @property
    def pairs(self):
        return list(zip(self.bait, self.control))

    @property
    def intensity(self):
        cols = []
        for bait_col, control_col in self.pairs:
            cols.extend([bait_col, control_col])
        return cols

    @property
    def n_pairs(self):
        return len(self.bait)


def _as_list(labels):
    if isinstance(labels, str):
        return [labels]
    return list(labels)


def _natural_key(name):
    """Sort key comparing digit runs numerically ('rep10' after 'rep2')."""
    return [int(tok) if tok.isdigit() else tok.lower() for tok in re.split(r'(\d+)', str(name))]


def _bait_matcher(bait, labels):
    """
    Return a predicate for bait column names.

    An ordered sequence of labels must appear in that order; a set of
    labels has no order, so each label only has to appear somewhere.
    """
    if isinstance(bait, (set, frozenset)):
        return lambda name: all(re.search(label, name) for label in labels)

    pattern = '.*'.join(labels)
    return lambda name: re.search(pattern, name) is not None


def describe_columns(df, control='mock'):
    """
    Classify the table header before any columns are selected.

    Parameters
    ----------
    df : pd.DataFrame
        Raw input table.
    control : str, optional
        Pattern identifying control columns (default: 'mock').

    Returns
    -------
    dict
        - 'col_accession': name of the accession column
        - 'cols_ratios': pre-computed ratio columns
        - 'cols_control': control intensity columns
        - 'cols_unique_peptides': unique peptide/protein count columns
    """
    cnames = [str(c) for c in df.columns]

    accession = next((c for c in cnames if 'accession' in c.lower()), cnames[0] if cnames else None)
    ratios = [c for c in cnames if 'ratio' in c.lower()]
    unique = [
        c for c in cnames
        if 'unique' in c.lower() and ('peptide' in c.lower() or 'protein' in c.lower())
    ]

    excluded = set(ratios) | set(unique) | {accession}
    controls = [c for c in cnames if c not in excluded and re.search(control, c)]

    return {
        'col_accession': accession,
        'cols_ratios': ratios,
        'cols_control': controls,
        'cols_unique_peptides': unique,
    }


def resolve_columns(df, bait, control='mock', cols=None, diagnostics=None):
    """
    Assign pipeline roles to the columns of an IP-MS table.

    Explicit mode (``cols`` given) expects the layout
    ``accession, bait1, control1, bait2, control2, ...`` and uses it as is.
    Inference mode selects every column matching all bait labels (in
    order) that is not a ratio or control column, and every column
    matching the control label. Both groups are naturally sorted and
    paired by position, so any number of replicate pairs is accepted.

    Parameters
    ----------
    df : pd.DataFrame
        Raw input table.
    bait : str, list of str or set of str
        Label(s) that must appear in bait column names. A list must match in
        order; every member of a set must match, in any order.
    control : str, optional
        Label of the control/mock columns (default: 'mock').
    cols : list of str, optional
        Explicit column list, at least 5 entries.
    diagnostics : Diagnostics, optional
        Receives verbose progress lines.

    Returns
    -------
    ColumnRoles

    Raises
    ------
    ConfigurationError
        If the header cannot be resolved into matched bait/control pairs.
    """
    if bait is None or (not isinstance(bait, str) and all(b is None for b in bait)):
        raise ConfigurationError('Bait can not be None!')

    info = describe_columns(df, control=control)
    cnames = [str(c) for c in df.columns]

    if len(info['cols_unique_peptides']) > 1:
        raise ConfigurationError(
            'More than one column indicating unique peptides '
            f"({', '.join(info['cols_unique_peptides'])}). Please, only input one!"
        )
    unique_col = info['cols_unique_peptides'][0] if info['cols_unique_peptides'] else None

    if cols is not None:
        cols = [str(c) for c in cols]
        unmatched = [c for c in cols if c not in cnames]
        if unmatched:
            raise ConfigurationError(
                '\n'.join(f">{c}< is not in the data columns." for c in unmatched)
            )
        if len(cols) < 5:
            raise ConfigurationError(
                'expected at least 5 columns specified. Did you forget to include accession numbers?'
            )
        if (len(cols) - 1) % 2:
            raise ConfigurationError(
                'expected accession followed by bait/control column pairs, '
                f'got {len(cols) - 1} intensity columns'
            )
        repeated = sorted(set(c for c in cols if cols.count(c) > 1))
        if repeated:
            raise ConfigurationError(
                f"columns may only be used once, repeated: {', '.join(repeated)}"
            )
        roles = ColumnRoles(
            accession=cols[0],
            bait=tuple(cols[1::2]),
            control=tuple(cols[2::2]),
            unique_peptides=unique_col,
        )
    else:
        labels = [str(b) for b in _as_list(bait) if b is not None]
        if isinstance(bait, (set, frozenset)):
            labels = sorted(labels)
        absent = [b for b in labels if not any(re.search(b, c) for c in cnames)]
        if absent:
            raise ConfigurationError(f"{' '.join(absent)} (bait) not in data columns!")

        excluded = set(info['cols_ratios']) | set(info['cols_control']) | set(info['cols_unique_peptides'])
        excluded.add(info['col_accession'])
        is_bait = _bait_matcher(bait, labels)
        bait_cols = [c for c in cnames if c not in excluded and is_bait(c)]
        control_cols = info['cols_control']

        if len(bait_cols) == 1:
            raise ConfigurationError('expected at least two columns of baits, only one was found!')
        if len(control_cols) == 1:
            raise ConfigurationError('expected at least two columns of controls, only one was found!')
        if not bait_cols:
            raise ConfigurationError('bait columns were not found!')
        if not control_cols:
            raise ConfigurationError(f"control columns matching '{control}' were not found!")
        if len(bait_cols) != len(control_cols):
            raise ConfigurationError(
                f'disproportionate amount of bait ({len(bait_cols)}) and '
                f'control ({len(control_cols)}) columns were found'
            )

        roles = ColumnRoles(
            accession=info['col_accession'],
            bait=tuple(sorted(bait_cols, key=_natural_key)),
            control=tuple(sorted(control_cols, key=_natural_key)),
            unique_peptides=unique_col,
        )

    if diagnostics is not None:
        diagnostics.note(f"[Verbose] Selected bait cols: {' '.join(roles.bait)}")
        diagnostics.note(f"[Verbose] Selected control cols: {' '.join(roles.control)}")
        diagnostics.note(f"Accession column: {roles.accession}")
        if roles.unique_peptides:
            diagnostics.note(f"Unique peptide column: {roles.unique_peptides}")

    return roles
