"""
Log fold change calculation for bait vs control replicate pairs.
"""


def logfc_ip(df, roles, diagnostics=None):
    """
    Add one log fold change column per bait/control replicate pair.

    Intensities are already log transformed, so the fold change of pair i
    is bait_i - control_i. Missing inputs give a missing fold change.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    roles : ColumnRoles
        Resolved column roles.
    diagnostics : Diagnostics, optional

    Returns
    -------
    list of str
        Names of the fold change columns ('rep1', 'rep2', ...).
    """
    fc_cols = []
    for i, (bait_col, control_col) in enumerate(roles.pairs, 1):
        name = f"rep{i}"
        df[name] = df[bait_col] - df[control_col]
        fc_cols.append(name)

        if diagnostics is not None:
            diagnostics.note(f"{name} = {bait_col} - {control_col}")

    return fc_cols
