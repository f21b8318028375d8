"""
Accession parsing and gene symbol resolution.

Resolvers expose ``resolve(accessions) -> dict`` mapping each raw
accession string to an ``AccessionRecord``. Accessions a resolver cannot
map are simply absent from the result (or carry a None gene); they are
kept in the table with a missing gene symbol.
"""

from collections import namedtuple

import mygene
import numpy as np
import pandas as pd


AccessionRecord = namedtuple('AccessionRecord', ['uniprot', 'gene'])


def expand_accession(accession, split='-'):
    """
    Split a raw accession into its UniProt accession and entry name.

    Handles 'sp|P04637|P53_HUMAN', 'P04637-2', 'P04637', 'P53_HUMAN' and
    protein groups such as 'P04637;Q00987' (first member is used).

    Parameters
    ----------
    accession : str
        Raw accession string.
    split : str, optional
        Isoform separator removed from the UniProt accession (default: '-').

    Returns
    -------
    dict
        {'uniprot': str or None, 'entry_name': str or None}
    """
    text = str(accession).strip().split(';')[0]
    parts = [p for p in text.split('|') if p]

    uniprot, entry_name = None, None
    if len(parts) >= 3 and parts[0] in ('sp', 'tr'):
        uniprot, entry_name = parts[1], parts[2]
    elif len(parts) == 2:
        uniprot, entry_name = parts
    elif parts:
        token = parts[0]
        if '_' in token:
            entry_name = token
        else:
            uniprot = token

    if uniprot:
        if split:
            uniprot = uniprot.split(split)[0]
        uniprot = uniprot.split('.')[0]

    return {'uniprot': uniprot or None, 'entry_name': entry_name}


class StaticResolver:
    """
    Resolve accessions from an in-memory mapping.

    Keys may be raw accessions, UniProt accessions or entry names; values
    are gene symbols, ``AccessionRecord`` tuples or dicts with 'uniprot'
    and 'gene' keys.
    """

    def __init__(self, mapping, split='-'):
        self.mapping = dict(mapping)
        self.split = split

    def _lookup(self, accession):
        expanded = expand_accession(accession, split=self.split)
        for key in (accession, expanded['uniprot'], expanded['entry_name']):
            if key is not None and key in self.mapping:
                return self.mapping[key], expanded
        return None, expanded

    def resolve(self, accessions):
        records = {}
        for accession in accessions:
            value, expanded = self._lookup(accession)
            if value is None:
                continue
            if isinstance(value, AccessionRecord):
                records[accession] = value
            elif isinstance(value, dict):
                records[accession] = AccessionRecord(
                    value.get('uniprot', expanded['uniprot']), value.get('gene')
                )
            else:
                records[accession] = AccessionRecord(expanded['uniprot'], value)
        return records


class MyGeneResolver:
    """
    Resolve UniProt accessions to gene symbols with mygene.info.

    Scopes are tried in order; accessions mapped by an earlier scope are
    not queried again. When a hit has no symbol, the first part of its
    name is used instead.
    """

    SCOPES = (
        'uniprot',
        'accession,uniprot,refseq,ensembl.protein',
    )

    def __init__(self, species='human', scopes=None, split='-', client=None):
        self.species = species
        self.scopes = tuple(scopes) if scopes else self.SCOPES
        self.split = split
        self.client = client

    def resolve(self, accessions):
        if self.client is None:
            self.client = mygene.MyGeneInfo()

        cleaned_ids = {
            acc: expand_accession(acc, split=self.split)['uniprot'] for acc in accessions
        }
        unmapped_ids = set(pid for pid in cleaned_ids.values() if pid)
        protein_to_gene = {}

        for scope in self.scopes:
            if not unmapped_ids:
                break

            results = self.client.querymany(
                sorted(unmapped_ids),
                scopes=scope,
                fields='symbol,name',
                species=self.species,
                returnall=True,
                verbose=False,
            )

            for result in results['out']:
                query_id = result['query']
                if query_id not in unmapped_ids:
                    continue
                if 'symbol' in result:
                    protein_to_gene[query_id] = result['symbol']
                    unmapped_ids.remove(query_id)
                elif 'name' in result:
                    gene_name = result['name'].split(',')[0].split('(')[0].strip()
                    if len(gene_name) < 50:
                        protein_to_gene[query_id] = gene_name
                        unmapped_ids.remove(query_id)

        return {
            acc: AccessionRecord(pid, protein_to_gene[pid])
            for acc, pid in cleaned_ids.items()
            if pid in protein_to_gene
        }


def resolve_accessions(df, accession_col, resolver=None, split='-', diagnostics=None):
    """
    Add 'uniprot' and 'gene' columns resolved from the raw accessions.

    Resolution failures never drop rows: unresolved rows get a missing
    gene symbol and, where the accession can be parsed, the parsed UniProt
    accession.

    Parameters
    ----------
    df : pd.DataFrame
        Working table, modified in place.
    accession_col : str
        Column holding raw accessions.
    resolver : object, optional
        Anything with ``resolve(accessions) -> dict``. Defaults to a
        ``MyGeneResolver`` for human proteins.
    split : str, optional
        Isoform separator (default: '-').
    diagnostics : Diagnostics, optional

    Returns
    -------
    int
        Number of rows without a gene symbol.
    """
    if resolver is None:
        resolver = MyGeneResolver(split=split)

    accessions = df[accession_col]
    unique_ids = accessions.dropna().astype(str).unique().tolist()

    try:
        records = resolver.resolve(unique_ids) if unique_ids else {}
    except Exception as e:
        records = {}
        if diagnostics is not None:
            diagnostics.warn('accession', f"Could not map gene symbols: {e}")

    parsed = {acc: expand_accession(acc, split=split)['uniprot'] for acc in unique_ids}

    uniprot, genes = [], []
    for acc in accessions:
        acc = str(acc) if pd.notna(acc) else None
        record = records.get(acc)
        uniprot.append(record.uniprot if record is not None and record.uniprot else parsed.get(acc))
        genes.append(record.gene if record is not None and record.gene else np.nan)

    df['uniprot'] = uniprot
    df['gene'] = genes

    n_unresolved = int(df['gene'].isna().sum())
    if diagnostics is not None:
        diagnostics.record('n_unresolved', n_unresolved)
        diagnostics.note(f"Mapped {len(df) - n_unresolved}/{len(df)} proteins to gene symbols")
        if n_unresolved > 0:
            diagnostics.warn(
                'accession', f"{n_unresolved} proteins have no gene symbol", count=n_unresolved
            )

    return n_unresolved
