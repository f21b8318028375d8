"""
IP-MS Table Preparation
=======================

Prepares affinity-purification mass spectrometry intensity tables
(bait vs control) for downstream interaction analysis.

Main Functions
--------------
prepare()             - Run the full pipeline on a table or file
prep_ip()             - Run the pipeline from a YAML configuration file
resolve_columns()     - Assign accession/bait/control/peptide column roles
zero_to_missing()     - Treat zero intensities as missing
transform_ip()        - Log transform intensities
normalize_ip()        - Median-centre each sample
filter_ip()           - Ignore-list, unique peptide and organism filters
resolve_accessions()  - Map accessions to UniProt IDs and gene symbols
impute_ip()           - Drop or impute missing values
logfc_ip()            - Per-replicate log fold changes

Example Workflow
----------------
>>> from ipprep import prepare
>>>
>>> table = prepare('BAIT', 'data/screen.csv', control='mock')
>>> result = prepare('BAIT', 'data/screen.csv', raw=True,
...                  imputation={'std_width': 0.5, 'shift': -1.8}, random_state=42)
>>> result['info']['n_imputed']
"""

from .accession import AccessionRecord, MyGeneResolver, StaticResolver, expand_accession, resolve_accessions
from .columns import ColumnRoles, describe_columns, resolve_columns
from .diagnostics import Diagnostics
from .errors import ConfigurationError, DataQualityWarning
from .filtering import detect_ignored, filter_ip, filter_organism, filter_peptides
from .foldchange import logfc_ip
from .imputation import drop_missing, impute_gaussian, impute_ip
from .normalization import normalize_ip, transform_ip, zero_to_missing
from .prep import prep_ip, prepare


__version__ = "0.1.0"

__all__ = [
    'prepare',
    'prep_ip',
    'ColumnRoles',
    'describe_columns',
    'resolve_columns',
    'zero_to_missing',
    'transform_ip',
    'normalize_ip',
    'detect_ignored',
    'filter_peptides',
    'filter_organism',
    'filter_ip',
    'AccessionRecord',
    'expand_accession',
    'StaticResolver',
    'MyGeneResolver',
    'resolve_accessions',
    'drop_missing',
    'impute_gaussian',
    'impute_ip',
    'logfc_ip',
    'Diagnostics',
    'ConfigurationError',
    'DataQualityWarning',
]
