"""Shared test fixtures for IP-MS preparation tests."""

import numpy as np
import pandas as pd
import pytest
import yaml

from ipprep import StaticResolver


@pytest.fixture
def scenario_df():
    """Two-protein table: one human protein with a zero, one mouse protein."""
    return pd.DataFrame({
        'Accession': ['P1_HUMAN', 'P2_MOUSE'],
        'BAIT_1': [0, 8],
        'BAIT_2': [4, 8],
        'mock_1': [2, 2],
        'mock_2': [2, 2],
        'Unique peptides': [3, 3],
    })


@pytest.fixture
def scenario_resolver():
    return StaticResolver({'P1_HUMAN': 'GENE1', 'P2_MOUSE': 'Gene2'})


@pytest.fixture
def screen_df():
    """Synthetic three-replicate screen with missing values, zeros and non-human hits."""
    np.random.seed(42)

    n_proteins = 60
    n_replicates = 3

    data = {
        'Accession': [f'sp|P{str(i).zfill(5)}|G{i}_HUMAN' for i in range(n_proteins)],
        'Unique peptides': np.random.randint(1, 20, n_proteins),
    }

    for i in range(1, n_replicates + 1):
        for label in ('BAIT', 'mock'):
            values = np.random.lognormal(mean=20, sigma=1.5, size=n_proteins)
            mask = np.random.random(n_proteins) < 0.1
            values[mask] = np.nan
            data[f'Intensity {label}_{i}'] = values

    # Clear enrichment for the first proteins
    for i in range(1, n_replicates + 1):
        data[f'Intensity BAIT_{i}'][:5] = np.random.lognormal(mean=25, sigma=0.5, size=5)

    # Zeros meaning "not detected"
    data['Intensity mock_1'][10:13] = 0

    # Non-human contaminants and low peptide proteins
    for i in (50, 51, 52):
        data['Accession'][i] = f'sp|Q{str(i).zfill(5)}|G{i}_MOUSE'
    data['Unique peptides'][-3:] = 1

    return pd.DataFrame(data)


@pytest.fixture
def screen_resolver():
    return StaticResolver({f'P{str(i).zfill(5)}': f'GENE{i}' for i in range(40)})


@pytest.fixture
def sample_config(tmp_path, screen_df):
    """Write the synthetic screen to CSV and a matching YAML config."""
    csv_path = tmp_path / 'screen.csv'
    screen_df.to_csv(csv_path, index=False)

    config = {
        'experiment': {
            'name': 'Test_Experiment',
            'description': 'Unit test experiment',
        },
        'data_paths': {
            'input_file': 'screen.csv',
        },
        'prepare': {
            'bait': 'BAIT',
            'control': 'mock',
            'imputation': {'std_width': 0.5, 'shift': -1.8},
            'random_state': 7,
            'raw': True,
        },
    }

    config_path = str(tmp_path / 'test_config.yaml')
    with open(config_path, 'w') as f:
        yaml.dump(config, f)

    return config_path, tmp_path
