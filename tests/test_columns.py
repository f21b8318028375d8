"""Tests for ipprep.columns module."""

import pandas as pd
import pytest

from ipprep import ColumnRoles, ConfigurationError, Diagnostics, describe_columns, resolve_columns


def _table(columns):
    return pd.DataFrame({c: [1.0, 2.0] for c in columns})


class TestDescribeColumns:
    def test_classifies_header(self):
        df = _table(['Protein Accession', 'BAIT_1', 'mock_1', 'ratio BAIT/mock', 'Unique peptides'])
        info = describe_columns(df, control='mock')

        assert info['col_accession'] == 'Protein Accession'
        assert info['cols_ratios'] == ['ratio BAIT/mock']
        assert info['cols_control'] == ['mock_1']
        assert info['cols_unique_peptides'] == ['Unique peptides']

    def test_accession_falls_back_to_first_column(self):
        df = _table(['id', 'BAIT_1', 'mock_1'])
        assert describe_columns(df)['col_accession'] == 'id'


class TestInferredColumns:
    def test_resolves_two_pairs(self, scenario_df):
        roles = resolve_columns(scenario_df, 'BAIT', control='mock')

        assert roles.accession == 'Accession'
        assert roles.pairs == [('BAIT_1', 'mock_1'), ('BAIT_2', 'mock_2')]
        assert roles.unique_peptides == 'Unique peptides'

    def test_pairs_any_replicate_count_in_natural_order(self):
        df = _table(['Accession', 'BAIT_10', 'mock_2', 'BAIT_2', 'mock_10', 'BAIT_1', 'mock_1'])
        roles = resolve_columns(df, 'BAIT')

        assert roles.bait == ('BAIT_1', 'BAIT_2', 'BAIT_10')
        assert roles.control == ('mock_1', 'mock_2', 'mock_10')
        assert roles.n_pairs == 3

    def test_ratio_columns_are_not_baits(self):
        df = _table(['Accession', 'BAIT_1', 'BAIT_2', 'mock_1', 'mock_2', 'Ratio BAIT_1'])
        roles = resolve_columns(df, 'BAIT')
        assert 'Ratio BAIT_1' not in roles.bait

    def test_multiple_labels_must_all_match_in_order(self):
        df = _table(['Accession', 'TP53 IP 1', 'TP53 IP 2', 'TP53 input', 'mock 1', 'mock 2'])
        roles = resolve_columns(df, ['TP53', 'IP'])
        assert roles.bait == ('TP53 IP 1', 'TP53 IP 2')

    @pytest.mark.parametrize('bait', [{'TP53', 'IP'}, frozenset(['IP', 'TP53'])])
    def test_label_set_matches_in_any_order(self, bait):
        df = _table(['Accession', 'TP53 IP 1', 'TP53 IP 2', 'mock 1', 'mock 2'])
        roles = resolve_columns(df, bait)
        assert roles.bait == ('TP53 IP 1', 'TP53 IP 2')

    def test_label_set_matches_reversed_names(self):
        df = _table(['Accession', 'IP TP53 1', 'IP TP53 2', 'mock 1', 'mock 2'])
        roles = resolve_columns(df, {'TP53', 'IP'})
        assert roles.bait == ('IP TP53 1', 'IP TP53 2')

    def test_intensity_interleaves_pairs(self, scenario_df):
        roles = resolve_columns(scenario_df, 'BAIT')
        assert roles.intensity == ['BAIT_1', 'mock_1', 'BAIT_2', 'mock_2']

    def test_mismatched_counts_raise(self):
        df = _table(['Accession', 'BAIT_1', 'BAIT_2', 'BAIT_3', 'mock_1', 'mock_2'])
        with pytest.raises(ConfigurationError, match='disproportionate'):
            resolve_columns(df, 'BAIT')

    def test_single_bait_column_raises(self):
        df = _table(['Accession', 'BAIT_1', 'mock_1', 'mock_2'])
        with pytest.raises(ConfigurationError, match='two columns of baits'):
            resolve_columns(df, 'BAIT')

    def test_single_control_column_raises(self):
        df = _table(['Accession', 'BAIT_1', 'BAIT_2', 'mock_1'])
        with pytest.raises(ConfigurationError, match='two columns of controls'):
            resolve_columns(df, 'BAIT')

    def test_missing_controls_raise(self):
        df = _table(['Accession', 'BAIT_1', 'BAIT_2', 'ctrl_1', 'ctrl_2'])
        with pytest.raises(ConfigurationError, match='control columns'):
            resolve_columns(df, 'BAIT', control='mock')

    def test_absent_bait_label_raises(self, scenario_df):
        with pytest.raises(ConfigurationError, match='XYZ'):
            resolve_columns(scenario_df, ['BAIT', 'XYZ'])

    def test_none_bait_raises(self, scenario_df):
        with pytest.raises(ConfigurationError, match='Bait'):
            resolve_columns(scenario_df, None)

    def test_two_unique_peptide_columns_raise(self, scenario_df):
        df = scenario_df.assign(**{'Unique proteins': [1, 1]})
        with pytest.raises(ConfigurationError, match='More than one'):
            resolve_columns(df, 'BAIT')

    def test_verbose_lists_selected_columns(self, scenario_df, capsys):
        resolve_columns(scenario_df, 'BAIT', diagnostics=Diagnostics(verbose=True))
        out = capsys.readouterr().out

        assert 'Selected bait cols: BAIT_1 BAIT_2' in out
        assert 'Selected control cols: mock_1 mock_2' in out


class TestExplicitColumns:
    def test_uses_columns_as_given(self, scenario_df):
        cols = ['Accession', 'BAIT_2', 'mock_2', 'BAIT_1', 'mock_1']
        roles = resolve_columns(scenario_df, 'BAIT', cols=cols)

        assert roles.bait == ('BAIT_2', 'BAIT_1')
        assert roles.control == ('mock_2', 'mock_1')

    @pytest.mark.parametrize('cols', [
        ['Accession'],
        ['Accession', 'BAIT_1', 'mock_1'],
        ['Accession', 'BAIT_1', 'mock_1', 'BAIT_2'],
    ])
    def test_fewer_than_five_columns_raise(self, scenario_df, cols):
        with pytest.raises(ConfigurationError, match='at least 5'):
            resolve_columns(scenario_df, 'BAIT', cols=cols)

    def test_unknown_columns_are_listed(self, scenario_df):
        cols = ['Accession', 'BAIT_1', 'mock_1', 'BAIT_9', 'mock_9']
        with pytest.raises(ConfigurationError) as excinfo:
            resolve_columns(scenario_df, 'BAIT', cols=cols)

        assert '>BAIT_9<' in str(excinfo.value)
        assert '>mock_9<' in str(excinfo.value)

    def test_unpaired_intensity_columns_raise(self):
        df = _table(['Accession', 'a', 'b', 'c', 'd', 'e'])
        with pytest.raises(ConfigurationError, match='pairs'):
            resolve_columns(df, 'a', cols=['Accession', 'a', 'b', 'c', 'd', 'e'])

    def test_repeated_columns_raise(self, scenario_df):
        cols = ['Accession', 'BAIT_1', 'BAIT_1', 'BAIT_2', 'BAIT_2']
        with pytest.raises(ConfigurationError, match='repeated: BAIT_1, BAIT_2'):
            resolve_columns(scenario_df, 'BAIT', cols=cols)


class TestColumnRoles:
    def test_rejects_unequal_groups(self):
        with pytest.raises(ConfigurationError):
            ColumnRoles('Accession', ('b1', 'b2'), ('c1',))

    def test_rejects_single_pair(self):
        with pytest.raises(ConfigurationError):
            ColumnRoles('Accession', ('b1',), ('c1',))
