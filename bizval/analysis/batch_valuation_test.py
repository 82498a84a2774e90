import pandas as pd
import pytest

from bizval.analysis.batch_valuation import _row_to_profile
from bizval.analysis.batch_valuation import batch_valuation
from bizval.analysis.batch_valuation import load_profiles_csv
from bizval.run import run_valuation
from bizval.scenarios.config import EngineConfig

CSV_HEADER = ('id,annual_revenue,cash_flow,growth_rate,'
              'monthly_recurring_revenue,annual_expenses,'
              'assets_tangible,assets_intangible,assets_inventory,'
              'assets_equipment,assets_real_estate,'
              'liabilities_short_term,liabilities_long_term,'
              'liabilities_contingent,industry,business_age_years,'
              'customer_count,market_position\n')


class TestBatchValuation:

  def test_rows_in_input_order(self, sample_business):
    profiles = []
    for i, revenue in enumerate([1_000_000, 5_000_000, 20_000_000]):
      profile = dict(sample_business, annualRevenue=revenue)
      profile['id'] = f'biz-{i}'
      profiles.append(profile)

    df = batch_valuation(profiles, max_workers=3)

    assert df['id'].tolist() == ['biz-0', 'biz-1', 'biz-2']
    assert (df['status'] == 'completed').all()
    assert (df['weighted_value'] > 0).all()

  def test_matches_single_valuation(self, sample_business):
    df = batch_valuation([sample_business])
    single = run_valuation(sample_business)

    assert df.loc[0, 'id'] == 'row-0'
    assert df.loc[0, 'weighted_value'] == pytest.approx(single.weighted.value)
    assert df.loc[0, 'weight_asset'] + df.loc[0, 'weight_income'] + df.loc[
        0, 'weight_market'] == pytest.approx(1.0)

  def test_invalid_profile_isolated(self, sample_business):
    bad = dict(sample_business, annualRevenue=-5)
    bad['id'] = 'bad'

    df = batch_valuation([sample_business, bad])

    assert df['status'].tolist() == ['completed', 'failed']
    assert 'annual_revenue' in df.loc[1, 'error']
    assert df.loc[0, 'weighted_value'] > 0

  def test_config_name_recorded(self, sample_business):
    df = batch_valuation([sample_business], EngineConfig.conservative())

    assert df.loc[0, 'config'] == 'conservative'


class TestLoadProfilesCsv:

  def test_nests_asset_and_liability_columns(self, tmp_path):
    path = tmp_path / 'businesses.csv'
    path.write_text(
        CSV_HEADER +
        'acme,5000000,1000000,0.15,100000,4000000,2000000,500000,300000,'
        '800000,1500000,500000,1000000,100000,technology,5,150,average\n')

    profiles = load_profiles_csv(path)

    assert len(profiles) == 1
    profile = profiles[0]
    assert profile['id'] == 'acme'
    assert profile['assets']['real_estate'] == 1_500_000
    assert profile['liabilities']['long_term'] == 1_000_000
    assert 'assets_tangible' not in profile

  def test_blank_cells_omitted(self):
    profile = _row_to_profile({
        'annual_revenue': 100.0,
        'cash_flow': 10.0,
        'growth_rate': float('nan'),
        'assets_tangible': 50.0,
        'assets_intangible': float('nan'),
    })

    assert 'growth_rate' not in profile
    assert profile['assets'] == {'tangible': 50.0}
    assert profile['liabilities'] == {}

  def test_csv_to_batch(self, tmp_path, sample_business):
    path = tmp_path / 'businesses.csv'
    path.write_text(
        CSV_HEADER +
        'acme,5000000,1000000,0.15,100000,4000000,2000000,500000,300000,'
        '800000,1500000,500000,1000000,100000,technology,5,150,average\n'
        'tiny,200000,-20000,,,,10000,,,,,,,,retail,0.5,4,weak\n')

    df = batch_valuation(load_profiles_csv(path))

    assert df['id'].tolist() == ['acme', 'tiny']
    assert (df['status'] == 'completed').all()
    assert df.loc[0, 'weighted_value'] == pytest.approx(
        run_valuation(sample_business).weighted.value)
    assert 'Negative Cash Flow' in df.loc[1, 'risk_factors']

  def test_missing_file(self, tmp_path):
    with pytest.raises(FileNotFoundError):
      load_profiles_csv(tmp_path / 'missing.csv')


def test_result_frame_is_dataframe(sample_business):
  assert isinstance(batch_valuation([sample_business]), pd.DataFrame)
