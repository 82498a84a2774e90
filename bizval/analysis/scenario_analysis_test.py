import pandas as pd
import pytest

from bizval.analysis.scenario_analysis import apply_shock
from bizval.analysis.scenario_analysis import build_scenarios
from bizval.analysis.scenario_analysis import DEFAULT_SHOCKS
from bizval.analysis.scenario_analysis import expected_value
from bizval.analysis.scenario_analysis import ScenarioShock
from bizval.domain.types import MarketPosition


class TestApplyShock:

  def test_shifts_growth_margin_and_position(self, sample_profile):
    shock = ScenarioShock('up', 1.0, growth_shift=0.05, margin_shift=0.02,
                          position_steps=1)

    shocked = apply_shock(sample_profile, shock)

    assert shocked.financials.growth_rate == pytest.approx(0.20)
    assert shocked.financials.cash_flow == pytest.approx(1_100_000)
    assert shocked.market_position == MarketPosition.STRONG
    assert sample_profile.financials.growth_rate == 0.15

  def test_position_saturates(self, make_profile):
    profile = make_profile(marketPosition='leader')
    shocked = apply_shock(profile, ScenarioShock('up', 1.0, position_steps=3))

    assert shocked.market_position == MarketPosition.LEADER

  def test_cash_flow_may_turn_negative(self, make_profile):
    profile = make_profile(cashFlow=50_000)
    shocked = apply_shock(profile,
                          ScenarioShock('down', 1.0, margin_shift=-0.02))

    assert shocked.financials.cash_flow == pytest.approx(-50_000)


class TestBuildScenarios:

  def test_default_scenarios_ordered(self, sample_profile):
    df = build_scenarios(sample_profile)

    assert isinstance(df, pd.DataFrame)
    assert df['scenario'].tolist() == ['conservative', 'base', 'optimistic']
    assert df['probability'].sum() == pytest.approx(1.0)

  def test_scenarios_bracket_base_case(self, sample_profile):
    df = build_scenarios(sample_profile).set_index('scenario')

    assert (df.loc['conservative', 'weighted_value'] <
            df.loc['base', 'weighted_value'] <
            df.loc['optimistic', 'weighted_value'])
    assert df.loc['conservative', 'market_position'] == 'weak'
    assert df.loc['optimistic', 'market_position'] == 'strong'

  def test_range_columns_bracket_value(self, sample_profile):
    df = build_scenarios(sample_profile)

    assert (df['low'] <= df['weighted_value']).all()
    assert (df['weighted_value'] <= df['high']).all()

  def test_empty_shocks_rejected(self, sample_profile):
    with pytest.raises(ValueError, match='shocks'):
      build_scenarios(sample_profile, shocks=())


class TestExpectedValue:

  def test_probability_weighted(self):
    df = pd.DataFrame({
        'probability': [0.25, 0.5, 0.25],
        'weighted_value': [100.0, 200.0, 400.0],
    })

    assert expected_value(df) == pytest.approx(225.0)

  def test_normalizes_probabilities(self):
    df = pd.DataFrame({
        'probability': [1.0, 1.0],
        'weighted_value': [100.0, 300.0],
    })

    assert expected_value(df) == pytest.approx(200.0)

  def test_zero_probability_rejected(self):
    df = pd.DataFrame({'probability': [0.0], 'weighted_value': [1.0]})

    with pytest.raises(ValueError):
      expected_value(df)

  def test_default_shocks_sum_to_one(self):
    assert sum(s.probability for s in DEFAULT_SHOCKS) == pytest.approx(1.0)
