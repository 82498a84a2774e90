import math
import warnings

import pytest

from bizval.domain.errors import DegenerateResultWarning
from bizval.domain.types import Financials
from bizval.domain.types import Industry
from bizval.domain.types import MarketPosition
from bizval.engine.dcf import compute_enterprise_value
from bizval.methods.income_based import earnings_multiple_valuation
from bizval.methods.income_based import IncomeBasedValuator
from bizval.methods.income_based import normalized_cash_flow
from bizval.policies.discount import FixedRate
from bizval.policies.fade import LinearFade


def value_profile(valuator, profile):
  return valuator.calculate(profile.financials, profile.industry,
                            profile.business_age_years,
                            profile.market_position, profile.customer_count)


class TestNormalizedCashFlow:

  def test_profitable_keeps_reported(self):
    financials = Financials(annual_revenue=5_000_000, cash_flow=1_000_000)

    assert normalized_cash_flow(financials) == 1_000_000

  def test_negative_lifted_to_distress_margin(self):
    financials = Financials(annual_revenue=2_000_000, cash_flow=-300_000)

    assert normalized_cash_flow(financials) == pytest.approx(100_000)

  def test_recurring_revenue_raises_margin(self):
    financials = Financials(annual_revenue=1_200_000,
                            cash_flow=0,
                            monthly_recurring_revenue=100_000)

    assert normalized_cash_flow(financials) == pytest.approx(120_000)

  def test_no_revenue_keeps_negative(self):
    financials = Financials(annual_revenue=0, cash_flow=-50_000)

    assert normalized_cash_flow(financials) == -50_000


class TestIncomeBasedValuator:
  """Tests for IncomeBasedValuator."""

  def test_sample_business(self, sample_profile):
    result = value_profile(IncomeBasedValuator(), sample_profile)

    assert result.value > 0
    assert result.discount_rate == pytest.approx(0.225)
    assert len(result.growth_assumptions) == 5
    assert len(result.projected_cash_flows) == 5
    assert len(result.present_values) == 5
    assert result.growth_assumptions[0] == pytest.approx(0.15)
    assert result.growth_assumptions[-1] == pytest.approx(0.025)
    assert result.confidence == pytest.approx(0.836)
    assert result.diag['discount_method'] == 'risk_buildup'

  def test_breakdown_adds_up(self, sample_profile):
    result = value_profile(IncomeBasedValuator(), sample_profile)

    assert result.value == pytest.approx(
        sum(result.present_values) + result.terminal_value_present)

  def test_matches_engine(self, sample_profile):
    """The valuator is a thin wrapper around compute_enterprise_value."""
    result = value_profile(IncomeBasedValuator(), sample_profile)
    expected, _, _ = compute_enterprise_value(1_000_000,
                                              result.growth_assumptions,
                                              0.025, 0.225)

    assert result.value == pytest.approx(expected)

  def test_fixed_rate_and_linear_fade(self, sample_profile):
    valuator = IncomeBasedValuator(discount_policy=FixedRate(0.12),
                                   fade_policy=LinearFade())
    result = value_profile(valuator, sample_profile)

    assert result.discount_rate == 0.12
    assert result.diag['fade_method'] == 'linear'

  def test_monotonic_in_cash_flow(self, make_profile):
    valuator = IncomeBasedValuator()
    values = [
        value_profile(valuator, make_profile(cashFlow=cf)).value
        for cf in (-500_000, 0, 200_000, 400_000, 1_000_000, 3_000_000)
    ]

    assert values == sorted(values)

  def test_negative_cash_flow_does_not_raise(self, risky_profile):
    result = value_profile(IncomeBasedValuator(), risky_profile)

    assert result.value >= 0
    assert result.confidence <= 0.65

  def test_extreme_growth_is_finite(self, make_profile):
    result = value_profile(IncomeBasedValuator(),
                           make_profile(growthRate=1e6))

    assert math.isfinite(result.value)
    assert result.growth_assumptions[0] == pytest.approx(0.5)

  def test_negative_without_revenue_is_degenerate(self):
    financials = Financials(annual_revenue=0, cash_flow=-50_000)

    with pytest.warns(DegenerateResultWarning) as record:
      result = IncomeBasedValuator().calculate(financials, Industry.GENERAL, 3,
                                               MarketPosition.AVERAGE, 20)

    assert record[0].filename.endswith('income_based.py')
    assert result.value == 0.0
    assert result.degenerate is True

  def test_zero_business(self, zero_profile):
    with warnings.catch_warnings():
      warnings.simplefilter('error', DegenerateResultWarning)
      result = value_profile(IncomeBasedValuator(), zero_profile)

    assert result.value == 0.0

  def test_rejects_empty_projection(self):
    with pytest.raises(ValueError, match='projection_years'):
      IncomeBasedValuator(projection_years=0)


class TestEarningsMultipleValuation:

  def test_sample_business(self, sample_profile):
    check = earnings_multiple_valuation(sample_profile.financials)

    assert check['multiple'] == pytest.approx(10 * 1.12)
    assert check['value'] == pytest.approx(11_200_000)
    assert check['confidence'] == 0.70

  def test_unprofitable(self):
    check = earnings_multiple_valuation(
        Financials(annual_revenue=100, cash_flow=-5, growth_rate=-0.1))

    assert check['value'] == 0.0
    assert check['multiple'] == pytest.approx(6.0)
