import pytest

from bizval.domain.types import Industry
from bizval.domain.types import MarketPosition
from bizval.methods.market_based import blend_weights
from bizval.methods.market_based import comparable_adjustments
from bizval.methods.market_based import estimate_ebitda
from bizval.methods.market_based import MarketBasedValuator
from bizval.policies.industry import industry_profile


def value_profile(profile, **overrides):
  kwargs = {
      'annual_revenue': profile.financials.annual_revenue,
      'cash_flow': profile.financials.cash_flow,
      'industry': profile.industry,
      'business_age_years': profile.business_age_years,
      'growth_rate': profile.financials.growth_rate,
      'customer_count': profile.customer_count,
      'market_position': profile.market_position,
  }
  kwargs.update(overrides)
  return MarketBasedValuator().calculate(**kwargs)


class TestMarketBasedValuator:
  """Tests for MarketBasedValuator."""

  def test_sample_business(self, sample_profile):
    """
    Technology medians: revenue 4.5x, EBITDA 15x, earnings 0.7 * 15x.
      0.4 * 5M * 4.5 + 0.4 * 1.25M * 15 + 0.2 * 1M * 10.5 = 18.6M
    """
    result = value_profile(sample_profile)

    assert result.value == pytest.approx(18_600_000)
    assert result.multiple('revenue').value == pytest.approx(4.5)
    assert result.multiple('ebitda').value == pytest.approx(15.0)
    assert result.multiple('earnings').value == pytest.approx(10.5)
    assert result.confidence == pytest.approx(0.8 * (0.90 + 0.80 + 0.75) / 3 +
                                              0.05)

  def test_shape(self, sample_profile):
    result = value_profile(sample_profile)

    assert len(result.comparables) == 4
    assert [m.type for m in result.multiples] == [
        'revenue', 'ebitda', 'earnings'
    ]
    assert 'Comparable' in result.methodology

  def test_comparables_are_deterministic(self, sample_profile):
    first = value_profile(sample_profile).comparables
    second = value_profile(sample_profile).comparables

    assert first == second
    assert first[0].multiple == pytest.approx(2.0 + 0.2 * 10.0)
    assert first[3].revenue == pytest.approx(8_000_000)

  def test_monotonic_in_market_position(self, sample_profile):
    values = [
        value_profile(sample_profile, market_position=p).value
        for p in sorted(MarketPosition, key=lambda p: p.rank)
    ]

    assert values == sorted(values)
    assert values[-1] > values[0]

  def test_multiples_stay_in_band(self, sample_profile):
    band = industry_profile(Industry.TECHNOLOGY).revenue_multiples
    hot = value_profile(sample_profile,
                        growth_rate=0.9,
                        business_age_years=20,
                        market_position=MarketPosition.LEADER)
    cold = value_profile(sample_profile,
                         growth_rate=-0.5,
                         business_age_years=0.5,
                         market_position=MarketPosition.STRUGGLING)

    assert band.min <= hot.multiple('revenue').value <= band.max
    assert cold.multiple('revenue').value == band.min

  def test_unprofitable_uses_industry_margin(self, sample_profile):
    result = value_profile(sample_profile, cash_flow=-200_000)

    assert result.diag['estimated_ebitda'] == pytest.approx(1_000_000)
    assert result.diag['implied_values']['earnings'] == 0.0
    assert result.value > 0

  def test_unknown_industry_uses_general_band(self, sample_profile):
    result = value_profile(sample_profile, industry=Industry.parse('mining'))

    assert result.multiple('revenue').industry_median == 2.0

  def test_zero_business(self, zero_profile):
    result = value_profile(zero_profile)

    assert result.value == 0.0
    assert 0.1 <= result.confidence <= 0.9


class TestHelpers:

  def test_estimate_ebitda(self):
    profile = industry_profile(Industry.RETAIL)

    assert estimate_ebitda(1_000_000, 100_000, profile) == pytest.approx(
        125_000)
    assert estimate_ebitda(1_000_000, -1, profile) == pytest.approx(80_000)

  def test_blend_weights_young_unprofitable(self):
    weights = blend_weights(cash_flow=-1, business_age_years=1)

    assert weights['earnings'] == 0.0
    assert weights['revenue'] == pytest.approx(0.74)
    assert weights['ebitda'] == pytest.approx(0.44)

  def test_comparable_adjustments(self):
    notes = comparable_adjustments(0.25, 20, 30, MarketPosition.LEADER)

    assert notes == [
        'High growth rate premium applied',
        'Mature company stability premium',
        'Customer concentration risk discount',
        'Market leadership premium',
    ]
