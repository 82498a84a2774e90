import pytest

from bizval.domain.types import Financials
from bizval.domain.types import Industry
from bizval.domain.types import MarketPosition
from bizval.domain.types import WeightSet
from bizval.policies.confidence import asset_confidence
from bizval.policies.confidence import business_stability
from bizval.policies.confidence import composite_confidence
from bizval.policies.confidence import confidence_factors
from bizval.policies.confidence import data_quality
from bizval.policies.confidence import income_confidence
from bizval.policies.confidence import market_confidence
from bizval.policies.confidence import uncertainty_band


class TestAssetConfidence:

  def test_baseline(self):
    assert asset_confidence(5_100_000, 1_600_000, 5) == pytest.approx(0.75)

  def test_distressed_balance_sheet(self):
    assert asset_confidence(1_000_000, 900_000, 5) == pytest.approx(0.6)

  def test_penalties_stack(self):
    """Distressed, degenerate and very young."""
    confidence = asset_confidence(1_000, 50_000, 0.5, degenerate=True)

    assert confidence == pytest.approx(0.45)

  def test_empty_balance_sheet_is_not_distressed(self):
    assert asset_confidence(0, 0, 5) == pytest.approx(0.75)


class TestIncomeConfidence:
  """Tests for income_confidence heuristic."""

  def test_sample_business(self, sample_profile):
    """0.75 + 0.10 + 0.24 * 0.15 + 0.05 (customers) - 0.10 (rate > 20%)."""
    confidence = income_confidence(sample_profile.financials, 5, 150,
                                   MarketPosition.AVERAGE, 0.225)

    assert confidence == pytest.approx(0.836)

  def test_negative_cash_flow_capped(self):
    financials = Financials(annual_revenue=1_000_000,
                            cash_flow=-10_000,
                            monthly_recurring_revenue=100_000)
    confidence = income_confidence(financials, 20, 500, MarketPosition.LEADER,
                                   0.08)

    assert confidence == pytest.approx(0.65)

  def test_stays_in_bounds(self):
    financials = Financials(annual_revenue=0, cash_flow=-1)
    confidence = income_confidence(financials, 0, 0,
                                   MarketPosition.STRUGGLING, 0.45,
                                   degenerate=True)

    assert confidence == pytest.approx(0.1)

  def test_stronger_position_more_confident(self, sample_profile):
    scores = [
        income_confidence(sample_profile.financials, 5, 150, p, 0.15)
        for p in sorted(MarketPosition, key=lambda p: p.rank)
    ]

    assert scores == sorted(scores)


class TestMarketConfidence:

  def test_technology_average(self):
    confidence = market_confidence([0.7, 0.7, 0.7], 5_000_000, 5, 150,
                                   Industry.TECHNOLOGY, MarketPosition.AVERAGE)

    assert confidence == pytest.approx(0.61)

  def test_no_customers_and_struggling_penalised(self):
    confidence = market_confidence([0.7, 0.7, 0.7], 5_000_000, 5, 0,
                                   Industry.TECHNOLOGY,
                                   MarketPosition.STRUGGLING)

    assert confidence == pytest.approx(0.41)

  def test_upper_bound(self):
    confidence = market_confidence([1.0, 1.0, 1.0], 50_000_000, 30, 1_000,
                                   Industry.SOFTWARE, MarketPosition.LEADER)

    assert confidence == pytest.approx(0.9)


class TestConfidenceFactors:
  """Tests for profile-level confidence factors."""

  def test_sample_business(self, sample_profile):
    factors = confidence_factors(sample_profile)

    assert factors.business_stability == pytest.approx(0.8)
    assert factors.data_quality == pytest.approx(0.95)
    assert factors.overall == pytest.approx(0.875)
    assert factors.industry_reliability == pytest.approx(0.7)

  def test_young_unprofitable_less_stable(self, sample_profile, risky_profile):
    assert business_stability(risky_profile) < business_stability(
        sample_profile)

  def test_zero_profile_in_bounds(self, zero_profile):
    factors = confidence_factors(zero_profile)

    for score in (factors.business_stability, factors.data_quality,
                  factors.overall):
      assert 0.0 <= score <= 1.0

  def test_implausible_cash_flow_lowers_data_quality(self, make_profile):
    plausible = data_quality(make_profile())
    implausible = data_quality(make_profile(cashFlow=6_000_000))

    assert implausible < plausible


class TestCompositeConfidence:

  def test_agreement_bonus(self):
    equal = WeightSet(asset=1 / 3, income=1 / 3, market=1 / 3)
    confidence = composite_confidence(0.5, 0.5, 0.5, equal, 0.5)

    assert confidence == pytest.approx(0.7 * 0.55 + 0.3 * 0.5)

  def test_no_bonus_when_methods_disagree(self):
    equal = WeightSet(asset=1 / 3, income=1 / 3, market=1 / 3)
    confidence = composite_confidence(0.9, 0.3, 0.6, equal, 0.6)

    assert confidence == pytest.approx(0.6)

  def test_bounded(self):
    confidence = composite_confidence(1.0, 1.0, 1.0, WeightSet(0.2, 0.5, 0.3),
                                      1.0)

    assert 0.0 <= confidence <= 1.0


class TestUncertaintyBand:

  def test_values(self):
    assert uncertainty_band(0.75) == pytest.approx(0.1)
    assert uncertainty_band(1.0) == 0.0
    assert uncertainty_band(0.0) == pytest.approx(0.4)

  def test_widens_as_confidence_falls(self):
    bands = [uncertainty_band(c / 10) for c in range(11)]

    assert bands == sorted(bands, reverse=True)
