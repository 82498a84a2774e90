import warnings

import pytest

from bizval.domain.errors import DegenerateResultWarning
from bizval.domain.types import Assets
from bizval.domain.types import Industry
from bizval.domain.types import Liabilities
from bizval.methods.asset_based import AssetBasedValuator
from bizval.methods.asset_based import depreciation_factor


@pytest.fixture
def valuator():
  return AssetBasedValuator()


def value_sample(valuator, profile, **overrides):
  kwargs = {
      'assets': profile.assets,
      'liabilities': profile.liabilities,
      'industry': profile.industry,
      'business_age_years': profile.business_age_years,
  }
  kwargs.update(overrides)
  return valuator.calculate(**kwargs)


class TestDepreciationFactor:

  def test_new_business_keeps_full_value(self):
    assert depreciation_factor(0) == 1.0

  def test_five_years(self):
    assert depreciation_factor(5) == pytest.approx(0.97**5)

  def test_floor(self):
    assert depreciation_factor(100) == 0.5

  def test_non_increasing(self):
    factors = [depreciation_factor(age) for age in range(40)]

    assert factors == sorted(factors, reverse=True)


class TestAssetBasedValuator:
  """Tests for AssetBasedValuator."""

  def test_sample_business(self, valuator, sample_profile):
    """
    Technology multiplier 0.85, five years of depreciation:
      tangible + equipment  2.8M * 0.85 * 0.97^5
      real estate           1.5M * 0.85 * 0.985^5
      intangible            0.5M * 0.5
      inventory             0.3M * 0.85
    less 1.6M liabilities.
    """
    result = value_sample(valuator, sample_profile)

    expected = (2_800_000 * 0.85 * 0.97**5 + 1_500_000 * 0.85 * 0.985**5 +
                250_000 + 255_000 - 1_600_000)
    assert result.value == pytest.approx(expected)
    assert result.confidence == pytest.approx(0.75)
    assert 'Asset-Based' in result.methodology
    assert result.degenerate is False
    assert len(result.adjustments) == 5

  def test_manufacturing_above_services(self, valuator, sample_profile):
    manufacturing = value_sample(valuator, sample_profile,
                                 industry=Industry.MANUFACTURING)
    services = value_sample(valuator, sample_profile,
                            industry=Industry.SERVICES)

    assert manufacturing.value > services.value

  @pytest.mark.parametrize('lighter', [
      Industry.TECHNOLOGY, Industry.SOFTWARE, Industry.SERVICES,
      Industry.E_COMMERCE
  ])
  def test_manufacturing_above_asset_light_with_intangibles(
      self, valuator, lighter):
    """Intangible-heavy balance sheets keep the industry ordering."""
    assets = Assets(tangible=100_000, intangible=2_000_000)

    manufacturing = valuator.calculate(assets, Liabilities(),
                                       Industry.MANUFACTURING, 5)
    other = valuator.calculate(assets, Liabilities(), lighter, 5)

    assert manufacturing.value > other.value

  def test_intangible_recognition_is_industry_neutral(self, valuator):
    assets = Assets(intangible=1_000_000)

    values = {
        valuator.calculate(assets, Liabilities(), industry, 5).value
        for industry in Industry
    }

    assert values == {500_000}

  def test_younger_business_worth_more(self, valuator, sample_profile):
    young = value_sample(valuator, sample_profile, business_age_years=1)
    old = value_sample(valuator, sample_profile, business_age_years=15)

    assert young.value > old.value

  def test_market_conditions_scale_assets_only(self, valuator, sample_profile):
    neutral = value_sample(valuator, sample_profile)
    strong = value_sample(valuator, sample_profile,
                          market_conditions_multiplier=1.1)

    adjusted = neutral.value + sample_profile.liabilities.total
    assert strong.value == pytest.approx(adjusted * 1.1 -
                                         sample_profile.liabilities.total)

  @pytest.mark.parametrize('multiplier', [0.0, -1.0, float('nan')])
  def test_rejects_invalid_market_conditions(self, valuator, sample_profile,
                                             multiplier):
    with pytest.raises(ValueError, match='market_conditions_multiplier'):
      value_sample(valuator, sample_profile,
                   market_conditions_multiplier=multiplier)

  def test_negative_net_worth_floored(self, valuator, sample_profile):
    liabilities = Liabilities(short_term=10_000_000,
                              long_term=5_000_000,
                              contingent=1_000_000)

    with pytest.warns(DegenerateResultWarning, match='floored at 0') as record:
      result = value_sample(valuator, sample_profile, liabilities=liabilities)

    assert record[0].filename.endswith('asset_based.py')
    assert result.value == 0.0
    assert result.degenerate is True
    assert result.confidence == pytest.approx(0.5)

  def test_all_zero(self, valuator):
    with warnings.catch_warnings():
      warnings.simplefilter('error', DegenerateResultWarning)
      result = valuator.calculate(Assets(), Liabilities(), Industry.GENERAL,
                                  0)

    assert result.value == 0.0
    assert result.adjustments == []
    assert 0.0 <= result.confidence <= 1.0
