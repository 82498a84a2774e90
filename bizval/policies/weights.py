'''
Methodology weighting policies.

These policies decide how much each valuation methodology contributes to
the composite value. Weights are computed from business characteristics
alone, before any valuator runs, and are always normalized so the three
weights sum to 1.0.
'''

from abc import ABC, abstractmethod
import math

from bizval.domain.types import BusinessProfile
from bizval.domain.types import PolicyOutput
from bizval.domain.types import WeightSet
from bizval.policies.industry import industry_profile

MIN_WEIGHT = 0.05

ASSET_HEAVY_INTENSITY = 2.0
ASSET_LIGHT_INTENSITY = 0.5


def normalize_weights(asset: float, income: float, market: float,
                      min_weight: float = 0.0) -> WeightSet:
  '''
  Rescale raw weights so they sum to 1.0.

  Raw weights below min_weight (or NaN) are lifted to min_weight before
  rescaling. When every raw weight is zero the methodologies are weighted
  equally.
  '''
  raw = []
  for w in (asset, income, market):
    if math.isnan(w):
      w = 0.0
    raw.append(max(min_weight, w))

  total = sum(raw)
  if total <= 0:
    return WeightSet(asset=1 / 3, income=1 / 3, market=1 / 3)
  return WeightSet(asset=raw[0] / total,
                   income=raw[1] / total,
                   market=raw[2] / total)


def asset_intensity(profile: BusinessProfile) -> float:
  '''Gross assets per unit of revenue; revenue below 1 counts as 1.'''
  return profile.assets.total / max(profile.financials.annual_revenue, 1.0)


class WeightPolicy(ABC):
  '''
  Base class for methodology weighting policies.

  Subclasses implement compute() to return a normalized WeightSet.
  '''

  @abstractmethod
  def compute(self, profile: BusinessProfile) -> PolicyOutput[WeightSet]:
    '''
    Compute methodology weights.

    Args:
      profile: Business being valued

    Returns:
      PolicyOutput with a normalized WeightSet and diagnostics
    '''


class IndustryWeights(WeightPolicy):
  '''Industry base weights with no further adjustment.'''

  def compute(self, profile: BusinessProfile) -> PolicyOutput[WeightSet]:
    base = industry_profile(profile.industry).base_weights
    weights = normalize_weights(base.asset, base.income, base.market)
    return PolicyOutput(value=weights,
                        diag={
                            'weight_method': 'industry_only',
                            'industry': profile.industry.value,
                        })


class CharacteristicWeights(WeightPolicy):
  '''
  Industry base weights shifted by business characteristics.

  Starting from the industry base weights:
  - Asset-heavy businesses (assets > 2x revenue) shift toward the asset
    approach; asset-light ones (assets < 0.5x revenue) shift away from it.
  - Unprofitable businesses shrink the income weight, since a DCF of
    negative cash flow is least reliable.
  - Businesses younger than young_age shrink the income weight as well.

  Each weight is floored at min_weight so every methodology keeps a voice,
  then the set is normalized.
  '''

  def __init__(self, min_weight: float = MIN_WEIGHT, young_age: float = 2.0):
    '''
    Initialize characteristic weighting.

    Args:
      min_weight: Floor for each raw weight before normalization
      young_age: Age below which the income approach is discounted
    '''
    self.min_weight = min_weight
    self.young_age = young_age

  def compute(self, profile: BusinessProfile) -> PolicyOutput[WeightSet]:
    base = industry_profile(profile.industry).base_weights
    asset, income, market = base.asset, base.income, base.market
    adjustments = []

    intensity = asset_intensity(profile)
    if intensity > ASSET_HEAVY_INTENSITY:
      asset += 0.2
      income -= 0.1
      market -= 0.1
      adjustments.append('asset_heavy')
    elif intensity < ASSET_LIGHT_INTENSITY:
      asset -= 0.15
      income += 0.08
      market += 0.07
      adjustments.append('asset_light')

    if profile.financials.cash_flow <= 0:
      income *= 0.7
      asset += 0.15
      market += 0.15
      adjustments.append('unprofitable')

    if profile.business_age_years < self.young_age:
      income *= 0.8
      asset += 0.1
      market += 0.1
      adjustments.append('young_business')

    weights = normalize_weights(asset, income, market, self.min_weight)
    return PolicyOutput(value=weights,
                        diag={
                            'weight_method': 'characteristic',
                            'industry': profile.industry.value,
                            'asset_intensity': intensity,
                            'weight_adjustments': adjustments,
                        })
