'''
Asset-based valuation.

Adjusted net asset value: each balance-sheet asset category is restated to
what a buyer would recognise (industry multiplier, intangible recognition,
inventory liquidation, age depreciation), scaled by current market
conditions, and liabilities are subtracted at face value.
'''

import logging
import math
import warnings

from bizval.domain.errors import DegenerateResultWarning
from bizval.domain.types import AssetAdjustment
from bizval.domain.types import AssetBasedResult
from bizval.domain.types import Assets
from bizval.domain.types import Industry
from bizval.domain.types import Liabilities
from bizval.policies.confidence import asset_confidence
from bizval.policies.industry import industry_profile

logger = logging.getLogger(__name__)

METHODOLOGY = 'Asset-Based (Adjusted Net Asset Value)'

ANNUAL_DEPRECIATION = 0.03
DEPRECIATION_FLOOR = 0.5
INVENTORY_LIQUIDATION = 0.85
INTANGIBLE_RECOGNITION = 0.5


def depreciation_factor(business_age_years: float,
                        annual_rate: float = ANNUAL_DEPRECIATION,
                        floor: float = DEPRECIATION_FLOOR) -> float:
  '''
  Share of book value retained after business_age_years of wear.

  Decays geometrically with age and never drops below floor, so it is
  non-increasing in age and always in [floor, 1].
  '''
  return max(floor, (1.0 - annual_rate)**business_age_years)


class AssetBasedValuator:
  '''Values a business at its adjusted net assets.'''

  def calculate(
      self,
      assets: Assets,
      liabilities: Liabilities,
      industry: Industry,
      business_age_years: float,
      market_conditions_multiplier: float = 1.0,
  ) -> AssetBasedResult:
    '''
    Compute the adjusted net asset value.

    Args:
      assets: Balance-sheet assets
      liabilities: Balance-sheet liabilities, taken at face value
      industry: Industry category
      business_age_years: Years in operation
      market_conditions_multiplier: Scale on adjusted assets, 1.0 neutral

    Returns:
      AssetBasedResult. When liabilities exceed adjusted assets the value is
      floored at 0, the result is marked degenerate and a
      DegenerateResultWarning is emitted.

    Raises:
      ValueError: If market_conditions_multiplier is not a positive number
    '''
    if (not math.isfinite(market_conditions_multiplier) or
        market_conditions_multiplier <= 0):
      raise ValueError('market_conditions_multiplier must be positive, got '
                       f'{market_conditions_multiplier}')

    profile = industry_profile(industry)
    wear = depreciation_factor(business_age_years)
    property_wear = depreciation_factor(business_age_years,
                                        ANNUAL_DEPRECIATION / 2)

    adjustments = []

    def restate(category, original, factor, reason):
      adjusted = original * factor
      if original > 0:
        adjustments.append(
            AssetAdjustment(category=category,
                            original=original,
                            adjusted=adjusted,
                            reason=reason))
      return adjusted

    restated = [
        restate('tangible', assets.tangible, profile.asset_multiplier * wear,
                f'{industry.label} asset multiplier and age depreciation'),
        restate('equipment', assets.equipment, profile.asset_multiplier * wear,
                f'{industry.label} asset multiplier and age depreciation'),
        restate('real_estate', assets.real_estate,
                profile.asset_multiplier * property_wear,
                'Asset multiplier and depreciation at half rate'),
        restate('intangible', assets.intangible, INTANGIBLE_RECOGNITION,
                'Intangible recognition factor'),
        restate('inventory', assets.inventory, INVENTORY_LIQUIDATION,
                'Inventory liquidation discount'),
    ]
    adjusted_assets = sum(restated) * market_conditions_multiplier

    book_value = assets.total - liabilities.total
    raw_value = adjusted_assets - liabilities.total
    degenerate = raw_value < 0
    if degenerate:
      warnings.warn(
          f'Liabilities ({liabilities.total:,.0f}) exceed adjusted assets '
          f'({adjusted_assets:,.0f}); asset-based value floored at 0',
          DegenerateResultWarning,
          stacklevel=1)
    value = max(0.0, raw_value)

    confidence = asset_confidence(assets.total, liabilities.total,
                                  business_age_years, degenerate)

    logger.debug('Asset-based: adjusted assets %.0f, liabilities %.0f, '
                 'value %.0f', adjusted_assets, liabilities.total, value)

    factors = [
        f'Net book value: ${book_value:,.0f}',
        f'Adjusted assets: ${adjusted_assets:,.0f}',
        f'Total liabilities: ${liabilities.total:,.0f}',
        f'Industry asset multiplier: {profile.asset_multiplier:.2f}x',
        f'Age depreciation factor: {wear:.2f}',
    ]
    if market_conditions_multiplier != 1.0:
      factors.append(
          f'Market conditions multiplier: {market_conditions_multiplier:.2f}x')

    return AssetBasedResult(value=value,
                            confidence=confidence,
                            methodology=METHODOLOGY,
                            factors=factors,
                            degenerate=degenerate,
                            diag={
                                'asset_multiplier': profile.asset_multiplier,
                                'depreciation_factor': wear,
                                'market_conditions':
                                    market_conditions_multiplier,
                                'adjusted_assets': adjusted_assets,
                            },
                            adjustments=adjustments)
