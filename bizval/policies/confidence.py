'''
Confidence heuristics.

Each heuristic is a named pure function of its inputs so it can be tested
on its own. They all follow the same shape: a baseline, additive
adjustments for risk and data signals, then a clamp into a bounded range.
'''

from collections.abc import Sequence

from bizval.domain.types import BusinessProfile
from bizval.domain.types import ConfidenceFactors
from bizval.domain.types import Financials
from bizval.domain.types import Industry
from bizval.domain.types import MarketPosition
from bizval.domain.types import WeightSet
from bizval.policies.industry import industry_profile

DISTRESS_LEVERAGE = 0.8
NEGATIVE_CASH_FLOW_CAP = 0.65
MAX_RANGE_BAND = 0.4

POSITION_CONFIDENCE = {
    MarketPosition.LEADER: 0.10,
    MarketPosition.STRONG: 0.05,
    MarketPosition.AVERAGE: 0.0,
    MarketPosition.WEAK: -0.05,
    MarketPosition.STRUGGLING: -0.15,
}


def clamp(value: float, low: float, high: float) -> float:
  return max(low, min(high, value))


def is_distressed(gross_assets: float, total_liabilities: float) -> bool:
  '''Liabilities above 80% of gross assets.'''
  return total_liabilities > DISTRESS_LEVERAGE * gross_assets


def asset_confidence(
    gross_assets: float,
    total_liabilities: float,
    business_age_years: float,
    degenerate: bool = False,
) -> float:
  '''
  Confidence in the asset-based value.

  Baseline 0.75, lowered for distressed balance sheets, for results floored
  at zero, and for businesses at the extremes of the age range where book
  values are least representative.
  '''
  confidence = 0.75
  if is_distressed(gross_assets, total_liabilities):
    confidence -= 0.15
  if degenerate:
    confidence -= 0.10
  if business_age_years < 1 or business_age_years > 30:
    confidence -= 0.05
  return clamp(confidence, 0.1, 0.95)


def income_confidence(
    financials: Financials,
    business_age_years: float,
    customer_count: int,
    market_position: MarketPosition,
    discount_rate: float,
    degenerate: bool = False,
) -> float:
  '''
  Confidence in the DCF value.

  Profitability dominates: a business with negative cash flow never scores
  above NEGATIVE_CASH_FLOW_CAP. Recurring revenue, maturity, a diversified
  customer base and a strong market position raise confidence.
  '''
  confidence = 0.75
  if financials.cash_flow > 0:
    confidence += 0.10
  else:
    confidence -= 0.15

  confidence += financials.recurring_ratio * 0.15

  if business_age_years > 5:
    confidence += 0.10
  elif business_age_years < 2:
    confidence -= 0.10

  if customer_count > 100:
    confidence += 0.05
  elif customer_count < 10:
    confidence -= 0.10

  confidence += POSITION_CONFIDENCE[market_position]

  if discount_rate > 0.20:
    confidence -= 0.10
  elif discount_rate < 0.10:
    confidence += 0.05

  if degenerate:
    confidence -= 0.10

  if financials.cash_flow < 0:
    confidence = min(confidence, NEGATIVE_CASH_FLOW_CAP)
  return clamp(confidence, 0.1, 0.95)


def market_confidence(
    multiple_confidences: Sequence[float],
    annual_revenue: float,
    business_age_years: float,
    customer_count: int,
    industry: Industry,
    market_position: MarketPosition,
) -> float:
  '''
  Confidence in the comparables value.

  Starts from the average confidence of the individual multiples. Larger,
  older businesses with more customers are more comparable to transaction
  data; customer_count stands in for data availability, so a business with
  no customers at all is penalised, as is a struggling one.
  '''
  if multiple_confidences:
    average = sum(multiple_confidences) / len(multiple_confidences)
  else:
    average = 0.5
  confidence = average * 0.8

  if annual_revenue > 5_000_000:
    confidence += 0.08
  if business_age_years > 5:
    confidence += 0.06
  if customer_count > 200:
    confidence += 0.04
  elif customer_count == 0:
    confidence -= 0.10

  confidence += industry_profile(industry).comparable_data_bonus

  if market_position is MarketPosition.STRUGGLING:
    confidence -= 0.10
  return clamp(confidence, 0.1, 0.9)


def business_stability(profile: BusinessProfile) -> float:
  '''Stability from age, profitability, customer base and scale.'''
  financials = profile.financials
  stability = 0.5

  age = profile.business_age_years
  if age > 10:
    stability += 0.2
  elif age > 5:
    stability += 0.15
  elif age > 2:
    stability += 0.1
  else:
    stability -= 0.1

  if financials.cash_flow > 0:
    if financials.annual_revenue > 0:
      margin = financials.cash_flow / financials.annual_revenue
    else:
      margin = 0.0
    if margin > 0.20:
      stability += 0.15
    elif margin > 0.10:
      stability += 0.10
    else:
      stability += 0.05
  else:
    stability -= 0.15

  if profile.customer_count > 500:
    stability += 0.1
  elif profile.customer_count > 100:
    stability += 0.05
  elif profile.customer_count < 10:
    stability -= 0.1

  if financials.annual_revenue > 10_000_000:
    stability += 0.1
  elif financials.annual_revenue > 1_000_000:
    stability += 0.05

  return clamp(stability, 0.1, 0.95)


def data_quality(profile: BusinessProfile) -> float:
  '''Completeness and internal consistency of the supplied figures.'''
  financials = profile.financials
  quality = 0.5

  if financials.annual_revenue > 0:
    quality += 0.15
  if financials.cash_flow != 0:
    quality += 0.1
  if financials.annual_expenses > 0:
    quality += 0.1
  if profile.assets.total > 0:
    quality += 0.1
  if profile.customer_count > 0:
    quality += 0.05
  if financials.growth_rate != 0:
    quality += 0.05

  if financials.cash_flow > financials.annual_revenue:
    quality -= 0.2
  if financials.annual_expenses > financials.annual_revenue * 2:
    quality -= 0.1

  return clamp(quality, 0.1, 0.95)


def industry_reliability(industry: Industry) -> float:
  return industry_profile(industry).reliability


def confidence_factors(profile: BusinessProfile) -> ConfidenceFactors:
  '''Overall is the mean of business stability and data quality.'''
  stability = business_stability(profile)
  quality = data_quality(profile)
  return ConfidenceFactors(
      business_stability=stability,
      data_quality=quality,
      industry_reliability=industry_reliability(profile.industry),
      overall=clamp((stability + quality) / 2, 0.0, 1.0),
  )


def composite_confidence(
    asset: float,
    income: float,
    market: float,
    weights: WeightSet,
    factors_overall: float,
) -> float:
  '''
  Confidence in the weighted value.

  The weight-averaged methodology confidence gains a small bonus when the
  three methodologies agree closely, then is blended 70/30 with the
  profile-level confidence factors.
  '''
  values = (asset, income, market)
  weighted = (asset * weights.asset + income * weights.income +
              market * weights.market)

  average = sum(values) / len(values)
  if max(abs(v - average) for v in values) < 0.15:
    weighted = min(0.95, weighted + 0.05)

  return clamp(0.7 * weighted + 0.3 * factors_overall, 0.0, 1.0)


def uncertainty_band(confidence: float, max_band: float = MAX_RANGE_BAND) -> float:
  '''Fractional half-width of the value range; widens as confidence falls.'''
  return (1.0 - clamp(confidence, 0.0, 1.0)) * max_band
