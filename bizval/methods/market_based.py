'''
Market-based valuation.

Applies industry revenue, EBITDA and earnings multiples, adjusted for
growth, maturity and market position, and blends the three implied values.
Four synthetic comparables are derived deterministically from the profile
to explain where the multiples sit within the industry band.
'''

import logging
from typing import List

from bizval.domain.types import ComparableCompany
from bizval.domain.types import Industry
from bizval.domain.types import MarketBasedResult
from bizval.domain.types import MarketPosition
from bizval.domain.types import ValuationMultiple
from bizval.policies.confidence import market_confidence
from bizval.policies.industry import industry_profile
from bizval.policies.industry import IndustryProfile
from bizval.policies.industry import MultipleBand

logger = logging.getLogger(__name__)

METHODOLOGY = 'Market-Based Valuation using Comparable Company Analysis'

EARNINGS_TO_EBITDA = 0.7
EBITDA_TO_CASH_FLOW = 1.25

BLEND_WEIGHTS = {'revenue': 0.4, 'ebitda': 0.4, 'earnings': 0.2}

REVENUE_POSITION_MULTIPLIERS = {
    MarketPosition.LEADER: 1.3,
    MarketPosition.STRONG: 1.15,
    MarketPosition.AVERAGE: 1.0,
    MarketPosition.WEAK: 0.85,
    MarketPosition.STRUGGLING: 0.6,
}

EBITDA_POSITION_MULTIPLIERS = {
    MarketPosition.LEADER: 1.25,
    MarketPosition.STRONG: 1.1,
    MarketPosition.AVERAGE: 1.0,
    MarketPosition.WEAK: 0.9,
    MarketPosition.STRUGGLING: 0.7,
}

POSITION_NOTES = {
    MarketPosition.LEADER: 'Market leadership premium',
    MarketPosition.STRONG: 'Strong market position premium',
    MarketPosition.AVERAGE: 'Average market position',
    MarketPosition.WEAK: 'Weak market position discount',
    MarketPosition.STRUGGLING: 'Distressed company discount',
}

# (revenue factor, position within the multiple band)
COMPARABLE_SPREADS = ((0.6, 0.2), (0.85, 0.4), (1.2, 0.6), (1.6, 0.8))


def growth_adjustment(growth_rate: float, high: float, moderate: float,
                      declining: float) -> float:
  if growth_rate > 0.30:
    return high
  if growth_rate > 0.15:
    return moderate
  if growth_rate < 0:
    return declining
  return 1.0


def age_adjustment(business_age_years: float, young: float) -> float:
  if business_age_years < 2:
    return young
  if business_age_years > 10:
    return 1.1
  return 1.0


def estimate_ebitda(annual_revenue: float, cash_flow: float,
                    profile: IndustryProfile) -> float:
  '''Cash flow grossed up when profitable, else a typical industry margin.'''
  if cash_flow > 0:
    return cash_flow * EBITDA_TO_CASH_FLOW
  return max(0.0, annual_revenue * profile.ebitda_margin)


def blend_weights(cash_flow: float, business_age_years: float) -> dict:
  '''
  Weights of the revenue, EBITDA and earnings implied values.

  Unprofitable businesses move weight off earnings, young ones toward
  revenue. The weights do not depend on market position.
  '''
  weights = dict(BLEND_WEIGHTS)
  if cash_flow <= 0:
    weights['earnings'] *= 0.3
    weights['revenue'] += 0.14
    weights['ebitda'] += 0.14
  if business_age_years < 2:
    weights['revenue'] += 0.2
    weights['ebitda'] -= 0.1
    weights['earnings'] -= 0.1
  return {k: max(0.0, w) for k, w in weights.items()}


class MarketBasedValuator:
  '''Values a business from industry multiples.'''

  def calculate(
      self,
      annual_revenue: float,
      cash_flow: float,
      industry: Industry,
      business_age_years: float,
      growth_rate: float,
      customer_count: int,
      market_position: MarketPosition,
  ) -> MarketBasedResult:
    '''
    Compute the market-multiple value.

    Every multiple is clamped to its industry band, so a stronger market
    position never lowers the value of an otherwise identical business.
    '''
    profile = industry_profile(industry)

    revenue_band = profile.revenue_multiples
    ebitda_band = profile.ebitda_multiples
    earnings_band = MultipleBand(ebitda_band.min * 0.5,
                                 ebitda_band.median * EARNINGS_TO_EBITDA,
                                 ebitda_band.max * 0.8)

    revenue_multiple = revenue_band.clamp(
        revenue_band.median *
        growth_adjustment(growth_rate, 1.5, 1.2, 0.6) *
        age_adjustment(business_age_years, 0.8) *
        REVENUE_POSITION_MULTIPLIERS[market_position])

    ebitda_multiple = ebitda_band.clamp(
        ebitda_band.median *
        growth_adjustment(growth_rate, 1.4, 1.2, 0.7) *
        age_adjustment(business_age_years, 0.85) *
        EBITDA_POSITION_MULTIPLIERS[market_position])

    earnings_base = earnings_band.median
    if cash_flow <= 0:
      earnings_base *= 0.5
    earnings_multiple = earnings_band.clamp(
        earnings_base * growth_adjustment(growth_rate, 1.3, 1.15, 0.8))

    multiples = [
        ValuationMultiple(type='revenue',
                          value=revenue_multiple,
                          industry_median=revenue_band.median,
                          confidence=_revenue_multiple_confidence(
                              annual_revenue, business_age_years,
                              customer_count),
                          source='Industry Revenue Multiple Analysis'),
        ValuationMultiple(type='ebitda',
                          value=ebitda_multiple,
                          industry_median=ebitda_band.median,
                          confidence=_ebitda_multiple_confidence(
                              annual_revenue, cash_flow),
                          source='Industry EBITDA Multiple Analysis'),
        ValuationMultiple(type='earnings',
                          value=earnings_multiple,
                          industry_median=earnings_band.median,
                          confidence=_earnings_multiple_confidence(
                              cash_flow, business_age_years),
                          source='Industry Earnings Multiple Analysis'),
    ]

    ebitda = estimate_ebitda(annual_revenue, cash_flow, profile)
    implied = {
        'revenue': annual_revenue * revenue_multiple,
        'ebitda': ebitda * ebitda_multiple,
        'earnings': max(cash_flow, 0.0) * earnings_multiple,
    }
    weights = blend_weights(cash_flow, business_age_years)

    weighted_sum = 0.0
    total_weight = 0.0
    for key, implied_value in implied.items():
      if implied_value > 0:
        weighted_sum += implied_value * weights[key]
        total_weight += weights[key]
    value = weighted_sum / total_weight if total_weight > 0 else 0.0

    confidence = market_confidence([m.confidence for m in multiples],
                                   annual_revenue, business_age_years,
                                   customer_count, industry, market_position)

    logger.debug('Market-based: revenue %.2fx ebitda %.2fx earnings %.2fx '
                 'value %.0f', revenue_multiple, ebitda_multiple,
                 earnings_multiple, value)

    notes = comparable_adjustments(growth_rate, business_age_years,
                                   customer_count, market_position)
    comparables = [
        ComparableCompany(
            name=f'{industry.label} Comparable {i}',
            industry=industry.value,
            revenue=annual_revenue * revenue_factor,
            valuation=annual_revenue * revenue_factor * _within(
                revenue_band, position),
            multiple=_within(revenue_band, position),
            relevance=round(0.95 - 0.15 * abs(revenue_factor - 1.0), 4),
            source='Synthetic industry comparable',
            adjustments=list(notes),
        ) for i, (revenue_factor, position) in enumerate(COMPARABLE_SPREADS,
                                                         start=1)
    ]

    factors = [
        f'Revenue multiple: {revenue_multiple:.2f}x '
        f'(industry median {revenue_band.median:.2f}x)',
        f'EBITDA multiple: {ebitda_multiple:.2f}x on estimated EBITDA '
        f'${ebitda:,.0f}',
        f'Earnings multiple: {earnings_multiple:.2f}x',
    ] + notes

    return MarketBasedResult(value=value,
                             confidence=confidence,
                             methodology=METHODOLOGY,
                             factors=factors,
                             diag={
                                 'implied_values': implied,
                                 'blend_weights': weights,
                                 'estimated_ebitda': ebitda,
                             },
                             comparables=comparables,
                             multiples=multiples)


def comparable_adjustments(growth_rate: float, business_age_years: float,
                           customer_count: int,
                           market_position: MarketPosition) -> List[str]:
  '''Notes explaining how the subject differs from its comparables.'''
  notes = []
  if growth_rate > 0.20:
    notes.append('High growth rate premium applied')
  elif growth_rate < 0:
    notes.append('Negative growth discount applied')

  if business_age_years < 3:
    notes.append('Early-stage company discount')
  elif business_age_years > 15:
    notes.append('Mature company stability premium')

  if customer_count < 50:
    notes.append('Customer concentration risk discount')

  notes.append(POSITION_NOTES[market_position])
  return notes


def _within(band: MultipleBand, position: float) -> float:
  return band.min + position * (band.max - band.min)


def _revenue_multiple_confidence(annual_revenue, business_age_years,
                                 customer_count):
  confidence = 0.75
  if annual_revenue > 1_000_000:
    confidence += 0.10
  if business_age_years > 3:
    confidence += 0.05
  if customer_count > 100:
    confidence += 0.05
  return min(0.90, confidence)


def _ebitda_multiple_confidence(annual_revenue, cash_flow):
  confidence = 0.70
  if cash_flow > 0:
    confidence += 0.10
  if annual_revenue > 5_000_000:
    confidence += 0.10
  return min(0.85, confidence)


def _earnings_multiple_confidence(cash_flow, business_age_years):
  confidence = 0.75 if cash_flow > 0 else 0.50
  if business_age_years > 5:
    confidence += 0.05
  return min(0.80, confidence)
