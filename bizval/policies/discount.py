"""
Discount rate policies.

These policies determine the required rate of return (discount rate)
used in the income-based DCF valuation.
"""

from abc import ABC
from abc import abstractmethod

from bizval.domain.types import Industry
from bizval.domain.types import MarketPosition
from bizval.domain.types import PolicyOutput
from bizval.domain.types import RateAssumptions
from bizval.policies.industry import industry_profile

MIN_DISCOUNT_RATE = 0.05
MAX_DISCOUNT_RATE = 0.45

POSITION_RATE_ADJUSTMENTS = {
    MarketPosition.LEADER: -0.02,
    MarketPosition.STRONG: -0.01,
    MarketPosition.AVERAGE: 0.0,
    MarketPosition.WEAK: 0.02,
    MarketPosition.STRUGGLING: 0.04,
}


def age_premium(business_age_years: float) -> float:
  """Extra return demanded for young businesses; negative for mature ones."""
  if business_age_years < 2:
    return 0.03
  if business_age_years < 5:
    return 0.02
  if business_age_years > 15:
    return -0.01
  return 0.0


class DiscountPolicy(ABC):
  """
  Base class for discount rate policies.

  Subclasses implement compute() to return a discount rate.
  """

  @abstractmethod
  def compute(
      self,
      industry: Industry,
      business_age_years: float,
      market_position: MarketPosition,
  ) -> PolicyOutput[float]:
    """
    Compute discount rate.

    Args:
      industry: Industry category
      business_age_years: Years in operation
      market_position: Competitive position

    Returns:
      PolicyOutput with discount rate and diagnostics
    """


class FixedRate(DiscountPolicy):
  """
  Fixed discount rate.

  Simple policy that returns a constant required return regardless of
  the business characteristics.
  """

  def __init__(self, rate: float = 0.10):
    """
    Initialize fixed rate policy.

    Args:
      rate: Fixed discount rate (default: 10%)
    """
    if not 0 < rate < 0.5:
      raise ValueError(f'Discount rate must be in (0, 0.5), got {rate}')
    self.rate = rate

  def compute(
      self,
      industry: Industry,
      business_age_years: float,
      market_position: MarketPosition,
  ) -> PolicyOutput[float]:
    """Return fixed discount rate."""
    return PolicyOutput(
        value=self.rate,
        diag={
            'discount_method': 'fixed',
            'discount_rate': self.rate,
        })


class RiskBuildupRate(DiscountPolicy):
  """
  Build-up discount rate for private companies.

  rate = risk-free + market risk premium + industry premium
         + age premium + market position adjustment

  The result is clamped to [MIN_DISCOUNT_RATE, MAX_DISCOUNT_RATE]. Younger,
  weaker and riskier-industry businesses never receive a lower rate than
  otherwise identical older, stronger or safer ones.
  """

  def __init__(self, rates: RateAssumptions = RateAssumptions()):
    """
    Initialize build-up policy.

    Args:
      rates: Capital-market assumptions (risk-free rate, equity premium)
    """
    self.rates = rates

  def compute(
      self,
      industry: Industry,
      business_age_years: float,
      market_position: MarketPosition,
  ) -> PolicyOutput[float]:
    """Sum the premiums and clamp to a plausible band."""
    industry_premium = industry_profile(industry).risk_premium
    age_adj = age_premium(business_age_years)
    position_adj = POSITION_RATE_ADJUSTMENTS[market_position]

    raw_rate = (self.rates.risk_free_rate + self.rates.market_risk_premium +
                industry_premium + age_adj + position_adj)
    rate = max(MIN_DISCOUNT_RATE, min(MAX_DISCOUNT_RATE, raw_rate))

    return PolicyOutput(
        value=rate,
        diag={
            'discount_method': 'risk_buildup',
            'risk_free_rate': self.rates.risk_free_rate,
            'market_risk_premium': self.rates.market_risk_premium,
            'industry_premium': industry_premium,
            'age_premium': age_adj,
            'position_adjustment': position_adj,
            'raw_rate': raw_rate,
            'discount_rate': rate,
        })
