'''
Risk factor rules.

A risk rule pairs a fixed label with a predicate over the business profile.
identify_risk_factors() evaluates a rule list in order, so the output is
deterministic for a given profile: every rule whose predicate holds yields
exactly one RiskFactor.
'''

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import List

from bizval.domain.types import BusinessProfile
from bizval.domain.types import RiskFactor
from bizval.domain.types import Severity
from bizval.policies.confidence import is_distressed
from bizval.policies.industry import industry_profile

EARLY_STAGE_AGE = 1.0
CONCENTRATED_CUSTOMERS = 10
DEBT_TO_REVENUE_LIMIT = 1.0


@dataclass(frozen=True)
class RiskRule:
  '''
  Attributes:
    factor: Label reported when the rule fires
    category: financial, operational or market
    severity: Impact if the risk materialises
    applies: Predicate over the profile
    description: Either a fixed sentence or a callable building one
    mitigation: Suggested mitigations
  '''
  factor: str
  category: str
  severity: Severity
  applies: Callable[[BusinessProfile], bool]
  description: str | Callable[[BusinessProfile], str]
  mitigation: tuple = ()

  def evaluate(self, profile: BusinessProfile) -> RiskFactor | None:
    if not self.applies(profile):
      return None
    description = (self.description(profile)
                   if callable(self.description) else self.description)
    return RiskFactor(factor=self.factor,
                      category=self.category,
                      severity=self.severity,
                      description=description,
                      mitigation=self.mitigation)


def has_negative_cash_flow(profile: BusinessProfile) -> bool:
  return profile.financials.cash_flow < 0


def is_early_stage(profile: BusinessProfile) -> bool:
  return profile.business_age_years < EARLY_STAGE_AGE


def is_customer_concentrated(profile: BusinessProfile) -> bool:
  return profile.customer_count < CONCENTRATED_CUSTOMERS


def is_highly_leveraged(profile: BusinessProfile) -> bool:
  '''Liabilities above 80% of assets, or any liabilities with no assets.'''
  liabilities = profile.liabilities.total
  if liabilities <= 0:
    return False
  return is_distressed(profile.assets.total, liabilities)


def is_volatile_industry(profile: BusinessProfile) -> bool:
  return industry_profile(profile.industry).volatile


def has_high_debt_load(profile: BusinessProfile) -> bool:
  debt_to_revenue = (profile.liabilities.total /
                     max(profile.financials.annual_revenue, 1.0))
  return debt_to_revenue > DEBT_TO_REVENUE_LIMIT


def has_declining_revenue(profile: BusinessProfile) -> bool:
  return profile.financials.growth_rate < 0


DEFAULT_RULES: tuple = (
    RiskRule(
        factor='Negative Cash Flow',
        category='financial',
        severity=Severity.HIGH,
        applies=has_negative_cash_flow,
        description=('Business is currently cash flow negative, indicating '
                     'potential financial distress'),
        mitigation=('Improve operational efficiency', 'Reduce expenses',
                    'Increase revenue'),
    ),
    RiskRule(
        factor='Early Stage Business',
        category='operational',
        severity=Severity.MEDIUM,
        applies=is_early_stage,
        description=('Young businesses have higher failure rates and less '
                     'predictable performance'),
        mitigation=('Establish strong management team', 'Build cash reserves',
                    'Focus on customer retention'),
    ),
    RiskRule(
        factor='Customer Concentration',
        category='operational',
        severity=Severity.MEDIUM,
        applies=is_customer_concentrated,
        description=('Heavy reliance on a small number of customers creates '
                     'revenue vulnerability'),
        mitigation=('Diversify customer base',
                    'Develop customer retention programs',
                    'Create contractual protections'),
    ),
    RiskRule(
        factor='High Leverage',
        category='financial',
        severity=Severity.HIGH,
        applies=is_highly_leveraged,
        description=('Liabilities exceed 80% of gross assets, leaving little '
                     'equity cushion'),
        mitigation=('Restructure debt', 'Sell non-core assets',
                    'Retain earnings'),
    ),
    RiskRule(
        factor='Market Volatility',
        category='market',
        severity=Severity.MEDIUM,
        applies=is_volatile_industry,
        description=lambda p: (f'{p.industry.label} industry is subject to '
                               'rapid changes and volatility'),
        mitigation=('Monitor market trends', 'Maintain flexibility',
                    'Build competitive moats'),
    ),
    RiskRule(
        factor='High Debt Load',
        category='financial',
        severity=Severity.HIGH,
        applies=has_high_debt_load,
        description=('Debt levels are high relative to revenue, creating '
                     'financial leverage risk'),
        mitigation=('Reduce debt levels', 'Negotiate better terms',
                    'Improve cash flow'),
    ),
    RiskRule(
        factor='Declining Revenue',
        category='financial',
        severity=Severity.MEDIUM,
        applies=has_declining_revenue,
        description='Revenue is expected to shrink over the coming year',
        mitigation=('Review pricing and product mix', 'Reduce churn'),
    ),
)


def identify_risk_factors(
    profile: BusinessProfile,
    rules: Sequence[RiskRule] = DEFAULT_RULES,
) -> List[RiskFactor]:
  '''
  Evaluate risk rules against a profile.

  Args:
    profile: Business being valued
    rules: Rules to evaluate, in reporting order

  Returns:
    One RiskFactor per rule that fired, in rule order
  '''
  factors = []
  for rule in rules:
    factor = rule.evaluate(profile)
    if factor is not None:
      factors.append(factor)
  return factors
