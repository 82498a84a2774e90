'''
Income-based (DCF) valuation.

Two-stage discounted cash flow: an explicit projection along the growth
path from the fade policy, then a perpetuity-growth terminal value. The
discount rate, growth path and terminal growth all come from injectable
policies; the arithmetic lives in bizval.engine.dcf.
'''

import logging
import math
from typing import Any, Dict, Optional
import warnings

from bizval.domain.errors import DegenerateResultWarning
from bizval.domain.types import Financials
from bizval.domain.types import Industry
from bizval.domain.types import IncomeBasedResult
from bizval.domain.types import MarketPosition
from bizval.domain.types import RateAssumptions
from bizval.engine.dcf import compute_pv_explicit
from bizval.engine.dcf import compute_terminal_value
from bizval.engine.dcf import project_cash_flows
from bizval.policies.confidence import income_confidence
from bizval.policies.discount import DiscountPolicy
from bizval.policies.discount import RiskBuildupRate
from bizval.policies.fade import FadePolicy
from bizval.policies.fade import TaperedFade
from bizval.policies.terminal import GordonTerminal
from bizval.policies.terminal import TerminalPolicy

logger = logging.getLogger(__name__)

METHODOLOGY = 'Discounted Cash Flow (DCF) with Terminal Value'

PROJECTION_YEARS = 5

DISTRESS_MARGIN = 0.05
RECURRING_MARGIN_BONUS = 0.05


def normalized_cash_flow(financials: Financials) -> float:
  '''
  Base-year cash flow used for projection.

  Cash flow below a minimal revenue margin is lifted to that margin, on the
  view that a buyer could restore at least a distressed-level margin.
  Recurring revenue raises the margin. Taking the maximum keeps the base
  non-decreasing in the reported cash flow.
  '''
  margin = DISTRESS_MARGIN + RECURRING_MARGIN_BONUS * financials.recurring_ratio
  return max(financials.cash_flow, financials.annual_revenue * margin)


def earnings_multiple_valuation(financials: Financials,
                                industry_multiple: float = 10.0
                               ) -> Dict[str, float]:
  '''
  Quick earnings-multiple cross-check on the DCF value.

  Positive cash flow times a multiple adjusted for growth and recurring
  revenue. Unprofitable businesses are valued at zero with low confidence.
  '''
  earnings = max(financials.cash_flow, 0.0)

  multiple = industry_multiple
  if financials.growth_rate > 0.30:
    multiple *= 1.5
  elif financials.growth_rate > 0.15:
    multiple *= 1.2
  elif financials.growth_rate < 0:
    multiple *= 0.6
  multiple *= 1 + financials.recurring_ratio * 0.5

  return {
      'value': earnings * multiple,
      'confidence': 0.70 if earnings > 0 else 0.40,
      'multiple': multiple,
  }


class IncomeBasedValuator:
  '''DCF valuator driven by discount, fade and terminal policies.'''

  def __init__(
      self,
      discount_policy: Optional[DiscountPolicy] = None,
      fade_policy: Optional[FadePolicy] = None,
      terminal_policy: Optional[TerminalPolicy] = None,
      projection_years: int = PROJECTION_YEARS,
  ):
    '''
    Initialize the valuator.

    Args:
      discount_policy: Discount rate policy (default: RiskBuildupRate)
      fade_policy: Growth fade policy (default: TaperedFade)
      terminal_policy: Terminal growth policy (default: GordonTerminal at
        the default long-run growth assumption)
      projection_years: Explicit forecast years

    Raises:
      ValueError: If projection_years < 1
    '''
    if projection_years < 1:
      raise ValueError(f'projection_years must be >= 1, got {projection_years}')
    self.discount_policy = discount_policy or RiskBuildupRate()
    self.fade_policy = fade_policy or TaperedFade()
    self.terminal_policy = terminal_policy or GordonTerminal(
        RateAssumptions().terminal_growth)
    self.projection_years = projection_years

  def calculate(
      self,
      financials: Financials,
      industry: Industry,
      business_age_years: float,
      market_position: MarketPosition,
      customer_count: int,
  ) -> IncomeBasedResult:
    '''
    Compute the DCF value.

    Returns:
      IncomeBasedResult with the projection breakdown. A negative total is
      floored at 0, marked degenerate and reported with a
      DegenerateResultWarning.
    '''
    diag: Dict[str, Any] = {}

    discount = self.discount_policy.compute(industry, business_age_years,
                                            market_position)
    r = discount.value
    diag.update(discount.diag)

    terminal = self.terminal_policy.compute(r)
    g_terminal = terminal.value
    diag.update(terminal.diag)

    fade = self.fade_policy.compute(financials.growth_rate, g_terminal,
                                    self.projection_years, business_age_years)
    growth_path = fade.value
    diag.update(fade.diag)

    base = normalized_cash_flow(financials)
    flows = project_cash_flows(base, growth_path)
    pv_explicit, present_values = compute_pv_explicit(flows, r)
    terminal_value, terminal_present = compute_terminal_value(
        flows[-1], g_terminal, r, len(flows))

    raw_value = pv_explicit + terminal_present
    degenerate = not math.isfinite(raw_value) or raw_value < 0
    if degenerate:
      warnings.warn(
          f'DCF value {raw_value:,.0f} is not a positive amount; income-based '
          'value floored at 0',
          DegenerateResultWarning,
          stacklevel=1)
      value = 0.0
    else:
      value = raw_value

    confidence = income_confidence(financials, business_age_years,
                                   customer_count, market_position, r,
                                   degenerate)

    logger.debug('Income-based: r=%.4f g_terminal=%.4f base=%.0f value=%.0f',
                 r, g_terminal, base, value)

    factors = [
        f'Discount rate: {r:.1%}',
        f'Normalized base cash flow: ${base:,.0f}',
        f'Initial growth: {growth_path[0]:.1%}, long-run growth: '
        f'{g_terminal:.1%}',
        f'Terminal value share: {_share(terminal_present, raw_value):.0%}',
    ]
    if base != financials.cash_flow:
      factors.append('Cash flow normalized to a minimum revenue margin')

    return IncomeBasedResult(value=value,
                             confidence=confidence,
                             methodology=METHODOLOGY,
                             factors=factors,
                             degenerate=degenerate,
                             diag=diag,
                             discount_rate=r,
                             growth_assumptions=list(growth_path),
                             terminal_value=terminal_value,
                             projected_cash_flows=flows,
                             present_values=present_values,
                             terminal_value_present=terminal_present)


def _share(part: float, whole: float) -> float:
  if not math.isfinite(whole) or whole <= 0:
    return 0.0
  return part / whole
