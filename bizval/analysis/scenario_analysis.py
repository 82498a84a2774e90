'''
Conservative / base / optimistic scenario modelling.

Each scenario shocks the business profile (growth, cash-flow margin and
market position), runs the full engine on the shocked profile and reports
the results side by side. expected_value() weights the scenarios by their
probabilities.

Usage:
  from bizval.analysis.scenario_analysis import build_scenarios

  df = build_scenarios(profile)
  print(df[['scenario', 'weighted_value', 'confidence']])
'''

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import replace
import logging
from typing import Optional

import pandas as pd

from bizval.domain.types import BusinessProfile
from bizval.engine.weighted import WeightedValuationEngine
from bizval.scenarios.config import EngineConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioShock:
  '''
  Attributes:
    name: Scenario label
    probability: Weight of the scenario in the expected value
    growth_shift: Added to the growth rate
    margin_shift: Added to cash flow as a fraction of revenue
    position_steps: Moves market position up (positive) or down
  '''
  name: str
  probability: float
  growth_shift: float = 0.0
  margin_shift: float = 0.0
  position_steps: int = 0


DEFAULT_SHOCKS = (
    ScenarioShock('conservative', 0.25, growth_shift=-0.05,
                  margin_shift=-0.02, position_steps=-1),
    ScenarioShock('base', 0.50),
    ScenarioShock('optimistic', 0.25, growth_shift=0.05, margin_shift=0.02,
                  position_steps=1),
)


def apply_shock(profile: BusinessProfile,
                shock: ScenarioShock) -> BusinessProfile:
  '''Return a copy of profile with the shock applied.'''
  financials = profile.financials
  shocked = replace(
      financials,
      growth_rate=financials.growth_rate + shock.growth_shift,
      cash_flow=financials.cash_flow +
      financials.annual_revenue * shock.margin_shift,
  )
  return replace(profile,
                 financials=shocked,
                 market_position=profile.market_position.shifted(
                     shock.position_steps))


def build_scenarios(
    profile: BusinessProfile,
    shocks: Sequence[ScenarioShock] = DEFAULT_SHOCKS,
    config: Optional[EngineConfig] = None,
) -> pd.DataFrame:
  '''
  Value the profile under each scenario.

  Returns:
    DataFrame with one row per scenario, in the order given
  '''
  if not shocks:
    raise ValueError('shocks cannot be empty')

  engine = WeightedValuationEngine(config)
  rows = []
  for shock in shocks:
    shocked = apply_shock(profile, shock)
    result = engine.evaluate(shocked)
    logger.debug('Scenario %s: %.0f', shock.name, result.weighted.value)
    rows.append({
        'scenario': shock.name,
        'probability': shock.probability,
        'growth_rate': shocked.financials.growth_rate,
        'cash_flow': shocked.financials.cash_flow,
        'market_position': shocked.market_position.value,
        'asset_value': result.asset_based.value,
        'income_value': result.income_based.value,
        'market_value': result.market_based.value,
        'weighted_value': result.weighted.value,
        'confidence': result.weighted.confidence,
        'low': result.valuation_range.low,
        'high': result.valuation_range.high,
        'risk_count': len(result.risk_factors),
    })
  return pd.DataFrame(rows)


def expected_value(scenarios: pd.DataFrame) -> float:
  '''Probability-weighted composite value across scenarios.'''
  total = scenarios['probability'].sum()
  if total <= 0:
    raise ValueError('scenario probabilities must sum to a positive number')
  weighted = (scenarios['probability'] * scenarios['weighted_value']).sum()
  return float(weighted / total)
