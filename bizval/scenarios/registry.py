"""
Policy registry for mapping string names to policy factories.

This enables engine configurations to name policies with strings (JSON
friendly) while still instantiating the correct policy classes. Factories
receive the EngineConfig so policies can pick up its rate assumptions.

To add a new policy:
1. Implement the policy class in the appropriate module
   (e.g., policies/fade.py)
2. Register a factory in the matching dictionary below

Example:
  # In policies/fade.py
  class StepFade(FadePolicy):
    def compute(self, g0, g_terminal, n_years, business_age_years=0.0):
      ...

  # In scenarios/registry.py
  FADE_POLICIES['step'] = lambda config: StepFade()
"""

from collections.abc import Callable
from typing import Any, cast

from bizval.policies.discount import DiscountPolicy
from bizval.policies.discount import FixedRate
from bizval.policies.discount import RiskBuildupRate
from bizval.policies.fade import FadePolicy
from bizval.policies.fade import LinearFade
from bizval.policies.fade import TaperedFade
from bizval.policies.terminal import GordonTerminal
from bizval.policies.terminal import TerminalPolicy
from bizval.policies.weights import CharacteristicWeights
from bizval.policies.weights import IndustryWeights
from bizval.policies.weights import WeightPolicy
from bizval.scenarios.config import EngineConfig

DISCOUNT_POLICIES: dict[str, Callable[[EngineConfig], DiscountPolicy]] = {
    'risk_buildup': lambda config: RiskBuildupRate(rates=config.rates),
    'fixed_0p08': lambda config: FixedRate(rate=0.08),
    'fixed_0p10': lambda config: FixedRate(rate=0.10),
    'fixed_0p12': lambda config: FixedRate(rate=0.12),
    'fixed_0p15': lambda config: FixedRate(rate=0.15),
    'fixed_0p20': lambda config: FixedRate(rate=0.20),
}

FADE_POLICIES: dict[str, Callable[[EngineConfig], FadePolicy]] = {
    'tapered': lambda config: TaperedFade(),
    'tapered_no_damping': lambda config: TaperedFade(maturity_damping=1.0),
    'linear': lambda config: LinearFade(),
    'linear_0p01': lambda config: LinearFade(g_end_spread=0.01),
}

TERMINAL_POLICIES: dict[str, Callable[[EngineConfig], TerminalPolicy]] = {
    'gordon': lambda config: GordonTerminal(
        g_terminal=config.rates.terminal_growth),
    'gordon_2pct': lambda config: GordonTerminal(g_terminal=0.02),
    'gordon_3pct': lambda config: GordonTerminal(g_terminal=0.03),
}

WEIGHT_POLICIES: dict[str, Callable[[EngineConfig], WeightPolicy]] = {
    'characteristic': lambda config: CharacteristicWeights(),
    'industry_only': lambda config: IndustryWeights(),
}

POLICY_REGISTRY = {
    'discount': DISCOUNT_POLICIES,
    'fade': FADE_POLICIES,
    'terminal': TERMINAL_POLICIES,
    'weights': WEIGHT_POLICIES,
}


def create_policies(config: EngineConfig) -> dict[str, Any]:
  """
  Create policy instances from an engine configuration.

  Args:
    config: EngineConfig with policy names

  Returns:
    Dictionary with instantiated policy objects:
    - discount: DiscountPolicy
    - fade: FadePolicy
    - terminal: TerminalPolicy
    - weights: WeightPolicy

  Raises:
    KeyError: If a policy name is not found in the registry
  """
  policies = {}
  for category, factories in POLICY_REGISTRY.items():
    name = getattr(config, category)
    try:
      factory = factories[name]
    except KeyError as e:
      raise KeyError(f"Unknown {category} policy: '{name}'. "
                     f'Available: {list(factories.keys())}') from e
    policies[category] = factory(config)
  return policies


def list_policies() -> dict[str, list[str]]:
  """
  List all available policies by category.

  Returns:
    Dictionary mapping category names to list of policy names
  """
  result: dict[str, list[str]] = {}
  for category, policies_dict in POLICY_REGISTRY.items():
    policy_dict = cast(dict[str, object], policies_dict)
    result[category] = list(policy_dict.keys())
  return result
