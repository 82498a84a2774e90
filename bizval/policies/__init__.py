"""
Heuristic policies for the valuation methodologies.

Each policy estimates one input of a methodology (discount rate, growth
path, terminal growth, methodology weights) and returns both a value and
diagnostic information. Confidence and risk heuristics are plain functions
in confidence.py and risk.py.

To add a new policy:
1. Create a new class inheriting from the appropriate base (e.g., FadePolicy)
2. Implement the compute() method returning PolicyOutput
3. Register in scenarios/registry.py

Example:
  class StepFade(FadePolicy):
    def compute(self, g0, g_terminal, n_years, business_age_years=0.0):
      path = [g0] * (n_years - 1) + [g_terminal]
      return PolicyOutput(value=path, diag={'fade_method': 'step'})
"""

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

__all__ = [
  'DiscountPolicy', 'FixedRate', 'RiskBuildupRate',
  'FadePolicy', 'LinearFade', 'TaperedFade',
  'TerminalPolicy', 'GordonTerminal',
  'WeightPolicy', 'IndustryWeights', 'CharacteristicWeights',
]
