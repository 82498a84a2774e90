'''
Growth fade policies.

These policies determine how growth transitions from the business's current
growth rate (g0) to the long-run sustainable rate over the explicit
projection period.

The policy returns a sequence of growth rates [g1, g2, ..., gN] for each
year of the explicit forecast period.
'''

from abc import ABC, abstractmethod
from typing import List

from bizval.domain.types import PolicyOutput

MAX_INITIAL_GROWTH = 0.50
MIN_INITIAL_GROWTH = -0.50


def cap_initial_growth(g0: float) -> float:
  '''Bound the starting growth rate so projections cannot run away.'''
  return max(MIN_INITIAL_GROWTH, min(MAX_INITIAL_GROWTH, g0))


class FadePolicy(ABC):
  '''
  Base class for growth fade policies.

  Subclasses implement compute() to return the full sequence of growth rates
  for the explicit forecast period.
  '''

  @abstractmethod
  def compute(
      self,
      g0: float,
      g_terminal: float,
      n_years: int,
      business_age_years: float = 0.0,
  ) -> PolicyOutput[List[float]]:
    '''
    Compute growth rate sequence for explicit forecast period.

    Args:
      g0: Current growth rate
      g_terminal: Long-run (perpetual) growth rate
      n_years: Number of explicit forecast years
      business_age_years: Years in operation

    Returns:
      PolicyOutput with list of growth rates [g_year1, ..., g_yearN]
    '''


class LinearFade(FadePolicy):
  '''
  Linear fade from g0 to g_end.

  Growth rates interpolate linearly from g0 (year 1) to g_end (year N).
  g_end is calculated as g_terminal + g_end_spread.
  '''

  def __init__(self, g_end_spread: float = 0.0):
    '''
    Initialize linear fade policy.

    Args:
      g_end_spread: Spread above terminal rate for g_end (default: 0%)
    '''
    self.g_end_spread = g_end_spread

  def compute(
      self,
      g0: float,
      g_terminal: float,
      n_years: int,
      business_age_years: float = 0.0,
  ) -> PolicyOutput[List[float]]:
    '''Compute linearly fading growth rates.'''
    g0 = cap_initial_growth(g0)
    g_end = g_terminal + self.g_end_spread

    if n_years < 1:
      return PolicyOutput(value=[], diag={'fade_method': 'linear'})

    if n_years == 1:
      return PolicyOutput(value=[g0],
                          diag={
                              'fade_method': 'linear',
                              'g_end': g_end,
                          })

    growth_rates = [
        g0 + (g_end - g0) * (t / (n_years - 1)) for t in range(n_years)
    ]

    return PolicyOutput(value=growth_rates,
                        diag={
                            'fade_method': 'linear',
                            'g0': g0,
                            'g_end_spread': self.g_end_spread,
                            'g_end': g_end,
                        })


class TaperedFade(FadePolicy):
  '''
  Decaying fade that front-loads the slowdown of fast growers.

  The excess of g0 over the long-run rate decays by a per-year factor that
  depends on how fast the business is growing (high growth decays fastest),
  and is scaled down linearly so the final year lands on g_terminal.
  Businesses older than mature_age have their excess damped further.

    g_t = g_terminal + (g0 - g_terminal) * decay^(t-1) * (N - t) / (N - 1)
  '''

  def __init__(
      self,
      high_growth_decay: float = 0.75,
      moderate_growth_decay: float = 0.85,
      low_growth_decay: float = 0.95,
      mature_age: float = 10.0,
      maturity_damping: float = 0.8,
  ):
    '''
    Initialize tapered fade policy.

    Args:
      high_growth_decay: Yearly decay when g0 > 30%
      moderate_growth_decay: Yearly decay when g0 > 15%
      low_growth_decay: Yearly decay otherwise
      mature_age: Age above which growth excess is damped
      maturity_damping: Scale applied to the excess of mature businesses
    '''
    self.high_growth_decay = high_growth_decay
    self.moderate_growth_decay = moderate_growth_decay
    self.low_growth_decay = low_growth_decay
    self.mature_age = mature_age
    self.maturity_damping = maturity_damping

  def decay_for(self, g0: float) -> float:
    if g0 > 0.30:
      return self.high_growth_decay
    if g0 > 0.15:
      return self.moderate_growth_decay
    return self.low_growth_decay

  def compute(
      self,
      g0: float,
      g_terminal: float,
      n_years: int,
      business_age_years: float = 0.0,
  ) -> PolicyOutput[List[float]]:
    '''Compute tapered growth rates.'''
    g0 = cap_initial_growth(g0)

    if n_years < 1:
      return PolicyOutput(value=[], diag={'fade_method': 'tapered'})

    if n_years == 1:
      return PolicyOutput(value=[g0], diag={'fade_method': 'tapered'})

    decay = self.decay_for(g0)
    maturity = (self.maturity_damping
                if business_age_years > self.mature_age else 1.0)
    excess = (g0 - g_terminal) * maturity

    growth_rates = []
    for t in range(1, n_years + 1):
      remaining = (n_years - t) / (n_years - 1)
      growth_rates.append(g_terminal + excess * decay**(t - 1) * remaining)

    return PolicyOutput(value=growth_rates,
                        diag={
                            'fade_method': 'tapered',
                            'g0': g0,
                            'g_terminal': g_terminal,
                            'decay': decay,
                            'maturity_damping': maturity,
                        })
