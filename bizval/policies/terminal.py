"""
Terminal growth policies.

These policies determine the terminal (perpetual) growth rate used
in the perpetuity-growth model for terminal value calculation.
"""

from abc import ABC
from abc import abstractmethod

from bizval.domain.types import PolicyOutput

MIN_RATE_SPREAD = 0.01


class TerminalPolicy(ABC):
  """
  Base class for terminal growth policies.

  Subclasses implement compute() to return a terminal growth rate that is
  strictly below the discount rate.
  """

  @abstractmethod
  def compute(self, discount_rate: float) -> PolicyOutput[float]:
    """
    Compute terminal growth rate.

    Args:
      discount_rate: Discount rate the terminal value will be computed at

    Returns:
      PolicyOutput with terminal growth rate and diagnostics
    """


class GordonTerminal(TerminalPolicy):
  """
  Fixed terminal growth rate for the perpetuity-growth model.

  Typically set to long-term GDP growth or inflation. The rate is lowered
  when needed so that discount_rate - g_terminal >= min_spread, which keeps
  the perpetuity denominator away from zero.
  """

  def __init__(self, g_terminal: float = 0.025,
               min_spread: float = MIN_RATE_SPREAD):
    """
    Initialize Gordon terminal policy.

    Args:
      g_terminal: Terminal growth rate (default: 2.5%)
      min_spread: Minimum gap to the discount rate (default: 1 point)
    """
    self.g_terminal = g_terminal
    self.min_spread = min_spread

  def compute(self, discount_rate: float) -> PolicyOutput[float]:
    """Return terminal growth rate, clamped below the discount rate."""
    ceiling = discount_rate - self.min_spread
    g = min(self.g_terminal, ceiling)
    return PolicyOutput(value=g,
                        diag={
                            'terminal_method': 'gordon',
                            'g_terminal': g,
                            'spread_clamped': g < self.g_terminal,
                        })
