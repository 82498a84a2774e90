import pytest

from bizval.domain.types import PolicyOutput
from bizval.policies.terminal import GordonTerminal


class TestGordonTerminal:
  """Tests for GordonTerminal policy."""

  def test_basic_usage(self):
    policy = GordonTerminal(g_terminal=0.03)
    result = policy.compute(discount_rate=0.12)

    assert isinstance(result, PolicyOutput)
    assert result.value == 0.03
    assert result.diag['terminal_method'] == 'gordon'
    assert result.diag['spread_clamped'] is False

  def test_default_initialization(self):
    assert GordonTerminal().compute(0.2).value == 0.025

  def test_spread_clamped_near_discount_rate(self):
    """Growth converging on the discount rate keeps a 1 point gap."""
    result = GordonTerminal(g_terminal=0.06).compute(discount_rate=0.065)

    assert result.value == pytest.approx(0.055)
    assert result.diag['spread_clamped'] is True

  def test_custom_min_spread(self):
    result = GordonTerminal(g_terminal=0.05,
                            min_spread=0.03).compute(discount_rate=0.07)

    assert result.value == pytest.approx(0.04)
