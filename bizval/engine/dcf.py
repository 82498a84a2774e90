"""
Pure DCF math engine.

This module contains pure functions for DCF calculations. No pandas, no I/O,
just numeric computations. All inputs must be prepared before calling these.

Key functions:
  project_cash_flows: Compound a base cash flow along a growth path
  compute_pv_explicit: PV of explicit forecast period
  compute_terminal_value: Perpetuity-growth terminal value
  compute_enterprise_value: Explicit PV plus discounted terminal value
"""

from collections.abc import Sequence
from math import isfinite


def project_cash_flows(cf0: float, growth_path: Sequence[float]) -> list[float]:
  """
  Project yearly cash flows from a base-year cash flow.

  Args:
    cf0: Base-year (current) cash flow
    growth_path: Sequence of yearly growth rates [g1, g2, ..., gN]

  Returns:
    Cash flow for each projected year [cf1, cf2, ..., cfN]
  """
  flows = []
  cf = cf0
  for g in growth_path:
    cf *= (1.0 + g)
    flows.append(cf)
  return flows


def compute_pv_explicit(
    cash_flows: Sequence[float],
    discount_rate: float,
) -> tuple[float, list[float]]:
  """
  Compute present value of explicit forecast period.

  Args:
    cash_flows: Projected cash flow for each year, year 1 first
    discount_rate: Required return (r)

  Returns:
    Tuple of (pv_total, present_values):
    - pv_total: Sum of discounted cash flows
    - present_values: Discounted value of each year
  """
  present_values = [
      cf / ((1.0 + discount_rate)**t) for t, cf in enumerate(cash_flows, start=1)
  ]
  return sum(present_values), present_values


def compute_terminal_value(
    final_cash_flow: float,
    g_terminal: float,
    discount_rate: float,
    final_year: int,
) -> tuple[float, float]:
  """
  Compute terminal value using the perpetuity-growth (Gordon) model.

  Args:
    final_cash_flow: Cash flow in final explicit year
    g_terminal: Terminal (perpetual) growth rate
    discount_rate: Required return (r)
    final_year: Number of years to discount back

  Returns:
    Tuple of (terminal_value, discounted_terminal_value). Both are nan if
    discount_rate <= g_terminal (model undefined).
  """
  if discount_rate <= g_terminal:
    return float('nan'), float('nan')

  tv = (final_cash_flow * (1.0 + g_terminal)) / (discount_rate - g_terminal)
  discounted_tv = tv / ((1.0 + discount_rate)**final_year)
  return tv, discounted_tv


def compute_enterprise_value(
    cf0: float,
    growth_path: Sequence[float],
    g_terminal: float,
    discount_rate: float,
) -> tuple[float, float, float]:
  """
  Compute enterprise value using a two-stage DCF model.

  Stage 1: Explicit forecast period along the growth path
  Stage 2: Terminal value using the perpetuity-growth model

  Args:
    cf0: Base-year cash flow
    growth_path: Sequence of yearly growth rates [g1, g2, ..., gN]
    g_terminal: Perpetual terminal growth rate
    discount_rate: Required return (r)

  Returns:
    Tuple of (value, pv_explicit, tv_component):
    - value: Total enterprise value
    - pv_explicit: PV contribution from explicit period
    - tv_component: PV contribution from terminal value
    All three are nan when the inputs are invalid.
  """
  nan3 = float('nan'), float('nan'), float('nan')

  if not isfinite(cf0) or not all(isfinite(g) for g in growth_path):
    return nan3

  if not isfinite(g_terminal) or not isfinite(discount_rate):
    return nan3

  if discount_rate <= g_terminal or not growth_path:
    return nan3

  flows = project_cash_flows(cf0, growth_path)
  pv_explicit, _ = compute_pv_explicit(flows, discount_rate)
  _, tv_component = compute_terminal_value(flows[-1], g_terminal,
                                           discount_rate, len(flows))

  if not isfinite(pv_explicit) or not isfinite(tv_component):
    return nan3

  return pv_explicit + tv_component, pv_explicit, tv_component
