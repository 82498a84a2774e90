"""
Sensitivity analysis for the income-based valuation.

This module provides tools to generate 2D sensitivity tables that show
how the DCF value varies across different discount rates and initial
growth rates.

CLI Usage:
  python -m bizval.analysis.sensitivity \\
      --profile business.json \\
      --discount-rates 0.15,0.20,0.25 \\
      --growth-rates 0.05,0.10,0.15,0.20
"""

import argparse
import logging
from pathlib import Path

import pandas as pd

from bizval.domain.types import BusinessProfile
from bizval.engine.dcf import compute_enterprise_value
from bizval.methods.income_based import normalized_cash_flow
from bizval.methods.income_based import PROJECTION_YEARS
from bizval.run import load_profile
from bizval.run import PRESETS
from bizval.scenarios.config import EngineConfig
from bizval.scenarios.registry import create_policies

logger = logging.getLogger(__name__)


class SensitivityTableBuilder:
  """
  Build 2D sensitivity tables for the DCF value.

  Varies discount rate and initial growth rate while keeping the base cash
  flow, fade and terminal policies fixed by the engine configuration.
  """

  def __init__(
      self,
      profile: BusinessProfile,
      base_config: EngineConfig,
      n_years: int = PROJECTION_YEARS,
  ):
    """
    Initialize sensitivity table builder.

    Args:
        profile: Business being valued
        base_config: Engine configuration for the fade and terminal policies
        n_years: Explicit forecast years
    """
    self.profile = profile
    self.base_config = base_config
    self.n_years = n_years
    self.policies = create_policies(base_config)
    self.cf0 = normalized_cash_flow(profile.financials)

    logger.info('Initialized SensitivityTableBuilder')
    logger.info('  Base cash flow: $%s', f'{self.cf0:,.0f}')
    logger.info('  Business age: %.1f years', profile.business_age_years)

  def build(
      self,
      discount_rates: list[float],
      initial_growth_rates: list[float],
  ) -> pd.DataFrame:
    """
    Build 2D sensitivity table.

    Args:
        discount_rates: List of discount rates (e.g., [0.15, 0.20, 0.25])
        initial_growth_rates: List of initial growth rates
                             (e.g., [0.05, 0.10, 0.15])

    Returns:
        DataFrame with discount rates as index, growth rates as columns,
        and DCF values as cell values. The terminal growth rate is clamped
        below each discount rate by the terminal policy.
    """
    if not discount_rates:
      raise ValueError('discount_rates cannot be empty')
    if not initial_growth_rates:
      raise ValueError('initial_growth_rates cannot be empty')

    logger.info('Building sensitivity table: %d x %d', len(discount_rates),
                len(initial_growth_rates))

    data_rows = []

    for r in discount_rates:
      g_terminal = self.policies['terminal'].compute(r).value
      row_data = []
      for g0 in initial_growth_rates:
        fade_result = self.policies['fade'].compute(
            g0=g0,
            g_terminal=g_terminal,
            n_years=self.n_years,
            business_age_years=self.profile.business_age_years,
        )

        value, _, _ = compute_enterprise_value(
            cf0=self.cf0,
            growth_path=fade_result.value,
            g_terminal=g_terminal,
            discount_rate=r,
        )
        row_data.append(value)
      data_rows.append(row_data)

    r_labels = [f'{r:.1%}' for r in discount_rates]
    g_labels = [f'{g:.1%}' for g in initial_growth_rates]

    df = pd.DataFrame(data_rows, index=r_labels, columns=g_labels)
    df.index.name = 'Discount Rate'
    df.columns.name = 'Initial Growth'

    logger.info('Sensitivity table built successfully')
    return df


def _parse_float_list(s: str) -> list[float]:
  """Parse comma-separated float list."""
  return [float(x.strip()) for x in s.split(',')]


def _frange(start: float, stop: float, step: float) -> list[float]:
  """Inclusive float range, rounded to avoid accumulated float error."""
  if step <= 0:
    raise ValueError('step must be > 0')
  n = int(round((stop - start) / step))
  if n < 0:
    return []
  return [round(start + k * step, 12) for k in range(n + 1)]


def main() -> None:
  """CLI entrypoint for sensitivity analysis."""
  parser = argparse.ArgumentParser(
      description='DCF Sensitivity Analysis',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  # Explicit rates
  python -m bizval.analysis.sensitivity --profile business.json \\
      --discount-rates 0.15,0.20,0.25 --growth-rates 0.05,0.10,0.15

  # Range specification
  python -m bizval.analysis.sensitivity --profile business.json \\
      --discount-min 0.12 --discount-max 0.24 --discount-step 0.02 \\
      --growth-min 0.0 --growth-max 0.30 --growth-step 0.05
      """)

  parser.add_argument('--profile',
                      type=Path,
                      required=True,
                      help='Path to business profile JSON')
  parser.add_argument('--preset',
                      type=str,
                      default='default',
                      choices=sorted(PRESETS),
                      help='Engine config preset')

  parser.add_argument('--discount-rates',
                      type=str,
                      help='Comma-separated discount rates (e.g., 0.15,0.20)')
  parser.add_argument('--growth-rates',
                      type=str,
                      help='Comma-separated growth rates (e.g., 0.05,0.10)')

  parser.add_argument('--discount-min',
                      type=float,
                      help='Minimum discount rate')
  parser.add_argument('--discount-max',
                      type=float,
                      help='Maximum discount rate')
  parser.add_argument('--discount-step',
                      type=float,
                      default=0.01,
                      help='Discount rate step (default: 0.01)')

  parser.add_argument('--growth-min', type=float, help='Minimum growth rate')
  parser.add_argument('--growth-max', type=float, help='Maximum growth rate')
  parser.add_argument('--growth-step',
                      type=float,
                      default=0.01,
                      help='Growth rate step (default: 0.01)')

  parser.add_argument('--output', type=Path, help='Output CSV path (optional)')
  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Verbose output')

  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  profile = load_profile(args.profile)
  config = PRESETS[args.preset]()

  if args.discount_rates:
    discount_rates = _parse_float_list(args.discount_rates)
  elif args.discount_min is not None and args.discount_max is not None:
    discount_rates = _frange(args.discount_min, args.discount_max,
                             args.discount_step)
  else:
    discount_rates = [0.15, 0.20, 0.25]
    logger.warning('No discount rates specified, using default: %s',
                   discount_rates)

  if args.growth_rates:
    growth_rates = _parse_float_list(args.growth_rates)
  elif args.growth_min is not None and args.growth_max is not None:
    growth_rates = _frange(args.growth_min, args.growth_max, args.growth_step)
  else:
    growth_rates = [0.05, 0.10, 0.15, 0.20]
    logger.warning('No growth rates specified, using default: %s', growth_rates)

  builder = SensitivityTableBuilder(profile, config)
  table = builder.build(
      discount_rates=discount_rates,
      initial_growth_rates=growth_rates,
  )

  print('\n' + '=' * 80)
  print(f'Sensitivity Analysis: {profile.industry.label} business')
  print('=' * 80)
  print(f'\nConfig: {config.name}')
  print(f'Base cash flow: ${builder.cf0:,.0f}')
  print(f'Forecast Years: {builder.n_years}')
  print('\n' + '=' * 80)
  print('DCF Value ($)')
  print('=' * 80)
  print(table.to_string(float_format=lambda x: f'${x:,.0f}'))
  print('=' * 80 + '\n')

  if args.output:
    table.to_csv(args.output)
    logger.info('Saved to: %s', args.output)


if __name__ == '__main__':
  main()
