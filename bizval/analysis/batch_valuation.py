'''
Batch valuation for many businesses.

This module provides tools to:
1. Load business profiles from a flat CSV
2. Value them concurrently
3. Export results to CSV for further analysis

Usage (CLI):
  python -m bizval.analysis.batch_valuation \
    --input data/businesses.csv \
    --output results/valuations.csv \
    --preset conservative \
    -v

Usage (Python API):
  from bizval.analysis.batch_valuation import batch_valuation
  from bizval.analysis.batch_valuation import load_profiles_csv

  df = batch_valuation(load_profiles_csv('businesses.csv'))
  df.to_csv('results.csv', index=False)
'''

import argparse
from collections.abc import Mapping, Sequence
from concurrent.futures import as_completed
from concurrent.futures import ThreadPoolExecutor
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from bizval.domain.errors import InvalidInputError
from bizval.domain.types import ValuationResult
from bizval.run import PRESETS
from bizval.run import run_valuation
from bizval.scenarios.config import EngineConfig

logger = logging.getLogger(__name__)

ASSET_COLUMNS = {
    'assets_tangible': 'tangible',
    'assets_intangible': 'intangible',
    'assets_inventory': 'inventory',
    'assets_equipment': 'equipment',
    'assets_real_estate': 'real_estate',
}

LIABILITY_COLUMNS = {
    'liabilities_short_term': 'short_term',
    'liabilities_long_term': 'long_term',
    'liabilities_contingent': 'contingent',
}


def _result_to_dict(business_id: str, config_name: str,
                    result: ValuationResult) -> dict:
  '''Convert ValuationResult to flat dictionary for DataFrame row.'''
  weights = result.weighted.weights
  return {
      'id': business_id,
      'config': config_name,
      'status': 'completed',
      'weighted_value': result.weighted.value,
      'confidence': result.weighted.confidence,
      'low': result.valuation_range.low,
      'high': result.valuation_range.high,
      'asset_value': result.asset_based.value,
      'income_value': result.income_based.value,
      'market_value': result.market_based.value,
      'weight_asset': weights.asset,
      'weight_income': weights.income,
      'weight_market': weights.market,
      'risk_factors': '; '.join(result.risk_labels),
      'processing_time_ms': result.processing_time_ms,
      'error': None,
  }


def batch_valuation(
    profiles: Sequence[Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
    max_workers: int = 4,
) -> pd.DataFrame:
  '''
  Value many businesses concurrently.

  Structurally invalid profiles do not stop the batch: they are reported as
  rows with status 'failed' and the validation message in 'error'.

  Args:
    profiles: Request-style mappings; an optional 'id' key labels the row
    config: EngineConfig (default: EngineConfig.default())
    max_workers: Number of profiles valued at once

  Returns:
    DataFrame with one row per profile, in input order
  '''
  if config is None:
    config = EngineConfig.default()

  rows: Dict[int, dict] = {}

  def business_id(i: int) -> str:
    return str(profiles[i].get('id', f'row-{i}'))

  with ThreadPoolExecutor(max_workers=max_workers) as executor:
    futures = {
        executor.submit(run_valuation, profile, config): i
        for i, profile in enumerate(profiles)
    }

    for future in as_completed(futures):
      i = futures[future]
      try:
        result = future.result()
        rows[i] = _result_to_dict(business_id(i), config.name, result)
        logger.info('✓ %s: $%s (confidence %.0f%%)', business_id(i),
                    f'{result.weighted.value:,.0f}',
                    result.weighted.confidence * 100)
      except InvalidInputError as e:
        logger.warning('✗ %s: %s', business_id(i), e)
        rows[i] = {
            'id': business_id(i),
            'config': config.name,
            'status': 'failed',
            'error': str(e),
        }

  return pd.DataFrame([rows[i] for i in sorted(rows)])


def _row_to_profile(row: Mapping[str, Any]) -> dict:
  '''Nest a flat CSV row into a request-style mapping; blanks are omitted.'''
  flat = {k: v for k, v in row.items() if not pd.isna(v)}
  profile: Dict[str, Any] = {
      'assets': {
          name: flat.pop(column)
          for column, name in ASSET_COLUMNS.items()
          if column in flat
      },
      'liabilities': {
          name: flat.pop(column)
          for column, name in LIABILITY_COLUMNS.items()
          if column in flat
      },
  }
  profile.update(flat)
  return profile


def load_profiles_csv(path: Path) -> List[dict]:
  '''
  Load business profiles from a flat CSV.

  Columns use the snake_case field names; asset and liability categories
  are prefixed ('assets_tangible', 'liabilities_long_term', ...). An
  optional 'id' column labels each business.
  '''
  if not Path(path).exists():
    raise FileNotFoundError(f'Profiles CSV not found: {path}')
  df = pd.read_csv(path, dtype={'id': str})
  return [_row_to_profile(row) for row in df.to_dict('records')]


def _print_summary(df: pd.DataFrame) -> None:
  '''Log summary statistics for batch valuation results.'''
  completed = df[df['status'] == 'completed']

  logger.info('')
  logger.info('=' * 70)
  logger.info('Summary Statistics')
  logger.info('=' * 70)
  logger.info('Total businesses: %d', len(df))
  logger.info('Completed: %d', len(completed))
  logger.info('Failed: %d', len(df) - len(completed))

  if len(completed) > 0:
    logger.info('')
    logger.info('Weighted Value:')
    logger.info('  Mean:   $%s', f'{completed["weighted_value"].mean():,.0f}')
    logger.info('  Median: $%s',
                f'{completed["weighted_value"].median():,.0f}')
    logger.info('  Min:    $%s (%s)',
                f'{completed["weighted_value"].min():,.0f}',
                completed.loc[completed['weighted_value'].idxmin(), 'id'])
    logger.info('  Max:    $%s (%s)',
                f'{completed["weighted_value"].max():,.0f}',
                completed.loc[completed['weighted_value'].idxmax(), 'id'])
    logger.info('Mean confidence: %.0f%%',
                completed['confidence'].mean() * 100)
  logger.info('=' * 70)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Batch business valuation')
  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='Flat CSV of business profiles')
  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV path')
  parser.add_argument('--preset',
                      type=str,
                      default='default',
                      choices=sorted(PRESETS),
                      help='Engine config preset')
  parser.add_argument('--workers',
                      type=int,
                      default=4,
                      help='Businesses valued at once (default: 4)')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Enable debug logging')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  profiles = load_profiles_csv(args.input)
  logger.info('Loaded %d profiles from %s', len(profiles), args.input)

  df = batch_valuation(profiles, PRESETS[args.preset](), args.workers)

  args.output.parent.mkdir(parents=True, exist_ok=True)
  df.to_csv(args.output, index=False)
  logger.info('Saved to: %s', args.output)

  _print_summary(df)


if __name__ == '__main__':
  main()
