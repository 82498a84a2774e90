'''
Single-business valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Validates the business profile
2. Builds the engine from the engine configuration
3. Runs the three methodologies and the synthesis
4. Returns ValuationResult with full diagnostics

Usage:
  from bizval.run import run_valuation
  from bizval.scenarios.config import EngineConfig

  result = run_valuation(
    profile={'annualRevenue': 5_000_000, 'cashFlow': 1_000_000, ...},
    config=EngineConfig.default(),
  )
  print(f"Value: ${result.weighted.value:,.0f}")

CLI:
  python -m bizval.run --profile business.json --output result.json
'''

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from bizval.assembler import assemble
from bizval.domain.types import BusinessProfile
from bizval.domain.types import ValuationResult
from bizval.engine.weighted import WeightedValuationEngine
from bizval.scenarios.config import EngineConfig

logger = logging.getLogger(__name__)

PRESETS = {
    'default': EngineConfig.default,
    'conservative': EngineConfig.conservative,
}


def run_valuation(
    profile: Union[BusinessProfile, Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
) -> ValuationResult:
  '''
  Run a valuation for a single business.

  Args:
    profile: BusinessProfile, or a request-style mapping to validate
    config: EngineConfig (default: EngineConfig.default())

  Returns:
    ValuationResult with composite value, per-method results and diagnostics

  Raises:
    InvalidInputError: If the profile is structurally invalid
    KeyError: If the config names an unknown policy
  '''
  if config is None:
    config = EngineConfig.default()

  if not isinstance(profile, BusinessProfile):
    profile = BusinessProfile.from_dict(profile)

  return WeightedValuationEngine(config).evaluate(profile)


def load_profile(path: Path) -> BusinessProfile:
  '''Load a business profile from a JSON file.'''
  if not path.exists():
    raise FileNotFoundError(f'Profile not found: {path}')
  with path.open() as f:
    return BusinessProfile.from_dict(json.load(f))


def log_summary(result: ValuationResult, config: EngineConfig) -> None:
  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Business Valuation')
  logger.info('Config: %s', config.name)
  logger.info(separator)

  logger.info('\nMethodologies:')
  for label, method in (('Asset-based', result.asset_based),
                        ('Income-based', result.income_based),
                        ('Market-based', result.market_based)):
    logger.info('  %-13s $%s (confidence %.0f%%)', label,
                f'{method.value:,.0f}', method.confidence * 100)

  weights = result.weighted.weights
  logger.info('\nWeights: asset %.0f%%, income %.0f%%, market %.0f%%',
              weights.asset * 100, weights.income * 100, weights.market * 100)

  logger.info('\nWeighted Value: $%s', f'{result.weighted.value:,.0f}')
  logger.info('  Confidence: %.0f%%', result.weighted.confidence * 100)
  logger.info('  Range: $%s - $%s',
              f'{result.valuation_range.low:,.0f}',
              f'{result.valuation_range.high:,.0f}')

  if result.risk_factors:
    logger.info('\nRisk Factors:')
    for risk in result.risk_factors:
      logger.info('  [%s] %s', risk.severity.value, risk.factor)

  logger.info('%s\n', separator)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run business valuation')
  parser.add_argument('--profile',
                      type=Path,
                      required=True,
                      help='Path to business profile JSON')
  parser.add_argument('--config',
                      type=Path,
                      default=None,
                      help='Path to engine config JSON (overrides --preset)')
  parser.add_argument(
      '--preset',
      type=str,
      default='default',
      choices=sorted(PRESETS),
      help='Engine config preset',
  )
  parser.add_argument('--output',
                      type=Path,
                      default=None,
                      help='Write the assembled record as JSON')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Enable debug logging')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(message)s',
  )

  if args.config is not None:
    config = EngineConfig.from_json(args.config.read_text())
  else:
    config = PRESETS[args.preset]()

  profile = load_profile(args.profile)
  result = run_valuation(profile, config)
  log_summary(result, config)

  if args.output is not None:
    record = assemble(result)
    args.output.write_text(json.dumps(record.to_dict(), indent=2))
    logger.info('Saved %s to %s', record.id, args.output)


if __name__ == '__main__':
  main()
