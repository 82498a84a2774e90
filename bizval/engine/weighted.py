'''
Weighting and synthesis engine.

Runs the asset, income and market valuators concurrently on a thread pool,
then combines their values with methodology weights into a composite value,
a confidence score, a low/likely/high range and a list of risk factors.

Usage:
  engine = WeightedValuationEngine(EngineConfig.default())
  result = engine.evaluate(profile)               # sync
  result = await engine.calculate_weighted_valuation(profile)  # async
'''

import asyncio
from concurrent.futures import Executor
from concurrent.futures import ThreadPoolExecutor
from functools import partial
import logging
import math
import time
from typing import Any, Dict, Mapping, Optional, Union

from bizval.domain.types import BusinessProfile
from bizval.domain.types import ValuationRange
from bizval.domain.types import ValuationResult
from bizval.domain.types import WeightedValuation
from bizval.methods.asset_based import AssetBasedValuator
from bizval.methods.income_based import earnings_multiple_valuation
from bizval.methods.income_based import IncomeBasedValuator
from bizval.methods.market_based import MarketBasedValuator
from bizval.policies.confidence import composite_confidence
from bizval.policies.confidence import confidence_factors
from bizval.policies.confidence import uncertainty_band
from bizval.policies.risk import identify_risk_factors
from bizval.scenarios.config import EngineConfig
from bizval.scenarios.registry import create_policies

logger = logging.getLogger(__name__)

PROCESSING_BUDGET_MS = 3000.0


class WeightedValuationEngine:
  '''
  Multi-methodology valuation engine.

  The engine holds only its configuration and stateless policy objects, so
  one instance can serve concurrent calls. Unless an executor is injected,
  each call runs the valuators on its own short-lived thread pool.
  '''

  def __init__(self,
               config: Optional[EngineConfig] = None,
               executor: Optional[Executor] = None):
    '''
    Initialize the engine.

    Args:
      config: EngineConfig (default: EngineConfig.default())
      executor: Executor shared across calls; the caller owns its lifetime

    Raises:
      KeyError: If the config names an unknown policy
      ValueError: If market_conditions or max_workers is out of range
    '''
    self.config = config or EngineConfig.default()
    if (not math.isfinite(self.config.market_conditions) or
        self.config.market_conditions <= 0):
      raise ValueError('market_conditions must be positive, got '
                       f'{self.config.market_conditions}')
    if self.config.max_workers < 1:
      raise ValueError(
          f'max_workers must be >= 1, got {self.config.max_workers}')

    policies = create_policies(self.config)
    self.weight_policy = policies['weights']
    self.asset_valuator = AssetBasedValuator()
    self.income_valuator = IncomeBasedValuator(
        discount_policy=policies['discount'],
        fade_policy=policies['fade'],
        terminal_policy=policies['terminal'],
    )
    self.market_valuator = MarketBasedValuator()
    self._executor = executor

  async def calculate_weighted_valuation(
      self,
      profile: Union[BusinessProfile, Mapping[str, Any]],
  ) -> ValuationResult:
    '''
    Value a business with all three methodologies.

    Args:
      profile: BusinessProfile, or a request-style mapping to validate

    Returns:
      ValuationResult with composite value, range, confidence and risks

    Raises:
      InvalidInputError: If a mapping fails structural validation
      asyncio.CancelledError: If the call is cancelled; no partial result
        is synthesised
    '''
    if not isinstance(profile, BusinessProfile):
      profile = BusinessProfile.from_dict(profile)

    start = time.perf_counter()

    weights_result = self.weight_policy.compute(profile)
    weights = weights_result.value
    logger.debug('Weights for %s: asset=%.3f income=%.3f market=%.3f',
                 profile.industry.value, weights.asset, weights.income,
                 weights.market)

    loop = asyncio.get_running_loop()
    executor = self._executor or ThreadPoolExecutor(
        max_workers=self.config.max_workers,
        thread_name_prefix='bizval')
    try:
      asset, income, market = await asyncio.gather(
          loop.run_in_executor(
              executor,
              partial(self.asset_valuator.calculate, profile.assets,
                      profile.liabilities, profile.industry,
                      profile.business_age_years,
                      self.config.market_conditions)),
          loop.run_in_executor(
              executor,
              partial(self.income_valuator.calculate, profile.financials,
                      profile.industry, profile.business_age_years,
                      profile.market_position, profile.customer_count)),
          loop.run_in_executor(
              executor,
              partial(self.market_valuator.calculate,
                      profile.financials.annual_revenue,
                      profile.financials.cash_flow, profile.industry,
                      profile.business_age_years,
                      profile.financials.growth_rate, profile.customer_count,
                      profile.market_position)),
      )
    finally:
      if self._executor is None:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.debug('Method values: asset=%.0f income=%.0f market=%.0f',
                 asset.value, income.value, market.value)

    value = (weights.asset * asset.value + weights.income * income.value +
             weights.market * market.value)

    factors = confidence_factors(profile)
    confidence = composite_confidence(asset.confidence, income.confidence,
                                      market.confidence, weights,
                                      factors.overall)

    band = uncertainty_band(confidence)
    valuation_range = ValuationRange(low=value * (1 - band),
                                     most_likely=value,
                                     high=value * (1 + band))

    risk_factors = identify_risk_factors(profile)

    diag: Dict[str, Any] = {'config': self.config.name}
    diag.update({f'weights_{k}': v for k, v in weights_result.diag.items()})
    for prefix, result in (('asset', asset), ('income', income),
                           ('market', market)):
      diag.update({f'{prefix}_{k}': v for k, v in result.diag.items()})
    diag['degenerate_methods'] = [
        name for name, result in (('asset_based', asset),
                                  ('income_based', income),
                                  ('market_based', market))
        if result.degenerate
    ]
    diag['earnings_multiple_check'] = earnings_multiple_valuation(
        profile.financials)['value']

    elapsed_ms = (time.perf_counter() - start) * 1000
    if elapsed_ms > PROCESSING_BUDGET_MS:
      logger.warning('Valuation took %.0f ms, above the %.0f ms budget',
                     elapsed_ms, PROCESSING_BUDGET_MS)

    return ValuationResult(
        weighted=WeightedValuation(value=value,
                                   confidence=confidence,
                                   weights=weights),
        asset_based=asset,
        income_based=income,
        market_based=market,
        valuation_range=valuation_range,
        confidence_factors=factors,
        risk_factors=risk_factors,
        processing_time_ms=elapsed_ms,
        diag=diag,
    )

  def evaluate(
      self,
      profile: Union[BusinessProfile, Mapping[str, Any]],
  ) -> ValuationResult:
    '''
    Synchronous wrapper around calculate_weighted_valuation().

    Must not be called from inside a running event loop; await
    calculate_weighted_valuation() there instead.
    '''
    return asyncio.run(self.calculate_weighted_valuation(profile))
