'''
Multi-methodology business valuation with a policy-based architecture.

This package values a private business three ways (asset-based,
income-based DCF and market comparables) and blends the results into a
weighted composite with a confidence score, a valuation range and a list
of risk factors. The discount, growth fade, terminal growth and weighting
heuristics are independent policies that can be swapped or compared.

Usage:
  from bizval.scenarios.config import EngineConfig
  from bizval.run import run_valuation

  config = EngineConfig.default()
  result = run_valuation(profile={'annualRevenue': 5_000_000, ...},
                         config=config)
'''
