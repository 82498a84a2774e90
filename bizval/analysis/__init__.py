'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from bizval.analysis.batch_valuation import batch_valuation
  from bizval.analysis.scenario_analysis import build_scenarios
  from bizval.analysis.sensitivity import SensitivityTableBuilder
'''

__all__ = [
    'batch_valuation',
    'build_scenarios',
    'expected_value',
    'SensitivityTableBuilder',
]

# Direct imports for convenience (may cause RuntimeWarning with -m flag)
from bizval.analysis.batch_valuation import batch_valuation
from bizval.analysis.scenario_analysis import build_scenarios
from bizval.analysis.scenario_analysis import expected_value
from bizval.analysis.sensitivity import SensitivityTableBuilder
