'''
DCF math for the income-based valuation.

Note: the synthesis engine imports the valuators, which import this
package, so import it directly:
  from bizval.engine.weighted import WeightedValuationEngine
'''

from bizval.engine.dcf import (
    compute_enterprise_value,
    compute_pv_explicit,
    compute_terminal_value,
    project_cash_flows,
)

__all__ = [
    'compute_enterprise_value',
    'compute_pv_explicit',
    'compute_terminal_value',
    'project_cash_flows',
]
