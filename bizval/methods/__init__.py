'''The three valuation methodologies.'''

from bizval.methods.asset_based import AssetBasedValuator
from bizval.methods.income_based import IncomeBasedValuator
from bizval.methods.market_based import MarketBasedValuator

__all__ = [
    'AssetBasedValuator',
    'IncomeBasedValuator',
    'MarketBasedValuator',
]
