"""Domain types for the business valuation engine."""

from bizval.domain.errors import DegenerateResultWarning
from bizval.domain.errors import InvalidInputError
from bizval.domain.types import Assets
from bizval.domain.types import BusinessProfile
from bizval.domain.types import Financials
from bizval.domain.types import Industry
from bizval.domain.types import Liabilities
from bizval.domain.types import MarketPosition
from bizval.domain.types import PolicyOutput
from bizval.domain.types import RateAssumptions
from bizval.domain.types import ValuationResult
from bizval.domain.types import WeightSet

__all__ = [
    'Assets',
    'BusinessProfile',
    'DegenerateResultWarning',
    'Financials',
    'Industry',
    'InvalidInputError',
    'Liabilities',
    'MarketPosition',
    'PolicyOutput',
    'RateAssumptions',
    'ValuationResult',
    'WeightSet',
]
