import copy
from typing import Any, Callable

import pytest

from bizval.domain.types import BusinessProfile

SAMPLE_BUSINESS: dict[str, Any] = {
    'annualRevenue': 5_000_000,
    'monthlyRecurringRevenue': 100_000,
    'annualExpenses': 4_000_000,
    'cashFlow': 1_000_000,
    'growthRate': 0.15,
    'assets': {
        'tangible': 2_000_000,
        'intangible': 500_000,
        'inventory': 300_000,
        'equipment': 800_000,
        'realEstate': 1_500_000,
    },
    'liabilities': {
        'shortTerm': 500_000,
        'longTerm': 1_000_000,
        'contingent': 100_000,
    },
    'industry': 'technology',
    'businessAgeYears': 5,
    'customerCount': 150,
    'marketPosition': 'average',
}


@pytest.fixture
def sample_business() -> dict[str, Any]:
  """Request-style mapping for a mid-size technology company."""
  return copy.deepcopy(SAMPLE_BUSINESS)


@pytest.fixture
def make_profile() -> Callable[..., BusinessProfile]:
  """Factory building a profile from the sample with top-level overrides."""

  def _make(**overrides: Any) -> BusinessProfile:
    data = copy.deepcopy(SAMPLE_BUSINESS)
    data.update(overrides)
    return BusinessProfile.from_dict(data)

  return _make


@pytest.fixture
def sample_profile(make_profile) -> BusinessProfile:
  return make_profile()


@pytest.fixture
def zero_profile(make_profile) -> BusinessProfile:
  """Every financial, asset and liability figure at zero."""
  return make_profile(
      annualRevenue=0,
      monthlyRecurringRevenue=0,
      annualExpenses=0,
      cashFlow=0,
      growthRate=0,
      assets={
          'tangible': 0,
          'intangible': 0,
          'inventory': 0,
          'equipment': 0,
          'realEstate': 0,
      },
      liabilities={
          'shortTerm': 0,
          'longTerm': 0,
          'contingent': 0,
      },
  )


@pytest.fixture
def risky_profile(make_profile) -> BusinessProfile:
  """Young, cash-burning business with very few customers."""
  return make_profile(businessAgeYears=0.5, cashFlow=-100_000, customerCount=5)
