'''
Industry reference tables.

Every coefficient that depends on the industry lives here, keyed by the
closed Industry enumeration. industry_profile() is the single lookup and
always resolves, falling back to the GENERAL profile.

The literal numbers are business assumptions. The contract the rest of the
engine relies on is ordinal: asset-heavy industries carry asset multipliers
above 1.0 and asset-light ones below, technology/software multiples sit
above retail/manufacturing, and base weights favour the asset approach for
asset-heavy industries.
'''

from dataclasses import dataclass

from bizval.domain.types import Industry
from bizval.domain.types import WeightSet


@dataclass(frozen=True)
class MultipleBand:
  '''Observed range of a valuation multiple within an industry.'''
  min: float
  median: float
  max: float

  def clamp(self, multiple: float) -> float:
    return max(self.min, min(self.max, multiple))


@dataclass(frozen=True)
class IndustryProfile:
  '''
  Industry-specific valuation coefficients.

  Attributes:
    asset_multiplier: Scale applied to tangible, equipment and real estate
    risk_premium: Industry premium added to the discount rate
    revenue_multiples: EV / revenue band
    ebitda_multiples: EV / EBITDA band
    ebitda_margin: Typical EBITDA margin, used when cash flow is negative
    base_weights: Starting methodology weights
    reliability: How well established valuation practice is, in [0, 1]
    comparable_data_bonus: Confidence bonus for rich comparable data
    volatile: Subject to rapid market change
  '''
  asset_multiplier: float
  risk_premium: float
  revenue_multiples: MultipleBand
  ebitda_multiples: MultipleBand
  ebitda_margin: float
  base_weights: WeightSet
  reliability: float
  comparable_data_bonus: float = 0.0
  volatile: bool = False


GENERAL_PROFILE = IndustryProfile(
    asset_multiplier=1.0,
    risk_premium=0.10,
    revenue_multiples=MultipleBand(1.0, 2.0, 4.0),
    ebitda_multiples=MultipleBand(4.0, 8.0, 15.0),
    ebitda_margin=0.12,
    base_weights=WeightSet(asset=0.3, income=0.4, market=0.3),
    reliability=0.65,
)

INDUSTRY_PROFILES: dict[Industry, IndustryProfile] = {
    Industry.TECHNOLOGY:
        IndustryProfile(
            asset_multiplier=0.85,
            risk_premium=0.12,
            revenue_multiples=MultipleBand(2.0, 4.5, 12.0),
            ebitda_multiples=MultipleBand(8.0, 15.0, 25.0),
            ebitda_margin=0.20,
            base_weights=WeightSet(asset=0.1, income=0.5, market=0.4),
            reliability=0.70,
            comparable_data_bonus=0.05,
            volatile=True,
        ),
    Industry.SOFTWARE:
        IndustryProfile(
            asset_multiplier=0.8,
            risk_premium=0.12,
            revenue_multiples=MultipleBand(3.0, 6.0, 15.0),
            ebitda_multiples=MultipleBand(10.0, 20.0, 35.0),
            ebitda_margin=0.25,
            base_weights=WeightSet(asset=0.1, income=0.4, market=0.5),
            reliability=0.65,
            comparable_data_bonus=0.08,
            volatile=True,
        ),
    Industry.HEALTHCARE:
        IndustryProfile(
            asset_multiplier=1.0,
            risk_premium=0.08,
            revenue_multiples=MultipleBand(1.5, 3.0, 8.0),
            ebitda_multiples=MultipleBand(6.0, 12.0, 20.0),
            ebitda_margin=0.15,
            base_weights=WeightSet(asset=0.3, income=0.4, market=0.3),
            reliability=0.80,
        ),
    Industry.FINANCE:
        IndustryProfile(
            asset_multiplier=0.95,
            risk_premium=0.10,
            revenue_multiples=MultipleBand(1.0, 2.5, 6.0),
            ebitda_multiples=MultipleBand(5.0, 10.0, 18.0),
            ebitda_margin=0.30,
            base_weights=WeightSet(asset=0.2, income=0.4, market=0.4),
            reliability=0.75,
        ),
    Industry.MANUFACTURING:
        IndustryProfile(
            asset_multiplier=1.15,
            risk_premium=0.09,
            revenue_multiples=MultipleBand(0.8, 1.5, 3.0),
            ebitda_multiples=MultipleBand(4.0, 8.0, 15.0),
            ebitda_margin=0.10,
            base_weights=WeightSet(asset=0.5, income=0.3, market=0.2),
            reliability=0.85,
            comparable_data_bonus=0.04,
        ),
    Industry.REAL_ESTATE:
        IndustryProfile(
            asset_multiplier=1.2,
            risk_premium=0.07,
            revenue_multiples=MultipleBand(2.0, 4.0, 8.0),
            ebitda_multiples=MultipleBand(8.0, 15.0, 25.0),
            ebitda_margin=0.40,
            base_weights=WeightSet(asset=0.6, income=0.2, market=0.2),
            reliability=0.90,
        ),
    Industry.RETAIL:
        IndustryProfile(
            asset_multiplier=1.05,
            risk_premium=0.11,
            revenue_multiples=MultipleBand(0.5, 1.2, 2.5),
            ebitda_multiples=MultipleBand(3.0, 6.0, 12.0),
            ebitda_margin=0.08,
            base_weights=WeightSet(asset=0.4, income=0.3, market=0.3),
            reliability=0.75,
            comparable_data_bonus=0.03,
            volatile=True,
        ),
    Industry.SERVICES:
        IndustryProfile(
            asset_multiplier=0.9,
            risk_premium=0.10,
            revenue_multiples=MultipleBand(1.0, 2.0, 4.0),
            ebitda_multiples=MultipleBand(4.0, 8.0, 15.0),
            ebitda_margin=0.12,
            base_weights=WeightSet(asset=0.2, income=0.5, market=0.3),
            reliability=0.70,
            comparable_data_bonus=0.02,
        ),
    Industry.E_COMMERCE:
        IndustryProfile(
            asset_multiplier=0.9,
            risk_premium=0.11,
            revenue_multiples=MultipleBand(1.5, 3.0, 8.0),
            ebitda_multiples=MultipleBand(6.0, 12.0, 20.0),
            ebitda_margin=0.10,
            base_weights=WeightSet(asset=0.2, income=0.4, market=0.4),
            reliability=0.60,
            volatile=True,
        ),
    Industry.GENERAL:
        GENERAL_PROFILE,
}


def industry_profile(industry: Industry) -> IndustryProfile:
  '''Return the coefficients for an industry, GENERAL when unlisted.'''
  return INDUSTRY_PROFILES.get(industry, GENERAL_PROFILE)
