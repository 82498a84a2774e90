'''
Domain types for the business valuation engine.

These dataclasses provide typed interfaces between the valuators, the
heuristic policies and the synthesis engine. Input types validate their
fields on construction so a BusinessProfile that exists is always
structurally sound.
'''

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
import math
from numbers import Real
from typing import Any, Dict, Generic, List, Optional, TypeVar

from bizval.domain.errors import InvalidInputError

T = TypeVar('T')


def _require_number(name: str, value: Any, non_negative: bool = False) -> float:
  '''Validate a numeric field and return it as float.'''
  if isinstance(value, bool) or not isinstance(value, Real):
    raise InvalidInputError(
        f'{name} must be a number, got {type(value).__name__}: {value!r}')
  number = float(value)
  if not math.isfinite(number):
    raise InvalidInputError(f'{name} must be finite, got {number}')
  if non_negative and number < 0:
    raise InvalidInputError(f'{name} must be >= 0, got {number}')
  return number


def _pick(data: Mapping, name: str, aliases: tuple, default: Any = None,
          required: bool = True) -> Any:
  '''Fetch a field by its snake_case name or any accepted alias.'''
  for key in (name,) + aliases:
    if key in data:
      return data[key]
  if required:
    raise InvalidInputError(f'Missing required field: {name}')
  return default


class Industry(Enum):
  '''Supported industry categories; GENERAL is the neutral default.'''
  TECHNOLOGY = 'technology'
  SOFTWARE = 'software'
  HEALTHCARE = 'healthcare'
  FINANCE = 'finance'
  MANUFACTURING = 'manufacturing'
  REAL_ESTATE = 'real_estate'
  RETAIL = 'retail'
  SERVICES = 'services'
  E_COMMERCE = 'e_commerce'
  GENERAL = 'general'

  @classmethod
  def parse(cls, tag: Any) -> 'Industry':
    '''
    Resolve a free-form industry tag.

    Tags are matched case-insensitively with spaces and hyphens treated as
    underscores. Unrecognised tags resolve to GENERAL.

    Raises:
      InvalidInputError: If tag is not a string or Industry
    '''
    if isinstance(tag, cls):
      return tag
    if not isinstance(tag, str):
      raise InvalidInputError(
          f'industry must be a string, got {type(tag).__name__}')
    key = tag.strip().lower().replace('-', '_').replace(' ', '_')
    try:
      return cls(key)
    except ValueError:
      return cls.GENERAL

  @property
  def label(self) -> str:
    return self.value.replace('_', ' ').title()


class MarketPosition(Enum):
  '''Competitive position, ordered from strongest to weakest.'''
  LEADER = 'leader'
  STRONG = 'strong'
  AVERAGE = 'average'
  WEAK = 'weak'
  STRUGGLING = 'struggling'

  @classmethod
  def parse(cls, tag: Any) -> 'MarketPosition':
    if isinstance(tag, cls):
      return tag
    if not isinstance(tag, str):
      raise InvalidInputError(
          f'market_position must be a string, got {type(tag).__name__}')
    try:
      return cls(tag.strip().lower())
    except ValueError as e:
      raise InvalidInputError(
          f"Unknown market_position: '{tag}'. "
          f'Available: {[p.value for p in cls]}') from e

  @property
  def rank(self) -> int:
    '''Ordinal strength: struggling=0 ... leader=4.'''
    return {
        MarketPosition.STRUGGLING: 0,
        MarketPosition.WEAK: 1,
        MarketPosition.AVERAGE: 2,
        MarketPosition.STRONG: 3,
        MarketPosition.LEADER: 4,
    }[self]

  def shifted(self, steps: int) -> 'MarketPosition':
    '''Move up (positive) or down (negative) the ladder, saturating.'''
    target = max(0, min(4, self.rank + steps))
    return next(p for p in MarketPosition if p.rank == target)


class Severity(Enum):
  LOW = 'low'
  MEDIUM = 'medium'
  HIGH = 'high'


@dataclass(frozen=True)
class Financials:
  '''
  Income-statement snapshot.

  Attributes:
    annual_revenue: Trailing annual revenue
    cash_flow: Annual operating cash flow (may be negative)
    growth_rate: Expected annual growth as a fraction (0.15 = 15%)
    monthly_recurring_revenue: Contracted monthly recurring revenue
    annual_expenses: Trailing annual operating expenses
  '''
  annual_revenue: float
  cash_flow: float
  growth_rate: float = 0.0
  monthly_recurring_revenue: float = 0.0
  annual_expenses: float = 0.0

  def __post_init__(self):
    _require_number('annual_revenue', self.annual_revenue, non_negative=True)
    _require_number('cash_flow', self.cash_flow)
    _require_number('growth_rate', self.growth_rate)
    _require_number('monthly_recurring_revenue',
                    self.monthly_recurring_revenue,
                    non_negative=True)
    _require_number('annual_expenses', self.annual_expenses, non_negative=True)

  @property
  def recurring_ratio(self) -> float:
    '''Share of revenue that is recurring, in [0, 1].'''
    if self.annual_revenue <= 0:
      return 0.0
    return min(1.0, self.monthly_recurring_revenue * 12 / self.annual_revenue)

  @classmethod
  def from_dict(cls, data: Mapping) -> 'Financials':
    cash_flow = _pick(data, 'cash_flow', ('cashFlow',), required=False)
    if cash_flow is None:
      monthly = _pick(data, 'monthly_cash_flow', ('monthlyCashFlow',))
      cash_flow = _require_number('monthly_cash_flow', monthly) * 12
    return cls(
        annual_revenue=_pick(data, 'annual_revenue', ('annualRevenue',)),
        cash_flow=cash_flow,
        growth_rate=_pick(data, 'growth_rate', ('growthRate',),
                          default=0.0, required=False),
        monthly_recurring_revenue=_pick(
            data, 'monthly_recurring_revenue',
            ('monthlyRecurringRevenue', 'monthlyRecurring'),
            default=0.0, required=False),
        annual_expenses=_pick(data, 'annual_expenses',
                              ('annualExpenses', 'expenses'),
                              default=0.0, required=False),
    )


@dataclass(frozen=True)
class Assets:
  tangible: float = 0.0
  intangible: float = 0.0
  inventory: float = 0.0
  equipment: float = 0.0
  real_estate: float = 0.0

  def __post_init__(self):
    for name in ('tangible', 'intangible', 'inventory', 'equipment',
                 'real_estate'):
      _require_number(f'assets.{name}', getattr(self, name), non_negative=True)

  @property
  def total(self) -> float:
    return (self.tangible + self.intangible + self.inventory + self.equipment +
            self.real_estate)

  @classmethod
  def from_dict(cls, data: Any) -> 'Assets':
    if not isinstance(data, Mapping):
      raise InvalidInputError('assets must be a mapping of categories')
    return cls(
        tangible=data.get('tangible', 0.0),
        intangible=data.get('intangible', 0.0),
        inventory=data.get('inventory', 0.0),
        equipment=data.get('equipment', 0.0),
        real_estate=_pick(data, 'real_estate', ('realEstate',),
                          default=0.0, required=False),
    )


@dataclass(frozen=True)
class Liabilities:
  short_term: float = 0.0
  long_term: float = 0.0
  contingent: float = 0.0

  def __post_init__(self):
    for name in ('short_term', 'long_term', 'contingent'):
      _require_number(f'liabilities.{name}', getattr(self, name),
                      non_negative=True)

  @property
  def total(self) -> float:
    return self.short_term + self.long_term + self.contingent

  @classmethod
  def from_dict(cls, data: Any) -> 'Liabilities':
    if not isinstance(data, Mapping):
      raise InvalidInputError('liabilities must be a mapping of categories')
    return cls(
        short_term=_pick(data, 'short_term', ('shortTerm',),
                         default=0.0, required=False),
        long_term=_pick(data, 'long_term', ('longTerm',),
                        default=0.0, required=False),
        contingent=data.get('contingent', 0.0),
    )


@dataclass(frozen=True)
class BusinessProfile:
  '''
  Validated snapshot of a private business, the sole input of the engine.

  Attributes:
    financials: Revenue, cash flow and growth figures
    assets: Balance-sheet assets by category
    liabilities: Balance-sheet liabilities by category
    industry: Industry category (free-form tags are resolved on construction)
    business_age_years: Years in operation, fractional allowed
    market_position: Competitive position
    customer_count: Number of active customers
  '''
  financials: Financials
  assets: Assets
  liabilities: Liabilities
  industry: Industry
  business_age_years: float
  market_position: MarketPosition
  customer_count: int

  def __post_init__(self):
    for name, expected in (('financials', Financials), ('assets', Assets),
                           ('liabilities', Liabilities)):
      if not isinstance(getattr(self, name), expected):
        raise InvalidInputError(f'{name} must be a {expected.__name__}')
    object.__setattr__(self, 'industry', Industry.parse(self.industry))
    object.__setattr__(self, 'market_position',
                       MarketPosition.parse(self.market_position))
    _require_number('business_age_years', self.business_age_years,
                    non_negative=True)
    count = _require_number('customer_count', self.customer_count,
                            non_negative=True)
    if not count.is_integer():
      raise InvalidInputError(
          f'customer_count must be a whole number, got {count}')
    object.__setattr__(self, 'customer_count', int(count))

  @classmethod
  def from_dict(cls, data: Any) -> 'BusinessProfile':
    '''
    Build a profile from a request-style mapping.

    Accepts snake_case keys as well as the camelCase keys used by the web
    application. Financial fields may be nested under 'financials' or given
    at the top level.

    Raises:
      InvalidInputError: If the mapping is structurally invalid
    '''
    if not isinstance(data, Mapping):
      raise InvalidInputError(
          f'profile must be a mapping, got {type(data).__name__}')
    financials = data.get('financials', data)
    if not isinstance(financials, Mapping):
      raise InvalidInputError('financials must be a mapping')
    return cls(
        financials=Financials.from_dict(financials),
        assets=Assets.from_dict(_pick(data, 'assets', ())),
        liabilities=Liabilities.from_dict(_pick(data, 'liabilities', ())),
        industry=_pick(data, 'industry', ()),
        business_age_years=_pick(data, 'business_age_years',
                                 ('businessAgeYears', 'businessAge')),
        market_position=_pick(data, 'market_position', ('marketPosition',)),
        customer_count=_pick(data, 'customer_count', ('customerCount',)),
    )

  def to_dict(self) -> Dict[str, Any]:
    return {
        'financials': {
            'annual_revenue': self.financials.annual_revenue,
            'cash_flow': self.financials.cash_flow,
            'growth_rate': self.financials.growth_rate,
            'monthly_recurring_revenue':
                self.financials.monthly_recurring_revenue,
            'annual_expenses': self.financials.annual_expenses,
        },
        'assets': {
            'tangible': self.assets.tangible,
            'intangible': self.assets.intangible,
            'inventory': self.assets.inventory,
            'equipment': self.assets.equipment,
            'real_estate': self.assets.real_estate,
        },
        'liabilities': {
            'short_term': self.liabilities.short_term,
            'long_term': self.liabilities.long_term,
            'contingent': self.liabilities.contingent,
        },
        'industry': self.industry.value,
        'business_age_years': self.business_age_years,
        'market_position': self.market_position.value,
        'customer_count': self.customer_count,
    }


@dataclass(frozen=True)
class RateAssumptions:
  '''
  Capital-market assumptions injected into the income approach.

  Attributes:
    risk_free_rate: Long-dated government bond yield
    market_risk_premium: Equity risk premium over the risk-free rate
    terminal_growth: Long-run sustainable growth rate
  '''
  risk_free_rate: float = 0.045
  market_risk_premium: float = 0.06
  terminal_growth: float = 0.025


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Every policy returns both a computed value and diagnostic information
  explaining how the value was computed.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WeightSet:
  '''Per-methodology weights; a valid set sums to 1.0.'''
  asset: float
  income: float
  market: float

  @property
  def total(self) -> float:
    return self.asset + self.income + self.market

  def is_valid(self, tolerance: float = 0.001) -> bool:
    in_range = all(0.0 <= w <= 1.0 for w in (self.asset, self.income,
                                              self.market))
    return in_range and abs(self.total - 1.0) <= tolerance

  def to_dict(self) -> Dict[str, float]:
    return {'asset': self.asset, 'income': self.income, 'market': self.market}


@dataclass
class AssetAdjustment:
  category: str
  original: float
  adjusted: float
  reason: str


@dataclass
class ComparableCompany:
  '''Synthetic comparable used to explain the market approach.'''
  name: str
  industry: str
  revenue: float
  valuation: float
  multiple: float
  relevance: float
  source: str
  adjustments: List[str] = field(default_factory=list)


@dataclass
class ValuationMultiple:
  type: str
  value: float
  industry_median: float
  confidence: float
  source: str


@dataclass
class MethodologyResult:
  '''
  Output of a single valuation methodology.

  Attributes:
    value: Estimated value, never negative
    confidence: Certainty score in [0, 1]
    methodology: Human-readable methodology label
    factors: Human-readable value drivers
    degenerate: True when the raw value was negative and floored at zero
    diag: Diagnostics from the policies the methodology used
  '''
  value: float
  confidence: float
  methodology: str
  factors: List[str] = field(default_factory=list)
  degenerate: bool = False
  diag: Dict[str, Any] = field(default_factory=dict)

  def to_dict(self) -> Dict[str, Any]:
    return {
        'value': self.value,
        'confidence': self.confidence,
        'methodology': self.methodology,
        'factors': list(self.factors),
        'degenerate': self.degenerate,
        'diag': dict(self.diag),
    }


@dataclass
class AssetBasedResult(MethodologyResult):
  adjustments: List[AssetAdjustment] = field(default_factory=list)

  def to_dict(self) -> Dict[str, Any]:
    result = super().to_dict()
    result['adjustments'] = [vars(a).copy() for a in self.adjustments]
    return result


@dataclass
class IncomeBasedResult(MethodologyResult):
  '''
  DCF result with the projection breakdown.

  Attributes:
    discount_rate: Rate used to discount projected cash flows
    growth_assumptions: Growth rate applied in each projected year
    terminal_value: Undiscounted perpetuity value at the horizon
    projected_cash_flows: Cash flow for each projected year
    present_values: Discounted value of each projected year
    terminal_value_present: Terminal value discounted to today
  '''
  discount_rate: float = 0.0
  growth_assumptions: List[float] = field(default_factory=list)
  terminal_value: float = 0.0
  projected_cash_flows: List[float] = field(default_factory=list)
  present_values: List[float] = field(default_factory=list)
  terminal_value_present: float = 0.0

  def to_dict(self) -> Dict[str, Any]:
    result = super().to_dict()
    result.update({
        'discount_rate': self.discount_rate,
        'growth_assumptions': list(self.growth_assumptions),
        'terminal_value': self.terminal_value,
        'projected_cash_flows': list(self.projected_cash_flows),
        'present_values': list(self.present_values),
        'terminal_value_present': self.terminal_value_present,
    })
    return result


@dataclass
class MarketBasedResult(MethodologyResult):
  comparables: List[ComparableCompany] = field(default_factory=list)
  multiples: List[ValuationMultiple] = field(default_factory=list)

  def multiple(self, multiple_type: str) -> Optional[ValuationMultiple]:
    return next((m for m in self.multiples if m.type == multiple_type), None)

  def to_dict(self) -> Dict[str, Any]:
    result = super().to_dict()
    result['comparables'] = [vars(c).copy() for c in self.comparables]
    result['multiples'] = [vars(m).copy() for m in self.multiples]
    return result


@dataclass(frozen=True)
class ValuationRange:
  low: float
  most_likely: float
  high: float


@dataclass(frozen=True)
class ConfidenceFactors:
  business_stability: float
  data_quality: float
  industry_reliability: float
  overall: float


@dataclass(frozen=True)
class RiskFactor:
  factor: str
  category: str
  severity: Severity
  description: str
  mitigation: tuple = ()

  def to_dict(self) -> Dict[str, Any]:
    return {
        'factor': self.factor,
        'category': self.category,
        'severity': self.severity.value,
        'description': self.description,
        'mitigation': list(self.mitigation),
    }


@dataclass(frozen=True)
class WeightedValuation:
  value: float
  confidence: float
  weights: WeightSet


@dataclass
class ValuationResult:
  '''
  Complete multi-methodology valuation with diagnostics.

  Attributes:
    weighted: Composite value, confidence and the weights used
    asset_based: Asset approach result
    income_based: Income (DCF) approach result
    market_based: Market (comparables) approach result
    valuation_range: Low / most likely / high values
    confidence_factors: Stability, data quality and overall scores
    risk_factors: Detected risk factors
    processing_time_ms: Wall-clock time spent in the engine
    diag: Merged diagnostics from all policies
  '''
  weighted: WeightedValuation
  asset_based: AssetBasedResult
  income_based: IncomeBasedResult
  market_based: MarketBasedResult
  valuation_range: ValuationRange
  confidence_factors: ConfidenceFactors
  risk_factors: List[RiskFactor]
  processing_time_ms: float
  diag: Dict[str, Any] = field(default_factory=dict)

  @property
  def risk_labels(self) -> List[str]:
    return [r.factor for r in self.risk_factors]

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to JSON-serialisable primitives.'''
    return {
        'weighted': {
            'value': self.weighted.value,
            'confidence': self.weighted.confidence,
            'weights': self.weighted.weights.to_dict(),
        },
        'asset_based': self.asset_based.to_dict(),
        'income_based': self.income_based.to_dict(),
        'market_based': self.market_based.to_dict(),
        'valuation_range': vars(self.valuation_range).copy(),
        'confidence_factors': vars(self.confidence_factors).copy(),
        'risk_factors': [r.to_dict() for r in self.risk_factors],
        'processing_time_ms': self.processing_time_ms,
        'diag': dict(self.diag),
    }
