"""
Engine configuration for valuation runs.

EngineConfig is a serializable (JSON-friendly) configuration class that
specifies which policies the engine uses and the capital-market
assumptions behind them.
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
import json
from typing import Any

from bizval.domain.types import RateAssumptions


@dataclass
class EngineConfig:
  """
  Configuration for a valuation engine.

  Policy fields are strings that map to factories in the registry. This
  makes the config serializable to JSON for reproducibility.

  Attributes:
    name: Human-readable configuration name
    discount: Discount policy name (e.g., 'risk_buildup', 'fixed_0p12')
    fade: Fade policy name (e.g., 'tapered', 'linear')
    terminal: Terminal policy name (e.g., 'gordon', 'gordon_2pct')
    weights: Weight policy name (e.g., 'characteristic', 'industry_only')
    market_conditions: Multiplier on adjusted assets, 1.0 neutral
    max_workers: Thread pool size for the three valuators
    rates: Risk-free rate, equity premium and long-run growth
  """
  name: str = 'default'
  discount: str = 'risk_buildup'
  fade: str = 'tapered'
  terminal: str = 'gordon'
  weights: str = 'characteristic'
  market_conditions: float = 1.0
  max_workers: int = 3
  rates: RateAssumptions = field(default_factory=RateAssumptions)

  @classmethod
  def default(cls) -> 'EngineConfig':
    """
    Create default engine configuration.

    Uses:
      - Build-up discount rate (4.5% risk-free, 6% equity premium)
      - Tapered growth fade
      - Gordon terminal at 2.5%
      - Characteristic-adjusted methodology weights
      - Neutral market conditions
    """
    return cls()

  @classmethod
  def conservative(cls) -> 'EngineConfig':
    """Higher equity premium, 2% terminal growth, soft asset market."""
    return cls(
        name='conservative',
        discount='risk_buildup',
        fade='tapered',
        terminal='gordon_2pct',
        weights='characteristic',
        market_conditions=0.9,
        rates=RateAssumptions(market_risk_premium=0.07, terminal_growth=0.02),
    )

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'EngineConfig':
    """Create from dictionary; missing fields take their defaults."""
    data = dict(data)
    rates = data.pop('rates', None)
    if isinstance(rates, dict):
      data['rates'] = RateAssumptions(**rates)
    elif rates is not None:
      data['rates'] = rates
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'EngineConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
