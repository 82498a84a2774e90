"""Engine configuration and policy registry."""

from bizval.scenarios.config import EngineConfig
from bizval.scenarios.registry import create_policies
from bizval.scenarios.registry import list_policies
from bizval.scenarios.registry import POLICY_REGISTRY

__all__ = [
  'EngineConfig',
  'POLICY_REGISTRY',
  'create_policies',
  'list_policies',
]
