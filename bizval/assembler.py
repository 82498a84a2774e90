'''
Result assembly.

Wraps a ValuationResult in a ValuationRecord carrying an evaluation id, a
status and a creation timestamp, the shape external callers persist.
'''

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Any, Dict, Optional
import uuid

from bizval.domain.types import ValuationResult

STATUS_COMPLETED = 'completed'
STATUS_FAILED = 'failed'


def _utc_now() -> datetime:
  return datetime.now(timezone.utc)


def new_evaluation_id() -> str:
  return f'eval-{uuid.uuid4().hex}'


@dataclass(frozen=True)
class ValuationRecord:
  '''
  Attributes:
    id: Evaluation id, 'eval-' followed by 32 hex characters
    status: 'completed' or 'failed'
    created_at: UTC creation time
    result: The valuation, None for failed records
    error: Failure message, None for completed records
  '''
  id: str
  status: str
  created_at: datetime
  result: Optional[ValuationResult] = None
  error: Optional[str] = None

  def to_dict(self) -> Dict[str, Any]:
    return {
        'id': self.id,
        'status': self.status,
        'created_at': self.created_at.isoformat(),
        'result': self.result.to_dict() if self.result else None,
        'error': self.error,
    }


def assemble(
    result: ValuationResult,
    *,
    evaluation_id: Optional[str] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ValuationRecord:
  '''
  Wrap a completed valuation.

  Args:
    result: Engine output
    evaluation_id: Id to use (default: a fresh 'eval-<uuid4>' id)
    clock: Source of the creation time (default: current UTC time)
  '''
  return ValuationRecord(id=evaluation_id or new_evaluation_id(),
                         status=STATUS_COMPLETED,
                         created_at=(clock or _utc_now)(),
                         result=result)


def failed_record(
    error: BaseException,
    *,
    evaluation_id: Optional[str] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ValuationRecord:
  '''Record a valuation that could not run, e.g. on InvalidInputError.'''
  return ValuationRecord(id=evaluation_id or new_evaluation_id(),
                         status=STATUS_FAILED,
                         created_at=(clock or _utc_now)(),
                         error=str(error))
