"""Error taxonomy for the valuation engine."""


class InvalidInputError(ValueError):
  """
  Structurally malformed business input.

  Raised for missing required fields, non-numeric values where a number is
  required, NaN/Infinity, and negative values for quantities that can only
  be non-negative. Numeric edge cases (negative cash flow, zero revenue,
  zero customers) are never reported through this error.
  """


class DegenerateResultWarning(UserWarning):
  """A methodology result was floored at zero because of extreme input."""
