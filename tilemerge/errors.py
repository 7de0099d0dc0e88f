"""Exceptions raised by the grid engine."""


class InvariantViolation(RuntimeError):
    """An internal engine invariant does not hold. This denotes a defect, not a user error."""
