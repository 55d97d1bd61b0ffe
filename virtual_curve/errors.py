"""Exception types for the virtual curve engine.

Every failure is a rejected call: the engine mutates no persisted state, so
nothing is rolled back and nothing is retried. Callers catch
``VirtualCurveError`` or one of its narrower kinds.
"""

from __future__ import annotations


class VirtualCurveError(Exception):
    """Base class for all engine failures."""


class MathOverflowError(VirtualCurveError):
    """Raised on checked-arithmetic overflow, underflow or division by zero."""


class TypeCastFailedError(VirtualCurveError):
    """Raised when a wide intermediate does not fit the narrow result width."""


class InvalidInputError(VirtualCurveError, ValueError):
    """Raised on malformed configuration or an unrecognised enumerant."""


class InvalidFeeError(InvalidInputError):
    """Raised when a fee fraction is not strictly below its denominator."""


class ExceedMaxFeeError(InvalidInputError):
    """Raised when a base fee schedule leaves [MIN_FEE_NUMERATOR, MAX_FEE_NUMERATOR]."""


class InvalidCollectFeeModeError(InvalidInputError):
    """Raised on an unrecognised collect-fee-mode enumerant."""


class InvalidActivationTypeError(InvalidInputError):
    """Raised on an unrecognised activation-type enumerant."""


class InvalidFeeSchedulerModeError(InvalidInputError):
    """Raised on an unrecognised fee-scheduler-mode enumerant."""


class SwapPreconditionError(VirtualCurveError):
    """Raised before entering the math pipeline when a swap cannot proceed."""


class CurveCompletedError(SwapPreconditionError):
    """Raised when the pool already reached its migration threshold."""


class ZeroAmountError(SwapPreconditionError):
    """Raised when the input amount is zero."""


class NotEnoughLiquidityError(SwapPreconditionError):
    """Raised when a swap would push the price outside the curve range."""
