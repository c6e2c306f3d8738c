class ValidationError(Exception):
    pass


class MalformedTargetError(ValidationError):
    """Claimed target is zero, negative, or above the network ceiling."""


class InsufficientProofError(ValidationError):
    """Header hash does not meet its own claimed target."""


class ChainDiscontinuityError(ValidationError):
    """A mainchain header does not follow the expected predecessor."""


class RetargetMismatchError(ChainDiscontinuityError):
    """Claimed bits are outside tolerance of the computed retarget."""


class IncompleteHistoryError(ValidationError):
    """Not enough sidechain history to rebuild the difficulty window."""
