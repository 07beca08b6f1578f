"""Errors raised by the pose-check core."""


class PoseCheckError(ValueError):
    """Base class for pose-check failures on a given input."""


class DegenerateVectorError(PoseCheckError):
    """A zero-length vector was normalized (two joints share a position)."""


class LengthMismatchError(PoseCheckError):
    """An angle vector does not have one value per joint triple."""

    def __init__(self, expected: int, lengths: tuple[int, ...]):
        self.expected = expected
        self.lengths = lengths
        shown = ", ".join(str(n) for n in lengths)
        super().__init__(f"angle vectors must have length {expected}, got {shown}")


class UnknownJointIdentifierError(PoseCheckError, KeyError):
    """A joint name or triple index is outside the fixed closed set."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""
