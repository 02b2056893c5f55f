"""Local envelope primitives."""
from .envelope import Envelope, EnvelopeInfo

__all__ = ["Envelope", "EnvelopeInfo"]
