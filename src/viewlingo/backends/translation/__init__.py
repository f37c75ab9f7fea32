"""Translation session implementations."""

from .opus_mt import OpusMTSession

__all__ = [
    "OpusMTSession",
]
