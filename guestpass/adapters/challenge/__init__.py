"""Challenge adapters - Human verification."""

from .image import ChallengeImageRenderer
from .store_backed import StoreChallengeVerifier

__all__ = ["ChallengeImageRenderer", "StoreChallengeVerifier"]
