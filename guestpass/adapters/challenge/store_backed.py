"""
Store-backed challenge verifier - Implements ChallengeVerifier protocol.

Challenge answers live in the credential store under ``challenge:{id}``
with a short TTL, so every API worker shares them.

Single Use:
-----------
A verification first renames the challenge key to a unique "used" key.
The store's rename is atomic, so of several concurrent attempts on the
same id exactly one wins; the losers get SourceKeyMissing and fail. The
winner reads the answer from its private key, deletes it, and compares
in constant time. A wrong answer also retires the challenge.

``peek`` reads an answer without consuming it, for the image renderer
in ``image.py``. The answer is also logged at DEBUG for development.
"""

import logging
import secrets
import string

from guestpass.domain import keys
from guestpass.domain.exceptions import SourceKeyMissing
from guestpass.domain.ports import Challenge, CredentialStore

logger = logging.getLogger(__name__)


class StoreChallengeVerifier:
    """
    Implements ChallengeVerifier protocol over a CredentialStore.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, store: CredentialStore, ttl_seconds: int = 600, length: int = 6) -> None:
        """
        Args:
            store: Shared key-value store
            ttl_seconds: How long an unsolved challenge stays valid
            length: Number of digits in the answer
        """
        self._store = store
        self._ttl = ttl_seconds
        self._length = length

    def issue(self) -> Challenge:
        challenge_id = secrets.token_urlsafe(16)
        answer = "".join(secrets.choice(string.digits) for _ in range(self._length))
        self._store.set_with_ttl(keys.challenge_key(challenge_id), answer, self._ttl)
        logger.debug("[CHALLENGE] id: %s answer: %s", challenge_id, answer)
        return Challenge(challenge_id=challenge_id, answer=answer)

    def peek(self, challenge_id: str) -> str | None:
        # Rendering may repeat (image reloads); only verify() consumes
        if not challenge_id or ":" in challenge_id:
            return None
        return self._store.get(keys.challenge_key(challenge_id))

    def verify(self, challenge_id: str, answer: str) -> bool:
        if not challenge_id or ":" in challenge_id:
            return False

        claimed = keys.challenge_key(f"used:{secrets.token_urlsafe(16)}")
        try:
            self._store.rename(keys.challenge_key(challenge_id), claimed)
        except SourceKeyMissing:
            logger.debug("Challenge %s unknown, expired or already used", challenge_id)
            return False

        expected = self._store.get(claimed)
        self._store.delete(claimed)
        if expected is None:
            return False
        return secrets.compare_digest(expected.encode(), answer.strip().encode())
