"""
Password policy - human-usable secret generation.

Secrets are built from a pattern of tokens:

- ``word``: a dictionary word. Without a custom wordlist, words come from
  ``petname``: the last word of the pattern is a name, earlier words are
  adjectives ("brave_otter"). A custom wordlist feeds every position.
- ``digit``: a single decimal digit.
- ``separator``: the configured separator character.

Each token costs one random draw, so generation is O(pattern length)
regardless of dictionary size. Digits and custom-wordlist draws use
``secrets``.
"""

import secrets
import string
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import petname

WORD = "word"
DIGIT = "digit"
SEPARATOR = "separator"
TOKENS = frozenset({WORD, DIGIT, SEPARATOR})

# Redraws allowed when a fresh secret collides with the excluded one
_MAX_REDRAWS = 8


def parse_pattern(raw: str) -> tuple[str, ...]:
    """
    Parse a pattern such as ``"word,separator,word"`` or ``"word-digit-word-digit"``.

    Raises:
        ValueError: On an empty pattern or an unknown token
    """
    tokens = tuple(part.strip().lower() for part in raw.replace("-", ",").split(",") if part.strip())
    if not tokens:
        raise ValueError("password pattern is empty")
    unknown = [token for token in tokens if token not in TOKENS]
    if unknown:
        raise ValueError(f"unknown password pattern token(s): {', '.join(unknown)}")
    return tokens


def load_wordlist(path: str | Path) -> tuple[str, ...]:
    """
    Read a dictionary file: one word per line, blank lines and ``#`` comments ignored.

    Raises:
        ValueError: If the file holds no usable words
    """
    words = []
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            word = line.strip()
            if word and not word.startswith("#"):
                words.append(word)
    if not words:
        raise ValueError(f"wordlist {path} is empty")
    return tuple(words)


@dataclass(frozen=True)
class PasswordPolicy:
    """Generates secrets from a token pattern."""

    pattern: tuple[str, ...] = (WORD, SEPARATOR, WORD)
    separator: str = "_"
    wordlist: Sequence[str] | None = None

    def __post_init__(self) -> None:
        if not self.pattern or any(token not in TOKENS for token in self.pattern):
            raise ValueError(f"invalid password pattern: {self.pattern!r}")
        if self.wordlist is not None and not self.wordlist:
            raise ValueError("wordlist is empty")

    @classmethod
    def two_words(cls, separator: str = "_") -> "PasswordPolicy":
        """Fixed adjective + name form, e.g. ``brave_otter``."""
        return cls(pattern=(WORD, SEPARATOR, WORD), separator=separator)

    @classmethod
    def from_wordlist(cls, pattern: tuple[str, ...], separator: str, path: str | Path) -> "PasswordPolicy":
        """Use one custom dictionary for every word position."""
        return cls(pattern=pattern, separator=separator, wordlist=load_wordlist(path))

    def generate(self, exclude: str | None = None) -> str:
        """
        Draw a new secret.

        Args:
            exclude: Previous secret that must not come back out
        """
        secret = self._draw()
        for _ in range(_MAX_REDRAWS):
            if secret != exclude:
                break
            secret = self._draw()
        return secret

    def _draw(self) -> str:
        last_word = max((i for i, token in enumerate(self.pattern) if token == WORD), default=-1)
        parts = []
        for index, token in enumerate(self.pattern):
            if token == WORD:
                parts.append(self._word(last=index == last_word))
            elif token == DIGIT:
                parts.append(secrets.choice(string.digits))
            else:
                parts.append(self.separator)
        return "".join(parts)

    def _word(self, last: bool) -> str:
        if self.wordlist is not None:
            return secrets.choice(self.wordlist)
        return petname.name() if last else petname.adjective()
