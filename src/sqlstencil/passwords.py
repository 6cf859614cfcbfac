"""Pronounceable random passwords.

Words are assembled from letter groups that read naturally (diphthongs,
consonant pairs, common prefixes and postfixes), so the result looks like a
word without being one. Easy to read back; not meant as a high-entropy secret.
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Sequence

_PREFIXES = (
    "ab", "ac", "acr", "acl", "ad", "adr", "ah", "ar", "aw", "ay", "br", "bl", "cl", "cr", "ch",
    "dr", "dw", "en", "ey", "in", "im", "iy", "oy", "och", "on", "qu", "sl", "sh", "sw", "tr", "th",
    "thr", "un", "st", "str", "kn",
)
_DIPHTHONGS = ("ae", "au", "ea", "ou", "ei", "ie", "ia", "ee", "oo", "eo", "io")
_CONSONANT_PAIRS = (
    "bb", "bl", "br", "ck", "cr", "ch", "dd", "dr", "gh", "gr", "gn", "gg", "lb", "ld", "lk", "lp",
    "mb", "mm", "nc", "nch", "nd", "ng", "nn", "nt", "pp", "pl", "pr", "rr", "rch", "rs", "rsh", "rt",
    "sh", "th", "tt", "st", "str",
)
_POSTFIXES = (
    "able", "act", "am", "ams", "ect", "ed", "edge", "en", "er", "ful", "ia", "ier", "ies", "illy",
    "im", "ing", "ium", "is", "less", "or", "up", "ups", "y", "igle", "ogle", "agle", "ist", "est",
)
_VOWELS = ("a", "e", "i", "o", "u")
_CONSONANTS = (
    "b", "c", "d", "f", "g", "h", "j", "k", "l", "m", "n", "p", "r", "s", "t", "v", "w", "x", "y", "z",
)


class PasswordGenerator:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else secrets.SystemRandom()

    def _pick(self, choices: Sequence[str]) -> str:
        return choices[self._rng.randint(0, len(choices) - 1)]

    def _good_chance(self) -> bool:
        # Roughly one in four.
        return self._rng.randint(0, 10) > 7

    def _consonant(self, single: bool, caps: bool) -> str:
        if caps:
            return self._pick(_CONSONANTS).upper()
        if self._good_chance() and not single:
            return self._pick(_CONSONANT_PAIRS)
        return self._pick(_CONSONANTS)

    def _vowel(self) -> str:
        return self._pick(_DIPHTHONGS) if self._good_chance() else self._pick(_VOWELS)

    def _prefix(self, caps: bool) -> str:
        return self._pick(_PREFIXES) if self._good_chance() else self._consonant(True, caps)

    def _word(self, caps: bool) -> str:
        return self._prefix(caps) + self._vowel() + self._consonant(False, caps) + self._pick(_POSTFIXES)

    def generate(self, length: int = 0, caps: bool = False, number: bool = False) -> str:
        """One made-up word, or words joined and cut to exactly length characters.

        number appends 10-99 after the cut, so the result is then length + 2 long.
        """
        if length < 0:
            length = 0
        word = self._word(caps)
        if length > 0:
            while len(word) < length:
                word += self._word(caps)
            word = word[:length]
        if number:
            word += str(self._rng.randint(10, 99))
        return word
