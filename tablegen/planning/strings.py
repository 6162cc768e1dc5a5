"""
Random string expressions built from a fixed alphabet.
"""
from __future__ import annotations

from typing import Optional

from tablegen.domain.expressions import ALPHABET, RandomString
from tablegen.errors import InvalidArgument


class StringSynthesizer:
    """
    Builds fixed-length random-string descriptors.

    The generated length is independent of any target column; the registry
    truncates to the column length afterwards. No randomness is drawn here:
    the renderer evaluates one independent draw per character per row.
    """

    def __init__(self, max_length: int, alphabet: str = ALPHABET) -> None:
        if max_length < 0:
            raise InvalidArgument("max_string_size", max_length)
        if not alphabet:
            raise InvalidArgument("alphabet", alphabet, "must not be empty")
        self.max_length = max_length
        self.alphabet = alphabet

    def build(self, max_length: Optional[int] = None) -> RandomString:
        length = self.max_length if max_length is None else max_length
        if length < 0:
            raise InvalidArgument("max_length", length)
        return RandomString(length=length, alphabet=self.alphabet)


__all__ = ["StringSynthesizer"]
