"""Pairing codes: ``<animal><2-digit>`` identifiers that key the reading store."""

from __future__ import annotations

import random
import re
from typing import Any

ANIMALS: tuple[str, ...] = (
    "tiger",
    "falcon",
    "wolf",
    "eagle",
    "shark",
    "lion",
    "bear",
    "hawk",
    "fox",
    "panther",
    "cobra",
    "raven",
    "lynx",
    "orca",
    "viper",
    "jaguar",
    "condor",
    "badger",
    "raptor",
    "phoenix",
)

_ANIMAL_SET = frozenset(ANIMALS)
_CODE_PATTERN = re.compile(r"([a-z]+)(\d{2})")


def generate(rng: random.Random | None = None) -> str:
    """Return a random pairing code. Uniqueness is not checked."""
    source = rng or random
    animal = source.choice(ANIMALS)
    number = source.randrange(100)
    return f"{animal}{number:02d}"


def validate(code: Any) -> bool:
    if not isinstance(code, str):
        return False
    match = _CODE_PATTERN.fullmatch(code)
    if match is None:
        return False
    return match.group(1) in _ANIMAL_SET
