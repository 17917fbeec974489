from __future__ import annotations

import random
import string
from typing import List, Optional, Sequence

TEMP_NAME_ALPHABET = string.ascii_letters + string.digits
TEMP_NAME_LENGTH = 16


def shuffle_names(names: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    """Return a uniformly shuffled copy of ``names`` (Fisher-Yates)."""
    rng = rng or random.Random()
    shuffled = list(names)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def gen_temp_name(length: int = TEMP_NAME_LENGTH, rng: Optional[random.Random] = None) -> str:
    if length <= 0:
        raise ValueError(f"临时名称长度必须为正数: {length}")
    rng = rng or random.Random()
    return "".join(rng.choice(TEMP_NAME_ALPHABET) for _ in range(length))
