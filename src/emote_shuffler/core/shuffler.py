from __future__ import annotations

import functools
import random
from dataclasses import dataclass
from typing import List, Optional

from ..client.models import EmoteSet
from ..client.seventv import SevenTvGqlClient
from .executor import DEFAULT_RATE, ProgressReporter, RateLimiter, execute
from .logger import get_logger
from .planner import Item, RenameOp, cycle_count, plan
from .random_source import TEMP_NAME_LENGTH, gen_temp_name, shuffle_names

logger = get_logger(__name__)


@dataclass
class ShuffleResult:
    set_id: str
    total: int
    planned: List[RenameOp]
    applied: int
    cycles: int
    preview: bool = False


def shuffle_set(
    client: SevenTvGqlClient,
    emote_set: EmoteSet,
    *,
    rate: float = DEFAULT_RATE,
    progress: Optional[ProgressReporter] = None,
    preview: bool = False,
    rng: Optional[random.Random] = None,
    temp_name_length: int = TEMP_NAME_LENGTH,
    limiter: Optional[RateLimiter] = None,
) -> ShuffleResult:
    """Shuffle the names of ``emote_set``, a snapshot the caller already fetched."""
    set_id = emote_set.id
    items = [Item(id=emote.id, name=emote.name) for emote in emote_set.emotes]
    if not items:
        logger.info("表情集 %s 为空, 无需打乱", set_id)
        return ShuffleResult(set_id=set_id, total=0, planned=[], applied=0, cycles=0, preview=preview)

    rng = rng or random.Random()
    permuted = shuffle_names([item.name for item in items], rng)
    ops = plan(items, permuted, functools.partial(gen_temp_name, temp_name_length, rng))
    cycles = cycle_count(items, permuted)
    logger.info(
        "表情集 %s: %s 个表情, %s 个循环, 共 %s 步改名",
        set_id,
        len(items),
        cycles,
        len(ops),
    )

    if preview:
        for op in ops:
            logger.info("预览改名 %s -> %s", op.target_id, op.new_name)
        return ShuffleResult(set_id=set_id, total=len(items), planned=ops, applied=0, cycles=cycles, preview=True)

    rename = functools.partial(client.rename_emote, set_id)
    applied = execute(ops, rename, rate, progress=progress, limiter=limiter)
    logger.info("表情集 %s 打乱完成, 已执行 %s 步", set_id, applied)
    return ShuffleResult(set_id=set_id, total=len(items), planned=ops, applied=applied, cycles=cycles)
