from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Set

from .errors import PlanError
from .logger import get_logger
from .random_source import gen_temp_name

logger = get_logger(__name__)

MAX_TEMP_NAME_ATTEMPTS = 100


@dataclass(frozen=True)
class Item:
    id: str
    name: str


@dataclass(frozen=True)
class RenameOp:
    target_id: str
    new_name: str
    temporary: bool = False


def _index_by_name(names: Iterable[str], label: str) -> Dict[str, int]:
    index: Dict[str, int] = {}
    for position, name in enumerate(names):
        if name in index:
            raise PlanError(f"{label}中存在重复名称: {name!r}")
        index[name] = position
    return index


def _wanted_by(items: Sequence[Item], permuted_names: Sequence[str]) -> Dict[str, int]:
    """Map each name to the position that must end up holding it.

    Also checks that ``permuted_names`` really is a reordering of the current
    names: same length, both sides unique, same set of names.
    """
    if len(permuted_names) != len(items):
        raise PlanError(
            f"目标名称数量({len(permuted_names)})与条目数量({len(items)})不一致"
        )
    holders = _index_by_name((item.name for item in items), "当前名称")
    wanted_by = _index_by_name(permuted_names, "目标名称")
    if holders.keys() != wanted_by.keys():
        missing = sorted(holders.keys() - wanted_by.keys())
        raise PlanError(f"目标名称不是当前名称的排列, 缺少: {missing}")
    return wanted_by


def _fresh_temp_name(factory: Callable[[], str], taken: Set[str]) -> str:
    for _ in range(MAX_TEMP_NAME_ATTEMPTS):
        candidate = factory()
        if candidate not in taken:
            taken.add(candidate)
            return candidate
    raise PlanError(f"连续 {MAX_TEMP_NAME_ATTEMPTS} 次生成的临时名称均已被占用")


def plan(
    items: Sequence[Item],
    permuted_names: Sequence[str],
    temp_name: Callable[[], str] = gen_temp_name,
) -> List[RenameOp]:
    """Order the renames that move every item to ``permuted_names[i]``.

    Each cycle of the permutation is opened by parking its first item on a
    temporary name, then walked backwards: the item that wants the name just
    vacated takes it, which vacates that item's own name for the next link. The
    parked item closes the cycle. Applied in order, no two items ever share a
    name. Fixed points produce no ops, and the total is at most ``n + cycles``.
    """
    wanted_by = _wanted_by(items, permuted_names)
    taken: Set[str] = set(wanted_by)
    resolved = [False] * len(items)
    ops: List[RenameOp] = []

    for first, item in enumerate(items):
        if resolved[first]:
            continue
        resolved[first] = True
        if permuted_names[first] == item.name:
            continue

        ops.append(RenameOp(item.id, _fresh_temp_name(temp_name, taken), temporary=True))
        vacated = item.name
        cur = wanted_by[vacated]
        while cur != first:
            if resolved[cur]:
                raise PlanError(f"循环遍历时重复访问了条目 {items[cur].id}")
            resolved[cur] = True
            ops.append(RenameOp(items[cur].id, vacated))
            vacated = items[cur].name
            cur = wanted_by[vacated]
        ops.append(RenameOp(item.id, vacated))

    logger.debug("生成改名计划: %s 个条目, %s 步", len(items), len(ops))
    return ops


def cycle_count(items: Sequence[Item], permuted_names: Sequence[str]) -> int:
    """Number of cycles of length two or more in the permutation."""
    wanted_by = _wanted_by(items, permuted_names)
    seen = [False] * len(items)
    cycles = 0
    for start, item in enumerate(items):
        if seen[start]:
            continue
        seen[start] = True
        if permuted_names[start] == item.name:
            continue
        cycles += 1
        cur = wanted_by[item.name]
        while cur != start:
            seen[cur] = True
            cur = wanted_by[items[cur].name]
    return cycles
