from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

import pytest

from emote_shuffler.client.models import Emote, EmoteSet, GqlError
from emote_shuffler.client.seventv import EmoteRenameFailed, EmoteSetNotFound
from emote_shuffler.core import shuffler
from emote_shuffler.core.errors import ExecutionError
from emote_shuffler.core.executor import RateLimiter
from emote_shuffler.core.random_source import shuffle_names
from emote_shuffler.core.shuffler import shuffle_set


class FakeSetClient:
    """In-memory emote set that rejects duplicate names like the real service."""

    def __init__(self, names: List[str], fail_on_call: Optional[int] = None) -> None:
        self.emotes: Dict[str, str] = {f"e{i}": name for i, name in enumerate(names)}
        self.calls: List[Tuple[str, str, str]] = []
        self.fail_on_call = fail_on_call

    def get_emote_set(self, set_id: str) -> EmoteSet:
        if set_id != "set1":
            raise EmoteSetNotFound(set_id)
        return EmoteSet(
            id=set_id,
            emotes=[Emote(id=emote_id, name=name) for emote_id, name in self.emotes.items()],
        )

    def rename_emote(self, set_id: str, emote_id: str, name: str) -> None:
        self.calls.append((set_id, emote_id, name))
        if self.fail_on_call == len(self.calls):
            raise EmoteRenameFailed([GqlError(message="boom")])
        for other_id, other_name in self.emotes.items():
            if other_name == name and other_id != emote_id:
                raise EmoteRenameFailed([GqlError(message=f"{name} already taken")])
        self.emotes[emote_id] = name


def no_wait() -> RateLimiter:
    return RateLimiter(60.0, clock=lambda: 0.0, sleep=lambda _seconds: None)


NAMES = [f"emote{i}" for i in range(12)]


def test_shuffle_set_applies_plan() -> None:
    client = FakeSetClient(NAMES)
    rng = random.Random(5)
    result = shuffle_set(client, client.get_emote_set("set1"), rng=rng, limiter=no_wait())
    assert result.total == len(NAMES)
    assert result.applied == len(result.planned) == len(client.calls)
    assert sorted(client.emotes.values()) == sorted(NAMES)
    assert all(call[0] == "set1" for call in client.calls)
    # same seed, same shuffle
    expected = shuffle_names(NAMES, random.Random(5))
    assert [client.emotes[f"e{i}"] for i in range(len(NAMES))] == expected


def test_temp_names_use_configured_length() -> None:
    client = FakeSetClient(["a", "b"])
    result = shuffle_set(client, client.get_emote_set("set1"), rng=random.Random(0), limiter=no_wait(), temp_name_length=24)
    temporary = [op for op in result.planned if op.temporary]
    assert all(len(op.new_name) == 24 for op in temporary)
    assert result.cycles == len(temporary)


def test_preview_sends_nothing() -> None:
    client = FakeSetClient(NAMES)
    result = shuffle_set(client, client.get_emote_set("set1"), preview=True, rng=random.Random(1), limiter=no_wait())
    assert result.preview is True
    assert result.applied == 0
    assert result.planned
    assert client.calls == []


def test_empty_set() -> None:
    client = FakeSetClient([])
    result = shuffle_set(client, client.get_emote_set("set1"), limiter=no_wait())
    assert result.total == 0
    assert result.planned == []
    assert client.calls == []


def test_uses_snapshot_without_refetching() -> None:
    client = FakeSetClient(["a", "b", "c"])
    snapshot = client.get_emote_set("set1")
    client.get_emote_set = None  # type: ignore[assignment]
    result = shuffle_set(client, snapshot, rng=random.Random(3), limiter=no_wait())
    assert result.set_id == "set1"
    assert result.total == 3


def test_failure_leaves_set_valid(monkeypatch) -> None:
    monkeypatch.setattr(shuffler, "shuffle_names", lambda names, rng: names[1:] + names[:1])
    client = FakeSetClient(NAMES, fail_on_call=4)
    with pytest.raises(ExecutionError) as info:
        shuffle_set(client, client.get_emote_set("set1"), limiter=no_wait())
    assert info.value.step == 4
    assert info.value.completed == 3
    assert isinstance(info.value.__cause__, EmoteRenameFailed)
    assert len(client.calls) == 4
    names = list(client.emotes.values())
    assert len(set(names)) == len(names)
