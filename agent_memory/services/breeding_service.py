"""Trait mixing for bred agents.

Two parents produce a child whose traits are derived from theirs:
- numeric traits are averaged, categorical traits are inherited from a random
  parent, and the generation counter advances past the older parent
- trait lists collapse to one dominant personality plus the union of the rest

Children are kept in a small JSON registry so ids are stable across restarts.
"""

from __future__ import annotations

import json
import logging
import math
import random
import threading
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_memory.core.errors import StorageAppError

logger = logging.getLogger(__name__)

PERSONALITY_TRAITS = ("friendly", "pragmatic", "adventurous", "cautious")
DEFAULT_PERSONALITY = "friendly"
BRED_TRAIT = "bred"
GENERATION_KEY = "Generation"
CHILD_ID_PREFIX = "child_"
FIRST_CHILD_NUMBER = 1000


@dataclass(frozen=True)
class TraitPreview:
    traits: list[str]
    dominant_personality: str
    rarity_score: int


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def mix_traits(
    parent_a: dict[str, Any],
    parent_b: dict[str, Any],
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Derive a child's traits from two parents.

    Args:
        parent_a: First parent's trait map.
        parent_b: Second parent's trait map.
        rng: Random source for categorical picks.

    Returns:
        The child's trait map, including ``Generation``.
    """
    rng = rng or random.Random()
    child: dict[str, Any] = {}

    # Keys in first-seen order so output is reproducible for a seeded rng
    keys = list(dict.fromkeys([*parent_a.keys(), *parent_b.keys()]))
    for key in keys:
        a, b = parent_a.get(key), parent_b.get(key)
        if _is_number(a) and _is_number(b):
            child[key] = _round_half_up((a + b) / 2)
        elif isinstance(a, str) and isinstance(b, str):
            child[key] = a if rng.random() < 0.5 else b
        else:
            child[key] = a if a is not None else b

    gen_a = parent_a.get(GENERATION_KEY)
    gen_b = parent_b.get(GENERATION_KEY)
    gen_a = gen_a if _is_number(gen_a) else 1
    gen_b = gen_b if _is_number(gen_b) else 1
    child[GENERATION_KEY] = int(max(gen_a, gen_b)) + 1
    return child


def calculate_rarity(traits: list[str]) -> str:
    """Map a trait count to a rarity tier."""
    count = len(traits)
    if count <= 3:
        return "Common"
    if count <= 5:
        return "Uncommon"
    if count <= 7:
        return "Rare"
    if count <= 9:
        return "Epic"
    return "Legendary"


def preview_trait_mixing(
    parent_a_traits: list[str],
    parent_b_traits: list[str],
    rng: random.Random | None = None,
) -> TraitPreview:
    """Preview a child's trait list from two parents' trait lists.

    The most frequent personality trait wins (first seen on ties, ``friendly``
    when neither parent has one); other traits are de-duplicated and the
    ``bred`` marker is appended.
    """
    rng = rng or random.Random()
    all_traits = [*parent_a_traits, *parent_b_traits]

    personalities = Counter(
        t.lower() for t in all_traits if t.lower() in PERSONALITY_TRAITS
    )
    dominant = personalities.most_common(1)[0][0] if personalities else DEFAULT_PERSONALITY

    others = list(dict.fromkeys(t for t in all_traits if t.lower() not in PERSONALITY_TRAITS))
    traits = [dominant, *others, BRED_TRAIT]

    rarity_score = min(100, len(traits) * 10 + rng.random() * 20)
    return TraitPreview(
        traits=traits,
        dominant_personality=dominant,
        rarity_score=_round_half_up(rarity_score),
    )


def estimate_breeding_success(
    parent_a_traits: list[str],
    parent_b_traits: list[str],
    parent_a_breeds: int = 0,
    parent_b_breeds: int = 0,
) -> int:
    """Estimate breeding success as a percentage in [50, 100].

    Starts at 95, loses 2 per previous breed of either parent and gains 5 per
    trait the parents share.
    """
    rate = 95 - 2 * parent_a_breeds - 2 * parent_b_breeds
    rate += 5 * sum(1 for trait in parent_a_traits if trait in parent_b_traits)
    return max(50, min(100, rate))


class ChildRegistry:
    """JSON-file registry of bred children.

    Ids are ``child_<n>``, starting at 1000 and increasing. Thread-safe within
    a process; not safe for several processes sharing one file.

    Raises:
        StorageAppError: From :meth:`add` and :meth:`get` when the file exists
            but does not hold a JSON object.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            children = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except ValueError as exc:
            logger.error(
                "breeding.registry_corrupt",
                extra={"path": str(self.path), "error_msg": str(exc)},
            )
            raise StorageAppError(
                code="child_registry_corrupt",
                message="Child registry file is not valid JSON",
                details={"operation": "load"},
            ) from exc
        if not isinstance(children, dict):
            logger.error(
                "breeding.registry_corrupt",
                extra={"path": str(self.path), "error_msg": "top-level value is not an object"},
            )
            raise StorageAppError(
                code="child_registry_corrupt",
                message="Child registry file must hold a JSON object",
                details={"operation": "load"},
            )
        return children

    def _save(self, children: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(children, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def _next_id(self, children: dict[str, Any]) -> str:
        numbers = [
            int(key[len(CHILD_ID_PREFIX):])
            for key in children
            if key.startswith(CHILD_ID_PREFIX) and key[len(CHILD_ID_PREFIX):].isdigit()
        ]
        next_number = max(numbers) + 1 if numbers else FIRST_CHILD_NUMBER
        return f"{CHILD_ID_PREFIX}{next_number}"

    def add(self, child: dict[str, Any]) -> str:
        """Persist ``child`` and return its new id."""
        with self._lock:
            children = self._load()
            child_id = self._next_id(children)
            children[child_id] = child
            self._save(children)

        logger.info("breeding.child_registered", extra={"child_id": child_id})
        return child_id

    def get(self, child_id: str) -> dict[str, Any] | None:
        with self._lock:
            return self._load().get(child_id)
