from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

RandomSource = Callable[[], float]


class DuelRandom:
    """Thin wrapper over a uniform ``() -> float in [0, 1)`` source.

    Every check draws exactly one value, so a duel is reproducible from the
    source's sequence alone. Tests inject scripted sources to force outcomes.
    """

    def __init__(self, source: Optional[RandomSource] = None) -> None:
        self._source: RandomSource = source or random.Random().random

    @classmethod
    def seeded(cls, seed: Any) -> "DuelRandom":
        return cls(random.Random(seed).random)

    def roll(self) -> float:
        return self._source()

    def chance(self, probability: float) -> bool:
        """One independent check succeeding with the given probability."""
        return self._source() < probability

    def below(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("n must be positive")
        return min(n - 1, int(self._source() * n))

    def pick_index(self, items: Sequence[T]) -> int:
        return self.below(len(items))


def _to_stable_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Deterministic RNG manager for batch simulation.

    Derives an independent random source per (domain, identifiers) from a
    master seed, so trial ``n`` of a matchup always sees the same stream
    regardless of how many trials ran before it.

    The master seed can be an int, str, or bytes. None picks a random seed.
    """

    master_seed: Union[int, str, bytes, None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_master_seed_bytes", self._canonicalize_seed(self.master_seed))
        if self.master_seed is None:
            rand = secrets.token_bytes(16)
            object.__setattr__(self, "_master_seed_bytes", rand)
            logger.debug("No master seed provided; generated random seed: %s", rand.hex())

    @staticmethod
    def _canonicalize_seed(seed: Optional[Union[int, str, bytes]]) -> bytes:
        if seed is None:
            return b""
        if isinstance(seed, bytes):
            return seed
        if isinstance(seed, int):
            length = seed.bit_length() // 8 + 1
            return seed.to_bytes(length, "big", signed=True)
        if isinstance(seed, str):
            return seed.strip().encode("utf-8")
        raise TypeError("Unsupported seed type: %r" % (type(seed),))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        payload = {
            "domain": domain,
            "ids": identifiers,
            "master": self._master_seed_bytes.hex(),
        }
        data = _to_stable_json(payload).encode("utf-8")
        h = hashlib.blake2b(data, digest_size=8)
        return int.from_bytes(h.digest(), "big", signed=False)

    def duel_random(self, domain: str, *identifiers: Any) -> DuelRandom:
        return DuelRandom.seeded(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        return self._master_seed_bytes.hex()
