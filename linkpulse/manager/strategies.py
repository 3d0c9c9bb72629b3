"""
Strategies for short-code generation in linkpulse.

Provided strategies:
- RandomStrategy: Random Base62 of length L (default from CODE_LENGTH, 8)
- SequentialStrategy: Bitly-like monotonically increasing integer -> Base62, with
  optional left-pad and prefix

A strategy only proposes candidates. Whether a candidate is free is decided by the
store's unique constraint when the link is inserted; the allocator asks for a new
candidate when an insert is rejected.

Common helpers:
- _base62_encode: Non-negative integer -> Base62 string
- _safe_len: Resolve/normalize desired code length from argument/config (clamped to [4, 32])

Configuration (via linkpulse.config.settings):
- CODE_STRATEGY: "random" (default) or "sequential"
- CODE_LENGTH: Length for RandomStrategy (default 8; clamped 4..32)
- SEQ_START: Starting integer for SequentialStrategy (default 3_500_000)
- CODE_MIN_LENGTH: Minimum visible length for SequentialStrategy (default 6)
- SHARD_PREFIX: Optional string prefix for SequentialStrategy (e.g., "ap")

Notes:
- 62^8 (about 2.2e14) random codes make a collision practically negligible.
- SequentialStrategy keeps its counter in process memory. After a restart, persist
  SEQ_START beyond the highest issued value or the allocator will spend its attempts
  on codes that already exist.
"""

import itertools
import logging
import random
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Type

from linkpulse.config import settings

log = logging.getLogger(__name__)

BASE62_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_BASE62_BASE = len(BASE62_ALPHABET)


def _base62_encode(num: int) -> str:
    """
    Convert a non-negative integer to a Base62 string using the global alphabet.
    0 -> "0", 61 -> "Z", 62 -> "10"
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if num == 0:
        return "0"
    out = []
    while num > 0:
        num, rem = divmod(num, _BASE62_BASE)
        out.append(BASE62_ALPHABET[rem])
    return "".join(reversed(out))


def _safe_len(length: Optional[int]) -> int:
    """Resolve desired code length from arg or config, clamped to [4, 32]."""
    L = int(length) if length is not None else int(settings.CODE_LENGTH)
    return max(4, min(32, L))


class BaseStrategy(ABC):
    """Abstract base for code generation strategies."""

    @abstractmethod
    def generate(self, *, length: Optional[int] = None) -> str:
        """Propose a candidate code. `length` applies where the strategy supports it."""
        raise NotImplementedError


@dataclass(frozen=True)
class RandomStrategy(BaseStrategy):
    """Random Base62 codes from the OS CSPRNG; rely on storage-level uniqueness."""
    length: Optional[int] = None

    def generate(self, *, length: Optional[int] = None) -> str:
        L = _safe_len(length if length is not None else self.length)
        rng = random.SystemRandom()
        return "".join(rng.choice(BASE62_ALPHABET) for _ in range(L))


@dataclass
class SequentialStrategy(BaseStrategy):
    """
    Bitly-like sequential strategy:
    - Maintains a process-local monotonically increasing counter
    - Encodes next integer to Base62
    - Enforces minimum visible length via left-padding (e.g., "000abc")
    - Optionally prepends a shard/region prefix (e.g., "ap000abc")
    """
    start: int = 3_500_000
    min_length: int = 6
    prefix: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)
    _counter: itertools.count = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._counter = itertools.count(self.start)

    def generate(self, *, length: Optional[int] = None) -> str:
        # length is intentionally ignored; min_length is enforced instead.
        with self._lock:
            n = next(self._counter)
        code = _base62_encode(n).rjust(self.min_length, "0")
        return f"{self.prefix}{code}" if self.prefix else code


STRATEGY_REGISTRY: Dict[str, Type[BaseStrategy]] = {
    "random": RandomStrategy,
    "rand": RandomStrategy,
    "sequential": SequentialStrategy,
    "seq": SequentialStrategy,
    "bitly": SequentialStrategy,
}


def get_strategy_from_config(name: Optional[str] = None) -> BaseStrategy:
    """
    Resolve the active strategy from parameter or settings.CODE_STRATEGY.
    Unknown names fall back to "random".
    """
    key = (name or settings.CODE_STRATEGY or "random").strip().lower()
    cls = STRATEGY_REGISTRY.get(key)
    if cls is None:
        log.warning("Unknown code strategy %r; using random", key)
        cls = RandomStrategy
    log.debug("Using code strategy: %s -> %s", key, cls.__name__)

    if cls is SequentialStrategy:
        return SequentialStrategy(
            start=int(settings.SEQ_START),
            min_length=int(settings.CODE_MIN_LENGTH),
            prefix=str(settings.SHARD_PREFIX),
        )
    return RandomStrategy(length=int(settings.CODE_LENGTH))
