"""TTL cache for validation outputs, keyed by a content hash of (spec, candidate)."""
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from product_validator.models import CandidateProduct, IngredientSpec, ValidationOutput

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a hash."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & _MASK64
    return h


def canonical_json(spec: IngredientSpec, candidate: CandidateProduct) -> str:
    """Serialise the pair with sorted keys and compact separators."""
    payload = {
        "spec": spec.model_dump(mode="json"),
        "candidate": candidate.model_dump(mode="json", by_alias=True),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def cache_key(spec: IngredientSpec, candidate: CandidateProduct) -> str:
    """Deterministic cache key for a (spec, candidate) pair."""
    digest = fnv1a_64(canonical_json(spec, candidate).encode("utf-8"))
    return f"v:{digest:016x}"


class ValidationCache(ABC):
    """Interface the orchestrator reads from and writes to."""

    @abstractmethod
    def get(self, key: str) -> Optional[ValidationOutput]:
        """Return the live entry for `key`, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: ValidationOutput, ttl: float) -> None:
        """Store `value` for `ttl` seconds."""


@dataclass(frozen=True)
class _Entry:
    value: ValidationOutput
    expires_at: float


class InMemoryValidationCache(ValidationCache):
    """Process-local dict cache with lazy expiry.

    Not thread-safe; hosts serving requests from several threads must wrap
    it in a lock or provide another ValidationCache implementation.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[ValidationOutput]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: ValidationOutput, ttl: float) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
