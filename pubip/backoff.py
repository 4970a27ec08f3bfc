from __future__ import annotations

import random
from dataclasses import dataclass, field


@dataclass
class Backoff:
    """Exponential delay generator with optional jitter.

    The n-th call to ``duration()`` yields ``min_seconds * factor ** n`` capped
    at ``max_seconds``. With jitter the value is drawn uniformly between
    ``min_seconds`` and that bound.
    """

    min_seconds: float = 0.1
    max_seconds: float = 10.0
    factor: float = 2.0
    jitter: bool = True
    rng: random.Random = field(default_factory=random.Random, repr=False)
    attempt: int = 0

    def duration(self) -> float:
        min_seconds = min(self.min_seconds, self.max_seconds)
        computed = min(min_seconds * self.factor**self.attempt, self.max_seconds)
        self.attempt += 1
        if self.jitter and computed > min_seconds:
            computed = min_seconds + self.rng.random() * (computed - min_seconds)
        return computed

    def reset(self) -> None:
        self.attempt = 0
