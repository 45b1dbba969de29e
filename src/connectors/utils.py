"""
Utilitaires partagés par tous les connecteurs fournisseurs.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

import httpx

logger = logging.getLogger("vendorlink.connectors.utils")
T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


# ──────────────────────────────────────────────
# RETRY
# ──────────────────────────────────────────────


def is_retryable_error(exc: BaseException) -> bool:
    """Erreurs transitoires uniquement.

    Les ConnectorError portent leur propre flag `recoverable`
    (config et auth ne le sont jamais). Les pannes réseau httpx
    sont toujours retentées.
    """
    if isinstance(exc, httpx.TransportError):
        return True
    return bool(getattr(exc, "recoverable", False))


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Délai avant la tentative attempt + 1 : base * 2^attempt (2s, 4s, ...)."""
    return base_delay * (2 ** attempt)


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    is_retryable: Callable[[BaseException], bool] = is_retryable_error,
    deadline: Optional[float] = None,
    sleep: SleepFn = asyncio.sleep,
    operation_name: str = "operation",
) -> T:
    """Exécute `operation` avec backoff exponentiel borné.

    Args:
        operation: coroutine factory, rappelée à chaque tentative
        max_attempts: nombre total de tentatives (>= 1)
        base_delay: base du backoff, en secondes
        is_retryable: filtre des erreurs retentables
        deadline: instant limite (time.monotonic()) ; si le prochain
            délai le dépasse, on abandonne tout de suite
        sleep: fonction de suspension (injectable pour les tests)

    Raises:
        La dernière erreur rencontrée.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt == max_attempts or not is_retryable(e):
                if attempt > 1:
                    logger.error(
                        f"[retry] {operation_name} failed after "
                        f"{attempt} attempts: {e}"
                    )
                raise
            delay = backoff_delay(attempt, base_delay)
            if deadline is not None and time.monotonic() + delay > deadline:
                logger.warning(
                    f"[retry] {operation_name} attempt {attempt}/{max_attempts} "
                    f"failed: {e}. Deadline reached, giving up."
                )
                raise
            logger.warning(
                f"[retry] {operation_name} attempt {attempt}/{max_attempts} "
                f"failed: {e}. Retrying in {delay:.1f}s..."
            )
            await sleep(delay)
    raise AssertionError("unreachable")


# ──────────────────────────────────────────────
# RATE LIMITING
# ──────────────────────────────────────────────


class RateLimitExceeded(Exception):
    def __init__(self, window: str, retry_after_seconds: int):
        self.window = window
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Request budget per {window} exhausted, retry after {retry_after_seconds}s"
        )


class RequestThrottle:
    """Applique les rate limits déclarés d'un fournisseur.

    - par minute : fenêtre glissante ; les `per_minute` premières requêtes
      partent tout de suite, au-delà on attend que la plus ancienne sorte
      de la fenêtre
    - par heure / par jour : budget dur, RateLimitExceeded au-delà
    """

    def __init__(
        self,
        per_minute: int,
        per_hour: int,
        per_day: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.per_minute = per_minute
        self.per_hour = per_hour
        self.per_day = per_day
        self._clock = clock
        self._sleep = sleep
        self._history: deque[float] = deque()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = self._clock()
            self._evict(now)
            self._check_budget(now, 3600.0, self.per_hour, "hour")
            self._check_budget(now, 86400.0, self.per_day, "day")

            wait = self._minute_wait(now)
            if wait > 0:
                await self._sleep(wait)
                now = self._clock()
            self._history.append(now)

    def _evict(self, now: float) -> None:
        while self._history and now - self._history[0] >= 86400.0:
            self._history.popleft()

    def _minute_wait(self, now: float) -> float:
        in_window = [t for t in self._history if now - t < 60.0]
        if len(in_window) < self.per_minute:
            return 0.0
        return 60.0 - (now - in_window[-self.per_minute])

    def _check_budget(self, now: float, window: float, limit: int, name: str) -> None:
        in_window = [t for t in self._history if now - t < window]
        if len(in_window) >= limit:
            retry_after = int(window - (now - in_window[0])) + 1
            raise RateLimitExceeded(name, retry_after)

    @property
    def requests_in_last_hour(self) -> int:
        now = self._clock()
        return sum(1 for t in self._history if now - t < 3600.0)


# ──────────────────────────────────────────────
# SAFE TYPE CONVERSIONS
# ──────────────────────────────────────────────


def safe_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        if not value.strip():
            return default
        cleaned = value.strip()
        for char in ("€", "$", "£", "\u00a0", " ", "%"):
            cleaned = cleaned.replace(char, "")
        has_comma = "," in cleaned
        has_dot = "." in cleaned
        if has_comma and has_dot:
            last_comma = cleaned.rfind(",")
            last_dot = cleaned.rfind(".")
            if last_comma > last_dot:
                cleaned = cleaned.replace(".", "").replace(",", ".")
            else:
                cleaned = cleaned.replace(",", "")
        elif has_comma and not has_dot:
            parts = cleaned.split(",")
            if len(parts) == 2 and len(parts[1]) <= 2:
                cleaned = cleaned.replace(",", ".")
            else:
                cleaned = cleaned.replace(",", "")
        try:
            return float(cleaned)
        except ValueError:
            return default
    return default


def safe_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    as_float = safe_float(value, None)
    if as_float is None:
        return default
    return int(round(as_float))


# ──────────────────────────────────────────────
# COLLECTIONS
# ──────────────────────────────────────────────


def chunk_list(lst: Sequence[T], size: int) -> list[list[T]]:
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    return [list(lst[i: i + size]) for i in range(0, len(lst), size)]


def get_path(data: Any, path: str) -> Any:
    """Lecture "item.code" dans des dicts imbriqués. Chemin absent → None."""
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def join_skus(skus: Optional[Sequence[str]]) -> Optional[str]:
    """Les fournisseurs attendent les SKUs joints par des virgules."""
    if not skus:
        return None
    return ",".join(skus)
