"""Composition facade over the analytics components for one user."""

from __future__ import annotations

import hashlib
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence

from behavior_engine.breaks import recommend_breaks
from behavior_engine.cache import AnalysisCache, InMemoryCache
from behavior_engine.config import EngineConfig
from behavior_engine.errors import InvalidInputError
from behavior_engine.forecast import forecast_energy
from behavior_engine.logging_config import get_logger
from behavior_engine.metrics import compute_stats
from behavior_engine.patterns import recognize_patterns
from behavior_engine.prioritization import prioritize
from behavior_engine.results import (
    BreakRecommendation,
    BurnoutRisk,
    EnergyForecast,
    OptimalSchedule,
    PrioritizedTask,
    RecognizedPattern,
    SummaryStats,
)
from behavior_engine.risk_model import score_burnout
from behavior_engine.scheduling import build_schedule
from behavior_engine.schema import (
    EnergyDataPoint,
    FocusDataPoint,
    PendingTask,
    PrioritizationContext,
    TaskEstimateSample,
    TaskSnapshot,
)

logger = get_logger(__name__)


class AnalyticsEngine:
    """Runs the pure analytics components and memoises historical analyses.

    All inputs are passed in already fetched and validated; the only state
    held here is the injected cache. Cache keys combine the user id, the
    operation name and a digest of the immutable inputs, so a hit always
    corresponds to identical arguments and a user's entries share one prefix.
    """

    def __init__(
        self,
        user_id: str,
        config: Optional[EngineConfig] = None,
        cache: Optional[AnalysisCache] = None,
    ) -> None:
        if not user_id or ":" in user_id:
            raise InvalidInputError(f"user_id must be non-empty and free of ':', got {user_id!r}")
        self.user_id = user_id
        self.config = config or EngineConfig()
        self.cache = cache if cache is not None else InMemoryCache()

    def _key(self, operation: str, *args: Any) -> str:
        digest = hashlib.sha256(repr(args).encode("utf-8")).hexdigest()
        return f"{self._prefix}{operation}:{digest}"

    @property
    def _prefix(self) -> str:
        return f"{self.user_id}:"

    def _cached(self, operation: str, args: tuple, compute: Callable[[], Any]) -> Any:
        key = self._key(operation, *args)
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug("analysis_cache_hit", user_id=self.user_id, operation=operation)
            return hit

        logger.debug("analysis_cache_miss", user_id=self.user_id, operation=operation)
        value = compute()
        self.cache.set(key, value, self.config.cache_expiration_hours * 3600)
        return value

    def invalidate(self) -> None:
        """Expire every cached analysis for this user."""

        dropped = self.cache.expire_prefix(self._prefix)
        logger.info("analysis_cache_invalidated", user_id=self.user_id, entries=dropped)

    def patterns(
        self,
        focus_points: Iterable[FocusDataPoint] = (),
        estimate_samples: Iterable[TaskEstimateSample] = (),
        energy_points: Iterable[EnergyDataPoint] = (),
    ) -> tuple[RecognizedPattern, ...]:
        """Top patterns above the configured confidence threshold."""

        if not self.config.enable_pattern_recognition:
            return ()

        args = (tuple(focus_points), tuple(estimate_samples), tuple(energy_points))

        def compute() -> tuple[RecognizedPattern, ...]:
            merged = recognize_patterns(*args)
            kept = [p for p in merged if p.confidence >= self.config.confidence_threshold]
            return tuple(kept[: self.config.pattern_limit])

        return self._cached("patterns", args, compute)

    def forecast(self, energy_points: Iterable[EnergyDataPoint], target_date: date) -> Optional[EnergyForecast]:
        if not self.config.enable_predictions:
            return None
        args = (tuple(energy_points), target_date)
        return self._cached("forecast", args, lambda: forecast_energy(*args))

    def burnout(
        self,
        focus_hours: Sequence[float],
        energy_levels: Sequence[float],
        completion_rates: Sequence[float],
        today: Optional[date] = None,
    ) -> BurnoutRisk:
        args = (tuple(focus_hours), tuple(energy_levels), tuple(completion_rates), today or date.today())
        return self._cached("burnout", args, lambda: score_burnout(*args))

    def stats(
        self,
        focus_points: Iterable[FocusDataPoint],
        energy_points: Iterable[EnergyDataPoint],
    ) -> SummaryStats:
        args = (tuple(focus_points), tuple(energy_points))
        return self._cached("stats", args, lambda: compute_stats(*args))

    def schedule(self, forecast: EnergyForecast, pending: Iterable[PendingTask]) -> OptimalSchedule:
        return build_schedule(forecast, pending)

    def breaks(
        self,
        focus_minutes: float,
        energy_level: float,
        now: Optional[datetime] = None,
    ) -> list[BreakRecommendation]:
        return recommend_breaks(focus_minutes, energy_level, now)

    def prioritize(
        self,
        tasks: Iterable[TaskSnapshot],
        context: PrioritizationContext,
        now: Optional[datetime] = None,
    ) -> list[PrioritizedTask]:
        return prioritize(tasks, context, now)
