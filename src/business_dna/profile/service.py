"""
Profile service: the behavioral profile ("DNA") cache.

Serves the cached profile while it is fresh and rebuilds it from the record
source when it is stale or a refresh is forced. Rebuilds for the same
(operator, scope) are single-flight, and a failed rebuild never replaces
the previously cached profile.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Optional, Tuple

from business_dna.analysis import DEFAULT_TUNABLES, AnalyzerTunables, analyze
from business_dna.config import Settings, get_settings
from business_dna.errors import CacheBuildFailure, PartialDataError
from business_dna.models import BehavioralProfile, InteractionRecord, OperatorIdentity
from business_dna.profile import metrics
from business_dna.profile.single_flight import SingleFlight
from business_dna.sources.protocols import RecordSource
from business_dna.storage.protocols import ProfileStore
from business_dna.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


class ProfileService:
    """Builds, caches and serves behavioral profiles."""

    def __init__(
        self,
        store: ProfileStore,
        source: RecordSource,
        settings: Optional[Settings] = None,
        tunables: AnalyzerTunables = DEFAULT_TUNABLES,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the profile service.

        Args:
            store: Profile storage backend
            source: Interaction record source
            settings: Staleness window, fetch limits and timeouts (default: get_settings())
            tunables: Analyzer heuristics
            clock: Returns the current aware UTC time
        """
        self.store = store
        self.source = source
        self.settings = settings or get_settings()
        self.tunables = tunables
        self.clock = clock
        self._flight = SingleFlight()

        logger.info(
            f"ProfileService initialized "
            f"(staleness={self.settings.PROFILE_STALENESS_SECONDS}s)"
        )

    @property
    def staleness_window(self) -> timedelta:
        return timedelta(seconds=self.settings.PROFILE_STALENESS_SECONDS)

    def is_stale(self, profile: BehavioralProfile) -> bool:
        """Whether a profile is at least one staleness window old."""
        return self.clock() - profile.last_computed_at >= self.staleness_window

    def get_cached(self, operator_id: str, scope: Optional[str] = None) -> Optional[BehavioralProfile]:
        """The stored profile regardless of age, or None."""
        return self.store.get(operator_id, scope or None)

    async def get_or_build(
        self, operator_id: str, scope: Optional[str] = None, force_refresh: bool = False
    ) -> BehavioralProfile:
        """
        Return the fresh cached profile or build a new one.

        Args:
            operator_id: The operator ID
            scope: Optional sub-partition of the operator's data
            force_refresh: Rebuild even if the cached profile is fresh

        Returns:
            The behavioral profile

        Raises:
            CacheBuildFailure: If the cache could not be read or the rebuild
                failed (the cache is unchanged)
        """
        scope = scope or None
        if not force_refresh:
            try:
                cached = self.store.get(operator_id, scope)
            except Exception as e:
                logger.error(f"Profile cache read failed for operator {operator_id}: {e}")
                raise CacheBuildFailure(operator_id, scope, e) from e
            if cached is not None and not self.is_stale(cached):
                logger.debug(f"Serving cached profile for operator {operator_id} (scope={scope})")
                return cached

        return await self._flight.do(
            (operator_id, scope), lambda: self._build(operator_id, scope)
        )

    async def force_refresh_profile(
        self, operator_id: str, scope: Optional[str] = None
    ) -> BehavioralProfile:
        """Rebuild the profile now, joining any build already in flight."""
        return await self.get_or_build(operator_id, scope, force_refresh=True)

    def remove_operator(self, operator_id: str) -> int:
        """Delete every profile of an operator (full data removal)."""
        return self.store.delete_operator(operator_id)

    async def _build(self, operator_id: str, scope: Optional[str]) -> BehavioralProfile:
        logger.info(f"Building profile for operator {operator_id} (scope={scope})")
        try:
            identity, feedback, posts, questions, missing = await self._fetch_corpus(
                operator_id, scope
            )
            profile = self._compose(scope, identity, feedback, posts, questions, missing)
            self.store.upsert(profile)
        except CacheBuildFailure:
            raise
        except Exception as e:
            logger.error(f"Profile build failed for operator {operator_id}: {e}")
            raise CacheBuildFailure(operator_id, scope, e) from e

        logger.info(
            f"Built profile for operator {operator_id}: records={profile.total_records}, "
            f"completeness={profile.data_completeness}, confidence={profile.confidence_score}"
            + (f", missing={profile.missing_facets}" if profile.missing_facets else "")
        )
        return profile

    async def _with_timeout(self, awaitable: Awaitable):
        return await asyncio.wait_for(awaitable, timeout=self.settings.FETCH_TIMEOUT_SECONDS)

    async def _fetch_corpus(
        self, operator_id: str, scope: Optional[str]
    ) -> Tuple[
        OperatorIdentity,
        List[InteractionRecord],
        List[InteractionRecord],
        List[InteractionRecord],
        List[str],
    ]:
        """
        Fetch identity, feedback, posts and questions concurrently.

        A missing identity is fatal. Any other failed fetch degrades that facet
        to an empty batch and is reported in the returned missing-facet list.
        """
        results = await asyncio.gather(
            self._with_timeout(self.source.get_identity(operator_id, scope)),
            self._with_timeout(
                self.source.list_feedback(operator_id, scope, limit=self.settings.FEEDBACK_FETCH_LIMIT)
            ),
            self._with_timeout(
                self.source.list_posts(operator_id, scope, limit=self.settings.POST_FETCH_LIMIT)
            ),
            self._with_timeout(
                self.source.list_questions(operator_id, scope, limit=self.settings.QUESTION_FETCH_LIMIT)
            ),
            return_exceptions=True,
        )

        identity = results[0]
        if isinstance(identity, BaseException):
            raise CacheBuildFailure(operator_id, scope, identity)
        if identity is None:
            raise CacheBuildFailure(
                operator_id, scope, LookupError("no identity record for operator")
            )

        batches: List[List[InteractionRecord]] = []
        missing: List[str] = []
        for facet, result in zip(("feedback", "posts", "questions"), results[1:]):
            if isinstance(result, BaseException):
                error = PartialDataError(facet, result)
                logger.warning(f"Degrading profile for operator {operator_id}: {error}")
                missing.append(facet)
                batches.append([])
            else:
                batches.append(list(result or []))

        feedback, posts, questions = batches
        return identity, feedback, posts, questions, missing

    def _compose(
        self,
        scope: Optional[str],
        identity: OperatorIdentity,
        feedback: List[InteractionRecord],
        posts: List[InteractionRecord],
        questions: List[InteractionRecord],
        missing: List[str],
    ) -> BehavioralProfile:
        now = self.clock()
        signals = analyze(feedback + posts + questions, self.tunables)

        rate = metrics.response_rate(signals.feedback_count, signals.responded_count)
        completeness = metrics.data_completeness(
            has_identity=True,
            feedback_count=signals.feedback_count,
            post_count=signals.post_count,
            response_rate_percent=rate,
            question_count=signals.question_count,
        )

        return BehavioralProfile(
            operator_id=identity.operator_id,
            scope=scope,
            name=identity.name,
            category=identity.category,
            primary_category=identity.primary_category,
            brand_voice=signals.reply_style.tone,
            topics=signals.topics,
            strengths=signals.strengths,
            weaknesses=signals.weaknesses,
            reply_style=signals.reply_style,
            signature_phrases=signals.signature_phrases,
            peak_days=signals.peak_days,
            best_contact_times=signals.best_contact_times,
            average_rating=metrics.average_rating(feedback),
            total_records=signals.feedback_count,
            total_questions=signals.question_count,
            response_rate=rate,
            sentiment_score=signals.sentiment_score,
            growth_trend=metrics.growth_trend(feedback, now),
            confidence_score=metrics.confidence_score(completeness, signals.feedback_count),
            data_completeness=completeness,
            missing_facets=missing,
            last_computed_at=now,
        )
