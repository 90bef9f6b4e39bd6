#!/usr/bin/env python3
"""
Search orchestration pipeline.

Drives one search end to end:
1. Create the search record (processing)
2. Discover candidates per platform
3. Extract metrics, analyze and score each candidate
4. Filter by minimum engagement, rank, persist up to max_images
5. Finalize the record and summarize

Per-platform and per-candidate failures are contained where they happen;
only structural failures (such as the record store refusing the initial
create) abort the search.
"""

import math
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .analysis import ContentAnalyzer
from .database import RecordStore
from .exceptions import SearchCancelledError, SearchFailedError
from .extraction import MetricsExtractor
from .metrics_collector import MetricsCollector, RunMetrics
from .models import (
    AIAnalysis, Candidate, CandidateOutcome, DEFAULT_AUTHOR, DEFAULT_TITLE, NormalizedMetrics,
    Platform, SearchRecord, SearchRequest, SearchResults, SearchStatus, SkipReason, ViralImage,
)
from .scoring import ScoreCalculator
from .sources import SourceRegistry
from .summary import SummaryAggregator

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

MAX_WORKERS_LIMIT = 16


def per_platform_limit(max_images: int, platform_count: int) -> int:
    """Candidates requested from each platform."""
    return math.ceil(max_images / max(platform_count, 1))


class SearchOrchestrator:
    """Runs the discovery, analysis, scoring and persistence pipeline."""

    def __init__(self,
                 registry: SourceRegistry,
                 store: RecordStore,
                 analyzer: ContentAnalyzer,
                 extractor: Optional[MetricsExtractor] = None,
                 scorer: Optional[ScoreCalculator] = None,
                 aggregator: Optional[SummaryAggregator] = None,
                 max_workers: int = 1,
                 metrics: Optional[MetricsCollector] = None) -> None:
        """
        Initialize orchestrator.

        Args:
            registry: Platform discovery dispatch
            store: Record store for searches and images
            analyzer: Content analyzer (real or fallback analysis)
            extractor: Metrics extractor
            scorer: Engagement score calculator
            aggregator: Summary aggregator
            max_workers: 1 runs sequentially; more fans out platforms and candidates
            metrics: Timing and counter collector
        """
        self.registry = registry
        self.store = store
        self.analyzer = analyzer
        self.extractor = extractor or MetricsExtractor()
        self.scorer = scorer or ScoreCalculator()
        self.aggregator = aggregator or SummaryAggregator()
        self.max_workers = max(1, min(int(max_workers), MAX_WORKERS_LIMIT))
        self.metrics = metrics or MetricsCollector()
        self.last_run_metrics: Optional[RunMetrics] = None

    def run(self, request: SearchRequest, cancel_event: Optional[threading.Event] = None) -> SearchResults:
        """
        Execute a search.

        Args:
            request: Validated search request
            cancel_event: Optional signal; once set, no further platforms or
                candidates are processed

        Returns:
            SearchResults with the persisted images, highest score first

        Raises:
            SearchCancelledError: The cancel event was set; the record is marked failed
            SearchFailedError: A structural failure aborted the search
        """
        try:
            record = self.store.create_search(request.query)
        except Exception as e:
            logger.error(f"Failed to create search record for {request.query!r}: {e}")
            raise SearchFailedError(e) from e

        logger.info(
            f"Search {record.id} started: query={request.query!r}, "
            f"platforms={[p.value for p in request.platforms]}, max_images={request.max_images}, "
            f"min_engagement={request.min_engagement}"
        )
        self.metrics.start_run(f"search-{record.id}")

        try:
            outcomes = self._collect_outcomes(request, record.id, cancel_event)
            self._check_cancelled(cancel_event, record.id)

            accepted = self._filter_accepted(outcomes, request.min_engagement)
            persisted = self._persist_ranked(accepted, request.max_images)
        except SearchCancelledError:
            logger.warning(f"Search {record.id} cancelled")
            self._finalize(record, SearchStatus.FAILED, 0)
            self.last_run_metrics = self.metrics.end_run(success=False)
            raise
        except Exception as e:
            logger.error(f"Search {record.id} failed: {e}", exc_info=True)
            self._finalize(record, SearchStatus.FAILED, 0)
            self.last_run_metrics = self.metrics.end_run(success=False)
            raise SearchFailedError(e, record.id) from e
        except BaseException:
            # KeyboardInterrupt, SystemExit: still leave a terminal state behind
            logger.warning(f"Search {record.id} interrupted")
            self._finalize(record, SearchStatus.FAILED, 0)
            self.last_run_metrics = self.metrics.end_run(success=False)
            raise

        self._finalize(record, SearchStatus.COMPLETED, len(persisted))
        summary = self.aggregator.summarize(persisted)
        self.last_run_metrics = self.metrics.end_run(success=True)

        logger.info(
            f"Search {record.id} completed: {len(persisted)} images, "
            f"avg engagement {summary.avg_engagement}"
        )
        return SearchResults(search=record, images=persisted, summary=summary)

    # Pipeline stages

    def _collect_outcomes(self, request: SearchRequest, search_id: int,
                          cancel_event: Optional[threading.Event]) -> List[CandidateOutcome]:
        limit = per_platform_limit(request.max_images, len(request.platforms))

        def discover(platform: Platform) -> List[Tuple[Platform, Candidate]]:
            self._check_cancelled(cancel_event, search_id)
            with self.metrics.time_operation(f"discovery.{platform.value}"):
                candidates = self.registry.discover(request.query, platform, limit)
            logger.info(f"Discovered {len(candidates)} {platform.value} candidates for search {search_id}")
            return [(platform, candidate) for candidate in candidates]

        discovered = [pair for batch in self._map(discover, request.platforms) for pair in batch]
        self.metrics.record_stat("candidates_examined", len(discovered))

        def process(pair: Tuple[Platform, Candidate]) -> CandidateOutcome:
            self._check_cancelled(cancel_event, search_id)
            platform, candidate = pair
            return self._process_candidate(search_id, platform, candidate)

        return self._map(process, discovered)

    def _process_candidate(self, search_id: int, platform: Platform, candidate: Candidate) -> CandidateOutcome:
        """Extract, analyze and score one candidate. Never raises."""
        try:
            with self.metrics.time_operation(f"analysis.{platform.value}"):
                metrics = self.extractor.extract(candidate.raw, platform)
                analysis = self.analyzer.analyze(candidate, platform)
                score = self.scorer.score(metrics, analysis)
                image = self._build_image(search_id, platform, candidate, metrics, analysis, score)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to analyze {platform.value} post {candidate.id}: {e}", exc_info=True)
            self.metrics.increment_stat("candidates_skipped")
            return CandidateOutcome.skipped(candidate.id, platform, SkipReason.PROCESSING_ERROR, str(e))

        logger.debug(f"Scored {platform.value} post {candidate.id}: {score}")
        return CandidateOutcome.scored(candidate.id, platform, image)

    @staticmethod
    def _build_image(search_id: int, platform: Platform, candidate: Candidate,
                     metrics: NormalizedMetrics, analysis: AIAnalysis, score: int) -> ViralImage:
        """Real metrics win field by field; AI estimates fill the gaps."""
        return ViralImage(
            search_id=search_id,
            image_url=candidate.image_url,
            post_url=candidate.post_url,
            platform=platform,
            engagement_score=score,
            title=candidate.title or analysis.suggested_title or DEFAULT_TITLE,
            description=candidate.description or analysis.description or "",
            views_estimate=metrics.views or analysis.estimated_views or 0,
            likes_estimate=metrics.likes or analysis.estimated_likes or 0,
            comments_estimate=metrics.comments or analysis.estimated_comments or 0,
            shares_estimate=metrics.shares or analysis.estimated_shares or 0,
            author=metrics.author or analysis.author or DEFAULT_AUTHOR,
            author_followers=metrics.author_followers or analysis.estimated_followers or 0,
            post_date=metrics.post_date,
            hashtags=metrics.hashtags,
        )

    def _filter_accepted(self, outcomes: Sequence[CandidateOutcome], min_engagement: float) -> List[ViralImage]:
        accepted: List[ViralImage] = []
        for outcome in outcomes:
            if not outcome.is_scored:
                continue
            if outcome.image.engagement_score >= min_engagement:
                accepted.append(outcome.image)
            else:
                logger.info(
                    f"Skipping {outcome.platform.value} post {outcome.candidate_id}: "
                    f"{SkipReason.LOW_ENGAGEMENT.value} ({outcome.image.engagement_score} < {min_engagement})"
                )
                self.metrics.increment_stat("candidates_skipped")

        self.metrics.record_stat("images_accepted", len(accepted))
        return accepted

    def _persist_ranked(self, accepted: Sequence[ViralImage], max_images: int) -> List[ViralImage]:
        """
        Persist in rank order until max_images are stored.

        An image whose insert fails is dropped and the next-ranked image takes
        its place, so the result count always equals the stored count.
        """
        ranked = sorted(accepted, key=lambda image: image.engagement_score, reverse=True)
        persisted: List[ViralImage] = []

        for image in ranked:
            if len(persisted) >= max_images:
                break
            try:
                persisted.append(self.store.insert_image(image))
            except Exception as e:  # noqa: BLE001
                logger.error(
                    f"Database error for {image.platform.value} post {image.post_url}: {e} "
                    f"({SkipReason.PERSISTENCE_ERROR.value})"
                )
                self.metrics.increment_stat("candidates_skipped")

        self.metrics.record_stat("images_persisted", len(persisted))
        return persisted

    def _finalize(self, record: SearchRecord, status: SearchStatus, total_results: int) -> None:
        """Best-effort terminal update; a store failure is logged, not raised."""
        try:
            self.store.finalize_search(record.id, status, total_results)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to mark search {record.id} as {status.value}: {e}")

        stored = self._reload(record.id)
        if stored is not None:
            record.status = stored.status
            record.total_results = stored.total_results
            record.updated_at = stored.updated_at
            record.completed_at = stored.completed_at
        else:
            record.status = status
            record.total_results = total_results

    def _reload(self, search_id: int) -> Optional[SearchRecord]:
        try:
            return self.store.get_search(search_id)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Could not reload search {search_id}: {e}")
            return None

    # Helpers

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], search_id: int) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelledError(search_id)

    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Apply func to items, in order, on the worker pool when configured."""
        if self.max_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="viralfinder") as executor:
            futures = [executor.submit(func, item) for item in items]
            try:
                return [future.result() for future in futures]
            except SearchCancelledError:
                for future in futures:
                    future.cancel()
                raise
