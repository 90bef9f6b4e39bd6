#!/usr/bin/env python3
"""
End-to-end pipeline tests with fake providers and the in-memory store.
"""

import threading

import pytest

from conftest import (
    DEFAULT_ANALYSIS, FakeApifyClient, FakeLLMClient, FakeSerperClient, FlakyRecordStore,
    instagram_item, llm_reply,
)
from viralfinder.core.exceptions import DiscoveryResponseError, SearchCancelledError, SearchFailedError
from viralfinder.core.models import Platform, SearchRequest, SearchStatus, UNKNOWN_AUTHOR
from viralfinder.core.orchestrator import per_platform_limit

INSTAGRAM_ONLY = ('instagram',)


def coffee_request(**overrides):
    payload = {'query': 'coffee', 'max_images': 2, 'min_engagement': 0, 'platforms': INSTAGRAM_ONLY}
    payload.update(overrides)
    return SearchRequest.from_dict(payload)


@pytest.mark.parametrize('max_images, platforms, expected', [
    (20, 2, 10),
    (5, 2, 3),
    (1, 2, 1),
    (7, 1, 7),
])
def test_per_platform_limit(max_images, platforms, expected):
    assert per_platform_limit(max_images, platforms) == expected


def test_keeps_highest_scores_in_descending_order(orchestrator_factory, coffee_items):
    store = FlakyRecordStore()
    apify = FakeApifyClient(coffee_items)
    orchestrator = orchestrator_factory(apify=apify, llm=FakeLLMClient(), store=store)

    results = orchestrator.run(coffee_request())

    assert [image.engagement_score for image in results.images] == [80, 60]
    assert [image.post_url for image in results.images] == [
        'https://instagram.com/p/AAA',
        'https://instagram.com/p/CCC',
    ]
    assert results.search.status == SearchStatus.COMPLETED
    assert results.search.total_results == 2
    assert store.get_search(results.search.id).total_results == 2
    assert len(store.list_images_by_search(results.search.id)) == 2
    assert apify.calls == [{'hashtag': 'coffee', 'limit': 2}]


def test_real_metrics_win_over_estimates(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient())

    top = orchestrator.run(coffee_request()).images[0]

    assert top.likes_estimate == 3000
    assert top.comments_estimate == 200
    assert top.views_estimate == 25000
    # No share counter from the scraper
    assert top.shares_estimate == DEFAULT_ANALYSIS['estimated_shares']
    assert top.author == 'barista_anna'
    assert top.author_followers == 90000
    assert top.id is not None


def test_summary_reflects_persisted_images(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient())

    summary = orchestrator.run(coffee_request()).summary

    assert summary.total_images == 2
    assert summary.avg_engagement == 70.0
    assert summary.platform_distribution == {'instagram': 2}
    assert [a.author for a in summary.top_authors] == ['barista_anna', 'cafe_carla']


def test_discovery_failure_completes_with_no_results(orchestrator_factory):
    store = FlakyRecordStore()
    orchestrator = orchestrator_factory(
        apify=FakeApifyClient(error=DiscoveryResponseError('Apify', 500)),
        serper=FakeSerperClient(error=DiscoveryResponseError('Serper', 500)),
        llm=FakeLLMClient(),
        store=store,
    )

    results = orchestrator.run(coffee_request())

    assert results.images == []
    assert results.summary.total_images == 0
    assert results.search.status == SearchStatus.COMPLETED
    assert results.search.total_results == 0
    assert store.get_search(results.search.id).status == SearchStatus.COMPLETED


def test_missing_analysis_provider_still_scores_every_candidate(orchestrator_factory):
    # No counters at all: the score is the AI term of the fallback, 30-70 * 0.25
    items = [instagram_item(f'P{i}') for i in range(4)]
    orchestrator = orchestrator_factory(apify=FakeApifyClient(items), llm=None)

    results = orchestrator.run(coffee_request(max_images=10))

    assert len(results.images) == 4
    for image in results.images:
        assert 8 <= image.engagement_score <= 18
        assert image.author == UNKNOWN_AUTHOR


def test_fallback_engagement_feeds_the_score(orchestrator_factory):
    items = [instagram_item('HOT', likes=3000, comments=200, views=25000)]
    orchestrator = orchestrator_factory(apify=FakeApifyClient(items), llm=None)

    image = orchestrator.run(coffee_request()).images[0]

    # 75 from capped counters plus 30-70 * 0.25
    assert 83 <= image.engagement_score <= 93


def test_min_engagement_filters_before_ranking(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient())

    results = orchestrator.run(coffee_request(max_images=3, min_engagement=61))

    assert [image.engagement_score for image in results.images] == [80]
    assert results.search.total_results == 1


def test_nothing_passes_filter(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient())

    results = orchestrator.run(coffee_request(min_engagement=99))

    assert results.images == []
    assert results.search.status == SearchStatus.COMPLETED


def test_failed_insert_is_backfilled_by_next_ranked(orchestrator_factory, coffee_items):
    store = FlakyRecordStore(fail_insert_urls={'https://instagram.com/p/AAA'})
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient(), store=store)

    results = orchestrator.run(coffee_request())

    assert [image.engagement_score for image in results.images] == [60, 40]
    assert results.search.total_results == 2
    assert store.insert_attempts == [
        'https://instagram.com/p/AAA',
        'https://instagram.com/p/CCC',
        'https://instagram.com/p/BBB',
    ]


def test_processing_error_skips_only_that_candidate(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient())
    real_score = orchestrator.scorer.score

    def flaky_score(metrics, analysis):
        if metrics.likes == 2000:
            raise ValueError('bad candidate')
        return real_score(metrics, analysis)

    orchestrator.scorer.score = flaky_score
    results = orchestrator.run(coffee_request(max_images=3))

    assert [image.engagement_score for image in results.images] == [80, 60]
    assert orchestrator.last_run_metrics.stats['candidates_skipped'] == 1


def test_record_creation_failure_aborts(orchestrator_factory, coffee_items):
    apify = FakeApifyClient(coffee_items)
    orchestrator = orchestrator_factory(apify=apify, store=FlakyRecordStore(fail_create=True))

    with pytest.raises(SearchFailedError) as exc_info:
        orchestrator.run(coffee_request())

    payload = exc_info.value.to_payload()
    assert payload['error'] == 'Failed to find viral content'
    assert payload['search_id'] is None
    assert 'insert' in payload['details']
    assert len(payload['suggestions']) == 3
    assert exc_info.value.status_code == 500
    assert apify.calls == []


def test_unexpected_failure_marks_search_failed(orchestrator_factory, coffee_items):
    store = FlakyRecordStore()
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient(), store=store)

    def broken_filter(outcomes, min_engagement):
        raise RuntimeError('filter exploded')

    orchestrator._filter_accepted = broken_filter

    with pytest.raises(SearchFailedError) as exc_info:
        orchestrator.run(coffee_request())

    search_id = exc_info.value.search_id
    assert search_id is not None
    assert store.get_search(search_id).status == SearchStatus.FAILED
    assert store.list_images_by_search(search_id) == []


def test_finalize_failure_is_not_fatal(orchestrator_factory, coffee_items):
    store = FlakyRecordStore(fail_finalize=True)
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient(), store=store)

    results = orchestrator.run(coffee_request())

    assert len(results.images) == 2
    assert store.finalize_calls[0]['status'] == SearchStatus.COMPLETED
    # The store never recorded the transition
    assert results.search.status == SearchStatus.PROCESSING


def test_cancelled_search_is_marked_failed(orchestrator_factory, coffee_items):
    store = FlakyRecordStore()
    apify = FakeApifyClient(coffee_items)
    orchestrator = orchestrator_factory(apify=apify, llm=FakeLLMClient(), store=store)
    cancel_event = threading.Event()
    cancel_event.set()

    with pytest.raises(SearchCancelledError):
        orchestrator.run(coffee_request(), cancel_event=cancel_event)

    record = store.list_recent_searches(1)[0]
    assert record.status == SearchStatus.FAILED
    assert store.list_images_by_search(record.id) == []
    assert apify.calls == []
    assert orchestrator.last_run_metrics.success is False


def test_cancel_during_analysis_stops_remaining_candidates(orchestrator_factory, coffee_items):
    store = FlakyRecordStore()
    cancel_event = threading.Event()

    class CancellingLLM(FakeLLMClient):
        def chat_completion(self, messages):
            cancel_event.set()
            return super().chat_completion(messages)

    llm = CancellingLLM()
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=llm, store=store)

    with pytest.raises(SearchCancelledError):
        orchestrator.run(coffee_request(max_images=3), cancel_event=cancel_event)

    assert len(llm.calls) == 1
    assert store.insert_attempts == []
    assert store.list_recent_searches(1)[0].status == SearchStatus.FAILED


@pytest.mark.parametrize('workers', [1, 3])
def test_interrupted_search_is_marked_failed(orchestrator_factory, coffee_items, workers):
    store = FlakyRecordStore()
    orchestrator = orchestrator_factory(apify=FakeApifyClient(coffee_items), llm=FakeLLMClient(error=KeyboardInterrupt()),
                                        store=store, max_workers=workers)

    with pytest.raises(KeyboardInterrupt):
        orchestrator.run(coffee_request(max_images=3))

    record = store.list_recent_searches(1)[0]
    assert record.status == SearchStatus.FAILED
    assert record.completed_at is not None
    assert [call['status'] for call in store.finalize_calls] == [SearchStatus.FAILED]
    assert store.insert_attempts == []
    assert orchestrator.last_run_metrics.success is False


def test_parallel_run_matches_sequential(orchestrator_factory, coffee_items):
    facebook_hits = [{'title': f'fb {i}', 'link': f'https://facebook.com/p/{i}', 'snippet': 's'} for i in range(3)]

    def run(workers):
        orchestrator = orchestrator_factory(
            apify=FakeApifyClient(coffee_items),
            serper=FakeSerperClient(organic=facebook_hits),
            llm=FakeLLMClient(),
            max_workers=workers,
        )
        results = orchestrator.run(SearchRequest(query='coffee', max_images=6))
        return [(image.post_url, image.engagement_score) for image in results.images]

    assert run(1) == run(4)


def test_both_platforms_are_searched(orchestrator_factory, coffee_items):
    serper = FakeSerperClient(organic=[{'title': 'fb', 'link': 'https://facebook.com/p/1', 'snippet': 's'}])
    apify = FakeApifyClient(coffee_items)
    orchestrator = orchestrator_factory(apify=apify, serper=serper, llm=FakeLLMClient())

    results = orchestrator.run(SearchRequest(query='iced coffee', max_images=5))

    assert apify.calls == [{'hashtag': 'icedcoffee', 'limit': 3}]
    assert serper.web_calls[0]['num'] == 3
    assert results.summary.platform_distribution == {'instagram': 3, 'facebook': 1}
    facebook = [image for image in results.images if image.platform == Platform.FACEBOOK][0]
    # Web results carry no counters: AI estimates fill every field
    assert facebook.likes_estimate == DEFAULT_ANALYSIS['estimated_likes']
    assert facebook.author == 'ai_guess'
    assert facebook.engagement_score == 5


def test_run_metrics_are_recorded(orchestrator_factory, coffee_items):
    orchestrator = orchestrator_factory(
        apify=FakeApifyClient(coffee_items),
        llm=FakeLLMClient([llm_reply(DEFAULT_ANALYSIS)]),
    )

    orchestrator.run(coffee_request(min_engagement=50))
    run_metrics = orchestrator.last_run_metrics

    assert run_metrics.success is True
    assert run_metrics.stats['candidates_examined'] == 3
    assert run_metrics.stats['images_accepted'] == 2
    assert run_metrics.stats['images_persisted'] == 2
    assert run_metrics.stats['candidates_skipped'] == 1
    assert len(run_metrics.operation_durations('discovery.')) == 1
    assert len(run_metrics.operation_durations('analysis.')) == 3
