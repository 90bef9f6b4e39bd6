#!/usr/bin/env python3
"""
Tests for search request validation and model serialization.
"""

import json

import pytest

from viralfinder.core.exceptions import ValidationError
from viralfinder.core.models import (
    CandidateOutcome, Platform, SearchRecord, SearchRequest, SearchStatus, SkipReason, ViralImage,
)
from viralfinder.core.models.search import DEFAULT_MAX_IMAGES, MAX_IMAGES_LIMIT


def test_defaults():
    request = SearchRequest.from_dict({'query': '  coffee  '})

    assert request.query == 'coffee'
    assert request.max_images == DEFAULT_MAX_IMAGES
    assert request.min_engagement == 0
    assert request.platforms == (Platform.INSTAGRAM, Platform.FACEBOOK)


def test_platforms_are_deduplicated_in_order():
    request = SearchRequest(query='tea', platforms=['facebook', 'instagram', 'facebook'])
    assert request.platforms == (Platform.FACEBOOK, Platform.INSTAGRAM)


@pytest.mark.parametrize('payload, field', [
    ({'query': ''}, 'query'),
    ({'query': '   '}, 'query'),
    ({'query': 'x', 'max_images': 0}, 'max_images'),
    ({'query': 'x', 'max_images': MAX_IMAGES_LIMIT + 1}, 'max_images'),
    ({'query': 'x', 'max_images': '10'}, 'max_images'),
    ({'query': 'x', 'max_images': True}, 'max_images'),
    ({'query': 'x', 'min_engagement': -1}, 'min_engagement'),
    ({'query': 'x', 'platforms': ['tiktok']}, 'platforms'),
    ({'query': 'x', 'platforms': []}, 'platforms'),
])
def test_invalid_requests(payload, field):
    with pytest.raises(ValidationError) as exc_info:
        SearchRequest.from_dict(payload)

    assert exc_info.value.context['field'] == field


def test_request_to_dict():
    request = SearchRequest(query='coffee', max_images=5, min_engagement=10, platforms=('instagram',))
    assert request.to_dict() == {
        'query': 'coffee',
        'max_images': 5,
        'min_engagement': 10,
        'platforms': ['instagram'],
    }


def test_search_status_terminal():
    assert SearchStatus.COMPLETED.is_terminal
    assert SearchStatus.FAILED.is_terminal
    assert not SearchStatus.PROCESSING.is_terminal


def test_search_record_from_row():
    record = SearchRecord.from_dict({
        'id': '7',
        'query': 'coffee',
        'status': 'completed',
        'total_results': 3,
        'created_at': '2024-05-01T10:00:00+00:00',
        'completed_at': '2024-05-01T10:01:00+00:00',
    })

    assert record.id == 7
    assert record.status == SearchStatus.COMPLETED
    assert record.completed_at is not None
    assert record.updated_at is None


def test_viral_image_record_stores_hashtags_as_json_text():
    image = ViralImage(
        search_id=1, image_url='i', post_url='p', platform=Platform.INSTAGRAM,
        engagement_score=42, hashtags=frozenset({'b', 'a'}),
    )

    row = image.to_record()
    assert json.loads(row['hashtags']) == ['a', 'b']

    restored = ViralImage.from_dict(dict(row, id=3))
    assert restored.hashtags == frozenset({'a', 'b'})
    assert restored.id == 3
    assert image.to_dict()['hashtags'] == ['a', 'b']


def test_outcome_requires_exactly_one_side():
    image = ViralImage(search_id=1, image_url='i', post_url='p', platform=Platform.FACEBOOK, engagement_score=1)

    assert CandidateOutcome.scored('c1', Platform.FACEBOOK, image).is_scored
    assert not CandidateOutcome.skipped('c1', Platform.FACEBOOK, SkipReason.PROCESSING_ERROR).is_scored
    with pytest.raises(ValueError):
        CandidateOutcome(candidate_id='c1', platform=Platform.FACEBOOK)
