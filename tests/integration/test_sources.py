#!/usr/bin/env python3
"""
Tests for platform discovery sources and the source registry.
"""

import pytest

from conftest import FakeApifyClient, FakeSerperClient, instagram_item
from viralfinder.core.exceptions import DiscoveryConnectionError, DiscoveryResponseError
from viralfinder.core.models import Platform
from viralfinder.core.sources import (
    ContentSource, FacebookSource, InstagramSource, SourceMetadata, SourceRegistry, build_default_registry,
)
from viralfinder.core.sources.facebook import DEFAULT_IMAGE_URL
from viralfinder.core.sources.instagram import hashtag_from_query

SERPER_IMAGES = [
    {'title': 'Coffee post', 'imageUrl': 'https://img.example.com/1.jpg', 'link': 'https://instagram.com/p/one'},
    {'title': 'Another', 'imageUrl': 'https://img.example.com/2.jpg', 'link': 'https://instagram.com/p/two'},
]

SERPER_ORGANIC = [
    {'title': 'Viral coffee video', 'link': 'https://facebook.com/post/1', 'snippet': '2M views'},
    {'title': 'Cafe page', 'link': 'https://facebook.com/post/2', 'snippet': 'Popular', 'thumbnail': 'https://t.example.com/2.jpg'},
]


def test_hashtag_from_query_strips_whitespace():
    assert hashtag_from_query('street food  \tlisbon') == 'streetfoodlisbon'
    assert hashtag_from_query('coffee') == 'coffee'


class TestInstagramSource:
    def test_apify_candidates(self):
        apify = FakeApifyClient([instagram_item('XYZ', likes=10, caption='Morning #coffee')])
        source = InstagramSource(apify_client=apify)

        candidates = source.discover('morning coffee', 5)

        assert apify.calls == [{'hashtag': 'morningcoffee', 'limit': 5}]
        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.post_url == 'https://instagram.com/p/XYZ'
        assert candidate.image_url == 'https://cdn.example.com/XYZ.jpg'
        assert candidate.title == 'Morning #coffee'
        assert candidate.raw.platform == Platform.INSTAGRAM
        assert candidate.raw.get('likesCount') == 10

    def test_long_caption_truncated_for_title(self):
        caption = 'x' * 250
        source = InstagramSource(apify_client=FakeApifyClient([instagram_item('L', caption=caption)]))

        candidate = source.discover('coffee', 1)[0]

        assert len(candidate.title) == 100
        assert candidate.description == caption

    @pytest.mark.parametrize('error', [
        DiscoveryResponseError('Apify', 402, 'payment required'),
        DiscoveryConnectionError('Apify', 'https://api.apify.com', ConnectionError('reset')),
    ])
    def test_apify_failure_falls_back_to_serper(self, error):
        serper = FakeSerperClient(images=SERPER_IMAGES)
        source = InstagramSource(apify_client=FakeApifyClient(error=error), serper_client=serper)

        candidates = source.discover('coffee', 2)

        assert [c.id for c in candidates] == ['ig_serper_0', 'ig_serper_1']
        assert all(c.raw is None for c in candidates)
        assert candidates[0].image_url == 'https://img.example.com/1.jpg'
        assert serper.image_calls == [{'query': 'site:instagram.com "coffee" viral popular', 'num': 2}]

    def test_unexpected_apify_error_falls_back_to_serper(self, caplog):
        serper = FakeSerperClient(images=SERPER_IMAGES)
        source = InstagramSource(apify_client=FakeApifyClient(error=RuntimeError('bad payload')),
                                 serper_client=serper)

        candidates = source.discover('coffee', 2)

        assert [c.id for c in candidates] == ['ig_serper_0', 'ig_serper_1']
        assert len(serper.image_calls) == 1
        assert 'bad payload' in caplog.text

    def test_malformed_apify_item_falls_back_to_serper(self):
        serper = FakeSerperClient(images=SERPER_IMAGES)
        source = InstagramSource(apify_client=FakeApifyClient(['not a dict']), serper_client=serper)

        candidates = source.discover('coffee', 2)

        assert len(candidates) == 2
        assert all(c.raw is None for c in candidates)

    def test_missing_apify_key_goes_straight_to_serper(self):
        serper = FakeSerperClient(images=SERPER_IMAGES)
        candidates = InstagramSource(serper_client=serper).discover('coffee', 2)
        assert len(candidates) == 2

    def test_both_methods_failing_returns_empty(self):
        source = InstagramSource(
            apify_client=FakeApifyClient(error=DiscoveryResponseError('Apify', 500)),
            serper_client=FakeSerperClient(error=DiscoveryResponseError('Serper', 503)),
        )
        assert source.discover('coffee', 3) == []

    def test_nothing_configured_returns_empty(self):
        assert InstagramSource().discover('coffee', 3) == []

    def test_health_and_metadata(self):
        source = InstagramSource(serper_client=FakeSerperClient())

        assert source.health_check() == {
            'available': True,
            'primary_configured': False,
            'fallback_configured': True,
        }
        metadata = source.get_metadata()
        assert isinstance(metadata, SourceMetadata)
        assert metadata.fallback_method == 'serper_image_search'


class TestFacebookSource:
    def test_web_results_become_candidates(self):
        serper = FakeSerperClient(organic=SERPER_ORGANIC)

        candidates = FacebookSource(serper_client=serper).discover('coffee', 2)

        assert serper.web_calls == [{'query': 'site:facebook.com "coffee" viral popular engagement', 'num': 2}]
        assert [c.id for c in candidates] == ['fb_0', 'fb_1']
        assert candidates[0].image_url == DEFAULT_IMAGE_URL
        assert candidates[1].image_url == 'https://t.example.com/2.jpg'
        assert candidates[0].description == '2M views'
        assert candidates[0].raw.platform == Platform.FACEBOOK

    def test_failure_returns_empty_without_secondary_lookup(self):
        serper = FakeSerperClient(error=DiscoveryResponseError('Serper', 500), images=SERPER_IMAGES)

        assert FacebookSource(serper_client=serper).discover('coffee', 2) == []
        assert serper.image_calls == []

    def test_unconfigured_returns_empty(self):
        source = FacebookSource()
        assert source.discover('coffee', 2) == []
        assert source.health_check()['available'] is False


class ExplodingSource(ContentSource):
    platform = Platform.FACEBOOK

    def discover(self, query, limit):
        raise RuntimeError('parser bug')

    def get_metadata(self):
        return SourceMetadata(platform=self.platform, display_name='Exploding', primary_method='none')

    def health_check(self):
        return {'available': True}


class TestSourceRegistry:
    def test_default_registry_has_both_platforms(self):
        registry = build_default_registry()
        assert set(registry.list_available_sources()) == {Platform.INSTAGRAM, Platform.FACEBOOK}
        assert set(registry.health_check()) == {'instagram', 'facebook'}

    def test_unknown_platform_raises_on_lookup(self):
        with pytest.raises(KeyError):
            SourceRegistry().get_source(Platform.INSTAGRAM)

    def test_discover_never_raises(self):
        registry = SourceRegistry()
        registry.register_source(ExplodingSource())

        assert registry.discover('coffee', Platform.FACEBOOK, 3) == []
        assert registry.discover('coffee', Platform.INSTAGRAM, 3) == []
