import json
import random
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from viralfinder.core.analysis import ContentAnalyzer  # noqa: E402
from viralfinder.core.database import InMemoryRecordStore  # noqa: E402
from viralfinder.core.exceptions import RecordStoreOperationError  # noqa: E402
from viralfinder.core.metrics_collector import MetricsCollector  # noqa: E402
from viralfinder.core.models import SearchStatus, ViralImage  # noqa: E402
from viralfinder.core.orchestrator import SearchOrchestrator  # noqa: E402
from viralfinder.core.sources import build_default_registry  # noqa: E402


def llm_reply(payload: Any, prose: str = "Here is my analysis:") -> Dict[str, Any]:
    """Chat completion dict whose content wraps payload in prose."""
    content = payload if isinstance(payload, str) else f"{prose}\n{json.dumps(payload)}\nHope this helps."
    return {"choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}]}


DEFAULT_ANALYSIS = {
    "estimated_likes": 500,
    "estimated_comments": 40,
    "estimated_shares": 12,
    "estimated_views": 8000,
    "estimated_followers": 2500,
    "engagement_score": 20,
    "content_quality": 50,
    "viral_factors": ["warm lighting"],
    "suggested_title": "Latte art at dawn",
    "description": "A barista pours a rosetta",
    "author": "ai_guess",
    "hashtags": ["coffee"],
}


class FakeLLMClient:
    """Stands in for OpenRouterClient.chat_completion."""

    def __init__(self, responses: Optional[List[Any]] = None, error: Optional[Exception] = None) -> None:
        self.responses = list(responses or [])
        self.error = error
        self.calls: List[List[Dict[str, str]]] = []

    def chat_completion(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        if self.responses:
            response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
            if isinstance(response, Exception):
                raise response
            return response
        return llm_reply(DEFAULT_ANALYSIS)


class FakeApifyClient:
    def __init__(self, items: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None) -> None:
        self.items = items or []
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def scrape_hashtag(self, hashtag: str, limit: int) -> List[Dict[str, Any]]:
        self.calls.append({"hashtag": hashtag, "limit": limit})
        if self.error is not None:
            raise self.error
        return list(self.items)


class FakeSerperClient:
    def __init__(self, images: Optional[List[Dict[str, Any]]] = None,
                 organic: Optional[List[Dict[str, Any]]] = None,
                 error: Optional[Exception] = None) -> None:
        self.images = images or []
        self.organic = organic or []
        self.error = error
        self.image_calls: List[Dict[str, Any]] = []
        self.web_calls: List[Dict[str, Any]] = []

    def search_images(self, query: str, num: int) -> List[Dict[str, Any]]:
        self.image_calls.append({"query": query, "num": num})
        if self.error is not None:
            raise self.error
        return list(self.images)

    def search_web(self, query: str, num: int) -> List[Dict[str, Any]]:
        self.web_calls.append({"query": query, "num": num})
        if self.error is not None:
            raise self.error
        return list(self.organic)


class FlakyRecordStore(InMemoryRecordStore):
    """In-memory store with switchable failures."""

    def __init__(self, fail_create: bool = False, fail_finalize: bool = False,
                 fail_insert_urls: Optional[Set[str]] = None) -> None:
        super().__init__()
        self.fail_create = fail_create
        self.fail_finalize = fail_finalize
        self.fail_insert_urls = set(fail_insert_urls or [])
        self.insert_attempts: List[str] = []
        self.finalize_calls: List[Dict[str, Any]] = []

    def create_search(self, query: str):
        if self.fail_create:
            raise RecordStoreOperationError("insert", "viral_searches", ConnectionError("store unreachable"))
        return super().create_search(query)

    def finalize_search(self, search_id: int, status: SearchStatus, total_results: int = 0) -> None:
        self.finalize_calls.append({"search_id": search_id, "status": status, "total_results": total_results})
        if self.fail_finalize:
            raise RecordStoreOperationError("update", "viral_searches", ConnectionError("store unreachable"))
        super().finalize_search(search_id, status, total_results)

    def insert_image(self, image: ViralImage) -> ViralImage:
        self.insert_attempts.append(image.post_url)
        if image.post_url in self.fail_insert_urls:
            raise RecordStoreOperationError("insert", "viral_images", ConnectionError("write timeout"))
        return super().insert_image(image)


def instagram_item(short_code: str, likes: int = 0, comments: int = 0, views: int = 0,
                   owner: str = "", followers: int = 0, caption: str = "", **extra: Any) -> Dict[str, Any]:
    item = {
        "id": f"id-{short_code}",
        "shortCode": short_code,
        "displayUrl": f"https://cdn.example.com/{short_code}.jpg",
        "caption": caption,
        "likesCount": likes,
        "commentsCount": comments,
        "videoViewCount": views,
        "ownerUsername": owner,
        "ownerFollowersCount": followers,
        "timestamp": "2024-05-01T10:00:00Z",
    }
    item.update(extra)
    return item


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def fake_llm_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def flaky_store_factory() -> Callable[..., FlakyRecordStore]:
    return FlakyRecordStore


@pytest.fixture
def coffee_items() -> List[Dict[str, Any]]:
    """Three posts whose scores with DEFAULT_ANALYSIS are 80, 40 and 60."""
    return [
        instagram_item("AAA", likes=3000, comments=200, views=25000, owner="barista_anna", followers=90000),
        instagram_item("BBB", likes=2000, comments=150, owner="bean_bob", followers=1200),
        instagram_item("CCC", likes=3000, comments=100, views=15000, owner="cafe_carla", followers=45000),
    ]


@pytest.fixture
def orchestrator_factory(seeded_rng):
    def _factory(apify: Optional[FakeApifyClient] = None, serper: Optional[FakeSerperClient] = None,
                 llm: Optional[FakeLLMClient] = None, store: Optional[InMemoryRecordStore] = None,
                 max_workers: int = 1) -> SearchOrchestrator:
        registry = build_default_registry(apify_client=apify, serper_client=serper)
        return SearchOrchestrator(
            registry=registry,
            store=store if store is not None else InMemoryRecordStore(),
            analyzer=ContentAnalyzer(llm_client=llm, rng=seeded_rng),
            max_workers=max_workers,
            metrics=MetricsCollector(),
        )

    return _factory


CONFIG_VARS = [
    'APIFY_API_KEY', 'SERPER_API_KEY', 'OPENROUTER_API_KEY', 'OPENROUTER_MODEL',
    'RECORD_STORE', 'SUPABASE_URL', 'SUPABASE_SERVICE_KEY', 'SUPABASE_ANON_KEY', 'SUPABASE_DB_PASSWORD',
    'REQUEST_TIMEOUT', 'MAX_WORKERS', 'RECENT_SEARCHES_LIMIT', 'LLM_TEMPERATURE', 'LLM_MAX_TOKENS',
    'LOG_LEVEL', 'VERBOSE_LOGGING', 'ENVIRONMENT',
]


@pytest.fixture
def clean_env(monkeypatch):
    """Environment with none of the configuration variables set."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
