"""HTTP Span Source — fetches an article's manipulation spans from the transparency API.

Invariants:
    - Every request is bounded by timeout_seconds
    - Timeouts map to SpanSourceTimeoutError; every other transport or HTTP
      failure maps to SpanSourceError (core/errors.py)
    - No retries here: the span cache retries on the story's next session
    - Returned spans are raw dicts; normalization belongs to core/span_summary.py

Design Decisions:
    - Wrapper over raw httpx client: isolates error mapping from the cache
    - Client injectable for tests (httpx.MockTransport)
"""

import logging

import httpx

from ntrl_stats.core.domain_types import StoryId
from ntrl_stats.core.errors import (
    ErrorContext, SpanSourceError, SpanSourceTimeoutError,
)

logger = logging.getLogger(__name__)


class HttpSpanSource:
    """SpanSource backed by GET /v1/stories/{story_id}/transparency."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )

    async def fetch_spans(self, story_id: StoryId) -> list[dict]:
        """Fetch raw spans for one story."""
        context = ErrorContext(story_id=story_id)
        try:
            response = await self.client.get(f"/v1/stories/{story_id}/transparency")
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            raise SpanSourceTimeoutError(self.timeout_seconds, context=context)
        except httpx.HTTPStatusError as e:
            raise SpanSourceError(
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                context=context,
            )
        except httpx.HTTPError as e:
            raise SpanSourceError(f"Transport error: {e}", context=context)
        except ValueError:
            raise SpanSourceError("Response body is not JSON", context=context)

        spans = payload.get("spans") if isinstance(payload, dict) else None
        if not isinstance(spans, list):
            raise SpanSourceError("Response has no 'spans' list", context=context)
        logger.debug(
            f"Fetched {len(spans)} spans", extra={"story_id": story_id},
        )
        return spans

    async def aclose(self) -> None:
        await self.client.aclose()
