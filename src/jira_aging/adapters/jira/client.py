from __future__ import annotations

import logging
from typing import Optional

import httpx

from jira_aging.domain.models import IssuePage
from jira_aging.ports.cache import ResponseCache
from jira_aging.ports.issues import IssuePagePort

logger = logging.getLogger(__name__)


def cache_key(board_id: int, start_at: int) -> str:
    return f"board.{board_id}.issue.{start_at}.json"


class JiraClient(IssuePagePort):
    """HTTP client for the Jira Agile board issue API, reading through a response cache."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        cache: Optional[ResponseCache] = None,
        timeout: float = 30.0,
        verify: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.cache = cache
        self.client = httpx.Client(
            base_url=base_url,
            auth=(username, password),
            timeout=timeout,
            verify=verify,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info(f"Initialized JiraClient with base_url={base_url}, timeout={timeout}, verify={verify}")

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def fetch_page(self, board_id: int, start_at: int) -> IssuePage:
        key = cache_key(board_id, start_at)
        body = self.cache.get(key) if self.cache else None
        if body is None:
            body = self._download_page(board_id, start_at)
            if self.cache:
                self.cache.put(key, body)
        else:
            logger.info(f"Using cached page {key}")
        return IssuePage.model_validate_json(body)

    def _download_page(self, board_id: int, start_at: int) -> bytes:
        try:
            response = self.client.get(
                f"/rest/agile/1.0/board/{board_id}/issue",
                params={
                    "fields": "changelog",
                    "expand": "changelog",
                    "startAt": start_at,
                },
            )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout connecting to Jira API: {e}")
            raise ConnectionError(f"Timeout connecting to Jira API: {e}") from e
        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to Jira API: {e}")
            raise ConnectionError(f"Failed to connect to Jira API: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Unexpected error calling Jira API: {e}", exc_info=True)
            raise ConnectionError(f"Unexpected error calling Jira API: {e}") from e

        if response.status_code >= 300:
            logger.error(f"Jira API returned error status {response.status_code}: {response.text}")
            raise ConnectionError(f"Jira API error: HTTP response {response.status_code} {response.reason_phrase}")

        logger.info(f"Fetched board {board_id} issues starting at {start_at}")
        return response.content
