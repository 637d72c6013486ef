"""HttpSource: fetches translation documents over HTTP.

Documents are served as static JSON, one file per language, at
``{base_url}/locales/{language}/translation.json`` by default (the layout
i18next's HTTP backend uses).

Transport errors and 5xx responses are retried with jittered exponential
backoff via ``tenacity``; anything still failing, any other non-2xx status,
and bodies that are not JSON objects/arrays are reported as ``FetchError``.

Example::

    source = HttpSource("https://example.com")
    doc = await source.fetch("sv")
    await source.aclose()
"""

from __future__ import annotations

from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from locale_editor.exceptions import FetchError
from locale_editor.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(
    connect=5.0,
    read=30.0,
    write=10.0,
    pool=5.0,
)

DEFAULT_PATH_TEMPLATE = "/locales/{language}/translation.json"


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


class HttpSource:
    """DocumentSource that GETs one JSON document per language.

    Args:
        base_url:      Origin the documents are served from.
        path_template: Path relative to ``base_url``; ``{language}`` is
                       substituted.
        client:        Optional pre-configured ``httpx.AsyncClient``.  When
                       omitted, the source creates and owns one.
        max_attempts:  Total attempts per fetch, including the first.
        max_wait:      Upper bound, in seconds, for one backoff sleep.
    """

    def __init__(
        self,
        base_url: str,
        path_template: str = DEFAULT_PATH_TEMPLATE,
        client: httpx.AsyncClient | None = None,
        max_attempts: int = 3,
        max_wait: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._path_template = path_template
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=DEFAULT_TIMEOUT, follow_redirects=True
        )
        self._max_attempts = max_attempts
        self._max_wait = max_wait

    def __repr__(self) -> str:
        return f"HttpSource(base_url={self._base_url!r})"

    def url_for(self, language: str) -> str:
        return self._base_url + self._path_template.format(language=language)

    async def fetch(self, language: str) -> Any:
        """Fetch and decode the document for ``language``.

        Raises:
            FetchError: On any transport, status or decoding failure.
        """
        url = self.url_for(language)
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(_is_retryable),
                wait=wait_random_exponential(max=self._max_wait),
                stop=stop_after_attempt(self._max_attempts),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.get(url)
                    response.raise_for_status()
        except (httpx.HTTPError, RetryError) as exc:
            logger.warning("locale_fetch_failed", language=language, url=url, error=str(exc))
            raise FetchError(language, "Failed to load translation file") from exc

        try:
            document = response.json()
        except ValueError as exc:
            raise FetchError(language, "translation file is not valid JSON") from exc
        if not isinstance(document, (dict, list)):
            raise FetchError(language, "translation file must hold an object or array")
        return document

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
