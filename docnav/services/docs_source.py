"""HTTP access to the documentation manifests.

The manifests live on one branch of a GitHub repository, one ``<tag>.json``
file per version. The tree listing of that branch is the source of truth for
which versions exist.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..config import settings as default_settings
from ..exceptions import NetworkFetchFailure
from ..models.registry import GitTreeResponse

logger = logging.getLogger(__name__)


class DocsSourceClient:
    """Fetches tree listings and manifests with timeouts and retries.

    An injected ``httpx.AsyncClient`` is used as is and never closed here;
    otherwise a client is created on first use and closed by ``aclose``.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or default_settings
        self._client = client
        self._owns_client = client is None
        self._closed = False

    @property
    def tree_url(self) -> str:
        s = self.settings
        return f"{s.github_api_url.rstrip('/')}/repos/{s.manifest_repo}/git/trees/{s.manifest_branch}"

    def document_url(self, tag: str) -> str:
        s = self.settings
        return (
            f"{s.raw_base_url.rstrip('/')}/{s.manifest_repo}/{s.manifest_branch}/"
            f"{s.docs_prefix}{tag}{s.document_extension}"
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._closed:
            raise NetworkFetchFailure("Docs source is closed")
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.settings.github_token:
                headers["Authorization"] = f"Bearer {self.settings.github_token}"
            self._client = httpx.AsyncClient(
                timeout=self.settings.fetch_timeout_seconds,
                headers=headers,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close an owned client; later fetches fail instead of opening a new one."""
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_tree(self) -> GitTreeResponse:
        """Fetch the tree listing of the manifest branch.

        Raises:
            NetworkFetchFailure: On transport errors, non-success statuses or an
                unexpected payload.
        """
        params = {"recursive": "1"} if self.settings.docs_folder else None
        payload = await self._get_json(self.tree_url, params=params)
        try:
            tree = GitTreeResponse.model_validate(payload)
        except ValidationError as e:
            raise NetworkFetchFailure(f"Unexpected tree listing payload: {e}", url=self.tree_url) from e

        if tree.truncated:
            logger.warning(f"Tree listing for {self.tree_url} was truncated by the API")
        return tree

    async def fetch_document(self, tag: str) -> dict[str, Any]:
        """Fetch the raw manifest for one version tag.

        Raises:
            NetworkFetchFailure: On transport errors, non-success statuses or a
                payload that is not a JSON object.
        """
        url = self.document_url(tag)
        payload = await self._get_json(url)
        if not isinstance(payload, dict):
            raise NetworkFetchFailure(
                f"Manifest for {tag} is not a JSON object ({type(payload).__name__})", url=url
            )
        return payload

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET ``url`` and decode JSON, retrying transient failures with backoff."""
        client = self._get_client()
        max_retries = self.settings.fetch_max_retries
        error_msg = ""
        status_code = None

        for attempt in range(1, max_retries + 1):
            try:
                response = await client.get(url, params=params, timeout=self.settings.fetch_timeout_seconds)
            except httpx.TimeoutException:
                error_msg = "Request timeout"
                logger.warning(f"Fetch timeout for {url} (attempt {attempt}/{max_retries})")
            except httpx.RequestError as e:
                error_msg = f"Request error: {e}"
                logger.warning(f"Fetch error for {url} (attempt {attempt}/{max_retries}): {e}")
            else:
                status_code = response.status_code
                if 200 <= status_code < 300:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise NetworkFetchFailure(
                            f"Invalid JSON from {url}", url=url, status_code=status_code
                        ) from e

                error_msg = f"HTTP {status_code}: {response.text[:200]}"
                if status_code < 500:
                    # Client errors will not go away by retrying
                    raise NetworkFetchFailure(error_msg, url=url, status_code=status_code)
                logger.warning(f"Fetch failed for {url} (attempt {attempt}/{max_retries}): {error_msg}")

            if attempt < max_retries:
                delay = self.settings.fetch_retry_delay_seconds * (2 ** (attempt - 1))
                await asyncio.sleep(delay)

        logger.error(f"Giving up on {url} after {max_retries} attempts: {error_msg}")
        raise NetworkFetchFailure(error_msg, url=url, status_code=status_code)
