"""GitHub contents API document store."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from app.errors import Conflict, StoreUnavailable
from app.store.base import Snapshot
from app.utils.retry import retry_async

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
CONFLICT_STATUSES = {409, 422}
RAW_MEDIA_TYPE = "application/vnd.github.raw"


class GitHubContentStore:
    """Documents stored as files in a repository branch.

    The revision tag is the blob sha; GitHub rejects a PUT whose sha no
    longer matches the file, which gives us the conditional write.
    """

    def __init__(
        self,
        token: str,
        repo: str,
        *,
        branch: str = "main",
        directory: str = "data",
        api_url: str = GITHUB_API_URL,
        timeout: float = 15.0,
        retry_delay: float = 1.0,
        session: httpx.AsyncClient | None = None,
    ) -> None:
        self.repo = repo
        self.branch = branch
        self.directory = directory.strip("/")
        self.retry_delay = retry_delay
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "SneakerCatalog/1.0",
        }
        self.session = session or httpx.AsyncClient(base_url=api_url, timeout=timeout, headers=headers)
        self._owns_session = session is None

    async def close(self) -> None:
        if self._owns_session:
            await self.session.aclose()

    def path_for(self, name: str) -> str:
        filename = f"{name}.json"
        return f"{self.directory}/{filename}" if self.directory else filename

    def _url(self, name: str) -> str:
        return f"/repos/{self.repo}/contents/{self.path_for(name)}"

    async def read(self, name: str) -> Snapshot:
        get = retry_async(self.session.get, base_delay=self.retry_delay)
        try:
            response = await get(self._url(name), params={"ref": self.branch})
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"GitHub read of {name} failed: {exc}") from exc
        if response.status_code == 404:
            logger.info("Document %s not found on %s@%s", name, self.repo, self.branch)
            return Snapshot(content=None, revision=None)
        _raise_for_status(response, name)
        data = response.json()
        if data.get("encoding") == "none":
            content = await self._read_blob(name, data["sha"])
        else:
            content = base64.b64decode(data.get("content") or "")
        return Snapshot(content=content, revision=data.get("sha"))

    async def _read_blob(self, name: str, sha: str) -> bytes:
        # Files over 1 MB come back without inline content; fetch the same blob raw.
        get = retry_async(self.session.get, base_delay=self.retry_delay)
        try:
            response = await get(f"/repos/{self.repo}/git/blobs/{sha}", headers={"Accept": RAW_MEDIA_TYPE})
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"GitHub blob read of {name} failed: {exc}") from exc
        _raise_for_status(response, name)
        return response.content

    async def write(self, name: str, content: bytes, expected_revision: str | None) -> str | None:
        payload: dict[str, Any] = {
            "message": f"Update {name}",
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self.branch,
        }
        if expected_revision:
            payload["sha"] = expected_revision
        try:
            response = await self.session.put(self._url(name), json=payload)
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"GitHub write of {name} failed: {exc}") from exc
        if response.status_code in CONFLICT_STATUSES:
            logger.warning("Revision mismatch writing %s (expected %s)", name, expected_revision)
            raise Conflict(f"Document {name!r} changed since it was read")
        _raise_for_status(response, name)
        revision = (response.json().get("content") or {}).get("sha")
        logger.info("Wrote %s at revision %s", name, revision)
        return revision


def _raise_for_status(response: httpx.Response, name: str) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise StoreUnavailable(
            f"GitHub returned {response.status_code} for {name}"
        ) from exc
