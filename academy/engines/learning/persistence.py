"""
Progress persistence collaborators.

The reconciler only talks to a ProgressPersistence. HttpProgressPersistence
is the implementation used outside the service process; it speaks to the
/progress endpoints of the HTTP API for one user.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from academy.catalog.features import EngineerRole
from academy.config import get_settings
from academy.engines.learning.exceptions import PersistenceError
from academy.engines.learning.types import PersistResult, ProgressUpdate, UserProgress
from academy.logging_config import get_logger

logger = get_logger(__name__)


class ProgressPersistence(ABC):
    """
    Remote source of truth for one user's progress.

    fetch_progress raises PersistenceError when the record cannot be read.
    The persist_* calls return a PersistResult; they may also raise when the
    transport itself fails.
    """

    @abstractmethod
    async def fetch_progress(self) -> UserProgress:
        """Return the canonical progress record."""

    @abstractmethod
    async def persist_role_change(self, role: EngineerRole, selected_features: Iterable[str]) -> PersistResult:
        """Store a role selection together with the features the user already knows."""

    @abstractmethod
    async def persist_progress_update(self, updates: Mapping[str, Any]) -> PersistResult:
        """Store a partial update."""

    @abstractmethod
    async def persist_module_completion(self, module_id: str) -> PersistResult:
        """Mark a module completed."""

    @abstractmethod
    async def persist_reset(self) -> PersistResult:
        """Reset the record to defaults."""


def _error_message(response: httpx.Response) -> str:
    """Best-effort error text from an API error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if isinstance(message, str):
            return message
    return f"HTTP {response.status_code}"


class HttpProgressPersistence(ProgressPersistence):
    """
    ProgressPersistence over the service HTTP API.

    The user is identified by an opaque id sent in the configured identity
    header. Pass `client` to share a connection pool (or an ASGI transport in
    tests); a client created here is closed by aclose().
    """

    def __init__(
        self,
        user_id: str,
        *,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        user_id_header: Optional[str] = None,
    ):
        settings = get_settings()
        self.user_id = user_id
        self.base_url = (base_url or settings.progress_api_base_url).rstrip("/")
        self.user_id_header = user_id_header or settings.user_id_header
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.progress_api_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpProgressPersistence":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers={self.user_id_header: self.user_id},
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Progress API unreachable",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise PersistenceError(f"{method} {path} failed: {exc}") from exc

    def _to_result(self, response: httpx.Response) -> PersistResult:
        if response.is_success:
            try:
                return PersistResult.model_validate(response.json())
            except (ValueError, ValidationError) as exc:
                raise PersistenceError(f"Malformed response from progress API: {exc}") from exc
        return PersistResult(success=False, error=_error_message(response))

    async def fetch_progress(self) -> UserProgress:
        response = await self._request("GET", "/progress")
        if not response.is_success:
            raise PersistenceError(f"Fetching progress failed: {_error_message(response)}")
        try:
            return UserProgress.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise PersistenceError(f"Malformed progress record: {exc}") from exc

    async def persist_role_change(self, role: EngineerRole, selected_features: Iterable[str]) -> PersistResult:
        payload = {
            "role": EngineerRole(role).value,
            "selected_features": [str(getattr(f, "value", f)) for f in selected_features],
        }
        return self._to_result(await self._request("PUT", "/progress/role", json=payload))

    async def persist_progress_update(self, updates: Mapping[str, Any]) -> PersistResult:
        payload = ProgressUpdate.model_validate(dict(updates)).model_dump(mode="json", exclude_unset=True)
        return self._to_result(await self._request("PATCH", "/progress", json=payload))

    async def persist_module_completion(self, module_id: str) -> PersistResult:
        # module ids may contain "/" or "?", so the segment is fully escaped
        path = f"/progress/modules/{quote(module_id, safe='')}/complete"
        return self._to_result(await self._request("POST", path))

    async def persist_reset(self) -> PersistResult:
        return self._to_result(await self._request("POST", "/progress/reset"))
