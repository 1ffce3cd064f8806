"""HTTP movie backend implementation."""

import asyncio
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import aiohttp
from aiohttp.abc import AbstractCookieJar
from pydantic import ValidationError as PydanticValidationError

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import MovieBackendError
from ..interfaces import IMovieBackend
from ..models import ListPageResult, Movie, MovieFields, MutationResult, SortKey


class MovieBackend(IMovieBackend, LoggerMixin):
    """Movie backend client over HTTP/JSON."""

    def __init__(self, config: Config) -> None:
        """Initialize movie backend.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._backend_config = config.backend
        self._session: Optional[aiohttp.ClientSession] = None

    async def list_page(self, page: int, sort: SortKey) -> ListPageResult:
        """List one page of movies.

        Args:
            page: 1-based page number.
            sort: Sort key.

        Returns:
            Page result; ``success`` is False on a logical failure.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        status, body = await self._request(
            "POST", self._backend_config.list_path, json={"page": page, "sort": sort.value}
        )

        if not isinstance(body, dict):
            raise MovieBackendError(f"Unexpected listing response (HTTP {status})")

        if status >= 400 or not body.get("success"):
            msg = body.get("msg") or f"HTTP {status}"
            self.logger.warning(f"Backend refused page {page}: {msg}")
            return ListPageResult(success=False, msg=str(msg))

        records = body.get("data") or []
        if not isinstance(records, list):
            raise MovieBackendError("Listing response 'data' is not a list")

        try:
            movies = [Movie.from_backend(record) for record in records]
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise MovieBackendError(f"Malformed movie record in page {page}: {e}") from e

        total_pages = body.get("totalPages")
        try:
            total_pages = int(total_pages) if total_pages is not None else None
        except (TypeError, ValueError):
            total_pages = None

        self.logger.debug(f"Fetched page {page} ({len(movies)} movies, {total_pages} pages)")
        return ListPageResult(success=True, data=movies, total_pages=total_pages)

    async def create_movie(self, fields: MovieFields) -> MutationResult:
        """Create a movie.

        Args:
            fields: Validated movie fields.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        status, body = await self._request(
            "POST", self._backend_config.create_path, json=fields.to_wire()
        )
        result = self._mutation_result(status, body)
        if result.success:
            self.logger.info(f"Created movie: {fields.title}")
        return result

    async def update_movie(self, movie_id: str, fields: MovieFields) -> MutationResult:
        """Replace the fields of an existing movie.

        Args:
            movie_id: Movie identifier.
            fields: Validated movie fields.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        path = f"{self._backend_config.update_path}/{quote(movie_id, safe='')}"
        status, body = await self._request("PUT", path, json=fields.to_wire())
        result = self._mutation_result(status, body)
        if result.success:
            self.logger.info(f"Updated movie {movie_id}: {fields.title}")
        return result

    async def delete_movie(self, movie_id: str) -> MutationResult:
        """Delete a movie.

        Args:
            movie_id: Movie identifier.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        path = f"{self._backend_config.delete_path}/{quote(movie_id, safe='')}"
        status, body = await self._request("DELETE", path)
        result = self._mutation_result(status, body)
        if result.success:
            self.logger.info(f"Deleted movie {movie_id}")
        return result

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Any]:
        """Send a request and decode the JSON body.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL.
            json: Request body.

        Returns:
            HTTP status and decoded body (None when the body is empty or not JSON).

        Raises:
            MovieBackendError: On connection errors, timeouts and undecodable bodies.
        """
        url = f"{self._backend_config.base_url}{path}"
        try:
            async with self._get_session().request(method, url, json=json) as response:
                text = await response.text()
                body: Any = None
                if text.strip():
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        body = None
                return response.status, body

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error_msg = f"{method} {url} failed: {e or type(e).__name__}"
            self.logger.error(error_msg)
            raise MovieBackendError(error_msg) from e
        except UnicodeDecodeError as e:
            error_msg = f"{method} {url} returned an undecodable body: {e}"
            self.logger.error(error_msg)
            raise MovieBackendError(error_msg) from e

    def _mutation_result(self, status: int, body: Any) -> MutationResult:
        """Interpret a mutation response.

        A mutation succeeds on a 2xx status unless the body says otherwise.

        Args:
            status: HTTP status.
            body: Decoded body.

        Returns:
            Mutation result.
        """
        payload = body if isinstance(body, dict) else None
        msg = payload.get("msg") if payload else None

        if status >= 400:
            return MutationResult(success=False, msg=str(msg or f"HTTP {status}"), data=payload)
        if payload is not None and payload.get("success") is False:
            rejected = str(msg or "Backend rejected the change")
            return MutationResult(success=False, msg=rejected, data=payload)
        return MutationResult(success=True, msg=str(msg) if msg else None, data=payload)

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._backend_config.timeout)
            connector = aiohttp.TCPConnector(ssl=self._backend_config.verify_ssl)
            cookie_jar: AbstractCookieJar
            if self._backend_config.with_credentials:
                cookie_jar = aiohttp.CookieJar()
            else:
                cookie_jar = aiohttp.DummyCookieJar()
            self._session = aiohttp.ClientSession(
                timeout=timeout, connector=connector, cookie_jar=cookie_jar
            )
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "MovieBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
