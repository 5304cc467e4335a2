"""
Singleton Supabase REST client with rate limiting using aiolimiter.
"""
from typing import Any, Dict, Optional, Tuple

from aiohttp import ClientSession, ClientTimeout
from aiolimiter import AsyncLimiter
from loguru import logger

from directory_etl.config import ARTICLES_TABLE, CONCURRENCY, SUPABASE_ANON_KEY, SUPABASE_URL
from directory_etl.errors import SupabaseError
from directory_etl.models import Article


class SupabaseClient:
    """
    Singleton client for the Supabase PostgREST endpoint.
    Uses AsyncLimiter for rate limiting instead of semaphores.
    """
    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not SupabaseClient._initialized:
            if not SUPABASE_URL or not SUPABASE_ANON_KEY:
                raise ValueError("Missing environment variables: SUPABASE_URL or SUPABASE_ANON_KEY")
            self.base_url = SUPABASE_URL.rstrip("/")
            self.api_key = SUPABASE_ANON_KEY
            self.rate_limiter = AsyncLimiter(max_rate=CONCURRENCY, time_period=1.0)
            self._session: Optional[ClientSession] = None
            SupabaseClient._initialized = True

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=30))
        return self._session

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def insert(
        self,
        table: str,
        row: Dict[str, Any],
        prefer: Optional[str] = None,
    ) -> Tuple[int, str]:
        """
        POST one row to `/rest/v1/<table>`.

        Args:
            table: Target table name.
            row: JSON-serializable row.
            prefer: Optional PostgREST `Prefer` header value.

        Returns:
            (status, body text) of the response.

        Raises:
            SupabaseError: On any non-2xx response.
        """
        url = f"{self.base_url}/rest/v1/{table}"
        async with self.rate_limiter:
            session = await self._get_session()
            async with session.post(url, json=row, headers=self._headers(prefer)) as resp:
                text = await resp.text()
                logger.debug(f"Supabase API response: {resp.status} {resp.reason} {text}")
                if resp.status >= 400:
                    raise SupabaseError(resp.status, text)
                return resp.status, text

    async def upsert_article(self, article: Article) -> Tuple[int, str]:
        """Insert an article, merging with an existing row on conflict."""
        return await self.insert(
            ARTICLES_TABLE,
            article.to_json(),
            prefer="resolution=merge-duplicates",
        )

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
