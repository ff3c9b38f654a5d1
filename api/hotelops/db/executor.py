"""Query execution over a direct asyncpg pool or a remote SQL procedure."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import asyncpg
import httpx
from asyncpg import Pool

from ..config import DIRECT_MODE, PROXY_MODE, Settings
from .errors import QueryError, RemoteProcedureMissingError
from .literals import check_placeholders, interpolate_sql


logger = logging.getLogger(__name__)

Row = Dict[str, Any]
RowSet = List[Row]

MISSING_PROCEDURE_CODE = "PGRST202"
UNKNOWN_REMOTE_ERROR = "Unknown remote SQL error."


class QueryExecutor(ABC):
    """Runs ``$n``-parameterized statements and returns plain row dicts."""

    mode: str = ""

    async def initialize(self) -> None:
        """Open backend resources. Idempotent."""

    def _initialize_lock(self) -> asyncio.Lock:
        # Created on first use so it binds to the running loop
        lock = getattr(self, "_init_lock", None)
        if lock is None:
            lock = self._init_lock = asyncio.Lock()
        return lock

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def execute(self, statement: str, params: Optional[Sequence[Any]] = None) -> RowSet:
        """Execute a statement and return all rows.

        Raises:
            MissingParameterError: If a placeholder has no parameter
            EncodingError: If a parameter cannot be sent to the backend
            QueryError: If the backend fails
        """

    async def execute_one(self, statement: str, params: Optional[Sequence[Any]] = None) -> Optional[Row]:
        """Execute a statement and return the first row, or None."""
        rows = await self.execute(statement, params)
        return rows[0] if rows else None

    async def check_ready(self) -> None:
        """Round-trip a trivial statement to prove the backend answers."""
        await self.execute_one("SELECT 1 AS ok")


async def _init_connection(conn) -> None:
    """Decode JSON columns to Python objects, matching the proxy's rows."""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


class PoolExecutor(QueryExecutor):
    """Direct mode: statements and parameters go unmodified to an asyncpg pool."""

    mode = DIRECT_MODE

    def __init__(self, database_url: str, min_size: int = 1, max_size: int = 20, command_timeout: int = 60):
        self.pool: Optional[Pool] = None
        self._database_url = database_url
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout

    async def initialize(self) -> None:
        """Initialize the database connection pool.

        Concurrent first calls share one pool.
        """
        if self.pool is not None:
            return
        async with self._initialize_lock():
            if self.pool is None:
                self.pool = await asyncpg.create_pool(
                    self._database_url,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                    init=_init_connection,
                )
                logger.info(f"Database pool initialized (max_size={self._max_size})")

    async def close(self) -> None:
        """Close the database connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None

    async def execute(self, statement: str, params: Optional[Sequence[Any]] = None) -> RowSet:
        params = list(params or [])
        check_placeholders(statement, params)

        if self.pool is None:
            await self.initialize()

        logger.debug(f"Executing statement with {len(params)} parameters")
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(statement, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error: {e}")
            raise QueryError(f"Database error: {e}", code=getattr(e, "sqlstate", None))
        except (asyncpg.InterfaceError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Database connection error: {e}")
            raise QueryError(f"Database connection error: {e}")

        return [dict(row) for row in rows]


def format_remote_error(payload: Any) -> str:
    """Assemble a message from whatever error fields the proxy returned."""
    if not isinstance(payload, dict):
        return UNKNOWN_REMOTE_ERROR

    pieces = [
        payload.get(field)
        for field in ("message", "details", "hint")
        if isinstance(payload.get(field), str) and payload.get(field)
    ]
    code = payload.get("code")
    if isinstance(code, str) and code:
        pieces.insert(0, f"[{code}]")

    return " | ".join(pieces) if pieces else UNKNOWN_REMOTE_ERROR


def is_missing_procedure(payload: Any, function_name: str) -> bool:
    """Whether the proxy reported that the SQL procedure does not exist."""
    if not isinstance(payload, dict):
        return False

    message = payload.get("message") if isinstance(payload.get("message"), str) else ""
    details = payload.get("details") if isinstance(payload.get("details"), str) else ""

    return payload.get("code") == MISSING_PROCEDURE_CODE and (
        function_name in message or function_name in details
    )


def parse_rpc_response(status_code: int, raw: str, function_name: str = "exec_sql") -> RowSet:
    """Normalize a proxy response into a RowSet or raise a QueryError.

    Args:
        status_code: HTTP status of the RPC call
        raw: Response body text
        function_name: Name of the remote SQL procedure

    Returns:
        Rows from the response; empty for an empty, null or (on success)
        non-JSON body

    Raises:
        RemoteProcedureMissingError: If the procedure is not installed
        QueryError: For any other failed call or unusable payload
    """
    succeeded = 200 <= status_code < 300
    payload: Any = None

    if raw:
        try:
            payload = json.loads(raw)
        except ValueError:
            if not succeeded:
                raise QueryError(f"Remote SQL error ({status_code}): {raw}", status=status_code)
            logger.warning(f"Remote SQL returned a non-JSON body with status {status_code}; treating as no rows")
            return []

    if not succeeded:
        if status_code == 404 and is_missing_procedure(payload, function_name):
            raise RemoteProcedureMissingError(f"public.{function_name}(sql text)", status=status_code)

        code = payload.get("code") if isinstance(payload, dict) else None
        raise QueryError(
            f"Remote SQL error ({status_code}): {format_remote_error(payload)}",
            status=status_code,
            code=code if isinstance(code, str) else None,
        )

    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return [payload]

    raise QueryError(f"Remote SQL returned an unexpected {type(payload).__name__} payload", status=status_code)


class RpcExecutor(QueryExecutor):
    """Proxy mode: parameters are inlined as literals and the SQL text is
    posted to a remote procedure over HTTP."""

    mode = PROXY_MODE

    def __init__(
        self,
        base_url: str,
        service_key: str,
        function_name: str = "exec_sql",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.function_name = function_name
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._timeout = timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/rest/v1/rpc/{self.function_name}"

    async def initialize(self) -> None:
        if self._client is not None:
            return
        async with self._initialize_lock():
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self._timeout)
                logger.info(f"RPC client initialized for {self.endpoint}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, statement: str, params: Optional[Sequence[Any]] = None) -> RowSet:
        sql = interpolate_sql(statement, list(params or []))

        if self._client is None:
            await self.initialize()

        logger.debug(f"Posting statement to {self.function_name}")
        try:
            response = await self._client.post(
                self.endpoint,
                json={"sql": sql},
                headers={
                    "apikey": self._service_key,
                    "Authorization": f"Bearer {self._service_key}",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"RPC transport error: {e}")
            raise QueryError(f"Remote SQL transport error: {e}")

        try:
            return parse_rpc_response(response.status_code, response.text, self.function_name)
        except QueryError as e:
            logger.error(str(e))
            raise


def create_executor(settings: Settings) -> QueryExecutor:
    """Build the executor selected by the configuration.

    Raises:
        ConfigurationError: If no backend is configured
    """
    mode = settings.db_mode
    logger.info(f"Database mode: {mode}")

    if mode == DIRECT_MODE:
        return PoolExecutor(
            settings.direct_database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    return RpcExecutor(
        settings.supabase_url,
        settings.supabase_service_key,
        function_name=settings.rpc_function,
        timeout=settings.rpc_timeout_seconds,
    )
