"""Data-access layer: literal encoding, query executors and list queries."""

from .errors import (
    DataAccessError,
    EncodingError,
    UnsupportedTypeError,
    MissingParameterError,
    QueryError,
    RemoteProcedureMissingError
)
from .literals import to_sql_literal, interpolate_sql, check_placeholders
from .executor import (
    Row,
    RowSet,
    QueryExecutor,
    PoolExecutor,
    RpcExecutor,
    create_executor,
    parse_rpc_response
)

__all__ = [
    "DataAccessError",
    "EncodingError",
    "UnsupportedTypeError",
    "MissingParameterError",
    "QueryError",
    "RemoteProcedureMissingError",
    "to_sql_literal",
    "interpolate_sql",
    "check_placeholders",
    "Row",
    "RowSet",
    "QueryExecutor",
    "PoolExecutor",
    "RpcExecutor",
    "create_executor",
    "parse_rpc_response"
]
