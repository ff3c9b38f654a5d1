"""Exception taxonomy for the data-access layer."""

from typing import Optional


class DataAccessError(Exception):
    """Base class for errors raised while preparing or running a statement."""


class EncodingError(DataAccessError):
    """A parameter value cannot be rendered as a SQL literal."""


class UnsupportedTypeError(EncodingError):
    """A parameter has a type the literal encoder does not know."""

    def __init__(self, value: object):
        self.value_type = type(value).__name__
        super().__init__(f"Unsupported SQL parameter type: {self.value_type}")


class MissingParameterError(DataAccessError):
    """A statement references a placeholder with no matching parameter."""

    def __init__(self, token: str, param_count: int):
        self.token = token
        self.param_count = param_count
        super().__init__(f"Missing SQL parameter for token {token} ({param_count} supplied).")


class QueryError(DataAccessError):
    """The backend failed to execute a statement."""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        self.status = status
        self.code = code
        super().__init__(message)


class RemoteProcedureMissingError(QueryError):
    """The remote SQL procedure is not installed or not visible to the proxy."""

    def __init__(self, signature: str, status: int = 404):
        self.signature = signature
        super().__init__(
            f"Remote SQL error ({status}): Missing {signature}. "
            f"Install the function in the target database, then reload the API schema cache "
            f"with NOTIFY pgrst, 'reload schema';. "
            f"Alternatively set DATABASE_URL or SUPABASE_DB_URL to use direct mode.",
            status=status,
            code="PGRST202",
        )
