"""
Connection test models.

Response schema for the backend connectivity report.

Dependencies: pydantic
System role: Diagnostics API contract
"""

from typing import Literal

from pydantic import BaseModel

CheckStatus = Literal["success", "error"]


class EnvVarsPresent(BaseModel):
    """Which backend variables are configured."""

    backend_url: bool
    backend_anon_key: bool


class ConnectionTestResponse(BaseModel):
    """Environment, auth service and database check results."""

    env_vars: EnvVarsPresent
    missing: list[str]
    connection_status: CheckStatus
    error_message: str | None = None
    db_query_status: CheckStatus | None = None
    db_query_error: str | None = None
