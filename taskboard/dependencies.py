from collections.abc import Iterator

from fastapi import Depends, Header, Request

from taskboard.auth import AuthorizationGate, Identity
from taskboard.configs import Settings
from taskboard.db_models import TaskboardDB


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


def get_db(settings: Settings = Depends(get_settings)) -> Iterator[TaskboardDB]:
    """Open one database connection for the request and close it however the request ends."""
    db = TaskboardDB.connect(settings.database_path)
    try:
        yield db
    finally:
        db.close()


def get_current_identity(
    authorization: str | None = Header(default=None),
    gate: AuthorizationGate = Depends(get_gate),
) -> Identity:
    return gate.authorize(authorization)
