# workspace_rbac/test/unit/test_security.py

# Para Rodar o Script:
# pytest workspace_rbac/test/unit/test_security.py -v

from datetime import timedelta
from uuid import uuid4

import pytest
from starlette.requests import Request

from workspace_rbac.adapters.inbound.api.v1.dependencies.permission_deps import resolve_workspace_id
from workspace_rbac.adapters.outbound.security.token_manager import InvalidTokenError, TokenManager


class TestTokenManager:

    def test_decode_subject(self):
        user_id = uuid4()
        token = TokenManager.create_access_token(str(user_id))
        assert TokenManager.decode_subject(token) == user_id

    def test_expired_token_is_rejected(self):
        token = TokenManager.create_access_token(str(uuid4()), expires_delta=timedelta(seconds=-10))
        with pytest.raises(InvalidTokenError):
            TokenManager.decode_subject(token)

    def test_garbage_token_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            TokenManager.decode_subject("not-a-token")

    def test_non_uuid_subject_is_rejected(self):
        token = TokenManager.create_access_token("42")
        with pytest.raises(InvalidTokenError):
            TokenManager.decode_subject(token)


def _request(path_params=None, query_string=b"", headers=None):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": query_string,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "path_params": path_params or {},
    }
    return Request(scope)


class TestResolveWorkspaceId:

    def test_path_param_first(self):
        path_ws, query_ws, header_ws = uuid4(), uuid4(), uuid4()
        request = _request(
            path_params={"workspace_id": str(path_ws)},
            query_string=f"workspace_id={query_ws}".encode(),
            headers={"X-Workspace-Id": str(header_ws)},
        )
        assert resolve_workspace_id(request) == path_ws

    def test_query_before_header(self):
        query_ws, header_ws = uuid4(), uuid4()
        request = _request(
            query_string=f"workspace_id={query_ws}".encode(),
            headers={"X-Workspace-Id": str(header_ws)},
        )
        assert resolve_workspace_id(request) == query_ws

    def test_header_fallback(self):
        header_ws = uuid4()
        assert resolve_workspace_id(_request(headers={"X-Workspace-Id": str(header_ws)})) == header_ws

    def test_missing(self):
        assert resolve_workspace_id(_request()) is None

    def test_invalid_uuid(self):
        from fastapi import HTTPException

        with pytest.raises(HTTPException) as exc:
            resolve_workspace_id(_request(headers={"X-Workspace-Id": "abc"}))
        assert exc.value.status_code == 400
