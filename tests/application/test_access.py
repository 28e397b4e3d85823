"""Tests for the authentication and authorization guards."""

import pytest

from lending.application.access import has_permission, require_permission
from lending.application.list_items import ListItemsHandler
from lending.domain.exceptions import (
    InternalError,
    PermissionDeniedError,
    UnauthenticatedError,
)
from lending.domain.service.authorizer import Permission
from tests.fakes import FakeAuthorizer, FakeUnitOfWork


class TestGuards:

    def test_missing_actor_is_unauthenticated_not_denied(self):
        auth = FakeAuthorizer()
        with pytest.raises(UnauthenticatedError) as info:
            require_permission(auth, "", Permission.REQUEST_ITEMS)
        assert info.value.code == "AUTHENTICATION_REQUIRED"

    def test_missing_grant_is_denied(self):
        auth = FakeAuthorizer()
        with pytest.raises(PermissionDeniedError) as info:
            require_permission(auth, "alice", Permission.REQUEST_ITEMS, "g1")
        assert info.value.code == "PERMISSION_DENIED"

    def test_global_grant_covers_every_scope(self):
        auth = FakeAuthorizer()
        auth.grant("alice", Permission.REQUEST_ITEMS)
        assert require_permission(auth, "alice", Permission.REQUEST_ITEMS, "g9") == "alice"

    def test_scoped_grant_does_not_cover_global_check(self):
        auth = FakeAuthorizer()
        auth.grant("alice", Permission.VIEW_ALL_DATA, scope="g1")
        assert not has_permission(auth, "alice", Permission.VIEW_ALL_DATA)

    def test_oracle_failure_becomes_internal_error(self):
        auth = FakeAuthorizer()
        auth.fail_with = ConnectionError("oracle down")
        with pytest.raises(InternalError, match="Internal server error"):
            require_permission(auth, "alice", Permission.REQUEST_ITEMS)

    def test_queries_need_an_actor(self):
        with pytest.raises(UnauthenticatedError):
            ListItemsHandler(FakeUnitOfWork()).handle(None)
