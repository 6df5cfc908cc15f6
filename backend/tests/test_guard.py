from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from hydromon.access import Capability, Principal, guarded, public, require, validate_input
from hydromon.errors import AccessError, ErrorKind
from hydromon.models import Role
from hydromon.schemas import PumpControlRequest


class TestRequire:
    def test_missing_session_is_unauthenticated(self):
        with pytest.raises(AccessError) as exc:
            require(None)
        assert exc.value.kind == ErrorKind.UNAUTHENTICATED

    def test_user_passes_authenticated(self):
        principal = Principal(id="u1")
        assert require(principal) is principal

    def test_user_is_forbidden_from_admin(self):
        with pytest.raises(AccessError) as exc:
            require(Principal(id="u1"), Capability.ADMIN)
        assert exc.value.kind == ErrorKind.FORBIDDEN

    def test_admin_passes_admin(self):
        principal = Principal(id="a1", role=Role.ADMIN)
        assert require(principal, Capability.ADMIN) is principal


class TestGuardedOperation:
    def test_guard_runs_before_body(self):
        calls = []

        @guarded()
        def body(db, principal):
            calls.append(principal)

        with pytest.raises(AccessError) as exc:
            body(Mock(), None)
        assert exc.value.kind == ErrorKind.UNAUTHENTICATED
        assert calls == []

    def test_capability_is_recorded(self):
        @guarded(Capability.ADMIN)
        def admin_only(db, principal):
            return "ok"

        assert admin_only.capability == Capability.ADMIN
        assert admin_only(Mock(), Principal(id="a", role=Role.ADMIN)) == "ok"

    def test_storage_failure_becomes_internal_and_rolls_back(self):
        db = Mock()

        @guarded()
        def boom(db, principal):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        with pytest.raises(AccessError) as exc:
            boom(db, Principal(id="u1"))
        assert exc.value.kind == ErrorKind.INTERNAL
        # storage internals never reach the caller
        assert "connection lost" not in exc.value.message
        db.rollback.assert_called_once()

    def test_access_errors_pass_through_untouched(self):
        db = Mock()

        @public
        def conflict(db):
            raise AccessError(ErrorKind.CONFLICT, "Email is already registered")

        with pytest.raises(AccessError) as exc:
            conflict(db)
        assert exc.value == AccessError(ErrorKind.CONFLICT, "Email is already registered")
        db.rollback.assert_not_called()


class TestValidateInput:
    def test_model_instance_is_returned_as_is(self):
        data = PumpControlRequest(action="ON")
        assert validate_input(PumpControlRequest, data) is data

    def test_violation_is_validation_failed(self):
        with pytest.raises(AccessError) as exc:
            validate_input(PumpControlRequest, {"action": "SPIN"})
        assert exc.value.kind == ErrorKind.VALIDATION_FAILED
        assert exc.value.message.startswith("action")
        assert exc.value.detail[0]["loc"] == ("action",)
