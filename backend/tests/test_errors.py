import pytest

from hydromon.errors import ERROR_MESSAGES, HTTP_STATUS, AccessError, ErrorKind


class TestErrorTables:
    def test_every_kind_has_message_and_status(self):
        assert set(ERROR_MESSAGES) == set(ErrorKind)
        assert set(HTTP_STATUS) == set(ErrorKind)

    @pytest.mark.parametrize(
        "kind,status",
        [
            (ErrorKind.UNAUTHENTICATED, 401),
            (ErrorKind.FORBIDDEN, 403),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.CONFLICT, 409),
            (ErrorKind.VALIDATION_FAILED, 422),
            (ErrorKind.INVALID_CREDENTIALS, 401),
            (ErrorKind.INTERNAL, 500),
        ],
    )
    def test_http_status(self, kind, status):
        assert AccessError(kind).http_status == status


class TestAccessError:
    def test_default_message(self):
        err = AccessError(ErrorKind.INVALID_CREDENTIALS)
        assert err.message == "Invalid email or password"
        assert str(err) == err.message

    def test_to_dict_omits_empty_detail(self):
        assert AccessError(ErrorKind.NOT_FOUND, "Device not found").to_dict() == {
            "kind": "NOT_FOUND",
            "message": "Device not found",
        }

    def test_to_dict_includes_detail(self):
        err = AccessError(ErrorKind.VALIDATION_FAILED, detail={"reason": "INVALID_RANGE"})
        assert err.to_dict()["detail"] == {"reason": "INVALID_RANGE"}

    def test_equality_by_kind_and_message(self):
        assert AccessError(ErrorKind.FORBIDDEN) == AccessError(ErrorKind.FORBIDDEN)
        assert AccessError(ErrorKind.FORBIDDEN) != AccessError(ErrorKind.NOT_FOUND)
