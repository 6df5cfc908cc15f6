from unittest.mock import patch

import pytest

from hydromon.errors import AccessError, ErrorKind
from hydromon.models import Role, User
from hydromon.services import users as user_service


@pytest.fixture
def many_users(db, users):
    db.add_all(
        User(email=f"pond{i:02d}@farm.example", name=f"Pond keeper {i}", role=Role.USER)
        for i in range(12)
    )
    db.commit()


class TestProfile:
    def test_get_profile(self, db, owner, users):
        profile = user_service.get_profile(db, owner)
        assert profile.email == "owner@example.com"
        assert profile.role == Role.USER

    def test_update_name_and_email(self, db, owner, users):
        updated = user_service.update_profile(db, owner, {"name": "Olive", "email": "Olive@Example.com"})
        assert updated.name == "Olive"
        assert updated.email == "olive@example.com"

    def test_email_taken_by_someone_else(self, db, owner, users):
        with pytest.raises(AccessError) as exc:
            user_service.update_profile(db, owner, {"email": "other@example.com"})
        assert exc.value.kind == ErrorKind.CONFLICT

    def test_keeping_own_email_is_fine(self, db, owner, users):
        assert user_service.update_profile(db, owner, {"email": "owner@example.com"}).email == "owner@example.com"

    def test_email_claimed_concurrently_is_conflict(self, db, owner, users):
        # the pre-check misses the other account; the unique index catches it
        with patch.object(user_service, "find_user_by_email", return_value=None):
            with pytest.raises(AccessError) as exc:
                user_service.update_profile(db, owner, {"email": "other@example.com"})
        assert exc.value.kind == ErrorKind.CONFLICT
        db.expire_all()
        assert db.get(User, owner.id).email == "owner@example.com"


class TestListUsers:
    def test_regular_user_is_forbidden(self, db, owner, users):
        with pytest.raises(AccessError) as exc:
            user_service.list_users(db, owner)
        assert exc.value.kind == ErrorKind.FORBIDDEN

    def test_anonymous_is_unauthenticated(self, db, users):
        with pytest.raises(AccessError) as exc:
            user_service.list_users(db, None)
        assert exc.value.kind == ErrorKind.UNAUTHENTICATED

    def test_pagination(self, db, admin, many_users):
        first = user_service.list_users(db, admin, page=1, limit=10)
        last = user_service.list_users(db, admin, page=2, limit=10)
        assert first.pagination.total == 15
        assert first.pagination.pages == 2
        assert len(first.users) == 10
        assert len(last.users) == 5
        assert not {u.id for u in first.users} & {u.id for u in last.users}

    def test_search_matches_email_or_name(self, db, admin, many_users):
        page = user_service.list_users(db, admin, search="keeper 1")
        assert {u.name for u in page.users} == {"Pond keeper 1", "Pond keeper 10", "Pond keeper 11"}
        assert user_service.list_users(db, admin, search="OWNER@").pagination.total == 1

    def test_search_wildcards_match_literally(self, db, admin, many_users):
        db.add(User(email="first_last@example.com", name="100% keeper", role=Role.USER))
        db.commit()
        assert {u.email for u in user_service.list_users(db, admin, search="_").users} == {
            "first_last@example.com"
        }
        assert {u.name for u in user_service.list_users(db, admin, search="%").users} == {"100% keeper"}
        assert user_service.list_users(db, admin, search="pond_0").pagination.total == 0

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101)])
    def test_bad_paging(self, db, admin, users, page, limit):
        with pytest.raises(AccessError) as exc:
            user_service.list_users(db, admin, page=page, limit=limit)
        assert exc.value.kind == ErrorKind.VALIDATION_FAILED
