import datetime
import typing

import pytest

from tablegen import data, service
from tablegen.adapter.cursor.shared import BATCH_SIZE
from tablegen.adapter.dialect import POSTGRES

LAST_LOGIN: typing.Final[datetime.datetime] = datetime.datetime(2024, 1, 2, 3, 4, 5)


def _insert_moritz(repo: service.Repository) -> typing.Any:
    assert repo.insert_class is not None
    user = repo.insert(repo.insert_class(first_name="Moritz", last_name="Bischof", email="moritz@x.io"))
    assert not isinstance(user, data.Error), str(user)
    return user


def test_insert_returns_the_stored_entity(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    assert type(user) is users_repo_fixture.entity_class
    assert user.user_id == 1
    assert user.first_name == "Moritz"
    assert user.disabled is None
    assert user.last_login is None


def test_insert_accepts_a_mapping(users_repo_fixture: service.Repository):
    user = users_repo_fixture.insert({"first_name": "Ann", "last_name": "Lee", "email": "ann@x.io"})
    assert not isinstance(user, data.Error)
    assert user.email == "ann@x.io"


def test_insert_rejects_an_invalid_payload(users_repo_fixture: service.Repository):
    assert isinstance(users_repo_fixture.insert({"first_name": "Ann"}), data.Error)
    assert isinstance(users_repo_fixture.insert(42), data.Error)


def test_get_and_accessors(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    assert users_repo_fixture.get(user.user_id) == user
    assert users_repo_fixture.get_by_user_id(user.user_id) == user
    assert users_repo_fixture.by_email("moritz@x.io") == user
    assert users_repo_fixture.by_email("nobody@x.io") is None
    assert isinstance(users_repo_fixture.get(99), data.NotFound)
    assert isinstance(users_repo_fixture.get_by_user_id(99), data.NotFound)


def test_unknown_operation_name(users_repo_fixture: service.Repository):
    with pytest.raises(AttributeError):
        users_repo_fixture.by_first_name("Moritz")

    assert isinstance(users_repo_fixture.fetch("by_first_name", "Moritz"), data.Error)


def test_set_field(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    assert users_repo_fixture.set_last_login(user, LAST_LOGIN) is None
    assert user.last_login == LAST_LOGIN

    fresh = users_repo_fixture.get(user.user_id)
    assert fresh.last_login == LAST_LOGIN
    assert fresh.first_name == "Moritz"


def test_set_field_requires_a_settable_field(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)
    assert isinstance(users_repo_fixture.set_field(user, "email", "a@b.c"), data.Error)
    assert isinstance(users_repo_fixture.set_field(user, "nickname", "mo"), data.Error)


def test_update_writes_every_field(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)
    user.email = "moritz@y.io"
    user.disabled = "moved"

    assert users_repo_fixture.update(user) is None
    assert users_repo_fixture.update(user) is None

    fresh = users_repo_fixture.by_email("moritz@y.io")
    assert fresh == user
    assert users_repo_fixture.by_email("moritz@x.io") is None


def test_patch_only_touches_its_fields(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)
    assert users_repo_fixture.set_last_login(user, LAST_LOGIN) is None

    stale = users_repo_fixture.get(user.user_id)
    stale.email = "stale@x.io"

    UpdateName = users_repo_fixture.patch_class("UpdateName")
    assert users_repo_fixture.patch(stale, UpdateName(first_name="Mo", last_name="B")) is None
    assert stale.first_name == "Mo"
    assert stale.disabled is None

    fresh = users_repo_fixture.get(user.user_id)
    assert fresh.first_name == "Mo"
    assert fresh.last_name == "B"
    assert fresh.email == "moritz@x.io"
    assert fresh.last_login == LAST_LOGIN


def test_patch_rejects_foreign_objects(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)
    assert isinstance(users_repo_fixture.patch(user, object()), data.Error)


def test_reload(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)
    copy = users_repo_fixture.get(user.user_id)

    assert users_repo_fixture.set_last_login(copy, LAST_LOGIN) is None
    assert user.last_login is None

    assert users_repo_fixture.reload(user) is None
    assert user.last_login == LAST_LOGIN


def test_operations_after_delete(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    assert users_repo_fixture.delete(user) is None

    assert users_repo_fixture.by_email("moritz@x.io") is None
    assert isinstance(users_repo_fixture.get(user.user_id), data.NotFound)
    assert isinstance(users_repo_fixture.update(user), data.Conflict)
    assert isinstance(users_repo_fixture.set_last_login(user, LAST_LOGIN), data.Conflict)
    assert isinstance(users_repo_fixture.reload(user), data.NotFound)
    assert isinstance(users_repo_fixture.delete(user), data.NotFound)

    UpdateName = users_repo_fixture.patch_class("UpdateName")
    assert isinstance(users_repo_fixture.patch(user, UpdateName(first_name="a", last_name="b")), data.Conflict)
    assert user.first_name == "Moritz"


def test_many_accessor_is_lazy_and_reissued(notes_repo_fixture: service.Repository):
    for author in ("ann", "bob", "ann"):
        note = notes_repo_fixture.insert({"author": author, "meta": {"n": author}})
        assert not isinstance(note, data.Error), str(note)

    notes = notes_repo_fixture.by_author("ann")
    assert not isinstance(notes, (list, tuple))

    assert notes_repo_fixture.insert({"author": "ann"}) is not None

    result = list(notes)
    assert [n.note_id for n in result] == [1, 3, 4]
    assert result[0].meta == {"n": "ann"}
    assert result[2].meta is None
    assert isinstance(result[0].created, datetime.datetime)

    assert len(list(notes_repo_fixture.by_author("ann"))) == 3
    assert list(notes_repo_fixture.by_author("carl")) == []


def test_returning_insert(users_table_fixture: data.Table, recording_cursor_factory: typing.Any):
    cursor = recording_cursor_factory(
        rows=[
            {
                "user_id": 7,
                "first_name": "Moritz",
                "last_name": "Bischof",
                "email": "moritz@x.io",
                "disabled": None,
                "last_login": None,
            }
        ]
    )
    repo = service.Repository(
        operations=service.generate(table=users_table_fixture, dialect=POSTGRES),
        cursor=cursor,
    )

    user = repo.insert({"first_name": "Moritz", "last_name": "Bischof", "email": "moritz@x.io"})

    assert not isinstance(user, data.Error), str(user)
    assert user.user_id == 7
    ((sql, params),) = cursor.calls
    assert sql.startswith("INSERT INTO users (first_name, last_name, email, disabled) VALUES (%s, %s, %s, %s)")
    assert " RETURNING " in sql
    assert params == ("Moritz", "Bischof", "moritz@x.io", None)


def test_backend_errors_are_returned(users_table_fixture: data.Table, recording_cursor_factory: typing.Any):
    cursor = recording_cursor_factory(row_count=data.BackendError.new("connection lost"))
    repo = service.Repository(
        operations=service.generate(table=users_table_fixture, dialect=POSTGRES),
        cursor=cursor,
    )
    user = repo.entity_class(
        user_id=1,
        first_name="Moritz",
        last_name="Bischof",
        email="moritz@x.io",
        disabled=None,
        last_login=None,
    )

    result = repo.delete(user)

    assert isinstance(result, data.BackendError)
    assert result.error_message == "connection lost"


def test_set_field_rejects_a_value_of_the_wrong_type(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    result = users_repo_fixture.set_last_login(user, "not a date")

    assert isinstance(result, data.Error)
    assert user.last_login is None
    assert users_repo_fixture.get(user.user_id).last_login is None


def test_set_field_stores_the_coerced_value(users_repo_fixture: service.Repository):
    user = _insert_moritz(users_repo_fixture)

    assert users_repo_fixture.set_last_login(user, "2024-01-02T03:04:05") is None

    assert user.last_login == LAST_LOGIN
    assert users_repo_fixture.get(user.user_id).last_login == LAST_LOGIN


def test_many_accessor_survives_other_calls_while_iterating(notes_repo_fixture: service.Repository):
    row_count = BATCH_SIZE + 100
    for _ in range(row_count):
        note = notes_repo_fixture.insert({"author": "ann"})
        assert not isinstance(note, data.Error), str(note)

    seen = 0
    for note in notes_repo_fixture.by_author("ann"):
        assert not isinstance(note, data.Error), str(note)
        assert notes_repo_fixture.get(note.note_id) == note
        seen += 1

    assert seen == row_count
