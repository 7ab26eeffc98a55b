from __future__ import annotations

import mysql.connector
import pytest
from mysql.connector import errorcode

from proctor_portal.core.exceptions import ValidationError
from proctor_portal.users.model import NewProctorProfile, NewStudentProfile
from proctor_portal.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, error):
        self.error = error
        self.lastrowid = 1

    def execute(self, sql, params=None):
        raise self.error

    def close(self):
        pass


class FakeConnection:
    def __init__(self, error):
        self.error = error
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self.error)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, error):
        self.conn = FakeConnection(error)

    def connect(self):
        return self.conn


def _duplicate():
    return mysql.connector.IntegrityError(msg="Duplicate entry 'S1001' for key 'student_id'", errno=errorcode.ER_DUP_ENTRY)


def test_duplicate_student_insert_is_validation_error():
    factory = FakeConnFactory(_duplicate())
    repo = MySQLUserRepository(factory)

    with pytest.raises(ValidationError, match="Account details already in use"):
        repo.create_student(
            email="a@example.com",
            username="a",
            password_hash="hash",
            name="A",
            profile=NewStudentProfile(student_id="S1001", department="CSE", semester=3),
        )

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_duplicate_proctor_insert_is_validation_error():
    factory = FakeConnFactory(_duplicate())
    repo = MySQLUserRepository(factory)

    with pytest.raises(ValidationError, match="Account details already in use"):
        repo.create_proctor(
            email="p@example.com",
            username="p",
            password_hash="hash",
            name="P",
            profile=NewProctorProfile(faculty_id="F1", department="CSE", designation="Professor"),
        )

    assert factory.conn.rolled_back


def test_other_integrity_errors_propagate():
    fk_error = mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    repo = MySQLUserRepository(FakeConnFactory(fk_error))

    with pytest.raises(mysql.connector.IntegrityError):
        repo.create_student(
            email="a@example.com",
            username="a",
            password_hash="hash",
            name="A",
            profile=NewStudentProfile(student_id="S1001", department="CSE", semester=3, proctor_id=42),
        )
