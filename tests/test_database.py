"""
Unit tests for the SQLite birthday store.
"""
import sqlite3
from datetime import date

import pytest

from database import Database


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


def test_missing_birthday(db):
    assert db.get_birthday(1, 2) is None


def test_set_and_get_birthday(db):
    db.set_birthday(1, 2, date(1992, 7, 21), -8)
    assert db.get_birthday(1, 2) == (date(1992, 7, 21), -8)


def test_set_birthday_replaces_previous(db):
    db.set_birthday(1, 2, date(1992, 7, 21))
    db.set_birthday(1, 2, date(1990, 1, 5), 3)
    assert db.get_birthday(1, 2) == (date(1990, 1, 5), 3)
    assert len(db.fetchall('SELECT * FROM birthday')) == 1


def test_birthdays_are_per_guild(db):
    db.set_birthday(1, 2, date(1992, 7, 21))
    assert db.get_birthday(99, 2) is None


def test_reconnects_after_close(db):
    db.close()
    db.ensure_connection()
    assert db.fetchall('SELECT 1') == [(1,)]


def test_execute_raises_on_bad_query(db):
    with pytest.raises(sqlite3.OperationalError):
        db.execute('INSERT INTO missing_table VALUES (1)')
