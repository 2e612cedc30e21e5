"""
Unit tests for the /setbirthday command.
"""
import sqlite3
from datetime import date, datetime, UTC
from unittest.mock import MagicMock

import pytest

from commands.birthday import format_birthday, set_birthday, show_birthday, validate_birthday

NOW = datetime(2026, 10, 19, 5, 0, tzinfo=UTC)


@pytest.fixture
def db():
    return MagicMock()


class TestSetBirthday:

    @pytest.mark.asyncio
    async def test_valid_birthday(self, interaction, db):
        await set_birthday(interaction, db, 1992, 7, 21, now=NOW)

        db.set_birthday.assert_called_once_with(1000, 42, date(1992, 7, 21), 0)
        interaction.response.send_message.assert_awaited_once_with(
            "Your birthday was set to Tuesday, July 21, 1992.", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_valid_birthday_with_time_zone(self, interaction, db):
        await set_birthday(interaction, db, 1992, 7, 21, utc_offset=-8, now=NOW)

        db.set_birthday.assert_called_once_with(1000, 42, date(1992, 7, 21), -8)
        interaction.response.send_message.assert_awaited_once_with(
            "Your birthday was set to Tuesday, July 21, 1992.", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_illegal_day_number(self, interaction, db):
        await set_birthday(interaction, db, 1992, 2, 31, now=NOW)

        db.set_birthday.assert_not_called()
        interaction.response.send_message.assert_awaited_once_with(
            "There are only 29 days in February 1992.  Your birthday was not set.", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_birthday_in_the_future(self, interaction, db):
        await set_birthday(interaction, db, 9992, 2, 1, now=NOW)

        db.set_birthday.assert_not_called()
        interaction.response.send_message.assert_awaited_once_with(
            "You are not a time traveler.  Your birthday was not set.", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_storage_failure(self, interaction, db):
        db.set_birthday.side_effect = sqlite3.OperationalError("database is locked")

        await set_birthday(interaction, db, 1992, 7, 21, now=NOW)

        message = interaction.response.send_message.call_args.args[0]
        assert message.startswith("❌")
        assert interaction.response.send_message.call_args.kwargs["ephemeral"] is True


class TestShowBirthday:

    @pytest.mark.asyncio
    async def test_stored_birthday(self, interaction, db):
        db.get_birthday.return_value = (date(1992, 7, 21), -8)

        await show_birthday(interaction, db)

        db.get_birthday.assert_called_once_with(1000, 42)
        interaction.response.send_message.assert_awaited_once_with(
            "Your birthday is set to Tuesday, July 21, 1992 (UTC-8).", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_no_birthday_on_record(self, interaction, db):
        db.get_birthday.return_value = None

        await show_birthday(interaction, db)

        interaction.response.send_message.assert_awaited_once_with(
            "You have not set your birthday.  Use /setbirthday to set it.", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_read_failure(self, interaction, db):
        db.get_birthday.side_effect = sqlite3.OperationalError("disk I/O error")

        await show_birthday(interaction, db)

        assert interaction.response.send_message.call_args.args[0].startswith("❌")


class TestValidateBirthday:

    def test_non_leap_february(self):
        birthday, error = validate_birthday(1993, 2, 29, now=NOW)
        assert birthday is None
        assert error == "There are only 28 days in February 1993.  Your birthday was not set."

    def test_leap_day(self):
        assert validate_birthday(2000, 2, 29, now=NOW) == (date(2000, 2, 29), None)

    def test_day_zero(self):
        birthday, error = validate_birthday(1992, 4, 0, now=NOW)
        assert birthday is None
        assert error.startswith("There are only 30 days in April 1992.")

    def test_invalid_month(self):
        birthday, error = validate_birthday(1992, 13, 1, now=NOW)
        assert birthday is None
        assert "month 13" in error

    def test_today_already_started_east_of_utc(self):
        # 2026-10-19 00:00 at UTC+14 is 2026-10-18 10:00 UTC
        assert validate_birthday(2026, 10, 19, utc_offset=14, now=NOW) == (date(2026, 10, 19), None)

    def test_today_not_yet_started_west_of_utc(self):
        # 2026-10-19 00:00 at UTC-12 is 2026-10-19 12:00 UTC
        birthday, error = validate_birthday(2026, 10, 19, utc_offset=-12, now=NOW)
        assert birthday is None
        assert "time traveler" in error


def test_format_birthday():
    assert format_birthday(date(1992, 7, 21)) == "Tuesday, July 21, 1992"
    assert format_birthday(date(2000, 1, 1)) == "Saturday, January 1, 2000"
