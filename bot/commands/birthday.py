"""
Module: bot/commands/birthday.py

Defines the `/setbirthday` slash command, letting members record their birthday
(with an optional UTC offset) for the server.
"""
import calendar
import sqlite3
from datetime import date, datetime, timedelta, timezone, UTC

import nextcord
from nextcord.ext import commands

from config import GUILD_IDS, GUILD_MODE
from utils import log_message


def format_birthday(birthday):
    """Render a date as e.g. "Tuesday, July 21, 1992"."""
    return f"{birthday:%A}, {birthday:%B} {birthday.day}, {birthday.year}"


def validate_birthday(year, month, day, utc_offset=0, now=None):
    """
    Check a requested birthday.

    Returns (date, None) when valid, or (None, error_message) when the day
    does not exist or the birthday has not happened yet in the member's
    time zone.
    """
    if not 1 <= month <= 12:
        return None, f"There is no month {month}.  Your birthday was not set."
    days_in_month = calendar.monthrange(year, month)[1]
    if not 1 <= day <= days_in_month:
        return None, (
            f"There are only {days_in_month} days in {calendar.month_name[month]} {year}.  "
            "Your birthday was not set."
        )

    birthday = date(year, month, day)
    tz = timezone(timedelta(hours=utc_offset))
    start_of_day = datetime(year, month, day, tzinfo=tz)
    if start_of_day > (now or datetime.now(UTC)):
        return None, "You are not a time traveler.  Your birthday was not set."
    return birthday, None


async def set_birthday(interaction: nextcord.Interaction, db, year, month, day, utc_offset=0, now=None):
    """
    Handle `/setbirthday`: validate the date, persist it and answer ephemerally.

    Parameters:
    - interaction: Interaction context.
    - db: Database used to store the birthday.
    - year, month, day: The birthday.
    - utc_offset: Member's UTC offset in hours.
    - now: Override for the current time.
    """
    birthday, error = validate_birthday(year, month, day, utc_offset, now)
    if error:
        await interaction.response.send_message(error, ephemeral=True)
        return

    try:
        db.set_birthday(interaction.guild.id, interaction.user.id, birthday, utc_offset)
    except sqlite3.Error as e:
        log_message(f"Failed to store birthday for {interaction.user.id}: {e}", "error")
        await interaction.response.send_message(
            "❌ An error occurred while saving your birthday.", ephemeral=True
        )
        return

    log_message(
        f"User {interaction.user.name} ({interaction.user.id}) set birthday {birthday.isoformat()} (UTC{utc_offset:+d})",
        "info"
    )
    await interaction.response.send_message(
        f"Your birthday was set to {format_birthday(birthday)}.", ephemeral=True
    )


async def show_birthday(interaction: nextcord.Interaction, db):
    """Handle `/birthday`: tell the member which birthday is on record for this server."""
    try:
        stored = db.get_birthday(interaction.guild.id, interaction.user.id)
    except sqlite3.Error as e:
        log_message(f"Failed to read birthday for {interaction.user.id}: {e}", "error")
        await interaction.response.send_message(
            "❌ An error occurred while reading your birthday.", ephemeral=True
        )
        return

    if stored is None:
        await interaction.response.send_message(
            "You have not set your birthday.  Use /setbirthday to set it.", ephemeral=True
        )
        return

    birthday, utc_offset = stored
    await interaction.response.send_message(
        f"Your birthday is set to {format_birthday(birthday)} (UTC{utc_offset:+d}).", ephemeral=True
    )


class BirthdayCommands(commands.Cog):
    """Registers `/setbirthday` and `/birthday`."""
    def __init__(self, db):
        self.db = db

    @nextcord.slash_command(
        name="setbirthday",
        description="Record your birthday",
        guild_ids=GUILD_IDS if GUILD_MODE else None,
        dm_permission=False
    )
    async def setbirthday(
        self,
        interaction: nextcord.Interaction,
        year: int = nextcord.SlashOption(
            description="Year you were born", required=True, min_value=1900, max_value=9999
        ),
        month: int = nextcord.SlashOption(
            description="Month you were born (1-12)", required=True, min_value=1, max_value=12
        ),
        day: int = nextcord.SlashOption(
            description="Day you were born", required=True, min_value=1, max_value=31
        ),
        utc_offset: int = nextcord.SlashOption(
            name="timezone", description="Your UTC offset in hours (e.g. -8)", required=False,
            default=0, min_value=-12, max_value=14
        )
    ):
        await set_birthday(interaction, self.db, year, month, day, utc_offset)

    @nextcord.slash_command(
        name="birthday",
        description="Show the birthday you have on record",
        guild_ids=GUILD_IDS if GUILD_MODE else None,
        dm_permission=False
    )
    async def birthday(self, interaction: nextcord.Interaction):
        await show_birthday(interaction, self.db)
