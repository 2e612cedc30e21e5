"""
Module: bot/bot_context.py

Builds the Discord bot and the services its commands depend on (database,
report cache), wiring them into the command cogs. Everything is created once
by build_context() at startup and handed around explicitly.
"""
from datetime import timedelta

import nextcord
from nextcord.ext import commands, tasks

from commands.birthday import BirthdayCommands
from commands.help import HelpCommands
from commands.report import MessageReporter, ReportCommands, staff_ping
from config import (
    CACHE_SWEEP_INTERVAL, DATABASE_PATH, DEBUG,
    REPORT_CONSUME_ON_READ, REPORT_EXPIRY,
    STAFF_ANNOUNCE_CHANNEL, STAFF_ROLE_ID,
)
from correlation_cache import CorrelationCache
from database import Database
from utils import log_message


class BotContext:
    """
    Process-wide services shared by the event handlers in main.py.

    Attributes:
      bot: The nextcord commands.Bot.
      db: Database holding birthdays.
      report_cache: CorrelationCache mapping reporter IDs to reported messages.
      sweep_report_cache: Background loop evicting expired report cache entries.
    """
    def __init__(self, bot, db, report_cache, sweep_report_cache):
        self.bot = bot
        self.db = db
        self.report_cache = report_cache
        self.sweep_report_cache = sweep_report_cache

    def shutdown(self):
        """Drop outstanding reports and close the database."""
        if self.sweep_report_cache.is_running():
            self.sweep_report_cache.cancel()
        self.report_cache.purge_all()
        self.db.close()


def make_sweep_loop(cache: CorrelationCache, interval: timedelta):
    """Create a tasks.loop evicting expired entries from `cache` every `interval`."""
    @tasks.loop(seconds=interval.total_seconds())
    async def sweep():
        evicted = cache.evict_expired()
        if evicted:
            log_message(f"Evicted {evicted} expired {cache.name} cache entries", "debug")
    return sweep


def build_context(database_path=DATABASE_PATH):
    """
    Create the bot, its services and cogs from the loaded configuration.
    """
    db = Database(database_path)
    intents = nextcord.Intents.default()
    bot = commands.Bot(intents=intents)

    report_cache: CorrelationCache[int, nextcord.Message] = CorrelationCache(
        name="report",
        window=REPORT_EXPIRY,
        consume_on_read=REPORT_CONSUME_ON_READ,
    )
    if not STAFF_ANNOUNCE_CHANNEL:
        log_message("STAFF_ANNOUNCE_CHANNEL is not set; reports cannot be delivered", "warning")
    reporter = MessageReporter(report_cache, STAFF_ANNOUNCE_CHANNEL, staff_ping(STAFF_ROLE_ID, DEBUG))

    bot.add_cog(ReportCommands(reporter))
    bot.add_cog(BirthdayCommands(db))
    bot.add_cog(HelpCommands())

    return BotContext(bot, db, report_cache, make_sweep_loop(report_cache, CACHE_SWEEP_INTERVAL))
