"""
Tests for wiring the bot and its services together.
"""
from datetime import timedelta

import pytest

from bot_context import build_context, make_sweep_loop
from config import REPORT_CONSUME_ON_READ, REPORT_EXPIRY
from correlation_cache import CorrelationCache


@pytest.mark.asyncio
async def test_build_context_registers_cogs():
    context = build_context(":memory:")
    try:
        assert context.bot.get_cog("ReportCommands") is not None
        assert context.bot.get_cog("BirthdayCommands").db is context.db
        assert context.bot.get_cog("HelpCommands") is not None
        reporter = context.bot.get_cog("ReportCommands").reporter
        assert reporter.cache is context.report_cache
        assert context.report_cache.window == REPORT_EXPIRY
        assert context.report_cache.consume_on_read is REPORT_CONSUME_ON_READ
    finally:
        context.shutdown()


@pytest.mark.asyncio
async def test_shutdown_purges_report_cache():
    context = build_context(":memory:")
    context.report_cache.put(42, "message")

    context.shutdown()

    assert len(context.report_cache) == 0
    assert context.report_cache.get(42) is None


@pytest.mark.asyncio
async def test_sweep_loop_evicts_expired_entries(clock):
    cache = CorrelationCache(window=timedelta(seconds=10), clock=clock)
    cache.put("a", 1)
    clock.advance(11)
    sweep = make_sweep_loop(cache, timedelta(minutes=1))

    await sweep.coro()

    assert len(cache) == 0
