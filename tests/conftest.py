"""
Shared fixtures: a controllable clock for the correlation cache and mock
nextcord interactions.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeClock:
    """Monotonic clock advanced by hand."""
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def make_interaction(user_id=42, guild_id=1000, user_name="reporter"):
    """Build a MagicMock shaped like a nextcord.Interaction with awaitable responses."""
    interaction = MagicMock()
    interaction.user.id = user_id
    interaction.user.name = user_name
    interaction.guild.id = guild_id
    interaction.response.send_message = AsyncMock()
    interaction.response.send_modal = AsyncMock()
    return interaction


def make_message(message_id=555, content="hello", author_id=7, channel_id=300):
    """Build a MagicMock shaped like a nextcord.Message."""
    message = MagicMock()
    message.id = message_id
    message.content = content
    message.author.id = author_id
    message.author.name = "spammer"
    message.author.display_avatar.url = "https://cdn.discordapp.com/avatars/7/a.png"
    message.channel.id = channel_id
    return message


@pytest.fixture
def interaction():
    return make_interaction()
