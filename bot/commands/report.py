"""
Module: bot/commands/report.py

Defines the "Report Message" message command. Reporting is split over two
interactions: the context-menu command caches the reported message for the
invoking user and opens a modal; the modal submission looks the message up
again by user ID and posts the report to the staff channel.
"""
from datetime import datetime, UTC

import nextcord
from nextcord import ui
from nextcord.ext import commands

from config import GUILD_IDS, GUILD_MODE
from correlation_cache import CorrelationCache
from utils import log_message

REPORT_COMMAND_NAME = "Report Message"
REPORT_COLOR = 0x0c94e0
REPORT_FOOTER_TEXT = "Instar Message Reporting System"
REPORT_FOOTER_ICON = "https://spacegirl.s3.us-east-1.amazonaws.com/instar.png"
DEBUG_STAFF_PING = "{{staffping}}"
REPORT_MODAL_ID = "respond_modal"
# abandoned modals outlive the cached report by this many seconds before nextcord drops them
MODAL_TIMEOUT_MARGIN = 60

# Discord rejects embed field values longer than this
FIELD_VALUE_LIMIT = 1024

REPORT_EXPIRED = "Report expired.  Please try again."
REPORT_SENT = "Your report has been sent."
REPORT_FAILED = "❌ Your report could not be delivered to the staff team. Please contact a moderator directly."


def code_block(text):
    """Wrap text in a code block that fits in a single embed field."""
    # a zero-width space keeps embedded fences from closing the block
    text = (text or "").replace("```", "`\u200b`\u200b`")
    room = FIELD_VALUE_LIMIT - 6
    if len(text) > room:
        text = text[:room - 1] + "…"
    return f"```{text}```"


def staff_ping(staff_role_id, debug=False):
    """Message content accompanying a report: the staff role mention, or a placeholder in debug mode."""
    if debug:
        return DEBUG_STAFF_PING
    return f"<@&{staff_role_id}>" if staff_role_id else None


def build_report_embed(message, reason, reporter_id, guild_id):
    """
    Build the staff-facing embed describing a reported message.

    Parameters:
    - message: The reported nextcord.Message.
    - reason: Free-text reason entered by the reporter.
    - reporter_id: User ID of the reporter.
    - guild_id: Guild the report was made in, used for the jump link.
    """
    author = message.author
    channel = message.channel

    embed = nextcord.Embed(color=REPORT_COLOR, timestamp=datetime.now(UTC))
    if author is not None:
        embed.set_author(name=author.name, icon_url=author.display_avatar.url)
    embed.set_footer(text=REPORT_FOOTER_TEXT, icon_url=REPORT_FOOTER_ICON)

    embed.add_field(name="Message Content", value=code_block(message.content), inline=False)
    embed.add_field(name="Reason", value=code_block(reason), inline=False)
    if author is not None:
        embed.add_field(name="User", value=f"<@{author.id}>", inline=True)
    if channel is not None:
        embed.add_field(name="Channel", value=f"<#{channel.id}>", inline=True)
    channel_id = channel.id if channel is not None else ""
    embed.add_field(
        name="Message",
        value=f"https://discord.com/channels/{guild_id}/{channel_id}/{message.id}",
        inline=True
    )
    embed.add_field(name="Reported By", value=f"<@{reporter_id}>", inline=False)
    return embed


class ReportMessageModal(ui.Modal):
    """
    Modal asking the reporter for a reason.

    Holds no reference to the reported message; the submission is matched
    back to it through the report cache using the submitting user's ID.
    The fixed custom_id keeps at most one pending modal per user in
    nextcord's modal store.
    """
    def __init__(self, reporter, timeout=None):
        super().__init__(title="Report Message", timeout=timeout, custom_id=REPORT_MODAL_ID)
        self.reporter = reporter
        self.reason = ui.TextInput(
            label="Reason",
            style=nextcord.TextInputStyle.paragraph,
            placeholder="Why are you reporting this message?",
            required=True,
            max_length=1000,
        )
        self.add_item(self.reason)

    async def callback(self, interaction: nextcord.Interaction):
        self.stop()
        await self.reporter.submit_report(interaction, self.reason.value)


class MessageReporter:
    """
    Both halves of the report flow, with their collaborators injected.

    Attributes:
      cache: CorrelationCache mapping reporter user ID to the reported message.
      staff_channel_id (int or None): Channel receiving reports.
      staff_ping (str or None): Content sent along with the report embed.
    """
    def __init__(self, cache: CorrelationCache[int, nextcord.Message], staff_channel_id, staff_ping=None):
        self.cache = cache
        self.staff_channel_id = staff_channel_id
        self.staff_ping = staff_ping

    def modal_timeout(self):
        """Seconds before an unsubmitted modal stops listening."""
        return self.cache.window.total_seconds() + MODAL_TIMEOUT_MARGIN

    async def start_report(self, interaction: nextcord.Interaction, message: nextcord.Message):
        """Remember the message for this user and open the reason modal."""
        self.cache.put(interaction.user.id, message)
        log_message(
            f"User {interaction.user.name} ({interaction.user.id}) started a report on message {message.id}",
            "info"
        )
        await interaction.response.send_modal(ReportMessageModal(self, timeout=self.modal_timeout()))

    async def submit_report(self, interaction: nextcord.Interaction, reason):
        """
        Complete a report from the modal submission.

        A missing cache entry means the report expired or was already sent;
        the user is asked to start over and nothing is posted.
        """
        message = self.cache.get(interaction.user.id)
        if message is None:
            log_message(f"Report from {interaction.user.id} expired before submission", "warning")
            await interaction.response.send_message(REPORT_EXPIRED, ephemeral=True)
            return

        try:
            await self._send_to_staff(interaction, message, reason)
        except (nextcord.HTTPException, LookupError) as e:
            log_message(f"Failed to deliver report from {interaction.user.id}: {e}", "error")
            await interaction.response.send_message(REPORT_FAILED, ephemeral=True)
            return

        log_message(
            f"User {interaction.user.name} ({interaction.user.id}) reported message {message.id}",
            "info"
        )
        await interaction.response.send_message(REPORT_SENT, ephemeral=True)

    async def _send_to_staff(self, interaction, message, reason):
        channel = interaction.guild.get_channel(self.staff_channel_id) if self.staff_channel_id else None
        if channel is None:
            raise LookupError(f"staff channel {self.staff_channel_id} not found")
        embed = build_report_embed(message, reason, interaction.user.id, interaction.guild.id)
        await channel.send(self.staff_ping, embed=embed)


class ReportCommands(commands.Cog):
    """Registers the "Report Message" context-menu command."""
    def __init__(self, reporter: MessageReporter):
        self.reporter = reporter

    @nextcord.message_command(
        name=REPORT_COMMAND_NAME,
        guild_ids=GUILD_IDS if GUILD_MODE else None,
        dm_permission=False
    )
    async def report_message(self, interaction: nextcord.Interaction, message: nextcord.Message):
        await self.reporter.start_report(interaction, message)
