"""
Module: bot/commands/help.py

Provides the `/help` slash command for displaying usage information
for the bot's commands (setbirthday, Report Message).
"""
import nextcord
from nextcord.ext import commands

from config import GUILD_IDS, GUILD_MODE
from utils import log_message

HELP_DATA = {
    None: {
        "title": "📚 Instar Help",
        "description": "Here are the available commands:",
        "fields": [
            ("/setbirthday <year> <month> <day> [timezone]", "Record your birthday"),
            ("/birthday", "Show the birthday you have on record"),
            ("Apps → Report Message", "Right-click a message to report it to the staff team"),
            ("/help [command]", "Get help with a command")
        ]
    },
    "setbirthday": {
        "title": "🎂 Set Birthday Help",
        "description": "Record your birthday for this server",
        "example": "/setbirthday 1992 7 21 -8",
        "details": (
            "Parameters:\n"
            "- year: Year you were born.\n"
            "- month: Month you were born (1-12).\n"
            "- day: Day of the month.\n"
            "- timezone (optional): Your UTC offset in hours, e.g. -8 for Pacific time.\n\n"
            "Running the command again replaces your previous birthday."
        )
    },
    "report": {
        "title": "🚩 Report Message Help",
        "description": "Report a message to the staff team",
        "example": "Right-click a message → Apps → Report Message",
        "details": (
            "A form will ask for the reason of your report. "
            "Submit it within a few minutes, otherwise the report expires and you need to start again.\n"
            "Only the staff team can see your report."
        )
    }
}


def build_help_embed(command=None):
    """
    Build the help embed, or return None for an unknown command name.

    Without a command, lists all commands; with one, shows its example and details.
    """
    if command and command not in HELP_DATA:
        return None

    data = HELP_DATA[command] if command else HELP_DATA[None]
    embed = nextcord.Embed(
        title=data["title"],
        description=data["description"],
        color=nextcord.Color.green()
    )

    if command:
        embed.add_field(name="📝 Example", value=data["example"], inline=False)
        embed.add_field(name="ℹ️ Details", value=data["details"], inline=False)
    else:
        for name, value in data["fields"]:
            embed.add_field(name=name, value=value, inline=False)
    return embed


class HelpCommands(commands.Cog):
    """Registers `/help`."""

    @nextcord.slash_command(
        name="help",
        description="Get help with Instar's commands",
        guild_ids=GUILD_IDS if GUILD_MODE else None
    )
    async def show_help(
        self,
        interaction: nextcord.Interaction,
        command: str = nextcord.SlashOption(
            description="Command to explain", required=False, default=None,
            choices=["setbirthday", "report"]
        )
    ):
        embed = build_help_embed(command)
        if embed is None:
            await interaction.response.send_message(f"❌ Unknown command: {command}", ephemeral=True)
            return

        log_message(
            f"User {interaction.user.name} ({interaction.user.id}) accessed help: {command or 'general'}",
            "info"
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)
