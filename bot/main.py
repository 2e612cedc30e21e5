"""
Module: bot/main.py

Entry point for the Instar Discord Bot.
Builds the bot and its services, and defines event handlers for bot lifecycle,
guild membership, disconnection, reconnection, and command logging.
"""
import traceback

import nextcord
from colorama import Fore, Style

from config import DISCORD_BOT_TOKEN, GUILD_IDS, GUILD_MODE, DISCORD_APPLICATION_ID, check_credentials
from utils import log_message
from bot_context import build_context

check_credentials()

context = build_context()
bot = context.bot
db = context.db

@bot.event
async def on_ready():
    """
    Handler for the bot's ready event.

    Logs bot identity, syncs slash commands and starts the report cache sweep.
    """
    log_message(f'Logged in as {bot.user.name} ({bot.user.id})', "info")

    if GUILD_MODE:
        for guild_id in GUILD_IDS:
            guild = bot.get_guild(guild_id)
            guild_name = guild.name if guild else str(guild_id)
            try:
                synced = await bot.sync_application_commands(guild_id=guild_id)
                count = len(synced) if synced is not None else None
                if count is not None:
                    log_message(f"Synced {count} commands to guild {guild_name} ({guild_id})", "info")
                else:
                    log_message(f"Synced commands to guild {guild_name} ({guild_id})", "info")
            except nextcord.Forbidden:
                log_message(
                    f"Failed to sync commands for guild {guild_name} ({guild_id}): Missing Access", "warning"
                )
            except nextcord.HTTPException as e:
                log_message(
                    f"Error syncing commands for guild {guild_name} ({guild_id}): {e}", "error"
                )

    if not context.sweep_report_cache.is_running():
        context.sweep_report_cache.start()

    perms = nextcord.Permissions()
    perms.send_messages = True
    perms.view_channel = True
    perms.read_message_history = True
    perms.embed_links = True
    perms.mention_everyone = True

    invite_url = nextcord.utils.oauth_url(
        client_id=DISCORD_APPLICATION_ID,
        permissions=perms,
        scopes=["bot", "applications.commands"]
    )
    print(f"{Fore.CYAN}Bot invite URL: {Fore.YELLOW}{invite_url}{Style.RESET_ALL}")

@bot.event
async def on_application_command_error(interaction, error):
    """
    Handler for errors during slash command execution.

    Logs the error and notifies the user of an internal failure.
    """
    log_message(f"Application command error: {error}", "error")
    try:
        if interaction.response.is_done():
            await interaction.followup.send("❌ An internal error occurred.", ephemeral=True)
        else:
            await interaction.response.send_message("❌ An internal error occurred.", ephemeral=True)
    except nextcord.HTTPException as e:
        log_message(f"Could not report command error to user: {e}", "warning")

@bot.event
async def on_error(event_method, *args, **kwargs):
    """
    Catch-all handler for unhandled errors in any event.

    Logs the event method name and full traceback when an error occurs.
    """
    tb = traceback.format_exc()
    log_message(f"Unhandled error in event {event_method}: {tb}", "error")

@bot.event
async def on_guild_join(guild):
    """
    Handler for when the bot joins a new guild.

    Logs the guild information and synchronizes slash commands to the guild.
    """
    log_message(f"Joined new guild: {guild.name} ({guild.id})", "info")
    try:
        synced = await bot.sync_application_commands(guild_id=guild.id)
        count = len(synced) if synced is not None else 0
        log_message(f"Synced {count} commands to new guild {guild.id}", "info")
    except nextcord.HTTPException as e:
        log_message(f"Failed to sync commands for guild {guild.id}: {e}", "error")

@bot.event
async def on_guild_remove(guild):
    """
    Handler for when the bot is removed from a guild.

    Logs the removal event.
    """
    log_message(f"Removed from guild: {guild.name} ({guild.id})", "warning")

@bot.event
async def on_disconnect():
    """
    Handler for bot disconnection.

    Closes the database connection. Pending reports stay cached so a user
    mid-report can still submit once the bot resumes.
    """
    log_message("Bot disconnected from Discord.", "warning")
    db.close()

@bot.event
async def on_resumed():
    """
    Handler for bot reconnection after a disconnect.

    Reconnects the database.
    """
    log_message("Bot resumed connection, reconnecting DB.", "info")
    db.connect()
    log_message("Database reconnected.", "debug")

def describe_options(options):
    """
    Render slash command options as `name:value` pairs, descending into subcommands.
    """
    parts = []
    for opt in options:
        if opt.get('type') in (1, 2):
            parts.append(opt['name'])
            parts.extend(describe_options(opt.get('options', [])))
            continue
        val = opt.get('value')
        val_str = str(val)
        if isinstance(val, str) and (' ' in val_str or ':' in val_str):
            val_str = f'"{val_str}"'
        parts.append(f"{opt['name']}:{val_str}")
    return parts

@bot.listen()
async def on_interaction(interaction: nextcord.Interaction):
    """
    Listener for all application command interactions.

    Reconstructs slash commands with argument names and values, or names the
    target of context-menu commands, and logs it along with guild, channel,
    and user context.
    """
    if interaction.type != nextcord.InteractionType.application_command:
        return
    try:
        data = interaction.data
        if data.get('type', 1) == 1:
            cmd = " ".join([f"/{data['name']}"] + describe_options(data.get('options', [])))
        else:
            cmd = f"{data['name']} (target {data.get('target_id')})"
        guild = f"{interaction.guild.name} ({interaction.guild.id})" if interaction.guild else "DM"
        channel = getattr(interaction.channel, 'name', None) or "?"
        log_message(
            f"Command invoked: {cmd} | Guild: {guild} | Channel: #{channel} ({interaction.channel_id}) | User: {interaction.user.name} ({interaction.user.id})",
            "info"
        )
    except (KeyError, AttributeError) as e:
        log_message(f"Error in on_interaction: {e}", "error")

# Bot startup
log_message("Bot is starting up...")
try:
    bot.run(DISCORD_BOT_TOKEN)
finally:
    log_message("Bot shutting down, purging pending reports.", "info")
    context.shutdown()
