import os
from dotenv import load_dotenv
from utils import env_interval, env_flag, env_id

load_dotenv()

RAW_GUILD_IDS = os.getenv("GUILD_IDS", "")
GUILD_IDS = [int(gid.strip()) for gid in RAW_GUILD_IDS.split(",") if gid.strip().isdigit()]
GUILD_MODE = bool(GUILD_IDS)

DISCORD_BOT_TOKEN = os.getenv('DISCORD_BOT_TOKEN')
DISCORD_APPLICATION_ID = os.getenv('DISCORD_APPLICATION_ID')

DEBUG = env_flag("DEBUG")

# Message reporting
STAFF_ANNOUNCE_CHANNEL = env_id("STAFF_ANNOUNCE_CHANNEL")
STAFF_ROLE_ID = env_id("STAFF_ROLE_ID")
REPORT_EXPIRY = env_interval("REPORT_EXPIRY", "5min")
REPORT_CONSUME_ON_READ = env_flag("REPORT_CONSUME_ON_READ", default=True)
CACHE_SWEEP_INTERVAL = env_interval("CACHE_SWEEP_INTERVAL", "1min")

DATABASE_PATH = os.getenv("DATABASE_PATH", "instar.db")


def check_credentials():
    """Raise EnvironmentError when the bot cannot log in with the current environment."""
    if not DISCORD_BOT_TOKEN or not DISCORD_APPLICATION_ID:
        raise EnvironmentError("Missing DISCORD_BOT_TOKEN or DISCORD_APPLICATION_ID in .env file")
