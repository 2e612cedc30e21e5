"""
Module: bot/database.py

Handles SQLite database connectivity, schema initialization, and queries for member birthdays.
"""
import sqlite3
from datetime import date, datetime, UTC
from utils import log_message

class Database:
    """
    Database wrapper for SQLite with automatic connection handling and schema setup.
    """
    def __init__(self, path='instar.db'):
        """
        Initialize the Database instance and establish the first connection.

        Args:
            path (str): SQLite file to open, or ':memory:'.
        """
        self.path = path
        self.conn = None
        self.cursor = None
        self.connect()

    def connect(self):
        """
        Establish a connection to the SQLite database and initialize the schema if necessary.

        Reconnects if there was a previous connection.
        """
        try:
            if self.conn:
                try:
                    self.conn.close()
                except Exception as e:
                    log_message(f"Error closing existing DB connection: {e}", "warning")

            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.cursor = self.conn.cursor()
            self._initialize_db()

        except Exception as e:
            log_message(f"Database connection error: {e}", "error")

    def _initialize_db(self):
        """
        Create the 'birthday' table if it does not exist.
        """
        try:
            self.cursor.execute('''
                CREATE TABLE IF NOT EXISTS birthday (
                    guild_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    birth_date TEXT NOT NULL,
                    utc_offset INTEGER NOT NULL DEFAULT 0,
                    updated_at TIMESTAMP NOT NULL,
                    PRIMARY KEY(guild_id, user_id)
                )
            ''')
            self.cursor.execute('CREATE INDEX IF NOT EXISTS idx_birthday_date ON birthday (birth_date)')
            self.conn.commit()
        except Exception as e:
            log_message(f"Error initializing database schema: {e}", "error")

    def ensure_connection(self):
        """
        Verify that the current connection is alive by executing a simple query.
        If it fails, reconnect and reinitialize the schema.
        """
        try:
            self.cursor.execute('SELECT 1')
        except (sqlite3.ProgrammingError, sqlite3.InterfaceError, sqlite3.OperationalError, AttributeError) as e:
            log_message(f"Lost DB connection, reconnecting: {e}", "warning")
            self.connect()

    def close(self):
        """Close the connection; a later ensure_connection() reopens it."""
        if self.conn:
            try:
                self.conn.close()
            except sqlite3.Error as e:
                log_message(f"Failed to close database: {e}", "error")

    def execute(self, query, params=()):
        """
        Execute a modifying SQL query (INSERT/UPDATE/DELETE) with parameters,
        ensuring the connection is alive and committing after success.

        Returns the SQLite cursor for further inspection.
        """
        try:
            self.ensure_connection()
            result = self.cursor.execute(query, params)
            self.conn.commit()
            return result
        except Exception as e:
            log_message(f"Error executing query: {e}\nQuery: {query}\nParams: {params}", "error")
            raise

    def fetchall(self, query, params=()):
        """
        Execute a SELECT query with parameters and return all fetched rows.

        Ensures the connection is alive before querying.
        """
        try:
            self.ensure_connection()
            return self.cursor.execute(query, params).fetchall()
        except Exception as e:
            log_message(f"Error fetching data: {e}\nQuery: {query}\nParams: {params}", "error")
            raise

    def set_birthday(self, guild_id, user_id, birth_date, utc_offset=0):
        """
        Insert or replace a member's birthday.

        Args:
            guild_id (int): Guild the birthday belongs to.
            user_id (int): Member's user ID.
            birth_date (date): The birthday.
            utc_offset (int): Member's UTC offset in hours.
        """
        self.execute('''
            INSERT INTO birthday (guild_id, user_id, birth_date, utc_offset, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(guild_id, user_id) DO UPDATE SET
              birth_date=excluded.birth_date,
              utc_offset=excluded.utc_offset,
              updated_at=excluded.updated_at
        ''', (guild_id, user_id, birth_date.isoformat(), utc_offset, datetime.now(UTC).isoformat()))

    def get_birthday(self, guild_id, user_id):
        """
        Return (birth_date, utc_offset) for a member, or None if no birthday is stored.
        """
        rows = self.fetchall(
            'SELECT birth_date, utc_offset FROM birthday WHERE guild_id = ? AND user_id = ?',
            (guild_id, user_id)
        )
        if not rows:
            return None
        birth_date, utc_offset = rows[0]
        return date.fromisoformat(birth_date), utc_offset
