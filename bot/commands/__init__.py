"""
Module: bot/commands

Package initializer for the commands module. Each module defines a Cog that
bot_context.build_context() constructs with its dependencies and registers.
"""
