"""discord.py adapters."""
