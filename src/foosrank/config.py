# src/foosrank/config.py

"""Environment configuration, read once at import."""

import os

# Database URL from environment variable with SQLite fallback for development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./foosrank.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))

# "per_role" keeps a defender and an attacker belief per player,
# "single" keeps one shared belief.
RATING_MODE = os.getenv("RATING_MODE", "per_role")

# TrueSkill constants, fixed for the lifetime of the process
TRUESKILL_BETA = float(os.getenv("TRUESKILL_BETA", str(25.0 / 6.0)))
TRUESKILL_TAU = float(os.getenv("TRUESKILL_TAU", str(25.0 / 300.0)))
TRUESKILL_DRAW_PROBABILITY = float(os.getenv("TRUESKILL_DRAW_PROBABILITY", "0.10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Default page size for match history
MATCH_HISTORY_LIMIT = int(os.getenv("MATCH_HISTORY_LIMIT", "50"))
