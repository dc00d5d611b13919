"""Fixed game rules shared by the engine and the session runtime."""

from __future__ import annotations

BOARD_WIDTH = 64
BOARD_HEIGHT = 24

MAX_PLAYERS = 5
POINTS_PER_KILL = 3
FRUIT_CHANCE = 0.3

# Slightly over one second so consecutive cycles never bunch up.
TICK_INTERVAL = 1.001

# Rows for player spawns are spread over the first 21 rows.
SPAWN_ROWS = 21
SPAWN_COLUMNS = (2, 3)

# Per-player body glyphs, indexed by roster position.
PLAYER_GLYPHS = ("#", "@", "%", "$", "*", "z", "+", "=", "?", "Q")
HEAD_GLYPH = "O"
FRUIT_GLYPH = "o"
EMPTY_GLYPH = "-"

MODE_MULTIPLAYER = "snake"
MODE_SOLO = "solo"
GAME_MODES = (MODE_MULTIPLAYER, MODE_SOLO)
