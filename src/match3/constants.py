GRID_ROWS = 8
GRID_COLS = 8
BOTTOM_MARGIN = 20

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.75
BOARD_MAX_HEIGHT_PCT = 0.90
MIN_TILE_SIZE = 20
# Inset between a cell edge and the drawn token.
TOKEN_PADDING = 4

# Turn pacing (seconds). Opaque waits standing in for swap/clear/fall animation time.
SWAP_DELAY = 0.3
MATCH_CHECK_DELAY = 0.5
CLEAR_DELAY = 0.5
FALL_DELAY = 0.3

# Scoring
BASE_SCORE_PER_TOKEN = 100
EXTRA_TOKEN_BONUS = 50
MIN_MATCH_LENGTH = 3

# Priority = token_count * PRIORITY_PER_TOKEN + shape bonus
PRIORITY_PER_TOKEN = 10

# Arcade mouse buttons
MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 4
