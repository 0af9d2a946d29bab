GRID_ROWS = 15
GRID_COLS = 8
COLORS = ("brown", "blue", "yellow")

# Contiguous same-colored cells required for a clear.
MATCH_LENGTH = 4
SCORE_PER_VIRUS = 100

# Viruses per level are drawn uniformly from this inclusive range.
VIRUS_COUNT_MIN = 3
VIRUS_COUNT_MAX = 4

# Scheduler cadence in seconds per mode; modes not listed advance on the next tick.
ACTIVE_STEP_DELAY = 0.75
CLEARING_DELAY = 0.15
SETTLING_STEP_DELAY = 0.10

# Presentation
CELL_SIZE = 32
BOARD_MARGIN = 24
SIDE_PANEL_WIDTH = 180
