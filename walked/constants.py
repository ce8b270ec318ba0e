"""Constants for walked."""

APP_NAME = "walked"

# Names given to freshly created entries before the user renames them.
NEW_FILE_NAME = "NEWFILE"
NEW_DIRECTORY_NAME = "NEWDIR"

# Collision-free path allocation appends this until the path is free.
ALLOCATION_SUFFIX = ".1"
MAX_ALLOCATION_ATTEMPTS = 64

# Characters rejected in entry names.
RESERVED_NAME_CHARS = ("\\", "/", ":", "*", "?", '"', "<", ">", "|")

# Single-line box characters.
SB_TL = "┌"
SB_TR = "┐"
SB_BL = "└"
SB_BR = "┘"
SB_H = "─"
SB_V = "│"

# Color pair IDs.
C_BORDER = 1
C_BORDER_FOCUS = 2
C_TITLE = 3
C_ERROR = 4
C_BODY = 5
C_CURSOR = 6
C_RANGE = 7
C_HEADER = 8
C_STATUS = 9

# Layout constants
PANEL_MIN_WIDTH = 12         # Narrower panels are not drawn
PANEL_MIN_HEIGHT = 4
ESC_DELAY_MS = 25            # Wait for an Alt-sequence after ESC
