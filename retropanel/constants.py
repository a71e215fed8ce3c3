"""Constants and limits for retropanel."""

# Visible file rows per panel.
PANEL_HEIGHT = 19

# Legacy filename limits (8.3 plus dot).
MAX_NAME_LEN = 12
MAX_BASE_LEN = 8
MAX_EXT_LEN = 3
MAX_PATH_LEN = 64

PARENT_NAME = '..'
CURRENT_NAME = '.'
SEPARATOR = '\\'
MATCH_ALL = '*.*'

# Legacy file attribute bits.
ATTR_READONLY = 0x01
ATTR_HIDDEN = 0x02
ATTR_SYSTEM = 0x04
ATTR_VOLUME = 0x08
ATTR_DIRECTORY = 0x10
ATTR_ARCHIVE = 0x20

# Memory tiers are supplied by configuration, never detected.
MEM_LOW = 'low'
MEM_MEDIUM = 'medium'
MEM_HIGH = 'high'
MEMORY_TIERS = (MEM_LOW, MEM_MEDIUM, MEM_HIGH)
DEFAULT_MEMORY_TIER = MEM_HIGH

FILES_PER_PANEL = {
    MEM_LOW: 256,
    MEM_MEDIUM: 512,
    MEM_HIGH: 1024,
}

COPY_BUFFER_SIZE = {
    MEM_LOW: 512,
    MEM_MEDIUM: 2048,
    MEM_HIGH: 8192,
}

DEFAULT_DRIVE = 'C'
