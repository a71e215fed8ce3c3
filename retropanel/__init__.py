"""retropanel: two-pane file manager core."""

APP_VERSION = "0.3.0"
__version__ = APP_VERSION
