"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "khm_mcp.server": COLORS["bright_cyan"],
    "khm_mcp.knownhosts": COLORS["bright_magenta"],
    "khm_mcp.services": COLORS["bright_blue"],
    "khm_mcp.tools": COLORS["bright_blue"],
    "khm_mcp.resources": COLORS["cyan"],
    "khm_mcp.middleware": COLORS["yellow"],
    "khm_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

PREFIX = "khm_mcp."

URI_PATTERN = re.compile(r"(\w+://[^\s]+)")
DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
PATH_PATTERN = re.compile(r"(/[\w.\-/]*(?:known_hosts|stash_hosts)[\w.\-]*)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name/component."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        """Format log level with color and fixed width."""
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        """Format component/logger name with color."""
        name = record.name
        if name.startswith(PREFIX):
            name = name[len(PREFIX):]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<22}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors and a local timestamp."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])

        message = self._highlight_message(record.getMessage())
        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight specific patterns in log messages."""
        if not self.use_colors:
            return message

        # Resource URIs like hosts://list
        if "://" in message:
            message = URI_PATTERN.sub(
                f"{COLORS['bright_blue']}\\1{COLORS['reset']}", message
            )

        if "ms" in message:
            message = DURATION_PATTERN.sub(
                f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
            )

        if "_hosts" in message:
            message = PATH_PATTERN.sub(
                f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
            )

        return message


class MCPRequestFormatter(ColorfulFormatter):
    """Extended formatter with MCP request/response indicators."""

    def format(self, record: logging.LogRecord) -> str:
        """Format with a leading indicator for notable events."""
        base = super().format(record)

        if not self.use_colors:
            return base

        message = record.getMessage().lower()

        if "starting" in message or "ready" in message:
            return f"{COLORS['bright_green']}>>>{COLORS['reset']} {base}"
        elif "shutting down" in message or "shutdown" in message:
            return f"{COLORS['bright_red']}<<<{COLORS['reset']} {base}"
        elif "error" in message or "failed" in message:
            return f"{COLORS['bright_red']}!!{COLORS['reset']}  {base}"
        elif "warning" in message or "slow" in message:
            return f"{COLORS['bright_yellow']}!{COLORS['reset']}   {base}"
        elif "saved" in message or "backup created" in message:
            return f"{COLORS['bright_green']}OK{COLORS['reset']}  {base}"
        elif "stashed" in message or "moved" in message:
            return f"{COLORS['bright_cyan']}~{COLORS['reset']}   {base}"
        elif "removed" in message or "deleted" in message:
            return f"{COLORS['bright_yellow']}-{COLORS['reset']}   {base}"

        return f"    {base}"
