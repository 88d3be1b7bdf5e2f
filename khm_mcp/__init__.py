"""khm-mcp: SSH known_hosts manager exposed over MCP."""

__version__ = "1.0.0"
