"""
Allow running the MCP server as a Python module.

Usage:
    python -m insights_server

This starts the stdio MCP server. Use run_server.py for the HTTP server.
"""

from .stdio_server import main

if __name__ == "__main__":
    main()
