"""FinOps Org Insights MCP Server.

Aggregates cloud spend, vulnerability and safe deployment metrics across an
Area > Department > Team > Account hierarchy and exposes them to AI
assistants over MCP.
"""

__version__ = "0.1.0"
