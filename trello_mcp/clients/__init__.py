"""
Clients Package - HTTP client factory and the Trello REST API client.
"""

from trello_mcp.clients.http import create_http_client
from trello_mcp.clients.trello import TrelloClient

__all__ = [
    "create_http_client",
    "TrelloClient",
]
