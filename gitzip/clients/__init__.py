"""GitZip hosting API resource clients."""

from gitzip.clients.git import GitDataClient
from gitzip.clients.repos import ReposClient
from gitzip.clients.users import UsersClient, parse_scopes

__all__ = [
    "GitDataClient",
    "ReposClient",
    "UsersClient",
    "parse_scopes",
]
