"""Jira integration for correlating commits with tickets."""

from .changelog import Jira
from .client import JiraClient

__all__ = [
    "Jira",
    "JiraClient",
]
