"""
Adapters implementing the core ports
"""

from .openai_client import OpenAIChatModel
from .memory import InMemoryStorage, InMemoryCache, InMemoryCredentialIssuer

__all__ = [
    "OpenAIChatModel",
    "InMemoryStorage",
    "InMemoryCache",
    "InMemoryCredentialIssuer",
]
