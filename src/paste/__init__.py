"""
Paste-hosting API module.
"""

from src.paste.client import PasteApiError, PasteClient, PasteClientProtocol

__all__ = ["PasteApiError", "PasteClient", "PasteClientProtocol"]
