"""
Installation module.

OAuth installation flow settings and its HTML pages.
"""

from src.install.flow import (
    CALLBACK_PATH,
    INSTALL_PATH,
    INSTALL_SCOPES,
    CredentialInstallationStore,
    build_oauth_settings,
)

__all__ = [
    "CALLBACK_PATH",
    "INSTALL_PATH",
    "INSTALL_SCOPES",
    "CredentialInstallationStore",
    "build_oauth_settings",
]
