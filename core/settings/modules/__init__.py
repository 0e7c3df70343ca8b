# Settings modules
from .app_settings import AppSettings, get_app_settings
from .audit_settings import AuditSettings
from .server_settings import ServerSettings

__all__ = [
    "AppSettings",
    "AuditSettings",
    "ServerSettings",
    "get_app_settings",
]
