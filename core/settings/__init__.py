# Settings package
from core.settings.modules import AppSettings, AuditSettings, ServerSettings, get_app_settings

__all__ = ["get_app_settings", "AppSettings", "AuditSettings", "ServerSettings"]
