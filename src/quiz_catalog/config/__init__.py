from .loader import load_settings
from .schema import ApiConfig, LoggingConfig, ProviderConfig, Settings

__all__ = ["load_settings", "Settings", "ProviderConfig", "LoggingConfig", "ApiConfig"]
