from .loader import ConfigError, load_config, parse_config
from .models import AdapterDecl, AppConfig, WriterSection

__all__ = ["ConfigError", "load_config", "parse_config", "AppConfig", "AdapterDecl", "WriterSection"]
