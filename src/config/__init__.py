"""
Configurações do sistema
"""

from .data_source_config import DataSourceConfig
from .env_loader import load_environment
from .logging_config import setup_logging

__all__ = ['DataSourceConfig', 'load_environment', 'setup_logging']
