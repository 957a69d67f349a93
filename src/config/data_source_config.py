import os
import logging
from typing import Dict, Any, List

from exceptions.api_exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PNCP_BASE_URL = 'https://pncp.gov.br/api/consulta'
DEFAULT_COMEXSTAT_BASE_URLS = [
    'https://api-comexstat.mdic.gov.br',
    'https://api.comexstat.mdic.gov.br',  # fallback
]


class DataSourceConfig:
    """Configuração das fontes externas (PNCP e ComexStat)"""

    def __init__(self, overrides: Dict[str, Dict[str, Any]] = None):
        self.sources = self._load_config()
        for name, values in (overrides or {}).items():
            self.sources.setdefault(name, {}).update(values)
        for name, config in self.sources.items():
            self._validate_provider_config(name, config)
        logger.info(f"✅ Data source configuration loaded with {len(self.sources)} providers")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables and defaults"""
        default_config = {
            'pncp': {
                'api_base_url': os.getenv('PNCP_BASE_URL', DEFAULT_PNCP_BASE_URL),
                'timeout': 30,
                'page_delay_ms': 50,
                'max_attempts': 1,
            },
            'comexstat': {
                'api_base_urls': DEFAULT_COMEXSTAT_BASE_URLS,
                'timeout': 20,
                'max_attempts': 3,
            }
        }

        if os.getenv('COMEXSTAT_BASE_URLS'):
            default_config['comexstat']['api_base_urls'] = [
                url.strip() for url in os.getenv('COMEXSTAT_BASE_URLS').split(',') if url.strip()
            ]

        self._int_from_env(default_config['pncp'], 'timeout', 'PNCP_TIMEOUT')
        self._int_from_env(default_config['pncp'], 'page_delay_ms', 'PNCP_PAGE_DELAY_MS')
        self._int_from_env(default_config['pncp'], 'max_attempts', 'PNCP_MAX_ATTEMPTS')
        self._int_from_env(default_config['comexstat'], 'timeout', 'COMEX_TIMEOUT')

        return default_config

    @staticmethod
    def _int_from_env(target: Dict[str, Any], key: str, env_name: str) -> None:
        raw = os.getenv(env_name)
        if not raw:
            return
        try:
            target[key] = int(raw)
        except ValueError:
            logger.warning(f"Invalid {env_name} value, using default")

    def get_provider_config(self, provider: str) -> Dict[str, Any]:
        """Get configuration for a specific provider"""
        config = self.sources.get(provider)
        if not config:
            raise ConfigurationError(provider, "fonte de dados não configurada")
        return config

    def list_providers(self) -> List[str]:
        return list(self.sources)

    def _validate_provider_config(self, name: str, config: Dict[str, Any]):
        """Validate provider configuration"""
        if 'api_base_urls' in config:
            if not config['api_base_urls']:
                raise ConfigurationError(name, "nenhuma URL base definida")
        elif not (config.get('api_base_url') or '').strip():
            raise ConfigurationError(name, "URL base não definida (PNCP_BASE_URL)")

        timeout = config.get('timeout')
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError(name, "'timeout' deve ser um número positivo")
