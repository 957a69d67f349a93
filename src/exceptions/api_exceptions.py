"""
Exceções da API do Radar de Licitações
"""
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

class BaseAPIException(Exception):
    """Exceção base para todas as exceções da API"""

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Converter exceção para formato JSON"""
        body = {
            'ok': False,
            'error': self.message,
            'code': self.error_code,
        }
        if self.details:
            body['details'] = self.details
        return body

    @property
    def http_status(self) -> int:
        """Status HTTP padrão para a exceção"""
        return 500

class ValidationError(BaseAPIException):
    """Erro de validação de entrada (reportado antes de qualquer chamada externa)"""

    @property
    def http_status(self) -> int:
        return 400

class ConfigurationError(BaseAPIException):
    """Erro de configuração"""

    def __init__(self, config_name: str, message: str):
        super().__init__(f"{config_name}: {message}")
        self.config_name = config_name

class UpstreamError(BaseAPIException):
    """Erro ao chamar APIs externas (PNCP, ComexStat)"""

    def __init__(self, service_name: str, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            full_message = f"{service_name} erro {status_code}: {message}"
        else:
            full_message = f"{service_name}: {message}"
        super().__init__(full_message, details={'service': service_name, 'status_code': status_code})
        self.service_name = service_name
        self.status_code = status_code
        logger.warning(f"Upstream error: {full_message}")

    @property
    def http_status(self) -> int:
        return 502  # Bad Gateway
