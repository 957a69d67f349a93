"""
Cliente da API ComexStat (estatísticas de comércio exterior do MDIC).
"""
from typing import Any, Dict, List, Optional
from datetime import datetime
from urllib.parse import quote
import json
import logging

import requests

from adapters.pncp_adapter import HTTPJsonClient, snippet
from exceptions.api_exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

FIRST_YEAR = 1997


class ComexStatClient(HTTPJsonClient):
    """
    Consulta o ComexStat tentando cada URL base em ordem; cada URL tem até
    `max_attempts` tentativas com espera crescente.
    """

    service_name = 'ComexStat'

    def __init__(self, base_urls: List[str], timeout: float = 20, max_attempts: int = 3, **kwargs):
        if not base_urls:
            raise ConfigurationError('COMEXSTAT_BASE_URLS', "nenhuma URL base definida")
        super().__init__(timeout=timeout, max_attempts=max_attempts, **kwargs)
        self.base_urls = [url.rstrip('/') for url in base_urls]

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs) -> 'ComexStatClient':
        return cls(
            config.get('api_base_urls') or [],
            timeout=config.get('timeout', 20),
            max_attempts=config.get('max_attempts', 3),
            **kwargs
        )

    def _get_any(self, path: str) -> Any:
        last_error: Optional[UpstreamError] = None
        for base in self.base_urls:
            try:
                return self.get_json(f"{base}{path}")
            except UpstreamError as e:
                logger.warning(f"⚠️ ComexStat indisponível em {base}: {e.message}")
                last_error = e
        raise last_error

    def get_years_range(self) -> Dict[str, int]:
        """Anos disponíveis ({min, max}); cai num intervalo conservador se a API falhar"""
        try:
            payload = self._get_any('/general/dates/years')
            data = payload.get('data', payload) if isinstance(payload, dict) else {}
            return {'min': int(data['min']), 'max': int(data['max'])}
        except (UpstreamError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"⚠️ Não foi possível obter anos do ComexStat ({e}), usando padrão")
            return {'min': FIRST_YEAR, 'max': datetime.now().year - 1}

    def query_general(self, filter_obj: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Executa /general?filter=... e devolve as linhas"""
        path = f"/general?filter={quote(json.dumps(filter_obj, separators=(',', ':')))}"
        return pick_rows(self._get_any(path))

    def ping(self) -> Dict[str, Any]:
        """Teste de conectividade com o endpoint de anos (sem retentativas)"""
        url = f"{self.base_urls[0]}/general/dates/years"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(self.service_name, f"falha de conexão: {e}")
        return {'status': response.status_code, 'body': snippet(response.text, 200)}


def pick_rows(payload: Any) -> List[Dict[str, Any]]:
    """A API responde com {data: [...]}, {result: [...]} ou [[...]]"""
    if isinstance(payload, dict):
        for key in ('data', 'result'):
            rows = payload.get(key)
            if isinstance(rows, list):
                return [row for row in rows if isinstance(row, dict)]
            # algumas versões aninham em {data: {list: [...]}}
            if isinstance(rows, dict) and isinstance(rows.get('list'), list):
                return [row for row in rows['list'] if isinstance(row, dict)]
    if isinstance(payload, list) and payload and isinstance(payload[0], list):
        return [row for row in payload[0] if isinstance(row, dict)]
    return []
