"""
Cliente HTTP da API de consulta do PNCP.

Implementa os coletores de página usados pelo motor de varredura:
`fetch_contracts` (/v1/contratos) e `fetch_notices`
(/v1/contratacoes/publicacao).
"""
from typing import Any, Dict, Optional
import json
import logging
import time

import requests

from core.pagination import PageResult
from core.windows import DateWindow
from exceptions.api_exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

USER_AGENT = 'radar-licitacoes/1.0 (Flask)'
ERROR_SNIPPET = 260
NON_JSON_SNIPPET = 200


def snippet(text: str, limit: int) -> str:
    return (text or '')[:limit]


class HTTPJsonClient:
    """
    GET + decodificação JSON com erros tipados.

    Respostas não-2xx e corpos não-JSON viram UpstreamError; 204 ou corpo
    vazio viram `{}` (página vazia). Erros levam um trecho do
    corpo para diagnóstico. Retentativas (se max_attempts > 1) usam espera
    linear de `backoff * tentativa` segundos.
    """

    service_name = 'HTTP'

    def __init__(self, timeout: float = 30, max_attempts: int = 1, backoff: float = 0.4,
                 session: Optional[requests.Session] = None, sleep=time.sleep):
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff = backoff
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json', 'User-Agent': USER_AGENT})

    def _request_once(self, url: str, params: Optional[Dict[str, Any]]) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout:
            raise UpstreamError(self.service_name, f"tempo esgotado após {self.timeout}s")
        except requests.RequestException as e:
            raise UpstreamError(self.service_name, f"falha de conexão: {e}")

        text = response.text or ''
        if not response.ok:
            raise UpstreamError(self.service_name, self._error_message(text), response.status_code)

        # 204 ou corpo vazio: página sem registros
        if response.status_code == 204 or not text.strip():
            return {}

        try:
            return json.loads(text)
        except ValueError:
            raise UpstreamError(self.service_name, f"resposta não-JSON: {snippet(text, NON_JSON_SNIPPET)}")

    @staticmethod
    def _error_message(text: str) -> str:
        # O PNCP às vezes devolve o erro em JSON
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get('message') or body.get('mensagem')
            if isinstance(message, str) and message:
                return snippet(message, ERROR_SNIPPET)
        return snippet(text, ERROR_SNIPPET) or 'Erro ao consultar'

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._request_once(url, params)
            except UpstreamError as e:
                last_error = e
                if attempt < self.max_attempts:
                    logger.warning(f"⚠️ {self.service_name} tentativa {attempt}/{self.max_attempts} falhou: {e.message}")
                    self.sleep(self.backoff * attempt)
        raise last_error


class PNCPClient(HTTPJsonClient):
    """Cliente da API de consulta do PNCP (https://pncp.gov.br/api/consulta)"""

    service_name = 'PNCP'

    def __init__(self, base_url: str, **kwargs):
        if not (base_url or '').strip():
            raise ConfigurationError('PNCP_BASE_URL', "URL base do PNCP não definida")
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs) -> 'PNCPClient':
        return cls(
            config.get('api_base_url'),
            timeout=config.get('timeout', 30),
            max_attempts=config.get('max_attempts', 1),
            **kwargs
        )

    @staticmethod
    def _page(payload: Any) -> PageResult:
        if not isinstance(payload, dict):
            return PageResult(records=[])
        records = payload.get('data')
        total_pages = payload.get('totalPaginas')
        return PageResult(
            records=records if isinstance(records, list) else [],
            total_pages=total_pages if isinstance(total_pages, int) and not isinstance(total_pages, bool) else None,
        )

    def fetch_contracts(self, window: DateWindow, page: int, page_size: int) -> PageResult:
        """Uma página de contratos (/v1/contratos) publicados na janela"""
        params = {
            'dataInicial': window.ini,
            'dataFinal': window.fim,
            'pagina': page,
            'tamanhoPagina': page_size,
        }
        return self._page(self.get_json(f"{self.base_url}/v1/contratos", params))

    def fetch_notices(self, window: DateWindow, page: int, page_size: int,
                      modality: Optional[str] = None, uf: Optional[str] = None,
                      keyword: Optional[str] = None) -> PageResult:
        """Uma página de contratações publicadas (/v1/contratacoes/publicacao)"""
        params = {
            'dataInicial': window.ini,
            'dataFinal': window.fim,
            'pagina': page,
            'tamanhoPagina': page_size,
        }
        if keyword:
            params['palavraChave'] = keyword
        if modality:
            params['codigoModalidadeContratacao'] = modality
        if uf:
            params['uf'] = uf
        return self._page(self.get_json(f"{self.base_url}/v1/contratacoes/publicacao", params))
