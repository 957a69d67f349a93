"""
Licitacao Service
Listagem filtrada de licitações publicadas no PNCP.
"""
import logging
import time
from functools import partial
from typing import Dict, Optional

from adapters.mappers.pncp_data_mapper import ListingMatcher
from adapters.pncp_adapter import PNCPClient
from core.pagination import PageWalker
from core.scanner import ScanOrchestrator
from core.windows import split_into_windows
from services.fornecedor_service import resolve_range

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 90
DEFAULT_MODALITY = '8'


class LicitacaoService:
    """Serviço responsável pela listagem de licitações (sem exclusão automática)"""

    def __init__(self, client: PNCPClient, page_delay: float = 0.05, sleep=time.sleep):
        self.client = client
        self.page_delay = page_delay
        self.sleep = sleep

    def buscar_licitacoes(self, q: Optional[str] = None, uf: Optional[str] = None,
                          modalidade: Optional[str] = None, data_ini: Optional[str] = None,
                          data_fim: Optional[str] = None, page: int = 1, page_size: int = 50) -> Dict:
        """
        Busca a página `page` em cada janela de 365 dias do período e junta
        os resultados, deduplicados pelo id.
        """
        start, end = resolve_range(data_ini, data_fim, DEFAULT_RANGE_DAYS)
        windows = split_into_windows(start, end)

        fetch_page = partial(
            self.client.fetch_notices,
            modality=(modalidade or '').strip() or DEFAULT_MODALITY,
            uf=(uf or '').strip() or None,
            keyword=(q or '').strip() or None,
        )
        walker = PageWalker(fetch_page, page_size=page_size, max_pages=1,
                            delay_seconds=self.page_delay, start_page=page, sleep=self.sleep)

        logger.info(f"Iniciando busca. Período {start} a {end}, página {page} ({len(windows)} janelas)")
        result = ScanOrchestrator(walker, ListingMatcher()).collect(windows)
        logger.info(f"Busca finalizada. Retornando {len(result.items)} licitações únicas.")

        response = {
            'ok': result.ok,
            'page': page,
            'pageSize': page_size,
            'total': len(result.items),
            'items': result.items,
        }
        if not result.ok:
            response['error'] = result.message
        return response
