"""
Fornecedor Service
Ranking de fornecedores a partir dos contratos publicados no PNCP.
"""
import logging
import time
from datetime import date, timedelta
from typing import Any, Dict, Iterator, Optional

from adapters.pncp_adapter import PNCPClient
from core.aggregation import SupplierAggregator
from core.cancellation import CancelToken
from core.matching import ContractMatcher
from core.pagination import PageResult, PageWalker
from core.scanner import ScanOrchestrator
from core.windows import DateWindow, parse_date, split_into_windows
from exceptions.api_exceptions import ValidationError
from validators.query_validators import require_term

logger = logging.getLogger(__name__)
DEFAULT_RANGE_DAYS = 365


def resolve_range(data_ini: Optional[str], data_fim: Optional[str], default_days: int):
    """Período da busca; datas ausentes caem nos últimos `default_days` dias"""
    today = date.today()
    start = parse_date(data_ini, 'dataIni') if data_ini else today - timedelta(days=default_days)
    end = parse_date(data_fim, 'dataFim') if data_fim else today
    return start, end


class FornecedorService:
    """
    Varre /v1/contratos janela a janela, filtra pelo termo no objeto do
    contrato e agrega os resultados por fornecedor.
    """

    def __init__(self, client: PNCPClient, page_delay: float = 0.05, sleep=time.sleep):
        self.client = client
        self.page_delay = page_delay
        self.sleep = sleep

    def _orchestrator(self, termo: str, page_size: int, max_pages: int,
                      cancel_token: Optional[CancelToken], uf: Optional[str] = None) -> ScanOrchestrator:
        walker = PageWalker(
            self.client.fetch_contracts,
            page_size=page_size,
            max_pages=max_pages,
            delay_seconds=self.page_delay,
            sleep=self.sleep,
        )
        return ScanOrchestrator(walker, ContractMatcher(termo, region=uf), cancel_token)

    def rank_suppliers(self, termo: str, data_ini: Optional[str] = None, data_fim: Optional[str] = None,
                       page_size: int = 200, max_pages: int = 8, top: int = 30,
                       cancel_token: Optional[CancelToken] = None) -> Dict[str, Any]:
        """
        Modo bloqueante: varre todo o período e devolve o top-N.

        Returns:
            Dict com ok, termo, período, contadores da varredura e `fornecedores`
        """
        termo = require_term(termo, allow_empty=True)
        if not termo:
            return {'ok': True, 'termo': '', 'fornecedores': [], 'scannedPages': 0, 'scannedContracts': 0}

        start, end = resolve_range(data_ini, data_fim, DEFAULT_RANGE_DAYS)
        windows = split_into_windows(start, end)
        logger.info(f"🏭 Ranking de fornecedores: '{termo}' {start} a {end} ({len(windows)} janelas)")

        aggregator = SupplierAggregator()
        result = self._orchestrator(termo, page_size, max_pages, cancel_token).run(windows, aggregator, top)

        response = {
            'ok': result.ok,
            'termo': termo,
            'dataIni': start.isoformat(),
            'dataFim': end.isoformat(),
            'windows': len(windows),
            'scannedPages': result.progress.scanned_pages,
            'scannedContracts': result.progress.scanned_records,
            'totalFornecedores': result.progress.aggregates,
            'fornecedores': result.items,
            'status': result.status.value,
            'canceled': result.canceled,
        }
        if not result.ok:
            response['error'] = result.message
        return response

    def stream_suppliers(self, termo: str, data_ini: Optional[str] = None, data_fim: Optional[str] = None,
                         page_size: int = 200, max_pages: int = 8, top: int = 30,
                         cancel_token: Optional[CancelToken] = None) -> Iterator[Dict[str, Any]]:
        """
        Modo streaming: cada evento `progress` traz o ranking parcial.

        A validação acontece aqui, antes de criar o gerador, para que erros de
        parâmetro virem 400 e não um evento de erro no meio do stream.
        """
        termo = require_term(termo)

        start, end = resolve_range(data_ini, data_fim, DEFAULT_RANGE_DAYS)
        windows = split_into_windows(start, end)
        orchestrator = self._orchestrator(termo, page_size, max_pages, cancel_token)
        return orchestrator.events(windows, aggregator=SupplierAggregator(), top=top)

    def scan_page(self, termo: str, data_inicial: str, data_final: str, pagina: int = 1,
                  tamanho_pagina: int = 200, uf_org: Optional[str] = None) -> Dict[str, Any]:
        """
        Varredura de uma única página, para clientes que controlam a paginação.

        Os itens trazem apenas os agregados da página; o cliente os combina
        (ver `SupplierAggregator.merge_partials`).
        """
        termo = require_term(termo, allow_empty=True)
        if not termo:
            return {'ok': True, 'items': [], 'scannedContracts': 0, 'totalPaginas': 0}
        if not data_inicial or not data_final:
            raise ValidationError("dataInicial/dataFinal são obrigatórios (YYYYMMDD)")

        window = DateWindow(parse_date(data_inicial, 'dataInicial'), parse_date(data_final, 'dataFinal'))
        page: PageResult = self.client.fetch_contracts(window, pagina, tamanho_pagina)

        matcher = ContractMatcher(termo, region=uf_org)
        aggregator = SupplierAggregator()
        aggregator.merge(filter(None, map(matcher.extract, page.records)))

        items = []
        for entry in aggregator.entries.values():
            item = entry.to_dict()
            item.pop('score')
            items.append(item)

        return {
            'ok': True,
            'totalPaginas': page.total_pages or 0,
            'scannedContracts': len(page.records),
            'items': items,
        }
