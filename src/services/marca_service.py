"""
Marca Service
Busca de licitações publicadas que citam uma marca ou produto.
"""
import logging
import time
from functools import partial
from typing import Any, Dict, Iterator, Optional

from adapters.mappers.pncp_data_mapper import PNCPDataMapper
from adapters.pncp_adapter import PNCPClient
from core.cancellation import CancelToken
from core.matching import NoticeMatcher
from core.pagination import PageWalker
from core.scanner import ScanOrchestrator
from core.windows import DateWindow, parse_date, split_into_windows
from exceptions.api_exceptions import ValidationError
from validators.query_validators import require_term

logger = logging.getLogger(__name__)

DEFAULT_MODALITY = '8'


def _require_dates(data_inicial: str, data_final: str):
    if not data_inicial or not data_final:
        raise ValidationError("Informe dataInicial e dataFinal (yyyy-mm-dd).")
    return parse_date(data_inicial, 'dataInicial'), parse_date(data_final, 'dataFinal')


class MarcaService:
    """Varredura de /v1/contratacoes/publicacao filtrando pelo termo em qualquer campo"""

    def __init__(self, client: PNCPClient, page_delay: float = 0.05, sleep=time.sleep):
        self.client = client
        self.page_delay = page_delay
        self.sleep = sleep
        self.mapper = PNCPDataMapper()

    def stream(self, termo: str, data_inicial: str, data_final: str, uf: Optional[str] = None,
               modalidade: Optional[str] = None, only_portal_compras: bool = False,
               page_size: int = 50, max_pages: int = 30, target: int = 30,
               cancel_token: Optional[CancelToken] = None) -> Iterator[Dict[str, Any]]:
        """
        Inicia a varredura em streaming e devolve o gerador de eventos.

        Termo e datas são validados antes de qualquer chamada ao PNCP.

        Raises:
            ValidationError: termo curto ou datas ausentes/inválidas
        """
        termo = require_term(termo)
        start, end = _require_dates(data_inicial, data_final)
        windows = split_into_windows(start, end)

        fetch_page = partial(
            self.client.fetch_notices,
            modality=modalidade or None,
            uf=(uf or '').upper() or None,
        )
        walker = PageWalker(
            fetch_page,
            page_size=page_size,
            max_pages=max_pages,
            delay_seconds=self.page_delay,
            sleep=self.sleep,
        )
        matcher = NoticeMatcher(termo, only_portal_compras=only_portal_compras)

        logger.info(f"🏷️ Busca de marca '{termo}' {start} a {end}, alvo {target} ({len(windows)} janelas)")
        return ScanOrchestrator(walker, matcher, cancel_token).events(windows, target=target)

    def search_page(self, termo: str, data_inicial: str, data_final: str, uf: Optional[str] = None,
                    modalidade: Optional[str] = None, pagina: int = 1, tamanho_pagina: int = 20) -> Dict[str, Any]:
        """
        Uma página da busca por palavra-chave, filtrada pelo próprio PNCP.

        Returns:
            Dict com o eco da requisição, `totalRecebido` e `itens`
        """
        termo = (termo or '').strip()
        if not termo or not data_inicial or not data_final:
            raise ValidationError("Parâmetros obrigatórios: termo, dataInicial, dataFinal")

        window = DateWindow(parse_date(data_inicial, 'dataInicial'), parse_date(data_final, 'dataFinal'))
        modalidade = (modalidade or '').strip() or DEFAULT_MODALITY
        uf = (uf or '').strip().upper() or None

        page = self.client.fetch_notices(window, pagina, tamanho_pagina,
                                         modality=modalidade, uf=uf, keyword=termo)

        return {
            'ok': True,
            'request': {
                'termo': termo,
                'dataInicial': window.ini,
                'dataFinal': window.fim,
                'codigoModalidadeContratacao': modalidade,
                'pagina': pagina,
                'tamanhoPagina': tamanho_pagina,
                'uf': uf,
            },
            'totalRecebido': len(page.records),
            'itens': [self.mapper.notice_to_summary(raw) for raw in page.records],
        }
