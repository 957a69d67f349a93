"""
Paginação sequencial de uma janela de datas.

A metadata de paginação do PNCP (totalPaginas) não é confiável sozinha:
além dela, a varredura para em página vazia e no limite de páginas.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional

from core.cancellation import CancelToken
from core.windows import DateWindow

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """Resposta de uma página do upstream"""
    records: List[Any] = field(default_factory=list)
    total_pages: Optional[int] = None


@dataclass
class RecordBatch:
    window: DateWindow
    page: int
    records: List[Any]
    total_pages: Optional[int] = None


# fetch_page(window, page, page_size) -> PageResult
FetchPage = Callable[[DateWindow, int, int], PageResult]


class WalkStatus(str, Enum):
    RUNNING = 'running'
    COMPLETED = 'completed'
    PAGE_CAP = 'page_cap'
    CANCELED = 'canceled'


class PageWalk:
    """Iteração (única) sobre as páginas de uma janela"""

    def __init__(self, walker: 'PageWalker', window: DateWindow, cancel_token: Optional[CancelToken]):
        self.walker = walker
        self.window = window
        self.cancel_token = cancel_token
        self.status = WalkStatus.RUNNING
        self.pages = 0

    def __iter__(self) -> Iterator[RecordBatch]:
        walker = self.walker
        last_page = walker.start_page + walker.max_pages - 1
        page = walker.start_page

        while True:
            if page > walker.start_page and walker.delay_seconds > 0:
                walker.sleep(walker.delay_seconds)

            if self.cancel_token is not None and self.cancel_token.cancelled:
                logger.info(f"🛑 Varredura cancelada antes da página {page} ({self.window})")
                self.status = WalkStatus.CANCELED
                return

            result = walker.fetch_page(self.window, page, walker.page_size)
            records = result.records if isinstance(result.records, list) else []
            total_pages = result.total_pages if isinstance(result.total_pages, int) else None
            self.pages += 1

            logger.debug(f"📄 {self.window} página {page}: {len(records)} registros (total {total_pages})")
            yield RecordBatch(self.window, page, records, total_pages)

            if total_pages is not None and page >= total_pages:
                self.status = WalkStatus.COMPLETED
                return
            if not records:
                self.status = WalkStatus.COMPLETED
                return
            if page >= last_page:
                logger.info(f"📄 Limite de {walker.max_pages} páginas atingido em {self.window}")
                self.status = WalkStatus.PAGE_CAP
                return
            page += 1

    @property
    def cancelled(self) -> bool:
        return self.status == WalkStatus.CANCELED


class PageWalker:
    """
    Percorre as páginas de uma janela, uma por vez, em ordem.

    Args:
        fetch_page: coletor injetado que faz a chamada HTTP de uma página
        page_size: tamanho de página enviado ao upstream
        max_pages: limite rígido de páginas por janela (obrigatório)
        delay_seconds: pausa entre páginas; 0 desativa
        start_page: primeira página a buscar
        sleep: função de espera (substituível em testes)
    """

    def __init__(self, fetch_page: FetchPage, page_size: int, max_pages: int,
                 delay_seconds: float = 0.05, start_page: int = 1,
                 sleep: Callable[[float], None] = time.sleep):
        if max_pages is None or max_pages < 1:
            raise ValueError("max_pages deve ser >= 1")
        if start_page < 1:
            raise ValueError("start_page deve ser >= 1")
        self.fetch_page = fetch_page
        self.page_size = page_size
        self.max_pages = max_pages
        self.delay_seconds = delay_seconds
        self.start_page = start_page
        self.sleep = sleep

    def walk(self, window: DateWindow, cancel_token: Optional[CancelToken] = None) -> PageWalk:
        return PageWalk(self, window, cancel_token)
