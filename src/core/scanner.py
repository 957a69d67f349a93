"""
Orquestrador de varreduras: janelas -> páginas -> registros -> agregação.

Dois modos de uso:
- `run`: bloqueante, devolve o ranking final (ScanResult)
- `events`: gerador de eventos (progress/item/error/done) para streaming NDJSON

Janelas e páginas são processadas estritamente em sequência.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from core.aggregation import SupplierAggregator
from core.cancellation import CancelToken
from core.pagination import PageWalker, RecordBatch
from core.windows import DateWindow
from exceptions.api_exceptions import UpstreamError

logger = logging.getLogger(__name__)


class ScanStatus(str, Enum):
    RUNNING = 'running'
    COMPLETED = 'completed'
    CANCELED = 'canceled'
    FAILED = 'failed'


@dataclass
class ScanProgress:
    windows: int = 0
    window_index: int = 0
    page: int = 0
    scanned_pages: int = 0
    scanned_records: int = 0
    matches: int = 0
    aggregates: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'windows': self.windows,
            'window': self.window_index,
            'page': self.page,
            'scannedPages': self.scanned_pages,
            'scannedItems': self.scanned_records,
            'found': self.matches,
            'aggregates': self.aggregates,
        }


@dataclass
class ScanResult:
    status: ScanStatus
    progress: ScanProgress
    items: List[Dict[str, Any]] = field(default_factory=list)
    message: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status != ScanStatus.FAILED

    @property
    def canceled(self) -> bool:
        return self.status == ScanStatus.CANCELED


class ScanOrchestrator:
    """
    Executa uma varredura completa sobre uma lista de janelas.

    Args:
        walker: PageWalker configurado com o coletor de páginas
        matcher: objeto com `extract(raw) -> registro | None`
        cancel_token: sinal de cancelamento cooperativo (opcional)
    """

    def __init__(self, walker: PageWalker, matcher: Any, cancel_token: Optional[CancelToken] = None):
        self.walker = walker
        self.matcher = matcher
        self.cancel_token = cancel_token or CancelToken()
        self.status = ScanStatus.RUNNING
        self.progress = ScanProgress()

    def _batches(self, windows: List[DateWindow]) -> Iterator[RecordBatch]:
        """Percorre janelas e páginas atualizando o progresso; marca cancelamento"""
        self.progress = ScanProgress(windows=len(windows))

        for index, window in enumerate(windows, start=1):
            self.progress.window_index = index
            self.progress.page = 0
            logger.info(f"🔍 Janela {index}/{len(windows)}: {window.ini} a {window.fim}")

            walk = self.walker.walk(window, self.cancel_token)
            for batch in walk:
                self.progress.page = batch.page
                self.progress.scanned_pages += 1
                self.progress.scanned_records += len(batch.records)
                yield batch

            if walk.cancelled:
                self.status = ScanStatus.CANCELED
                return

        self.status = ScanStatus.COMPLETED

    def _match(self, records: List[Any]) -> List[Any]:
        matched = []
        for raw in records:
            record = self.matcher.extract(raw)
            if record is not None:
                matched.append(record)
        return matched

    def run(self, windows: List[DateWindow], aggregator: SupplierAggregator, top: int) -> ScanResult:
        """Modo bloqueante: varre tudo (ou até cancelar) e devolve o top-N"""
        start_time = time.time()
        self.status = ScanStatus.RUNNING

        try:
            for batch in self._batches(windows):
                matched = self._match(batch.records)
                aggregator.merge(matched)
                self.progress.matches += len(matched)
                self.progress.aggregates = len(aggregator)
        except UpstreamError as e:
            self.status = ScanStatus.FAILED
            logger.error(f"❌ Varredura interrompida: {e.message}")
            return ScanResult(self.status, self.progress, aggregator.top(top), e.message,
                              time.time() - start_time)

        elapsed = time.time() - start_time
        message = 'Busca cancelada' if self.status == ScanStatus.CANCELED else None
        logger.info(f"✅ Varredura {self.status.value}: {self.progress.scanned_pages} páginas, "
                    f"{self.progress.scanned_records} registros, {len(aggregator)} agregados em {elapsed:.2f}s")
        return ScanResult(self.status, self.progress, aggregator.top(top), message, elapsed)

    def collect(self, windows: List[DateWindow]) -> ScanResult:
        """Modo bloqueante sem agregação: registros casados, deduplicados pela `key`"""
        start_time = time.time()
        self.status = ScanStatus.RUNNING
        seen = set()
        items = []

        try:
            for batch in self._batches(windows):
                for record in self._match(batch.records):
                    if record.key in seen:
                        continue
                    seen.add(record.key)
                    items.append(record.to_dict())
                self.progress.matches = len(items)
                self.progress.aggregates = len(items)
        except UpstreamError as e:
            self.status = ScanStatus.FAILED
            logger.error(f"❌ Varredura interrompida: {e.message}")
            return ScanResult(self.status, self.progress, items, e.message, time.time() - start_time)

        message = 'Busca cancelada' if self.status == ScanStatus.CANCELED else None
        return ScanResult(self.status, self.progress, items, message, time.time() - start_time)

    def events(self, windows: List[DateWindow], target: Optional[int] = None,
               aggregator: Optional[SupplierAggregator] = None, top: int = 30) -> Iterator[Dict[str, Any]]:
        """
        Modo streaming. Sem `aggregator`, emite um evento `item` por registro
        novo (deduplicado); com `aggregator`, cada `progress` traz o ranking
        parcial em `top`. O gerador termina após `done` ou `error`.

        Fechar o gerador antes do fim (consumidor desconectou) cancela a varredura.
        """
        self.status = ScanStatus.RUNNING
        seen = set()
        finished = False

        try:
            for batch in self._batches(windows):
                matched = self._match(batch.records)

                if aggregator is not None:
                    aggregator.merge(matched)
                    self.progress.matches += len(matched)
                    self.progress.aggregates = len(aggregator)
                else:
                    for record in matched:
                        key = getattr(record, 'key', None)
                        if key in seen:
                            continue
                        seen.add(key)
                        self.progress.matches += 1
                        self.progress.aggregates = len(seen)
                        yield {'type': 'item', 'item': record.to_dict()}

                        if target is not None and self.progress.matches >= target:
                            self.status = ScanStatus.COMPLETED
                            finished = True
                            yield self._done_event()
                            return

                event = {'type': 'progress', **self.progress.to_dict()}
                if aggregator is not None:
                    event['top'] = aggregator.top(top)
                yield event

        except UpstreamError as e:
            self.status = ScanStatus.FAILED
            finished = True
            yield {'type': 'error', 'message': e.message}
            return
        except Exception as e:
            self.status = ScanStatus.FAILED
            finished = True
            logger.error(f"❌ Erro inesperado na varredura: {e}", exc_info=True)
            yield {'type': 'error', 'message': str(e) or 'Erro inesperado'}
            return
        finally:
            if not finished and self.status == ScanStatus.RUNNING:
                # gerador fechado pelo consumidor
                logger.info("🛑 Consumidor desconectou, cancelando varredura")
                self.cancel_token.cancel()
                self.status = ScanStatus.CANCELED

        finished = True
        yield self._done_event(aggregator, top)

    def _done_event(self, aggregator: Optional[SupplierAggregator] = None, top: int = 30) -> Dict[str, Any]:
        event = {
            'type': 'done',
            'scannedPages': self.progress.scanned_pages,
            'scannedItems': self.progress.scanned_records,
            'found': self.progress.matches,
            'aggregates': self.progress.aggregates,
            'windows': self.progress.windows,
            'canceled': self.status == ScanStatus.CANCELED,
        }
        if aggregator is not None:
            event['top'] = aggregator.top(top)
        return event
