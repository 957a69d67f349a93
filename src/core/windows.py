"""
Janelas de datas para consultas ao PNCP

O PNCP recusa consultas com período maior que 365 dias. Intervalos maiores
são quebrados em janelas contíguas, sem lacunas nem sobreposição.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Union

from exceptions.api_exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_WINDOW_DAYS = 365

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_PNCP_DATE = re.compile(r'^\d{8}$')


@dataclass(frozen=True)
class DateWindow:
    """Intervalo fechado [start, end] de datas de calendário"""
    start: date
    end: date

    @property
    def ini(self) -> str:
        """Data inicial no formato yyyyMMdd exigido pelo PNCP"""
        return self.start.strftime('%Y%m%d')

    @property
    def fim(self) -> str:
        return self.end.strftime('%Y%m%d')

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def __str__(self) -> str:
        return f"{self.ini}-{self.fim}"


def parse_date(value: Union[str, date], field: str = 'data') -> date:
    """
    Converte uma data de entrada para `date`.

    Aceita `date`/`datetime`, 'YYYY-MM-DD' e 'YYYYMMDD'.

    Raises:
        ValidationError: formato ou data inválidos
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = (value or '').strip() if isinstance(value, str) else ''
    try:
        if _ISO_DATE.match(text):
            return datetime.strptime(text, '%Y-%m-%d').date()
        if _PNCP_DATE.match(text):
            return datetime.strptime(text, '%Y%m%d').date()
    except ValueError:
        pass

    raise ValidationError(
        f"Data inválida em '{field}': {value!r}. Use yyyy-mm-dd (ex: 2025-10-01).",
        details={'field': field},
    )


def split_into_windows(start: date, end: date, max_span_days: int = MAX_WINDOW_DAYS) -> List[DateWindow]:
    """
    Quebra [start, end] em janelas de no máximo `max_span_days` dias.

    Cada janela começa no dia seguinte ao fim da anterior; a última termina
    exatamente em `end`. Sempre retorna pelo menos uma janela.

    Args:
        start: data inicial (inclusiva)
        end: data final (inclusiva)
        max_span_days: tamanho máximo de cada janela em dias

    Returns:
        Lista ordenada de DateWindow
    """
    if max_span_days < 1:
        raise ValidationError(f"max_span_days deve ser >= 1 (recebido {max_span_days})")

    if start > end:
        logger.warning(f"⚠️ Intervalo invertido ({start} > {end}), trocando as datas")
        start, end = end, start

    windows = []
    cursor = start
    step = timedelta(days=max_span_days - 1)

    while cursor <= end:
        window_end = min(cursor + step, end)
        windows.append(DateWindow(cursor, window_end))
        cursor = window_end + timedelta(days=1)

    return windows
