"""
Validadores dos parâmetros de consulta
Saneamento de números, meses, termos de busca e NCM
"""
import math
import re
import logging
from typing import Any, Optional

from exceptions.api_exceptions import ValidationError

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 3


def clamp_int(value: Any, default: int, minimum: int, maximum: int) -> int:
    """
    Inteiro limitado a [minimum, maximum].

    Valores ausentes ou não numéricos caem no padrão; frações são truncadas.
    """
    if value is None or str(value).strip() == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return max(minimum, min(maximum, int(number)))


def safe_month(value: Optional[str], default: str) -> str:
    """Mês '01'..'12'; qualquer outra coisa vira o padrão"""
    try:
        month = int(str(value if value is not None else default).strip())
    except ValueError:
        return default
    if month < 1 or month > 12:
        return default
    return f"{month:02d}"


def require_term(termo: Optional[str], allow_empty: bool = False) -> str:
    """
    Termo de busca sem espaços nas pontas.

    Raises:
        ValidationError: termo com menos de 3 caracteres (ou vazio, se não permitido)
    """
    termo = (termo or '').strip()
    if not termo and allow_empty:
        return termo
    if len(termo) < MIN_TERM_LENGTH:
        raise ValidationError(f"Informe termo com pelo menos {MIN_TERM_LENGTH} caracteres.",
                              details={'field': 'termo'})
    return termo


def normalize_ncm(value: Optional[str]) -> str:
    """NCM só com dígitos ('9018.90-99' -> '90189099')"""
    ncm = re.sub(r'\D', '', value or '')
    if len(ncm) != 8:
        raise ValidationError("Informe um NCM com 8 dígitos (ex: 90189099).", details={'field': 'ncm'})
    return ncm
