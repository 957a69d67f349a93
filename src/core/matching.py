"""
Extração e filtragem de registros do PNCP.

Os registros do upstream não têm esquema garantido: campos podem faltar ou
vir com tipo errado. Nada aqui lança exceção por causa de um registro
malformado; o registro é simplesmente descartado (None).
"""
import logging
import math
import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Ordem de preferência do valor monetário de um contrato
CONTRACT_AMOUNT_FIELDS = ('valorGlobal', 'valorInicial')

PORTAL_COMPRAS_HOST = 'portaldecompraspublicas.com.br'
COMPRAS_GOV_HOSTS = ('compras.gov.br', 'serpro.gov.br')


def fold_text(value: Any) -> str:
    """Minúsculas e sem acentos ("Estetoscópio" -> "estetoscopio")"""
    if not isinstance(value, str):
        return ''
    decomposed = unicodedata.normalize('NFD', value)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def clean_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ''


def get_nested(raw: Dict[str, Any], *path: str) -> Any:
    current: Any = raw
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def to_amount(value: Any) -> Optional[float]:
    """Converte para float; None quando ausente ou não numérico"""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if math.isfinite(amount) else None


def first_amount(raw: Dict[str, Any], fields: Iterable[str]) -> float:
    for name in fields:
        amount = to_amount(raw.get(name))
        if amount is not None:
            return amount
    return 0.0


@dataclass(frozen=True)
class MatchedContract:
    supplier_id: str
    supplier_name: str
    description: str
    amount: float = 0.0
    region: Optional[str] = None
    published_at: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.supplier_id}__{self.supplier_name}"


class ContractMatcher:
    """
    Filtra contratos do PNCP (/v1/contratos) pelo termo buscado no objeto.

    Args:
        term: termo de busca (comparado sem acentos e sem caixa)
        region: UF do órgão contratante (opcional)
    """

    def __init__(self, term: str, region: Optional[str] = None):
        self.term = fold_text(term.strip())
        self.region = (region or '').strip().upper() or None

    def extract(self, raw: Any) -> Optional[MatchedContract]:
        if not isinstance(raw, dict):
            return None

        description = clean_text(raw.get('objetoContrato'))
        if not description:
            return None

        region = clean_text(get_nested(raw, 'unidadeOrgao', 'ufSigla')).upper() or None
        if self.region and self.region != region:
            return None

        if self.term not in fold_text(description):
            return None

        supplier_id = clean_text(raw.get('niFornecedor'))
        supplier_name = clean_text(raw.get('nomeRazaoSocialFornecedor'))
        if not supplier_id or not supplier_name:
            return None

        return MatchedContract(
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            description=description,
            amount=first_amount(raw, CONTRACT_AMOUNT_FIELDS),
            region=region,
            published_at=clean_text(raw.get('dataPublicacaoPncp')) or None,
        )


def collect_urls(obj: Any) -> List[str]:
    """Todas as URLs http(s) encontradas em qualquer nível do registro"""
    urls = []
    stack = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            candidate = current.strip()
            if candidate.lower().startswith(('http://', 'https://')) and ' ' not in candidate:
                urls.append(candidate)
        elif isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))
    return urls


def collect_strings(obj: Any) -> List[str]:
    strings = []
    stack = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            strings.append(current)
        elif isinstance(current, dict):
            stack.extend(current.values())
        elif isinstance(current, list):
            stack.extend(current)
    return strings


def host_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ''
    except ValueError:
        return ''


def pick_process_url(raw: Any) -> str:
    """
    Escolhe o link do processo: Portal de Compras Públicas, depois
    compras.gov.br/serpro, depois a primeira URL encontrada.
    """
    urls = collect_urls(raw)
    for url in urls:
        if PORTAL_COMPRAS_HOST in host_of(url):
            return url
    for url in urls:
        host = host_of(url)
        if any(h in host for h in COMPRAS_GOV_HOSTS):
            return url
    return urls[0] if urls else ''


@dataclass(frozen=True)
class MatchedNotice:
    key: str
    orgao: str
    objeto: str
    data_publicacao: Optional[str]
    processo_url: str
    fonte: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'orgao': self.orgao,
            'objeto': self.objeto,
            'dataPublicacao': self.data_publicacao,
            'processoUrl': self.processo_url,
            'fonte': self.fonte,
        }


class NoticeMatcher:
    """
    Filtra contratações publicadas (/v1/contratacoes/publicacao) que citam o
    termo em qualquer campo texto e têm um link de processo.
    """

    def __init__(self, term: str, only_portal_compras: bool = False):
        self.term = fold_text(term.strip())
        self.only_portal_compras = only_portal_compras

    def extract(self, raw: Any) -> Optional[MatchedNotice]:
        if not isinstance(raw, dict):
            return None

        if not any(self.term in fold_text(s) for s in collect_strings(raw)):
            return None

        processo_url = pick_process_url(raw)
        if not processo_url:
            return None

        fonte = host_of(processo_url)
        if self.only_portal_compras and PORTAL_COMPRAS_HOST not in fonte:
            return None

        orgao = (clean_text(get_nested(raw, 'orgaoEntidade', 'razaoSocial'))
                 or clean_text(get_nested(raw, 'orgaoEntidade', 'nome'))
                 or clean_text(get_nested(raw, 'orgao', 'nome'))
                 or 'Órgão não informado')
        objeto = (clean_text(raw.get('objetoCompra'))
                  or clean_text(raw.get('objeto'))
                  or clean_text(raw.get('descricao'))
                  or 'Objeto não informado')
        data_publicacao = (clean_text(raw.get('dataPublicacao'))
                           or clean_text(raw.get('dataPublicacaoPncp'))
                           or clean_text(raw.get('data'))
                           or None)

        return MatchedNotice(
            key=clean_text(raw.get('numeroControlePNCP')) or processo_url,
            orgao=orgao,
            objeto=objeto,
            data_publicacao=data_publicacao,
            processo_url=processo_url,
            fonte=fonte,
        )
