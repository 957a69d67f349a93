"""
DataMapper específico para PNCP
Converte contratações publicadas para os formatos de resposta da API
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from core.matching import clean_text, get_nested, to_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListedNotice:
    """Licitação da listagem filtrada; `key` deduplica entre janelas"""
    key: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)


class PNCPDataMapper:
    """Mapper de contratações do PNCP (/v1/contratacoes/publicacao)"""

    def notice_to_listing(self, raw: Any) -> Optional[Dict[str, Any]]:
        """
        Formato da listagem de licitações (/api/licitacoes).

        O id é o numeroControlePNCP; sem ele, monta `cnpj_ano_sequencial`.
        """
        if not isinstance(raw, dict):
            logger.debug(f"⚠️ Registro PNCP ignorado na listagem: {type(raw).__name__}")
            return None

        licitacao_id = clean_text(raw.get('numeroControlePNCP'))
        if not licitacao_id:
            cnpj = clean_text(get_nested(raw, 'orgaoEntidade', 'cnpj')) or 'semcnpj'
            ano = clean_text(raw.get('anoCompra')) or '0'
            sequencial = clean_text(raw.get('sequencialCompra')) or '0'
            licitacao_id = f"{cnpj}_{ano}_{sequencial}"

        valor = to_amount(raw.get('valorTotalEstimado'))

        return {
            'id': licitacao_id,
            'titulo': (clean_text(raw.get('objetoCompra')) or clean_text(raw.get('objeto'))
                       or clean_text(raw.get('titulo')) or 'Sem título'),
            'orgao': clean_text(get_nested(raw, 'orgaoEntidade', 'razaoSocial')) or None,
            'uf': (clean_text(get_nested(raw, 'unidadeOrgao', 'ufSigla'))
                   or clean_text(get_nested(raw, 'orgaoEntidade', 'uf')) or None),
            'municipio': (clean_text(get_nested(raw, 'unidadeOrgao', 'municipioNome'))
                          or clean_text(get_nested(raw, 'orgaoEntidade', 'municipio')) or None),
            'modalidade': clean_text(raw.get('modalidadeNome')) or None,
            'valorEstimado': valor if valor else None,
            'dataPublicacao': (clean_text(raw.get('dataPublicacaoPncp'))
                               or clean_text(raw.get('dataInclusao')) or None),
            'prazoEncerramento': clean_text(raw.get('dataEncerramentoProposta')) or None,
            'url': (clean_text(raw.get('linkSistemaOrigem'))
                    or clean_text(raw.get('linkProcessoEletronico')) or None),
            'fonte': 'PNCP',
        }

    def notice_to_summary(self, raw: Any) -> Dict[str, Any]:
        """Formato resumido da busca por palavra-chave (/api/marcas)"""
        if not isinstance(raw, dict):
            raw = {}

        documentos = []
        for doc in raw.get('documentos') or []:
            if not isinstance(doc, dict):
                continue
            documentos.append({
                'nome': (clean_text(doc.get('titulo')) or clean_text(doc.get('nome'))
                         or clean_text(doc.get('descricao')) or 'Documento'),
                'tipo': clean_text(doc.get('tipoDocumento')) or clean_text(doc.get('tipo')),
                'url': clean_text(doc.get('url')) or clean_text(doc.get('link')),
            })

        return {
            'orgao': clean_text(get_nested(raw, 'orgaoEntidade', 'razaoSocial')) or '--',
            'objeto': clean_text(raw.get('objetoCompra')) or '--',
            'dataPublicacao': (clean_text(raw.get('dataPublicacaoPncp'))
                               or clean_text(raw.get('dataPublicacao')) or None),
            'documentos': documentos,
        }


class ListingMatcher:
    """Adapta o mapper ao orquestrador: todo registro válido entra na listagem"""

    def __init__(self, mapper: Optional[PNCPDataMapper] = None):
        self.mapper = mapper or PNCPDataMapper()

    def extract(self, raw: Any) -> Optional[ListedNotice]:
        data = self.mapper.notice_to_listing(raw)
        if data is None:
            return None
        return ListedNotice(key=data['id'], data=data)
