"""
Licitacao Controller
Controller para a listagem filtrada de licitações
"""
from flask import current_app, jsonify
import logging
from typing import Dict, Any, Tuple

from controllers._params import arg_int, arg_str
from middleware.error_handler import log_endpoint_access

logger = logging.getLogger(__name__)

class LicitacaoController:
    """
    Controller que recebe as requisições da listagem de licitações,
    saneia os parâmetros e chama o serviço correspondente.
    """

    @log_endpoint_access
    def listar(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/licitacoes

        Query params: q, uf, codigoModalidadeContratacao, dataIni, dataFim,
        page, pageSize
        """
        result = current_app.licitacao_service.buscar_licitacoes(
            q=arg_str('q'),
            uf=arg_str('uf'),
            modalidade=arg_str('codigoModalidadeContratacao'),
            data_ini=arg_str('dataIni') or None,
            data_fim=arg_str('dataFim') or None,
            page=arg_int('page', 1, 1, 99999),
            page_size=arg_int('pageSize', 50, 10, 50),
        )
        return jsonify(result), 200 if result['ok'] else 502
