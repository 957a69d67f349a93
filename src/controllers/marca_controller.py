"""
Controller de Marcas
Busca de licitações que citam uma marca/produto
"""
from flask import current_app, jsonify
import logging
from typing import Dict, Any, Tuple

from controllers._params import arg_flag, arg_int, arg_str, caller_id
from controllers._stream import ndjson_response
from middleware.error_handler import log_endpoint_access

logger = logging.getLogger(__name__)

class MarcaController:
    """Controller para os endpoints /api/marcas"""

    @log_endpoint_access
    def search(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/marcas
        Uma página da busca por palavra-chave no PNCP
        """
        result = current_app.marca_service.search_page(
            termo=arg_str('termo'),
            data_inicial=arg_str('dataInicial'),
            data_final=arg_str('dataFinal'),
            uf=arg_str('uf'),
            modalidade=arg_str('codigoModalidadeContratacao'),
            pagina=arg_int('pagina', 1, 1, 99999),
            tamanho_pagina=arg_int('tamanhoPagina', 20, 1, 50),
        )
        return jsonify(result), 200

    @log_endpoint_access
    def stream(self):
        """
        GET /api/marcas/stream
        Varredura em NDJSON até atingir o alvo de resultados
        """
        registry = current_app.scan_registry
        caller = caller_id()
        token = registry.begin(caller)
        try:
            events = current_app.marca_service.stream(
                termo=arg_str('termo'),
                data_inicial=arg_str('dataInicial'),
                data_final=arg_str('dataFinal'),
                uf=arg_str('uf'),
                modalidade=arg_str('codigoModalidadeContratacao'),
                only_portal_compras=arg_flag('onlyPortalCompras'),
                page_size=arg_int('tamanhoPagina', 50, 1, 50),
                max_pages=arg_int('maxPages', 30, 1, 200),
                target=arg_int('target', 30, 1, 500),
                cancel_token=token,
            )
        except Exception:
            registry.finish(caller, token)
            raise

        return ndjson_response(events, lambda: registry.finish(caller, token))

    @log_endpoint_access
    def cancel(self) -> Tuple[Dict[str, Any], int]:
        """
        POST /api/marcas/cancel
        Cancela a varredura ativa do chamador
        """
        canceled = current_app.scan_registry.cancel(caller_id())
        return jsonify({'ok': True, 'canceled': canceled}), 200
