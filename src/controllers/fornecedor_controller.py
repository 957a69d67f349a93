"""
Controller de Fornecedores
Ranking de fornecedores por termo (bloqueante, streaming e página única)
"""
from flask import current_app, jsonify
import logging
from typing import Dict, Any, Tuple

from controllers._params import arg_int, arg_str, caller_id
from controllers._stream import ndjson_response
from middleware.error_handler import log_endpoint_access

logger = logging.getLogger(__name__)

class FornecedorController:
    """Controller para os endpoints /api/fornecedores"""

    @staticmethod
    def _scan_params() -> Dict[str, Any]:
        return {
            'termo': arg_str('termo'),
            'data_ini': arg_str('dataIni') or None,
            'data_fim': arg_str('dataFim') or None,
            'page_size': arg_int('pageSize', 200, 10, 500),
            'max_pages': arg_int('maxPages', 8, 1, 200),
            'top': arg_int('top', 30, 5, 200),
        }

    @log_endpoint_access
    def ranking(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/fornecedores
        Varre o período inteiro e devolve o top-N de fornecedores
        """
        registry = current_app.scan_registry
        caller = caller_id()
        token = registry.begin(caller)
        try:
            result = current_app.fornecedor_service.rank_suppliers(cancel_token=token, **self._scan_params())
        finally:
            registry.finish(caller, token)

        return jsonify(result), 200 if result['ok'] else 502

    @log_endpoint_access
    def stream(self):
        """
        GET /api/fornecedores/stream
        Mesma varredura em NDJSON; cada `progress` traz o ranking parcial
        """
        registry = current_app.scan_registry
        caller = caller_id()
        token = registry.begin(caller)
        try:
            events = current_app.fornecedor_service.stream_suppliers(cancel_token=token, **self._scan_params())
        except Exception:
            registry.finish(caller, token)
            raise

        return ndjson_response(events, lambda: registry.finish(caller, token))

    @log_endpoint_access
    def scan_page(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/fornecedores/scan
        Agregados de uma única página de contratos
        """
        result = current_app.fornecedor_service.scan_page(
            termo=arg_str('termo'),
            data_inicial=arg_str('dataInicial'),
            data_final=arg_str('dataFinal'),
            pagina=arg_int('pagina', 1, 1, 9999),
            tamanho_pagina=arg_int('tamanhoPagina', 200, 10, 500),
            uf_org=arg_str('ufOrg').upper() or None,
        )
        return jsonify(result), 200

    @log_endpoint_access
    def cancel(self) -> Tuple[Dict[str, Any], int]:
        """
        POST /api/fornecedores/cancel
        Cancela a varredura ativa do chamador
        """
        canceled = current_app.scan_registry.cancel(caller_id())
        return jsonify({'ok': True, 'canceled': canceled}), 200
