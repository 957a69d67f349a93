"""
Controller do ComexStat
"""
from flask import current_app, jsonify
import logging
from typing import Dict, Any, Tuple

from controllers._params import arg_int, arg_str
from middleware.error_handler import log_endpoint_access

logger = logging.getLogger(__name__)

class ComexController:

    @log_endpoint_access
    def overview(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/comex
        Top UFs e países de origem das importações de um NCM
        """
        result = current_app.comex_service.import_overview(
            ncm=arg_str('ncm'),
            year_start=arg_str('yearStart') or None,
            year_end=arg_str('yearEnd') or None,
            month_start=arg_str('monthStart') or None,
            month_end=arg_str('monthEnd') or None,
            top=arg_int('top', 10, 5, 50),
        )
        return jsonify(result), 200

    @log_endpoint_access
    def ping(self) -> Tuple[Dict[str, Any], int]:
        """GET /api/comex/ping"""
        return jsonify(current_app.comex_service.ping()), 200
