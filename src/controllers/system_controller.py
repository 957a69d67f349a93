"""
Controller para Operações de Sistema
"""
from flask import current_app, jsonify
import logging
from datetime import datetime
from typing import Dict, Any, Tuple

from middleware.error_handler import log_endpoint_access

logger = logging.getLogger(__name__)

APP_VERSION = '1.0.0'

class SystemController:
    """Controller para endpoints de sistema"""

    @log_endpoint_access
    def health_check(self) -> Tuple[Dict[str, Any], int]:
        """
        GET /api/health
        Health check da aplicação (não consulta as fontes externas)
        """
        data_sources = current_app.data_sources
        return jsonify({
            'ok': True,
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'version': APP_VERSION,
            'providers': data_sources.list_providers(),
            'activeScans': len(current_app.scan_registry),
        }), 200
