"""
Middleware Global de Tratamento de Erros
Todas as respostas de erro seguem o formato {ok: false, error, ...}
"""
from flask import jsonify, request
from functools import wraps
import datetime
import logging
import time
import uuid
from typing import Dict, Any, Tuple

from exceptions.api_exceptions import BaseAPIException

logger = logging.getLogger(__name__)

def register_error_handlers(app):
    """Registrar handlers de erro globais na aplicação Flask"""

    @app.errorhandler(BaseAPIException)
    def handle_api_exception(error: BaseAPIException) -> Tuple[Dict[str, Any], int]:
        """Handler para exceções personalizadas da API"""
        log = logger.warning if error.http_status < 500 else logger.error
        log(f"API Exception: {error.message}", extra={
            'error_code': error.error_code,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            'details': error.details
        })

        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(404)
    def handle_not_found(error) -> Tuple[Dict[str, Any], int]:
        """Handler para 404 - Endpoint não encontrado"""
        return jsonify({
            'ok': False,
            'error': f'Endpoint não encontrado: {request.method} {request.path}',
            'code': 'EndpointNotFound',
            'details': {
                'available_endpoints': _get_available_endpoints(app)
            }
        }), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error) -> Tuple[Dict[str, Any], int]:
        """Handler para 405 - Método não permitido"""
        return jsonify({
            'ok': False,
            'error': f'Método {request.method} não permitido para {request.path}',
            'code': 'MethodNotAllowed',
        }), 405

    @app.errorhandler(500)
    def handle_internal_error(error) -> Tuple[Dict[str, Any], int]:
        """Handler para 500 - Erro interno do servidor"""
        logger.error(f"Internal Server Error: {str(error)}", extra={
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url
        }, exc_info=True)

        return jsonify({
            'ok': False,
            'error': 'Erro interno do servidor',
            'code': 'InternalServerError',
            'details': {'error_id': _generate_error_id()}
        }), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> Tuple[Dict[str, Any], int]:
        """Handler para exceções não tratadas"""
        logger.error(f"Unexpected Error: {str(error)}", extra={
            'error_type': type(error).__name__,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url
        }, exc_info=True)

        return jsonify({
            'ok': False,
            'error': str(error) or 'Erro inesperado',
            'code': 'UnexpectedError',
            'details': {
                'error_type': type(error).__name__,
                'error_id': _generate_error_id()
            }
        }), 500

def _get_available_endpoints(app) -> list:
    """Listar endpoints disponíveis para ajudar no debug"""
    endpoints = []
    for rule in app.url_map.iter_rules():
        endpoints.append({
            'path': rule.rule,
            'methods': sorted(rule.methods - {'HEAD', 'OPTIONS'})
        })
    return sorted(endpoints, key=lambda x: x['path'])

def _generate_error_id() -> str:
    """Gerar ID único para rastreamento de erros"""
    timestamp = datetime.datetime.now().strftime('%Y%m%d_%H%M%S')
    unique_id = str(uuid.uuid4())[:8]
    return f"ERR_{timestamp}_{unique_id}"

# Decorator para adicionar logging automático aos endpoints
def log_endpoint_access(func):
    """Decorator para logging automático de acesso a endpoints"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()

        logger.info(f"🚀 {request.method} {request.full_path.rstrip('?')}", extra={
            'endpoint': func.__name__,
            'method': request.method,
            'url': request.url,
            'user_agent': request.headers.get('User-Agent'),
            'ip': request.remote_addr
        })

        try:
            result = func(*args, **kwargs)
            duration = time.time() - start_time

            logger.info(f"✅ {request.method} {request.path} - {duration:.3f}s", extra={
                'endpoint': func.__name__,
                'duration': duration,
                'status': 'success'
            })

            return result

        except Exception as e:
            duration = time.time() - start_time

            logger.error(f"❌ {request.method} {request.path} - {duration:.3f}s - {str(e)}", extra={
                'endpoint': func.__name__,
                'duration': duration,
                'status': 'error',
                'error': str(e)
            })

            raise

    return wrapper
