"""
Leitura e saneamento dos parâmetros de query string.

Valores numéricos inválidos caem no padrão; válidos são truncados e
limitados ao intervalo aceito.
"""
from flask import request

from validators.query_validators import clamp_int


def arg_int(name: str, default: int, minimum: int, maximum: int) -> int:
    return clamp_int(request.args.get(name), default, minimum, maximum)


def arg_str(name: str, default: str = '') -> str:
    return (request.args.get(name) or default).strip()


def arg_flag(name: str) -> bool:
    return arg_str(name) in ('1', 'true', 'True')


def caller_id() -> str:
    """Identifica o chamador para a regra de uma varredura ativa por vez"""
    return request.headers.get('X-Client-Id') or request.remote_addr or 'anonymous'
