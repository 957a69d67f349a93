"""
Resposta NDJSON para varreduras em streaming.

Cada evento vira uma linha JSON. Se o cliente desconectar, o Werkzeug fecha
a resposta; o fechamento é repassado ao gerador de eventos, que cancela a
varredura. `on_close` roda uma única vez, mesmo que a resposta seja fechada
antes do primeiro evento.
"""
import json
import logging
from typing import Any, Callable, Dict, Iterator

from flask import Response, stream_with_context

logger = logging.getLogger(__name__)

NDJSON_MIMETYPE = 'application/x-ndjson'


def ndjson_response(events: Iterator[Dict[str, Any]], on_close: Callable[[], None]) -> Response:
    closed = []

    def close_once():
        if closed:
            return
        closed.append(True)
        events.close()
        on_close()

    def generate():
        try:
            for event in events:
                yield json.dumps(event, ensure_ascii=False) + '\n'
        finally:
            close_once()

    response = Response(
        stream_with_context(generate()),
        mimetype=NDJSON_MIMETYPE,
        headers={'Cache-Control': 'no-store'},
    )
    response.call_on_close(close_once)
    return response
