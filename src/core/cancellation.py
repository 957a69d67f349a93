"""
Cancelamento cooperativo de varreduras.

O token é apenas consultado em pontos explícitos (antes de cada página);
uma requisição já em andamento termina normalmente.
"""
import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class CancelToken:
    """Sinal de cancelamento compartilhado entre quem inicia e quem executa a varredura"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ScanRegistry:
    """
    Garante no máximo uma varredura ativa por chamador.

    Iniciar uma nova varredura cancela a anterior do mesmo chamador.
    """

    def __init__(self):
        self._tokens: Dict[str, CancelToken] = {}
        self._lock = threading.Lock()

    def begin(self, caller_id: str) -> CancelToken:
        token = CancelToken()
        with self._lock:
            previous = self._tokens.get(caller_id)
            self._tokens[caller_id] = token
        if previous is not None and not previous.cancelled:
            logger.info(f"🛑 Cancelando varredura anterior de {caller_id}")
            previous.cancel()
        return token

    def finish(self, caller_id: str, token: CancelToken) -> None:
        with self._lock:
            if self._tokens.get(caller_id) is token:
                del self._tokens[caller_id]

    def cancel(self, caller_id: str) -> bool:
        """Cancela a varredura ativa do chamador; retorna False se não havia nenhuma"""
        with self._lock:
            token = self._tokens.pop(caller_id, None)
        if token is None:
            return False
        token.cancel()
        return True

    def active(self, caller_id: str) -> Optional[CancelToken]:
        with self._lock:
            return self._tokens.get(caller_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
