import logging
import os
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(log_dir: str = 'logs'):
    # Criar pasta de logs
    Path(log_dir).mkdir(exist_ok=True)

    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(os.path.join(log_dir, 'radar.log'), encoding='utf-8'),
            logging.StreamHandler()
        ]
    )

    # requests/urllib3 são muito verbosos em DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)
