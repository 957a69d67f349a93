#!/usr/bin/env python3
"""
WSGI entry point para Gunicorn
Configura PYTHONPATH, logging e inicia a aplicação

    gunicorn -w 2 --threads 8 -b 0.0.0.0:8080 --chdir src wsgi:app
"""

import sys
import os
from pathlib import Path

# Configurar PYTHONPATH para importações corretas
current_dir = Path(__file__).parent  # /app/src
project_root = current_dir.parent    # /app

if str(current_dir) not in sys.path:
    sys.path.insert(0, str(current_dir))

from config.env_loader import load_environment
from config.logging_config import setup_logging

load_environment()
setup_logging(str(project_root / 'logs'))

from app import create_app

# Criar aplicação Flask
application = create_app()

# Alias para compatibilidade
app = application

if __name__ == "__main__":
    # Para teste local
    application.run(host='0.0.0.0', port=int(os.getenv('PORT', 5000)), threaded=True)
