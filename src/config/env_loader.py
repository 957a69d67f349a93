"""
Carregador de variáveis de ambiente do Radar de Licitações
"""

import os
from pathlib import Path
from dotenv import load_dotenv

def load_environment() -> bool:
    """Carrega as variáveis de ambiente do arquivo config.env (se existir)"""

    # Buscar arquivo config.env na raiz do projeto
    project_root = Path(__file__).parent.parent.parent
    config_file = project_root / "config.env"

    if not config_file.exists():
        print(f"⚠️ Arquivo config.env não encontrado em: {config_file} (usando variáveis do ambiente)")
        return False

    load_dotenv(config_file)
    print(f"✅ Variáveis de ambiente carregadas de: {config_file}")

    print("🔧 Configurações carregadas:")
    print(f"  - PNCP_BASE_URL: {os.getenv('PNCP_BASE_URL', '(padrão)')}")
    print(f"  - CORS_ORIGINS: {os.getenv('CORS_ORIGINS', '*')}")
    print(f"  - FLASK_DEBUG: {os.getenv('FLASK_DEBUG', 'False')}")
    print(f"  - LOG_LEVEL: {os.getenv('LOG_LEVEL', 'INFO')}")
    return True

if __name__ == "__main__":
    load_environment()
