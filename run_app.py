#!/usr/bin/env python3
"""
Script de entrada para o backend do Radar de Licitações
Coloca src/ no PYTHONPATH e sobe o servidor de desenvolvimento
"""

import sys
from pathlib import Path

def main():
    """Executar a aplicação"""

    src_path = Path(__file__).parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))

    print(f"🐍 PYTHONPATH configurado: {src_path}")

    try:
        from app import main as app_main
        app_main()
    except KeyboardInterrupt:
        print("\n🛑 Aplicação interrompida pelo usuário")
        sys.exit(0)

if __name__ == "__main__":
    main()
