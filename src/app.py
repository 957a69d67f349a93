"""
Aplicação Flask principal - Backend do Radar de Licitações
Consulta PNCP (licitações, contratos, fornecedores) e ComexStat (importações)
"""

import os
import sys
from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

# Importar nova configuração de logging
from config.logging_config import setup_logging

# Carregar variáveis de ambiente
load_dotenv('config.env')

def create_app(config: dict = None) -> Flask:
    """
    Factory para criar aplicação Flask

    Args:
        config: Dicionário de configurações (opcional). `DATA_SOURCES`
            sobrescreve a configuração das fontes externas.

    Returns:
        Flask: Instância configurada da aplicação
    """
    app = Flask(__name__)

    _configure_app(app, config)
    _setup_cors(app)
    _initialize_services(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    return app

def _configure_app(app: Flask, config: dict = None) -> None:
    """Configurar aplicação via variáveis de ambiente"""

    default_config = {
        'DEBUG': os.getenv('FLASK_DEBUG', 'False').lower() == 'true',
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
        'CORS_ORIGINS': os.getenv('CORS_ORIGINS', '*').split(','),
        'DATA_SOURCES': {},
    }

    app.config.update(default_config)

    if config:
        app.config.update(config)

    app.json.sort_keys = False

    app.logger.info("🔧 Configurações carregadas:")
    app.logger.info(f"  - LOG_LEVEL: {app.config['LOG_LEVEL']}")
    app.logger.info(f"  - DEBUG: {app.config['DEBUG']}")

def _setup_cors(app: Flask) -> None:
    """Configurar CORS para permitir requisições do frontend"""
    # Configurar trailing slashes para evitar redirects 308
    app.url_map.strict_slashes = False

    cors_origins = app.config.get('CORS_ORIGINS', ['*'])
    app.logger.info(f"🔒 CORS configurado para origens: {cors_origins}")

    CORS(app, resources={
        r"/api/*": {
            "origins": cors_origins,
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Client-Id"]
        }
    })

def _initialize_services(app: Flask) -> None:
    """Criar clientes das fontes externas, serviços e o registro de varreduras"""
    from adapters.comexstat_adapter import ComexStatClient
    from adapters.pncp_adapter import PNCPClient
    from config.data_source_config import DataSourceConfig
    from core.cancellation import ScanRegistry
    from services.comex_service import ComexService
    from services.fornecedor_service import FornecedorService
    from services.licitacao_service import LicitacaoService
    from services.marca_service import MarcaService

    app.data_sources = DataSourceConfig(app.config.get('DATA_SOURCES'))
    pncp_config = app.data_sources.get_provider_config('pncp')

    pncp_client = PNCPClient.from_config(pncp_config)
    comex_client = ComexStatClient.from_config(app.data_sources.get_provider_config('comexstat'))
    page_delay = max(pncp_config.get('page_delay_ms', 50), 0) / 1000

    app.scan_registry = ScanRegistry()
    app.fornecedor_service = FornecedorService(pncp_client, page_delay=page_delay)
    app.marca_service = MarcaService(pncp_client, page_delay=page_delay)
    app.licitacao_service = LicitacaoService(pncp_client, page_delay=page_delay)
    app.comex_service = ComexService(comex_client)

    app.logger.info(f"✅ Serviços inicializados (PNCP: {pncp_client.base_url}, pausa entre páginas {page_delay:.3f}s)")

def _register_blueprints(app: Flask) -> None:
    """Registrar todos os blueprints da aplicação"""
    from routes.comex_routes import comex_routes
    from routes.fornecedor_routes import fornecedor_routes
    from routes.licitacao_routes import licitacao_routes
    from routes.marca_routes import marca_routes
    from routes.system_routes import system_routes

    app.register_blueprint(fornecedor_routes)
    app.register_blueprint(marca_routes)
    app.register_blueprint(licitacao_routes)
    app.register_blueprint(comex_routes)
    app.register_blueprint(system_routes)

    app.logger.info("🚀 Blueprints registrados:")
    app.logger.info("  ✅ Fornecedores: /api/fornecedores, /stream, /scan, /cancel")
    app.logger.info("  ✅ Marcas: /api/marcas, /stream, /cancel")
    app.logger.info("  ✅ Licitações: /api/licitacoes")
    app.logger.info("  ✅ Comex: /api/comex, /ping")

    # Health check simples para o balanceador
    @app.route('/healthz')
    def simple_health():
        """Health check simples"""
        return "OK", 200

def _register_error_handlers(app: Flask) -> None:
    """Registrar handlers globais de erro"""
    from middleware.error_handler import register_error_handlers
    register_error_handlers(app)
    app.logger.info("✅ Error handlers registrados!")

def main():
    """
    Função principal para executar a aplicação em desenvolvimento
    """
    # Configurar logging primeiro
    setup_logging()

    from config.env_loader import load_environment
    load_environment()

    try:
        app = create_app()

        print("🧪 DESENVOLVIMENTO - Executando Flask dev server")
        port = int(os.getenv('PORT', 5000))
        app.run(
            host='0.0.0.0',
            port=port,
            debug=app.config['DEBUG'],
            threaded=True
        )

    except Exception as e:
        print(f"❌ Erro crítico na inicialização: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
