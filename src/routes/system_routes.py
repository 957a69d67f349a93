"""
Rotas para operações de sistema
"""
from flask import Blueprint
from controllers.system_controller import SystemController

# Criar blueprint para sistema
system_routes = Blueprint('system', __name__)

# Instanciar controller
controller = SystemController()

@system_routes.route('/api/health', methods=['GET'])
def health_check():
    """
    GET /api/health - Health check do sistema

    RETORNA:
    - Status da aplicação, versão e fontes configuradas
    - Quantidade de varreduras ativas
    """
    return controller.health_check()
