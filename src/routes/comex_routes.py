"""
Rotas do ComexStat
"""
from flask import Blueprint
from controllers.comex_controller import ComexController

comex_routes = Blueprint('comex', __name__)

controller = ComexController()

@comex_routes.route('/api/comex', methods=['GET'])
def overview():
    """
    GET /api/comex - Mercado de importação de um NCM

    PARÂMETROS:
    - ncm: 8 dígitos (pontuação é ignorada)
    - yearStart, yearEnd: limitados aos anos disponíveis no ComexStat
    - monthStart, monthEnd: 01..12
    - top: 5..50 (padrão 10)
    """
    return controller.overview()

@comex_routes.route('/api/comex/ping', methods=['GET'])
def ping():
    """GET /api/comex/ping - Conectividade com a API do ComexStat"""
    return controller.ping()
