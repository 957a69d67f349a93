"""
Rotas de Marcas
Busca de licitações publicadas que citam uma marca/produto
"""
from flask import Blueprint
from controllers.marca_controller import MarcaController

marca_routes = Blueprint('marcas', __name__)

controller = MarcaController()

@marca_routes.route('/api/marcas', methods=['GET'])
def search():
    """
    GET /api/marcas - Uma página de busca por palavra-chave

    PARÂMETROS:
    - termo, dataInicial, dataFinal (obrigatórios)
    - codigoModalidadeContratacao (padrão 8), uf
    - pagina (1..99999), tamanhoPagina (1..50, padrão 20)
    """
    return controller.search()

@marca_routes.route('/api/marcas/stream', methods=['GET'])
def stream():
    """
    GET /api/marcas/stream - Varredura em NDJSON

    DESCRIÇÃO:
    - Termo com pelo menos 3 caracteres, dataInicial e dataFinal obrigatórias
    - Procura o termo em qualquer campo textual da contratação
    - Só entram contratações com link de processo (onlyPortalCompras=1
      restringe ao Portal de Compras Públicas)
    - Para ao atingir `target` resultados (1..500, padrão 30)

    EVENTOS:
    - item: {orgao, objeto, dataPublicacao, processoUrl, fonte}
    - progress: window, page, scannedPages, scannedItems, found
    - done: contagens finais e `canceled`
    - error: falha do PNCP
    """
    return controller.stream()

@marca_routes.route('/api/marcas/cancel', methods=['POST'])
def cancel():
    """POST /api/marcas/cancel - Cancela a varredura ativa do chamador"""
    return controller.cancel()
