"""
Rotas de Fornecedores
Ranking de fornecedores a partir dos contratos do PNCP
"""
from flask import Blueprint
from controllers.fornecedor_controller import FornecedorController

# Criar blueprint para fornecedores
fornecedor_routes = Blueprint('fornecedores', __name__)

# Instanciar controller
controller = FornecedorController()

# ====== ROTAS DE FORNECEDORES ======

@fornecedor_routes.route('/api/fornecedores', methods=['GET'])
def ranking():
    """
    GET /api/fornecedores - Ranking de fornecedores por termo

    DESCRIÇÃO:
    - Quebra o período em janelas de até 365 dias
    - Varre /v1/contratos página a página (até maxPages por janela)
    - Filtra pelo termo no objeto do contrato (sem acentos/caixa)
    - Agrega por fornecedor e ordena por score

    PARÂMETROS:
    - termo: termo buscado (vazio devolve lista vazia)
    - dataIni, dataFim: yyyy-mm-dd (padrão: últimos 365 dias)
    - pageSize (10..500, padrão 200), maxPages (1..200, padrão 8), top (5..200, padrão 30)

    RETORNA:
    - fornecedores: [{ni, nome, score, ocorrencias, valorTotal, ufs, ultimaPublicacao, exemplos}]
    - scannedPages, scannedContracts, windows, canceled
    """
    return controller.ranking()

@fornecedor_routes.route('/api/fornecedores/stream', methods=['GET'])
def stream():
    """
    GET /api/fornecedores/stream - Ranking em NDJSON

    Mesmos parâmetros de /api/fornecedores. Emite `progress` (com `top`
    parcial) a cada página e termina com `done` ou `error`.
    """
    return controller.stream()

@fornecedor_routes.route('/api/fornecedores/scan', methods=['GET'])
def scan_page():
    """
    GET /api/fornecedores/scan - Agregados de uma única página

    PARÂMETROS:
    - termo, dataInicial, dataFinal (YYYYMMDD, obrigatórias)
    - pagina (1..9999), tamanhoPagina (10..500), ufOrg (UF do órgão, opcional)
    """
    return controller.scan_page()

@fornecedor_routes.route('/api/fornecedores/cancel', methods=['POST'])
def cancel():
    """POST /api/fornecedores/cancel - Cancela a varredura ativa do chamador (X-Client-Id)"""
    return controller.cancel()
