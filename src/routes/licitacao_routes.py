"""
Rotas para Busca de Licitações
Define o endpoint da listagem filtrada de licitações do PNCP.
"""
from flask import Blueprint
from controllers.licitacao_controller import LicitacaoController

# Criar o blueprint
licitacao_routes = Blueprint('licitacao_routes', __name__)

# Instanciar o controller
licitacao_controller = LicitacaoController()

@licitacao_routes.route('/api/licitacoes', methods=['GET'])
def listar():
    """
    Listagem de licitações publicadas
    ---
    tags:
      - Licitações
    parameters:
      - in: query
        name: q
        type: string
        description: Palavra-chave (repassada ao PNCP)
      - in: query
        name: uf
        type: string
      - in: query
        name: codigoModalidadeContratacao
        type: string
        description: Modalidade (padrão 8)
      - in: query
        name: dataIni
        type: string
        description: yyyy-mm-dd (padrão há 90 dias)
      - in: query
        name: dataFim
        type: string
        description: yyyy-mm-dd (padrão hoje)
      - in: query
        name: page
        type: integer
      - in: query
        name: pageSize
        type: integer
        description: 10..50 (padrão 50)
    responses:
      200:
        description: Listagem realizada com sucesso
      400:
        description: Erro nos parâmetros da requisição
      502:
        description: Falha ao consultar o PNCP
    """
    return licitacao_controller.listar()
