"""Fixtures compartilhadas: coletores falsos do PNCP e app Flask de teste"""
from datetime import date

import pytest

from app import create_app
from core.pagination import PageResult
from core.windows import DateWindow


def contrato(ni='11222333000144', nome='Fornecedor A', objeto='Aquisição de autoclave hospitalar',
             valor=1000.0, uf='MT', publicado='2024-05-01'):
    return {
        'niFornecedor': ni,
        'nomeRazaoSocialFornecedor': nome,
        'objetoContrato': objeto,
        'valorGlobal': valor,
        'unidadeOrgao': {'ufSigla': uf},
        'dataPublicacaoPncp': publicado,
    }


def contratacao(numero='123-1-000001/2024', objeto='Aquisição de estetoscópio Littmann',
                url='https://www.portaldecompraspublicas.com.br/processos/123'):
    return {
        'numeroControlePNCP': numero,
        'objetoCompra': objeto,
        'orgaoEntidade': {'razaoSocial': 'Prefeitura de Cuiabá', 'cnpj': '03533064000146'},
        'unidadeOrgao': {'ufSigla': 'MT', 'municipioNome': 'Cuiabá'},
        'dataPublicacaoPncp': '2024-06-10T09:00:00',
        'modalidadeNome': 'Pregão - Eletrônico',
        'valorTotalEstimado': 5000,
        'linkSistemaOrigem': url,
    }


class FakeFetcher:
    """Coletor de páginas com respostas roteirizadas por (janela, página)"""

    def __init__(self, pages=None, total_pages=None, error_on=None):
        self.pages = pages or {}
        self.total_pages = total_pages
        self.error_on = error_on
        self.calls = []

    def __call__(self, window, page, page_size, **kwargs):
        self.calls.append((window, page, page_size, kwargs))
        if self.error_on is not None and self.error_on(window, page):
            from exceptions.api_exceptions import UpstreamError
            raise UpstreamError('PNCP', 'Service Unavailable', 503)
        records = self.pages.get((window.ini, page), self.pages.get(page, []))
        return PageResult(records=list(records), total_pages=self.total_pages)


class FakePNCPClient:
    base_url = 'https://pncp.example/api/consulta'

    def __init__(self, contracts=None, notices=None):
        self.fetch_contracts = contracts or FakeFetcher()
        self.fetch_notices = notices or FakeFetcher()


class FakeComexClient:

    def __init__(self, rows_uf=None, rows_pais=None, years=None):
        self.rows_uf = rows_uf or []
        self.rows_pais = rows_pais or []
        self.years = years or {'min': 1997, 'max': 2024}
        self.filters = []

    def get_years_range(self):
        return self.years

    def query_general(self, filter_obj):
        self.filters.append(filter_obj)
        detail = filter_obj['detailDatabase'][0]['id']
        return self.rows_uf if detail == 'noUf' else self.rows_pais

    def ping(self):
        return {'status': 200, 'body': '{"data":{"min":1997,"max":2024}}'}


@pytest.fixture
def window():
    return DateWindow(date(2024, 1, 1), date(2024, 12, 31))


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'DATA_SOURCES': {'pncp': {'page_delay_ms': 0}},
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()
