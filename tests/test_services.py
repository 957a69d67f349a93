from datetime import date, timedelta

import pytest

from exceptions.api_exceptions import ValidationError
from services.comex_service import ComexService, build_filter, group_and_top
from services.fornecedor_service import FornecedorService
from services.licitacao_service import LicitacaoService
from services.marca_service import MarcaService

from conftest import FakeComexClient, FakeFetcher, FakePNCPClient, contratacao, contrato


def no_sleep(seconds):
    pass


def test_rank_suppliers_empty_term_returns_empty_result():
    client = FakePNCPClient()
    result = FornecedorService(client, sleep=no_sleep).rank_suppliers('  ')

    assert result == {'ok': True, 'termo': '', 'fornecedores': [], 'scannedPages': 0, 'scannedContracts': 0}
    assert client.fetch_contracts.calls == []


def test_rank_suppliers_short_term_is_rejected():
    with pytest.raises(ValidationError):
        FornecedorService(FakePNCPClient(), sleep=no_sleep).rank_suppliers('ab')


def test_rank_suppliers_defaults_to_last_year():
    client = FakePNCPClient(contracts=FakeFetcher(pages={1: [contrato(), contrato(ni='2', nome='B')]}))

    result = FornecedorService(client, page_delay=0).rank_suppliers('autoclave', top=5)

    assert result['ok'] is True
    assert result['dataFim'] == date.today().isoformat()
    assert result['dataIni'] == (date.today() - timedelta(days=365)).isoformat()
    assert result['windows'] == 2
    assert result['totalFornecedores'] == 2
    assert result['status'] == 'completed'
    assert result['canceled'] is False


def test_rank_suppliers_total_counts_every_supplier():
    records = [contrato(ni=str(n), nome=f'Fornecedor {n}') for n in range(1, 8)]
    client = FakePNCPClient(contracts=FakeFetcher(pages={1: records}))

    result = FornecedorService(client, page_delay=0).rank_suppliers('autoclave', '2024-01-01', '2024-06-30', top=5)

    assert len(result['fornecedores']) == 5
    assert result['totalFornecedores'] == 7


def test_rank_suppliers_reports_upstream_failure():
    client = FakePNCPClient(contracts=FakeFetcher(error_on=lambda w, p: True))

    result = FornecedorService(client, page_delay=0).rank_suppliers('autoclave', '2024-01-01', '2024-06-30')

    assert result['ok'] is False
    assert result['status'] == 'failed'
    assert 'PNCP erro 503' in result['error']


def test_stream_suppliers_validates_before_fetching():
    client = FakePNCPClient()
    with pytest.raises(ValidationError):
        FornecedorService(client).stream_suppliers('')
    assert client.fetch_contracts.calls == []


def test_scan_page_aggregates_only_that_page():
    records = [contrato(uf='MT'), contrato(uf='MT'), contrato(ni='2', nome='B', uf='SP')]
    client = FakePNCPClient(contracts=FakeFetcher(pages={3: records}, total_pages=9))

    result = FornecedorService(client).scan_page('autoclave', '20240101', '20240131',
                                                 pagina=3, tamanho_pagina=50, uf_org='MT')

    assert result['totalPaginas'] == 9
    assert result['scannedContracts'] == 3
    assert len(result['items']) == 1
    assert result['items'][0]['ocorrencias'] == 2
    assert 'score' not in result['items'][0]
    window, page, size, _ = client.fetch_contracts.calls[0]
    assert (window.ini, window.fim, page, size) == ('20240101', '20240131', 3, 50)


def test_scan_page_requires_dates():
    with pytest.raises(ValidationError):
        FornecedorService(FakePNCPClient()).scan_page('autoclave', '', '20240131')


def test_marca_stream_validation_happens_eagerly():
    client = FakePNCPClient()
    service = MarcaService(client)

    with pytest.raises(ValidationError):
        service.stream('ab', '2024-01-01', '2024-02-01')
    with pytest.raises(ValidationError):
        service.stream('littmann', '2024-01-01', '')
    assert client.fetch_notices.calls == []


def test_marca_stream_passes_filters_to_fetcher():
    notices = FakeFetcher(pages={1: [contratacao()]})
    service = MarcaService(FakePNCPClient(notices=notices), page_delay=0)

    events = list(service.stream('littmann', '2024-01-01', '2024-01-31', uf='mt', modalidade='6', target=1))

    assert [e['type'] for e in events] == ['item', 'done']
    assert notices.calls[0][3] == {'modality': '6', 'uf': 'MT'}
    assert notices.calls[0][2] == 50


def test_marca_search_page_maps_summary():
    raw = contratacao()
    raw['documentos'] = [{'titulo': 'Edital', 'tipoDocumento': 'PDF', 'url': 'https://x/edital.pdf'}, 'lixo']
    notices = FakeFetcher(pages={2: [raw]})
    service = MarcaService(FakePNCPClient(notices=notices))

    result = service.search_page('littmann', '2024-01-01', '2024-01-31', pagina=2)

    assert result['request'] == {
        'termo': 'littmann', 'dataInicial': '20240101', 'dataFinal': '20240131',
        'codigoModalidadeContratacao': '8', 'pagina': 2, 'tamanhoPagina': 20, 'uf': None,
    }
    assert result['totalRecebido'] == 1
    assert result['itens'][0]['documentos'] == [{'nome': 'Edital', 'tipo': 'PDF', 'url': 'https://x/edital.pdf'}]
    assert notices.calls[0][3]['keyword'] == 'littmann'


def test_licitacoes_reads_requested_page_in_every_window():
    notices = FakeFetcher(pages={
        2: [contratacao(numero='a'), contratacao(numero='b')],
    })
    service = LicitacaoService(FakePNCPClient(notices=notices), page_delay=0)

    result = service.buscar_licitacoes(q='littmann', data_ini='2023-01-01', data_fim='2024-12-30',
                                       page=2, page_size=10)

    assert result['ok'] is True
    assert result['total'] == 2
    assert [item['id'] for item in result['items']] == ['a', 'b']
    assert [call[1] for call in notices.calls] == [2, 2]
    assert notices.calls[0][3] == {'modality': '8', 'uf': None, 'keyword': 'littmann'}


def test_listing_id_falls_back_to_composite_key():
    raw = contratacao()
    raw.pop('numeroControlePNCP')
    raw.update({'anoCompra': 2024, 'sequencialCompra': 7})
    service = LicitacaoService(FakePNCPClient(notices=FakeFetcher(pages={1: [raw]})), page_delay=0)

    item = service.buscar_licitacoes(data_ini='2024-01-01', data_fim='2024-01-31')['items'][0]

    assert item['id'] == '03533064000146_2024_7'
    assert item['fonte'] == 'PNCP'
    assert item['uf'] == 'MT'
    assert item['valorEstimado'] == 5000


def test_group_and_top_sums_by_key():
    rows = [
        {'noPaispt': 'China', 'vlFob': 100, 'kgLiquido': 10},
        {'noPaispt': 'China', 'vlfob': '50', 'kgLiq': 5},
        {'noPaispt': 'Alemanha', 'valorFOB': 500},
        {'vlFob': 'x'},
    ]

    top = group_and_top(rows, 'noPaispt', 2)

    assert top == [
        {'key': 'Alemanha', 'fob': 500.0, 'kg': 0.0, 'n': 1},
        {'key': 'China', 'fob': 150.0, 'kg': 15.0, 'n': 2},
    ]


def test_build_filter_for_imports_by_detail():
    uf_filter = build_filter(2022, 2023, '01', '12', '90189099', 'uf')

    assert uf_filter['typeForm'] == 2
    assert uf_filter['detailDatabase'] == [{'id': 'noUf', 'text': ''}]
    assert uf_filter['filterArray'] == [{'item': ['90189099'], 'idInput': 'noNcmpt'}]
    assert build_filter(2022, 2023, '01', '12', '90189099', 'pais')['detailDatabase'][0]['id'] == 'noPaispt'


def test_import_overview_clamps_years_and_months():
    client = FakeComexClient(
        rows_uf=[{'noUf': 'SP', 'vlFob': 10}],
        rows_pais=[{'noPaispt': 'China', 'vlFob': 7, 'kgLiquido': 2}, {'noPaispt': 'EUA', 'vlFob': 3}],
        years={'min': 2010, 'max': 2023},
    )

    result = ComexService(client).import_overview('9018.90-99', year_start='2030', year_end='2005',
                                                  month_start='13', month_end='6', top=5)

    assert result['ncm'] == '90189099'
    assert result['periodo'] == {'yearStart': 2010, 'yearEnd': 2023, 'monthStart': '01', 'monthEnd': '06'}
    assert result['total'] == {'fob': 10.0, 'kg': 2.0}
    assert result['topUF'][0]['key'] == 'SP'
    assert len(result['notes']) == 2
    assert len(client.filters) == 2


def test_import_overview_requires_8_digit_ncm():
    with pytest.raises(ValidationError):
        ComexService(FakeComexClient()).import_overview('9018')
