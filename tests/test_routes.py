import json

from controllers._stream import ndjson_response
from services.comex_service import ComexService
from services.fornecedor_service import FornecedorService
from services.licitacao_service import LicitacaoService
from services.marca_service import MarcaService

from conftest import FakeComexClient, FakeFetcher, FakePNCPClient, contratacao, contrato


def ndjson(response):
    return [json.loads(line) for line in response.get_data(as_text=True).splitlines() if line]


def use_pncp(app, client):
    app.fornecedor_service = FornecedorService(client, page_delay=0)
    app.marca_service = MarcaService(client, page_delay=0)
    app.licitacao_service = LicitacaoService(client, page_delay=0)


def test_health_endpoints(client):
    assert client.get('/healthz').status_code == 200

    body = client.get('/api/health').get_json()
    assert body['ok'] is True
    assert body['providers'] == ['pncp', 'comexstat']


def test_fornecedores_ranking(app, client):
    use_pncp(app, FakePNCPClient(contracts=FakeFetcher(pages={1: [contrato(), contrato()]})))

    response = client.get('/api/fornecedores?termo=autoclave&dataIni=2024-01-01&dataFim=2024-03-31&top=1')
    body = response.get_json()

    assert response.status_code == 200
    assert body['ok'] is True
    assert body['scannedPages'] == 2
    assert body['scannedContracts'] == 2
    assert body['fornecedores'][0]['ocorrencias'] == 2
    assert len(app.scan_registry) == 0


def test_fornecedores_clamps_query_params(app, client):
    fetcher = FakeFetcher()
    use_pncp(app, FakePNCPClient(contracts=fetcher))

    client.get('/api/fornecedores?termo=autoclave&dataIni=2024-01-01&dataFim=2024-01-31&pageSize=9999&maxPages=abc')

    assert fetcher.calls[0][2] == 500


def test_fornecedores_upstream_failure_is_502(app, client):
    use_pncp(app, FakePNCPClient(contracts=FakeFetcher(error_on=lambda w, p: True)))

    response = client.get('/api/fornecedores?termo=autoclave&dataIni=2024-01-01&dataFim=2024-01-31')

    assert response.status_code == 502
    assert response.get_json()['ok'] is False


def test_invalid_date_is_400(app, client):
    use_pncp(app, FakePNCPClient())

    response = client.get('/api/fornecedores?termo=autoclave&dataIni=01/01/2024')

    assert response.status_code == 400
    assert response.get_json()['ok'] is False
    assert 'dataIni' in response.get_json()['error']


def test_fornecedores_stream(app, client):
    use_pncp(app, FakePNCPClient(contracts=FakeFetcher(pages={1: [contrato()]})))

    response = client.get('/api/fornecedores/stream?termo=autoclave&dataIni=2024-01-01&dataFim=2024-01-31',
                          headers={'X-Client-Id': 'abc'})
    events = ndjson(response)

    assert response.mimetype == 'application/x-ndjson'
    assert response.headers['Cache-Control'] == 'no-store'
    assert [e['type'] for e in events] == ['progress', 'progress', 'done']
    assert events[0]['top'][0]['nome'] == 'Fornecedor A'
    assert app.scan_registry.active('abc') is None


def test_ndjson_response_runs_close_callback_once(app):
    calls = []

    def events():
        yield {'type': 'done'}

    with app.test_request_context():
        unread = ndjson_response(events(), lambda: calls.append('unread'))
        unread.close()

        read = ndjson_response(events(), lambda: calls.append('read'))
        assert read.get_data(as_text=True) == '{"type": "done"}\n'
        read.close()

    assert calls == ['unread', 'read']


def test_stream_closed_before_first_event_releases_the_scan(app, client):
    use_pncp(app, FakePNCPClient(contracts=FakeFetcher(pages={1: [contrato()]})))

    response = client.get('/api/fornecedores/stream?termo=autoclave&dataIni=2024-01-01&dataFim=2024-01-31',
                          headers={'X-Client-Id': 'abc'})
    response.close()

    assert app.scan_registry.active('abc') is None


def test_fornecedores_stream_validation_is_400(app, client):
    use_pncp(app, FakePNCPClient())

    response = client.get('/api/fornecedores/stream?termo=ab', headers={'X-Client-Id': 'abc'})

    assert response.status_code == 400
    assert app.scan_registry.active('abc') is None


def test_fornecedores_scan_page(app, client):
    use_pncp(app, FakePNCPClient(contracts=FakeFetcher(pages={1: [contrato()]}, total_pages=4)))

    body = client.get('/api/fornecedores/scan?termo=autoclave&dataInicial=20240101&dataFinal=20240131').get_json()

    assert body['totalPaginas'] == 4
    assert body['items'][0]['ni'] == '11222333000144'


def test_cancel_active_scan(app, client):
    token = app.scan_registry.begin('abc')

    body = client.post('/api/fornecedores/cancel', headers={'X-Client-Id': 'abc'}).get_json()

    assert body == {'ok': True, 'canceled': True}
    assert token.cancelled
    assert client.post('/api/marcas/cancel', headers={'X-Client-Id': 'abc'}).get_json()['canceled'] is False


def test_marcas_stream(app, client):
    use_pncp(app, FakePNCPClient(notices=FakeFetcher(pages={1: [contratacao(numero='1'), contratacao(numero='2')]})))

    response = client.get('/api/marcas/stream?termo=littmann&dataInicial=2024-01-01&dataFinal=2024-01-31&target=1')
    events = ndjson(response)

    assert [e['type'] for e in events] == ['item', 'done']
    assert events[0]['item']['processoUrl'].startswith('https://www.portaldecompraspublicas.com.br')


def test_marcas_stream_requires_dates(app, client):
    use_pncp(app, FakePNCPClient())

    response = client.get('/api/marcas/stream?termo=littmann')

    assert response.status_code == 400
    assert response.get_json()['error'] == 'Informe dataInicial e dataFinal (yyyy-mm-dd).'


def test_marcas_single_page(app, client):
    use_pncp(app, FakePNCPClient(notices=FakeFetcher(pages={1: [contratacao()]})))

    body = client.get('/api/marcas?termo=littmann&dataInicial=2024-01-01&dataFinal=2024-01-31&tamanhoPagina=500').get_json()

    assert body['ok'] is True
    assert body['request']['tamanhoPagina'] == 50
    assert body['itens'][0]['orgao'] == 'Prefeitura de Cuiabá'


def test_licitacoes(app, client):
    use_pncp(app, FakePNCPClient(notices=FakeFetcher(pages={1: [contratacao()]})))

    body = client.get('/api/licitacoes?pageSize=5').get_json()

    assert body['ok'] is True
    assert body['pageSize'] == 10
    assert body['total'] == 1
    assert body['items'][0]['titulo'] == 'Aquisição de estetoscópio Littmann'


def test_comex(app, client):
    app.comex_service = ComexService(FakeComexClient(rows_pais=[{'noPaispt': 'China', 'vlFob': 1}]))

    body = client.get('/api/comex?ncm=90189099&top=1').get_json()

    assert body['ok'] is True
    assert body['topPais'] == [{'key': 'China', 'fob': 1.0, 'kg': 0.0, 'n': 1}]
    assert client.get('/api/comex?ncm=123').status_code == 400


def test_comex_ping(app, client):
    app.comex_service = ComexService(FakeComexClient())

    body = client.get('/api/comex/ping').get_json()

    assert body['ok'] is True
    assert body['status'] == 200


def test_unknown_endpoint_is_json_404(client):
    response = client.get('/api/nada')
    assert response.status_code == 404
    assert response.get_json()['ok'] is False
