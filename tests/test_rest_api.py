import requests

import pytest

from conftest import make_response
from openalgo.api import DataAPI, OrderAPI
from openalgo.api.base import BaseAPI, merge_params

HOST = 'http://127.0.0.1:5000'


@pytest.fixture
def orders(mock_session):
    return OrderAPI('test-key', HOST, session=mock_session)


def posted(session):
    """URL and JSON payload of the last POST"""
    args, kwargs = session.post.call_args
    return args[0], kwargs['json']


def test_session_headers_and_base_url(mock_session):
    api = BaseAPI('test-key', HOST + '/', session=mock_session)

    assert api.base_url == 'http://127.0.0.1:5000/api/v1/'
    assert mock_session.headers['Authorization'] == 'Bearer test-key'
    assert mock_session.headers['Content-Type'] == 'application/json'


def test_submit_request_returns_decoded_body(mock_session):
    api = BaseAPI('test-key', HOST, timeout=5, session=mock_session)
    mock_session.post.return_value = make_response(body={'status': 'success', 'orderid': '42'})

    result = api.submit_request('placeorder', {'apikey': 'test-key'})

    assert result == {'status': 'success', 'orderid': '42'}
    mock_session.post.assert_called_once_with(
        'http://127.0.0.1:5000/api/v1/placeorder', json={'apikey': 'test-key'}, timeout=5
    )


def test_http_error_becomes_structured_result(mock_session):
    api = BaseAPI('test-key', HOST, session=mock_session)
    mock_session.post.return_value = make_response(400, body={'status': 'error', 'message': 'Invalid symbol'})

    result = api.submit_request('placeorder', {})

    assert result['status'] == 'error'
    assert result['code'] == 400
    assert result['error_type'] == 'http_error'
    assert result['message'].startswith('HTTP 400: ')
    assert 'Invalid symbol' in result['message']


def test_http_error_with_plain_text_body(mock_session):
    api = BaseAPI('test-key', HOST, session=mock_session)
    mock_session.post.return_value = make_response(502, raw=b'Bad Gateway')

    result = api.submit_request('funds', {})

    assert result['message'] == 'HTTP 502: Bad Gateway'


@pytest.mark.parametrize('error', [
    requests.exceptions.ConnectionError('refused'),
    requests.exceptions.Timeout('timed out'),
])
def test_no_response_is_network_error(mock_session, error):
    api = BaseAPI('test-key', HOST, session=mock_session)
    mock_session.post.side_effect = error

    result = api.submit_request('funds', {})

    assert result == {
        'status': 'error',
        'message': 'No response received from server',
        'error_type': 'network_error'
    }


def test_request_setup_failure(mock_session):
    api = BaseAPI('test-key', HOST, session=mock_session)
    mock_session.post.side_effect = requests.exceptions.MissingSchema('No connection adapters')

    result = api.submit_request('funds', {})

    assert result['error_type'] == 'request_setup_error'
    assert result['message'] == 'No connection adapters'


def test_non_json_body_is_invalid_response(mock_session):
    api = BaseAPI('test-key', HOST, session=mock_session)
    mock_session.post.return_value = make_response(200, raw=b'<html>oops</html>')

    result = api.submit_request('funds', {})

    assert result['status'] == 'error'
    assert result['error_type'] == 'invalid_response'


def test_place_order_payload(orders, mock_session):
    mock_session.post.return_value = make_response(body={'status': 'success', 'orderid': '1'})

    orders.place_order(symbol='RELIANCE', action='BUY', exchange='NSE', price_type='LIMIT',
                       quantity=5, price=2500, disclosedQuantity=10)

    url, payload = posted(mock_session)
    assert url == 'http://127.0.0.1:5000/api/v1/placeorder'
    assert payload == {
        'apikey': 'test-key',
        'strategy': 'Python',
        'symbol': 'RELIANCE',
        'action': 'BUY',
        'exchange': 'NSE',
        'pricetype': 'LIMIT',
        'product': 'MIS',
        'quantity': '5',
        'price': '2500',
        'disclosed_quantity': '10',
    }


def test_modify_order_defaults(orders, mock_session):
    mock_session.post.return_value = make_response(body={'status': 'success'})

    orders.modify_order(order_id='240101000001', symbol='INFY', action='SELL', exchange='NSE',
                        product='CNC', quantity=2, price=1500.5, strategy='Momentum')

    url, payload = posted(mock_session)
    assert url.endswith('/modifyorder')
    assert payload['orderid'] == '240101000001'
    assert payload['strategy'] == 'Momentum'
    assert payload['pricetype'] == 'LIMIT'
    assert payload['price'] == '1500.5'
    assert payload['disclosed_quantity'] == '0'
    assert payload['trigger_price'] == '0'


def test_basket_order_stringifies_numbers(orders, mock_session):
    mock_session.post.return_value = make_response(body={'status': 'success'})

    orders.basket_order(orders=[{'symbol': 'SBIN', 'quantity': 1, 'price': 600.0}])

    _, payload = posted(mock_session)
    assert payload['orders'] == [{'symbol': 'SBIN', 'quantity': '1', 'price': '600.0'}]


def test_close_position_optional_fields(orders, mock_session):
    mock_session.post.return_value = make_response(body={'status': 'success'})

    orders.close_position()
    _, payload = posted(mock_session)
    assert payload == {'apikey': 'test-key', 'strategy': 'Python'}

    orders.close_position(product='MIS', symbol_group='NIFTY')
    _, payload = posted(mock_session)
    assert payload['product'] == 'MIS'
    assert payload['symbolgroup'] == 'NIFTY'


def test_history_returns_data_on_success(mock_session):
    data_api = DataAPI('test-key', HOST, session=mock_session)
    candles = [{'timestamp': 1700000000, 'open': 1, 'high': 2, 'low': 1, 'close': 2, 'volume': 10}]
    mock_session.post.return_value = make_response(body={'status': 'success', 'data': candles})

    result = data_api.history(symbol='SBIN', exchange='NSE', interval='5m',
                              start_date='2024-01-01', end_date='2024-01-05')

    assert result == candles
    url, payload = posted(mock_session)
    assert url.endswith('/history/')
    assert payload['start_date'] == '2024-01-01'
    assert 'count' not in payload


def test_history_returns_error_result_unchanged(mock_session):
    data_api = DataAPI('test-key', HOST, session=mock_session)
    mock_session.post.side_effect = requests.exceptions.ConnectionError()

    result = data_api.history(symbol='SBIN', exchange='NSE', interval='D', count=10)

    assert result['error_type'] == 'network_error'


def test_merge_params_skips_none_and_normalises_keys():
    payload = merge_params({}, {'triggerPrice': 101.5, 'target': None, 'tag': 'x', 'flag': True})

    assert payload == {'trigger_price': '101.5', 'tag': 'x', 'flag': True}
