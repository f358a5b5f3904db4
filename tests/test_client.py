"""Tests for the API client and ResourceQuery (mocked requests session)."""
import pytest
import requests
from unittest.mock import MagicMock

from dealerdesk.client import ApiError, DealerDeskClient, ResourceQuery


def _response(status=200, body=None, content=b'', reason='OK'):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    response.content = content
    if body is None:
        response.json.side_effect = ValueError('No JSON')
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def api(session):
    return DealerDeskClient('https://desk.example.com/', token='tok-123', session=session)


class TestDealerDeskClient:

    def test_bearer_header(self, api, session):
        assert session.headers['Authorization'] == 'Bearer tok-123'
        api.set_token('tok-456')
        assert session.headers['Authorization'] == 'Bearer tok-456'

    def test_unwraps_data(self, api, session):
        session.request.return_value = _response(body={'success': True, 'data': [{'id': 'c1'}], 'count': 1})

        assert api.list_customers(search='smith', status='') == [{'id': 'c1'}]

        method, url = session.request.call_args[0]
        assert (method, url) == ('GET', 'https://desk.example.com/api/customers')
        assert session.request.call_args.kwargs['params'] == {'search': 'smith'}
        assert session.request.call_args.kwargs['timeout'] == 30

    def test_error_body_becomes_api_error(self, api, session):
        session.request.return_value = _response(
            409, {'success': False, 'error': 'Customer with this email already exists'}, reason='CONFLICT')

        with pytest.raises(ApiError) as exc:
            api.create_customer({'firstName': 'Ann', 'lastName': 'Smith'})

        assert exc.value.status_code == 409
        assert exc.value.message == 'Customer with this email already exists'

    def test_non_json_error_uses_reason(self, api, session):
        session.request.return_value = _response(502, reason='Bad Gateway')
        with pytest.raises(ApiError, match='Bad Gateway'):
            api.current_dealer()

    def test_success_false_on_2xx(self, api, session):
        session.request.return_value = _response(body={'success': False, 'error': 'nope'})
        with pytest.raises(ApiError, match='nope'):
            api.list_test_drives()

    def test_network_failure(self, api, session):
        session.request.side_effect = requests.ConnectionError('refused')
        with pytest.raises(ApiError) as exc:
            api.current_dealer()
        assert exc.value.status_code == 0

    def test_save_vehicle_costs_returns_envelope(self, api, session):
        session.request.return_value = _response(body={'success': True, 'data': {'id': 1}, 'merged': True})

        envelope = api.save_vehicle_costs('STK-1', fixed_costs={'mot': '50'})

        assert envelope['merged'] is True
        sent = session.request.call_args.kwargs['json']
        assert sent == {'stockId': 'STK-1', 'fixedCosts': {'mot': '50'}, 'groupedCosts': {},
                        'replaceMode': False}

    def test_export_sale_pdf_returns_bytes(self, api, session):
        session.request.return_value = _response(content=b'%PDF-1.4 ...')

        assert api.export_sale_pdf('STK-1', registration='AB12CDE') == b'%PDF-1.4 ...'

        sent = session.request.call_args.kwargs['json']
        assert sent['stockId'] == 'STK-1'
        assert sent['completionData'] == {}


class TestResourceQuery:

    def test_idle_then_success(self):
        query = ResourceQuery(lambda **p: [p['search']], search='smith')
        assert query.status == ResourceQuery.IDLE
        assert query.fetch() == ['smith']
        assert query.status == ResourceQuery.SUCCESS
        assert not query.is_loading

    def test_error_keeps_last_data(self):
        results = [['first'], ApiError(500, 'An internal error occurred')]

        def fetcher(**params):
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        query = ResourceQuery(fetcher)
        query.fetch()
        assert query.refetch() == ['first']
        assert query.status == ResourceQuery.ERROR
        assert query.error == 'An internal error occurred'

    def test_set_params_refetches(self):
        fetcher = MagicMock(return_value=[])
        query = ResourceQuery(fetcher, search='', status='all')
        query.set_params(search='golf')
        fetcher.assert_called_once_with(search='golf', status='all')

    def test_superseded_result_dropped(self):
        calls = []

        def fetcher(search):
            calls.append(search)
            if search == 'old':
                # a newer request starts before this one returns
                query.set_params(search='new')
            return [search]

        query = ResourceQuery(fetcher, search='old')
        query.fetch()

        assert calls == ['old', 'new']
        assert query.data == ['new']
        assert query.status == ResourceQuery.SUCCESS

    def test_other_exceptions_settle_then_propagate(self):
        fetcher = MagicMock(side_effect=[['ok'], requests.ConnectionError('connection reset')])
        query = ResourceQuery(fetcher)
        query.fetch()

        with pytest.raises(requests.ConnectionError):
            query.refetch()

        assert query.status == ResourceQuery.ERROR
        assert not query.is_loading
        assert query.error == 'connection reset'
        assert query.data == ['ok']

    def test_error_without_message_uses_type_name(self):
        query = ResourceQuery(MagicMock(side_effect=KeyError()))
        with pytest.raises(KeyError):
            query.fetch()
        assert query.status == ResourceQuery.ERROR
        assert query.error == 'KeyError'
