"""HTTP client for the DealerDesk API.

    client = DealerDeskClient('https://desk.example.com', token=session_token)
    customers = client.list_customers(search='smith', status='active')
    pdf_bytes = client.export_sale_pdf('STK-1', registration='AB12CDE')
"""
import logging

import requests

logger = logging.getLogger('dealerdesk.client')


class ApiError(Exception):
    """Non-2xx response or a `success: false` envelope."""

    def __init__(self, status_code, message):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message


class DealerDeskClient:

    def __init__(self, base_url, token=None, timeout=30, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token):
        self.session.headers['Authorization'] = f'Bearer {token}'

    def _request(self, method, path, **kwargs):
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f'{method} {path} failed: {e}')
            raise ApiError(0, str(e)) from e
        if not response.ok:
            raise ApiError(response.status_code, self._error_message(response))
        return response

    @staticmethod
    def _error_message(response):
        try:
            body = response.json()
        except ValueError:
            return response.reason or 'Request failed'
        if isinstance(body, dict) and body.get('error'):
            return body['error']
        return response.reason or 'Request failed'

    def _envelope(self, method, path, **kwargs):
        response = self._request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, 'Response is not JSON')
        if not isinstance(body, dict) or not body.get('success'):
            message = body.get('error') if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or 'Request failed')
        return body

    def _data(self, method, path, **kwargs):
        return self._envelope(method, path, **kwargs).get('data')

    @staticmethod
    def _params(**params):
        return {k: v for k, v in params.items() if v is not None and v != ''}

    # ── Identity ──

    def current_dealer(self):
        return self._data('GET', '/api/auth/current-dealer')

    # ── Lists ──

    def list_customers(self, search=None, status=None, limit=None, offset=None):
        return self._data('GET', '/api/customers', params=self._params(
            search=search, status=status, limit=limit, offset=offset))

    def list_test_drives(self, search=None, status=None, limit=None, offset=None):
        return self._data('GET', '/api/test-drives', params=self._params(
            search=search, status=status, limit=limit, offset=offset))

    def list_vehicle_costs(self, stock_id=None):
        return self._data('GET', '/api/stock-actions/vehicle-costs',
                          params=self._params(stockId=stock_id))

    def list_return_costs(self, stock_id=None):
        return self._data('GET', '/api/stock-actions/return-costs',
                          params=self._params(stockId=stock_id))

    # ── Writes ──

    def create_customer(self, fields):
        return self._data('POST', '/api/customers', json=fields)

    def create_test_drive(self, fields):
        return self._data('POST', '/api/test-drives', json=fields)

    def save_vehicle_costs(self, stock_id, fixed_costs=None, grouped_costs=None,
                           replace_mode=False, **extra):
        """Returns the whole envelope; `merged` says whether an existing sheet was updated."""
        body = dict(extra, stockId=stock_id, fixedCosts=fixed_costs or {},
                    groupedCosts=grouped_costs or {}, replaceMode=replace_mode)
        return self._envelope('POST', '/api/stock-actions/vehicle-costs', json=body)

    def save_return_costs(self, stock_id, vatable_costs=None, non_vatable_costs=None, **extra):
        body = dict(extra, stockId=stock_id, vatableCosts=vatable_costs or [],
                    nonVatableCosts=non_vatable_costs or [])
        return self._data('POST', '/api/stock-actions/return-costs', json=body)

    # ── Documents ──

    def export_sale_pdf(self, stock_id, registration=None, sale_date=None,
                        customer_name=None, completion_data=None):
        """Return the sale completion PDF as bytes."""
        body = {
            'stockId': stock_id,
            'registration': registration,
            'saleDate': sale_date,
            'customerName': customer_name,
            'completionData': completion_data or {},
        }
        response = self._request('POST', '/api/stock-actions/sale-details/export-pdf', json=body)
        return response.content
