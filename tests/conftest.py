"""
Pytest Configuration and Fixtures
"""
import json
from unittest.mock import Mock

import pytest
import requests

from stkpush import create_app
from stkpush.config import MpesaConfig


@pytest.fixture(scope='function')
def app():
    """Create application for testing"""
    app = create_app('testing')

    # Establish application context
    ctx = app.app_context()
    ctx.push()

    yield app

    ctx.pop()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def provider(app):
    """The MPesaProvider bound to the test app"""
    return app.extensions['mpesa']


@pytest.fixture
def mpesa_config():
    return MpesaConfig(
        consumer_key='test_consumer_key',
        consumer_secret='test_consumer_secret',
        shortcode='174379',
        passkey='test_passkey',
        callback_url='https://example.com/api/mpesa/callback',
        environment='sandbox',
    )


@pytest.fixture
def mock_http_response():
    """Factory for mock requests.Response objects whose .json() returns json_data"""
    def _make(json_data, status_code=200):
        resp = Mock()
        resp.ok = 200 <= status_code < 400
        resp.status_code = status_code
        resp.json.return_value = json_data
        resp.text = json.dumps(json_data)
        if not resp.ok:
            resp.raise_for_status.side_effect = requests.HTTPError(f'{status_code} Error')
        return resp
    return _make


@pytest.fixture
def daraja_token_resp(mock_http_response):
    """Factory for a valid Daraja OAuth token response (expires in ~1 hour)"""
    def _make(token='daraja_tok_abc'):
        return mock_http_response({'access_token': token, 'expires_in': '3599'})
    return _make
