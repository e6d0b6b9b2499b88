"""
Integration Tests for the Daraja callback endpoint
"""

import json
from unittest.mock import patch

import pytest


STK_CALLBACK = {
    'Body': {
        'stkCallback': {
            'MerchantRequestID': '29115-34620561-1',
            'CheckoutRequestID': 'ws_CO_191220191020363925',
            'ResultCode': 0,
            'ResultDesc': 'The service request is processed successfully.',
            'CallbackMetadata': {
                'Item': [
                    {'Name': 'Amount', 'Value': 1.00},
                    {'Name': 'MpesaReceiptNumber', 'Value': 'NLJ7RT61SV'},
                    {'Name': 'TransactionDate', 'Value': 20191219102115},
                    {'Name': 'PhoneNumber', 'Value': 254708374149}
                ]
            }
        }
    }
}


class TestCallback:
    """Tests for POST /api/mpesa/callback"""

    def test_callback_acknowledged(self, client):
        response = client.post('/api/mpesa/callback', json=STK_CALLBACK)

        assert response.status_code == 200
        assert response.get_json() == {
            'success': True,
            'message': 'Callback processed successfully'
        }

    def test_failed_payment_callback_still_acknowledged(self, client):
        cancelled = {
            'Body': {
                'stkCallback': {
                    'MerchantRequestID': '29115-34620561-1',
                    'CheckoutRequestID': 'ws_CO_191220191020363925',
                    'ResultCode': 1032,
                    'ResultDesc': 'Request cancelled by user'
                }
            }
        }
        response = client.post('/api/mpesa/callback', json=cancelled)

        assert response.status_code == 200
        assert response.get_json()['success'] is True

    @pytest.mark.parametrize('body', ['null', '"text"', '42', '[1, 2, 3]', 'not json at all', ''])
    def test_malformed_payload_gets_200_with_failure_flag(self, client, body):
        response = client.post('/api/mpesa/callback', data=body, content_type='application/json')

        assert response.status_code == 200
        assert response.get_json() == {
            'success': False,
            'message': 'Invalid callback data structure'
        }

    def test_missing_content_type(self, client):
        response = client.post('/api/mpesa/callback', data=json.dumps(STK_CALLBACK))

        assert response.status_code == 200
        assert response.get_json()['success'] is False

    def test_unexpected_error_still_returns_200(self, client, provider):
        with patch.object(provider, 'handle_webhook', side_effect=RuntimeError('boom')):
            response = client.post('/api/mpesa/callback', json=STK_CALLBACK)

        assert response.status_code == 200
        assert response.get_json() == {
            'success': False,
            'message': 'Callback processing encountered an error'
        }
