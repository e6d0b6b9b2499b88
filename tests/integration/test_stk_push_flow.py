"""
Integration Tests for the STK Push endpoint
"""

from unittest.mock import patch

import pytest
import requests


STK_SUCCESS_BODY = {
    'MerchantRequestID': '29115-34620561-1',
    'CheckoutRequestID': 'ws_CO_191220191020363925',
    'ResponseCode': '0',
    'ResponseDescription': 'Success. Request accepted for processing',
    'CustomerMessage': 'Success. Request accepted for processing',
}


@pytest.fixture
def valid_request():
    return {
        'amount': 1,
        'phoneNumber': '0712345678',
        'accountReference': 'ORD-12345',
        'transactionDesc': 'Order payment',
    }


class TestStkPushFlow:
    """End-to-end tests for POST /api/mpesa/stk-push"""

    def test_stk_push_success(self, client, provider, valid_request, mock_http_response):
        token_resp = mock_http_response({'access_token': 'tok_abc', 'expires_in': '3599'})

        with patch.object(provider._session, 'get', return_value=token_resp), \
                patch.object(provider._session, 'post', return_value=mock_http_response(STK_SUCCESS_BODY)) as mock_post:

            response = client.post('/api/mpesa/stk-push', json=valid_request)

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['message'] == 'STK Push initiated successfully'
        assert data['data'] == {
            'merchantRequestId': '29115-34620561-1',
            'checkoutRequestId': 'ws_CO_191220191020363925',
            'responseCode': '0',
            'responseDescription': 'Success. Request accepted for processing',
            'customerMessage': 'Success. Request accepted for processing',
        }

        # Normalised and sanitised values reach Daraja
        payload = mock_post.call_args.kwargs['json']
        assert payload['PhoneNumber'] == '254712345678'
        assert payload['AccountReference'] == 'ORD-12345'

    def test_provider_called_with_normalised_values(self, client, provider, valid_request):
        with patch.object(provider, 'initialize_payment', return_value=STK_SUCCESS_BODY) as mock_init:
            response = client.post('/api/mpesa/stk-push', json={
                **valid_request,
                'phoneNumber': '+254 712-345-678',
                'transactionDesc': "Tom's <order>",
            })

        assert response.status_code == 200
        mock_init.assert_called_once_with(
            amount=1,
            phone_number='254712345678',
            account_reference='ORD-12345',
            transaction_desc='Toms order',
        )

    @pytest.mark.parametrize('field, value, message', [
        ('amount', 0, 'Invalid amount. Must be a positive number not exceeding KES 150,000.'),
        ('amount', -10, 'Invalid amount. Must be a positive number not exceeding KES 150,000.'),
        ('amount', 150001, 'Invalid amount. Must be a positive number not exceeding KES 150,000.'),
        ('phoneNumber', '', 'Phone number is required.'),
        ('phoneNumber', '0812', 'Invalid phone number format. Must be a valid Kenyan mobile number.'),
        ('accountReference', 'A' * 21,
         'Invalid account reference. Must be a non-empty string (max 20 characters).'),
        ('transactionDesc', '',
         'Invalid transaction description. Must be a non-empty string (max 100 characters).'),
    ])
    def test_validation_errors(self, client, provider, valid_request, field, value, message):
        with patch.object(provider, 'initialize_payment') as mock_init:
            response = client.post('/api/mpesa/stk-push', json={**valid_request, field: value})

        assert response.status_code == 400
        data = response.get_json()
        assert data['success'] is False
        assert data['error'] == 'Validation error'
        assert data['message'] == message
        assert field in data['details']
        mock_init.assert_not_called()

    def test_first_failing_field_reported(self, client, valid_request):
        response = client.post('/api/mpesa/stk-push', json={
            **valid_request,
            'amount': 0,
            'phoneNumber': 'bad',
        })

        data = response.get_json()
        assert response.status_code == 400
        assert data['message'].startswith('Invalid amount')
        assert set(data['details']) == {'amount', 'phoneNumber'}

    @pytest.mark.parametrize('body', ['not json', '[1, 2]', 'null'])
    def test_non_object_body(self, client, body):
        response = client.post('/api/mpesa/stk-push', data=body, content_type='application/json')

        assert response.status_code == 400
        assert response.get_json() == {
            'success': False,
            'error': 'Bad request',
            'message': 'Request body must be a JSON object.',
        }

    def test_remote_error_returns_generic_500(self, client, provider, valid_request, mock_http_response):
        token_resp = mock_http_response({'access_token': 'tok_abc', 'expires_in': '3599'})
        err_resp = mock_http_response({'errorMessage': 'Invalid Access Token'}, status_code=401)

        with patch.object(provider._session, 'get', return_value=token_resp), \
                patch.object(provider._session, 'post', return_value=err_resp):

            response = client.post('/api/mpesa/stk-push', json=valid_request)

        assert response.status_code == 500
        assert response.get_json() == {
            'success': False,
            'error': 'Unable to process payment request. Please try again later.'
        }
        assert 'tok_abc' not in response.get_data(as_text=True)

    def test_non_object_daraja_body_returns_generic_500(self, client, provider, valid_request, mock_http_response):
        token_resp = mock_http_response({'access_token': 'tok_abc', 'expires_in': '3599'})

        with patch.object(provider._session, 'get', return_value=token_resp), \
                patch.object(provider._session, 'post', return_value=mock_http_response([STK_SUCCESS_BODY])):

            response = client.post('/api/mpesa/stk-push', json=valid_request)

        assert response.status_code == 500
        assert response.get_json() == {
            'success': False,
            'error': 'Unable to process payment request. Please try again later.'
        }

    def test_auth_failure_returns_generic_500(self, client, provider, valid_request):
        with patch.object(provider._session, 'get', side_effect=requests.ConnectionError('dns failure')):
            response = client.post('/api/mpesa/stk-push', json=valid_request)

        assert response.status_code == 500
        assert 'dns failure' not in response.get_data(as_text=True)
        assert 'test_consumer_secret' not in response.get_data(as_text=True)

    def test_token_shared_across_requests(self, client, provider, valid_request, mock_http_response):
        token_resp = mock_http_response({'access_token': 'tok_abc', 'expires_in': '3599'})

        with patch.object(provider._session, 'get', return_value=token_resp) as mock_get, \
                patch.object(provider._session, 'post', return_value=mock_http_response(STK_SUCCESS_BODY)):

            assert client.post('/api/mpesa/stk-push', json=valid_request).status_code == 200
            assert client.post('/api/mpesa/stk-push', json=valid_request).status_code == 200

        assert mock_get.call_count == 1

    def test_get_not_allowed(self, client):
        response = client.get('/api/mpesa/stk-push')
        assert response.status_code == 405
