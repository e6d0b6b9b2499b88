"""
M-Pesa API Endpoints
STK Push initiation and Daraja callback acknowledgement
"""

from flask import Blueprint, request, jsonify
from marshmallow import ValidationError as SchemaValidationError

from stkpush.errors import BadRequest, ValidationError
from stkpush.providers import get_provider, PaymentProviderError
from stkpush.schemas import StkPushRequestSchema
from stkpush.utils.logger import get_logger

mpesa_bp = Blueprint('mpesa', __name__)
logger = get_logger(__name__)

stk_push_schema = StkPushRequestSchema()


@mpesa_bp.route('/stk-push', methods=['POST'])
def stk_push():
    """
    Initiate an STK Push

    Body:
        {
            "amount": 100,
            "phoneNumber": "0712345678",
            "accountReference": "ORD-12345",
            "transactionDesc": "Order payment"
        }
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequest('Request body must be a JSON object.')

    try:
        data = stk_push_schema.load(payload)
    except SchemaValidationError as e:
        raise ValidationError(StkPushRequestSchema.first_error(e.messages), details=e.messages)

    try:
        result = get_provider().initialize_payment(
            amount=data['amount'],
            phone_number=data['phone_number'],
            account_reference=data['account_reference'],
            transaction_desc=data['transaction_desc']
        )
    except PaymentProviderError as e:
        # Details were logged by the provider; never echo them to the caller
        logger.error(f'STK Push endpoint error: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'Unable to process payment request. Please try again later.'
        }), 500

    return jsonify({
        'success': True,
        'message': 'STK Push initiated successfully',
        'data': {
            'merchantRequestId': result.get('MerchantRequestID'),
            'checkoutRequestId': result.get('CheckoutRequestID'),
            'responseCode': result.get('ResponseCode'),
            'responseDescription': result.get('ResponseDescription'),
            'customerMessage': result.get('CustomerMessage')
        }
    }), 200


@mpesa_bp.route('/callback', methods=['POST'])
def callback():
    """
    Receive the STK Push result from Safaricom

    Always answers 200 so Daraja does not keep retrying.
    """
    try:
        payload = request.get_json(silent=True)
        result = get_provider().handle_webhook(payload)

        return jsonify({
            'success': bool(result.get('success')),
            'message': result.get('message')
        }), 200

    except Exception as e:
        logger.error(f'Callback endpoint error: {str(e)}')
        return jsonify({
            'success': False,
            'message': 'Callback processing encountered an error'
        }), 200
