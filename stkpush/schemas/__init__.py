"""
Schemas Package
Marshmallow schemas for request validation
"""

from stkpush.schemas.stk_push_schema import StkPushRequestSchema

__all__ = [
    'StkPushRequestSchema',
]
