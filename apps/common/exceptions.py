"""
Domain errors and the custom exception handler for consistent API responses
"""
from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class StoreError(APIException):
    """
    Base class for business-rule failures raised by the service layer.

    Services raise these before writing anything, so a caught StoreError
    always means the store is unchanged.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed'
    default_code = 'store_error'


class ValidationError(StoreError):
    """Malformed or empty input (empty item list, missing address fields)"""
    default_detail = 'Invalid input'
    default_code = 'validation_error'


class InsufficientBalance(StoreError):
    """Redemption below the minimum or above the available balance"""
    default_detail = 'Insufficient points balance'
    default_code = 'insufficient_balance'


class InvalidTransition(StoreError):
    """State machine guard violation"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Transition not allowed in the current state'
    default_code = 'invalid_transition'


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found'
    default_code = 'not_found'


class Unauthorized(StoreError):
    """Role or ownership check failure"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not allowed to perform this action'
    default_code = 'unauthorized'


class InvalidReferralCode(StoreError):
    default_detail = 'Invalid referral code'
    default_code = 'invalid_referral_code'


class AlreadyReferred(StoreError):
    default_detail = 'Referral code already applied'
    default_code = 'already_referred'


class PaymentVerificationFailed(StoreError):
    default_detail = 'Payment signature verification failed'
    default_code = 'payment_verification_failed'


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is None:
        return response

    if isinstance(exc, StoreError):
        # Business-rule failures are expected outcomes, not server faults
        logger.info(f"{type(exc).__name__}: {exc.detail}")
        response.data = {
            'code': response.status_code,
            'msg': str(exc.detail),
            'error': type(exc).__name__,
        }
        return response

    logger.error(f"API Exception: {exc}", exc_info=True)

    # Create custom error response format
    custom_response_data = {
        'code': response.status_code,
        'msg': 'An error occurred',
        'errors': response.data
    }

    # Handle specific error types
    if response.status_code == status.HTTP_400_BAD_REQUEST:
        custom_response_data['msg'] = 'Validation error'
    elif response.status_code == status.HTTP_401_UNAUTHORIZED:
        custom_response_data['msg'] = 'Authentication required'
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        custom_response_data['msg'] = 'Permission denied'
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        custom_response_data['msg'] = 'Resource not found'
    elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        custom_response_data['msg'] = 'Method not allowed'
    elif response.status_code >= 500:
        custom_response_data['msg'] = 'Internal server error'
        # Don't expose internal errors in production
        if not hasattr(context['request'], 'user') or not context['request'].user.is_staff:
            custom_response_data['errors'] = {'detail': 'Internal server error'}

    response.data = custom_response_data

    return response
