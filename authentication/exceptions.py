# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.db import IntegrityError
import logging
from django.conf import settings

from catalog.exceptions import PartialWriteRejected, StoreUnavailable

logger = logging.getLogger(__name__)


def error_response(message, details, status_code):
    return Response({
        'error': True,
        'message': message,
        'details': details,
        'status_code': status_code
    }, status=status_code)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the menu API
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    # Add custom handling for specific exceptions
    if response is not None:
        custom_response_data = {
            'error': True,
            'message': 'An error occurred',
            'details': response.data,
            'status_code': response.status_code
        }

        # Handle specific error types
        if response.status_code == 400:
            custom_response_data['message'] = 'Validation error'
        elif response.status_code == 401:
            custom_response_data['message'] = 'Authentication required'
        elif response.status_code == 403:
            custom_response_data['message'] = 'Permission denied'
        elif response.status_code == 404:
            custom_response_data['message'] = 'Resource not found'
        elif response.status_code == 500:
            custom_response_data['message'] = 'Internal server error'

        response.data = custom_response_data

    # The menu store could not be read
    elif isinstance(exc, StoreUnavailable):
        logger.error(f"Store Unavailable: {exc}")
        response = error_response(
            'Menu store unavailable',
            {'error': str(exc)} if settings.DEBUG else {},
            status.HTTP_503_SERVICE_UNAVAILABLE
        )

    # A batch order write was rolled back
    elif isinstance(exc, PartialWriteRejected):
        logger.warning(f"Reorder Rejected: {exc}")
        response = error_response(
            'Reorder rejected',
            {'error': str(exc)},
            status.HTTP_409_CONFLICT
        )

    # Handle Django ValidationError
    elif isinstance(exc, ValidationError):
        logger.error(f"Validation Error: {exc}")
        response = error_response(
            'Validation error',
            {'non_field_errors': exc.messages},
            status.HTTP_400_BAD_REQUEST
        )

    # Handle Django IntegrityError
    elif isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        response = error_response(
            'Database integrity error',
            {'error': 'This operation violates database constraints'},
            status.HTTP_400_BAD_REQUEST
        )

    # Handle unexpected errors
    else:
        logger.exception(f"Unexpected Error: {exc}")
        response = error_response(
            'An unexpected error occurred',
            {'error': str(exc)} if settings.DEBUG else {},
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return response
