"""
StockError → HTTP translation for the REST layer.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from depotman.exceptions import StockError

STATUS_BY_CODE = {
    'NOT_FOUND': status.HTTP_404_NOT_FOUND,
    'INVALID_STATE': status.HTTP_409_CONFLICT,
    'VALIDATION_ERROR': status.HTTP_400_BAD_REQUEST,
    'INSUFFICIENT_STOCK': status.HTTP_400_BAD_REQUEST,
    'STALE_READ': status.HTTP_409_CONFLICT,
    'TRANSACTION_FAILURE': status.HTTP_503_SERVICE_UNAVAILABLE,
}


def depot_exception_handler(exc, context):
    """Render StockError as {code, message, data}; defer everything else to DRF."""
    if isinstance(exc, StockError):
        return Response(
            exc.as_dict(),
            status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
        )
    return exception_handler(exc, context)
