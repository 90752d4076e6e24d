"""
REST API for Depotman (Django REST Framework).

Mount in the project urls:
    path('api/', include('depotman.api.urls'))

And install the exception handler:
    REST_FRAMEWORK = {
        'EXCEPTION_HANDLER': 'depotman.api.exceptions.depot_exception_handler',
    }
"""
