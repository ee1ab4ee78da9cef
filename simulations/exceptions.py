from rest_framework.views import exception_handler

from .utils import first_error


def api_exception_handler(exc, context):
    """
    Reshape DRF error payloads into {"message": ..., "field": ...}.

    Exceptions DRF does not handle are left to Django so they surface as 500.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        response.data = {'message': str(data['detail'])}
    elif data:
        field, message = first_error(data)
        response.data = {'message': message}
        if field:
            response.data['field'] = field
    return response
