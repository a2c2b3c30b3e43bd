from functools import wraps

from django.http import JsonResponse

from ..exceptions import Conflict, InvalidPayload


def respond(payload, status=200):
    # safe=False so list payloads can be returned too
    return JsonResponse(payload, status=status, safe=False)


def error(message, status):
    return respond({"error": message}, status=status)


def not_found(what):
    return error(f"{what} not found", 404)


def deleted(what):
    return respond({"message": f"{what} deleted successfully"})


def json_errors(view_func):
    """Map request-validation and conflict exceptions to 400 / 409."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except InvalidPayload as e:
            return error(e.messages[0], 400)
        except Conflict as e:
            return error(str(e), 409)

    return _wrapped
