import logging
from functools import wraps

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .exceptions import InvalidToken
from .tokens import extract_bearer_token, verify_token

logger = logging.getLogger(__name__)


class TokenAuthenticationMiddleware(MiddlewareMixin):
    # Run on every request and attach the caller's tenant/user
    # (from the bearer token) to the request
    def process_request(self, request):
        request.auth_claims = None
        request.tenant_id = None
        request.user_id = None

        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            return None  # anonymous; protected views answer 401

        try:
            claims = verify_token(token)
        except InvalidToken as exc:
            logger.info("rejected bearer token: %s", exc)
            return None

        request.auth_claims = claims
        request.tenant_id = claims["tenant_id"]
        request.user_id = claims["user_id"]
        return None


def token_required(view_func):
    """Answer 401 unless the middleware attached verified claims."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if getattr(request, "auth_claims", None) is None:
            return JsonResponse({"error": "Unauthorized"}, status=401)
        return view_func(request, *args, **kwargs)

    return _wrapped
