import logging

import orjson
from django.db import DatabaseError
from django.http import JsonResponse
from ninja.errors import ValidationError as NinjaValidationError
from ninja.renderers import BaseRenderer
from ninja_extra import NinjaExtraAPI
from ninja_jwt.controller import NinjaJWTDefaultController

from accounts.users_api import users_router
from chat.api import router as chat_router
from core.errors import ServiceError
from memberships.api import router as memberships_router
from organizations.api import router as organizations_router

logger = logging.getLogger(__name__)


class ORJSONRenderer(BaseRenderer):
    media_type = "application/json"

    def render(self, request, data, *, response_status):
        return orjson.dumps(data)


api = NinjaExtraAPI(
    renderer=ORJSONRenderer(),
    urls_namespace="api",
    version="v1",
    title="FitTrack API",
    description="Gym memberships, join requests and organization chat",
)

# /token/pair, /token/refresh, /token/verify
api.register_controllers(NinjaJWTDefaultController)


@api.get("/health/")
def health_check(request):
    return {"status": "ok"}


api.add_router("/auth/", users_router, tags=["auth"])
api.add_router("/orgs/", organizations_router)
api.add_router("/", memberships_router)
api.add_router("/chat/", chat_router)


def service_error(request, exc):
    return JsonResponse(exc.as_dict(), status=exc.status_code)


def storage_error(request, exc):
    logger.exception("Unhandled database error on %s", request.path)
    return JsonResponse({"detail": "Storage failure", "code": "server_error"}, status=500)


def custom_validation_error(request, exc):
    # Return 400 instead of 422 for validation errors
    return JsonResponse({"detail": str(exc), "code": "validation_error"}, status=400)


api.add_exception_handler(ServiceError, service_error)
api.add_exception_handler(DatabaseError, storage_error)
api.add_exception_handler(NinjaValidationError, custom_validation_error)
