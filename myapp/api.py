import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.http import HttpRequest
from django.utils import timezone
from ninja import NinjaAPI, Router
from ninja.errors import AuthenticationError, HttpError, ValidationError

from myapp.admin_api import router as admin_router
from myapp.exceptions import ApiError
from posts.api import router as posts_router
from posts.comments_api import router as comments_router
from posts.likes_api import router as likes_router
from users.api import router as users_general_router
from users.api_auth import router as users_auth_router

logger = logging.getLogger(__name__)

REQUEST_PARTS = ("body", "query", "path", "payload")

api = NinjaAPI(docs_url="docs/", title="Mini Blog API", version="1.0.0", urls_namespace="api_v1")

"""
Global Exception Handlers (Error Handlers)
"""


@api.exception_handler(ApiError)
def api_error_handler(request: HttpRequest, exc: ApiError):
    return api.create_response(request, exc.to_dict(), status=exc.status_code)


@api.exception_handler(AuthenticationError)
def custom_authentication_error_handler(request, exc):
    return api.create_response(
        request,
        {
            "error": "Authentication required",
            "message": "You need to be authenticated to perform this action.",
        },
        status=401,
    )


@api.exception_handler(HttpError)
def custom_http_error_handler(request, exc):
    return api.create_response(
        request,
        {"error": "Request error", "message": exc.message},
        status=exc.status_code,
    )


@api.exception_handler(ValidationError)
def validation_error_handler(request: HttpRequest, exc: ValidationError):
    details = []
    for err in exc.errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in REQUEST_PARTS]
        field = ".".join(loc)
        details.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return api.create_response(
        request,
        {"error": "Validation error", "message": "; ".join(details) or "Invalid request"},
        status=400,
    )


@api.exception_handler(ObjectDoesNotExist)
def object_not_found_handler(request, exc):
    message = exc.args[0] if exc.args else "Resource not found"
    return api.create_response(request, {"error": "Not found", "message": message}, status=404)


@api.exception_handler(Exception)
def generic_error_handler(request: HttpRequest, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.path}")
    if settings.DEBUG:
        error_message = str(exc)
    else:
        error_message = "Internal Server Error"

    return api.create_response(
        request,
        {"error": "Something went wrong!", "message": error_message},
        status=500,
    )


@api.get("/health", auth=None, tags=["Health"])
def health(request: HttpRequest):
    return {"status": "OK", "timestamp": timezone.now().isoformat()}


"""
Registering the routers
"""


# Create a parent router to aggregate all post-related endpoints
posts_parent_router = Router()

posts_parent_router.add_router("", posts_router)
posts_parent_router.add_router("", comments_router)
posts_parent_router.add_router("", likes_router)

api.add_router("/auth", users_auth_router)
api.add_router("/users", users_general_router)
api.add_router("/posts", posts_parent_router)
api.add_router("/admin", admin_router)
