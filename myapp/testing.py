"""
Helpers shared by the API test suites.

``TestClient(api)`` resolves the full URL tree a second time, after Django's
own URL checks have registered the ``api_v1`` namespace, so the ninja
registry check is switched off for tests.
"""

import os

os.environ.setdefault("NINJA_SKIP_REGISTRY", "yes")

from faker import Faker  # noqa: E402
from ninja.testing import TestClient  # noqa: E402

from myapp.api import api  # noqa: E402
from posts.models import Post  # noqa: E402
from users.models import User  # noqa: E402
from users.tokens import TokenClaims, issue_token  # noqa: E402

fake = Faker()

DEFAULT_PASSWORD = "Passw0rd1"


def api_client() -> TestClient:
    return TestClient(api)


def make_user(username=None, password=DEFAULT_PASSWORD, role=User.USER, **extra) -> User:
    username = username or fake.unique.user_name().replace(".", "_")[:40]
    email = extra.pop("email", None) or f"{username}@example.com"
    return User.objects.create_user(
        username=username, email=email, password=password, role=role, **extra
    )


def make_post(author: User, status=Post.DRAFT, **fields) -> Post:
    post = Post(
        author=author,
        title=fields.pop("title", fake.sentence(nb_words=5)),
        content=fields.pop("content", fake.paragraph()),
        **fields,
    )
    post.excerpt = post.excerpt or Post.derive_excerpt(post.content)
    post.set_status(status)
    post.save()
    return post


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(id=user.id, username=user.username, email=user.email, role=user.role)
