"""
Post-verification callback URL construction.

The auth provider consumes the verified code at its callback endpoint; the
template is configured in AuthServiceSettings and treated as opaque apart
from its three placeholders: ``{token}``, ``{email}`` and ``{callback_url}``.
"""

from __future__ import annotations

from urllib.parse import quote

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_callback_url(
    app_url: str,
    path_template: str,
    *,
    code: str,
    email: str,
    post_login_path: str = "/dashboard",
) -> str:
    """Build the absolute callback URL that signs the user in.

    Args:
        app_url: Origin of the hosting application, e.g. ``https://vulniq.org``.
        path_template: Path + query template with ``{token}``, ``{email}`` and
            ``{callback_url}`` placeholders.
        code: The verified one-time code.
        email: The address the code was issued to.
        post_login_path: Where the provider should land the user afterwards.

    Returns:
        ``app_url`` joined with the rendered template; every placeholder value
        is URL-encoded.
    """
    origin = app_url.rstrip("/")
    destination = origin + post_login_path
    path = path_template.format(
        token=encode_component(code),
        email=encode_component(email),
        callback_url=encode_component(destination),
    )
    if not path.startswith("/"):
        path = "/" + path
    return origin + path
