from fastapi import Header, Request, Response

from analytics import generate_session_id

SESSION_HEADER = "X-Session-Id"


def resolve_session_id(
    response: Response,
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> str:
    """Visitor session from the request header, or a fresh one echoed back to the client."""
    session_id = (x_session_id or "").strip() or generate_session_id()
    response.headers[SESSION_HEADER] = session_id
    return session_id


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
