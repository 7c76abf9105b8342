"""Request authentication and capability checks as FastAPI dependencies."""

from fastapi import Depends, Request

from solestore.identity.access import Capability, Principal, principal_for


def token_from(request: Request):
    """The access token from the session cookie, else from a Bearer header."""
    token = request.cookies.get(request.app.state.settings.cookie_name)
    if not token:
        header = request.headers.get("Authorization", "")
        if header.startswith("Bearer "):
            token = header[len("Bearer ") :]
    return token


async def authenticated(request: Request) -> Principal:
    claims = request.app.state.tokens.decode(token_from(request))
    return principal_for(claims)


def requires(capability: Capability):
    """Dependency factory: the caller must hold `capability`."""

    async def dependency(principal: Principal = Depends(authenticated)) -> Principal:
        principal.require(capability)
        return principal

    return dependency
