"""FastAPI dependencies: the service container and the calling principal."""

from fastapi import Depends, Header, Request

from pickup.auth.port import Principal
from pickup.auth.resolvers import resolve_principal
from pickup.exceptions import AuthenticationError
from pickup.services import Services


async def get_services(request: Request) -> Services:
    return request.app.state.services


async def current_consumer(request: Request, services: Services = Depends(get_services)) -> Principal | None:
    return resolve_principal(request, services.consumer_resolvers)


async def current_vendor(request: Request, services: Services = Depends(get_services)) -> Principal | None:
    return resolve_principal(request, services.vendor_resolvers)


async def require_cron_secret(
    authorization: str = Header(default=""),
    services: Services = Depends(get_services),
) -> None:
    """Checked only when CRON_SECRET is configured."""
    secret = services.settings.cron_secret
    if secret and authorization != f"Bearer {secret}":
        raise AuthenticationError()
