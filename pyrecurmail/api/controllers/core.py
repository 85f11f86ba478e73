"""Service health route."""
from litestar import Controller, Response, get

from pyrecurmail.client import Client
from .jobs import to_response


class CoreController(Controller):
    path = "/api"

    @get("/health")
    async def health(self, client: Client) -> Response:
        return to_response(client.health_status())
