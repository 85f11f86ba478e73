"""Email job routes."""
from typing import Any, Dict

from litestar import Controller, Response, get, post

from pyrecurmail.client import ApiResult, Client


def to_response(result: ApiResult) -> Response:
    return Response(content=result.body, status_code=result.status_code)


class EmailJobsController(Controller):
    path = "/api"

    @post("/start-email")
    async def start_email(self, client: Client, data: Dict[str, Any]) -> Response:
        return to_response(await client.start_job(data))

    @post("/stop-email")
    async def stop_email(self, client: Client, data: Dict[str, Any]) -> Response:
        return to_response(await client.stop_job(data))

    @get("/active-jobs")
    async def active_jobs(self, client: Client) -> Response:
        return to_response(client.list_active_jobs())
