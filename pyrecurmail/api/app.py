"""Litestar application factory for the PyRecurMail HTTP API."""
from litestar import Litestar
from litestar.config.cors import CORSConfig
from litestar.datastructures import State
from litestar.di import Provide

from pyrecurmail.client import Client

from .controllers.core import CoreController
from .controllers.jobs import EmailJobsController


async def get_client(state: State) -> Client:
    return state.client


async def shutdown_scheduler(app: Litestar) -> None:
    await app.state.client.scheduler.shutdown()


def create_app(client: Client, debug: bool = False) -> Litestar:
    """Create the Litestar application serving the email scheduling API.

    Args:
        client: A PyRecurMail client wrapping the scheduler to expose.
        debug: Enables Litestar debug mode.

    Returns:
        A Litestar application. Shutting it down cancels every pending job.
    """
    return Litestar(
        route_handlers=[CoreController, EmailJobsController],
        state=State({"client": client}),
        dependencies={"client": Provide(get_client)},
        cors_config=CORSConfig(allow_origins=["*"]),
        on_shutdown=[shutdown_scheduler],
        debug=debug,
    )
