# main.py
import asyncio
import logging
from datetime import timedelta

from pyrecurmail import Client, configure
from pyrecurmail.common.job import Payload
from pyrecurmail.dispatch import LoggingDispatcher
from pyrecurmail.server.scheduler import JobScheduler
from pyrecurmail.storage import MemoryJobRegistry


async def demo():
    # 1. Build a scheduler that only logs what it would send
    dispatcher = LoggingDispatcher()
    scheduler = JobScheduler(MemoryJobRegistry(), dispatcher)
    configure(scheduler)
    client = Client(scheduler)

    # 2. Start a job repeating every two seconds
    result = await scheduler.start(
        "someone@example.com",
        Payload(subject="Hello", content="<p>Hello again</p>"),
        timedelta(seconds=2),
    )
    print(f"Job {result.outcome.value}; first attempt {result.first_attempt.name}")

    # 3. Let a couple of scheduled attempts run
    await asyncio.sleep(5)
    print(f"\nActive jobs: {client.list_active_jobs().body}")

    # 4. Stop it
    outcome = await scheduler.stop("someone@example.com")
    print(f"\nStop: {outcome.value}; {dispatcher.sent_count} emails 'sent'")
    await scheduler.shutdown()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(demo())
    print("\nDemonstration finished.")
