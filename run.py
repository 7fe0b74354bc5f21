"""Entry point that starts the shop services.

Each service is an independent ASGI application listening on its own
port.  In production every service runs in its own process or
container; for local development this script starts several of them
concurrently in one process.

Configuration (ports, database files, peer URLs, SECRET_KEY and
SERVICE_TOKENS) is read from environment variables, see
``shop_services/core/config.py``.

Usage:
    python run.py                  # all four services
    python run.py users orders     # a subset
"""
import argparse
import asyncio
import logging

from uvicorn import Config, Server

from shop_services.core.config import SERVICES, settings
from shop_services.core.logging_config import setup_logging
from shop_services.main import create_app


logger = logging.getLogger("shop_services.run")


async def run_service(service: str) -> None:
    """Serve one service with Uvicorn on its configured port."""
    port = settings.port(service)
    config = Config(
        app=create_app(service),
        host=settings.service_host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logger.info("Starting %s service on %s:%s", service, settings.service_host, port)
    await server.serve()


async def main(services: list[str]) -> None:
    """Run the selected services concurrently until one of them fails."""
    tasks = [asyncio.create_task(run_service(service), name=service) for service in services]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    for task in done:
        if exception := task.exception():
            logger.error("%s service stopped", task.get_name(), exc_info=exception)
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Run shop services.")
    ap.add_argument(
        "services",
        nargs="*",
        help=f"Services to start, any of: {', '.join(SERVICES)} (default: all).",
    )
    args = ap.parse_args(argv)
    unknown = [s for s in args.services if s not in SERVICES]
    if unknown:
        ap.error(f"unknown service(s): {', '.join(unknown)}")
    args.services = args.services or list(SERVICES)
    return args


if __name__ == "__main__":
    args = parse_args()
    setup_logging(settings.log_level, settings.log_file or None)
    if not settings.accepted_service_tokens():
        logger.warning("SERVICE_TOKENS is empty; calls between services will be rejected")
    try:
        asyncio.run(main(args.services))
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down")
