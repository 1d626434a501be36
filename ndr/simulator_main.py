"""
Simulator entry point. Runs the dispatch pipeline and, optionally, the HTTP
status API until the configured duration elapses or a signal arrives.
"""
import asyncio
import logging
import signal
import structlog
import uvicorn

from ndr.config import Config
from ndr.services import StatusService
from ndr.simulation import Simulation


def configure_logging(level):
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


log = structlog.get_logger()


async def run(config):
    simulation = Simulation(config)
    shutdown = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown.set)

    log.info("simulator_starting", duration=config.simulation_duration,
             http=config.http_port if config.status_api_enabled else None,
             seed=config.seed)

    server = None
    server_task = None
    if config.status_api_enabled:
        status = StatusService(config, simulation)
        server = uvicorn.Server(uvicorn.Config(
            status.app, host="0.0.0.0", port=config.http_port, log_level="warning"
        ))
        server_task = asyncio.create_task(server.serve())

    try:
        await simulation.run(duration=config.simulation_duration, shutdown=shutdown)
    finally:
        if server is not None:
            server.should_exit = True
            await server_task
        log.info("simulator_stopped", **simulation.final_statistics())


def main():
    config = Config()
    configure_logging(config.log_level)
    asyncio.run(run(config))


if __name__ == "__main__":
    main()
