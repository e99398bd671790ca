#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

A single LogEmitter is built here and shared by the shortener service, the
request logging middleware and the /api/logs endpoint. Log deliveries run
in the background; on shutdown the server waits for in-flight deliveries.

Usage:
    python app.py

Environment variables:
    LOG_API_URL - Remote logging endpoint
    LOG_API_TOKEN - Bearer token for the logging endpoint (optional)
    LOG_API_TIMEOUT - Timeout in seconds for one delivery attempt
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import asyncio
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from log_middleware import LogEmitter, LoggingTraceSink, setup_logging
from shortener import ShortCodeGenerator, ShortenerService
from web_app import create_app


def build_emitter(config, logger) -> LogEmitter:
    """Create the shared log emitter from configuration."""
    return LogEmitter(
        config.log_api_url,
        trace=LoggingTraceSink(logger.getChild("log_middleware")),
        timeout=config.log_api_timeout,
        headers=config.log_api_headers(),
        default_stack=config.log_default_stack,
        max_workers=config.log_workers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger
    emitter = app.state.emitter

    logger.info("Starting URL shortener service...")
    emitter.emit(app.state.log_stack, "INFO", "app", "URL shortener service started.")

    yield

    logger.info("Shutting down URL shortener service...")
    emitter.emit(app.state.log_stack, "INFO", "app", "URL shortener service stopping.")

    await emitter.drain()
    await asyncio.to_thread(emitter.close)

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Logging endpoint: {config.log_api_url}")

    emitter = build_emitter(config, logger)

    service = ShortenerService(
        emitter=emitter,
        short_code_generator=ShortCodeGenerator(length=config.short_code_length),
        logger=logger,
        base_url=config.base_url,
        stack=config.log_stack,
        max_urls_per_request=config.max_urls_per_request,
        default_validity_minutes=config.default_validity_minutes,
    )

    app = create_app(
        service_instance=service,
        emitter=emitter,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
