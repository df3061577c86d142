# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

#!/usr/bin/env python3
"""
Main entry point for the FinOps Org Insights MCP Server.

This script loads environment variables, initializes all services,
and starts the FastAPI server on the configured port (default: 8080).

Usage:
    python run_server.py

Or with uvicorn directly:
    uvicorn insights_server.main:app --host 0.0.0.0 --port 8080
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

import uvicorn

from insights_server.config import Settings, settings


def configure_logging(log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Set uvicorn loggers to the same level
    logging.getLogger("uvicorn").setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(numeric_level)
    logging.getLogger("uvicorn.error").setLevel(numeric_level)


def print_startup_banner(config: Settings) -> None:
    """
    Print startup banner with configuration information.

    Args:
        config: Application settings
    """
    from insights_server import __version__

    dataset = config.dataset_path or f"generated (seed={config.dataset_seed})"
    banner = f"""
╔══════════════════════════════════════════════════════════════════╗
║         FinOps Org Insights MCP Server v{__version__}
╠══════════════════════════════════════════════════════════════════╣
║  Configuration:
║    Host:        {config.host}
║    Port:        {config.port}
║    Environment: {config.environment}
║    Log Level:   {config.log_level}
║    Dataset:     {dataset}
║    Top N:       {config.top_n}
╠══════════════════════════════════════════════════════════════════╣
║  MCP Tools (4):
║    1. get_org_hierarchy        3. get_chart_data
║    2. get_dashboard_view       4. get_assistant_context
╠══════════════════════════════════════════════════════════════════╣
║  Endpoints:
║    Health:     http://{config.host}:{config.port}/health
║    MCP Tools:  http://{config.host}:{config.port}/mcp/tools
║    Tool Call:  http://{config.host}:{config.port}/mcp/tools/call
║    Dashboard:  http://{config.host}:{config.port}/api/v1/dashboard
╚══════════════════════════════════════════════════════════════════╝
"""
    print(banner)


def main() -> None:
    """
    Main entry point for the MCP server.

    Loads configuration, configures logging, and starts the server.
    """
    # Load settings
    config = settings()

    # Configure logging
    configure_logging(config.log_level)

    logger = logging.getLogger(__name__)

    # Print startup banner
    print_startup_banner(config)

    logger.info("Starting FinOps Org Insights MCP Server...")
    logger.info(f"Server will listen on {config.host}:{config.port}")

    # Validate critical configuration
    if config.dataset_path and not os.path.exists(config.dataset_path):
        logger.error(f"Dataset file not found at {config.dataset_path}.")
        sys.exit(1)

    # Start the server
    try:
        uvicorn.run(
            "insights_server.main:app",
            host=config.host,
            port=config.port,
            reload=config.debug,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
