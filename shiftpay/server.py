"""
shiftpay Calculation Engines - MCP Server

FastMCP server exposing the compensation engines as tools:
- Attendance Engine: multi-shift detection and daily totals
- Compensation Engine: allowance/deduction amounts, basic pay, attendance bonus
"""

import logging

from shiftpay.config import get_settings

settings = get_settings()

# Configure logging
log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(level=log_level)
logger = logging.getLogger(__name__)

# Importing the tool modules registers their tools on the shared MCP instance
from shiftpay.tools.attendance_engine import mcp  # noqa: E402
from shiftpay.tools import compensation_engine  # noqa: E402, F401


def main():
    """Run the MCP server."""
    logger.info(
        f"Starting {settings.app_name} {settings.app_version} Calculation Engines MCP Server "
        f"({settings.environment})"
    )
    mcp.run()


if __name__ == "__main__":
    main()
