"""MCP server exposing Happy Meter dashboard data tools."""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from .api import build_mailer
from .config import load_settings
from .db import Database
from .service import HappyMeterService


def create_mcp(service: HappyMeterService) -> FastMCP:
    mcp = FastMCP("happy-meter")

    @mcp.tool()
    async def get_dashboard_stats() -> dict:
        """Return the full admin dashboard snapshot."""

        return service.get_stats().to_dict()

    @mcp.tool()
    async def get_department_breakdown() -> list:
        """Return the average mood per department."""

        return service.get_stats().to_dict()["byDept"]

    @mcp.tool()
    async def get_recent_checkins(limit: int = 10) -> list:
        """Return the most recent check-ins with their mood labels."""

        if limit < 1:
            raise ValueError("limit must be a positive integer")
        return [item.to_dict() for item in service.get_recent(limit)]

    return mcp


def run(env_file: Optional[str] = None) -> None:  # pragma: no cover - stdio transport
    settings = load_settings(env_file)
    database = Database(settings.database_path, timeout=settings.db_timeout)
    service = HappyMeterService(settings, database, build_mailer(settings))
    create_mcp(service).run()


if __name__ == "__main__":  # pragma: no cover
    run()


__all__ = ["create_mcp", "run"]
