"""
Dataset wiring for the API.

``build_accessor()`` turns an ``AppConfig`` into the configured
``DatasetAccessor``.  ``create_app()`` stores one ``ExpenditureQueries``
on ``app.state``; routes receive it through the ``get_queries`` dependency,
so tests can inject any accessor without touching module globals.

Usage in a route::

    from api.database import get_queries
    from fastapi import Depends

    @router.get("/example")
    def example(queries: ExpenditureQueries = Depends(get_queries)):
        ...
"""

import logging

from fastapi import Request

from expenditure.accessor import DatasetAccessor
from expenditure.facade import ExpenditureQueries
from expenditure.json_store import JsonFileAccessor
from expenditure.sqlite_store import SqliteAccessor
from utils.config import BACKEND_JSON, AppConfig

logger = logging.getLogger(__name__)


def build_accessor(cfg: AppConfig) -> DatasetAccessor:
    """Return the accessor selected by ``cfg.data_backend``."""
    if cfg.data_backend == BACKEND_JSON:
        logger.info("Using JSON data directory %s (%s-%s)",
                    cfg.data_dir, cfg.first_year, cfg.last_year)
        return JsonFileAccessor(cfg.data_dir, cfg.first_year, cfg.last_year)
    logger.info("Using SQLite database %s", cfg.db_path)
    return SqliteAccessor(cfg.db_path)


def get_queries(request: Request) -> ExpenditureQueries:
    """FastAPI dependency: the query layer bound to this app's accessor."""
    return request.app.state.queries
