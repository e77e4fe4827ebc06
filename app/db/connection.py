"""Shared psycopg2 connection pool for request handlers and the audit writer."""

from __future__ import annotations

import logging

import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from app.config import settings

logger = logging.getLogger(__name__)

_pool: ThreadedConnectionPool | None = None


def get_pool() -> ThreadedConnectionPool:
    """Return the process-wide pool, opening it lazily.

    Connections are borrowed from request threads and from background
    writer threads, so the pool must be thread-safe.

    Returns
    -------
    ThreadedConnectionPool
        Pool bounded by ``PG_POOL_MIN`` and ``PG_POOL_MAX``.
    """
    global _pool
    if _pool is None:
        psycopg2.extras.register_uuid()
        _pool = ThreadedConnectionPool(
            minconn=settings.pg_pool_min,
            maxconn=settings.pg_pool_max,
            host=settings.pg_host,
            port=settings.pg_port,
            dbname=settings.pg_database,
            user=settings.pg_user,
            password=settings.pg_password,
        )
        logger.info("Opened connection pool to %s:%s/%s", settings.pg_host, settings.pg_port, settings.pg_database)
    return _pool


def get_connection():
    """Borrow a connection; pair every call with :func:`put_connection`."""
    return get_pool().getconn()


def put_connection(conn) -> None:
    """Hand ``conn`` back to the pool.

    Parameters
    ----------
    conn : psycopg2.extensions.connection
        A connection obtained from :func:`get_connection`.
    """
    get_pool().putconn(conn)


def close_pool() -> None:
    """Close every pooled connection; the next :func:`get_pool` call reopens."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
