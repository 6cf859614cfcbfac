"""Adapter test fixtures."""

from __future__ import annotations

import os

import pytest

from sqlstencil.adapters._base import ConnectionConfig


@pytest.fixture(scope="session")
def mysql_config() -> ConnectionConfig:
    return ConnectionConfig(
        name="sqlstencil-test",
        hostname=os.environ.get("SQLSTENCIL_MYSQL_HOST", "127.0.0.1"),
        username=os.environ.get("SQLSTENCIL_MYSQL_USER", "sqlstencil"),
        password=os.environ.get("SQLSTENCIL_MYSQL_PASSWORD", "sqlstencil_test"),
        database=os.environ.get("SQLSTENCIL_MYSQL_DATABASE", "sqlstencil_test"),
        port=int(os.environ.get("SQLSTENCIL_MYSQL_PORT", "3306")),
    )


@pytest.fixture
def mysql_client(mysql_config):
    """MySqlClient on a real server, with a scratch `widgets` table."""
    from sqlstencil.client import MySqlClient

    client = MySqlClient(mysql_config)
    client.query("drop table if exists widgets")
    client.query(
        "create table widgets ("
        " Id int auto_increment primary key,"
        " Name varchar(50) not null,"
        " Age int null,"
        " Price double null,"
        " Active tinyint(1) null,"
        " Created datetime null,"
        " Payload varbinary(64) null)"
    )
    yield client
    client.query("drop table if exists widgets")
    client.close()
