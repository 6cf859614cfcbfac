"""Test SQL template classification (MySQL dialect)."""

import pytest

from sqlstencil.classify import StatementType, classify_sql
from sqlstencil.errors import ArgumentError


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("select * from Users where Username=? and Type=?", StatementType.READ),
        ("SELECT 1", StatementType.READ),
        ("select a from t1 union select b from t2", StatementType.READ),
        ("with c as (select 1 as x) select * from c", StatementType.READ),
        ("insert into `widgets` (`Name`,`Age`) values (?,?)", StatementType.DML),
        ("update `widgets` set `Name`=? where `Id`=?", StatementType.DML),
        ("delete from `widgets` where `Id`=?", StatementType.DML),
        ("create table t (id int)", StatementType.DDL),
        ("drop table t", StatementType.DDL),
        ("alter table t add column name text", StatementType.DDL),
        ("truncate table t", StatementType.DDL),
        ("GRANT SELECT ON users TO readonly_role", StatementType.ADMIN),
    ],
)
def test_classify_sql(sql, expected):
    assert classify_sql(sql) is expected


def test_multiple_statements_rejected():
    with pytest.raises(ArgumentError, match="one statement"):
        classify_sql("select 1; drop table t")


def test_empty_rejected():
    with pytest.raises(ArgumentError):
        classify_sql("   ")
