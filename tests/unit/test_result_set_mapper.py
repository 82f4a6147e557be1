"""Unit tests for ResultSetMapper."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel, Field

from row_mapper.core.exceptions import (
    CoercionError,
    ConfigurationError,
    EncodingError,
    MappingError,
)
from row_mapper.core.executor import Executor
from row_mapper.core.statement import Row, positional
from row_mapper.mapping.binding import column, entity
from row_mapper.mapping.model import ResultSetMapper
from row_mapper.mapping.protocol import Mapper


@entity
@dataclass
class Employee:
    emp_id: int = column("EMP_ID", default=0)
    name: str = column("NAME", default="")
    salary: float = column("SALARY", default=0.0)
    hired: Optional[date] = column("HIRED")


@entity
@dataclass
class Alias:
    primary: str = column("CODE", default="")
    secondary: str = column("code", default="unset")


@entity
@dataclass(frozen=True)
class Frozen:
    amount: Decimal = column("AMOUNT", default=Decimal("0"))


@entity
class Item(BaseModel):
    sku: str = Field("", json_schema_extra={"column": "SKU"})
    qty: int = Field(0, json_schema_extra={"column": "QTY"})


EMPLOYEE_COLUMNS = ["EMP_ID", "NAME", "SALARY", "HIRED", "DEPT"]


@pytest.fixture
def employee_rows() -> list[tuple]:
    return [
        (1, "Alice", 5200.5, "2019-03-01", "R&D"),
        (2, "Bob", 4100, None, "Sales"),
    ]


class TestFetch:
    def test_one_record_per_row_in_order(self, make_connection, employee_rows) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, employee_rows)
        mapper = ResultSetMapper(Employee, Executor())
        records = mapper.fetch("SELECT * FROM employees", connection=conn)
        assert records == [
            Employee(1, "Alice", 5200.5, date(2019, 3, 1)),
            Employee(2, "Bob", 4100.0, None),
        ]
        assert type(records[1].salary) is float

    def test_binder_parameters_reach_driver(self, make_connection) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, [])
        mapper = ResultSetMapper(Employee, Executor())
        mapper.fetch("SELECT * FROM employees WHERE dept = ?", positional("R&D"), connection=conn)
        conn.cursor.return_value.execute.assert_called_once_with(
            "SELECT * FROM employees WHERE dept = ?", ("R&D",)
        )

    def test_empty_result_is_empty_list(self, make_connection) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, [])
        assert ResultSetMapper(Employee, Executor()).fetch("SELECT 1", connection=conn) == []

    def test_null_leaves_default(self, make_connection) -> None:
        conn = make_connection(["EMP_ID", "NAME"], [(None, None)])
        (record,) = ResultSetMapper(Employee, Executor()).fetch("SELECT 1", connection=conn)
        assert record == Employee()

    def test_column_names_are_case_insensitive(self, make_connection) -> None:
        conn = make_connection(["emp_id", "Name"], [(9, "Zoe")])
        (record,) = ResultSetMapper(Employee, Executor()).fetch("SELECT 1", connection=conn)
        assert (record.emp_id, record.name) == (9, "Zoe")

    def test_first_bound_field_wins(self, make_connection) -> None:
        conn = make_connection(["Code"], [("A1",)])
        (record,) = ResultSetMapper(Alias, Executor()).fetch("SELECT 1", connection=conn)
        assert record.primary == "A1"
        assert record.secondary == "unset"

    def test_frozen_dataclass_is_populated(self, make_connection) -> None:
        conn = make_connection(["AMOUNT"], [(12.5,)])
        (record,) = ResultSetMapper(Frozen, Executor()).fetch("SELECT 1", connection=conn)
        assert record.amount == Decimal("12.5")

    def test_pydantic_entity(self, make_connection) -> None:
        conn = make_connection(["SKU", "QTY"], [("X-1", 3.0)])
        (record,) = ResultSetMapper(Item, Executor()).fetch("SELECT 1", connection=conn)
        assert (record.sku, record.qty) == ("X-1", 3)
        assert type(record.qty) is int

    def test_pydantic_entity_marks_mapped_fields_as_set(self, make_connection) -> None:
        conn = make_connection(["SKU", "QTY"], [("X-1", None)])
        (record,) = ResultSetMapper(Item, Executor()).fetch("SELECT 1", connection=conn)
        assert record.model_fields_set == {"sku"}
        assert record.model_dump(exclude_unset=True) == {"sku": "X-1"}

    def test_numeric_column_onto_text_field(self, make_connection) -> None:
        conn = make_connection(["CODE"], [(42,)])
        (record,) = ResultSetMapper(Alias, Executor()).fetch("SELECT 1", connection=conn)
        assert record.primary == "42"

    def test_connect_factory_is_used(self, make_connection, employee_rows) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, employee_rows)
        connect = MagicMock(return_value=conn)
        records = ResultSetMapper(Employee, Executor(), connect=connect).fetch("SELECT 1")
        assert len(records) == 2
        connect.assert_called_once()
        conn.close.assert_called_once()

    def test_undeclared_type_fails_before_acquisition(self) -> None:
        @dataclass
        class Plain:
            id: int = 0

        connect = MagicMock()
        mapper = ResultSetMapper(Plain, Executor(), connect=connect)
        with pytest.raises(ConfigurationError):
            mapper.fetch("SELECT 1")
        connect.assert_not_called()

    def test_coercion_failure_returns_no_partial_results(self, make_connection) -> None:
        conn = make_connection(["EMP_ID", "NAME"], [(1, "Alice"), ("two", "Bob")])
        mapper = ResultSetMapper(Employee, Executor())
        with pytest.raises(CoercionError) as exc_info:
            mapper.fetch("SELECT 1", connection=conn)
        error = exc_info.value
        assert (error.field, error.column, error.row_index) == ("emp_id", "EMP_ID", 1)
        assert error.value == "two"
        conn.cursor.return_value.close.assert_called_once()


class TestFetchAsText:
    def test_empty_single_is_empty_object(self, make_connection) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, [])
        mapper = ResultSetMapper(Employee, Executor())
        assert mapper.fetch_as_text("SELECT 1", single_result=True, connection=conn) == "{}"

    def test_empty_list_is_empty_array(self, make_connection) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, [])
        mapper = ResultSetMapper(Employee, Executor())
        assert mapper.fetch_as_text("SELECT 1", connection=conn) == "[]"

    def test_single_result_encodes_first_record(self, make_connection, employee_rows) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, employee_rows)
        mapper = ResultSetMapper(Employee, Executor())
        text = mapper.fetch_as_text("SELECT 1", single_result=True, connection=conn)
        assert json.loads(text) == {
            "emp_id": 1,
            "name": "Alice",
            "salary": 5200.5,
            "hired": "2019-03-01",
        }

    def test_list_encodes_all_records(self, make_connection, employee_rows) -> None:
        conn = make_connection(EMPLOYEE_COLUMNS, employee_rows)
        text = ResultSetMapper(Employee, Executor()).fetch_as_text("SELECT 1", connection=conn)
        decoded = json.loads(text)
        assert [r["name"] for r in decoded] == ["Alice", "Bob"]
        assert decoded[1]["hired"] is None

    def test_custom_codec(self, make_connection, employee_rows) -> None:
        class NameCodec:
            def encode(self, value: object) -> str:
                return ",".join(r.name for r in value)

        conn = make_connection(EMPLOYEE_COLUMNS, employee_rows)
        mapper = ResultSetMapper(Employee, Executor(), codec=NameCodec())
        assert mapper.fetch_as_text("SELECT 1", connection=conn) == "Alice,Bob"

    def test_codec_failure_is_encoding_error(self) -> None:
        class BrokenCodec:
            def encode(self, value: object) -> str:
                raise RuntimeError("codec exploded")

        mapper = ResultSetMapper(Employee, Executor(), codec=BrokenCodec())
        with pytest.raises(EncodingError, match="codec exploded"):
            mapper.serialize(Employee())


class TestMapRows:
    def test_satisfies_mapper_protocol(self) -> None:
        mapper: Mapper[Employee] = ResultSetMapper(Employee, Executor())
        row = Row(["EMP_ID", "NAME"], (4, "Dan"))
        assert mapper.map_row(row) == Employee(emp_id=4, name="Dan")

    def test_map_rows_in_order(self) -> None:
        mapper = ResultSetMapper(Employee, Executor())
        rows = [Row(["EMP_ID"], (1,)), Row(["EMP_ID"], (2,))]
        assert [r.emp_id for r in mapper.map_rows(rows)] == [1, 2]

    def test_factory_failure_is_mapping_error(self) -> None:
        from row_mapper.mapping.binding import register

        class Fragile:
            name: str

        calls = iter([Fragile()])
        register(Fragile, {"name": "NAME"}, factory=lambda: next(calls))
        mapper = ResultSetMapper(Fragile, Executor())
        rows = [Row(["NAME"], ("a",)), Row(["NAME"], ("b",))]
        with pytest.raises(MappingError, match="row 1"):
            mapper.map_rows(rows)
