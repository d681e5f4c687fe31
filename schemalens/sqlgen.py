"""SELECT / INSERT / UPDATE / DELETE skeletons for an introspected table."""
from typing import List, Optional, Dict

from .models import ColumnSchema


def placeholder_value(col_type: str) -> str:
    """Literal placeholder by type family: numbers 0, booleans false, else ''."""
    t = col_type.lower()
    if any(k in t for k in ("int", "decimal", "double", "float")):
        return "0"
    if "bool" in t:
        return "false"
    return "''"


def _key_column(columns: List[ColumnSchema]) -> Optional[ColumnSchema]:
    for c in columns:
        if c.is_primary_key:
            return c
    return columns[0] if columns else None


def _where(columns: List[ColumnSchema]) -> str:
    key = _key_column(columns)
    if key is None:
        return "1=1"
    return f"`{key.name}` = {placeholder_value(key.type)}"


def generate_select_sql(table: str, columns: List[ColumnSchema], limit: int = 100) -> str:
    col_names = ", ".join(f"`{c.name}`" for c in columns) or "*"
    return f"SELECT {col_names} FROM `{table}` LIMIT {int(limit)};"


def generate_insert_sql(table: str, columns: List[ColumnSchema]) -> str:
    # Auto-increment keys are usually named *auto*; skip those
    cols = [c for c in columns if not (c.is_primary_key and "auto" in c.name.lower())]
    col_names = ", ".join(f"`{c.name}`" for c in cols)
    values = ", ".join("?" for _ in cols)
    return f"INSERT INTO `{table}` ({col_names}) VALUES ({values});"


def generate_update_sql(table: str, columns: List[ColumnSchema]) -> str:
    set_clause = ", ".join(
        f"`{c.name}` = {placeholder_value(c.type)}" for c in columns if not c.is_primary_key
    )
    return f"UPDATE `{table}` SET {set_clause} WHERE {_where(columns)};"


def generate_delete_sql(table: str, columns: List[ColumnSchema]) -> str:
    return f"DELETE FROM `{table}` WHERE {_where(columns)};"


def generate_statements(table: str, columns: List[ColumnSchema]) -> Dict[str, str]:
    """All four statements keyed by verb."""
    return {
        "select": generate_select_sql(table, columns),
        "insert": generate_insert_sql(table, columns),
        "update": generate_update_sql(table, columns),
        "delete": generate_delete_sql(table, columns),
    }
