"""
DDL synthesis and MySQL <-> Doris DDL conversion.

``synthesize_create_table`` emits a fixed CREATE TABLE template for a
spreadsheet sheet. The conversion helpers rewrite an introspected table
(columns + catalog DDL) into the other dialect.
"""
import re
from typing import List, Literal

from .logger import logger
from .models import ColumnSchema, TableDetail

TargetDdl = Literal["mysql", "doris"]


def sheet_table_name(sheet_name: str) -> str:
    """Lowercase and replace spaces with underscores. Nothing else is escaped."""
    return sheet_name.lower().replace(" ", "_")


def synthesize_create_table(sheet_name: str, target_dialect: str) -> str:
    """
    Build a CREATE TABLE template for a spreadsheet sheet.

    The body is a fixed skeleton (``id`` primary key plus two placeholder
    columns), not a reflection of the sheet's contents. Names with SQL-unsafe
    characters are emitted verbatim.
    """
    table_name = sheet_table_name(sheet_name)
    return (
        f"-- Generated SQL for Sheet: {sheet_name}\n"
        f"-- Target DB: {target_dialect}\n"
        "\n"
        f"CREATE TABLE `{table_name}` (\n"
        "  `id` BIGINT NOT NULL AUTO_INCREMENT,\n"
        "  `col_a` VARCHAR(255),\n"
        "  `col_b` INT,\n"
        "  PRIMARY KEY (`id`)\n"
        ") ENGINE=InnoDB;"
    )


# ===== DIALECT DETECTION =====

_DORIS_MARKERS = (
    "ENGINE=OLAP",
    "ENGINE = OLAP",
    "DISTRIBUTED BY HASH",
    "DUPLICATE KEY",
    "AGGREGATE KEY",
    "BUCKETS",
)


def detect_dialect_from_ddl(ddl: str) -> TargetDdl:
    """Guess whether catalog DDL came from Doris or MySQL."""
    if not ddl:
        return "mysql"
    upper = ddl.upper()
    if any(marker in upper for marker in _DORIS_MARKERS):
        return "doris"
    if "UNIQUE KEY" in upper and "ENGINE=INNODB" not in upper:
        return "doris"
    return "mysql"


# Single-quoted SQL literal; '' is an escaped quote
_LITERAL = r"'((?:[^']|'')*)'"


def _unquote(literal: str) -> str:
    return literal.replace("''", "'")


def extract_table_comment(ddl: str) -> str:
    """Table-level COMMENT from Doris or MySQL DDL, or '' if there is none."""
    if not ddl:
        return ""

    # Doris: UNIQUE KEY(...) COMMENT 'xxx'
    match = re.search(
        r"(?:UNIQUE\s+KEY|DUPLICATE\s+KEY|AGGREGATE\s+KEY)\s*\([^)]*\)\s*COMMENT\s*" + _LITERAL,
        ddl, re.IGNORECASE,
    )
    if match:
        return _unquote(match.group(1))

    # MySQL: ) ENGINE=... COMMENT='xxx'
    match = re.search(r"\)\s*[^;]*?COMMENT\s*=\s*" + _LITERAL, ddl, re.IGNORECASE)
    if match:
        return _unquote(match.group(1))

    # Last COMMENT in the statement is usually the table's
    comments = re.findall(r"COMMENT\s*=?\s*" + _LITERAL, ddl, re.IGNORECASE)
    return _unquote(comments[-1]) if comments else ""


def format_column_type(col: ColumnSchema) -> str:
    """
    Render a column type with its length or precision.

    varchar + length 50 -> VARCHAR(50); decimal + 10,2 -> DECIMAL(10,2);
    datetime + scale 3 -> DATETIME(3). Types that already carry parentheses
    are returned uppercased.
    """
    upper = col.type.upper()

    if re.search(r"\(.*\)", upper):
        return upper

    if re.fullmatch(r"VARCHAR|CHAR|VARBINARY|BINARY", upper):
        if col.length and col.length > 0:
            return f"{upper}({col.length})"
        return upper

    if re.fullmatch(r"DECIMAL|NUMERIC", upper):
        if col.length and col.length > 0:
            if col.scale:
                return f"{upper}({col.length},{col.scale})"
            return f"{upper}({col.length})"
        return upper

    if re.fullmatch(r"DATETIME|TIMESTAMP|TIME", upper):
        if col.scale:
            return f"{upper}({col.scale})"
        return upper

    return upper


def _doris_type(formatted: str) -> str:
    if re.fullmatch(r"TINYINT\s*\(1\)", formatted, re.IGNORECASE):
        return "BOOLEAN"
    if re.fullmatch(r"(BIGINT|INT|TINYINT|SMALLINT|MEDIUMINT)\s*\(\d+\)", formatted, re.IGNORECASE):
        return re.sub(r"\s*\(\d+\)", "", formatted)
    if re.fullmatch(r"(DOUBLE|FLOAT)\s*\(\d+,\s*\d+\)", formatted, re.IGNORECASE):
        return re.sub(r"\s*\(\d+,\s*\d+\)", "", formatted)
    if re.fullmatch(r"TEXT|LONGTEXT|MEDIUMTEXT|TINYTEXT", formatted, re.IGNORECASE):
        return "STRING"
    if re.fullmatch(r"(DATETIME|TIMESTAMP)(\(\d+\))?", formatted, re.IGNORECASE):
        return "DATETIME"
    if re.fullmatch(r"VARCHAR", formatted, re.IGNORECASE):
        return "STRING"
    return formatted


def _mysql_type(formatted: str) -> str:
    if re.fullmatch(r"STRING", formatted, re.IGNORECASE):
        return "TEXT"
    if re.fullmatch(r"BOOLEAN", formatted, re.IGNORECASE):
        return "TINYINT(1)"
    return formatted


def sql_literal(text) -> str:
    """Single-quoted SQL string literal with embedded quotes doubled."""
    return "'" + str(text).replace("'", "''") + "'"


def _comment_clause(comment) -> str:
    return f" COMMENT {sql_literal(comment)}" if comment else ""


def convert_mysql_to_doris(table_name: str, columns: List[ColumnSchema], ddl: str) -> str:
    """Rewrite a MySQL table as a Doris merge-on-write UNIQUE KEY table."""
    primary_keys = [c.name for c in columns if c.is_primary_key]
    pk_list = ", ".join(primary_keys) if primary_keys else "id"
    table_comment = extract_table_comment(ddl) or table_name

    field_lines = [
        f"    `{c.name}` {_doris_type(format_column_type(c))}{_comment_clause(c.comment)}"
        for c in columns
    ]
    fields = ",\n".join(field_lines)

    return (
        f"CREATE TABLE `{table_name}` (\n"
        f"{fields}\n"
        ") ENGINE = OLAP\n"
        f"UNIQUE KEY({pk_list}) COMMENT {sql_literal(table_comment)}\n"
        f"DISTRIBUTED BY HASH({pk_list}) BUCKETS 10\n"
        "PROPERTIES (\n"
        '    "replication_num" = "1",\n'
        '    "enable_unique_key_merge_on_write" = "true"\n'
        ");"
    )


def convert_doris_to_mysql(table_name: str, columns: List[ColumnSchema], ddl: str) -> str:
    """Rewrite a Doris table as an InnoDB table."""
    table_comment = extract_table_comment(ddl)

    field_lines = []
    for c in columns:
        null_str = "NULL" if c.nullable else "NOT NULL"
        field_lines.append(
            f"    `{c.name}` {_mysql_type(format_column_type(c))} {null_str}{_comment_clause(c.comment)}"
        )
    fields = ",\n".join(field_lines)

    primary_keys = [c.name for c in columns if c.is_primary_key]
    pk_clause = ""
    if primary_keys:
        pk_clause = ",\n    PRIMARY KEY (" + ", ".join(f"`{k}`" for k in primary_keys) + ")"

    comment_sql = f" COMMENT={sql_literal(table_comment)}" if table_comment else ""

    return (
        f"CREATE TABLE `{table_name}` (\n"
        f"{fields}{pk_clause}\n"
        f") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4{comment_sql};"
    )


def convert_ddl(detail: TableDetail, target: TargetDdl) -> str:
    """
    Convert an introspected table to ``target``.

    If the source DDL is already in the target dialect it is returned verbatim.
    """
    source = detect_dialect_from_ddl(detail.ddl)
    if source == target:
        logger.info(f"DDL for '{detail.name}' is already {target}, returning catalog DDL")
        return detail.ddl

    logger.info(f"Converting DDL for '{detail.name}' from {source} to {target}")
    if target == "doris":
        return convert_mysql_to_doris(detail.name, detail.columns, detail.ddl)
    return convert_doris_to_mysql(detail.name, detail.columns, detail.ddl)
