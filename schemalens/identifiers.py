"""
Connection identifier codec.

An identifier is the textual form of a :class:`ConnectionDescriptor`::

    <scheme>://<user>:<password>@<host>:<port>[/<database>]

User and password are percent-encoded when building so that ``@``, ``:`` and
``/`` inside credentials survive a round trip.
"""
from typing import Optional
from urllib.parse import quote, unquote

from .models import ConnectionDescriptor

SCHEME_SEPARATOR = "://"


class MalformedIdentifier(ValueError):
    """Raised when a connection identifier cannot be decoded."""
    pass


def decode(identifier: str) -> ConnectionDescriptor:
    """
    Parse a connection identifier into a descriptor.

    Args:
        identifier: ``<scheme>://<user>:<password>@<host>:<port>[/<database>]``

    Returns:
        ConnectionDescriptor with ``kind`` set to the scheme

    Raises:
        MalformedIdentifier: On any structural problem; nothing is defaulted
    """
    if not isinstance(identifier, str):
        raise MalformedIdentifier("Invalid connection ID format: expected a string")

    parts = identifier.split(SCHEME_SEPARATOR, 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedIdentifier(f"Invalid connection ID format: '{_redact(identifier)}'")

    scheme, rest = parts

    # Credentials end at the last '@'; host segments never contain one
    credentials, at, location = rest.rpartition("@")
    if not at:
        raise MalformedIdentifier("Invalid connection ID format: missing '<user>:<password>@'")

    user, colon, password = credentials.partition(":")
    if not colon or not user:
        raise MalformedIdentifier("Invalid connection ID format: missing user or ':' before password")

    address, _, database = location.partition("/")
    host, colon, port = address.rpartition(":")
    if not colon or not host or not port:
        raise MalformedIdentifier(f"Invalid connection ID format: bad address '{address}'")
    if not port.isdigit():
        raise MalformedIdentifier(f"Invalid connection ID format: port '{port}' is not numeric")

    return ConnectionDescriptor(
        kind=scheme,
        host=host,
        port=port,
        user=unquote(user),
        password=unquote(password),
        database=database or None,
    )


def build_connection_string(
    descriptor: ConnectionDescriptor,
    target_database: Optional[str] = None
) -> str:
    """
    Serialize a descriptor, optionally pointing at ``target_database``.

    An absent password still produces the ``user:@`` segment.
    """
    user = quote(descriptor.user, safe="")
    password = quote(descriptor.credential, safe="")
    conn_str = f"{descriptor.kind}://{user}:{password}@{descriptor.host}:{descriptor.port}"
    if target_database:
        conn_str = f"{conn_str}/{target_database}"
    return conn_str


def _redact(identifier: str) -> str:
    """Hide credentials so passwords stay out of errors."""
    if "@" not in identifier:
        return identifier
    head, sep, _ = identifier.partition(SCHEME_SEPARATOR)
    prefix = f"{head}{sep}" if sep else ""
    return f"{prefix}***@{identifier.rpartition('@')[2]}"
