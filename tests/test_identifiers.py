"""
Unit tests for the connection identifier codec.
"""
import pytest
from schemalens.identifiers import decode, build_connection_string, MalformedIdentifier
from schemalens.models import ConnectionDescriptor


class TestDecode:
    """Test identifier parsing."""

    def test_decode_basic(self):
        """Test the canonical identifier shape."""
        d = decode("mysql://bob:pw@host:3306")
        assert d.kind == "mysql"
        assert d.user == "bob"
        assert d.password == "pw"
        assert d.host == "host"
        assert d.port == "3306"
        assert d.database is None

    def test_decode_with_database(self):
        """Test identifier carrying a database path."""
        d = decode("mysql://bob:pw@host:3306/shop")
        assert d.database == "shop"
        assert d.port == "3306"

    def test_decode_empty_password(self):
        """Test that an empty credential segment decodes to an empty password."""
        d = decode("mysql://root:@127.0.0.1:9030")
        assert d.user == "root"
        assert d.password == ""
        assert d.credential == ""

    def test_decode_rejects_invalid(self):
        """Test that malformed identifiers are hard errors."""
        invalid = [
            "not-a-valid-id",
            "mysql:/bob:pw@host:3306",
            "://bob:pw@host:3306",
            "mysql://",
            "mysql://bob:pw-host:3306",
            "mysql://bobpw@host:3306",
            "mysql://bob:pw@host",
            "mysql://bob:pw@host:port",
            "mysql://bob:pw@:3306",
        ]

        for identifier in invalid:
            with pytest.raises(MalformedIdentifier):
                decode(identifier)

    def test_malformed_is_value_error(self):
        """Test that MalformedIdentifier can be handled as a ValueError."""
        with pytest.raises(ValueError):
            decode("not-a-valid-id")

    def test_error_does_not_leak_password(self):
        """Test that the password is redacted from error messages."""
        with pytest.raises(MalformedIdentifier) as exc:
            decode("mysql:/bob:s3cret@host:3306")
        assert "s3cret" not in str(exc.value)

    def test_ipv6_style_host_uses_last_colon_for_port(self):
        """Test that the port is split off at the last colon."""
        d = decode("mysql://bob:pw@::1:3306")
        assert d.host == "::1"
        assert d.port == "3306"


class TestBuildConnectionString:
    """Test identifier serialization."""

    def test_build_without_database(self):
        d = ConnectionDescriptor(type="mysql", host="h", port="3306", user="u", password="p")
        assert build_connection_string(d) == "mysql://u:p@h:3306"

    def test_build_with_database(self):
        d = ConnectionDescriptor(type="mysql", host="h", port="3306", user="u", password="p")
        assert build_connection_string(d, "shop") == "mysql://u:p@h:3306/shop"

    def test_absent_password_keeps_credential_segment(self):
        """Test that a missing password serializes as 'user:@'."""
        d = ConnectionDescriptor(type="mysql", host="h", port="3306", user="u")
        assert build_connection_string(d) == "mysql://u:@h:3306"

    def test_special_characters_survive(self):
        """Test that '@', ':' and '/' in credentials are not corrupted."""
        d = ConnectionDescriptor(type="mysql", host="h", port="3306", user="a:b", password="p@ss/w:rd")
        conn_str = build_connection_string(d, "shop")

        back = decode(conn_str)
        assert back.user == "a:b"
        assert back.password == "p@ss/w:rd"
        assert back.host == "h"
        assert back.database == "shop"

    def test_numeric_port_is_accepted(self):
        """Test that integer ports are coerced to strings."""
        d = ConnectionDescriptor(type="doris", host="fe", port=9030, user="root")
        assert build_connection_string(d) == "doris://root:@fe:9030"
