"""Tests for credential profile loading."""

import logging
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from target_transport import CredentialsFileError
from target_transport import InvalidConfigError
from target_transport import TargetConfig
from target_transport import is_split_fqdn
from target_transport import load_credentials
from target_transport import lookup_profile
from target_transport import parse_credentials_file

QUOTED_CREDENTIALS = """
['host.example.org']
user = "admin"
password = "secret"
enable_password = "enable"

['other.example.org']
user = "other"
"""

UNQUOTED_CREDENTIALS = """
[host.example.org]
user = "admin"
"""


class TestIsSplitFqdn:
    """Test split host name detection."""

    def test_nested_tables_detected(self):
        """Test a host name parsed into nested tables is detected."""
        assert is_split_fqdn({"host": {"example": {"org": {}}}}, "host.example.org") is True

    def test_literal_key_not_split(self):
        """Test a quoted host name is not reported."""
        assert is_split_fqdn({"host.example.org": {}}, "host.example.org") is False

    def test_scalar_in_path_not_split(self):
        """Test the walk stops when a nested value is not a table."""
        assert is_split_fqdn({"host": {"example": "not-a-map"}}, "host.example.org") is False

    def test_top_level_scalar_not_split(self):
        """Test a scalar under the first segment is not reported."""
        assert is_split_fqdn({"host": "value"}, "host.example.org") is False

    def test_first_segment_missing(self):
        """Test unrelated credentials are not reported."""
        assert is_split_fqdn({"web01": {"user": "admin"}}, "host.example.org") is False

    def test_partial_chain_not_split(self):
        """Test a chain missing the last segment is not reported."""
        assert is_split_fqdn({"host": {"example": {"com": {}}}}, "host.example.org") is False

    def test_middle_segment_missing_not_split(self):
        """Test a table named after the first label only is not reported."""
        assert is_split_fqdn({"web": {"user": "admin"}}, "web.example.org") is False

    @pytest.mark.parametrize("profile", ["web01", "localhost", ""])
    def test_single_segment_never_split(self, profile):
        """Test names without dots are never reported."""
        assert is_split_fqdn({profile: {"web01": {}}}, profile) is False

    def test_two_segments(self):
        """Test a two-part host name."""
        assert is_split_fqdn({"web01": {"local": {"user": "admin"}}}, "web01.local") is True


class TestLookupProfile:
    """Test lookup_profile function."""

    def test_literal_entry_found(self):
        """Test the literal key entry is returned without warnings."""
        lookup = lookup_profile({"host.example.org": {"user": "admin"}}, "host.example.org")

        assert lookup.entry == {"user": "admin"}
        assert lookup.split_fqdn is False
        assert lookup.notices == []

    def test_missing_profile(self):
        """Test a missing profile returns no entry."""
        assert lookup_profile({"web01": {"user": "admin"}}, "web02").entry is None

    def test_no_credentials(self):
        """Test no parsed credentials returns no entry."""
        assert lookup_profile(None, "web01").entry is None

    def test_split_fqdn_warns_without_entry(self):
        """Test nested tables produce two warnings but no entry."""
        raw = {"host": {"example": {"org": {"user": "admin"}}}}

        lookup = lookup_profile(raw, "host.example.org", source="/tmp/credentials")

        assert lookup.entry is None
        assert lookup.split_fqdn is True
        assert [n.level for n in lookup.notices] == [logging.WARNING, logging.WARNING]
        assert "/tmp/credentials" in lookup.notices[0].message
        assert "'host.example.org'" in lookup.notices[0].message
        assert "single quotes" in lookup.notices[1].message

    def test_literal_entry_wins_over_split(self):
        """Test the literal entry is still used when a split name also exists."""
        raw = {
            "host": {"example": {"org": {"user": "nested"}}},
            "host.example.org": {"user": "literal"},
        }

        lookup = lookup_profile(raw, "host.example.org")

        assert lookup.entry == {"user": "literal"}
        assert lookup.split_fqdn is True
        assert len(lookup.notices) == 2

    def test_values_unchanged(self):
        """Test nested values are passed through as-is."""
        raw = {"web01": {"key_files": ["a", "b"], "port": 22}}
        assert lookup_profile(raw, "web01").entry == {"key_files": ["a", "b"], "port": 22}

    def test_non_table_entry_raises(self):
        """Test a scalar profile entry is rejected."""
        with pytest.raises(CredentialsFileError):
            lookup_profile({"web01": "admin"}, "web01")


class TestParseCredentialsFile:
    """Test parse_credentials_file function."""

    @pytest.fixture
    def tmpdir_path(self):
        """Create a temporary directory for credentials files."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_none_path(self):
        """Test no path parses to None."""
        assert parse_credentials_file(None) is None

    def test_missing_file(self, tmpdir_path):
        """Test a missing file parses to None."""
        assert parse_credentials_file(tmpdir_path / "credentials") is None

    def test_quoted_host_names(self, tmpdir_path):
        """Test quoted host names stay single keys."""
        path = tmpdir_path / "credentials"
        path.write_text(QUOTED_CREDENTIALS)

        raw = parse_credentials_file(path)

        assert raw["host.example.org"]["user"] == "admin"
        assert raw["other.example.org"] == {"user": "other"}

    def test_unquoted_host_names_nest(self, tmpdir_path):
        """Test unquoted host names become nested tables."""
        path = tmpdir_path / "credentials"
        path.write_text(UNQUOTED_CREDENTIALS)

        assert parse_credentials_file(path) == {"host": {"example": {"org": {"user": "admin"}}}}

    def test_invalid_toml_raises(self, tmpdir_path):
        """Test invalid TOML is reported as a credentials error."""
        path = tmpdir_path / "credentials"
        path.write_text("[web01\nuser = ")

        with pytest.raises(CredentialsFileError, match="Invalid TOML"):
            parse_credentials_file(path)


class TestLoadCredentials:
    """Test load_credentials function."""

    @pytest.fixture
    def tmpdir_path(self):
        """Create a temporary directory for credentials files."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_loads_profile_from_explicit_file(self, tmpdir_path):
        """Test the profile for the host is loaded from the explicit file."""
        path = tmpdir_path / "credentials"
        path.write_text(QUOTED_CREDENTIALS)
        config = TargetConfig(protocol="ssh", host="host.example.org", credentials_file=path)

        credentials = load_credentials(config, fallback=lambda: None)

        assert credentials == {"user": "admin", "password": "secret", "enable_password": "enable"}

    def test_loads_profile_from_host_path(self, tmpdir_path):
        """Test the host-specific file is read when no explicit file is set."""
        path = tmpdir_path / "credentials"
        path.write_text(QUOTED_CREDENTIALS)
        config = TargetConfig(protocol="ssh", host="other.example.org")

        assert load_credentials(config, default_path=path, fallback=lambda: None) == {"user": "other"}

    def test_no_file_returns_none(self, tmpdir_path, caplog):
        """Test no credentials file means no credentials."""
        caplog.set_level(logging.DEBUG, logger="target_transport")
        config = TargetConfig(protocol="ssh", host="web01")

        assert load_credentials(config, default_path=tmpdir_path / "missing", fallback=lambda: None) is None
        assert "No credentials file found for target 'web01'" in caplog.text

    def test_missing_explicit_file_raises(self, tmpdir_path):
        """Test a missing explicit file fails before anything is parsed."""
        config = TargetConfig(protocol="ssh", host="web01", credentials_file=tmpdir_path / "missing")

        with pytest.raises(InvalidConfigError):
            load_credentials(config, fallback=lambda: None)

    def test_split_fqdn_logged(self, tmpdir_path, caplog):
        """Test an unquoted host name is logged as two warnings."""
        path = tmpdir_path / "credentials"
        path.write_text(UNQUOTED_CREDENTIALS)
        config = TargetConfig(protocol="ssh", host="host.example.org", credentials_file=path)

        with caplog.at_level(logging.WARNING, logger="target_transport"):
            assert load_credentials(config, fallback=lambda: None) is None

        warnings = [r.message for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "expected a string" in warnings[0]
        assert "['host.example.org']" in warnings[1]

    def test_short_host_table_beside_quoted_host(self, tmpdir_path):
        """Test a table for the short host name does not hide the quoted entry."""
        path = tmpdir_path / "credentials"
        path.write_text('[web]\nuser = "a"\n\n[\'web.example.org\']\nuser = "b"\n')
        config = TargetConfig(protocol="ssh", host="web.example.org", credentials_file=path)

        assert load_credentials(config, fallback=lambda: None) == {"user": "b"}

    def test_custom_logger(self, tmpdir_path, caplog):
        """Test notices go to the logger passed in."""
        caplog.set_level(logging.DEBUG, logger="custom")
        config = TargetConfig(protocol="ssh", host="web01")

        load_credentials(
            config, default_path=tmpdir_path / "missing", fallback=lambda: None, log=logging.getLogger("custom")
        )

        assert [r.name for r in caplog.records] == ["custom"]
