from sqlprettify.dialect import Dialect, Vendor, version_is_in


def test_version_is_in() -> None:
    assert version_is_in(None)
    assert not version_is_in(None, end_version=(8,))
    assert version_is_in((8, 0), start_version=(8,))
    assert not version_is_in((5, 7), start_version=(8,))
    assert version_is_in((5, 7), start_version=(5, 6), end_version=(8,))


def test_mysql_versions() -> None:
    assert "WINDOW" in Dialect(Vendor.mysql).get_syntax().reserved_commands
    old = Dialect(Vendor.mysql, (5, 7)).get_syntax()
    assert "WINDOW" not in old.reserved_commands
    assert "EXCEPT" not in old.binary_commands
    assert "EXCEPT" in Dialect(Vendor.mariadb).get_syntax().binary_commands


def test_phrases() -> None:
    phrases = Dialect(Vendor.sql).get_syntax().phrases
    assert phrases["LEFT"] == [("LEFT", "OUTER", "JOIN"), ("LEFT", "JOIN")]
    assert ("GROUP", "BY") in phrases["GROUP"]
    assert "SELECT" not in phrases


def test_syntax_is_cached() -> None:
    dialect = Dialect(Vendor.postgresql)
    assert dialect.get_syntax() is dialect.get_syntax()
