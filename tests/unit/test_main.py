import logging

import pytest

import ldap_filter_grammar.main as cli
from ldap_filter_grammar.ldap_client import LdapEntry
from ldap_filter_grammar.operators import get_operators


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LDAP_FILTER", "DEBUG", "LDAP_BASE_DN", "LDAP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_prints_compiled_filter(capsys):
    rc = cli.main([
        "--where", "objectClass", "=", "person",
        "--or-where", "cn", "starts_with", "adm",
        "--or-where", "cn", "=", "root",
    ])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "(&(objectClass=person)(|(cn=adm*)(cn=root)))"


def test_presence_condition_without_value(capsys):
    assert cli.main(["--where", "mail", "*"]) == 0
    assert capsys.readouterr().out.strip() == "(mail=*)"


def test_raw_and_nested(capsys):
    assert cli.main(["--raw", "(uid=a)", "--where", "cn", "=", "b", "--nested"]) == 0
    assert capsys.readouterr().out.strip() == "(uid=a)(cn=b)"


def test_ldap_filter_env_ignored_without_search(monkeypatch, capsys):
    monkeypatch.setenv("LDAP_FILTER", "(uid=jdoe)")
    assert cli.main(["--where", "cn", "=", "b"]) == 0
    assert capsys.readouterr().out.strip() == "(cn=b)"


def test_list_operators(capsys):
    assert cli.main(["--list-operators"]) == 0
    assert capsys.readouterr().out.split() == list(get_operators())


def test_invalid_operator_exit_status(capsys):
    assert cli.main(["--where", "cn", "like", "bob"]) == 2
    assert capsys.readouterr().out == ""


def test_bad_arity_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--where", "cn"])
    assert exc.value.code == 2


def test_search_uses_config(monkeypatch, capsys):
    monkeypatch.setenv("LDAP_BASE_DN", "dc=example,dc=com")
    monkeypatch.setenv("LDAP_FILTER", "objectClass=person")
    seen = {}

    def fake_search(query, **kwargs):
        seen["raw"] = list(query.raw)
        seen.update(kwargs)
        return [LdapEntry(dn="uid=jdoe,dc=example,dc=com", attributes={"cn": ["John"]})]

    monkeypatch.setattr(cli, "search", fake_search)
    assert cli.main(["--search", "--where", "uid", "=", "jdoe"]) == 0
    assert capsys.readouterr().out.strip() == "uid=jdoe,dc=example,dc=com"
    assert seen["raw"] == ["(objectClass=person)"]
    assert seen["base_dn"] == "dc=example,dc=com"


def test_setup_logging_configures_app_logger_only():
    logger = cli._setup_logging(debug=True)
    assert logger.name == "ldap_filter_grammar"
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    # calling again does not stack handlers
    cli._setup_logging(debug=False)
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


@pytest.mark.parametrize(
    "argv,expected",
    [
        (["--list-operators"], "\n".join(get_operators())),
        (["--where", "cn", "=", "a"], "(cn=a)"),
    ],
)
def test_bad_connection_config_ignored_without_search(monkeypatch, capsys, argv, expected):
    monkeypatch.setenv("LDAP_TIMEOUT", "abc")
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.strip() == expected


def test_bad_connection_config_with_search(monkeypatch, capsys):
    monkeypatch.setenv("LDAP_TIMEOUT", "abc")

    def fail_search(query, **kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("search called with invalid config")

    monkeypatch.setattr(cli, "search", fail_search)
    assert cli.main(["--search", "--where", "cn", "=", "a"]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "LDAP_TIMEOUT" in captured.err


@pytest.mark.parametrize(
    "argv,expected",
    [
        (["--where", "employeeNumber = -1"], "(employeeNumber=-1)"),
        (["--where", "mail *"], "(mail=*)"),
        (["--where", "description contains two words"], "(description=*two words*)"),
        (["--where", "cn = a", "--or-where", "sn = -b"], "(|(cn=a)(sn=-b))"),
    ],
)
def test_quoted_condition_form(capsys, argv, expected):
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.strip() == expected


def test_quoted_condition_needs_operator():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--where", "cn"])
    assert exc.value.code == 2
