import pytest
from jsonschema import ValidationError

from openref.config import CONFIG_FILE_NAME, ConfigError, OpenRefConfig
from openref.config._validator import CONFIG_SCHEMA


def test_defaults():
    config = OpenRefConfig()
    assert not config.external_refs
    assert not config.remote_refs
    assert config.encoding == "utf-8"
    assert config.config_path is None


def test_config_keys_sync():
    for key in OpenRefConfig.__slots__:
        if key.startswith("_"):
            continue
        assert key.replace("_", "-") in CONFIG_SCHEMA["properties"]


def test_from_str():
    config = OpenRefConfig.from_str('external-refs = true\nremote-refs = true\nencoding = "latin-1"\n')
    assert config.external_refs
    assert config.remote_refs
    assert config.encoding == "latin-1"


def test_config_path_from_path(tmp_path):
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text("external-refs = true\n")

    config = OpenRefConfig.from_path(config_file)

    assert config.config_path == str(config_file.resolve())
    assert config.external_refs


def test_config_path_from_discover(tmp_path, monkeypatch):
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text("external-refs = true\n")
    nested = tmp_path / "specs" / "v1"
    nested.mkdir(parents=True)

    monkeypatch.chdir(nested)
    config = OpenRefConfig.discover()

    assert config.config_path == str(config_file.resolve())
    assert config.external_refs


def test_discover_stops_at_git_root(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILE_NAME).write_text("external-refs = true\n")
    project = tmp_path / "project"
    (project / ".git").mkdir(parents=True)

    monkeypatch.chdir(project)
    config = OpenRefConfig.discover()

    assert config.config_path is None
    assert not config.external_refs


def test_unknown_key():
    with pytest.raises(ConfigError) as exc:
        OpenRefConfig.from_dict({"external-ref": True})
    message = str(exc.value)
    assert "Unknown properties" in message
    assert "'external-ref' -> Did you mean 'external-refs'?" in message


def test_type_error():
    with pytest.raises(ConfigError) as exc:
        OpenRefConfig.from_dict({"remote-refs": "yes"})
    assert "'remote-refs' -> Must be a boolean, but got str: yes" in str(exc.value)


def test_type_error_with_several_types():
    error = ValidationError(
        "1 is not of type 'string', 'null'",
        validator="type",
        validator_value=["string", "null"],
        instance=1,
        path=["encoding"],
    )
    message = str(ConfigError.from_validation_error(error))
    assert "'encoding' -> Must be a string or null, but got int: 1" in message


def test_empty_encoding():
    with pytest.raises(ConfigError, match="Must not be empty"):
        OpenRefConfig.from_dict({"encoding": ""})


def test_invalid_toml():
    with pytest.raises(ConfigError, match="Invalid TOML"):
        OpenRefConfig.from_str("external-refs = ")


def test_env_substitution(monkeypatch):
    monkeypatch.setenv("DOCS_ENCODING", "utf-16")
    config = OpenRefConfig.from_dict({"encoding": "${DOCS_ENCODING}"})
    assert config.encoding == "utf-16"


def test_missing_env_variable(monkeypatch):
    monkeypatch.delenv("MISSING_ENCODING", raising=False)
    with pytest.raises(ConfigError, match="Missing environment variable"):
        OpenRefConfig.from_dict({"encoding": "${MISSING_ENCODING}"})


@pytest.mark.parametrize(
    "kwargs, expected",
    (
        ({}, (False, False, "utf-8")),
        ({"external_refs": True}, (True, False, "utf-8")),
        ({"remote_refs": True, "encoding": "ascii"}, (False, True, "ascii")),
    ),
    ids=["nothing", "external", "remote-and-encoding"],
)
def test_update(kwargs, expected):
    config = OpenRefConfig()
    config.update(**kwargs)
    assert (config.external_refs, config.remote_refs, config.encoding) == expected
