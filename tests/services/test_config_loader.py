import pytest

from odooprovisioner.errors import ProvisionerError
from odooprovisioner.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".odooprovisioner.yml"
    config_file.write_text(
        "username: bob\nversion: '18.0'\nport: 8069\naddons_url: https://github.com/acme/addons.git\n",
        encoding="utf-8",
    )

    loaded = ConfigLoader().load(str(config_file))

    assert loaded["username"] == "bob"
    assert loaded["version"] == "18.0"
    assert loaded["port"] == 8069


def test_config_loader_returns_empty_mapping_for_empty_file(tmp_path):
    config_file = tmp_path / ".odooprovisioner.yml"
    config_file.write_text("", encoding="utf-8")

    assert ConfigLoader().load(str(config_file)) == {}


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".odooprovisioner.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    with pytest.raises(ProvisionerError, match="Unknown configuration keys"):
        ConfigLoader().load(str(config_file))


def test_config_loader_rejects_non_mapping_root(tmp_path):
    config_file = tmp_path / ".odooprovisioner.yml"
    config_file.write_text("- bob\n- alice\n", encoding="utf-8")

    with pytest.raises(ProvisionerError, match="YAML mapping"):
        ConfigLoader().load(str(config_file))


def test_config_loader_reports_missing_file(tmp_path):
    with pytest.raises(ProvisionerError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))
