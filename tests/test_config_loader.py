"""Tests for configuration loading and secret resolution."""

import io

import pytest
from rich.console import Console

from erpdeploy.core.config_loader import (
    InstallConfig,
    load_config,
    resolve_secrets,
)
from erpdeploy.exceptions import ConfigurationError

from conftest import SECRETS_ENV, never_prompt, scripted_answers


class TestLoadConfig:
    def test_defaults(self):
        config = load_config({})

        assert config.erp_user == "frappe"
        assert config.site_name == "erp.local"
        assert config.bench_dir == "/opt/erpnext"
        assert config.bench_name == "erpnext-bench"
        assert config.frappe_branch == "version-15"
        assert config.bench_version == "5.27.0"
        assert config.node_setup_url == "https://deb.nodesource.com/setup_18.x"
        assert "wkhtmltox_0.12.6-1" in config.wkhtml_deb_url
        assert config.missing_secrets == [
            "erp_user_password",
            "db_root_password",
            "admin_password",
        ]

    def test_environment_overrides(self):
        config = load_config(
            {"ERP_USER": "erp", "SITE_NAME": "erp.example.com", "BENCH_VERSION": "5.22.0"}
        )

        assert config.erp_user == "erp"
        assert config.site_name == "erp.example.com"
        assert config.bench_version == "5.22.0"

    def test_empty_environment_value_counts_as_unset(self):
        config = load_config({"SITE_NAME": "", "DB_ROOT_PASSWORD": ""})

        assert config.site_name == "erp.local"
        assert config.db_root_password == ""

    def test_derived_paths(self):
        config = load_config({"ERP_USER": "erp", "BENCH_DIR": "/srv/erp"})

        assert str(config.user_home) == "/home/erp"
        assert str(config.bench_path) == "/srv/erp/erpnext-bench"

    def test_config_is_immutable(self):
        config = load_config({})

        with pytest.raises(AttributeError):
            config.site_name = "other"

    def test_yaml_file_below_environment(self, tmp_path):
        config_file = tmp_path / "deploy.yml"
        config_file.write_text("site_name: from-file.local\nbench_name: file-bench\n")

        config = load_config({"SITE_NAME": "from-env.local"}, config_file)

        assert config.site_name == "from-env.local"
        assert config.bench_name == "file-bench"

    def test_yaml_unknown_setting_rejected(self, tmp_path):
        config_file = tmp_path / "deploy.yml"
        config_file.write_text("site: typo.local\n")

        with pytest.raises(ConfigurationError, match="Unknown settings"):
            load_config({}, config_file)

    def test_yaml_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "deploy.yml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config({}, config_file)

    def test_missing_yaml_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config({}, tmp_path / "nope.yml")

    def test_masked_hides_secrets(self):
        config = load_config({"DB_ROOT_PASSWORD": "s3cret"})
        masked = config.masked()

        assert masked["db_root_password"] == "********"
        assert masked["admin_password"] == "(prompt)"
        assert "s3cret" not in masked.values()

    def test_yaml_values_must_be_strings(self, tmp_path):
        config_file = tmp_path / "deploy.yml"
        config_file.write_text("bench_version: 5.20\nsite_name: erp.local\n")

        with pytest.raises(ConfigurationError, match="must be strings: bench_version"):
            load_config({}, config_file)

    def test_quoted_yaml_version_kept_verbatim(self, tmp_path):
        config_file = tmp_path / "deploy.yml"
        config_file.write_text('bench_version: "5.20"\n')

        assert load_config({}, config_file).bench_version == "5.20"


class TestResolveSecrets:
    @pytest.fixture
    def quiet(self):
        return Console(file=io.StringIO())

    def test_preset_secrets_never_prompt(self, quiet):
        config = load_config(SECRETS_ENV)

        resolved = resolve_secrets(config, never_prompt, console=quiet)

        assert resolved is config

    def test_unset_secrets_prompted_in_order(self, quiet):
        ask = scripted_answers("u", "d", "a")

        resolved = resolve_secrets(InstallConfig(), ask, console=quiet)

        assert resolved.erp_user_password == "u"
        assert resolved.db_root_password == "d"
        assert resolved.admin_password == "a"
        assert ask.asked == [
            "Enter password for Linux user frappe",
            "Enter MariaDB root password",
            "Enter ERPNext Administrator password",
        ]

    def test_only_missing_secret_prompted(self, quiet):
        config = load_config({"ERP_USER_PASSWORD": "u", "ADMIN_PASSWORD": "a"})
        ask = scripted_answers("d")

        resolved = resolve_secrets(config, ask, console=quiet)

        assert ask.asked == ["Enter MariaDB root password"]
        assert resolved.db_root_password == "d"
        assert resolved.erp_user_password == "u"

    def test_empty_answer_rejected_and_reprompted(self):
        output = io.StringIO()
        config = load_config({"ERP_USER_PASSWORD": "u", "ADMIN_PASSWORD": "a"})
        ask = scripted_answers("", "", "finally")

        resolved = resolve_secrets(config, ask, console=Console(file=output))

        assert resolved.db_root_password == "finally"
        assert len(ask.asked) == 3
        assert output.getvalue().count("Value cannot be empty.") == 2
