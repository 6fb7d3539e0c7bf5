"""
Tests for the configuration manager — config/config_manager.py
"""
import yaml

from config.config_manager import ConfigManager
from config.constants import API_URL_ENV_VAR, DEFAULT_CONFIG, METRIC_ORDER, UF_ALL


class TestDefaults:
    def test_missing_file_is_created_with_defaults(self, tmp_path):
        path = tmp_path / "conf" / "config.yml"
        config = ConfigManager(str(path))

        assert path.exists()
        assert yaml.safe_load(path.read_text())["refinement"]["max_attempts"] == 3
        assert config.get_max_refinement_attempts() == 3
        assert config.get_table_row_limit() == 50
        assert config.get_request_timeout() == 30.0

    def test_constants(self):
        assert METRIC_ORDER == ["valor_mil_reais", "area_ha", "producao_t"]
        assert len(UF_ALL) == 27
        assert "SP" in UF_ALL


class TestLoading:
    def test_yaml_overrides_are_merged(self, tmp_path, monkeypatch):
        monkeypatch.delenv(API_URL_ENV_VAR, raising=False)
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"api": {"base_url": "http://stats.example/"}, "refinement": {"max_attempts": 5}}))

        config = ConfigManager(str(path))

        assert config.get_api_base_url() == "http://stats.example"
        assert config.get_max_refinement_attempts() == 5
        assert config.get("api.timeout") == 30

    def test_defaults_are_not_mutated(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"api": {"base_url": "http://other"}}))

        ConfigManager(str(path))

        assert DEFAULT_CONFIG["api"]["base_url"] == "http://localhost:8000"

    def test_broken_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("api: [unclosed")

        config = ConfigManager(str(path))

        assert config.get("api.base_url") == "http://localhost:8000"

    def test_environment_overrides_url(self, tmp_path, monkeypatch):
        monkeypatch.setenv(API_URL_ENV_VAR, "http://env.example:9000/")
        config = ConfigManager(str(tmp_path / "config.yml"))
        assert config.get_api_base_url() == "http://env.example:9000"


class TestAccessors:
    def test_dot_notation_set_and_get(self, tmp_path):
        config = ConfigManager(str(tmp_path / "config.yml"))
        config.set("ui.show_debug_info", "yes")
        assert config.get_bool("ui.show_debug_info") is True
        assert config.get("missing.key", "fallback") == "fallback"

    def test_typed_getters_fall_back(self, tmp_path):
        config = ConfigManager(str(tmp_path / "config.yml"))
        config.set("refinement.max_attempts", "many")
        assert config.get_int("refinement.max_attempts", 3) == 3
        assert config.get_float("api.base_url", 1.5) == 1.5

    def test_negative_budget_is_clamped(self, tmp_path):
        config = ConfigManager(str(tmp_path / "config.yml"))
        config.set("refinement.max_attempts", -2)
        assert config.get_max_refinement_attempts() == 0

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "config.yml"
        config = ConfigManager(str(path))
        config.set("dashboard.table_row_limit", 20)
        assert config.save()
        assert ConfigManager(str(path)).get_table_row_limit() == 20
