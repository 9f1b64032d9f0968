"""Tests für das Konfigurationssystem und den Demo-Datengenerator."""

from pathlib import Path

import pytest

from config.defaults import (
    COMBINATIONS,
    O_LEVEL_CLASS_SUBJECTS,
    SUBJECT_CATALOGUE,
    default_config,
)
from config.manager import ConfigManager
from config.schema import AppConfig, DemoConfig
from data.demo_data import DemoDataGenerator
from models.subject import EducationLevel


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_config_valid(self):
        config = default_config()
        assert config.school_name == "Demo Secondary School"
        assert config.data_file == Path("output/school_data.json")
        assert config.demo.seed == 42

    def test_combinations_reference_catalogue(self):
        """Alle Kombinationsfächer existieren im Fächerkatalog."""
        for code, (_, principal, compulsory) in COMBINATIONS.items():
            for subject_id in principal + compulsory:
                assert subject_id in SUBJECT_CATALOGUE, f"{code}: {subject_id} fehlt"

    def test_combination_principals_are_a_level_capable(self):
        for code, (_, principal, _) in COMBINATIONS.items():
            for subject_id in principal:
                assert SUBJECT_CATALOGUE[subject_id]["level"] != EducationLevel.O_LEVEL, code

    def test_o_level_subjects_in_catalogue(self):
        for subject_id in O_LEVEL_CLASS_SUBJECTS:
            assert subject_id in SUBJECT_CATALOGUE

    def test_general_studies_compulsory_for_a_level_only(self):
        gs = SUBJECT_CATALOGUE["gs"]
        assert gs["compulsory"]
        assert gs["level"] == EducationLevel.A_LEVEL


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_lock_timeout_must_be_positive(self):
        with pytest.raises(Exception):
            AppConfig(lock_timeout_seconds=0)

    def test_streams_bounds(self):
        with pytest.raises(Exception):
            DemoConfig(streams_per_form=0)

    def test_invalid_log_level(self):
        with pytest.raises(Exception):
            AppConfig(log_level="LOUD")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        config = default_config().model_copy(update={"school_name": "Kibo Secondary"})
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "app_config.yaml"
        mgr.save(config)

        loaded = mgr.load()
        assert loaded.school_name == "Kibo Secondary"
        assert loaded.demo == config.demo
        assert loaded.data_file == config.data_file

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "app_config.yaml"
        mgr.save(default_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "─── Demo-Daten ───" in text
        assert "Fächerzuordnung" in text

    def test_first_run_check(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True
        mgr.save(default_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "not_there.yaml")

    def test_load_or_default_without_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.load_or_default() == default_config()

    def test_invalid_yaml_content_raises(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("lock_timeout_seconds: -3\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)


# ─── DEMO-DATEN ───────────────────────────────────────────────────────────────

class TestDemoData:
    def test_reproducible(self):
        config = default_config()
        a = DemoDataGenerator(config, seed=7).generate()
        b = DemoDataGenerator(config, seed=7).generate()
        assert a.model_dump() == b.model_dump()

    def test_class_counts(self):
        config = default_config()
        data = DemoDataGenerator(config).generate()
        streams = config.demo.streams_per_form
        assert len(data.classes) == 6 * streams
        assert sum(1 for c in data.classes if c.is_a_level) == 2 * streams

    def test_a_level_classes_have_combinations(self):
        data = DemoDataGenerator(default_config()).generate()
        for cls in data.classes:
            if cls.is_a_level:
                assert cls.combination_ids
            else:
                assert not cls.combination_ids

    def test_both_combination_fields_used(self):
        data = DemoDataGenerator(default_config()).generate()
        a_level = [c for c in data.classes if c.is_a_level]
        assert any(c.subject_combination for c in a_level)
        assert any(c.subject_combinations for c in a_level)

    def test_assignments_only_to_qualified_teachers(self):
        data = DemoDataGenerator(default_config()).generate()
        for cls in data.classes:
            for row in cls.subjects:
                if row.teacher:
                    assert data.teacher(row.teacher).is_qualified_for(row.subject)

    def test_unique_teacher_ids(self):
        data = DemoDataGenerator(default_config()).generate()
        ids = [t.id for t in data.teachers]
        assert len(ids) == len(set(ids))

    def test_contains_retired_subject_reference(self):
        data = DemoDataGenerator(default_config()).generate()
        assert "agric" in data.school_class("f1a").subject_ids
        assert data.subject("agric") is None
