"""Tests für die Kommandozeile (click.testing.CliRunner)."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli
from models.combination import SubjectCombination
from models.school_class import SchoolClass, SubjectAssignment
from models.school_data import SchoolData
from models.subject import EducationLevel, Subject
from models.teacher import Teacher


def _write_school_data(path: Path) -> Path:
    """Kleiner Datensatz: Form 5 A (PCM) mit Physik bei TA."""
    a, both = EducationLevel.A_LEVEL, EducationLevel.BOTH
    SchoolData(
        subjects=[
            Subject(id="phy", name="Physics", code="PHY", education_level=both),
            Subject(id="chem", name="Chemistry", code="CHEM", education_level=both),
            Subject(id="amath", name="Advanced Mathematics", code="AMATH", education_level=a),
            Subject(id="gs", name="General Studies", code="GS", education_level=a,
                    is_compulsory=True),
            Subject(id="hist", name="History", code="HIST", education_level=both),
        ],
        combinations=[
            SubjectCombination(id="pcm", name="PCM", code="PCM",
                               subjects=["phy", "chem", "amath"],
                               compulsory_subjects=["gs"]),
        ],
        classes=[
            SchoolClass(id="f5a", name="Form 5 A", education_level=a, form=5,
                        subjects=[SubjectAssignment(subject="phy", teacher="TA"),
                                  SubjectAssignment(subject="amath")],
                        subject_combination="pcm"),
        ],
        teachers=[
            Teacher(id="TA", name="Mushi, Amani", subjects=["phy", "amath"]),
            Teacher(id="TB", name="Lyimo, Neema", subjects=["chem"]),
        ],
    ).save_json(path)
    return path


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return _write_school_data(tmp_path / "school_data.json")


def _run(data_file: Path, *args: str):
    return CliRunner().invoke(cli, ["--data", str(data_file), *args])


def _assignments(data_file: Path) -> dict:
    return SchoolData.load_json(data_file).school_class("f5a").assignment_map()


# ─── LESEN ────────────────────────────────────────────────────────────────────

class TestReadCommands:
    def test_missing_data_file(self, tmp_path: Path):
        result = _run(tmp_path / "nope.json", "classes")
        assert result.exit_code == 1
        assert "Keine Datendatei" in result.output

    def test_classes(self, data_file: Path):
        result = _run(data_file, "classes")
        assert result.exit_code == 0
        assert "f5a" in result.output

    def test_subjects(self, data_file: Path):
        result = _run(data_file, "subjects", "f5a")
        assert result.exit_code == 0
        for subject_id in ("phy", "chem", "amath", "gs"):
            assert subject_id in result.output
        assert "hist" not in result.output

    def test_subjects_for_teacher(self, data_file: Path):
        result = _run(data_file, "subjects", "f5a", "--teacher", "TB")
        assert result.exit_code == 0
        assert "chem" in result.output
        assert "amath" not in result.output

    def test_unknown_class(self, data_file: Path):
        result = _run(data_file, "subjects", "f9z")
        assert result.exit_code == 1
        assert "Nicht gefunden" in result.output

    def test_teacher_classes(self, data_file: Path):
        result = _run(data_file, "teacher-classes", "TA")
        assert result.exit_code == 0
        assert "Form 5 A" in result.output

    def test_teacher_without_classes(self, data_file: Path):
        result = _run(data_file, "teacher-classes", "TB")
        assert result.exit_code == 0
        assert "keiner Klasse" in result.output


# ─── SCHREIBEN ────────────────────────────────────────────────────────────────

class TestWriteCommands:
    def test_assign_keeps_other_subjects(self, data_file: Path):
        result = _run(data_file, "assign", "f5a", "chem=TB")
        assert result.exit_code == 0, result.output
        assert "1 besetzt" in result.output
        assert _assignments(data_file) == {"phy": "TA", "amath": None, "chem": "TB"}

    def test_assign_dash_clears_teacher(self, data_file: Path):
        result = _run(data_file, "assign", "f5a", "phy=-")
        assert result.exit_code == 0, result.output
        assert _assignments(data_file)["phy"] is None

    def test_assign_subject_outside_class(self, data_file: Path):
        result = _run(data_file, "assign", "f5a", "hist=TA")
        assert result.exit_code == 1
        assert "Ungültige Zuweisung" in result.output
        assert "hist" not in _assignments(data_file)

    def test_assign_bad_pair_is_usage_error(self, data_file: Path):
        result = _run(data_file, "assign", "f5a", "chem")
        assert result.exit_code == 2

    def test_self_assign(self, data_file: Path):
        result = _run(data_file, "self-assign", "f5a", "TB", "chem")
        assert result.exit_code == 0, result.output
        assert _assignments(data_file)["chem"] == "TB"

    def test_self_assign_unqualified(self, data_file: Path):
        result = _run(data_file, "self-assign", "f5a", "TB", "phy")
        assert result.exit_code == 1
        assert _assignments(data_file)["phy"] == "TA"

    def test_add_subjects(self, data_file: Path):
        result = _run(data_file, "add-subjects", "f5a", "hist", "unknown")
        assert result.exit_code == 0, result.output
        assignments = _assignments(data_file)
        assert assignments["hist"] is None
        assert "unknown" not in assignments

    def test_sync_then_noop(self, data_file: Path):
        result = _run(data_file, "sync", "f5a")
        assert result.exit_code == 0, result.output
        assert set(_assignments(data_file)) == {"phy", "amath", "chem", "gs"}

        again = _run(data_file, "sync", "f5a")
        assert "Keine Änderungen" in again.output

    def test_assign_all(self, data_file: Path):
        result = _run(data_file, "assign-all", "f5a", "TB")
        assert result.exit_code == 0, result.output
        assert _assignments(data_file) == {"phy": "TB", "amath": "TB"}

    def test_class_teachers(self, data_file: Path):
        result = _run(data_file, "class-teachers", "f5a")
        assert result.exit_code == 0, result.output
        assert "TA" in result.output
        assert "TB" not in result.output

    def test_authorized(self, data_file: Path):
        assert _run(data_file, "authorized", "TB", "f5a", "chem").exit_code == 0
        denied = _run(data_file, "authorized", "TB", "f5a", "phy")
        assert denied.exit_code == 1
        assert "nicht unterrichten" in denied.output


# ─── SETUP, GENERATE, VALIDATE ────────────────────────────────────────────────

class TestSetupAndGenerate:
    def test_generate_and_validate(self, tmp_path: Path):
        path = tmp_path / "demo.json"
        result = _run(path, "generate", "--seed", "3")
        assert result.exit_code == 0, result.output
        assert path.exists()

        result = _run(path, "validate")
        assert result.exit_code == 0, result.output
        assert "KONSISTENT" in result.output

    def test_validate_reports_unknown_teacher(self, data_file: Path):
        data = SchoolData.load_json(data_file)
        cls = data.school_class("f5a")
        data.classes[0] = cls.with_assignments({"phy": "GHOST", "amath": None})
        data.save_json(data_file)

        result = _run(data_file, "validate")
        assert result.exit_code == 1
        assert "unknown_teacher" in result.output

    def test_setup_writes_config(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["setup", "--school-name", "Kibo Secondary"])
            assert result.exit_code == 0, result.output
            config_file = Path("config/app_config.yaml")
            assert config_file.exists()
            assert "Kibo Secondary" in config_file.read_text(encoding="utf-8")

            shown = runner.invoke(cli, ["config", "show"])
            assert "Kibo Secondary" in shown.output
