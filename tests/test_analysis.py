"""Tests für Zuweisungs-Diff und Konsistenz-Check."""

import json

from analysis.consistency import ConsistencyChecker, ValidationReport
from analysis.diff import diff_assignments
from config.defaults import default_config
from data.demo_data import DemoDataGenerator
from models.combination import SubjectCombination
from models.school_class import SchoolClass, SubjectAssignment
from models.school_data import SchoolData
from models.subject import EducationLevel, Subject
from models.teacher import Teacher


# ─── DIFF ─────────────────────────────────────────────────────────────────────

class TestDiffAssignments:
    def test_no_changes(self):
        diff = diff_assignments({"phy": "KIM"}, {"phy": "KIM"})
        assert diff.is_empty()
        assert diff.summary() == "keine Änderungen"

    def test_classifies_transitions(self):
        before = {"phy": None, "chem": "KIM", "bio": "LYI", "old": None}
        after = {"phy": "KIM", "chem": "MUS", "bio": None, "gs": None, "hist": "KIM"}
        diff = diff_assignments(before, after)
        kinds = {c.subject_id: c.kind for c in diff.changes}
        assert kinds == {
            "phy": "assigned",
            "chem": "reassigned",
            "bio": "cleared",
            "gs": "added",
            "hist": "assigned",
            "old": "removed",
        }

    def test_sorted_by_subject(self):
        diff = diff_assignments({}, {"b": None, "a": None})
        assert [c.subject_id for c in diff.changes] == ["a", "b"]

    def test_summary_counts(self):
        diff = diff_assignments({"phy": None}, {"phy": "KIM", "chem": None, "bio": None})
        assert diff.summary() == "2 neu, 1 besetzt"

    def test_to_json(self):
        diff = diff_assignments({"phy": "KIM"}, {"phy": None})
        payload = json.loads(diff.to_json())
        assert payload["changes"] == [
            {"subject_id": "phy", "kind": "cleared", "old_teacher": "KIM", "new_teacher": None},
        ]


# ─── KONSISTENZ ───────────────────────────────────────────────────────────────

def _make_school_data() -> SchoolData:
    a = EducationLevel.A_LEVEL
    return SchoolData(
        subjects=[
            Subject(id="phy", name="Physics", code="PHY"),
            Subject(id="chem", name="Chemistry", code="CHEM"),
            Subject(id="gs", name="General Studies", code="GS", education_level=a,
                    is_compulsory=True),
        ],
        combinations=[
            SubjectCombination(id="pc", name="PC", code="PC", subjects=["phy", "chem"]),
            SubjectCombination(id="old", name="Alt", code="OLD", subjects=["phy", "ghost"],
                               is_active=False),
        ],
        classes=[
            SchoolClass(id="f5a", name="Form 5 A", education_level=a,
                        subject_combinations=["pc"],
                        subjects=[SubjectAssignment(subject="phy", teacher="KIM")]),
        ],
        teachers=[Teacher(id="KIM", name="Kimaro, Neema", subjects=["phy"])],
    )


def _checks(report: ValidationReport) -> set[str]:
    return {v.check for v in report.violations}


class TestConsistencyChecker:
    def test_clean_data(self):
        report = ConsistencyChecker().check(_make_school_data())
        # nur die verwaiste Referenz in der (nicht genutzten) Kombination "old"
        assert report.is_valid
        assert _checks(report) == {"stale_combination_subject"}

    def test_stale_class_subject_is_warning(self):
        data = _make_school_data()
        data.classes[0].subjects.append(SubjectAssignment(subject="agric"))
        report = ConsistencyChecker().check(data)
        assert report.is_valid
        assert "stale_subject_reference" in _checks(report)

    def test_unknown_teacher_is_error(self):
        data = _make_school_data()
        data.classes[0].subjects.append(SubjectAssignment(subject="chem", teacher="GHOST"))
        report = ConsistencyChecker().check(data)
        assert not report.is_valid
        assert [v.check for v in report.errors] == ["unknown_teacher"]

    def test_combination_problems(self):
        data = _make_school_data()
        data.classes.append(SchoolClass(id="f2a", name="Form 2 A",
                                        education_level=EducationLevel.O_LEVEL,
                                        subject_combination="pc"))
        data.classes.append(SchoolClass(id="f6a", name="Form 6 A",
                                        education_level=EducationLevel.A_LEVEL,
                                        subject_combinations=["old", "missing"]))
        checks = _checks(ConsistencyChecker().check(data))
        assert {"combination_on_o_level", "inactive_combination",
                "unknown_combination"} <= checks

    def test_unqualified_teacher_warning(self):
        data = _make_school_data()
        data.classes[0].subjects.append(SubjectAssignment(subject="chem", teacher="KIM"))
        report = ConsistencyChecker().check(data)
        assert report.is_valid
        assert "unqualified_teacher" in _checks(report)

    def test_demo_data_has_no_errors(self):
        data = DemoDataGenerator(default_config()).generate()
        report = ConsistencyChecker().check(data)
        assert report.is_valid
        assert "stale_subject_reference" in _checks(report)

    def test_print_rich_runs(self, capsys):
        data = _make_school_data()
        data.classes[0].subjects.append(SubjectAssignment(subject="chem", teacher="GHOST"))
        ConsistencyChecker().check(data).print_rich()
        out = capsys.readouterr().out
        assert "Konsistenz-Check" in out
