"""Tests for CSV import functionality."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from conftest import utc
from shiftops.domain.models import Base, Location, Organization
from shiftops.domain.repositories import (
    AssignmentRepository,
    EmployeeRepository,
    ShiftRepository,
    TaskRepository,
)
from shiftops.io.import_csv import (
    import_assignments_csv,
    import_employees_csv,
    import_shifts_csv,
    import_tasks_csv,
)
from shiftops.services.timeutils import parse_instant


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    session.add_all([Organization(id="o1", name="Harbour Cafe"), Location(id="l1", org_id="o1", name="Pier")])
    session.commit()
    yield session
    session.close()


def test_import_employees_csv(db_session, tmp_path):
    """Test importing employees from CSV."""
    csv_content = """id,org_id,display_name,skills,availability,seniority_rank,active
e1,o1,Ana,forklift; first_aid,"{""mon"": [[""09:00"", ""17:00""]]}",5,TRUE
e2,o1,Ben,,,,FALSE
"""
    csv_file = tmp_path / "employees.csv"
    csv_file.write_text(csv_content)

    count = import_employees_csv(db_session, csv_file)
    assert count == 2
    assert len(EmployeeRepository.get_all(db_session)) == 2

    ana = EmployeeRepository.get_by_id(db_session, "e1")
    assert ana.skills == ["forklift", "first_aid"]
    assert ana.seniority_rank == 5
    assert ana.active is True
    record = EmployeeRepository.to_record(ana)
    assert record.availability == {"mon": [("09:00", "17:00")]}

    ben = EmployeeRepository.get_by_id(db_session, "e2")
    assert ben.skills == []
    assert ben.availability_rules is None
    assert ben.active is False


def test_import_shifts_csv_converts_offsets_to_utc(db_session, tmp_path):
    """Test importing shifts from CSV."""
    csv_content = """id,location_id,department_id,name,start_at,end_at,required_skills,is_open
s1,l1,,Morning,2025-11-24T09:00:00+01:00,2025-11-24T17:00:00+01:00,forklift,yes
s2,l1,,Late,2025-11-24T18:00:00,2025-11-24T22:00:00,,
"""
    csv_file = tmp_path / "shifts.csv"
    csv_file.write_text(csv_content)

    assert import_shifts_csv(db_session, csv_file) == 2

    s1 = ShiftRepository.get_by_id(db_session, "s1")
    assert parse_instant(s1.start_at) == utc(2025, 11, 24, 8)
    assert s1.required_skills == ["forklift"]
    assert s1.is_open is True
    assert s1.department_id is None
    s2 = ShiftRepository.get_by_id(db_session, "s2")
    assert parse_instant(s2.start_at) == utc(2025, 11, 24, 18)
    assert s2.is_open is False


def test_import_shifts_csv_rejects_reversed_times(db_session, tmp_path):
    csv_file = tmp_path / "shifts.csv"
    csv_file.write_text(
        "id,location_id,start_at,end_at\n"
        "s1,l1,2025-11-24T17:00:00Z,2025-11-24T09:00:00Z\n"
    )
    with pytest.raises(ValueError, match="ends before it starts"):
        import_shifts_csv(db_session, csv_file)


def test_import_assignments_csv(db_session, tmp_path):
    (tmp_path / "shifts.csv").write_text(
        "id,location_id,start_at,end_at\n"
        "s1,l1,2025-11-24T09:00:00Z,2025-11-24T17:00:00Z\n"
    )
    (tmp_path / "employees.csv").write_text("id,org_id,display_name\ne1,o1,Ana\n")
    import_shifts_csv(db_session, tmp_path / "shifts.csv")
    import_employees_csv(db_session, tmp_path / "employees.csv")

    csv_file = tmp_path / "assignments.csv"
    csv_file.write_text("shift_id,employee_id,status\ns1,e1,\n")
    assert import_assignments_csv(db_session, csv_file) == 1
    assert len(AssignmentRepository.get_all(db_session)) == 1

    [assignment] = AssignmentRepository.get_active_by_employee(db_session, "e1")
    assert assignment.status == "assigned"


def test_import_assignments_csv_rejects_unknown_status(db_session, tmp_path):
    csv_file = tmp_path / "assignments.csv"
    csv_file.write_text("shift_id,employee_id,status\ns1,e1,maybe\n")
    with pytest.raises(ValueError, match="Unknown assignment status"):
        import_assignments_csv(db_session, csv_file)


def test_import_tasks_csv(db_session, tmp_path):
    csv_content = """id,location_id,title,due_at,criticality,status,completed_at
t1,l1,Open tills,2025-11-24T08:00:00Z,4,done,2025-11-24T07:55:00Z
t2,l1,Clean grill,2025-11-24T22:00:00Z,,,
"""
    csv_file = tmp_path / "tasks.csv"
    csv_file.write_text(csv_content)

    assert import_tasks_csv(db_session, csv_file, now=utc(2025, 11, 24, 22)) == 2

    pending = TaskRepository.get_pending(db_session)
    assert [t.id for t in pending] == ["t2"]
    assert pending[0].criticality == 3
    assert pending[0].window_end is None
    # due now: 0.4 * 1.0 time decay + 0.3 * 0.6 criticality
    assert pending[0].urgency_score == pytest.approx(0.58)

    due = TaskRepository.get_due_between(db_session, utc(2025, 11, 24), utc(2025, 11, 25))
    assert [t.id for t in due] == ["t1", "t2"]
    assert due[0].urgency_score is None  # already done
