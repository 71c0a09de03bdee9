import pytest

from timegate.app.domain.exceptions import DuplicateOrInvalidRecord, PatientNotFound
from timegate.app.domain.models import PatientIn
from timegate.app.services.patients import PatientAdmissionService


def _batch():
    return [
        {"id": 1, "name": "Ana", "age": 34, "gender": "F"},
        {"id": 2, "name": "Ben", "age": 51, "gender": "M"},
        {"id": 3, "name": "Cy", "age": 7, "gender": "M"},
    ]


def test_bulk_load_list_count_admit(session):
    service = PatientAdmissionService(session)
    assert service.bulk_load(_batch()) == 3
    session.commit()

    patients = list(service.list_all())
    assert [p.id for p in patients] == [1, 2, 3]
    assert all(p.admitted is False for p in patients)
    assert service.count_admitted() == 0

    service.admit(2)
    assert service.count_admitted() == 1


def test_list_all_is_lazy_and_resumable(session):
    service = PatientAdmissionService(session)
    service.bulk_load([PatientIn(id=i, name=f"p{i}", age=20, gender="F") for i in (5, 1, 3)])

    scan = service.list_all()
    assert next(scan).id == 1
    assert [p.id for p in scan] == [3, 5]
    assert list(scan) == []
    assert [p.id for p in service.list_all(after=1)] == [3, 5]
    assert [p.id for p in service.list_all(after=1, limit=1)] == [3]


def test_duplicate_within_batch_inserts_nothing(session):
    service = PatientAdmissionService(session)
    batch = _batch() + [{"id": 2, "name": "Dup", "age": 1, "gender": "F"}]

    with pytest.raises(DuplicateOrInvalidRecord) as excinfo:
        service.bulk_load(batch)
    assert excinfo.value.record_id == 2
    assert excinfo.value.duplicate
    session.rollback()
    assert list(service.list_all()) == []


def test_duplicate_of_existing_patient_inserts_nothing(session):
    service = PatientAdmissionService(session)
    service.bulk_load(_batch()[:1])
    session.commit()

    with pytest.raises(DuplicateOrInvalidRecord) as excinfo:
        service.bulk_load([{"id": 9, "name": "New", "age": 2, "gender": "F"}, _batch()[0]])
    assert excinfo.value.record_id == 1
    session.rollback()
    assert [p.id for p in service.list_all()] == [1]


@pytest.mark.parametrize(
    "bad",
    [
        {"id": 4, "name": "", "age": 3, "gender": "F"},
        {"id": 4, "name": "Old", "age": 200, "gender": "F"},
        {"id": 0, "name": "Zero", "age": 3, "gender": "F"},
        {"id": 4, "name": "NoGender", "age": 3},
    ],
)
def test_malformed_record_fails_batch(session, bad):
    service = PatientAdmissionService(session)
    with pytest.raises(DuplicateOrInvalidRecord) as excinfo:
        service.bulk_load(_batch() + [bad])
    assert excinfo.value.record_id == bad["id"]
    assert not excinfo.value.duplicate
    session.rollback()
    assert list(service.list_all()) == []


def test_admit_missing_changes_nothing(session):
    service = PatientAdmissionService(session)
    service.bulk_load(_batch())
    with pytest.raises(PatientNotFound):
        service.admit(99)
    assert service.count_admitted() == 0
