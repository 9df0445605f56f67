from clinic_booking.models.generated import Professionals, Services


def _columns(model) -> set[str]:
    return {column.name for column in model.__table__.columns}


def test_catalog_tables_hold_only_scheduling_fields() -> None:
    assert _columns(Professionals) == {"id", "name", "is_active"}
    assert _columns(Services) == {"id", "name", "duration", "is_active"}
