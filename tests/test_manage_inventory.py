from datetime import date

import pytest

from app.application.use_cases.manage_inventory import InventoryItemData, ManageInventoryUseCase
from app.domain.exceptions import NotFound, Unauthenticated
from app.infrastructure.persistence.inventory_repository_adapter import SQLAlchemyInventoryRepository

TODAY = date(2024, 6, 1)


@pytest.fixture
def use_case(db_session):
    return ManageInventoryUseCase(SQLAlchemyInventoryRepository(db_session), today=lambda: TODAY)


def item(name, quantity, expiration, lot="L-1"):
    return InventoryItemData(lot=lot, name=name, quantity=quantity, unit="litros", expiration=expiration)


def test_flags_low_stock_and_expiring(use_case, caller):
    use_case.create(caller, item("Cipermetrina", 4, date(2025, 1, 1)))
    use_case.create(caller, item("Deltametrina", 50, date(2024, 6, 20)))
    use_case.create(caller, item("Fipronil", 10, date(2024, 7, 1)))

    views = {v.name: v for v in use_case.list(caller)}

    assert views["Cipermetrina"].low_stock and not views["Cipermetrina"].expiring
    assert views["Deltametrina"].expiring and views["Deltametrina"].days_to_expire == 19
    # 10 unidades no es poca existencia; 30 días exactos sí es "por vencer"
    assert not views["Fipronil"].low_stock
    assert views["Fipronil"].expiring

    assert [v.name for v in use_case.list(caller, low_stock=True)] == ["Cipermetrina"]
    assert {v.name for v in use_case.list(caller, expiring=True)} == {"Deltametrina", "Fipronil"}
    assert [v.name for v in use_case.list(caller, search="fipro")] == ["Fipronil"]


def test_update_and_delete(use_case, caller):
    created = use_case.create(caller, item("Cipermetrina", 4, date(2025, 1, 1)))

    updated = use_case.update(caller, created.id, item("Cipermetrina", 40, date(2025, 1, 1)))
    assert not updated.low_stock
    assert use_case.get(caller, created.id).quantity == 40

    use_case.delete(caller, created.id)
    with pytest.raises(NotFound):
        use_case.get(caller, created.id)
    with pytest.raises(NotFound):
        use_case.update(caller, created.id, item("X", 1, TODAY))


def test_requires_caller(use_case):
    with pytest.raises(Unauthenticated):
        use_case.list(None)
