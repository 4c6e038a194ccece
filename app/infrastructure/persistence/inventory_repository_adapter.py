from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional

from app.domain.exceptions import NotFound
from app.domain.ports.inventory_repository import InventoryRepository
from app.domain.models.inventory import InventoryItem
from .models import ProductoInventario


class SQLAlchemyInventoryRepository(InventoryRepository):
    def __init__(self, db: Session):
        self.db = db

    def _to_item(self, row: ProductoInventario) -> InventoryItem:
        return InventoryItem(
            id=row.id,
            lot=row.lote,
            name=row.nombre,
            quantity=row.cantidad,
            unit=row.unidad,
            expiration=row.vencimiento,
        )

    def find_by_id(self, item_id: str) -> Optional[InventoryItem]:
        row = self.db.query(ProductoInventario).filter(ProductoInventario.id == item_id).first()
        return self._to_item(row) if row else None

    def list_items(self, search: Optional[str] = None) -> List[InventoryItem]:
        query = self.db.query(ProductoInventario)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                ProductoInventario.nombre.ilike(pattern),
                ProductoInventario.lote.ilike(pattern),
            ))
        return [self._to_item(row) for row in query.order_by(ProductoInventario.vencimiento).all()]

    def save(self, item: InventoryItem) -> InventoryItem:
        row = self.db.query(ProductoInventario).filter(ProductoInventario.id == item.id).first()
        if row is None:
            row = ProductoInventario(id=item.id)
            self.db.add(row)
        row.lote = item.lot
        row.nombre = item.name
        row.cantidad = item.quantity
        row.unidad = item.unit
        row.vencimiento = item.expiration
        self.db.flush()
        return self._to_item(row)

    def delete(self, item_id: str) -> None:
        row = self.db.query(ProductoInventario).filter(ProductoInventario.id == item_id).first()
        if row is None:
            raise NotFound("El producto especificado no existe.")
        self.db.delete(row)
        self.db.flush()
