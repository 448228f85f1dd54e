# storefront/repos/order_repo.py
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zapis w transakcji prowadzonej przez OrderService
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(
            OrderModel,
            order_id,
            options=[selectinload(OrderModel.items)],
            populate_existing=True,
        )

    def list_orders(self, user_id: int | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.items))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def count_by_status(self) -> Dict[str, int]:
        stmt = select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
        return {status: count for status, count in self.db.execute(stmt).all()}

    def paid_revenue(self) -> int:
        stmt = select(func.coalesce(func.sum(OrderModel.total_amount), 0)).where(
            OrderModel.payment_status == "PAID"
        )
        return int(self.db.execute(stmt).scalar_one())

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.commit()
        return order
