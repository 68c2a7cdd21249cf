from enum import Enum

from tortoise import fields

from ...common.models import TimestampMixin, generate_ksuid


class OrderStatus(str, Enum):
    PLACED = "Placed"
    PREPARING = "Preparing"
    DELIVERED = "Delivered"
    # Not assigned anywhere yet; reports count it as 0.
    CANCELLED = "Cancelled"


class Order(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    total = fields.DecimalField(max_digits=12, decimal_places=3, default=0)
    # Plain CharField so that filtering on an unknown status simply matches nothing
    status = fields.CharField(max_length=50, default=OrderStatus.PLACED.value, db_index=True)

    user: fields.ForeignKeyNullableRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="orders", on_delete=fields.SET_NULL, null=True
    )

    items: fields.ReverseRelation["OrderItem"]

    def __str__(self):
        return f"Order {self.public_id} - Status: {self.status} - Total: {self.total}"

    class Meta:
        table = "orders"


class OrderItem(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    order: fields.ForeignKeyRelation[Order] = fields.ForeignKeyField(
        "models.Order",
        related_name="items",
        on_delete=fields.CASCADE,
    )

    name = fields.CharField(max_length=255)
    quantity = fields.IntField(default=1)
    price = fields.DecimalField(max_digits=12, decimal_places=3)

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    class Meta:
        table = "order_items"
        ordering = ["id"]
