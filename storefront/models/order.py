from storefront import db
from datetime import datetime
import enum

class OrderStatus(str, enum.Enum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    @property
    def label(self):
        return self.value.capitalize()

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup; raises ValueError for unknown statuses."""
        if isinstance(value, cls):
            return value
        normalized = (value or '').strip().lower()
        for status in cls:
            if status.value == normalized:
                return status
        raise ValueError(f'Unknown order status: {value!r}')


# The admin console offers every status from every state, backward moves
# included (e.g. completed -> pending).
ALLOWED_TRANSITIONS = {status: frozenset(OrderStatus) for status in OrderStatus}


def can_transition(current, new):
    new = OrderStatus.parse(new)
    try:
        current = OrderStatus.parse(current)
    except ValueError:
        # Stored free-text statuses outside the enum may move to any status
        return True
    return new in ALLOWED_TRANSITIONS[current]


class Order(db.Model):
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    address = db.Column(db.Text, nullable=False)
    # Point-in-time copy of the cart lines
    cart = db.Column(db.JSON, nullable=False, default=list)
    total = db.Column(db.Float, nullable=False, default=0.0)
    # Free text at the storage layer: checkout writes the label ("Pending"),
    # admin status changes write the lowercase value. Reads go through OrderStatus.parse
    status = db.Column(db.String(50), nullable=False, default=OrderStatus.PENDING.label)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @property
    def status_label(self):
        try:
            return OrderStatus.parse(self.status).label
        except ValueError:
            return self.status

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'address': self.address,
            'cart': self.cart,
            'total': round(self.total or 0.0, 2),
            'status': self.status,
            'status_label': self.status_label,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Order {self.id}>'
