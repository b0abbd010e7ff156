"""
Session shopping cart.

The cart never holds two lines for the same product id: adding a product that
is already present increments that line's quantity.
"""
import logging
from dataclasses import dataclass, asdict
from typing import List, Optional

from flask import session

from storefront.services.error_handler import CartError

logger = logging.getLogger(__name__)

SESSION_KEY = 'cart'


@dataclass
class CartLine:
    id: int
    name: str
    price: float
    quantity: int = 1
    image: Optional[str] = None
    category: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return (self.price or 0.0) * self.quantity

    def to_dict(self):
        data = asdict(self)
        data['subtotal'] = round(self.subtotal, 2)
        return data

    @classmethod
    def from_product(cls, product, quantity=1):
        return cls(
            id=product.id,
            name=product.name,
            price=product.price or 0.0,
            quantity=quantity,
            image=product.image,
            category=product.category,
        )


class Cart:
    def __init__(self, lines: List[CartLine] = None):
        self.lines = list(lines or [])

    def __len__(self):
        return len(self.lines)

    def _check_index(self, index):
        if not 0 <= index < len(self.lines):
            raise CartError(f'No cart line at position {index}')

    def find(self, product_id) -> int:
        for i, line in enumerate(self.lines):
            if line.id == product_id:
                return i
        return -1

    def add(self, product, quantity=1) -> CartLine:
        if quantity <= 0:
            raise CartError('Quantity must be positive')

        index = self.find(product.id)
        if index > -1:
            line = self.lines[index]
            line.quantity += quantity
        else:
            line = CartLine.from_product(product, quantity)
            self.lines.append(line)
        return line

    def remove(self, index) -> CartLine:
        self._check_index(index)
        return self.lines.pop(index)

    def set_quantity(self, index, quantity) -> Optional[CartLine]:
        """Set a line's quantity; 0 removes the line."""
        self._check_index(index)
        if quantity < 0:
            raise CartError('Quantity cannot be negative')
        if quantity == 0:
            self.remove(index)
            return None
        self.lines[index].quantity = quantity
        return self.lines[index]

    def decrement(self, index) -> Optional[CartLine]:
        self._check_index(index)
        return self.set_quantity(index, self.lines[index].quantity - 1)

    def clear(self):
        self.lines = []

    @property
    def total(self) -> float:
        return round(sum(line.subtotal for line in self.lines), 2)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def snapshot(self):
        """Plain-dict copy of the lines, as stored on an order."""
        return [line.to_dict() for line in self.lines]

    def to_dict(self):
        return {
            'items': self.snapshot(),
            'total': self.total,
            'item_count': self.item_count,
        }


class SessionCartStore:
    """Loads and saves the cart in the Flask session"""

    def load(self) -> Cart:
        raw = session.get(SESSION_KEY, [])
        lines = []
        for item in raw:
            try:
                lines.append(CartLine(**item))
            except TypeError:
                logger.warning(f'Dropping malformed cart line from session: {item!r}')
        return Cart(lines)

    def save(self, cart: Cart):
        session[SESSION_KEY] = [asdict(line) for line in cart.lines]
        session.modified = True

    def clear(self):
        session.pop(SESSION_KEY, None)


cart_store = SessionCartStore()
