from storefront import db
from datetime import datetime

class SavedCartItem(db.Model):
    """Per-user cart line written from the product detail page"""
    __tablename__ = 'saved_cart_items'
    __table_args__ = (db.UniqueConstraint('user_id', 'product_id', name='uq_saved_cart_user_product'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(200))
    price = db.Column(db.Float)
    image = db.Column(db.String(500))
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'name': self.name,
            'price': self.price,
            'image': self.image,
            'quantity': self.quantity,
            'added_at': self.added_at.isoformat() if self.added_at else None,
        }
