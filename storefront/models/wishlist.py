from storefront import db
from datetime import datetime

class WishlistItem(db.Model):
    __tablename__ = 'wishlist_items'
    __table_args__ = (db.UniqueConstraint('user_id', 'product_id', name='uq_wishlist_user_product'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(200))
    price = db.Column(db.Float)
    image = db.Column(db.String(500))
    category = db.Column(db.String(100))
    added_at = db.Column(db.DateTime, default=datetime.utcnow)
