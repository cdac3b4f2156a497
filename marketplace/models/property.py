from datetime import datetime
from marketplace import db

# Display ids start at PROP1000 for the first listing
DISPLAY_ID_PREFIX = 'PROP'
DISPLAY_ID_BASELINE = 1000

FURNISHED_CHOICES = ('Furnished', 'Unfurnished', 'Semi')
LISTED_BY_CHOICES = ('Builder', 'Owner', 'Agent')
LISTING_TYPE_CHOICES = ('rent', 'sale')


class Property(db.Model):
    __tablename__ = 'properties'
    # AUTOINCREMENT keeps SQLite from reusing the id of a deleted newest row
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(50), nullable=False, index=True)

    # Pricing & Location
    price = db.Column(db.Float, nullable=False, index=True)
    state = db.Column(db.String(100), nullable=False, index=True)
    city = db.Column(db.String(100), nullable=False, index=True)

    # Details
    area_sq_ft = db.Column(db.Float, nullable=False)
    bedrooms = db.Column(db.Integer, nullable=False, index=True)
    bathrooms = db.Column(db.Float, nullable=False, index=True)

    # Pipe-delimited tag strings, e.g. "gym|pool|lift"
    amenities = db.Column(db.Text, nullable=False, default='')
    tags = db.Column(db.Text, nullable=False, default='')

    furnished = db.Column(db.Enum(*FURNISHED_CHOICES, name='furnished_enum', native_enum=False), nullable=False)
    available_from = db.Column(db.Date, nullable=False)
    listed_by = db.Column(db.Enum(*LISTED_BY_CHOICES, name='listed_by_enum', native_enum=False), nullable=False)
    listing_type = db.Column(db.Enum(*LISTING_TYPE_CHOICES, name='listing_type_enum', native_enum=False), nullable=False, index=True)
    color_theme = db.Column(db.String(20), nullable=False, default='#6ab45e')
    rating = db.Column(db.Float, nullable=False, default=3.0)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)

    # Relationships
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    favorites = db.relationship('Favorite', backref='property', cascade='all, delete-orphan')
    recommendations = db.relationship('Recommendation', backref='property',
                                      cascade='all, delete-orphan')

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def display_id(self):
        """Human-facing id derived from the database sequence, e.g. PROP1000"""
        if self.id is None:
            return None
        return f'{DISPLAY_ID_PREFIX}{DISPLAY_ID_BASELINE + self.id - 1}'

    def is_owned_by(self, user_id):
        return self.created_by == user_id

    def to_dict(self):
        return {
            '_id': self.id,
            'id': self.display_id,
            'title': self.title,
            'type': self.type,
            'price': self.price,
            'state': self.state,
            'city': self.city,
            'areaSqFt': self.area_sq_ft,
            'bedrooms': self.bedrooms,
            'bathrooms': self.bathrooms,
            'amenities': self.amenities or '',
            'furnished': self.furnished,
            'availableFrom': self.available_from.isoformat() if self.available_from else None,
            'listedBy': self.listed_by,
            'tags': self.tags or '',
            'colorTheme': self.color_theme,
            'rating': self.rating,
            'isVerified': self.is_verified,
            'listingType': self.listing_type,
            'createdBy': self.created_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Property {self.display_id} {self.title}>'
