from .user import User
from .property import Property
from .favorite import Favorite
from .recommendation import Recommendation

__all__ = ['User', 'Property', 'Favorite', 'Recommendation']
