from churchfinder.models.church import Church, ServiceTime, church_languages
from churchfinder.models.language import Language
from churchfinder.models.user import User
from churchfinder.models.favorite import Favorite
from churchfinder.models.check_in import CheckIn
from churchfinder.models.claim import ChurchClaim

# This makes it easy to import all models at once
__all__ = ['Church', 'ServiceTime', 'church_languages', 'Language', 'User', 'Favorite', 'CheckIn', 'ChurchClaim']
