from backoffice.db.models.user import User
from backoffice.db.models.client import Client
from backoffice.db.models.visa import Visa
from backoffice.db.models.property import Property
from backoffice.db.models import events  # noqa: F401  registers mapper events

# Export all models
__all__ = [
    'User',
    'Client',
    'Visa',
    'Property',
]
