from backoffice.core.database import Base
from backoffice.db.models import User, Client, Visa, Property

# All models are imported here so Base.metadata knows every table
