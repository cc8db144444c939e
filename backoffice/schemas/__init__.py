from backoffice.schemas.user import User, UserCreate, UserUpdate, UserFilters
from backoffice.schemas.client import Client, ClientCreate, ClientUpdate, ClientFilters, ClientStats
from backoffice.schemas.visa import Visa, VisaCreate, VisaUpdate, VisaFilters
from backoffice.schemas.property import Property, PropertyCreate, PropertyUpdate, PropertyFilters
from backoffice.schemas.auth import Token, TokenPayload, ChangePassword
from backoffice.schemas.pagination import Page, PageInfo
from backoffice.schemas.response import ApiResponse, api_response

# Export all schemas
__all__ = [
    'User', 'UserCreate', 'UserUpdate', 'UserFilters',
    'Client', 'ClientCreate', 'ClientUpdate', 'ClientFilters', 'ClientStats',
    'Visa', 'VisaCreate', 'VisaUpdate', 'VisaFilters',
    'Property', 'PropertyCreate', 'PropertyUpdate', 'PropertyFilters',
    'Token', 'TokenPayload', 'ChangePassword',
    'Page', 'PageInfo',
    'ApiResponse', 'api_response',
]
