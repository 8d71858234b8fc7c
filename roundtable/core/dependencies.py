"""
Core dependencies for route protection
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from roundtable.database.supabase_client import get_supabase
from roundtable.modules.auth.schemas import CurrentUser
from roundtable.modules.auth.service import AuthService
from supabase import Client

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUser:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)
