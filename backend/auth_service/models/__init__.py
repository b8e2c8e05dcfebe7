from auth_service.models.credential import Credential
from auth_service.models.refresh_token import RefreshToken

__all__ = [
    "Credential",
    "RefreshToken",
]
