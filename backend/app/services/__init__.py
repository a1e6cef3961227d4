from app.services.auth_service import AuthService, auth_service
from app.services.account_service import AccountService, account_service
