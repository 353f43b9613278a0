import logging
from typing import Any, Dict

from common.auth.auth_service import AuthService
from common.config.conts import USER_ENTITY
from common.exception.exceptions import ValidationException
from common.service.service import EntityServiceImpl

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PROFILE_FIELDS = ("name", "email", "phone", "street", "apartment", "zip", "city", "country")


def to_public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k != "passwordHash"}


async def register_user(entity_service: EntityServiceImpl, auth_service: AuthService,
                        data: Dict[str, Any], allow_admin: bool = False) -> Dict[str, Any]:
    """
    Creates a user with a bcrypt password hash.
    The isAdmin flag is only honoured when the caller is allowed to grant it.
    """
    email = (data.get("email") or "").strip().lower()
    if not email or not data.get("password"):
        raise ValidationException("Email and password are required")

    existing = await entity_service.get_single_item_by_condition(USER_ENTITY, {"email": email})
    if existing:
        raise ValidationException("The email is already in use!")

    user = {field: data.get(field) for field in PROFILE_FIELDS}
    user["email"] = email
    user["isAdmin"] = allow_admin and bool(data.get("isAdmin", False))
    user["passwordHash"] = auth_service.hash_password(data["password"])
    user["id"] = await entity_service.add_item(USER_ENTITY, user)
    logger.info(f"Registered user {user['id']}")
    return to_public_user(user)


async def authenticate_user(entity_service: EntityServiceImpl, auth_service: AuthService,
                            email: str, password: str) -> Dict[str, Any]:
    user = await entity_service.get_single_item_by_condition(USER_ENTITY, {"email": (email or "").strip().lower()})
    if not user:
        raise ValidationException("User not found!")
    if not auth_service.check_password(password, user.get("passwordHash")):
        raise ValidationException("Incorrect password!")
    return {
        "message": "User Authenticated",
        "user": user["email"],
        "token": auth_service.issue_token(user),
    }
