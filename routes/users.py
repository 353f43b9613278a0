import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from quart import Blueprint, jsonify
from quart_schema import validate_request

from app_init.app_init import BeanFactory
from common.config.config import API_URL
from common.config.conts import USER_ENTITY
from common.exception.exceptions import NotFoundException
from common.utils.token import auth_required, get_request_claims
from entity.user.workflow import authenticate_user, register_user, to_public_user

factory = BeanFactory()
entity_service = factory.get_services()["entity_service"]
auth_service = factory.get_services()["auth_service"]

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

users_bp = Blueprint("users", __name__, url_prefix=f"{API_URL}/users")


@dataclass
class RegisterRequest:
    name: str
    email: str
    password: str
    phone: Optional[str] = None
    isAdmin: bool = False
    street: Optional[str] = None
    apartment: Optional[str] = None
    zip: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass
class LoginRequest:
    email: str
    password: str


@users_bp.route("", methods=["GET"])
async def list_users():
    users = await entity_service.get_items(USER_ENTITY)
    return jsonify([to_public_user(user) for user in users])


@users_bp.route("/<string:user_id>", methods=["GET"])
async def get_user(user_id):
    user = await entity_service.get_item(USER_ENTITY, user_id)
    if not user:
        raise NotFoundException("User not found")
    return jsonify(to_public_user(user))


@users_bp.route("/register", methods=["POST"])
@validate_request(RegisterRequest)
async def register(data: RegisterRequest):
    claims = get_request_claims()
    allow_admin = bool(claims and claims.get("isAdmin"))
    user = await register_user(entity_service, auth_service, dataclasses.asdict(data), allow_admin=allow_admin)
    return jsonify(user), 201


@users_bp.route("/login", methods=["POST"])
@validate_request(LoginRequest)
async def login(data: LoginRequest):
    return jsonify(await authenticate_user(entity_service, auth_service, data.email, data.password))


@users_bp.route("/<string:user_id>", methods=["DELETE"])
@auth_required(admin=True)
async def delete_user(user_id, claims):
    if not await entity_service.delete_item(USER_ENTITY, user_id):
        raise NotFoundException("User not found")
    logger.info(f"User {user_id} deleted by {claims.get('userId')}")
    return jsonify({"success": True, "message": "User deleted successfully"}), 200
