# planilla/business_logic/user_manager.py

from typing import Optional, List, TYPE_CHECKING
import logging

from werkzeug.security import generate_password_hash, check_password_hash

from planilla.business_logic.entities.user_entity import UserEntity
from planilla.constants import UserRole
from planilla.exceptions import DuplicateUsernameError

if TYPE_CHECKING:
    from planilla.data_access.users_repository import UsersRepository

logger = logging.getLogger(__name__)


class UserManager:
    def __init__(self, users_repository: 'UsersRepository'):
        if users_repository is None: raise ValueError("users_repository cannot be None")
        self.users_repository = users_repository

    def _check_username(self, username: str, exclude_id: Optional[int] = None) -> str:
        if not username or not username.strip():
            raise ValueError("El nombre de usuario no puede estar vacío.")
        username = username.strip()
        existing = self.users_repository.get_by_username(username)
        if existing and existing.id != exclude_id:
            raise DuplicateUsernameError(username)
        return username

    def create_user(self, username: str, password: str, role: UserRole = UserRole.MANAGER) -> UserEntity:
        username = self._check_username(username)
        if not password:
            raise ValueError("La contraseña es obligatoria.")
        if not isinstance(role, UserRole):
            raise ValueError("Rol de usuario no válido.")

        user = UserEntity(username=username, password_hash=generate_password_hash(password), role=role)
        try:
            created = self.users_repository.add(user)
        except Exception as e:
            logger.error(f"Error creating user '{username}': {e}", exc_info=True)
            raise
        logger.info(f"User '{created.username}' created with role '{created.role.value}'.")
        return created

    def update_user(self, user_id: int, username: str, role: UserRole, password: Optional[str] = None) -> UserEntity:
        """A blank ``password`` keeps the stored hash."""
        user = self.users_repository.get_by_id(user_id)
        if not user:
            raise ValueError(f"No se encontró el usuario con identificador {user_id}.")
        if not isinstance(role, UserRole):
            raise ValueError("Rol de usuario no válido.")

        user.username = self._check_username(username, exclude_id=user_id)
        user.role = role
        if password:
            user.password_hash = generate_password_hash(password)

        try:
            updated = self.users_repository.update(user)
        except Exception as e:
            logger.error(f"Error updating user ID {user_id}: {e}", exc_info=True)
            raise
        logger.info(f"User ID {user_id} updated.")
        return updated

    def authenticate(self, username: str, password: str) -> Optional[UserEntity]:
        user = self.users_repository.get_by_username(username.strip()) if username else None
        if user and password and check_password_hash(user.password_hash, password):
            logger.info(f"User '{user.username}' authenticated.")
            return user
        logger.warning(f"Failed login attempt for username '{username}'.")
        return None

    def get_all_users(self) -> List[UserEntity]:
        return self.users_repository.get_all(order_by="username COLLATE NOCASE")

    def delete_user(self, user_id: int, current_user: Optional[UserEntity] = None) -> bool:
        if current_user is not None and current_user.id == user_id:
            raise ValueError("No puede eliminar su propio usuario.")
        try:
            deleted = self.users_repository.delete(user_id)
        except Exception as e:
            logger.error(f"Error deleting user ID {user_id}: {e}", exc_info=True)
            raise
        if deleted:
            logger.info(f"User ID {user_id} deleted.")
        return deleted
