# planilla/business_logic/entities/user_entity.py
from dataclasses import dataclass, field
from .base_entity import BaseEntity
from planilla.constants import UserRole

@dataclass
class UserEntity(BaseEntity):
    username: str
    password_hash: str
    role: UserRole = field(default=UserRole.MANAGER)
