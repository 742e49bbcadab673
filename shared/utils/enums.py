from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    VIEWER = "viewer"


class FieldAccess(str, Enum):
    READ = "read"
    WRITE = "write"
    HIDDEN = "hidden"
