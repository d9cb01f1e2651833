# Overview: Service-layer operations for auth; password hashing, registration and login.

"""
Authentication Service

Passwords are hashed with bcrypt (cost factor 10). Login issues a signed
JWT whose subject is the user id; verification happens in
decorators.require_auth.
"""

import bcrypt
from flask_jwt_extended import create_access_token
from sqlalchemy import select

from ..models import User
from ..validation import AuthError, ValidationError, require_fields
from .storage import Storage


BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    if not isinstance(password, str):
        raise ValidationError("password must be a string")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    if not isinstance(password, str) or not isinstance(password_hash, str):
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except (TypeError, ValueError):
        return False


def register_user(storage: Storage, name: str, email: str, password: str) -> User:
    """
    Create a user with a hashed password.

    A duplicate email trips the unique constraint and surfaces as StorageError.
    """
    require_fields({"name": name, "email": email, "password": password}, "name", "email", "password")
    for field, value in (("name", name), ("email", email), ("password", password)):
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")

    user = User(name=name.strip(), email=email.strip(), password=hash_password(password))
    with storage.transaction() as session:
        session.add(user)
    return user


def authenticate(storage: Storage, email: str, password: str) -> User:
    """
    Return the user whose email and password match.

    Raises AuthError for an unknown email or a wrong password.
    """
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise AuthError("Invalid credentials")

    users = storage.scalars(select(User).where(User.email == email.strip()).limit(1))
    if not users or not verify_password(password, users[0].password):
        raise AuthError("Invalid credentials")
    return users[0]


def issue_token(user: User) -> str:
    return create_access_token(identity=str(user.id))


def login(storage: Storage, email: str, password: str) -> str:
    user = authenticate(storage, email, password)
    return issue_token(user)
