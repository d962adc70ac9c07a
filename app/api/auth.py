"""
Autenticación JWT del panel de casos.

El núcleo de casos no conoce sesiones: este módulo resuelve el token
Bearer en un User y su id se pasa explícitamente a cada operación como
identidad del llamador (createdBy).

Endpoints:
- POST /api/login      -> emite token
- POST /api/logout     -> acuse (el token es stateless)
- GET  /api/auth/user  -> perfil del usuario autenticado
"""
from datetime import datetime, timedelta
from typing import Optional

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.exceptions import AuthenticationException
from app.core.logger import get_logger

logger = get_logger()

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Security scheme
security = HTTPBearer(auto_error=False)

router = APIRouter(prefix="/api", tags=["auth"])


class TokenData(BaseModel):
    """Datos del token JWT."""
    username: str
    role: str


class User(BaseModel):
    """Usuario del sistema."""
    id: str
    username: str
    role: str  # "admin" o "user"
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    disabled: bool = False


class UserInDB(User):
    """Usuario con password hasheado."""
    hashed_password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica que el password coincide con el hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hashea un password."""
    return pwd_context.hash(password)


# Directorio de usuarios en memoria; en producción lo provee el sistema de identidad
USERS_DB = {
    "admin": UserInDB(
        id="admin",
        username="admin",
        role="admin",
        email="admin@cybercrime.com",
        first_name="Administrador",
        last_name="Sistema",
        hashed_password=get_password_hash("admin123"),  # CAMBIAR EN PRODUCCIÓN
        disabled=False,
    ),
    "analyst": UserInDB(
        id="analyst",
        username="analyst",
        role="user",
        email="analyst@cybercrime.com",
        first_name="Analista",
        last_name="Investigación",
        hashed_password=get_password_hash("analyst123"),  # CAMBIAR EN PRODUCCIÓN
        disabled=False,
    ),
}


def _public_user(user: UserInDB) -> User:
    return User(**user.model_dump(exclude={"hashed_password"}))


def authenticate_user(username: str, password: str) -> Optional[User]:
    """
    Autentica un usuario.

    Args:
        username: Nombre de usuario
        password: Password en texto plano

    Returns:
        User si la autenticación es exitosa, None en caso contrario
    """
    user = USERS_DB.get(username)
    if not user:
        logger.warning("Intento de login con usuario inexistente", action="auth_failed", username=username)
        return None

    if not verify_password(password, user.hashed_password):
        logger.warning("Intento de login con password incorrecto", action="auth_failed", username=username)
        return None

    if user.disabled:
        logger.warning("Intento de login con usuario deshabilitado", action="auth_failed", username=username)
        return None

    logger.info("Usuario autenticado", action="auth_success", username=username, role=user.role)
    return _public_user(user)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crea un token JWT.

    Args:
        data: Datos a incluir en el token (sub = username, role)
        expires_delta: Tiempo de expiración (opcional)

    Returns:
        Token JWT como string
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData:
    """
    Decodifica y valida un token JWT.

    Raises:
        HTTPException 401: Si el token es inválido o ha expirado
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Token expirado", action="auth_token_expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("Token inválido", action="auth_token_error", error_message=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudo validar el token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    username = payload.get("sub")
    role = payload.get("role")
    if username is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenData(username=username, role=role)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """
    Dependencia para obtener el usuario actual desde el token.

    Raises:
        HTTPException 401: sin token, token inválido o usuario inexistente
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = decode_token(credentials.credentials)

    user = USERS_DB.get(token_data.username)
    if user is None:
        logger.warning("Usuario del token no encontrado", action="auth_user_not_found", username=token_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado",
        )

    if user.disabled:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario deshabilitado",
        )

    return _public_user(user)


# =========================================================
# ENDPOINTS
# =========================================================

@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """Emite un token de acceso para credenciales válidas."""
    user = authenticate_user(request.username, request.password)
    if user is None:
        raise AuthenticationException("Invalid credentials", details={"username": request.username})

    settings = get_settings()
    token = create_access_token({"sub": user.username, "role": user.role})
    return LoginResponse(
        access_token=token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=user,
    )


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)) -> dict:
    """El token no se guarda en servidor: el cliente solo tiene que descartarlo."""
    logger.info("Logout", action="auth_logout", username=current_user.username)
    return {"success": True}


@router.get("/auth/user", response_model=User)
async def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    """Perfil del usuario autenticado."""
    return current_user
