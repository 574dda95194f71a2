import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TypedDict

from jose import jwt

# ==========================================================
# 🔧 Configuration : paramètres de génération/validation JWT
# ==========================================================

@dataclass(frozen=True)
class JWTSettings:
    """
    Configuration des tokens JWT.

    - `secret` : clé secrète pour signer/valider les tokens
    - `issuer` : émetteur (utilisé dans le payload)
    - `algorithm` : algo de signature (HS256 recommandé)
    - `access_ttl` : durée de vie d’un access token
    """
    secret: str
    issuer: str = "my-app"
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=120)


# ==========================================================
# 🧱 Types
# ==========================================================

class DecodedToken(TypedDict, total=False):
    iss: str
    sub: str            # identifiant utilisateur
    username: str
    typ: str            # "access"
    jti: str
    iat: int
    exp: int


# ==========================================================
# 🧩 Fonctions utilitaires
# ==========================================================

def _now() -> datetime:
    """Renvoie l'heure UTC actuelle."""
    return datetime.now(timezone.utc)

def new_jti() -> str:
    """Crée un identifiant unique pour un token."""
    return str(uuid.uuid4())


# ==========================================================
# 🎟️ Génération des tokens
# ==========================================================

def create_access_token(*, user_id: int, username: str, settings: JWTSettings) -> str:
    """
    Crée un access token JWT (stocké dans le cookie de session côté navigateur).
    """
    now = _now()
    payload: DecodedToken = {
        "iss": settings.issuer,
        "sub": str(user_id),
        "username": username,
        "typ": "access",
        "jti": new_jti(),
        "iat": int(now.timestamp()),
        "exp": int((now + settings.access_ttl).timestamp()),
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


# ==========================================================
# 🔍 Décodage / Validation
# ==========================================================

def decode_token(token: str, settings: JWTSettings) -> DecodedToken:
    """
    Décode et valide un token JWT (signature + expiration + émetteur).
    Lève JWTError en cas de signature invalide ou expirée.
    """
    decoded = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        options={"verify_aud": False},
    )
    return decoded  # type: ignore[return-value]
