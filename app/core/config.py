"""
➡️ But : Centraliser tous les paramètres configurables (nom d’app, chemin DB, secrets, stockage, etc.)

Utilise pydantic-settings pour charger automatiquement les variables d’environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from app.core.config import settings
print(settings.APP_NAME)


🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Facilite le passage entre environnements (dev / prod / test).
"""

from datetime import timedelta
from typing import Optional

from pydantic_settings import BaseSettings
from app.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Catalog-Admin"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "app.db"  # fichier SQLite
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ISSUER: str = "catalog-admin"
    JWT_ALGORITHM: str = "HS256"

    ACCESS_TTL_MINUTES: int = 120

    # Cookie qui transporte l'access token (pages HTML)
    AUTH_COOKIE_NAME: str = "access_token"
    AUTH_COOKIE_SAMESITE: str = "lax"     # "lax" | "strict" | "none"
    AUTH_COOKIE_SECURE: Optional[bool] = None   # auto selon ENV si None

    # Session signée (flash des erreurs de formulaire)
    SESSION_SECRET_KEY: str = "CHANGE_ME_TOO"

    # -----------------------------
    # Catalogue
    # -----------------------------
    PRODUCTS_PER_PAGE: int = 10
    MAX_UPLOAD_MB: int = 5

    # -----------------------------
    # Stockage des fichiers
    # -----------------------------
    STORAGE_DRIVER: str = "local"  # local | s3
    STORAGE_ROOT: str = "storage/app"

    S3_ENDPOINT: str = "http://localhost:9000"
    S3_REGION: str = "us-east-1"
    S3_KEY: str = "minioadmin"
    S3_SECRET: str = "minioadmin"
    S3_BUCKET: str = "catalog"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # Cookie secure auto: true en prod si non spécifié
        if self.AUTH_COOKIE_SECURE is None:
            object.__setattr__(self, "AUTH_COOKIE_SECURE", self.ENV == "prod")


# Instance globale importable partout
settings = Settings()

# Objet JWT prêt à l'emploi pour les services
jwt_settings = JWTSettings(
    secret=settings.JWT_SECRET_KEY,
    issuer=settings.JWT_ISSUER,
    algorithm=settings.JWT_ALGORITHM,
    access_ttl=timedelta(minutes=settings.ACCESS_TTL_MINUTES),
)
