import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name)
    try:
        return Decimal(raw.strip()) if raw else Decimal(default)
    except ArithmeticError:
        return Decimal(default)


@dataclass(frozen=True)
class Settings:
    app_name: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    issuer: str
    cookie_name: str
    cookie_secure: bool
    cors_origins: tuple[str, ...]
    database_url: str
    database_sslmode: str
    bill_number_prefix: str
    bill_number_padding: int
    cgst_rate: Decimal
    sgst_rate: Decimal
    purchase_gst_percent: Decimal
    log_level: str
    founder_username: str
    founder_email: str
    founder_password: str


settings = Settings(
    app_name=os.getenv("APP_NAME", "Saree Store POS API"),
    secret_key=os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_CHAR_MIN_SECRET_KEY"),
    algorithm=os.getenv("ALGORITHM", "HS256"),
    access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 7 * 24 * 60, min_value=1),
    issuer=os.getenv("TOKEN_ISSUER", "sareepos-api"),
    cookie_name=os.getenv("AUTH_COOKIE_NAME", "access_token"),
    cookie_secure=_env_bool("COOKIE_SECURE", False),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:4173").split(",")
        if origin.strip()
    ),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./sareepos.db"),
    database_sslmode=os.getenv("DATABASE_SSLMODE", "prefer"),
    bill_number_prefix=os.getenv("BILL_NUMBER_PREFIX", "LSM").strip().upper() or "LSM",
    bill_number_padding=_env_int("BILL_NUMBER_PADDING", 6, min_value=1),
    cgst_rate=_env_decimal("CGST_RATE", "0.025"),
    sgst_rate=_env_decimal("SGST_RATE", "0.025"),
    purchase_gst_percent=_env_decimal("PURCHASE_GST_PERCENT", "5"),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    founder_username=os.getenv("FOUNDER_USERNAME", ""),
    founder_email=os.getenv("FOUNDER_EMAIL", ""),
    founder_password=os.getenv("FOUNDER_PASSWORD", ""),
)
