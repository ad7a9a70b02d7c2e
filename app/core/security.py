"""Funções de segurança: hash de senha e JWT."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from app.config.settings import settings
from app.schemas.auth import TokenClaims
from app.utils.errors import HashingError, InvalidOrExpiredTokenError, SigningError

# bcrypt ignora (ou rejeita) tudo além de 72 bytes
BCRYPT_MAX_PASSWORD_BYTES = 72
BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31

# $2b$<custo>$<22 chars de salt><31 chars de hash>
_BCRYPT_DIGEST = re.compile(r"^\$2[aby]\$(\d{2})\$[./A-Za-z0-9]{53}$")

_SCALAR_TYPES = (str, int, float, bool, type(None))
_RESERVED_CLAIMS = {"iat", "exp"}
# Claims registrados que decode_access_token não aceita
_UNSUPPORTED_CLAIMS = {"aud", "nbf"}
# Claims que o python-jose exige como string
_STRING_CLAIMS = {"sub", "jti"}


def _utcnow() -> datetime:
    """Relógio usado na emissão e validação dos tokens."""
    return datetime.now(timezone.utc)


def _check_rounds(rounds: int) -> None:
    if isinstance(rounds, bool) or not isinstance(rounds, int):
        raise HashingError("Fator de custo inválido")
    if not BCRYPT_MIN_ROUNDS <= rounds <= BCRYPT_MAX_ROUNDS:
        raise HashingError(
            "Fator de custo fora do intervalo suportado",
            details={"min": BCRYPT_MIN_ROUNDS, "max": BCRYPT_MAX_ROUNDS},
        )


def _parse_digest(hashed_password: str) -> int:
    """Valida a estrutura do digest bcrypt e retorna o custo embutido."""
    match = _BCRYPT_DIGEST.match(hashed_password or "")
    if match is None:
        raise HashingError("Hash de senha malformado")
    rounds = int(match.group(1))
    _check_rounds(rounds)
    return rounds


def get_password_hash(password: str, rounds: int | None = None) -> str:
    """
    Gera hash de uma senha usando bcrypt.

    Cada chamada usa um salt novo; o custo e o salt ficam embutidos no
    digest, então mudar o custo configurado não invalida hashes antigos.

    Args:
        password: Senha em texto plano.
        rounds: Fator de custo. Usa settings.bcrypt_rounds se omitido.

    Returns:
        str: Hash da senha.

    Raises:
        HashingError: Se a senha passar de 72 bytes ou o custo for inválido.
    """
    if rounds is None:
        rounds = settings.bcrypt_rounds
    _check_rounds(rounds)

    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
        raise HashingError(
            "Senha excede o tamanho máximo suportado",
            details={"max_bytes": BCRYPT_MAX_PASSWORD_BYTES},
        )

    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se a senha plain text corresponde ao hash.

    Args:
        plain_password: Senha em texto plano.
        hashed_password: Hash da senha armazenado.

    Returns:
        bool: True se a senha corresponde, False caso contrário.

    Raises:
        HashingError: Se o hash armazenado estiver malformado.
    """
    _parse_digest(hashed_password)

    password_bytes = plain_password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
        return False

    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        raise HashingError("Hash de senha malformado") from None


def hash_needs_update(hashed_password: str, rounds: int | None = None) -> bool:
    """Indica se o digest foi gerado com um custo diferente do configurado."""
    if rounds is None:
        rounds = settings.bcrypt_rounds
    return _parse_digest(hashed_password) != rounds


@dataclass(frozen=True)
class IssuedToken:
    """Token emitido e o instante em que expira."""

    token: str
    expires_at: datetime


def create_access_token(
    data: dict[str, Any], expires_delta: timedelta | None = None
) -> IssuedToken:
    """
    Cria um token JWT de acesso.

    Args:
        data: Claims a serem codificados no token (deve conter "sub").
        expires_delta: Tempo de vida customizado (opcional).

    Returns:
        IssuedToken: Token JWT codificado e sua expiração.

    Raises:
        SigningError: Se a chave secreta não estiver configurada, se "sub"
            não for uma string não vazia, se houver "aud" ou "nbf", ou se os
            claims não forem escalares com chaves string.
    """
    if not settings.secret_key:
        raise SigningError("Chave secreta não configurada")

    subject = data.get("sub")
    if not isinstance(subject, str) or not subject:
        raise SigningError("Claim \"sub\" deve ser uma string não vazia")

    to_encode: dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise SigningError("Claims devem ter chaves do tipo string")
        if key in _RESERVED_CLAIMS:
            continue
        if key in _UNSUPPORTED_CLAIMS:
            raise SigningError("Claim não suportado", details={"claim": key})
        if key in _STRING_CLAIMS and not isinstance(value, str):
            raise SigningError("Claim deve ser string", details={"claim": key})
        if not isinstance(value, _SCALAR_TYPES):
            raise SigningError(
                "Claims devem ter valores escalares", details={"claim": key}
            )
        to_encode[key] = value

    if expires_delta is None:
        expires_delta = settings.access_token_ttl

    issued_at = _utcnow().replace(microsecond=0)
    expire = issued_at + expires_delta
    to_encode.update({"iat": int(issued_at.timestamp()), "exp": int(expire.timestamp())})

    try:
        encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    except JWTError as e:
        raise SigningError("Erro ao assinar token", details={"reason": str(e)}) from e

    return IssuedToken(token=encoded_jwt, expires_at=expire)


def decode_access_token(token: str) -> TokenClaims:
    """
    Decodifica e valida um token JWT.

    Um token é considerado expirado a partir do instante exp (mais a
    tolerância configurada), então TTL zero expira imediatamente.

    Args:
        token: Token JWT a ser decodificado.

    Returns:
        TokenClaims: Claims do token.

    Raises:
        InvalidOrExpiredTokenError: Assinatura inválida, token expirado ou
            claims obrigatórios ausentes.
        SigningError: Se a chave secreta não estiver configurada.
    """
    if not settings.secret_key:
        raise SigningError("Chave secreta não configurada")

    leeway = settings.token_leeway_seconds
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True, "leeway": leeway},
        )
    except JWTError:
        raise InvalidOrExpiredTokenError() from None

    try:
        claims = TokenClaims.model_validate(payload)
    except PydanticValidationError:
        raise InvalidOrExpiredTokenError() from None

    if _utcnow().timestamp() >= claims.exp + leeway:
        raise InvalidOrExpiredTokenError()

    return claims
