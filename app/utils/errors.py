"""Custom exception classes."""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class para erros da aplicação."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Inicializa o erro.

        Args:
            message: Mensagem de erro amigável para o usuário.
            code: Código único do erro.
            status_code: Status HTTP code.
            details: Detalhes adicionais do erro.
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Converte o erro para dicionário."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class HashingError(AppError):
    """Digest malformado ou parâmetros de hash não suportados."""

    def __init__(self, message: str = "Erro ao processar hash de senha", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="HASHING_ERROR",
            status_code=500,
            details=details,
        )


class SigningError(AppError):
    """Falha de configuração ao assinar tokens."""

    def __init__(self, message: str = "Erro ao assinar token", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="SIGNING_ERROR",
            status_code=500,
            details=details,
        )


class DuplicateAccountError(AppError):
    """Já existe conta para o login informado."""

    def __init__(self, message: str = "Conta já existe", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="DUPLICATE_ACCOUNT",
            status_code=409,
            details=details,
        )


class InvalidCredentialsError(AppError):
    """
    Email ou senha incorretos.

    A mesma mensagem é usada para conta inexistente e senha errada.
    """

    def __init__(self, message: str = "Email ou senha incorretos", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
            details=details,
        )


class MalformedCredentialError(AppError):
    """Header Authorization ausente ou fora do formato 'Bearer <token>'."""

    def __init__(self, message: str = "Token não encontrado ou malformado", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="MALFORMED_CREDENTIAL",
            status_code=401,
            details=details,
        )


class InvalidOrExpiredTokenError(AppError):
    """Assinatura inválida ou token expirado."""

    def __init__(self, message: str = "Token inválido ou expirado", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="INVALID_OR_EXPIRED_TOKEN",
            status_code=401,
            details=details,
        )


class UnexpectedFailure(AppError):
    """Falha inesperada (banco indisponível etc.)."""

    def __init__(self, message: str = "Erro interno do servidor", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="UNEXPECTED_FAILURE",
            status_code=500,
            details=details,
        )
