from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import SessionContext, decode_session
from shared import bind_request_context

# auto_error=False para devolver 401 no formato {"message"} em vez do 403 padrão do HTTPBearer
bearer_scheme = HTTPBearer(auto_error=False)


# async para o business_id ficar no contexto de log da requisição
async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionContext:
    """
    Valida o JWT do header Authorization e devolve o contexto da sessão.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token, authorization denied")

    session = decode_session(credentials.credentials)
    bind_request_context(business_id=str(session.business_id))
    return session


def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    # só sessões marcadas como admin passam
    if not session.is_admin:
        raise ForbiddenError("Admin access required")
    return session
