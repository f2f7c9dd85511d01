from rest_framework.permissions import BasePermission, SAFE_METHODS

from logifix.core.entities import PapelUsuario


def _is_master(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, 'papel', None) == PapelUsuario.MASTER.value)


class IsMaster(BasePermission):
    """Permite acesso apenas a usuários com papel Master."""
    message = 'Apenas usuários Master podem acessar este recurso.'

    def has_permission(self, request, view):
        return _is_master(request.user)


class IsMasterOrReadOnly(BasePermission):
    """Leitura para qualquer usuário autenticado; escrita somente para Master."""
    message = 'Apenas usuários Master podem alterar este recurso.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return _is_master(request.user)
