# logifix/presentation/notas_vistas.py
# Persiste quantas notas o visualizador já viu em cada ocorrência.

from typing import Dict

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest

from logifix.core.ports import ICacheNotasVistas


class NotasVistasSessao(ICacheNotasVistas):
    """
    Implementação do cache de notas vistas usando a sessão do Django.
    O estado é local ao visualizador: não é sincronizado entre dispositivos.

    Clientes JWT não devolvem o cookie de sessão; para eles o estado fica no
    cache do Django, por usuário autenticado.
    """

    SESSION_KEY = 'logifix_seen_notes'

    def __init__(self, request: HttpRequest):
        self.request = request

    def _chave_usuario(self):
        if settings.SESSION_COOKIE_NAME in self.request.COOKIES:
            return None
        user = getattr(self.request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return f'{self.SESSION_KEY}:{user.pk}'

    def _dados(self) -> Dict[str, int]:
        chave = self._chave_usuario()
        if chave:
            return cache.get(chave) or {}
        return self.request.session.get(self.SESSION_KEY) or {}

    def obter(self, ocorrencia_id: str) -> int:
        try:
            return int(self._dados().get(str(ocorrencia_id), 0))
        except (TypeError, ValueError):
            return 0

    def registrar(self, ocorrencia_id: str, quantidade: int) -> None:
        dados = dict(self._dados())
        dados[str(ocorrencia_id)] = int(quantidade)
        chave = self._chave_usuario()
        if chave:
            cache.set(chave, dados, timeout=None)
            return
        self.request.session[self.SESSION_KEY] = dados
        self.request.session.modified = True
