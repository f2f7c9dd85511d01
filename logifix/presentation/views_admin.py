# logifix/presentation/views_admin.py
"""
Views administrativas: transportadoras, usuários e logs de auditoria.
"""

from rest_framework import status
from rest_framework.response import Response

from logifix.core.use_cases import (
    RegistrarAuditoriaUseCase,
    GerenciarTransportadorasUseCase,
    GerenciarUsuariosAdminUseCase,
)
from logifix.core.exceptions import FalhaLeituraError
from logifix.infrastructure.instances import transportadora_repo, usuario_repo, log_repo

from .permissions import IsMaster, IsMasterOrReadOnly
from .serializers import (
    TransportadoraSerializer,
    UsuarioSerializer,
    UsuarioCriacaoSerializer,
    UsuarioEdicaoSerializer,
    LogAuditoriaSerializer,
)
from .views import LogiFixAPIView, autor_da_requisicao, _lista_com_aviso


def _transportadoras_uc():
    return GerenciarTransportadorasUseCase(transportadora_repo, RegistrarAuditoriaUseCase(log_repo))


def _usuarios_uc():
    return GerenciarUsuariosAdminUseCase(usuario_repo, RegistrarAuditoriaUseCase(log_repo))


# ====================================================================
# TRANSPORTADORAS
# ====================================================================

class TransportadoraListaAPIView(LogiFixAPIView):
    permission_classes = [IsMasterOrReadOnly]
    serializer_class = TransportadoraSerializer

    def get(self, request):
        try:
            transportadoras = _transportadoras_uc().listar()
        except FalhaLeituraError as e:
            return _lista_com_aviso([], e)
        return Response(TransportadoraSerializer(transportadoras, many=True).data)

    def post(self, request):
        serializer = TransportadoraSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        criada = _transportadoras_uc().criar(serializer.to_entity(), autor_da_requisicao(request))
        return Response(TransportadoraSerializer(criada).data, status=status.HTTP_201_CREATED)


class TransportadoraDetalheAPIView(LogiFixAPIView):
    permission_classes = [IsMasterOrReadOnly]
    serializer_class = TransportadoraSerializer

    def get(self, request, transportadora_id):
        transportadora = _transportadoras_uc().detalhar(transportadora_id)
        return Response(TransportadoraSerializer(transportadora).data)

    def put(self, request, transportadora_id):
        serializer = TransportadoraSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        atualizada = _transportadoras_uc().atualizar(
            serializer.to_entity(transportadora_id), autor_da_requisicao(request)
        )
        return Response(TransportadoraSerializer(atualizada).data)

    def delete(self, request, transportadora_id):
        _transportadoras_uc().excluir(transportadora_id, autor_da_requisicao(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# USUÁRIOS (somente Master)
# ====================================================================

class UsuarioListaAPIView(LogiFixAPIView):
    permission_classes = [IsMaster]
    serializer_class = UsuarioCriacaoSerializer

    def get(self, request):
        usuarios = _usuarios_uc().listar_todos(autor_da_requisicao(request))
        return Response(UsuarioSerializer(usuarios, many=True).data)

    def post(self, request):
        serializer = UsuarioCriacaoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        criado = _usuarios_uc().criar(
            serializer.to_entity(), serializer.validated_data['senha'], autor_da_requisicao(request)
        )
        return Response(UsuarioSerializer(criado).data, status=status.HTTP_201_CREATED)


class UsuarioDetalheAPIView(LogiFixAPIView):
    permission_classes = [IsMaster]
    serializer_class = UsuarioEdicaoSerializer

    def put(self, request, usuario_id):
        serializer = UsuarioEdicaoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        atualizado = _usuarios_uc().atualizar(
            usuario_id,
            nome=serializer.validated_data['nome'],
            papel=serializer.validated_data['papel'],
            autor=autor_da_requisicao(request),
        )
        return Response(UsuarioSerializer(atualizado).data)

    def delete(self, request, usuario_id):
        _usuarios_uc().excluir(usuario_id, autor_da_requisicao(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# LOGS DE AUDITORIA
# ====================================================================

class LogAuditoriaListaAPIView(LogiFixAPIView):
    """Registros do mais recente para o mais antigo."""
    permission_classes = [IsMaster]

    def get(self, request):
        try:
            logs = RegistrarAuditoriaUseCase(log_repo).listar()
        except FalhaLeituraError as e:
            return _lista_com_aviso([], e)
        return Response(LogAuditoriaSerializer(logs, many=True).data)
