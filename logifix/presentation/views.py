# logifix/presentation/views.py
"""
API REST das ocorrências: ciclo de vida, notas, quadro Kanban, painel e histórico.

As views apenas validam a entrada, chamam o caso de uso e serializam a
entidade relida. Os erros da camada Core são traduzidos para HTTP em
LogiFixAPIView.handle_exception.
"""
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from logifix.core.use_cases import (
    RegistrarAuditoriaUseCase,
    CriarOcorrenciaUseCase,
    GerenciarOcorrenciaUseCase,
    NotasOcorrenciaUseCase,
    ListarOcorrenciasFinalizadasUseCase,
    PainelUseCase,
)
from logifix.core.quadro import ProjecaoQuadro
from logifix.core.exceptions import (
    BaseErroCore,
    DadosInvalidosError,
    NotaFiscalDuplicadaError,
    ItemNaoEncontradoError,
    OperacaoNaoPermitidaError,
    FalhaGravacaoError,
    FalhaLeituraError,
)
from logifix.infrastructure.instances import ocorrencia_repo, transportadora_repo, usuario_repo, log_repo
from logifix.infrastructure.mappers import UsuarioMapper

from .notas_vistas import NotasVistasSessao
from .serializers import (
    OcorrenciaSerializer,
    OcorrenciaCriacaoSerializer,
    OcorrenciaEdicaoSerializer,
    StatusSerializer,
    FlagSerializer,
    ReenvioSerializer,
    NotaTextoSerializer,
    NotaSerializer,
    ColunaQuadroSerializer,
    PainelSerializer,
    ResumoFinanceiroSerializer,
)

logger = logging.getLogger(__name__)

CABECALHO_AVISO = 'X-LogiFix-Aviso'


# ====================================================================
# DEPENDÊNCIAS (Casos de uso montados com os repositórios globais)
# ====================================================================

def autor_da_requisicao(request):
    """Converte o usuário autenticado na entidade Usuario do Core."""
    return UsuarioMapper.to_entity(request.user)


def _auditoria():
    return RegistrarAuditoriaUseCase(log_repo)


def _gerenciar_ocorrencia():
    return GerenciarOcorrenciaUseCase(
        ocorrencia_repo, usuario_repo, _auditoria(),
        responsavel_padrao_email=settings.RESPONSAVEL_PADRAO_EMAIL,
    )


def _projecao_quadro(request):
    return ProjecaoQuadro(
        NotasVistasSessao(request),
        dias_ocultar_concluidas=settings.DIAS_OCULTAR_CONCLUIDAS,
    )


# ====================================================================
# TRADUÇÃO DE ERROS
# ====================================================================

def resposta_de_erro(erro: BaseErroCore) -> Response:
    """Converte uma exceção da camada Core na resposta HTTP correspondente."""
    if isinstance(erro, NotaFiscalDuplicadaError):
        return Response(
            {'message': str(erro), 'ocorrencia_existente': erro.ocorrencia_existente_id},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(erro, DadosInvalidosError):
        return Response({'message': str(erro)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(erro, ItemNaoEncontradoError):
        return Response({'message': str(erro)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(erro, OperacaoNaoPermitidaError):
        return Response({'message': str(erro)}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(erro, (FalhaGravacaoError, FalhaLeituraError)):
        logger.warning("Falha de armazenamento respondida com 503: %s", erro)
        return Response({'message': str(erro)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'message': str(erro)}, status=status.HTTP_400_BAD_REQUEST)


class LogiFixAPIView(APIView):
    """APIView base: exige autenticação e traduz os erros do Core."""
    permission_classes = [IsAuthenticated]

    def handle_exception(self, exc):
        if isinstance(exc, BaseErroCore):
            return resposta_de_erro(exc)
        return super().handle_exception(exc)


def _lista_com_aviso(dados, erro: FalhaLeituraError) -> Response:
    """Leitura falhou: devolve a coleção vazia e o aviso no cabeçalho."""
    logger.warning("Listagem respondida vazia após falha de leitura: %s", erro)
    return Response(dados, status=status.HTTP_200_OK, headers={CABECALHO_AVISO: str(erro)})


# ====================================================================
# 1. OCORRÊNCIAS
# ====================================================================

class OcorrenciaListaAPIView(LogiFixAPIView):
    """
    GET: lista todas as ocorrências.
    POST: cria uma ocorrência (fluxo "Nova Reclamação").
    """
    serializer_class = OcorrenciaCriacaoSerializer

    def get(self, request):
        try:
            ocorrencias = _gerenciar_ocorrencia().listar()
        except FalhaLeituraError as e:
            return _lista_com_aviso([], e)
        return Response(OcorrenciaSerializer(ocorrencias, many=True).data)

    def post(self, request):
        serializer = OcorrenciaCriacaoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        criar_uc = CriarOcorrenciaUseCase(
            ocorrencia_repo, usuario_repo, _auditoria(),
            responsavel_padrao_email=settings.RESPONSAVEL_PADRAO_EMAIL,
        )
        ocorrencia = criar_uc.executar(
            serializer.to_entity(),
            autor=autor_da_requisicao(request),
            nota_inicial=serializer.validated_data.get('nota_inicial'),
        )
        return Response(OcorrenciaSerializer(ocorrencia).data, status=status.HTTP_201_CREATED)


class OcorrenciaDetalheAPIView(LogiFixAPIView):
    """Detalhe (marca as notas como vistas), edição completa e exclusão."""
    serializer_class = OcorrenciaEdicaoSerializer

    def get(self, request, ocorrencia_id):
        ocorrencia = _gerenciar_ocorrencia().detalhar(ocorrencia_id)
        _projecao_quadro(request).marcar_como_vista(ocorrencia)
        return Response(OcorrenciaSerializer(ocorrencia).data)

    def patch(self, request, ocorrencia_id):
        serializer = OcorrenciaEdicaoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        ocorrencia = _gerenciar_ocorrencia().editar_campos(
            ocorrencia_id, dict(serializer.validated_data), autor_da_requisicao(request)
        )
        return Response(OcorrenciaSerializer(ocorrencia).data)

    def delete(self, request, ocorrencia_id):
        _gerenciar_ocorrencia().excluir(ocorrencia_id, autor_da_requisicao(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class OcorrenciaStatusAPIView(LogiFixAPIView):
    """Seletor de status e arrastar-e-soltar do quadro (via_quadro=true)."""
    serializer_class = StatusSerializer

    def post(self, request, ocorrencia_id):
        serializer = StatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        ocorrencia = _gerenciar_ocorrencia().alterar_status(
            ocorrencia_id,
            serializer.validated_data['status'],
            autor_da_requisicao(request),
            via_quadro=serializer.validated_data['via_quadro'],
        )
        return Response(OcorrenciaSerializer(ocorrencia).data)


class OcorrenciaFinalizarAPIView(LogiFixAPIView):
    def post(self, request, ocorrencia_id):
        ocorrencia = _gerenciar_ocorrencia().finalizar(ocorrencia_id, autor_da_requisicao(request))
        return Response(OcorrenciaSerializer(ocorrencia).data)


class OcorrenciaRestaurarAPIView(LogiFixAPIView):
    def post(self, request, ocorrencia_id):
        ocorrencia = _gerenciar_ocorrencia().restaurar(ocorrencia_id, autor_da_requisicao(request))
        return Response(OcorrenciaSerializer(ocorrencia).data)


class OcorrenciaFlagAPIView(LogiFixAPIView):
    serializer_class = FlagSerializer

    def post(self, request, ocorrencia_id):
        serializer = FlagSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        ocorrencia = _gerenciar_ocorrencia().alternar_flag(
            ocorrencia_id, serializer.validated_data['flag'], autor_da_requisicao(request)
        )
        return Response(OcorrenciaSerializer(ocorrencia).data)


class OcorrenciaReenvioAPIView(LogiFixAPIView):
    serializer_class = ReenvioSerializer

    def post(self, request, ocorrencia_id):
        serializer = ReenvioSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        # Campo ausente = não alterar; campo vazio = limpar.
        dados = serializer.validated_data
        ocorrencia = _gerenciar_ocorrencia().atualizar_reenvio(
            ocorrencia_id,
            autor_da_requisicao(request),
            transportadora_id=(dados['transportadora_id'] or '') if 'transportadora_id' in dados else None,
            codigo_rastreio=(dados['codigo_rastreio'] or '') if 'codigo_rastreio' in dados else None,
        )
        return Response(OcorrenciaSerializer(ocorrencia).data)


class OcorrenciaVistaAPIView(LogiFixAPIView):
    """Registra, na sessão do visualizador, que as notas atuais foram vistas."""

    def post(self, request, ocorrencia_id):
        ocorrencia = _gerenciar_ocorrencia().detalhar(ocorrencia_id)
        _projecao_quadro(request).marcar_como_vista(ocorrencia)
        return Response({'ocorrencia_id': ocorrencia.id, 'notas_vistas': ocorrencia.quantidade_notas})


# ====================================================================
# 2. NOTAS (LINHA DO TEMPO)
# ====================================================================

class OcorrenciaNotasAPIView(LogiFixAPIView):
    serializer_class = NotaTextoSerializer

    def post(self, request, ocorrencia_id):
        serializer = NotaTextoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        ocorrencia = NotasOcorrenciaUseCase(ocorrencia_repo, _auditoria()).adicionar(
            ocorrencia_id, serializer.validated_data['texto'], autor_da_requisicao(request)
        )
        return Response(OcorrenciaSerializer(ocorrencia).data, status=status.HTTP_201_CREATED)


class NotaDetalheAPIView(LogiFixAPIView):
    serializer_class = NotaTextoSerializer

    def patch(self, request, nota_id):
        serializer = NotaTextoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        nota = NotasOcorrenciaUseCase(ocorrencia_repo, _auditoria()).editar(
            nota_id, serializer.validated_data['texto'], autor_da_requisicao(request)
        )
        return Response(NotaSerializer(nota).data)


# ====================================================================
# 3. QUADRO, HISTÓRICO E PAINEL
# ====================================================================

class QuadroAPIView(LogiFixAPIView):
    """Colunas do Kanban com filtros ?transportadora=<id|all>&responsavel=<id|all>."""

    def get(self, request):
        projecao = _projecao_quadro(request)
        filtros = {
            'transportadora_id': request.query_params.get('transportadora'),
            'responsavel_id': request.query_params.get('responsavel'),
        }
        try:
            ocorrencias = _gerenciar_ocorrencia().listar()
        except FalhaLeituraError as e:
            colunas = projecao.montar([], **filtros)
            return _lista_com_aviso(ColunaQuadroSerializer(colunas, many=True).data, e)

        colunas = projecao.montar(ocorrencias, **filtros)
        return Response(ColunaQuadroSerializer(colunas, many=True).data)


class OcorrenciasFinalizadasAPIView(LogiFixAPIView):
    """Histórico de concluídas/arquivadas com busca textual (?busca=)."""

    def get(self, request):
        listar_uc = ListarOcorrenciasFinalizadasUseCase(ocorrencia_repo, transportadora_repo)
        try:
            ocorrencias = listar_uc.executar(busca=request.query_params.get('busca'))
        except FalhaLeituraError as e:
            return _lista_com_aviso([], e)
        return Response(OcorrenciaSerializer(ocorrencias, many=True).data)


class PainelAPIView(LogiFixAPIView):
    def get(self, request):
        painel = PainelUseCase(ocorrencia_repo, transportadora_repo).executar()
        return Response(PainelSerializer(painel).data)


class ResumoFinanceiroAPIView(LogiFixAPIView):
    def get(self, request):
        resumo = PainelUseCase(ocorrencia_repo, transportadora_repo).resumo_financeiro()
        return Response(ResumoFinanceiroSerializer(resumo).data)
