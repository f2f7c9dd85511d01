"""
Camada de Infraestrutura: Implementação dos Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao Django ORM. Falhas do banco (DatabaseError) são
registradas no log e convertidas em FalhaLeituraError/FalhaGravacaoError.
"""
import functools
import logging
from typing import List, Optional

from django.apps import apps
from django.db import DatabaseError, transaction

# Importações da Camada CORE (ENTIDADES e PORTAS)
from logifix.core.entities import Ocorrencia, Nota, Transportadora, Usuario, LogAuditoria
from logifix.core.ports import (
    IOcorrenciaRepository,
    ITransportadoraRepository,
    IUsuarioRepository,
    ILogAuditoriaRepository,
)
from logifix.core.exceptions import (
    FalhaGravacaoError,
    FalhaLeituraError,
    OcorrenciaNaoEncontradaError,
    TransportadoraNaoEncontradaError,
    UsuarioNaoEncontradoError,
    NotaNaoEncontradaError,
)

from .mappers import (
    OcorrenciaMapper, NotaMapper, TransportadoraMapper, UsuarioMapper, LogAuditoriaMapper
)

logger = logging.getLogger(__name__)


# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


def _leitura(metodo):
    """Converte DatabaseError de uma consulta em FalhaLeituraError."""
    @functools.wraps(metodo)
    def wrapper(self, *args, **kwargs):
        try:
            return metodo(self, *args, **kwargs)
        except DatabaseError as e:
            logger.error("Falha de leitura em %s.%s: %s", type(self).__name__, metodo.__name__, e)
            raise FalhaLeituraError(f"Não foi possível carregar os dados: {e}") from e
    return wrapper


def _gravacao(metodo):
    """Converte DatabaseError de uma escrita em FalhaGravacaoError."""
    @functools.wraps(metodo)
    def wrapper(self, *args, **kwargs):
        try:
            return metodo(self, *args, **kwargs)
        except DatabaseError as e:
            logger.error("Falha de gravação em %s.%s: %s", type(self).__name__, metodo.__name__, e)
            raise FalhaGravacaoError(f"Não foi possível gravar os dados: {e}") from e
    return wrapper


# ====================================================================
# 1. OCORRÊNCIAS E NOTAS
# ====================================================================

class OcorrenciaRepositoryDjango(IOcorrenciaRepository):
    """Implementação do IOcorrenciaRepository usando o Django ORM."""

    # Propriedades para carregar modelos de forma LAZY
    @property
    def OcorrenciaModel(self):
        return get_model('infrastructure', 'Ocorrencia')

    @property
    def NotaModel(self):
        return get_model('infrastructure', 'NotaOcorrencia')

    def _queryset(self):
        return self.OcorrenciaModel.objects.prefetch_related('notas')

    @_leitura
    def listar(self) -> List[Ocorrencia]:
        return [OcorrenciaMapper.to_entity(model) for model in self._queryset()]

    @_leitura
    def buscar_por_id(self, ocorrencia_id: str) -> Optional[Ocorrencia]:
        try:
            return OcorrenciaMapper.to_entity(self._queryset().get(pk=ocorrencia_id))
        except self.OcorrenciaModel.DoesNotExist:
            return None

    @_leitura
    def buscar_por_nota_fiscal(self, numero_nota_fiscal: str) -> Optional[Ocorrencia]:
        model = self._queryset().filter(numero_nota_fiscal=numero_nota_fiscal).first()
        return OcorrenciaMapper.to_entity(model)

    @_gravacao
    @transaction.atomic
    def inserir(self, ocorrencia: Ocorrencia) -> Ocorrencia:
        """Insere a ocorrência e suas notas iniciais na mesma transação."""
        model = OcorrenciaMapper.to_model(ocorrencia)
        model.save(force_insert=True)
        for nota in ocorrencia.notas:
            NotaMapper.to_model(nota, model.id).save()
        return ocorrencia

    @_gravacao
    def atualizar(self, ocorrencia: Ocorrencia) -> Ocorrencia:
        try:
            model = self.OcorrenciaModel.objects.get(pk=ocorrencia.id)
        except self.OcorrenciaModel.DoesNotExist:
            raise OcorrenciaNaoEncontradaError(f"Ocorrência {ocorrencia.id} não existe para atualização.")
        OcorrenciaMapper.to_model(ocorrencia, model).save()
        return ocorrencia

    @_gravacao
    def excluir(self, ocorrencia_id: str) -> None:
        """As notas são removidas em cascata."""
        self.OcorrenciaModel.objects.filter(pk=ocorrencia_id).delete()

    @_gravacao
    def inserir_nota(self, ocorrencia_id: str, nota: Nota) -> Nota:
        model = NotaMapper.to_model(nota, ocorrencia_id)
        model.save()
        return NotaMapper.to_entity(model)

    def _nota_model(self, nota_id: str):
        try:
            return self.NotaModel.objects.get(pk=nota_id)
        except (self.NotaModel.DoesNotExist, ValueError):
            return None

    @_leitura
    def buscar_nota(self, nota_id: str) -> Optional[Nota]:
        return NotaMapper.to_entity(self._nota_model(nota_id))

    @_gravacao
    def atualizar_nota(self, nota_id: str, texto: str) -> Nota:
        model = self._nota_model(nota_id)
        if model is None:
            raise NotaNaoEncontradaError(f"Nota {nota_id} não encontrada.")
        model.texto = texto
        model.save(update_fields=['texto'])
        return NotaMapper.to_entity(model)

    @_leitura
    def ocorrencia_da_nota(self, nota_id: str) -> Optional[str]:
        model = self._nota_model(nota_id)
        return model.ocorrencia_id if model else None


# ====================================================================
# 2. TRANSPORTADORAS
# ====================================================================

class TransportadoraRepositoryDjango(ITransportadoraRepository):
    """Implementação do ITransportadoraRepository usando o Django ORM."""

    @property
    def TransportadoraModel(self):
        return get_model('infrastructure', 'Transportadora')

    @_leitura
    def listar(self) -> List[Transportadora]:
        return [TransportadoraMapper.to_entity(m) for m in self.TransportadoraModel.objects.all()]

    @_leitura
    def buscar_por_id(self, transportadora_id: str) -> Optional[Transportadora]:
        try:
            return TransportadoraMapper.to_entity(self.TransportadoraModel.objects.get(pk=transportadora_id))
        except self.TransportadoraModel.DoesNotExist:
            return None

    @_gravacao
    def salvar(self, transportadora: Transportadora) -> Transportadora:
        """Salva ou atualiza uma Transportadora, convertendo a entidade para o modelo."""
        model = None
        if transportadora.id:
            try:
                model = self.TransportadoraModel.objects.get(pk=transportadora.id)
            except self.TransportadoraModel.DoesNotExist:
                raise TransportadoraNaoEncontradaError(
                    f"Transportadora {transportadora.id} não existe para atualização."
                )
        model = TransportadoraMapper.to_model(transportadora, model)
        model.save()
        return TransportadoraMapper.to_entity(model)

    @_gravacao
    def excluir(self, transportadora_id: str) -> None:
        """Não há cascata: as ocorrências mantêm a referência órfã."""
        self.TransportadoraModel.objects.filter(pk=transportadora_id).delete()


# ====================================================================
# 3. USUÁRIOS
# ====================================================================

class UsuarioRepositoryDjango(IUsuarioRepository):
    """Implementação do IUsuarioRepository sobre o modelo de usuário personalizado."""

    @property
    def UsuarioModel(self):
        return get_model('infrastructure', 'Usuario')

    def _model(self, usuario_id: str):
        try:
            return self.UsuarioModel.objects.get(pk=usuario_id)
        except (self.UsuarioModel.DoesNotExist, ValueError):
            return None

    @_leitura
    def listar(self) -> List[Usuario]:
        return [UsuarioMapper.to_entity(m) for m in self.UsuarioModel.objects.all()]

    @_leitura
    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]:
        return UsuarioMapper.to_entity(self._model(usuario_id))

    @_leitura
    def buscar_por_email(self, email: str) -> Optional[Usuario]:
        model = self.UsuarioModel.objects.filter(email__iexact=email).first()
        return UsuarioMapper.to_entity(model)

    @_gravacao
    @transaction.atomic
    def salvar(self, usuario: Usuario, senha: Optional[str] = None) -> Usuario:
        if not usuario.id:
            model = self.UsuarioModel.objects.create_user(
                email=usuario.email,
                password=senha,
                nome=usuario.nome,
                papel=usuario.papel.value,
            )
            return UsuarioMapper.to_entity(model)

        model = self._model(usuario.id)
        if model is None:
            raise UsuarioNaoEncontradoError(f"Usuário {usuario.id} não encontrado.")
        UsuarioMapper.to_model(usuario, model)
        if senha:
            model.set_password(senha)
        model.save()
        return UsuarioMapper.to_entity(model)

    @_gravacao
    def excluir(self, usuario_id: str) -> None:
        model = self._model(usuario_id)
        if model is not None:
            model.delete()


# ====================================================================
# 4. AUDITORIA
# ====================================================================

class LogAuditoriaRepositoryDjango(ILogAuditoriaRepository):
    """Log de auditoria somente inclusão."""

    @property
    def LogModel(self):
        return get_model('infrastructure', 'LogAuditoria')

    @_gravacao
    def registrar(self, log: LogAuditoria) -> LogAuditoria:
        model = LogAuditoriaMapper.to_model(log)
        model.save(force_insert=True)
        return LogAuditoriaMapper.to_entity(model)

    @_leitura
    def listar(self) -> List[LogAuditoria]:
        return [LogAuditoriaMapper.to_entity(m) for m in self.LogModel.objects.order_by('-criado_em')]
