"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (logifix.core.entities)
"""
from typing import Any, Optional, Type

from django.apps import apps
from django.db import models

from logifix.core.entities import (
    Ocorrencia as OcorrenciaEntity,
    Nota as NotaEntity,
    Transportadora as TransportadoraEntity,
    Usuario as UsuarioEntity,
    LogAuditoria as LogAuditoriaEntity,
    Segmento,
    StatusOcorrencia,
    PapelUsuario,
)


# ====================================================================
# Uso de apps.get_model para evitar dependências circulares
# ====================================================================

def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


def _id_texto(valor: Any) -> Optional[str]:
    return str(valor) if valor is not None else None


# ====================================================================
# MAPPERS DE CADASTROS
# ====================================================================

class TransportadoraMapper:
    """Mapeador para Transportadora."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', 'Transportadora')

    @staticmethod
    def to_entity(model: Any) -> Optional[TransportadoraEntity]:
        if not model: return None
        return TransportadoraEntity(
            id=model.id,
            nome=model.nome,
            segmento=Segmento(model.segmento),
            cor=model.cor,
        )

    @classmethod
    def to_model(cls, entity: TransportadoraEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = cls.model_class()()
        model.nome = entity.nome.strip()
        model.segmento = Segmento(entity.segmento).value
        model.cor = entity.cor
        return model


class UsuarioMapper:
    """Mapeador para o Usuário (perfil)."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', 'Usuario')

    @staticmethod
    def to_entity(model: Any) -> Optional[UsuarioEntity]:
        if not model: return None
        return UsuarioEntity(
            id=_id_texto(model.pk),
            nome=model.nome,
            email=model.email,
            papel=PapelUsuario(model.papel),
        )

    @classmethod
    def to_model(cls, entity: UsuarioEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = cls.model_class()(email=entity.email)
        model.nome = entity.nome
        model.papel = PapelUsuario(entity.papel).value
        return model


class LogAuditoriaMapper:
    """Mapeador para os registros de auditoria."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', 'LogAuditoria')

    @staticmethod
    def to_entity(model: Any) -> Optional[LogAuditoriaEntity]:
        if not model: return None
        return LogAuditoriaEntity(
            id=model.id,
            acao=model.acao,
            detalhes=model.detalhes,
            usuario_id=model.usuario_id,
            usuario_nome=model.usuario_nome,
            data=model.criado_em,
        )

    @classmethod
    def to_model(cls, entity: LogAuditoriaEntity) -> Any:
        return cls.model_class()(
            id=entity.id,
            acao=entity.acao,
            detalhes=entity.detalhes,
            usuario_id=_id_texto(entity.usuario_id),
            usuario_nome=entity.usuario_nome,
            criado_em=entity.data,
        )


# ====================================================================
# MAPPERS DE OCORRÊNCIAS
# ====================================================================

class NotaMapper:
    """Mapeador para as notas da linha do tempo."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', 'NotaOcorrencia')

    @staticmethod
    def to_entity(model: Any) -> Optional[NotaEntity]:
        if not model: return None
        return NotaEntity(
            id=_id_texto(model.pk),
            texto=model.texto,
            autor=model.autor,
            data=model.criado_em,
        )

    @classmethod
    def to_model(cls, entity: NotaEntity, ocorrencia_id: str) -> Any:
        return cls.model_class()(
            ocorrencia_id=ocorrencia_id,
            texto=entity.texto,
            autor=entity.autor,
            criado_em=entity.data,
        )


class OcorrenciaMapper:
    """Mapeador para Ocorrência (com as notas em ordem cronológica)."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', 'Ocorrencia')

    @staticmethod
    def to_entity(model: Any) -> Optional[OcorrenciaEntity]:
        """Espera as notas já carregadas (prefetch_related('notas'))."""
        if not model: return None
        return OcorrenciaEntity(
            id=model.id,
            transportadora_id=model.transportadora_id,
            codigo_rastreio=model.codigo_rastreio,
            numero_nota_fiscal=model.numero_nota_fiscal,
            destinatario=model.destinatario,
            uf=model.uf,
            valor_nota=model.valor_nota,
            valor_frete=model.valor_frete,
            status=StatusOcorrencia(model.status),
            data_ocorrencia=model.data_ocorrencia,
            criado_em=model.criado_em,
            finalizado_em=model.finalizado_em,
            reenviado=model.reenviado,
            transportadora_reenvio_id=model.transportadora_reenvio_id,
            codigo_rastreio_reenvio=model.codigo_rastreio_reenvio,
            contestar_fatura=model.contestar_fatura,
            extravio_devolucao=model.extravio_devolucao,
            avaria=model.avaria,
            responsaveis=[str(r) for r in (model.responsaveis or [])],
            notas=[NotaMapper.to_entity(nota) for nota in model.notas.all()],
        )

    @classmethod
    def to_model(cls, entity: OcorrenciaEntity, model: Optional[Any] = None) -> Any:
        """Copia apenas os campos da ocorrência; as notas são gravadas à parte."""
        if model is None:
            model = cls.model_class()(id=entity.id)
        model.transportadora_id = entity.transportadora_id
        model.codigo_rastreio = entity.codigo_rastreio
        model.numero_nota_fiscal = entity.numero_nota_fiscal
        model.destinatario = entity.destinatario
        model.uf = entity.uf
        model.valor_nota = entity.valor_nota
        model.valor_frete = entity.valor_frete
        model.status = StatusOcorrencia(entity.status).value
        model.data_ocorrencia = entity.data_ocorrencia
        model.criado_em = entity.criado_em
        model.finalizado_em = entity.finalizado_em
        model.reenviado = entity.reenviado
        model.transportadora_reenvio_id = entity.transportadora_reenvio_id or None
        model.codigo_rastreio_reenvio = entity.codigo_rastreio_reenvio
        model.contestar_fatura = entity.contestar_fatura
        model.extravio_devolucao = entity.extravio_devolucao
        model.avaria = entity.avaria
        model.responsaveis = list(entity.responsaveis)
        return model
