from dataclasses import dataclass, field
from decimal import Decimal
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
import random
import uuid

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros (sem dependência do Django).
# ====================================================================


def agora() -> datetime:
    """Relógio padrão da camada Core (sempre com fuso horário)."""
    return datetime.now(timezone.utc)


def gerar_id_ocorrencia() -> str:
    """Gera um identificador no formato OC-<4 dígitos aleatórios>."""
    return f"OC-{random.randint(1000, 9999)}"


class Segmento(str, Enum):
    """Segmento de atuação da transportadora."""
    ONLINE = 'Loja Virtual'
    FISICA = 'Loja Física'
    AMBOS = 'Ambos'


class StatusOcorrencia(str, Enum):
    """Etapas do ciclo de vida de uma ocorrência (valor = rótulo exibido)."""
    ABERTA = 'Em Aberto'
    ANALISE = 'Aguardando Resposta'
    EM_TRATATIVA = 'Em Tratativa'
    BLOQUEIO_DEVOLUCAO = 'Bloqueio/Devolução'
    AUDITORIA_FINANCEIRA = 'Auditoria Financeira'
    CONCLUIDA = 'Concluído'
    ARQUIVADA = 'Arquivado'

    @property
    def terminal(self) -> bool:
        return self in STATUS_TERMINAIS


STATUS_TERMINAIS = frozenset({StatusOcorrencia.CONCLUIDA, StatusOcorrencia.ARQUIVADA})


class PapelUsuario(str, Enum):
    MASTER = 'Master'
    USUARIO = 'Usuário'


# Flags informativas: nenhuma delas força mudança de status.
FLAGS_OCORRENCIA = {
    'reenviado': 'Produto Reenviado',
    'contestar_fatura': 'Contestar Fatura',
    'extravio_devolucao': 'Extravio na Devolução',
    'avaria': 'Avaria',
}


@dataclass
class Transportadora:
    """Entidade da Transportadora (parceira de entrega)."""
    nome: str
    segmento: Segmento = Segmento.AMBOS
    cor: str = '#3b82f6'
    id: Optional[str] = None


@dataclass
class Usuario:
    """Entidade do Usuário do sistema."""
    nome: str
    email: str
    papel: PapelUsuario = PapelUsuario.USUARIO
    id: Optional[str] = None

    @property
    def is_master(self) -> bool:
        return self.papel == PapelUsuario.MASTER


@dataclass
class Nota:
    """Evento da linha do tempo (nota interna) de uma ocorrência."""
    texto: str
    autor: str
    data: datetime = field(default_factory=agora)
    id: Optional[str] = None


@dataclass
class Ocorrencia:
    """Entidade central: reclamação logística acompanhada até a resolução."""
    transportadora_id: str
    codigo_rastreio: str
    numero_nota_fiscal: str
    destinatario: str
    uf: str
    valor_nota: Decimal = Decimal('0.00')
    valor_frete: Decimal = Decimal('0.00')
    status: StatusOcorrencia = StatusOcorrencia.ABERTA
    data_ocorrencia: date = field(default_factory=date.today)
    criado_em: datetime = field(default_factory=agora)
    finalizado_em: Optional[datetime] = None

    # Flags
    reenviado: bool = False
    transportadora_reenvio_id: Optional[str] = None
    codigo_rastreio_reenvio: Optional[str] = None
    contestar_fatura: bool = False
    extravio_devolucao: bool = False
    avaria: bool = False

    responsaveis: List[str] = field(default_factory=list)
    notas: List[Nota] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def quantidade_notas(self) -> int:
        return len(self.notas)

    def adicionar_responsavel(self, usuario_id: str) -> bool:
        """Inclui o usuário nos responsáveis sem duplicar. Retorna True se incluiu."""
        if usuario_id in self.responsaveis:
            return False
        self.responsaveis.append(usuario_id)
        return True


@dataclass
class LogAuditoria:
    """Registro de auditoria (somente inclusão)."""
    acao: str
    detalhes: str
    usuario_id: Optional[str]
    usuario_nome: str
    data: datetime = field(default_factory=agora)
    id: Optional[str] = field(default_factory=lambda: str(uuid.uuid4()))
