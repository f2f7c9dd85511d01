# logifix/core/quadro.py
"""
Projeção do Quadro Kanban.

Recebe a coleção completa de ocorrências e devolve a composição visível de
cada coluna, aplicando os filtros de transportadora/responsável, a regra de
envelhecimento das concluídas e o indicador de notas não lidas.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from logifix.core.entities import Ocorrencia, StatusOcorrencia, agora
from logifix.core.ports import ICacheNotasVistas

FILTRO_TODOS = 'all'
DIAS_OCULTAR_CONCLUIDAS = 3

# Arquivado não tem coluna: só aparece no histórico de finalizadas.
COLUNAS_QUADRO = (
    StatusOcorrencia.ABERTA,
    StatusOcorrencia.ANALISE,
    StatusOcorrencia.EM_TRATATIVA,
    StatusOcorrencia.BLOQUEIO_DEVOLUCAO,
    StatusOcorrencia.AUDITORIA_FINANCEIRA,
    StatusOcorrencia.CONCLUIDA,
)


@dataclass
class CartaoQuadro:
    ocorrencia: Ocorrencia
    notas_nao_lidas: int = 0


@dataclass
class ColunaQuadro:
    status: StatusOcorrencia
    cartoes: List[CartaoQuadro] = field(default_factory=list)

    @property
    def rotulo(self) -> str:
        return self.status.value

    @property
    def total(self) -> int:
        return len(self.cartoes)


class CacheNotasVistasMemoria(ICacheNotasVistas):
    """Implementação em memória (um dicionário) do cache de notas vistas."""

    def __init__(self, inicial: Optional[Dict[str, int]] = None):
        self._dados: Dict[str, int] = dict(inicial or {})

    def obter(self, ocorrencia_id: str) -> int:
        return self._dados.get(ocorrencia_id, 0)

    def registrar(self, ocorrencia_id: str, quantidade: int) -> None:
        self._dados[ocorrencia_id] = quantidade


class ProjecaoQuadro:
    """Monta as colunas do quadro para um visualizador."""

    def __init__(
        self,
        cache_notas_vistas: ICacheNotasVistas,
        relogio: Callable[[], datetime] = agora,
        dias_ocultar_concluidas: int = DIAS_OCULTAR_CONCLUIDAS,
    ):
        self.cache_notas_vistas = cache_notas_vistas
        self.relogio = relogio
        self.limite_concluidas = timedelta(days=dias_ocultar_concluidas)

    # --- Regras de visibilidade ---

    @staticmethod
    def passa_filtros(
        ocorrencia: Ocorrencia,
        transportadora_id: str = FILTRO_TODOS,
        responsavel_id: str = FILTRO_TODOS,
    ) -> bool:
        if transportadora_id != FILTRO_TODOS and ocorrencia.transportadora_id != transportadora_id:
            return False
        if responsavel_id != FILTRO_TODOS and responsavel_id not in ocorrencia.responsaveis:
            return False
        return True

    def visivel_no_quadro(self, ocorrencia: Ocorrencia, momento: Optional[datetime] = None) -> bool:
        """Concluídas somem após o limite; sem finalizado_em continuam visíveis."""
        if ocorrencia.status == StatusOcorrencia.ARQUIVADA:
            return False
        if ocorrencia.status != StatusOcorrencia.CONCLUIDA or ocorrencia.finalizado_em is None:
            return True
        momento = momento or self.relogio()
        return momento - ocorrencia.finalizado_em <= self.limite_concluidas

    # --- Notas não lidas ---

    def notas_nao_lidas(self, ocorrencia: Ocorrencia) -> int:
        diferenca = ocorrencia.quantidade_notas - self.cache_notas_vistas.obter(ocorrencia.id)
        return max(diferenca, 0)

    def marcar_como_vista(self, ocorrencia: Ocorrencia) -> None:
        """Efeito colateral da abertura do detalhe: registra a contagem atual."""
        self.cache_notas_vistas.registrar(ocorrencia.id, ocorrencia.quantidade_notas)

    # --- Projeção ---

    def montar(
        self,
        ocorrencias: Iterable[Ocorrencia],
        transportadora_id: Optional[str] = None,
        responsavel_id: Optional[str] = None,
    ) -> List[ColunaQuadro]:
        transportadora_id = transportadora_id or FILTRO_TODOS
        responsavel_id = responsavel_id or FILTRO_TODOS
        momento = self.relogio()

        colunas = {status: ColunaQuadro(status=status) for status in COLUNAS_QUADRO}
        for ocorrencia in ocorrencias:
            if not self.passa_filtros(ocorrencia, transportadora_id, responsavel_id):
                continue
            if not self.visivel_no_quadro(ocorrencia, momento):
                continue
            coluna = colunas.get(ocorrencia.status)
            if coluna is not None:
                coluna.cartoes.append(CartaoQuadro(ocorrencia, self.notas_nao_lidas(ocorrencia)))
        return [colunas[status] for status in COLUNAS_QUADRO]
