# logifix/core/estatisticas.py
"""
Agregações financeiras e estatísticas do painel.

Funções puras sobre a coleção em memória: recalculam tudo a cada chamada,
sem cache nem estado incremental (a coleção tem centenas de itens).
"""
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence

from logifix.core.entities import Ocorrencia, StatusOcorrencia, Transportadora

LIMITE_TOP_REGIOES = 5


@dataclass
class ResumoFinanceiro:
    total_contestacao: Decimal
    total_extravio: Decimal
    total_avaria: Decimal


@dataclass
class ContagemTransportadora:
    transportadora_id: str
    nome: str
    total: int
    ativas: int


@dataclass
class ContagemStatus:
    status: StatusOcorrencia
    quantidade: int


@dataclass
class ContagemRegiao:
    uf: str
    quantidade: int
    percentual: int


@dataclass
class IndicadoresPainel:
    total: int
    em_aberto: int
    contestacoes: int
    extravios: int
    concluidas: int


def esta_ativa(ocorrencia: Ocorrencia) -> bool:
    """Ativa = fora de status terminal e sem data de finalização."""
    return not ocorrencia.status.terminal and ocorrencia.finalizado_em is None


def _somar(valores: Iterable[Decimal]) -> Decimal:
    return sum(valores, Decimal('0.00'))


def total_contestacao(ocorrencias: Iterable[Ocorrencia]) -> Decimal:
    return _somar(o.valor_frete or Decimal('0') for o in ocorrencias
                  if o.contestar_fatura and esta_ativa(o))


def total_extravio(ocorrencias: Iterable[Ocorrencia]) -> Decimal:
    return _somar(o.valor_nota or Decimal('0') for o in ocorrencias
                  if o.extravio_devolucao and esta_ativa(o))


def total_avaria(ocorrencias: Iterable[Ocorrencia]) -> Decimal:
    return _somar(o.valor_nota or Decimal('0') for o in ocorrencias
                  if o.avaria and esta_ativa(o))


def resumo_financeiro(ocorrencias: Sequence[Ocorrencia]) -> ResumoFinanceiro:
    return ResumoFinanceiro(
        total_contestacao=total_contestacao(ocorrencias),
        total_extravio=total_extravio(ocorrencias),
        total_avaria=total_avaria(ocorrencias),
    )


def contagem_por_transportadora(
    ocorrencias: Sequence[Ocorrencia], transportadoras: Sequence[Transportadora]
) -> List[ContagemTransportadora]:
    """Total histórico e ativas por transportadora, na ordem do cadastro."""
    resultado = []
    for transportadora in transportadoras:
        vinculadas = [o for o in ocorrencias if o.transportadora_id == transportadora.id]
        resultado.append(ContagemTransportadora(
            transportadora_id=transportadora.id,
            nome=transportadora.nome,
            total=len(vinculadas),
            ativas=sum(1 for o in vinculadas if esta_ativa(o)),
        ))
    return resultado


def contagem_por_status(ocorrencias: Iterable[Ocorrencia]) -> List[ContagemStatus]:
    """Todos os status declarados aparecem, inclusive os zerados."""
    contagem = Counter(o.status for o in ocorrencias)
    return [ContagemStatus(status=status, quantidade=contagem.get(status, 0))
            for status in StatusOcorrencia]


def _percentual(parte: int, total: int) -> int:
    """Percentual inteiro com meio arredondado para cima (12,5 -> 13)."""
    if not total:
        return 0
    return int((Decimal(parte) * 100 / total).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def top_regioes(ocorrencias: Sequence[Ocorrencia], limite: int = LIMITE_TOP_REGIOES) -> List[ContagemRegiao]:
    """
    UFs com mais ocorrências, em ordem decrescente. O sort é estável: empates
    mantêm a ordem em que a UF apareceu primeiro na coleção.
    """
    contagem = Counter(o.uf for o in ocorrencias)
    total = len(ocorrencias)
    ordenadas = sorted(contagem.items(), key=lambda item: item[1], reverse=True)[:limite]
    return [
        ContagemRegiao(uf=uf, quantidade=quantidade,
                       percentual=_percentual(quantidade, total))
        for uf, quantidade in ordenadas
    ]


def indicadores_painel(ocorrencias: Sequence[Ocorrencia]) -> IndicadoresPainel:
    """Cartões de KPI do painel (contagens simples, sem o filtro de ativas)."""
    return IndicadoresPainel(
        total=len(ocorrencias),
        em_aberto=sum(1 for o in ocorrencias if o.status != StatusOcorrencia.CONCLUIDA),
        contestacoes=sum(1 for o in ocorrencias if o.contestar_fatura),
        extravios=sum(1 for o in ocorrencias if o.extravio_devolucao),
        concluidas=sum(1 for o in ocorrencias if o.status == StatusOcorrencia.CONCLUIDA),
    )
