# logifix/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios,
cache de notas vistas) DEVE seguir para se conectar à camada Core (Casos de Uso).
Toda escrita é seguida de uma releitura completa: os repositórios não mantêm estado.
"""

from typing import Protocol, List, Optional
from abc import abstractmethod

from logifix.core.entities import (
    Ocorrencia, Nota, Transportadora, Usuario, LogAuditoria
)


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IOcorrenciaRepository(Protocol):
    """Protocolo para a persistência de Ocorrências e suas notas."""

    @abstractmethod
    def listar(self) -> List[Ocorrencia]: ...

    @abstractmethod
    def buscar_por_id(self, ocorrencia_id: str) -> Optional[Ocorrencia]: ...

    @abstractmethod
    def buscar_por_nota_fiscal(self, numero_nota_fiscal: str) -> Optional[Ocorrencia]: ...

    @abstractmethod
    def inserir(self, ocorrencia: Ocorrencia) -> Ocorrencia:
        """Insere a ocorrência e as notas iniciais que ela carregar."""
        ...

    @abstractmethod
    def atualizar(self, ocorrencia: Ocorrencia) -> Ocorrencia:
        """Grava os campos da ocorrência (as notas são gravadas à parte)."""
        ...

    @abstractmethod
    def excluir(self, ocorrencia_id: str) -> None: ...

    @abstractmethod
    def inserir_nota(self, ocorrencia_id: str, nota: Nota) -> Nota: ...

    @abstractmethod
    def buscar_nota(self, nota_id: str) -> Optional[Nota]: ...

    @abstractmethod
    def atualizar_nota(self, nota_id: str, texto: str) -> Nota: ...

    @abstractmethod
    def ocorrencia_da_nota(self, nota_id: str) -> Optional[str]: ...


class ITransportadoraRepository(Protocol):
    """Protocolo para a persistência de Transportadoras."""

    @abstractmethod
    def listar(self) -> List[Transportadora]: ...

    @abstractmethod
    def buscar_por_id(self, transportadora_id: str) -> Optional[Transportadora]: ...

    @abstractmethod
    def salvar(self, transportadora: Transportadora) -> Transportadora: ...

    @abstractmethod
    def excluir(self, transportadora_id: str) -> None: ...


class IUsuarioRepository(Protocol):
    """Protocolo para a persistência de Usuários (perfis)."""

    @abstractmethod
    def listar(self) -> List[Usuario]: ...

    @abstractmethod
    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]: ...

    @abstractmethod
    def buscar_por_email(self, email: str) -> Optional[Usuario]: ...

    @abstractmethod
    def salvar(self, usuario: Usuario, senha: Optional[str] = None) -> Usuario: ...

    @abstractmethod
    def excluir(self, usuario_id: str) -> None: ...


class ILogAuditoriaRepository(Protocol):
    """Protocolo para o registro de auditoria (somente inclusão)."""

    @abstractmethod
    def registrar(self, log: LogAuditoria) -> LogAuditoria: ...

    @abstractmethod
    def listar(self) -> List[LogAuditoria]:
        """Retorna os registros do mais recente para o mais antigo."""
        ...


# ====================================================================
# 2. ESTADO LOCAL DO VISUALIZADOR
# ====================================================================

class ICacheNotasVistas(Protocol):
    """
    Armazenamento chave-valor local (por visualizador) com a quantidade de notas
    já vistas em cada ocorrência. Não é sincronizado entre dispositivos.
    """

    @abstractmethod
    def obter(self, ocorrencia_id: str) -> int: ...

    @abstractmethod
    def registrar(self, ocorrencia_id: str, quantidade: int) -> None: ...
