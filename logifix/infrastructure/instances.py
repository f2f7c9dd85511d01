"""
Módulo de inicialização dos repositórios.
Deve ser importado somente depois que o Django estiver configurado.
"""

from .repositories import (
    OcorrenciaRepositoryDjango as OcorrenciaRepository,
    TransportadoraRepositoryDjango as TransportadoraRepository,
    UsuarioRepositoryDjango as UsuarioRepository,
    LogAuditoriaRepositoryDjango as LogAuditoriaRepository,
)

# Instâncias globais dos repositórios
ocorrencia_repo = OcorrenciaRepository()
transportadora_repo = TransportadoraRepository()
usuario_repo = UsuarioRepository()
log_repo = LogAuditoriaRepository()
