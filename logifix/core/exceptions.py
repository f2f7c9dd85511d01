class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    pass

class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        self.message = message
        super().__init__(self.message)

class NotaVaziaError(DadosInvalidosError):
    """Erro levantado ao tentar gravar uma nota sem texto."""
    def __init__(self, message="O texto da nota não pode ficar em branco."):
        super().__init__(message)

class StatusInvalidoError(DadosInvalidosError):
    """Erro levantado ao tentar definir um status inválido para a operação."""
    def __init__(self, message="O status fornecido não é válido para esta ocorrência."):
        super().__init__(message)

class NotaFiscalDuplicadaError(BaseErroCore):
    """Erro levantado quando já existe uma ocorrência para a mesma nota fiscal."""
    def __init__(self, numero_nota_fiscal: str, ocorrencia_existente_id: str, message=None):
        self.numero_nota_fiscal = numero_nota_fiscal
        self.ocorrencia_existente_id = ocorrencia_existente_id
        if message is None:
            message = (f"Já existe a ocorrência {ocorrencia_existente_id} "
                       f"para a nota fiscal {numero_nota_fiscal}.")
        super().__init__(message)

class OperacaoNaoPermitidaError(BaseErroCore):
    """Erro levantado quando o usuário não pode executar a operação."""
    def __init__(self, message="Operação não permitida para este usuário."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        self.message = message
        super().__init__(self.message)

class OcorrenciaNaoEncontradaError(ItemNaoEncontradoError):
    """Erro específico para Ocorrências não encontradas."""
    pass

class TransportadoraNaoEncontradaError(ItemNaoEncontradoError):
    pass

class UsuarioNaoEncontradoError(ItemNaoEncontradoError):
    pass

class NotaNaoEncontradaError(ItemNaoEncontradoError):
    pass

class FalhaGravacaoError(BaseErroCore):
    """Erro levantado quando o banco de dados rejeita uma inclusão/alteração/exclusão."""
    def __init__(self, message="Não foi possível gravar as alterações."):
        self.message = message
        super().__init__(self.message)

class FalhaLeituraError(BaseErroCore):
    """Erro levantado quando a leitura no banco de dados falha."""
    def __init__(self, message="Não foi possível carregar os dados."):
        self.message = message
        super().__init__(self.message)
