# logifix/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.

Toda operação de escrita segue o padrão "comando e releitura": o caso de uso
grava uma única ocorrência pelo repositório e devolve a versão relida do banco.
"""
import logging
from typing import Any, Callable, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

# Entidades e Exceções
from logifix.core.entities import (
    Ocorrencia, Nota, Transportadora, Usuario, LogAuditoria,
    StatusOcorrencia, PapelUsuario, Segmento, FLAGS_OCORRENCIA,
    agora, gerar_id_ocorrencia,
)
from logifix.core.exceptions import (
    DadosInvalidosError,
    NotaVaziaError,
    StatusInvalidoError,
    NotaFiscalDuplicadaError,
    OperacaoNaoPermitidaError,
    OcorrenciaNaoEncontradaError,
    TransportadoraNaoEncontradaError,
    UsuarioNaoEncontradoError,
    NotaNaoEncontradaError,
    FalhaGravacaoError,
)

from logifix.core import estatisticas

# Portas (Interfaces) - Importadas do logifix/core/ports.py
from logifix.core.ports import (
    IOcorrenciaRepository,
    ITransportadoraRepository,
    IUsuarioRepository,
    ILogAuditoriaRepository,
)

logger = logging.getLogger(__name__)

NOTA_INICIAL_PADRAO = 'Reclamação aberta.'
MAX_TENTATIVAS_ID = 20
CAMPOS_OBRIGATORIOS = {
    'transportadora_id': 'Selecione uma transportadora.',
    'codigo_rastreio': 'Informe o código de rastreio.',
    'numero_nota_fiscal': 'Informe o número da nota fiscal.',
    'destinatario': 'Informe o destinatário.',
    'uf': 'Informe a UF.',
}
CAMPOS_EDITAVEIS = frozenset({
    'transportadora_id', 'codigo_rastreio', 'numero_nota_fiscal', 'destinatario',
    'uf', 'valor_nota', 'valor_frete', 'data_ocorrencia', 'status',
    'reenviado', 'transportadora_reenvio_id', 'codigo_rastreio_reenvio',
    'contestar_fatura', 'extravio_devolucao', 'avaria', 'responsaveis',
})


# ====================================================================
# 0. REGRAS DO CICLO DE VIDA
# ====================================================================

def converter_status(valor: Any) -> StatusOcorrencia:
    """Aceita o membro do enum, o rótulo ('Em Aberto') ou o nome ('ABERTA')."""
    if isinstance(valor, StatusOcorrencia):
        return valor
    try:
        return StatusOcorrencia(valor)
    except ValueError:
        try:
            return StatusOcorrencia[str(valor).upper()]
        except KeyError:
            raise StatusInvalidoError(f"O status '{valor}' não é um status de ocorrência válido.")


def transicao_permitida(origem: StatusOcorrencia, destino: StatusOcorrencia) -> bool:
    """
    Máquina de estados aberta: qualquer par de status é aceito.
    Para restringir movimentos, troque por uma tabela de transições.
    """
    return True


def aplicar_regra_finalizacao(ocorrencia: Ocorrencia, momento: datetime) -> Ocorrencia:
    """
    Status terminal (Concluído/Arquivado) exige finalizado_em: preenche se
    estiver vazio e preserva o valor existente. Fora dele, limpa o campo.
    """
    if ocorrencia.status.terminal:
        if ocorrencia.finalizado_em is None:
            ocorrencia.finalizado_em = momento
    else:
        ocorrencia.finalizado_em = None
    return ocorrencia


def _texto_obrigatorio(texto: Optional[str]) -> str:
    if texto is None or not texto.strip():
        raise NotaVaziaError()
    return texto.strip()


def _valor_monetario(valor: Any, campo: str) -> Decimal:
    if valor in (None, ''):
        return Decimal('0.00')
    try:
        convertido = Decimal(str(valor))
    except (InvalidOperation, ValueError):
        raise DadosInvalidosError(f"O campo '{campo}' deve ser um valor numérico.")
    if not convertido.is_finite():
        raise DadosInvalidosError(f"O campo '{campo}' deve ser um valor numérico.")
    if convertido < 0:
        raise DadosInvalidosError(f"O campo '{campo}' não pode ser negativo.")
    return convertido.quantize(Decimal('0.01'))


def _normalizar_uf(uf: str) -> str:
    uf = (uf or '').strip().upper()
    if len(uf) != 2:
        raise DadosInvalidosError("A UF deve conter exatamente 2 letras.")
    return uf


# ====================================================================
# 1. AUDITORIA
# ====================================================================

class RegistrarAuditoriaUseCase:
    """
    Registra as ações dos usuários. O log é um canal lateral: uma falha ao
    gravá-lo nunca interrompe a operação principal.
    """
    def __init__(self, log_repo: ILogAuditoriaRepository):
        self.log_repo = log_repo

    def registrar(self, autor: Usuario, acao: str, detalhes: str) -> Optional[LogAuditoria]:
        log = LogAuditoria(
            acao=acao,
            detalhes=detalhes,
            usuario_id=autor.id,
            usuario_nome=autor.nome,
        )
        try:
            return self.log_repo.registrar(log)
        except FalhaGravacaoError as e:
            logger.warning("Falha ao registrar auditoria '%s': %s", acao, e)
            return None

    def listar(self) -> List[LogAuditoria]:
        """Retorna os registros do mais recente para o mais antigo."""
        return sorted(self.log_repo.listar(), key=lambda log: log.data, reverse=True)


# ====================================================================
# 2. CASOS DE USO DE OCORRÊNCIAS (MOTOR DO CICLO DE VIDA)
# ====================================================================

class _OcorrenciaUseCaseBase:
    """Dependências e utilitários comuns aos casos de uso de ocorrência."""

    def __init__(
        self,
        ocorrencia_repo: IOcorrenciaRepository,
        usuario_repo: IUsuarioRepository,
        auditoria: RegistrarAuditoriaUseCase,
        responsavel_padrao_email: Optional[str] = None,
        relogio: Callable[[], datetime] = agora,
    ):
        self.ocorrencia_repo = ocorrencia_repo
        self.usuario_repo = usuario_repo
        self.auditoria = auditoria
        self.responsavel_padrao_email = responsavel_padrao_email
        self.relogio = relogio

    def _obter(self, ocorrencia_id: str) -> Ocorrencia:
        ocorrencia = self.ocorrencia_repo.buscar_por_id(ocorrencia_id)
        if not ocorrencia:
            raise OcorrenciaNaoEncontradaError(f"Ocorrência {ocorrencia_id} não encontrada.")
        return ocorrencia

    def _gravar(self, ocorrencia: Ocorrencia) -> Ocorrencia:
        self.ocorrencia_repo.atualizar(ocorrencia)
        return self._obter(ocorrencia.id)

    def _responsavel_padrao(self) -> Optional[Usuario]:
        if not self.responsavel_padrao_email:
            return None
        usuario = self.usuario_repo.buscar_por_email(self.responsavel_padrao_email)
        if not usuario:
            logger.info(
                "Responsável padrão %s não encontrado; atribuição automática ignorada.",
                self.responsavel_padrao_email,
            )
        return usuario

    def _atribuir_responsavel_padrao(self, ocorrencia: Ocorrencia) -> None:
        usuario = self._responsavel_padrao()
        if usuario and usuario.id:
            ocorrencia.adicionar_responsavel(usuario.id)


class CriarOcorrenciaUseCase(_OcorrenciaUseCaseBase):
    """
    Caso de Uso do fluxo "Nova Reclamação": bloqueia nota fiscal duplicada,
    atribui o responsável padrão e grava a ocorrência com a nota inicial.
    """
    def __init__(self, *args, gerar_id: Callable[[], str] = gerar_id_ocorrencia, **kwargs):
        super().__init__(*args, **kwargs)
        self.gerar_id = gerar_id

    def executar(self, rascunho: Ocorrencia, autor: Usuario, nota_inicial: Optional[str] = None) -> Ocorrencia:
        for campo, mensagem in CAMPOS_OBRIGATORIOS.items():
            valor = getattr(rascunho, campo)
            if valor is None or not str(valor).strip():
                raise DadosInvalidosError(mensagem)

        existente = self.ocorrencia_repo.buscar_por_nota_fiscal(rascunho.numero_nota_fiscal)
        if existente:
            raise NotaFiscalDuplicadaError(rascunho.numero_nota_fiscal, existente.id)

        rascunho.uf = _normalizar_uf(rascunho.uf)
        rascunho.valor_nota = _valor_monetario(rascunho.valor_nota, 'valor_nota')
        rascunho.valor_frete = _valor_monetario(rascunho.valor_frete, 'valor_frete')
        rascunho.status = StatusOcorrencia.ABERTA
        rascunho.finalizado_em = None
        rascunho.criado_em = self.relogio()
        rascunho.id = self._gerar_id_livre()

        self._atribuir_responsavel_padrao(rascunho)

        texto = (nota_inicial or '').strip() or NOTA_INICIAL_PADRAO
        rascunho.notas = [Nota(texto=texto, autor=autor.nome, data=self.relogio())]

        self.ocorrencia_repo.inserir(rascunho)
        criada = self._obter(rascunho.id)
        logger.info("Ocorrência %s criada por %s", criada.id, autor.email)
        self.auditoria.registrar(
            autor, 'Nova Ocorrência',
            f"Criou a ocorrência {criada.id} para {criada.destinatario}",
        )
        return criada

    def _gerar_id_livre(self) -> str:
        for _ in range(MAX_TENTATIVAS_ID):
            candidato = self.gerar_id()
            if not self.ocorrencia_repo.buscar_por_id(candidato):
                return candidato
        raise FalhaGravacaoError("Não foi possível gerar um identificador livre para a ocorrência.")


class GerenciarOcorrenciaUseCase(_OcorrenciaUseCaseBase):
    """
    Caso de Uso que centraliza as mudanças de estado de UMA ocorrência:
    status, finalização, restauração, flags, reenvio, edição e exclusão.
    """

    def listar(self) -> List[Ocorrencia]:
        return self.ocorrencia_repo.listar()

    def detalhar(self, ocorrencia_id: str) -> Ocorrencia:
        return self._obter(ocorrencia_id)

    def alterar_status(
        self, ocorrencia_id: str, novo_status: Any, autor: Usuario, via_quadro: bool = False
    ) -> Ocorrencia:
        """Seletor genérico de status; via_quadro indica o arrastar-e-soltar do Kanban."""
        destino = converter_status(novo_status)
        if destino == StatusOcorrencia.ARQUIVADA:
            raise StatusInvalidoError("Use a ação de finalizar para arquivar uma ocorrência.")

        ocorrencia = self._obter(ocorrencia_id)
        origem = ocorrencia.status
        if origem == destino:
            return ocorrencia
        if not transicao_permitida(origem, destino):
            raise StatusInvalidoError(f"Transição de '{origem.value}' para '{destino.value}' não permitida.")

        ocorrencia.status = destino
        aplicar_regra_finalizacao(ocorrencia, self.relogio())
        atualizada = self._gravar(ocorrencia)
        if via_quadro:
            self.auditoria.registrar(autor, 'Moveu Ocorrência', f"Moveu {ocorrencia_id} para {destino.value}")
        else:
            self.auditoria.registrar(
                autor, 'Alterou Status',
                f"Alterou status de {ocorrencia_id} para {destino.value}",
            )
        return atualizada

    def finalizar(self, ocorrencia_id: str, autor: Usuario) -> Ocorrencia:
        """Confirma manualmente a conclusão, movendo a ocorrência para Arquivado."""
        ocorrencia = self._obter(ocorrencia_id)
        if ocorrencia.status == StatusOcorrencia.ARQUIVADA:
            return ocorrencia

        ocorrencia.status = StatusOcorrencia.ARQUIVADA
        aplicar_regra_finalizacao(ocorrencia, self.relogio())
        atualizada = self._gravar(ocorrencia)
        self.auditoria.registrar(autor, 'Finalizou Ocorrência', f"Arquivou a ocorrência {ocorrencia_id}")
        return atualizada

    def restaurar(self, ocorrencia_id: str, autor: Usuario) -> Ocorrencia:
        """Reabre uma ocorrência concluída/arquivada e devolve o responsável padrão."""
        ocorrencia = self._obter(ocorrencia_id)
        if not ocorrencia.status.terminal:
            raise StatusInvalidoError(
                f"Somente ocorrências concluídas ou arquivadas podem ser restauradas "
                f"(atual: {ocorrencia.status.value})."
            )

        ocorrencia.status = StatusOcorrencia.ABERTA
        aplicar_regra_finalizacao(ocorrencia, self.relogio())
        self._atribuir_responsavel_padrao(ocorrencia)
        atualizada = self._gravar(ocorrencia)
        self.auditoria.registrar(autor, 'Restaurou Ocorrência', f"Reabriu a ocorrência {ocorrencia_id}")
        return atualizada

    def alternar_flag(self, ocorrencia_id: str, flag: str, autor: Usuario) -> Ocorrencia:
        """
        Inverte exatamente uma flag. Desativar 'reenviado' mantém a
        transportadora e o rastreio do reenvio para preservar o histórico.
        """
        if flag not in FLAGS_OCORRENCIA:
            raise DadosInvalidosError(f"A opção '{flag}' não existe.")

        ocorrencia = self._obter(ocorrencia_id)
        ativando = not getattr(ocorrencia, flag)
        setattr(ocorrencia, flag, ativando)
        atualizada = self._gravar(ocorrencia)
        self.auditoria.registrar(
            autor, 'Alterou Opção',
            f"{'Ativou' if ativando else 'Desativou'} {FLAGS_OCORRENCIA[flag]} em {ocorrencia_id}",
        )
        return atualizada

    def atualizar_reenvio(
        self,
        ocorrencia_id: str,
        autor: Usuario,
        transportadora_id: Optional[str] = None,
        codigo_rastreio: Optional[str] = None,
    ) -> Ocorrencia:
        """Atualiza os dados do reenvio independentemente da flag 'reenviado'."""
        ocorrencia = self._obter(ocorrencia_id)
        if transportadora_id is not None:
            ocorrencia.transportadora_reenvio_id = transportadora_id or None
        if codigo_rastreio is not None:
            ocorrencia.codigo_rastreio_reenvio = codigo_rastreio
        atualizada = self._gravar(ocorrencia)
        self.auditoria.registrar(autor, 'Atualizou Reenvio', f"Alterou dados de reenvio em {ocorrencia_id}")
        return atualizada

    def editar_campos(self, ocorrencia_id: str, alteracoes: Dict[str, Any], autor: Usuario) -> Ocorrencia:
        """Edição completa do cartão. O status faz parte do formulário."""
        desconhecidos = set(alteracoes) - CAMPOS_EDITAVEIS
        if desconhecidos:
            raise DadosInvalidosError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}.")

        ocorrencia = self._obter(ocorrencia_id)

        for campo, valor in alteracoes.items():
            if campo in ('valor_nota', 'valor_frete'):
                valor = _valor_monetario(valor, campo)
            elif campo == 'uf':
                valor = _normalizar_uf(valor)
            elif campo == 'status':
                valor = converter_status(valor)
            elif campo == 'data_ocorrencia' and isinstance(valor, str):
                try:
                    valor = date.fromisoformat(valor)
                except ValueError:
                    raise DadosInvalidosError("Data da ocorrência inválida.")
            elif campo == 'responsaveis':
                valor = list(dict.fromkeys(str(v) for v in (valor or [])))
            elif campo in CAMPOS_OBRIGATORIOS and (valor is None or not str(valor).strip()):
                raise DadosInvalidosError(CAMPOS_OBRIGATORIOS[campo])
            setattr(ocorrencia, campo, valor)

        if 'numero_nota_fiscal' in alteracoes:
            existente = self.ocorrencia_repo.buscar_por_nota_fiscal(ocorrencia.numero_nota_fiscal)
            if existente and existente.id != ocorrencia.id:
                raise NotaFiscalDuplicadaError(ocorrencia.numero_nota_fiscal, existente.id)

        aplicar_regra_finalizacao(ocorrencia, self.relogio())
        atualizada = self._gravar(ocorrencia)
        self.auditoria.registrar(
            autor, 'Editou Ocorrência',
            f"Alterou dados principais da ocorrência {ocorrencia_id}",
        )
        return atualizada

    def excluir(self, ocorrencia_id: str, autor: Usuario) -> None:
        """Exclusão definitiva; o único rastro é o log de auditoria."""
        self._obter(ocorrencia_id)
        self.ocorrencia_repo.excluir(ocorrencia_id)
        logger.info("Ocorrência %s excluída por %s", ocorrencia_id, autor.email)
        self.auditoria.registrar(
            autor, 'Excluiu Ocorrência',
            f"Removeu permanentemente a ocorrência {ocorrencia_id}",
        )


class NotasOcorrenciaUseCase:
    """Caso de Uso para a linha do tempo (notas internas) da ocorrência."""
    def __init__(
        self,
        ocorrencia_repo: IOcorrenciaRepository,
        auditoria: RegistrarAuditoriaUseCase,
        relogio: Callable[[], datetime] = agora,
    ):
        self.ocorrencia_repo = ocorrencia_repo
        self.auditoria = auditoria
        self.relogio = relogio

    def adicionar(self, ocorrencia_id: str, texto: str, autor: Usuario) -> Ocorrencia:
        texto = _texto_obrigatorio(texto)
        if not self.ocorrencia_repo.buscar_por_id(ocorrencia_id):
            raise OcorrenciaNaoEncontradaError(f"Ocorrência {ocorrencia_id} não encontrada.")

        self.ocorrencia_repo.inserir_nota(
            ocorrencia_id, Nota(texto=texto, autor=autor.nome, data=self.relogio())
        )
        self.auditoria.registrar(
            autor, 'Adicionou Nota',
            f'Comentou na ocorrência {ocorrencia_id}: "{texto[:30]}..."',
        )
        return self.ocorrencia_repo.buscar_por_id(ocorrencia_id)

    def editar(self, nota_id: str, texto: str, autor: Usuario) -> Nota:
        """Troca apenas o texto; data e autor originais são mantidos."""
        texto = _texto_obrigatorio(texto)
        if not self.ocorrencia_repo.buscar_nota(nota_id):
            raise NotaNaoEncontradaError(f"Nota {nota_id} não encontrada.")

        nota = self.ocorrencia_repo.atualizar_nota(nota_id, texto)
        ocorrencia_id = self.ocorrencia_repo.ocorrencia_da_nota(nota_id)
        self.auditoria.registrar(autor, 'Editou Nota', f"Alterou uma nota existente em {ocorrencia_id}")
        return nota


class ListarOcorrenciasFinalizadasUseCase:
    """Histórico de ocorrências concluídas e arquivadas, com busca textual."""
    def __init__(self, ocorrencia_repo: IOcorrenciaRepository, transportadora_repo: ITransportadoraRepository):
        self.ocorrencia_repo = ocorrencia_repo
        self.transportadora_repo = transportadora_repo

    def executar(self, busca: Optional[str] = None) -> List[Ocorrencia]:
        nomes = {t.id: t.nome.lower() for t in self.transportadora_repo.listar()}
        termo = (busca or '').strip().lower()

        finalizadas = [o for o in self.ocorrencia_repo.listar() if o.status.terminal]
        if not termo:
            return finalizadas

        def corresponde(o: Ocorrencia) -> bool:
            campos = (o.id, o.destinatario, o.codigo_rastreio, o.numero_nota_fiscal,
                      nomes.get(o.transportadora_id, ''))
            return any(termo in (campo or '').lower() for campo in campos)

        return [o for o in finalizadas if corresponde(o)]


# ====================================================================
# 3. CASOS DE USO ADMINISTRATIVOS
# ====================================================================

def _exigir_master(autor: Usuario) -> None:
    if not autor.is_master:
        raise OperacaoNaoPermitidaError("Apenas usuários Master podem executar esta ação.")


class GerenciarTransportadorasUseCase:
    """Cadastro de transportadoras. Escritas restritas ao papel Master."""
    def __init__(self, transportadora_repo: ITransportadoraRepository, auditoria: RegistrarAuditoriaUseCase):
        self.transportadora_repo = transportadora_repo
        self.auditoria = auditoria

    def listar(self) -> List[Transportadora]:
        return self.transportadora_repo.listar()

    def detalhar(self, transportadora_id: str) -> Transportadora:
        transportadora = self.transportadora_repo.buscar_por_id(transportadora_id)
        if not transportadora:
            raise TransportadoraNaoEncontradaError(f"Transportadora {transportadora_id} não encontrada.")
        return transportadora

    def criar(self, transportadora: Transportadora, autor: Usuario) -> Transportadora:
        _exigir_master(autor)
        self._validar(transportadora)
        transportadora.id = None
        criada = self.transportadora_repo.salvar(transportadora)
        self.auditoria.registrar(autor, 'Criou Transportadora', f"Cadastrou a transportadora {criada.nome}")
        return criada

    def atualizar(self, transportadora: Transportadora, autor: Usuario) -> Transportadora:
        _exigir_master(autor)
        self._validar(transportadora)
        self.detalhar(transportadora.id)
        atualizada = self.transportadora_repo.salvar(transportadora)
        self.auditoria.registrar(
            autor, 'Editou Transportadora', f"Atualizou dados da transportadora {atualizada.nome}"
        )
        return atualizada

    def excluir(self, transportadora_id: str, autor: Usuario) -> None:
        """Ocorrências vinculadas mantêm a referência (sem exclusão em cascata)."""
        _exigir_master(autor)
        transportadora = self.detalhar(transportadora_id)
        self.transportadora_repo.excluir(transportadora_id)
        self.auditoria.registrar(autor, 'Excluiu Transportadora', f"Removeu a transportadora {transportadora.nome}")

    @staticmethod
    def _validar(transportadora: Transportadora) -> None:
        if not transportadora.nome or not transportadora.nome.strip():
            raise DadosInvalidosError("Informe o nome da transportadora.")
        try:
            transportadora.segmento = Segmento(transportadora.segmento)
        except ValueError:
            raise DadosInvalidosError(f"Segmento '{transportadora.segmento}' inválido.")


class GerenciarUsuariosAdminUseCase:
    """Caso de Uso para gestão de usuários no painel administrativo (Master)."""
    def __init__(self, usuario_repo: IUsuarioRepository, auditoria: RegistrarAuditoriaUseCase):
        self.usuario_repo = usuario_repo
        self.auditoria = auditoria

    def listar_todos(self, autor: Usuario) -> List[Usuario]:
        _exigir_master(autor)
        return self.usuario_repo.listar()

    def criar(self, usuario: Usuario, senha: str, autor: Usuario) -> Usuario:
        _exigir_master(autor)
        if not usuario.email or not senha:
            raise DadosInvalidosError("E-mail e senha são obrigatórios para criar um usuário.")
        if self.usuario_repo.buscar_por_email(usuario.email):
            raise DadosInvalidosError(f"Já existe um usuário com o e-mail {usuario.email}.")
        usuario.id = None
        criado = self.usuario_repo.salvar(usuario, senha=senha)
        self.auditoria.registrar(autor, 'Criou Usuário', f"Adicionou o usuário {criado.nome} ({criado.papel.value})")
        return criado

    def atualizar(self, usuario_id: str, nome: str, papel: Any, autor: Usuario) -> Usuario:
        """Somente nome e papel são editáveis; o e-mail pertence à autenticação."""
        _exigir_master(autor)
        usuario = self.usuario_repo.buscar_por_id(usuario_id)
        if not usuario:
            raise UsuarioNaoEncontradoError(f"Usuário {usuario_id} não encontrado.")
        try:
            usuario.papel = PapelUsuario(papel)
        except ValueError:
            raise DadosInvalidosError(f"Papel '{papel}' inválido.")
        usuario.nome = nome or usuario.nome
        atualizado = self.usuario_repo.salvar(usuario)
        self.auditoria.registrar(autor, 'Editou Usuário', f"Alterou dados do usuário {atualizado.nome}")
        return atualizado

    def excluir(self, usuario_id: str, autor: Usuario) -> None:
        _exigir_master(autor)
        if str(usuario_id) == str(autor.id):
            raise OperacaoNaoPermitidaError("Você não pode excluir a si mesmo.")
        usuario = self.usuario_repo.buscar_por_id(usuario_id)
        if not usuario:
            raise UsuarioNaoEncontradoError(f"Usuário {usuario_id} não encontrado.")
        self.usuario_repo.excluir(usuario_id)
        self.auditoria.registrar(autor, 'Excluiu Usuário', f"Removeu o perfil de {usuario.nome}")


# ====================================================================
# 4. PAINEL E RESUMO FINANCEIRO
# ====================================================================

class PainelUseCase:
    """Recalcula o painel e o resumo financeiro a partir da coleção completa."""
    def __init__(self, ocorrencia_repo: IOcorrenciaRepository, transportadora_repo: ITransportadoraRepository):
        self.ocorrencia_repo = ocorrencia_repo
        self.transportadora_repo = transportadora_repo

    def executar(self) -> Dict[str, Any]:
        ocorrencias = self.ocorrencia_repo.listar()
        transportadoras = self.transportadora_repo.listar()
        return {
            'indicadores': estatisticas.indicadores_painel(ocorrencias),
            'por_transportadora': estatisticas.contagem_por_transportadora(ocorrencias, transportadoras),
            'por_status': estatisticas.contagem_por_status(ocorrencias),
            'regioes': estatisticas.top_regioes(ocorrencias),
            'financeiro': estatisticas.resumo_financeiro(ocorrencias),
        }

    def resumo_financeiro(self) -> estatisticas.ResumoFinanceiro:
        return estatisticas.resumo_financeiro(self.ocorrencia_repo.listar())
