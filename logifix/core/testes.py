# logifix/core/testes.py

import copy
import unittest
from unittest.mock import Mock, ANY
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

# Importamos as classes que queremos testar
from logifix.core.use_cases import (
    RegistrarAuditoriaUseCase,
    CriarOcorrenciaUseCase,
    GerenciarOcorrenciaUseCase,
    NotasOcorrenciaUseCase,
    ListarOcorrenciasFinalizadasUseCase,
    GerenciarTransportadorasUseCase,
    GerenciarUsuariosAdminUseCase,
    PainelUseCase,
    NOTA_INICIAL_PADRAO,
    converter_status,
    transicao_permitida,
)
from logifix.core.entities import (
    Ocorrencia, Nota, Transportadora, Usuario, LogAuditoria,
    StatusOcorrencia, PapelUsuario, Segmento,
)
from logifix.core.exceptions import (
    DadosInvalidosError,
    NotaVaziaError,
    StatusInvalidoError,
    NotaFiscalDuplicadaError,
    OperacaoNaoPermitidaError,
    OcorrenciaNaoEncontradaError,
    NotaNaoEncontradaError,
    FalhaGravacaoError,
)
from logifix.core.quadro import ProjecaoQuadro, CacheNotasVistasMemoria, COLUNAS_QUADRO
from logifix.core import estatisticas

AGORA = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
EMAIL_PADRAO = 'carlos@logifix.local'


def relogio():
    return AGORA


class OcorrenciaRepositoryMemoria:
    """
    Repositório em memória usado nos testes. Devolve cópias, como um banco
    faria, para que o "comando e releitura" seja exercitado de verdade.
    """

    def __init__(self, ocorrencias=()):
        self.dados = {}
        self._seq_nota = 0
        for ocorrencia in ocorrencias:
            self.inserir(ocorrencia)

    def listar(self):
        return [copy.deepcopy(o) for o in self.dados.values()]

    def buscar_por_id(self, ocorrencia_id):
        ocorrencia = self.dados.get(ocorrencia_id)
        return copy.deepcopy(ocorrencia) if ocorrencia else None

    def buscar_por_nota_fiscal(self, numero_nota_fiscal):
        for ocorrencia in self.dados.values():
            if ocorrencia.numero_nota_fiscal == numero_nota_fiscal:
                return copy.deepcopy(ocorrencia)
        return None

    def inserir(self, ocorrencia):
        for nota in ocorrencia.notas:
            self._seq_nota += 1
            nota.id = str(self._seq_nota)
        self.dados[ocorrencia.id] = copy.deepcopy(ocorrencia)
        return ocorrencia

    def atualizar(self, ocorrencia):
        gravada = copy.deepcopy(ocorrencia)
        gravada.notas = self.dados[ocorrencia.id].notas
        self.dados[ocorrencia.id] = gravada
        return ocorrencia

    def excluir(self, ocorrencia_id):
        self.dados.pop(ocorrencia_id, None)

    def inserir_nota(self, ocorrencia_id, nota):
        self._seq_nota += 1
        nota.id = str(self._seq_nota)
        self.dados[ocorrencia_id].notas.append(copy.deepcopy(nota))
        return nota

    def _localizar_nota(self, nota_id):
        for ocorrencia in self.dados.values():
            for nota in ocorrencia.notas:
                if nota.id == nota_id:
                    return ocorrencia, nota
        return None, None

    def buscar_nota(self, nota_id):
        _, nota = self._localizar_nota(nota_id)
        return copy.deepcopy(nota) if nota else None

    def atualizar_nota(self, nota_id, texto):
        _, nota = self._localizar_nota(nota_id)
        nota.texto = texto
        return copy.deepcopy(nota)

    def ocorrencia_da_nota(self, nota_id):
        ocorrencia, _ = self._localizar_nota(nota_id)
        return ocorrencia.id if ocorrencia else None


def nova_ocorrencia(id='OC-1001', **campos):
    dados = dict(
        id=id,
        transportadora_id='t1',
        codigo_rastreio='BR123456789',
        numero_nota_fiscal=f'NF-{id}',
        destinatario='João Silva',
        uf='SP',
        criado_em=AGORA - timedelta(days=10),
        data_ocorrencia=date(2024, 3, 1),
    )
    dados.update(campos)
    return Ocorrencia(**dados)


class BaseOcorrenciaTestCase(unittest.TestCase):

    def setUp(self):
        """
        Prepara o repositório em memória, um repositório de usuários simulado
        (que encontra o responsável padrão) e a auditoria simulada.
        """
        self.carlos = Usuario(id='u1', nome='Carlos Admin', email=EMAIL_PADRAO, papel=PapelUsuario.MASTER)
        self.operador = Usuario(id='u2', nome='Operador Logístico', email='operador@logifix.local')

        self.repo = OcorrenciaRepositoryMemoria()
        self.usuario_repo_mock = Mock()
        self.usuario_repo_mock.buscar_por_email.return_value = self.carlos
        self.auditoria_mock = Mock()

        self.gerenciar = GerenciarOcorrenciaUseCase(
            self.repo, self.usuario_repo_mock, self.auditoria_mock,
            responsavel_padrao_email=EMAIL_PADRAO, relogio=relogio,
        )

    def criar_uc(self, ids=('OC-1234',)):
        return CriarOcorrenciaUseCase(
            self.repo, self.usuario_repo_mock, self.auditoria_mock,
            responsavel_padrao_email=EMAIL_PADRAO, relogio=relogio,
            gerar_id=iter(ids).__next__,
        )


# ====================================================================
# CRIAÇÃO
# ====================================================================

class TestCriarOcorrencia(BaseOcorrenciaTestCase):

    def rascunho(self, **campos):
        dados = dict(
            transportadora_id='t1',
            codigo_rastreio='BR999',
            numero_nota_fiscal='NF-1',
            destinatario='Maria Souza',
            uf='sp',
        )
        dados.update(campos)
        return Ocorrencia(**dados)

    def test_cria_ocorrencia_aberta_com_responsavel_e_nota_inicial(self):
        """
        Cenário: o rascunho chega com status terminal; a criação força Em Aberto.
        """
        rascunho = self.rascunho(status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA)

        criada = self.criar_uc().executar(rascunho, autor=self.operador)

        self.assertEqual(criada.id, 'OC-1234')
        self.assertEqual(criada.status, StatusOcorrencia.ABERTA)
        self.assertIsNone(criada.finalizado_em)
        self.assertEqual(criada.uf, 'SP')
        self.assertEqual(criada.criado_em, AGORA)
        self.assertEqual(criada.responsaveis, ['u1'])
        self.assertEqual(len(criada.notas), 1)
        self.assertEqual(criada.notas[0].texto, NOTA_INICIAL_PADRAO)
        self.assertEqual(criada.notas[0].autor, 'Operador Logístico')
        self.auditoria_mock.registrar.assert_called_once_with(self.operador, 'Nova Ocorrência', ANY)

    def test_nota_inicial_informada_substitui_a_padrao(self):
        criada = self.criar_uc().executar(self.rascunho(), autor=self.operador, nota_inicial='  Produto chegou aberto.  ')
        self.assertEqual(criada.notas[0].texto, 'Produto chegou aberto.')

    def test_nota_fiscal_duplicada_nao_insere(self):
        """
        Cenário: A é criada com NF-1; B com a mesma nota fiscal é recusada,
        referenciando A, e a coleção continua com um único item.
        """
        criar = self.criar_uc(ids=('OC-0001', 'OC-0002'))
        a = criar.executar(self.rascunho(), autor=self.operador)

        with self.assertRaises(NotaFiscalDuplicadaError) as ctx:
            criar.executar(self.rascunho(destinatario='Outro Cliente'), autor=self.operador)

        self.assertEqual(ctx.exception.ocorrencia_existente_id, a.id)
        self.assertEqual(len(self.repo.listar()), 1)

    def test_id_em_colisao_e_sorteado_novamente(self):
        self.repo.inserir(nova_ocorrencia('OC-1111'))

        criada = self.criar_uc(ids=('OC-1111', 'OC-2222')).executar(self.rascunho(), autor=self.operador)

        self.assertEqual(criada.id, 'OC-2222')
        self.assertEqual(len(self.repo.listar()), 2)

    def test_falha_quando_nao_ha_id_livre(self):
        self.repo.inserir(nova_ocorrencia('OC-1111'))
        criar = CriarOcorrenciaUseCase(
            self.repo, self.usuario_repo_mock, self.auditoria_mock,
            relogio=relogio, gerar_id=lambda: 'OC-1111',
        )
        with self.assertRaises(FalhaGravacaoError):
            criar.executar(self.rascunho(), autor=self.operador)

    def test_campo_obrigatorio_ausente_falha_antes_de_gravar(self):
        with self.assertRaises(DadosInvalidosError):
            self.criar_uc().executar(self.rascunho(destinatario='  '), autor=self.operador)
        self.assertEqual(self.repo.listar(), [])

    def test_valor_negativo_e_recusado(self):
        with self.assertRaises(DadosInvalidosError):
            self.criar_uc().executar(self.rascunho(valor_frete=Decimal('-1')), autor=self.operador)

    def test_sem_responsavel_padrao_cadastrado(self):
        self.usuario_repo_mock.buscar_por_email.return_value = None
        criada = self.criar_uc().executar(self.rascunho(), autor=self.operador)
        self.assertEqual(criada.responsaveis, [])


# ====================================================================
# CICLO DE VIDA (STATUS, FINALIZAÇÃO E RESTAURAÇÃO)
# ====================================================================

class TestRegraFinalizacao(BaseOcorrenciaTestCase):

    def test_status_terminal_preenche_finalizado_em(self):
        self.repo.inserir(nova_ocorrencia())
        atualizada = self.gerenciar.alterar_status('OC-1001', StatusOcorrencia.CONCLUIDA, self.operador)
        self.assertEqual(atualizada.status, StatusOcorrencia.CONCLUIDA)
        self.assertEqual(atualizada.finalizado_em, AGORA)

    def test_sair_do_status_terminal_limpa_finalizado_em(self):
        self.repo.inserir(nova_ocorrencia(status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA - timedelta(days=1)))
        atualizada = self.gerenciar.alterar_status('OC-1001', 'Em Tratativa', self.operador)
        self.assertEqual(atualizada.status, StatusOcorrencia.EM_TRATATIVA)
        self.assertIsNone(atualizada.finalizado_em)

    def test_finalizado_em_existente_e_preservado(self):
        """Reentrar em status terminal não sobrescreve a data já registrada."""
        anterior = AGORA - timedelta(days=2)
        self.repo.inserir(nova_ocorrencia(status=StatusOcorrencia.CONCLUIDA, finalizado_em=anterior))

        atualizada = self.gerenciar.editar_campos('OC-1001', {'status': 'Arquivado'}, self.operador)

        self.assertEqual(atualizada.status, StatusOcorrencia.ARQUIVADA)
        self.assertEqual(atualizada.finalizado_em, anterior)

    def test_seletor_generico_nao_arquiva(self):
        self.repo.inserir(nova_ocorrencia())
        with self.assertRaises(StatusInvalidoError):
            self.gerenciar.alterar_status('OC-1001', StatusOcorrencia.ARQUIVADA, self.operador)

    def test_status_desconhecido(self):
        self.repo.inserir(nova_ocorrencia())
        with self.assertRaises(StatusInvalidoError):
            self.gerenciar.alterar_status('OC-1001', 'Perdido', self.operador)

    def test_mesmo_status_nao_grava_nem_audita(self):
        self.repo.inserir(nova_ocorrencia())
        self.gerenciar.alterar_status('OC-1001', StatusOcorrencia.ABERTA, self.operador)
        self.auditoria_mock.registrar.assert_not_called()

    def test_movimento_no_quadro_registra_acao_propria(self):
        self.repo.inserir(nova_ocorrencia())
        self.gerenciar.alterar_status('OC-1001', 'ANALISE', self.operador, via_quadro=True)
        self.auditoria_mock.registrar.assert_called_once_with(self.operador, 'Moveu Ocorrência', ANY)

    def test_ocorrencia_inexistente(self):
        with self.assertRaises(OcorrenciaNaoEncontradaError):
            self.gerenciar.detalhar('OC-0000')

    def test_maquina_de_estados_aceita_todos_os_pares(self):
        for origem in StatusOcorrencia:
            for destino in StatusOcorrencia:
                self.assertTrue(transicao_permitida(origem, destino))

    def test_converter_status_aceita_rotulo_e_codigo(self):
        self.assertEqual(converter_status('Bloqueio/Devolução'), StatusOcorrencia.BLOQUEIO_DEVOLUCAO)
        self.assertEqual(converter_status('auditoria_financeira'), StatusOcorrencia.AUDITORIA_FINANCEIRA)


class TestFinalizarRestaurar(BaseOcorrenciaTestCase):

    def test_finalizar_e_restaurar_em_seguida(self):
        """
        Cenário: Em Aberto -> Arquivado pela ação de finalizar preenche a data;
        restaurar logo depois limpa a data e volta para Em Aberto.
        """
        self.repo.inserir(nova_ocorrencia())

        arquivada = self.gerenciar.finalizar('OC-1001', self.operador)
        self.assertEqual(arquivada.status, StatusOcorrencia.ARQUIVADA)
        self.assertEqual(arquivada.finalizado_em, AGORA)

        restaurada = self.gerenciar.restaurar('OC-1001', self.operador)
        self.assertEqual(restaurada.status, StatusOcorrencia.ABERTA)
        self.assertIsNone(restaurada.finalizado_em)

    def test_restaurar_inclui_responsavel_padrao(self):
        self.repo.inserir(nova_ocorrencia(status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA, responsaveis=['u9']))
        restaurada = self.gerenciar.restaurar('OC-1001', self.operador)
        self.assertEqual(restaurada.responsaveis, ['u9', 'u1'])

    def test_restaurar_nao_duplica_responsavel_padrao(self):
        self.repo.inserir(nova_ocorrencia(status=StatusOcorrencia.ARQUIVADA, finalizado_em=AGORA, responsaveis=['u1']))
        restaurada = self.gerenciar.restaurar('OC-1001', self.operador)
        self.assertEqual(restaurada.responsaveis, ['u1'])

    def test_restaurar_exige_status_terminal(self):
        self.repo.inserir(nova_ocorrencia(status=StatusOcorrencia.EM_TRATATIVA))
        with self.assertRaises(StatusInvalidoError):
            self.gerenciar.restaurar('OC-1001', self.operador)


# ====================================================================
# FLAGS, REENVIO, EDIÇÃO E EXCLUSÃO
# ====================================================================

class TestFlagsEReenvio(BaseOcorrenciaTestCase):

    def test_alterna_apenas_uma_flag(self):
        self.repo.inserir(nova_ocorrencia())
        atualizada = self.gerenciar.alternar_flag('OC-1001', 'avaria', self.operador)
        self.assertTrue(atualizada.avaria)
        self.assertFalse(atualizada.contestar_fatura)
        self.assertFalse(atualizada.extravio_devolucao)
        self.assertFalse(atualizada.reenviado)

    def test_flag_desconhecida(self):
        self.repo.inserir(nova_ocorrencia())
        with self.assertRaises(DadosInvalidosError):
            self.gerenciar.alternar_flag('OC-1001', 'status', self.operador)

    def test_desativar_reenvio_mantem_historico(self):
        self.repo.inserir(nova_ocorrencia(
            reenviado=True, transportadora_reenvio_id='t2', codigo_rastreio_reenvio='BR777'
        ))
        atualizada = self.gerenciar.alternar_flag('OC-1001', 'reenviado', self.operador)
        self.assertFalse(atualizada.reenviado)
        self.assertEqual(atualizada.transportadora_reenvio_id, 't2')
        self.assertEqual(atualizada.codigo_rastreio_reenvio, 'BR777')

    def test_atualizar_reenvio_altera_so_o_informado(self):
        self.repo.inserir(nova_ocorrencia(transportadora_reenvio_id='t2', codigo_rastreio_reenvio='BR777'))
        atualizada = self.gerenciar.atualizar_reenvio('OC-1001', self.operador, codigo_rastreio='BR888')
        self.assertEqual(atualizada.transportadora_reenvio_id, 't2')
        self.assertEqual(atualizada.codigo_rastreio_reenvio, 'BR888')


class TestEditarCampos(BaseOcorrenciaTestCase):

    def test_edita_valores_e_responsaveis(self):
        self.repo.inserir(nova_ocorrencia())
        atualizada = self.gerenciar.editar_campos('OC-1001', {
            'valor_nota': '150.5',
            'uf': 'rj',
            'responsaveis': ['u2', 'u2', 'u1'],
            'data_ocorrencia': '2024-02-28',
        }, self.operador)
        self.assertEqual(atualizada.valor_nota, Decimal('150.50'))
        self.assertEqual(atualizada.uf, 'RJ')
        self.assertEqual(atualizada.responsaveis, ['u2', 'u1'])
        self.assertEqual(atualizada.data_ocorrencia, date(2024, 2, 28))
        self.auditoria_mock.registrar.assert_called_once_with(self.operador, 'Editou Ocorrência', ANY)

    def test_campo_desconhecido(self):
        self.repo.inserir(nova_ocorrencia())
        with self.assertRaises(DadosInvalidosError):
            self.gerenciar.editar_campos('OC-1001', {'criado_em': AGORA}, self.operador)

    def test_valor_negativo(self):
        self.repo.inserir(nova_ocorrencia())
        with self.assertRaises(DadosInvalidosError):
            self.gerenciar.editar_campos('OC-1001', {'valor_frete': '-3'}, self.operador)

    def test_valor_nao_finito(self):
        self.repo.inserir(nova_ocorrencia())
        for valor in ('NaN', 'Infinity', '-Infinity'):
            with self.assertRaises(DadosInvalidosError):
                self.gerenciar.editar_campos('OC-1001', {'valor_nota': valor}, self.operador)
        self.assertEqual(self.repo.buscar_por_id('OC-1001').valor_nota, Decimal('0.00'))

    def test_nota_fiscal_de_outra_ocorrencia(self):
        self.repo.inserir(nova_ocorrencia('OC-1001', numero_nota_fiscal='NF-1'))
        self.repo.inserir(nova_ocorrencia('OC-1002', numero_nota_fiscal='NF-2'))
        with self.assertRaises(NotaFiscalDuplicadaError):
            self.gerenciar.editar_campos('OC-1002', {'numero_nota_fiscal': 'NF-1'}, self.operador)
        self.assertEqual(self.repo.buscar_por_id('OC-1002').numero_nota_fiscal, 'NF-2')

    def test_excluir(self):
        self.repo.inserir(nova_ocorrencia())
        self.gerenciar.excluir('OC-1001', self.operador)
        self.assertIsNone(self.repo.buscar_por_id('OC-1001'))
        self.auditoria_mock.registrar.assert_called_once_with(self.operador, 'Excluiu Ocorrência', ANY)

    def test_excluir_inexistente(self):
        with self.assertRaises(OcorrenciaNaoEncontradaError):
            self.gerenciar.excluir('OC-0000', self.operador)


# ====================================================================
# NOTAS
# ====================================================================

class TestNotasOcorrencia(BaseOcorrenciaTestCase):

    def setUp(self):
        super().setUp()
        self.notas = NotasOcorrenciaUseCase(self.repo, self.auditoria_mock, relogio=relogio)
        self.repo.inserir(nova_ocorrencia(notas=[
            Nota(texto='Cliente reclamou de atraso.', autor='Sistema', data=AGORA - timedelta(days=1)),
        ]))

    def test_adiciona_nota_com_autor_e_data(self):
        ocorrencia = self.notas.adicionar('OC-1001', 'Aberto chamado na transportadora.', self.operador)
        self.assertEqual(ocorrencia.quantidade_notas, 2)
        self.assertEqual(ocorrencia.notas[-1].autor, 'Operador Logístico')
        self.assertEqual(ocorrencia.notas[-1].data, AGORA)

    def test_nota_em_branco(self):
        with self.assertRaises(NotaVaziaError):
            self.notas.adicionar('OC-1001', '   ', self.operador)
        self.assertEqual(self.repo.buscar_por_id('OC-1001').quantidade_notas, 1)

    def test_nota_em_ocorrencia_inexistente(self):
        with self.assertRaises(OcorrenciaNaoEncontradaError):
            self.notas.adicionar('OC-0000', 'Texto', self.operador)

    def test_editar_preserva_autor_e_data(self):
        nota_id = self.repo.buscar_por_id('OC-1001').notas[0].id
        nota = self.notas.editar(nota_id, 'Cliente reclamou de atraso de 5 dias.', self.operador)
        self.assertEqual(nota.texto, 'Cliente reclamou de atraso de 5 dias.')
        self.assertEqual(nota.autor, 'Sistema')
        self.assertEqual(nota.data, AGORA - timedelta(days=1))
        self.auditoria_mock.registrar.assert_called_once_with(self.operador, 'Editou Nota', ANY)

    def test_editar_com_texto_em_branco(self):
        nota_id = self.repo.buscar_por_id('OC-1001').notas[0].id
        with self.assertRaises(NotaVaziaError):
            self.notas.editar(nota_id, '', self.operador)

    def test_editar_nota_inexistente(self):
        with self.assertRaises(NotaNaoEncontradaError):
            self.notas.editar('999', 'Texto', self.operador)


# ====================================================================
# HISTÓRICO DE FINALIZADAS E AUDITORIA
# ====================================================================

class TestOcorrenciasFinalizadas(unittest.TestCase):

    def setUp(self):
        self.repo = OcorrenciaRepositoryMemoria([
            nova_ocorrencia('OC-1001', status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA, transportadora_id='t1'),
            nova_ocorrencia('OC-1002', status=StatusOcorrencia.ARQUIVADA, finalizado_em=AGORA, transportadora_id='t2',
                            destinatario='Ana Pereira'),
            nova_ocorrencia('OC-1003', status=StatusOcorrencia.ABERTA, transportadora_id='t2'),
        ])
        self.transportadora_repo_mock = Mock()
        self.transportadora_repo_mock.listar.return_value = [
            Transportadora(id='t1', nome='Rapidão Cometa'),
            Transportadora(id='t2', nome='LoggiAzul'),
        ]
        self.use_case = ListarOcorrenciasFinalizadasUseCase(self.repo, self.transportadora_repo_mock)

    def test_lista_apenas_terminais(self):
        ids = [o.id for o in self.use_case.executar()]
        self.assertEqual(ids, ['OC-1001', 'OC-1002'])

    def test_busca_pelo_nome_da_transportadora(self):
        ids = [o.id for o in self.use_case.executar(busca='loggi')]
        self.assertEqual(ids, ['OC-1002'])

    def test_busca_pelo_destinatario(self):
        ids = [o.id for o in self.use_case.executar(busca='ANA')]
        self.assertEqual(ids, ['OC-1002'])


class TestRegistrarAuditoria(unittest.TestCase):

    def setUp(self):
        self.log_repo_mock = Mock()
        self.use_case = RegistrarAuditoriaUseCase(self.log_repo_mock)
        self.autor = Usuario(id='u1', nome='Carlos Admin', email=EMAIL_PADRAO)

    def test_registra_com_nome_do_autor(self):
        self.log_repo_mock.registrar.side_effect = lambda log: log
        log = self.use_case.registrar(self.autor, 'Nova Ocorrência', 'Criou a ocorrência OC-1')
        self.assertEqual(log.usuario_id, 'u1')
        self.assertEqual(log.usuario_nome, 'Carlos Admin')

    def test_falha_no_log_nao_interrompe_operacao(self):
        self.log_repo_mock.registrar.side_effect = FalhaGravacaoError()
        self.assertIsNone(self.use_case.registrar(self.autor, 'Nova Ocorrência', ''))

    def test_listar_do_mais_recente_para_o_mais_antigo(self):
        antigo = LogAuditoria('A', '', 'u1', 'Carlos', data=AGORA - timedelta(hours=1))
        recente = LogAuditoria('B', '', 'u1', 'Carlos', data=AGORA)
        self.log_repo_mock.listar.return_value = [antigo, recente]
        self.assertEqual([log.acao for log in self.use_case.listar()], ['B', 'A'])


# ====================================================================
# QUADRO KANBAN
# ====================================================================

class TestProjecaoQuadro(unittest.TestCase):

    def setUp(self):
        self.cache = CacheNotasVistasMemoria()
        self.projecao = ProjecaoQuadro(self.cache, relogio=relogio)

    def cartoes(self, colunas, status):
        coluna = next(c for c in colunas if c.status == status)
        return [cartao.ocorrencia.id for cartao in coluna.cartoes]

    def test_colunas_na_ordem_do_fluxo_sem_arquivado(self):
        colunas = self.projecao.montar([])
        self.assertEqual([c.status for c in colunas], list(COLUNAS_QUADRO))
        self.assertNotIn(StatusOcorrencia.ARQUIVADA, [c.status for c in colunas])
        self.assertEqual(colunas[0].rotulo, 'Em Aberto')

    def test_envelhecimento_das_concluidas(self):
        """
        Concluída há 4 dias some da coluna; há 2 dias continua visível;
        sem data de finalização continua visível.
        """
        ocorrencias = [
            nova_ocorrencia('OC-4', status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA - timedelta(days=4)),
            nova_ocorrencia('OC-2', status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA - timedelta(days=2)),
            nova_ocorrencia('OC-0', status=StatusOcorrencia.CONCLUIDA, finalizado_em=None),
            nova_ocorrencia('OC-A', status=StatusOcorrencia.ARQUIVADA, finalizado_em=AGORA),
        ]
        colunas = self.projecao.montar(ocorrencias)
        self.assertEqual(self.cartoes(colunas, StatusOcorrencia.CONCLUIDA), ['OC-2', 'OC-0'])
        self.assertEqual(sum(c.total for c in colunas), 2)

    def test_filtros_de_transportadora_e_responsavel(self):
        ocorrencias = [
            nova_ocorrencia('OC-1', transportadora_id='t1', responsaveis=['u1']),
            nova_ocorrencia('OC-2', transportadora_id='t2', responsaveis=['u1', 'u2']),
            nova_ocorrencia('OC-3', transportadora_id='t2', responsaveis=[]),
        ]
        aberta = StatusOcorrencia.ABERTA
        self.assertEqual(self.cartoes(self.projecao.montar(ocorrencias, 'all', 'all'), aberta), ['OC-1', 'OC-2', 'OC-3'])
        self.assertEqual(self.cartoes(self.projecao.montar(ocorrencias, transportadora_id='t2'), aberta), ['OC-2', 'OC-3'])
        self.assertEqual(self.cartoes(self.projecao.montar(ocorrencias, responsavel_id='u2'), aberta), ['OC-2'])
        self.assertEqual(self.cartoes(self.projecao.montar(ocorrencias, 't1', 'u2'), aberta), [])

    def test_notas_nao_lidas(self):
        ocorrencia = nova_ocorrencia(notas=[Nota('a', 'X'), Nota('b', 'X'), Nota('c', 'X')])
        self.assertEqual(self.projecao.notas_nao_lidas(ocorrencia), 3)

        self.cache.registrar(ocorrencia.id, 1)
        self.assertEqual(self.projecao.notas_nao_lidas(ocorrencia), 2)

        self.cache.registrar(ocorrencia.id, 5)
        self.assertEqual(self.projecao.notas_nao_lidas(ocorrencia), 0)

    def test_marcar_como_vista_zera_o_indicador(self):
        ocorrencia = nova_ocorrencia(notas=[Nota('a', 'X'), Nota('b', 'X')])
        self.projecao.marcar_como_vista(ocorrencia)
        self.assertEqual(self.cache.obter(ocorrencia.id), 2)
        cartao = self.projecao.montar([ocorrencia])[0].cartoes[0]
        self.assertEqual(cartao.notas_nao_lidas, 0)


# ====================================================================
# AGREGAÇÕES FINANCEIRAS E PAINEL
# ====================================================================

class TestEstatisticas(BaseOcorrenciaTestCase):

    def test_contestacao_sai_do_total_ao_concluir(self):
        """
        Cenário: ocorrência Em Aberto com Contestar Fatura e frete 25.90 entra
        no total; ao ir para Concluído sai, mesmo com a flag ainda ativa.
        """
        self.repo.inserir(nova_ocorrencia(contestar_fatura=True, valor_frete=Decimal('25.90')))
        self.assertEqual(estatisticas.total_contestacao(self.repo.listar()), Decimal('25.90'))

        self.gerenciar.alterar_status('OC-1001', StatusOcorrencia.CONCLUIDA, self.operador)

        ocorrencias = self.repo.listar()
        self.assertTrue(ocorrencias[0].contestar_fatura)
        self.assertEqual(estatisticas.total_contestacao(ocorrencias), Decimal('0.00'))

    def test_flag_em_arquivada_nao_altera_totais(self):
        self.repo.inserir(nova_ocorrencia(
            status=StatusOcorrencia.ARQUIVADA, finalizado_em=AGORA,
            valor_nota=Decimal('100.00'), valor_frete=Decimal('10.00'),
        ))
        antes = estatisticas.resumo_financeiro(self.repo.listar())
        for flag in ('contestar_fatura', 'extravio_devolucao', 'avaria'):
            self.gerenciar.alternar_flag('OC-1001', flag, self.operador)
        depois = estatisticas.resumo_financeiro(self.repo.listar())
        self.assertEqual(antes, depois)

    def test_extravio_e_avaria_somam_valor_da_nota(self):
        ocorrencias = [
            nova_ocorrencia('OC-1', extravio_devolucao=True, valor_nota=Decimal('150.00'), valor_frete=Decimal('9.00')),
            nova_ocorrencia('OC-2', avaria=True, valor_nota=Decimal('89.90')),
            nova_ocorrencia('OC-3', avaria=True, valor_nota=Decimal('50.00'), finalizado_em=AGORA),
        ]
        resumo = estatisticas.resumo_financeiro(ocorrencias)
        self.assertEqual(resumo.total_extravio, Decimal('150.00'))
        self.assertEqual(resumo.total_avaria, Decimal('89.90'))
        self.assertEqual(resumo.total_contestacao, Decimal('0.00'))

    def test_top_regioes(self):
        ufs = ['SP'] * 5 + ['RJ'] * 3 + ['MG'] * 3 + ['RS'] * 2 + ['PR', 'SC', 'BA']
        ocorrencias = [nova_ocorrencia(f'OC-{i}', uf=uf) for i, uf in enumerate(ufs)]

        regioes = estatisticas.top_regioes(ocorrencias)

        self.assertLessEqual(len(regioes), 5)
        self.assertEqual([r.uf for r in regioes], ['SP', 'RJ', 'MG', 'RS', 'PR'])
        quantidades = [r.quantidade for r in regioes]
        self.assertEqual(quantidades, sorted(quantidades, reverse=True))
        self.assertEqual(regioes[0].percentual, 31)

    def test_percentual_da_regiao_arredonda_meio_para_cima(self):
        """
        Cenário: 1 ocorrência em AM entre 8 equivale a 12,5%, exibido como 13.
        """
        ocorrencias = [nova_ocorrencia('OC-AM', uf='AM')]
        ocorrencias += [nova_ocorrencia(f'OC-{i}', uf='SP') for i in range(7)]

        percentuais = {r.uf: r.percentual for r in estatisticas.top_regioes(ocorrencias)}

        self.assertEqual(percentuais['AM'], 13)
        self.assertEqual(percentuais['SP'], 88)

    def test_contagem_por_status_inclui_zerados(self):
        contagem = estatisticas.contagem_por_status([nova_ocorrencia()])
        self.assertEqual(len(contagem), len(StatusOcorrencia))
        por_status = {c.status: c.quantidade for c in contagem}
        self.assertEqual(por_status[StatusOcorrencia.ABERTA], 1)
        self.assertEqual(por_status[StatusOcorrencia.ARQUIVADA], 0)

    def test_contagem_por_transportadora(self):
        ocorrencias = [
            nova_ocorrencia('OC-1', transportadora_id='t1'),
            nova_ocorrencia('OC-2', transportadora_id='t1', status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA),
            nova_ocorrencia('OC-3', transportadora_id='removida'),
        ]
        transportadoras = [Transportadora(id='t1', nome='Rapidão Cometa'), Transportadora(id='t2', nome='LoggiAzul')]
        contagem = estatisticas.contagem_por_transportadora(ocorrencias, transportadoras)
        self.assertEqual([(c.nome, c.total, c.ativas) for c in contagem],
                         [('Rapidão Cometa', 2, 1), ('LoggiAzul', 0, 0)])

    def test_painel(self):
        self.repo.inserir(nova_ocorrencia('OC-1', contestar_fatura=True))
        self.repo.inserir(nova_ocorrencia('OC-2', status=StatusOcorrencia.CONCLUIDA, finalizado_em=AGORA))
        transportadora_repo_mock = Mock()
        transportadora_repo_mock.listar.return_value = [Transportadora(id='t1', nome='Rapidão Cometa')]

        painel = PainelUseCase(self.repo, transportadora_repo_mock).executar()

        self.assertEqual(
            set(painel), {'indicadores', 'por_transportadora', 'por_status', 'regioes', 'financeiro'}
        )
        indicadores = painel['indicadores']
        self.assertEqual((indicadores.total, indicadores.em_aberto, indicadores.contestacoes, indicadores.concluidas),
                         (2, 1, 1, 1))


# ====================================================================
# CADASTROS ADMINISTRATIVOS
# ====================================================================

class TestGerenciarTransportadoras(unittest.TestCase):

    def setUp(self):
        self.repo_mock = Mock()
        self.repo_mock.salvar.side_effect = lambda t: Transportadora(
            id=t.id or 't-novo', nome=t.nome, segmento=t.segmento, cor=t.cor
        )
        self.auditoria_mock = Mock()
        self.use_case = GerenciarTransportadorasUseCase(self.repo_mock, self.auditoria_mock)
        self.master = Usuario(id='u1', nome='Carlos Admin', email=EMAIL_PADRAO, papel=PapelUsuario.MASTER)
        self.operador = Usuario(id='u2', nome='Operador', email='operador@logifix.local')

    def test_master_cria_transportadora(self):
        criada = self.use_case.criar(Transportadora(nome='JadLog', segmento='Loja Física'), self.master)
        self.assertEqual(criada.id, 't-novo')
        self.assertEqual(criada.segmento, Segmento.FISICA)
        self.auditoria_mock.registrar.assert_called_once_with(self.master, 'Criou Transportadora', ANY)

    def test_usuario_comum_nao_cria(self):
        with self.assertRaises(OperacaoNaoPermitidaError):
            self.use_case.criar(Transportadora(nome='JadLog'), self.operador)
        self.repo_mock.salvar.assert_not_called()

    def test_segmento_invalido(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.criar(Transportadora(nome='JadLog', segmento='Marítimo'), self.master)

    def test_excluir_nao_toca_nas_ocorrencias(self):
        self.repo_mock.buscar_por_id.return_value = Transportadora(id='t1', nome='Rapidão Cometa')
        self.use_case.excluir('t1', self.master)
        self.repo_mock.excluir.assert_called_once_with('t1')


class TestGerenciarUsuarios(unittest.TestCase):

    def setUp(self):
        self.repo_mock = Mock()
        self.auditoria_mock = Mock()
        self.use_case = GerenciarUsuariosAdminUseCase(self.repo_mock, self.auditoria_mock)
        self.master = Usuario(id='u1', nome='Carlos Admin', email=EMAIL_PADRAO, papel=PapelUsuario.MASTER)

    def test_nao_exclui_a_si_mesmo(self):
        with self.assertRaises(OperacaoNaoPermitidaError):
            self.use_case.excluir('u1', self.master)
        self.repo_mock.excluir.assert_not_called()

    def test_email_duplicado(self):
        self.repo_mock.buscar_por_email.return_value = self.master
        with self.assertRaises(DadosInvalidosError):
            self.use_case.criar(Usuario(nome='Outro', email=EMAIL_PADRAO), 'segredo123', self.master)

    def test_atualiza_papel(self):
        self.repo_mock.buscar_por_id.return_value = Usuario(id='u2', nome='Operador', email='op@logifix.local')
        self.repo_mock.salvar.side_effect = lambda u: u
        atualizado = self.use_case.atualizar('u2', 'Operadora', 'Master', self.master)
        self.assertEqual(atualizado.papel, PapelUsuario.MASTER)
        self.assertEqual(atualizado.nome, 'Operadora')


if __name__ == '__main__':
    unittest.main()
