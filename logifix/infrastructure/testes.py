from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings

# Importamos as classes que queremos testar
from logifix.infrastructure.models import (
    Usuario as UsuarioModel,
    Transportadora as TransportadoraModel,
    Ocorrencia as OcorrenciaModel,
    NotaOcorrencia as NotaModel,
    LogAuditoria as LogModel,
)
from logifix.infrastructure.repositories import (
    OcorrenciaRepositoryDjango,
    TransportadoraRepositoryDjango,
    UsuarioRepositoryDjango,
    LogAuditoriaRepositoryDjango,
)
from logifix.core.entities import (
    Ocorrencia, Nota, Transportadora, Usuario, LogAuditoria,
    StatusOcorrencia, PapelUsuario, Segmento,
)
from logifix.core.exceptions import (
    OcorrenciaNaoEncontradaError,
    TransportadoraNaoEncontradaError,
    NotaNaoEncontradaError,
)

MOMENTO = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


class OcorrenciaRepositoryTestCase(TestCase):

    def setUp(self):
        """
        Cria uma transportadora real no banco de teste e uma ocorrência
        gravada pelo repositório, com duas notas iniciais.
        """
        self.repository = OcorrenciaRepositoryDjango()
        self.transportadora = TransportadoraModel.objects.create(nome='Rapidão Cometa')
        self.repository.inserir(Ocorrencia(
            id='OC-1001',
            transportadora_id=self.transportadora.id,
            codigo_rastreio='BR123456789',
            numero_nota_fiscal='NF-5920',
            destinatario='João Silva',
            uf='SP',
            valor_nota=Decimal('150.00'),
            valor_frete=Decimal('25.90'),
            data_ocorrencia=date(2024, 3, 1),
            criado_em=MOMENTO,
            responsaveis=['1'],
            notas=[
                Nota(texto='Reclamação aberta.', autor='Sistema', data=MOMENTO),
                Nota(texto='Aberto chamado na transportadora.', autor='Atendente', data=MOMENTO),
            ],
        ))

    def test_inserir_grava_ocorrencia_e_notas(self):
        """
        Cenário: A ocorrência volta do banco com todos os campos e as notas em ordem.
        """
        # ACT
        ocorrencia = self.repository.buscar_por_id('OC-1001')

        # ASSERT
        self.assertIsInstance(ocorrencia, Ocorrencia)
        self.assertEqual(ocorrencia.status, StatusOcorrencia.ABERTA)
        self.assertEqual(ocorrencia.valor_frete, Decimal('25.90'))
        self.assertEqual(ocorrencia.responsaveis, ['1'])
        self.assertEqual([n.autor for n in ocorrencia.notas], ['Sistema', 'Atendente'])
        self.assertTrue(all(n.id for n in ocorrencia.notas))

    def test_buscar_por_id_inexistente_retorna_none(self):
        self.assertIsNone(self.repository.buscar_por_id('OC-0000'))

    def test_buscar_por_nota_fiscal(self):
        self.assertEqual(self.repository.buscar_por_nota_fiscal('NF-5920').id, 'OC-1001')
        self.assertIsNone(self.repository.buscar_por_nota_fiscal('NF-0000'))

    def test_atualizar_nao_mexe_nas_notas(self):
        """
        Cenário: Atualizar status e finalização não altera a linha do tempo.
        """
        # ARRANGE
        ocorrencia = self.repository.buscar_por_id('OC-1001')
        ocorrencia.status = StatusOcorrencia.CONCLUIDA
        ocorrencia.finalizado_em = MOMENTO
        ocorrencia.notas = []

        # ACT
        self.repository.atualizar(ocorrencia)

        # ASSERT
        relida = self.repository.buscar_por_id('OC-1001')
        self.assertEqual(relida.status, StatusOcorrencia.CONCLUIDA)
        self.assertEqual(relida.finalizado_em, MOMENTO)
        self.assertEqual(relida.quantidade_notas, 2)

    def test_atualizar_inexistente(self):
        ocorrencia = self.repository.buscar_por_id('OC-1001')
        ocorrencia.id = 'OC-0000'
        with self.assertRaises(OcorrenciaNaoEncontradaError):
            self.repository.atualizar(ocorrencia)

    def test_inserir_e_editar_nota(self):
        # ACT
        nota = self.repository.inserir_nota('OC-1001', Nota(texto='Nova nota', autor='Carlos', data=MOMENTO))
        editada = self.repository.atualizar_nota(nota.id, 'Nota corrigida')

        # ASSERT
        self.assertEqual(editada.texto, 'Nota corrigida')
        self.assertEqual(editada.autor, 'Carlos')
        self.assertEqual(self.repository.ocorrencia_da_nota(nota.id), 'OC-1001')
        self.assertEqual(self.repository.buscar_por_id('OC-1001').quantidade_notas, 3)

    def test_nota_inexistente(self):
        self.assertIsNone(self.repository.buscar_nota('999999'))
        self.assertIsNone(self.repository.buscar_nota('nao-numerico'))
        with self.assertRaises(NotaNaoEncontradaError):
            self.repository.atualizar_nota('999999', 'Texto')

    def test_excluir_remove_notas_em_cascata(self):
        self.repository.excluir('OC-1001')
        self.assertFalse(OcorrenciaModel.objects.filter(pk='OC-1001').exists())
        self.assertFalse(NotaModel.objects.exists())

    def test_excluir_transportadora_mantem_referencia_orfa(self):
        """
        Cenário: A transportadora é removida; a ocorrência continua apontando
        para o identificador antigo.
        """
        # ARRANGE
        transportadora_id = self.transportadora.id

        # ACT
        TransportadoraRepositoryDjango().excluir(transportadora_id)

        # ASSERT
        ocorrencia = self.repository.buscar_por_id('OC-1001')
        self.assertEqual(ocorrencia.transportadora_id, transportadora_id)
        self.assertEqual(len(self.repository.listar()), 1)


class TransportadoraRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = TransportadoraRepositoryDjango()

    def test_salvar_cria_e_atualiza(self):
        # ACT
        criada = self.repository.salvar(Transportadora(nome=' LoggiAzul ', segmento=Segmento.ONLINE))
        criada.cor = '#000000'
        atualizada = self.repository.salvar(criada)

        # ASSERT
        self.assertTrue(criada.id)
        self.assertEqual(atualizada.id, criada.id)
        self.assertEqual(atualizada.nome, 'LoggiAzul')
        self.assertEqual(self.repository.buscar_por_id(criada.id).cor, '#000000')

    def test_salvar_com_id_desconhecido(self):
        with self.assertRaises(TransportadoraNaoEncontradaError):
            self.repository.salvar(Transportadora(id='nao-existe', nome='X'))

    def test_listar_em_ordem_alfabetica(self):
        self.repository.salvar(Transportadora(nome='Rapidão Cometa'))
        self.repository.salvar(Transportadora(nome='Correios Sedex'))
        self.assertEqual([t.nome for t in self.repository.listar()], ['Correios Sedex', 'Rapidão Cometa'])


class UsuarioRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = UsuarioRepositoryDjango()

    def test_salvar_cria_usuario_com_senha(self):
        # ACT
        criado = self.repository.salvar(
            Usuario(nome='Operador', email='operador@logifix.local'), senha='segredo123'
        )

        # ASSERT
        model = UsuarioModel.objects.get(pk=criado.id)
        self.assertTrue(model.check_password('segredo123'))
        self.assertEqual(criado.papel, PapelUsuario.USUARIO)
        self.assertIsInstance(criado.id, str)

    def test_atualiza_papel_e_busca_por_email(self):
        criado = self.repository.salvar(Usuario(nome='Carlos', email='carlos@logifix.local'), senha='segredo123')
        criado.papel = PapelUsuario.MASTER
        self.repository.salvar(criado)

        encontrado = self.repository.buscar_por_email('CARLOS@logifix.local')
        self.assertTrue(encontrado.is_master)

    def test_excluir(self):
        criado = self.repository.salvar(Usuario(nome='Temp', email='temp@logifix.local'), senha='segredo123')
        self.repository.excluir(criado.id)
        self.assertIsNone(self.repository.buscar_por_id(criado.id))


class LogAuditoriaRepositoryTestCase(TestCase):

    def test_registrar_e_listar_do_mais_recente(self):
        repository = LogAuditoriaRepositoryDjango()
        repository.registrar(LogAuditoria('Primeira', '', '1', 'Carlos', data=datetime(2024, 1, 1, tzinfo=timezone.utc)))
        repository.registrar(LogAuditoria('Segunda', '', '1', 'Carlos', data=datetime(2024, 1, 2, tzinfo=timezone.utc)))

        self.assertEqual([log.acao for log in repository.listar()], ['Segunda', 'Primeira'])


@override_settings(RESPONSAVEL_PADRAO_EMAIL='carlos@logifix.local')
class CarregarDadosIniciaisTestCase(TestCase):

    def test_carrega_dados_e_e_idempotente(self):
        """
        Cenário: Rodar o comando duas vezes não duplica nenhum registro.
        """
        # ACT
        call_command('carregar_dados_iniciais', stdout=StringIO())
        call_command('carregar_dados_iniciais', stdout=StringIO())

        # ASSERT
        self.assertEqual(TransportadoraModel.objects.count(), 4)
        self.assertEqual(UsuarioModel.objects.count(), 2)
        self.assertEqual(OcorrenciaModel.objects.count(), 2)
        self.assertEqual(NotaModel.objects.count(), 3)
        self.assertEqual(LogModel.objects.count(), 1)

        carlos = UsuarioModel.objects.get(email='carlos@logifix.local')
        self.assertTrue(carlos.is_master)
        self.assertEqual(OcorrenciaModel.objects.get(pk='OC-1001').responsaveis, [str(carlos.pk)])
