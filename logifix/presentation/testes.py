from unittest.mock import patch

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from logifix.core.exceptions import FalhaLeituraError
from logifix.infrastructure.instances import ocorrencia_repo
from logifix.infrastructure.models import (
    Usuario as UsuarioModel,
    Transportadora as TransportadoraModel,
    LogAuditoria as LogModel,
)
from logifix.presentation.views import CABECALHO_AVISO

SENHA = 'segredo123'


class BaseAPITestCase(APITestCase):

    def setUp(self):
        """
        Cria o responsável padrão (Master), um operador comum e uma
        transportadora. Por padrão as requisições saem autenticadas como operador.
        """
        self.carlos = UsuarioModel.objects.create_user(
            email='carlos@logifix.local', password=SENHA, nome='Carlos Admin', papel='Master'
        )
        self.operador = UsuarioModel.objects.create_user(
            email='operador@logifix.local', password=SENHA, nome='Operador Logístico'
        )
        self.transportadora = TransportadoraModel.objects.create(nome='Rapidão Cometa')
        self.client.force_login(self.operador)

    def criar_ocorrencia(self, **campos):
        dados = {
            'transportadora_id': self.transportadora.id,
            'codigo_rastreio': 'BR123456789',
            'numero_nota_fiscal': 'NF-5920',
            'destinatario': 'João Silva',
            'uf': 'sp',
            'valor_nota': '150.00',
            'valor_frete': '25.90',
        }
        dados.update(campos)
        return self.client.post(reverse('ocorrencias'), dados, format='json')


# ====================================================================
# OCORRÊNCIAS
# ====================================================================

class OcorrenciaAPITestCase(BaseAPITestCase):

    def test_criar_ocorrencia(self):
        """
        Cenário: Nova reclamação válida volta com 201, Em Aberto, responsável
        padrão atribuído e a nota inicial.
        """
        # ACT
        response = self.criar_ocorrencia()

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['id'].startswith('OC-'))
        self.assertEqual(response.data['status'], 'Em Aberto')
        self.assertEqual(response.data['uf'], 'SP')
        self.assertEqual(response.data['responsaveis'], [str(self.carlos.pk)])
        self.assertEqual(response.data['quantidade_notas'], 1)
        self.assertIsNone(response.data['finalizado_em'])
        self.assertTrue(LogModel.objects.filter(acao='Nova Ocorrência').exists())

    def test_nota_fiscal_duplicada_responde_409(self):
        primeira = self.criar_ocorrencia()

        response = self.criar_ocorrencia(destinatario='Outro Cliente')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['ocorrencia_existente'], primeira.data['id'])
        self.assertEqual(len(self.client.get(reverse('ocorrencias')).data), 1)

    def test_campos_invalidos_respondem_400(self):
        self.assertEqual(self.criar_ocorrencia(uf='SPX').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.criar_ocorrencia(valor_frete='-1').status_code, status.HTTP_400_BAD_REQUEST)

    def test_ocorrencia_inexistente_responde_404(self):
        response = self.client.get(reverse('ocorrencia_detalhe', args=['OC-0000']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_alterar_status_e_regra_de_finalizacao(self):
        ocorrencia_id = self.criar_ocorrencia().data['id']
        url = reverse('ocorrencia_status', args=[ocorrencia_id])

        concluida = self.client.post(url, {'status': 'CONCLUIDA'}, format='json')
        self.assertEqual(concluida.status_code, status.HTTP_200_OK)
        self.assertEqual(concluida.data['status'], 'Concluído')
        self.assertIsNotNone(concluida.data['finalizado_em'])

        reaberta = self.client.post(url, {'status': 'Em Tratativa', 'via_quadro': True}, format='json')
        self.assertIsNone(reaberta.data['finalizado_em'])
        self.assertTrue(LogModel.objects.filter(acao='Moveu Ocorrência').exists())

        arquivar = self.client.post(url, {'status': 'Arquivado'}, format='json')
        self.assertEqual(arquivar.status_code, status.HTTP_400_BAD_REQUEST)

    def test_finalizar_e_restaurar(self):
        ocorrencia_id = self.criar_ocorrencia().data['id']

        arquivada = self.client.post(reverse('ocorrencia_finalizar', args=[ocorrencia_id]))
        self.assertEqual(arquivada.data['status'], 'Arquivado')
        self.assertIsNotNone(arquivada.data['finalizado_em'])

        finalizadas = self.client.get(reverse('ocorrencias_finalizadas'), {'busca': 'rapidão'})
        self.assertEqual([o['id'] for o in finalizadas.data], [ocorrencia_id])

        restaurada = self.client.post(reverse('ocorrencia_restaurar', args=[ocorrencia_id]))
        self.assertEqual(restaurada.data['status'], 'Em Aberto')
        self.assertIsNone(restaurada.data['finalizado_em'])
        self.assertEqual(restaurada.data['responsaveis'], [str(self.carlos.pk)])

    def test_flags_e_reenvio(self):
        ocorrencia_id = self.criar_ocorrencia().data['id']

        response = self.client.post(reverse('ocorrencia_flags', args=[ocorrencia_id]), {'flag': 'avaria'}, format='json')
        self.assertTrue(response.data['avaria'])

        desconhecida = self.client.post(reverse('ocorrencia_flags', args=[ocorrencia_id]), {'flag': 'x'}, format='json')
        self.assertEqual(desconhecida.status_code, status.HTTP_400_BAD_REQUEST)

        reenvio = self.client.post(
            reverse('ocorrencia_reenvio', args=[ocorrencia_id]), {'codigo_rastreio': 'BR777'}, format='json'
        )
        self.assertEqual(reenvio.data['codigo_rastreio_reenvio'], 'BR777')
        self.assertIsNone(reenvio.data['transportadora_reenvio_id'])

    def test_editar_e_excluir(self):
        ocorrencia_id = self.criar_ocorrencia().data['id']
        url = reverse('ocorrencia_detalhe', args=[ocorrencia_id])

        editada = self.client.patch(url, {'destinatario': 'Maria Souza', 'valor_nota': '99.90'}, format='json')
        self.assertEqual(editada.data['destinatario'], 'Maria Souza')
        self.assertEqual(editada.data['valor_nota'], '99.90')

        vazia = self.client.patch(url, {}, format='json')
        self.assertEqual(vazia.status_code, status.HTTP_400_BAD_REQUEST)

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_falha_de_leitura_responde_lista_vazia_com_aviso(self):
        with patch.object(ocorrencia_repo, 'listar', side_effect=FalhaLeituraError('banco indisponível')):
            response = self.client.get(reverse('ocorrencias'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
        self.assertIn('banco indisponível', response[CABECALHO_AVISO])


class NotasAPITestCase(BaseAPITestCase):

    def setUp(self):
        super().setUp()
        self.ocorrencia_id = self.criar_ocorrencia().data['id']
        self.url = reverse('ocorrencia_notas', args=[self.ocorrencia_id])

    def test_adicionar_nota(self):
        response = self.client.post(self.url, {'texto': 'Aberto chamado na transportadora.'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quantidade_notas'], 2)
        self.assertEqual(response.data['notas'][-1]['autor'], 'Operador Logístico')

    def test_nota_em_branco_responde_400(self):
        response = self.client.post(self.url, {'texto': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_editar_nota_mantem_autor(self):
        nota = self.client.post(self.url, {'texto': 'Primeira versão'}, format='json').data['notas'][-1]

        response = self.client.patch(reverse('nota_detalhe', args=[nota['id']]), {'texto': 'Corrigida'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['texto'], 'Corrigida')
        self.assertEqual(response.data['autor'], nota['autor'])


# ====================================================================
# QUADRO E PAINEL
# ====================================================================

class QuadroPainelAPITestCase(BaseAPITestCase):

    def cartoes_em_aberto(self, **params):
        colunas = self.client.get(reverse('quadro'), params).data
        self.assertEqual(colunas[0]['status'], 'ABERTA')
        return colunas[0]['cartoes']

    def test_quadro_tem_seis_colunas(self):
        colunas = self.client.get(reverse('quadro')).data
        self.assertEqual(len(colunas), 6)
        self.assertNotIn('ARQUIVADA', [c['status'] for c in colunas])

    def test_notas_nao_lidas_zeram_ao_abrir_detalhe(self):
        """
        Cenário: A nota inicial aparece como não lida até o detalhe ser aberto.
        """
        # ARRANGE
        ocorrencia_id = self.criar_ocorrencia().data['id']
        self.assertEqual(self.cartoes_em_aberto()[0]['notas_nao_lidas'], 1)

        # ACT
        self.client.get(reverse('ocorrencia_detalhe', args=[ocorrencia_id]))

        # ASSERT
        self.assertEqual(self.cartoes_em_aberto()[0]['notas_nao_lidas'], 0)

    def test_notas_vistas_em_cliente_jwt_sem_cookie(self):
        """
        Cenário: Cliente JWT que não guarda o cookie de sessão também zera o
        indicador ao abrir o detalhe.
        """
        # ARRANGE
        cache.clear()
        ocorrencia_id = self.criar_ocorrencia().data['id']
        self.client.logout()
        token = self.client.post(
            reverse('token_obtain_pair'), {'email': 'operador@logifix.local', 'password': SENHA}, format='json'
        ).data['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        self.client.cookies.clear()
        self.assertEqual(self.cartoes_em_aberto()[0]['notas_nao_lidas'], 1)

        # ACT
        self.client.cookies.clear()
        self.client.get(reverse('ocorrencia_detalhe', args=[ocorrencia_id]))

        # ASSERT
        self.client.cookies.clear()
        self.assertEqual(self.cartoes_em_aberto()[0]['notas_nao_lidas'], 0)

    def test_filtros_do_quadro(self):
        self.criar_ocorrencia()
        self.assertEqual(len(self.cartoes_em_aberto(transportadora='all')), 1)
        self.assertEqual(len(self.cartoes_em_aberto(transportadora='outra')), 0)
        self.assertEqual(len(self.cartoes_em_aberto(responsavel=str(self.carlos.pk))), 1)
        self.assertEqual(len(self.cartoes_em_aberto(responsavel=str(self.operador.pk))), 0)

    def test_resumo_financeiro_ignora_concluidas(self):
        ocorrencia_id = self.criar_ocorrencia(contestar_fatura=True).data['id']
        self.assertEqual(self.client.get(reverse('resumo_financeiro')).data['total_contestacao'], '25.90')

        self.client.post(reverse('ocorrencia_status', args=[ocorrencia_id]), {'status': 'CONCLUIDA'}, format='json')

        self.assertEqual(self.client.get(reverse('resumo_financeiro')).data['total_contestacao'], '0.00')

    def test_painel(self):
        self.criar_ocorrencia()
        painel = self.client.get(reverse('painel')).data
        self.assertEqual(painel['indicadores']['total'], 1)
        self.assertEqual(len(painel['por_status']), 7)
        self.assertEqual(painel['regioes'][0]['uf'], 'SP')
        self.assertEqual(painel['por_transportadora'][0]['ativas'], 1)


# ====================================================================
# AUTENTICAÇÃO E ROTAS ADMINISTRATIVAS
# ====================================================================

class AutenticacaoAPITestCase(BaseAPITestCase):

    def test_sem_autenticacao_responde_401(self):
        self.client.logout()
        response = self.client.get(reverse('ocorrencias'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_obter_token_jwt(self):
        self.client.logout()
        response = self.client.post(
            reverse('token_obtain_pair'), {'email': 'operador@logifix.local', 'password': SENHA}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        self.assertEqual(self.client.get(reverse('ocorrencias')).status_code, status.HTTP_200_OK)


class AdminAPITestCase(BaseAPITestCase):

    def test_transportadoras_leitura_liberada_escrita_master(self):
        self.assertEqual(self.client.get(reverse('transportadoras')).status_code, status.HTTP_200_OK)

        negado = self.client.post(reverse('transportadoras'), {'nome': 'LoggiAzul'}, format='json')
        self.assertEqual(negado.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_login(self.carlos)
        criada = self.client.post(
            reverse('transportadoras'), {'nome': 'LoggiAzul', 'segmento': 'Loja Virtual', 'cor': '#123abc'}, format='json'
        )
        self.assertEqual(criada.status_code, status.HTTP_201_CREATED)
        self.assertEqual(criada.data['segmento'], 'Loja Virtual')

        cor_invalida = self.client.post(reverse('transportadoras'), {'nome': 'X', 'cor': 'azul'}, format='json')
        self.assertEqual(cor_invalida.status_code, status.HTTP_400_BAD_REQUEST)

    def test_excluir_transportadora_mantem_ocorrencias(self):
        ocorrencia_id = self.criar_ocorrencia().data['id']
        self.client.force_login(self.carlos)

        response = self.client.delete(reverse('transportadora_detalhe', args=[self.transportadora.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        detalhe = self.client.get(reverse('ocorrencia_detalhe', args=[ocorrencia_id]))
        self.assertEqual(detalhe.data['transportadora_id'], self.transportadora.id)

    def test_usuarios_somente_master(self):
        self.assertEqual(self.client.get(reverse('usuarios')).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_login(self.carlos)
        self.assertEqual(len(self.client.get(reverse('usuarios')).data), 2)

        criado = self.client.post(reverse('usuarios'), {
            'nome': 'Nova Operadora', 'email': 'nova@logifix.local', 'senha': SENHA,
        }, format='json')
        self.assertEqual(criado.status_code, status.HTTP_201_CREATED)
        self.assertEqual(criado.data['papel'], 'Usuário')

        promovido = self.client.put(
            reverse('usuario_detalhe', args=[criado.data['id']]), {'nome': 'Nova Operadora', 'papel': 'Master'},
            format='json',
        )
        self.assertEqual(promovido.data['papel'], 'Master')

    def test_master_nao_exclui_a_si_mesmo(self):
        self.client.force_login(self.carlos)
        response = self.client.delete(reverse('usuario_detalhe', args=[self.carlos.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(UsuarioModel.objects.filter(pk=self.carlos.pk).exists())

    def test_logs_do_mais_recente_para_o_mais_antigo(self):
        primeira = self.criar_ocorrencia().data['id']
        self.client.post(reverse('ocorrencia_finalizar', args=[primeira]))

        self.assertEqual(self.client.get(reverse('logs_auditoria')).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_login(self.carlos)
        logs = self.client.get(reverse('logs_auditoria')).data
        self.assertEqual([log['acao'] for log in logs], ['Finalizou Ocorrência', 'Nova Ocorrência'])
