from datetime import date, datetime
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from logifix.core.entities import Segmento, StatusOcorrencia, PapelUsuario
from logifix.infrastructure.models import (
    Usuario, Transportadora, Ocorrencia, NotaOcorrencia, LogAuditoria
)


def _momento(texto):
    return timezone.make_aware(datetime.fromisoformat(texto))


class Command(BaseCommand):
    help = 'Carrega transportadoras, usuários e ocorrências de exemplo'

    def add_arguments(self, parser):
        parser.add_argument(
            '--senha', default='logifix@2024',
            help='Senha atribuída aos usuários de exemplo criados agora.',
        )

    def handle(self, *args, **options):
        self.stdout.write('Criando dados iniciais...')

        # Transportadoras
        transportadoras = [
            ('Rapidão Cometa', Segmento.AMBOS, '#ef4444'),
            ('LoggiAzul', Segmento.ONLINE, '#3b82f6'),
            ('Correios Sedex', Segmento.AMBOS, '#eab308'),
            ('JadLog Transportes', Segmento.FISICA, '#22c55e'),
        ]
        por_nome = {}
        for nome, segmento, cor in transportadoras:
            transportadora, created = Transportadora.objects.get_or_create(
                nome=nome, defaults={'segmento': segmento.value, 'cor': cor},
            )
            por_nome[nome] = transportadora
            if created:
                self.stdout.write(self.style.SUCCESS(f'Criada transportadora "{nome}"'))

        # Usuários (o primeiro é o responsável padrão)
        usuarios = [
            ('Carlos Admin', settings.RESPONSAVEL_PADRAO_EMAIL, PapelUsuario.MASTER),
            ('Operador Logístico', 'operador@logifix.local', PapelUsuario.USUARIO),
        ]
        for nome, email, papel in usuarios:
            if Usuario.objects.filter(email__iexact=email).exists():
                continue
            Usuario.objects.create_user(
                email=email, password=options['senha'], nome=nome, papel=papel.value,
                is_staff=papel == PapelUsuario.MASTER,
            )
            self.stdout.write(self.style.SUCCESS(f'Criado usuário "{email}" ({papel.value})'))

        # Ocorrências
        ocorrencias = [
            {
                'id': 'OC-1001',
                'transportadora': 'Rapidão Cometa',
                'codigo_rastreio': 'BR123456789',
                'numero_nota_fiscal': 'NF-5920',
                'destinatario': 'João Silva',
                'uf': 'SP',
                'status': StatusOcorrencia.ANALISE,
                'criado_em': '2023-10-25T10:00:00',
                'data_ocorrencia': date(2023, 10, 25),
                'valor_nota': Decimal('150.00'),
                'valor_frete': Decimal('25.90'),
                'notas': [
                    ('2023-10-25T10:05:00', 'Sistema', 'Cliente reclamou de atraso de 5 dias.'),
                    ('2023-10-26T14:30:00', 'Atendente', 'Aberto chamado na transportadora.'),
                ],
            },
            {
                'id': 'OC-1004',
                'transportadora': 'Rapidão Cometa',
                'codigo_rastreio': 'BR55555555',
                'numero_nota_fiscal': 'NF-6100',
                'destinatario': 'Ana Pereira',
                'uf': 'RS',
                'status': StatusOcorrencia.ABERTA,
                'criado_em': '2023-11-05T08:30:00',
                'data_ocorrencia': date(2023, 11, 5),
                'valor_nota': Decimal('89.90'),
                'valor_frete': Decimal('15.00'),
                'notas': [
                    ('2023-11-05T08:30:00', 'SAC', 'Cliente alega que status consta entregue mas não recebeu.'),
                ],
            },
        ]
        responsavel = Usuario.objects.filter(email__iexact=settings.RESPONSAVEL_PADRAO_EMAIL).first()

        for dados in ocorrencias:
            if Ocorrencia.objects.filter(pk=dados['id']).exists():
                continue
            notas = dados.pop('notas')
            dados['transportadora'] = por_nome[dados['transportadora']]
            dados['status'] = dados['status'].value
            dados['criado_em'] = _momento(dados['criado_em'])
            dados['responsaveis'] = [str(responsavel.pk)] if responsavel else []
            ocorrencia = Ocorrencia.objects.create(**dados)
            for criado_em, autor, texto in notas:
                NotaOcorrencia.objects.create(
                    ocorrencia=ocorrencia, autor=autor, texto=texto, criado_em=_momento(criado_em),
                )
            self.stdout.write(self.style.SUCCESS(f'Criada ocorrência "{ocorrencia.id}"'))

        if not LogAuditoria.objects.exists():
            LogAuditoria.objects.create(
                acao='Sistema Iniciado',
                detalhes='Banco de dados inicial carregado.',
                usuario_id='system',
                usuario_nome='Sistema',
                criado_em=timezone.now(),
            )

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
