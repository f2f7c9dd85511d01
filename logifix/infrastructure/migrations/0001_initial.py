import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import logifix.infrastructure.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Usuario',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Endereço de E-mail')),
                ('nome', models.CharField(default='Usuário', max_length=150)),
                ('papel', models.CharField(choices=[('Master', 'Master'), ('Usuário', 'Usuário')], default='Usuário', max_length=20)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'profiles',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='Transportadora',
            fields=[
                ('id', models.CharField(default=logifix.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=100, verbose_name='Nome')),
                ('segmento', models.CharField(choices=[('Loja Virtual', 'Loja Virtual'), ('Loja Física', 'Loja Física'), ('Ambos', 'Ambos')], default='Ambos', max_length=20)),
                ('cor', models.CharField(default='#3b82f6', help_text='Cor em hexadecimal', max_length=7)),
            ],
            options={
                'verbose_name': 'Transportadora',
                'verbose_name_plural': 'Transportadoras',
                'db_table': 'carriers',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='LogAuditoria',
            fields=[
                ('id', models.CharField(default=logifix.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('acao', models.CharField(max_length=100)),
                ('detalhes', models.TextField(blank=True)),
                ('usuario_id', models.CharField(blank=True, max_length=36, null=True)),
                ('usuario_nome', models.CharField(max_length=150)),
                ('criado_em', models.DateTimeField()),
            ],
            options={
                'verbose_name': 'Log de Auditoria',
                'verbose_name_plural': 'Logs de Auditoria',
                'db_table': 'audit_logs',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.CreateModel(
            name='Ocorrencia',
            fields=[
                ('id', models.CharField(max_length=20, primary_key=True, serialize=False)),
                ('codigo_rastreio', models.CharField(max_length=100)),
                ('numero_nota_fiscal', models.CharField(db_index=True, max_length=50)),
                ('destinatario', models.CharField(max_length=255)),
                ('uf', models.CharField(max_length=2, verbose_name='UF')),
                ('status', models.CharField(choices=[('Em Aberto', 'Em Aberto'), ('Aguardando Resposta', 'Aguardando Resposta'), ('Em Tratativa', 'Em Tratativa'), ('Bloqueio/Devolução', 'Bloqueio/Devolução'), ('Auditoria Financeira', 'Auditoria Financeira'), ('Concluído', 'Concluído'), ('Arquivado', 'Arquivado')], default='Em Aberto', max_length=30)),
                ('criado_em', models.DateTimeField()),
                ('data_ocorrencia', models.DateField()),
                ('finalizado_em', models.DateTimeField(blank=True, null=True)),
                ('valor_nota', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('valor_frete', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('reenviado', models.BooleanField(default=False)),
                ('codigo_rastreio_reenvio', models.CharField(blank=True, max_length=100, null=True)),
                ('contestar_fatura', models.BooleanField(default=False)),
                ('extravio_devolucao', models.BooleanField(default=False)),
                ('avaria', models.BooleanField(default=False)),
                ('responsaveis', models.JSONField(blank=True, default=list)),
                ('transportadora', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='ocorrencias', to='infrastructure.transportadora')),
                ('transportadora_reenvio', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='reenvios', to='infrastructure.transportadora')),
            ],
            options={
                'verbose_name': 'Ocorrência',
                'verbose_name_plural': 'Ocorrências',
                'db_table': 'occurrences',
                'ordering': ['criado_em'],
            },
        ),
        migrations.CreateModel(
            name='NotaOcorrencia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('autor', models.CharField(max_length=150)),
                ('texto', models.TextField()),
                ('criado_em', models.DateTimeField()),
                ('ocorrencia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notas', to='infrastructure.ocorrencia')),
            ],
            options={
                'verbose_name': 'Nota da Ocorrência',
                'verbose_name_plural': 'Notas das Ocorrências',
                'db_table': 'occurrence_notes',
                'ordering': ['criado_em', 'id'],
            },
        ),
    ]
