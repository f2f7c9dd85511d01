# Define os modelos do banco de dados para a camada de infraestrutura.

import uuid

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager

from logifix.core.entities import Segmento, StatusOcorrencia, PapelUsuario

# ====================================================================
# GERENCIADOR DE USUÁRIOS PERSONALIZADO (Para usar email como login)
# ====================================================================

class CustomUserManager(BaseUserManager):
    """
    Gerenciador de modelos de usuário onde o email é o identificador único
    para autenticação, em vez dos nomes de usuário.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('O e-mail deve ser definido')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Cria e salva um Superusuário (papel Master) com o e-mail e senha fornecidos.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('papel', PapelUsuario.MASTER.value)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# ====================================================================
# MODELO DE USUÁRIO
# ====================================================================

class Usuario(AbstractUser):
    """
    Modelo de Usuário Personalizado que utiliza o campo 'email' como identificador
    principal para login, em vez de 'username'. O papel controla o acesso às
    telas administrativas (transportadoras, usuários e logs).
    """
    username = None

    email = models.EmailField('Endereço de E-mail', unique=True)
    nome = models.CharField(max_length=150, default='Usuário')
    papel = models.CharField(
        max_length=20,
        choices=[(p.value, p.value) for p in PapelUsuario],
        default=PapelUsuario.USUARIO.value,
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['nome']

    objects = CustomUserManager()

    class Meta:
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        db_table = 'profiles'
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} <{self.email}>"

    @property
    def is_master(self):
        return self.papel == PapelUsuario.MASTER.value


# ====================================================================
# TRANSPORTADORAS
# ====================================================================

def gerar_uuid():
    return str(uuid.uuid4())


class Transportadora(models.Model):
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    nome = models.CharField(max_length=100, verbose_name="Nome")
    segmento = models.CharField(
        max_length=20,
        choices=[(s.value, s.value) for s in Segmento],
        default=Segmento.AMBOS.value,
    )
    cor = models.CharField(max_length=7, default='#3b82f6', help_text="Cor em hexadecimal")

    class Meta:
        verbose_name = 'Transportadora'
        verbose_name_plural = 'Transportadoras'
        db_table = 'carriers'
        ordering = ['nome']

    def __str__(self):
        return self.nome


# ====================================================================
# OCORRÊNCIAS E NOTAS
# ====================================================================

class Ocorrencia(models.Model):
    """
    Reclamação logística. As transportadoras são referenciadas sem restrição
    de integridade: excluir uma transportadora deixa a referência órfã.
    """
    id = models.CharField(primary_key=True, max_length=20)
    transportadora = models.ForeignKey(
        Transportadora,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='ocorrencias',
    )
    codigo_rastreio = models.CharField(max_length=100)
    numero_nota_fiscal = models.CharField(max_length=50, db_index=True)
    destinatario = models.CharField(max_length=255)
    uf = models.CharField(max_length=2, verbose_name="UF")
    status = models.CharField(
        max_length=30,
        choices=[(s.value, s.value) for s in StatusOcorrencia],
        default=StatusOcorrencia.ABERTA.value,
    )

    # Datas
    criado_em = models.DateTimeField()
    data_ocorrencia = models.DateField()
    finalizado_em = models.DateTimeField(blank=True, null=True)

    # Valores
    valor_nota = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    valor_frete = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    # Flags
    reenviado = models.BooleanField(default=False)
    transportadora_reenvio = models.ForeignKey(
        Transportadora,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        blank=True,
        null=True,
        related_name='reenvios',
    )
    codigo_rastreio_reenvio = models.CharField(max_length=100, blank=True, null=True)
    contestar_fatura = models.BooleanField(default=False)
    extravio_devolucao = models.BooleanField(default=False)
    avaria = models.BooleanField(default=False)

    # Lista ordenada de IDs de usuários
    responsaveis = models.JSONField(default=list, blank=True)

    class Meta:
        verbose_name = 'Ocorrência'
        verbose_name_plural = 'Ocorrências'
        db_table = 'occurrences'
        ordering = ['criado_em']

    def __str__(self):
        return f"{self.id} - {self.destinatario}"


class NotaOcorrencia(models.Model):
    ocorrencia = models.ForeignKey(Ocorrencia, on_delete=models.CASCADE, related_name='notas')
    autor = models.CharField(max_length=150)
    texto = models.TextField()
    criado_em = models.DateTimeField()

    class Meta:
        verbose_name = 'Nota da Ocorrência'
        verbose_name_plural = 'Notas das Ocorrências'
        db_table = 'occurrence_notes'
        ordering = ['criado_em', 'id']

    def __str__(self):
        return f"{self.ocorrencia_id} - {self.autor}"


# ====================================================================
# AUDITORIA
# ====================================================================

class LogAuditoria(models.Model):
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    acao = models.CharField(max_length=100)
    detalhes = models.TextField(blank=True)
    usuario_id = models.CharField(max_length=36, blank=True, null=True)
    usuario_nome = models.CharField(max_length=150)
    criado_em = models.DateTimeField()

    class Meta:
        verbose_name = 'Log de Auditoria'
        verbose_name_plural = 'Logs de Auditoria'
        db_table = 'audit_logs'
        ordering = ['-criado_em']

    def __str__(self):
        return f"{self.criado_em:%d/%m/%Y %H:%M} {self.usuario_nome}: {self.acao}"
