# Configuração da interface administrativa do Django para os modelos do LogiFix.

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from logifix.infrastructure.models import (
    Usuario, Transportadora, Ocorrencia, NotaOcorrencia, LogAuditoria
)

# ====================================================================
# 1. ADMIN PERSONALIZADO PARA USUÁRIOS (CUSTOMIZANDO O MODELO 'Usuario')
# ====================================================================

@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Customização do modelo Usuario: login por e-mail, nome e papel."""

    list_display = ('email', 'nome', 'papel', 'is_staff', 'is_active')
    list_filter = ('papel', 'is_staff', 'is_active')

    # O campo 'username' não existe no modelo Usuario, então os fieldsets
    # são redefinidos a partir do e-mail.
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Perfil', {'fields': ('nome', 'papel')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'nome', 'papel', 'password1', 'password2'),
        }),
    )

    search_fields = ('email', 'nome')
    ordering = ('email',)


# ====================================================================
# 2. ADMIN PARA TRANSPORTADORAS
# ====================================================================

@admin.register(Transportadora)
class TransportadoraAdmin(admin.ModelAdmin):
    list_display = ('nome', 'segmento', 'cor')
    list_filter = ('segmento',)
    search_fields = ('nome',)


# ====================================================================
# 3. ADMIN PARA OCORRÊNCIAS
# ====================================================================

class NotaOcorrenciaInline(admin.TabularInline):
    """Permite ver e editar a linha do tempo diretamente na página da Ocorrência."""
    model = NotaOcorrencia
    extra = 0
    fields = ('criado_em', 'autor', 'texto')


@admin.register(Ocorrencia)
class OcorrenciaAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'destinatario', 'numero_nota_fiscal', 'transportadora_id', 'uf',
        'status', 'criado_em', 'finalizado_em',
    )
    list_filter = ('status', 'uf', 'contestar_fatura', 'extravio_devolucao', 'avaria', 'reenviado')
    search_fields = ('id', 'destinatario', 'codigo_rastreio', 'numero_nota_fiscal')
    readonly_fields = ('criado_em',)
    inlines = [NotaOcorrenciaInline]


# ====================================================================
# 4. ADMIN PARA AUDITORIA (somente leitura)
# ====================================================================

@admin.register(LogAuditoria)
class LogAuditoriaAdmin(admin.ModelAdmin):
    list_display = ('criado_em', 'usuario_nome', 'acao', 'detalhes')
    list_filter = ('acao',)
    search_fields = ('usuario_nome', 'acao', 'detalhes')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
