"""
Define as rotas da API REST (Django REST Framework) da camada de apresentação.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from . import views, views_admin


urlpatterns = [
    # ====================================================================
    # 1. AUTENTICAÇÃO (JWT)
    # ====================================================================
    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # ====================================================================
    # 2. OCORRÊNCIAS
    # ====================================================================
    path('api/ocorrencias/', views.OcorrenciaListaAPIView.as_view(), name='ocorrencias'),
    # Antes da rota <ocorrencia_id>/ para não ser capturada por ela
    path('api/ocorrencias/finalizadas/', views.OcorrenciasFinalizadasAPIView.as_view(), name='ocorrencias_finalizadas'),
    path('api/ocorrencias/<str:ocorrencia_id>/', views.OcorrenciaDetalheAPIView.as_view(), name='ocorrencia_detalhe'),
    path('api/ocorrencias/<str:ocorrencia_id>/status/', views.OcorrenciaStatusAPIView.as_view(), name='ocorrencia_status'),
    path('api/ocorrencias/<str:ocorrencia_id>/finalizar/', views.OcorrenciaFinalizarAPIView.as_view(), name='ocorrencia_finalizar'),
    path('api/ocorrencias/<str:ocorrencia_id>/restaurar/', views.OcorrenciaRestaurarAPIView.as_view(), name='ocorrencia_restaurar'),
    path('api/ocorrencias/<str:ocorrencia_id>/flags/', views.OcorrenciaFlagAPIView.as_view(), name='ocorrencia_flags'),
    path('api/ocorrencias/<str:ocorrencia_id>/reenvio/', views.OcorrenciaReenvioAPIView.as_view(), name='ocorrencia_reenvio'),
    path('api/ocorrencias/<str:ocorrencia_id>/notas/', views.OcorrenciaNotasAPIView.as_view(), name='ocorrencia_notas'),
    path('api/ocorrencias/<str:ocorrencia_id>/vista/', views.OcorrenciaVistaAPIView.as_view(), name='ocorrencia_vista'),
    path('api/notas/<str:nota_id>/', views.NotaDetalheAPIView.as_view(), name='nota_detalhe'),

    # ====================================================================
    # 3. QUADRO E PAINEL
    # ====================================================================
    path('api/quadro/', views.QuadroAPIView.as_view(), name='quadro'),
    path('api/painel/', views.PainelAPIView.as_view(), name='painel'),
    path('api/resumo-financeiro/', views.ResumoFinanceiroAPIView.as_view(), name='resumo_financeiro'),

    # ====================================================================
    # 4. ROTAS ADMINISTRATIVAS
    # ====================================================================
    path('api/transportadoras/', views_admin.TransportadoraListaAPIView.as_view(), name='transportadoras'),
    path('api/transportadoras/<str:transportadora_id>/', views_admin.TransportadoraDetalheAPIView.as_view(), name='transportadora_detalhe'),
    path('api/usuarios/', views_admin.UsuarioListaAPIView.as_view(), name='usuarios'),
    path('api/usuarios/<str:usuario_id>/', views_admin.UsuarioDetalheAPIView.as_view(), name='usuario_detalhe'),
    path('api/logs/', views_admin.LogAuditoriaListaAPIView.as_view(), name='logs_auditoria'),
]
