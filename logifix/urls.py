# logifix/urls.py
"""
Roteamento raiz do LogiFix: API REST de ocorrências, Django Admin e a
documentação OpenAPI gerada pelo drf-spectacular.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView


urlpatterns = [
    # API de ocorrências, quadro, painel e cadastros
    path('', include('logifix.presentation.urls')),

    path('admin/', admin.site.urls),

    # ====================================================================
    # DOCUMENTAÇÃO DA API
    # ====================================================================
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/docs/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
