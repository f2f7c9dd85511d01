from datetime import date

from rest_framework import serializers

from logifix.core.entities import (
    Ocorrencia, Transportadora, Usuario, Segmento, PapelUsuario, FLAGS_OCORRENCIA,
)

# Os serializers trabalham sobre as entidades do Core (não sobre os Models):
# as views recebem entidades dos casos de uso e devolvem JSON.


def _escolhas(enum_cls):
    return [(membro.value, membro.value) for membro in enum_cls]


# ====================================================================
# SERIALIZERS DE OCORRÊNCIA
# ====================================================================

class NotaSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    texto = serializers.CharField()
    autor = serializers.CharField(read_only=True)
    data = serializers.DateTimeField(read_only=True)


class OcorrenciaSerializer(serializers.Serializer):
    """Representação completa de uma ocorrência, com a linha do tempo."""
    id = serializers.CharField()
    transportadora_id = serializers.CharField()
    codigo_rastreio = serializers.CharField()
    numero_nota_fiscal = serializers.CharField()
    destinatario = serializers.CharField()
    uf = serializers.CharField()
    status = serializers.CharField(source='status.value')
    status_codigo = serializers.CharField(source='status.name')
    data_ocorrencia = serializers.DateField()
    criado_em = serializers.DateTimeField()
    finalizado_em = serializers.DateTimeField(allow_null=True)
    valor_nota = serializers.DecimalField(max_digits=12, decimal_places=2)
    valor_frete = serializers.DecimalField(max_digits=12, decimal_places=2)
    reenviado = serializers.BooleanField()
    transportadora_reenvio_id = serializers.CharField(allow_null=True)
    codigo_rastreio_reenvio = serializers.CharField(allow_null=True)
    contestar_fatura = serializers.BooleanField()
    extravio_devolucao = serializers.BooleanField()
    avaria = serializers.BooleanField()
    responsaveis = serializers.ListField(child=serializers.CharField())
    quantidade_notas = serializers.IntegerField()
    notas = NotaSerializer(many=True)


class OcorrenciaCriacaoSerializer(serializers.Serializer):
    """
    Validação do formulário "Nova Reclamação". A regra de nota fiscal
    duplicada fica no caso de uso.
    """
    transportadora_id = serializers.CharField()
    codigo_rastreio = serializers.CharField()
    numero_nota_fiscal = serializers.CharField()
    destinatario = serializers.CharField()
    uf = serializers.CharField(max_length=2, min_length=2)
    data_ocorrencia = serializers.DateField(required=False)
    valor_nota = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    valor_frete = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    reenviado = serializers.BooleanField(required=False, default=False)
    transportadora_reenvio_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    codigo_rastreio_reenvio = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    contestar_fatura = serializers.BooleanField(required=False, default=False)
    extravio_devolucao = serializers.BooleanField(required=False, default=False)
    avaria = serializers.BooleanField(required=False, default=False)
    responsaveis = serializers.ListField(child=serializers.CharField(), required=False)
    nota_inicial = serializers.CharField(required=False, allow_blank=True)

    def to_entity(self) -> Ocorrencia:
        dados = dict(self.validated_data)
        dados.pop('nota_inicial', None)
        dados.setdefault('data_ocorrencia', date.today())
        dados['transportadora_reenvio_id'] = dados.get('transportadora_reenvio_id') or None
        dados['codigo_rastreio_reenvio'] = dados.get('codigo_rastreio_reenvio') or None
        dados['responsaveis'] = list(dados.get('responsaveis') or [])
        return Ocorrencia(**dados)


class OcorrenciaEdicaoSerializer(serializers.Serializer):
    """Edição parcial (PATCH): apenas os campos enviados são alterados."""
    transportadora_id = serializers.CharField(required=False)
    codigo_rastreio = serializers.CharField(required=False)
    numero_nota_fiscal = serializers.CharField(required=False)
    destinatario = serializers.CharField(required=False)
    uf = serializers.CharField(required=False, max_length=2, min_length=2)
    status = serializers.CharField(required=False)
    data_ocorrencia = serializers.DateField(required=False)
    valor_nota = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    valor_frete = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    reenviado = serializers.BooleanField(required=False)
    transportadora_reenvio_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    codigo_rastreio_reenvio = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    contestar_fatura = serializers.BooleanField(required=False)
    extravio_devolucao = serializers.BooleanField(required=False)
    avaria = serializers.BooleanField(required=False)
    responsaveis = serializers.ListField(child=serializers.CharField(), required=False)

    def validate(self, attrs):
        desconhecidos = set(self.initial_data) - set(self.fields)
        if desconhecidos:
            raise serializers.ValidationError(
                f"Campos não editáveis: {', '.join(sorted(desconhecidos))}."
            )
        if not attrs:
            raise serializers.ValidationError("Nenhum campo informado para edição.")
        return attrs


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField(help_text="Rótulo ('Em Tratativa') ou código ('EM_TRATATIVA').")
    via_quadro = serializers.BooleanField(required=False, default=False)


class FlagSerializer(serializers.Serializer):
    flag = serializers.ChoiceField(choices=list(FLAGS_OCORRENCIA.items()))


class ReenvioSerializer(serializers.Serializer):
    transportadora_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    codigo_rastreio = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class NotaTextoSerializer(serializers.Serializer):
    # Texto em branco é recusado pelo caso de uso (NotaVaziaError).
    texto = serializers.CharField(allow_blank=True)


# ====================================================================
# SERIALIZERS DO QUADRO, PAINEL E HISTÓRICO
# ====================================================================

class CartaoQuadroSerializer(serializers.Serializer):
    ocorrencia = OcorrenciaSerializer()
    notas_nao_lidas = serializers.IntegerField()


class ColunaQuadroSerializer(serializers.Serializer):
    status = serializers.CharField(source='status.name')
    rotulo = serializers.CharField()
    total = serializers.IntegerField()
    cartoes = CartaoQuadroSerializer(many=True)


class ResumoFinanceiroSerializer(serializers.Serializer):
    total_contestacao = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_extravio = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_avaria = serializers.DecimalField(max_digits=14, decimal_places=2)


class IndicadoresPainelSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    em_aberto = serializers.IntegerField()
    contestacoes = serializers.IntegerField()
    extravios = serializers.IntegerField()
    concluidas = serializers.IntegerField()


class ContagemTransportadoraSerializer(serializers.Serializer):
    transportadora_id = serializers.CharField()
    nome = serializers.CharField()
    total = serializers.IntegerField()
    ativas = serializers.IntegerField()


class ContagemStatusSerializer(serializers.Serializer):
    status = serializers.CharField(source='status.value')
    quantidade = serializers.IntegerField()


class ContagemRegiaoSerializer(serializers.Serializer):
    uf = serializers.CharField()
    quantidade = serializers.IntegerField()
    percentual = serializers.IntegerField()


class PainelSerializer(serializers.Serializer):
    indicadores = IndicadoresPainelSerializer()
    por_transportadora = ContagemTransportadoraSerializer(many=True)
    por_status = ContagemStatusSerializer(many=True)
    regioes = ContagemRegiaoSerializer(many=True)
    financeiro = ResumoFinanceiroSerializer()


# ====================================================================
# SERIALIZERS ADMINISTRATIVOS
# ====================================================================

class TransportadoraSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    nome = serializers.CharField(max_length=100)
    segmento = serializers.ChoiceField(choices=_escolhas(Segmento), default=Segmento.AMBOS.value)
    cor = serializers.RegexField(r'^#[0-9a-fA-F]{6}$', default='#3b82f6')

    def to_representation(self, instance):
        dados = super().to_representation(instance)
        dados['segmento'] = Segmento(instance.segmento).value
        return dados

    def to_entity(self, transportadora_id=None) -> Transportadora:
        return Transportadora(
            id=transportadora_id,
            nome=self.validated_data['nome'],
            segmento=Segmento(self.validated_data['segmento']),
            cor=self.validated_data['cor'],
        )


class UsuarioSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    nome = serializers.CharField(max_length=150)
    email = serializers.EmailField(read_only=True)
    papel = serializers.CharField(source='papel.value', read_only=True)


class UsuarioCriacaoSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    papel = serializers.ChoiceField(choices=_escolhas(PapelUsuario), default=PapelUsuario.USUARIO.value)
    senha = serializers.CharField(write_only=True, min_length=6)

    def to_entity(self) -> Usuario:
        return Usuario(
            nome=self.validated_data['nome'],
            email=self.validated_data['email'],
            papel=PapelUsuario(self.validated_data['papel']),
        )


class UsuarioEdicaoSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=150)
    papel = serializers.ChoiceField(choices=_escolhas(PapelUsuario))


class LogAuditoriaSerializer(serializers.Serializer):
    id = serializers.CharField()
    acao = serializers.CharField()
    detalhes = serializers.CharField()
    usuario_id = serializers.CharField(allow_null=True)
    usuario_nome = serializers.CharField()
    data = serializers.DateTimeField()
