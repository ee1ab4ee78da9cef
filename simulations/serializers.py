from django.core.validators import RegexValidator
from rest_framework import serializers

from .models import Simulation
from .services import get_store

binary_pair_validator = RegexValidator(
    r'^[01]{2}$', message="Must be exactly 2 binary digits (0 or 1)")


class SimulationSerializer(serializers.ModelSerializer):
    """
    Preset representation, also used for the in-memory store's records
    """
    textInput = serializers.CharField(source='text_input', read_only=True)
    mappingA = serializers.CharField(source='mapping_a', read_only=True)
    mappingC = serializers.CharField(source='mapping_c', read_only=True)
    mappingG = serializers.CharField(source='mapping_g', read_only=True)
    mappingT = serializers.CharField(source='mapping_t', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Simulation
        fields = ['id', 'name', 'textInput', 'mappingA',
                  'mappingC', 'mappingG', 'mappingT', 'createdAt']
        read_only_fields = ['id', 'name']


class SimulationCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    textInput = serializers.CharField(
        source='text_input', allow_blank=True, trim_whitespace=False)
    mappingA = serializers.CharField(source='mapping_a', validators=[binary_pair_validator])
    mappingC = serializers.CharField(source='mapping_c', validators=[binary_pair_validator])
    mappingG = serializers.CharField(source='mapping_g', validators=[binary_pair_validator])
    mappingT = serializers.CharField(source='mapping_t', validators=[binary_pair_validator])

    def validate_name(self, value):
        """
        Validate that name is not empty
        """
        if not value or not value.strip():
            raise serializers.ValidationError("Name is required and cannot be empty")
        return value.strip()

    def create(self, validated_data):
        # ids and timestamps are assigned by the store
        return get_store().create(validated_data)


class MappingSerializer(serializers.Serializer):
    # codes are checked by validate_mapping, not rejected here
    A = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    C = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    G = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    T = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class EncodeRequestSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    mapping = MappingSerializer(required=False)
    # text and mapping fall back to this saved preset
    simulationId = serializers.IntegerField(required=False)

    def validate(self, data):
        if 'text' not in data and 'simulationId' not in data:
            raise serializers.ValidationError({"text": "This field is required."})
        return data


class EncodedUnitSerializer(serializers.Serializer):
    base = serializers.CharField()
    binary = serializers.CharField()


class EncodeResponseSerializer(serializers.Serializer):
    text = serializers.CharField()
    binary = serializers.CharField()
    sequence = EncodedUnitSerializer(many=True)
    sequenceBinary = serializers.CharField()
    mapping = serializers.DictField(child=serializers.CharField())
    isValidMapping = serializers.BooleanField()
    mappingErrors = serializers.DictField(child=serializers.CharField())


class DecodeRequestSerializer(serializers.Serializer):
    binary = serializers.CharField(allow_blank=True, trim_whitespace=False)


class DecodeResponseSerializer(serializers.Serializer):
    binary = serializers.CharField()
    text = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    """
    Serializer for error responses
    """
    message = serializers.CharField()
    field = serializers.CharField(required=False)
