import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import (
    SimulationSerializer,
    SimulationCreateSerializer,
    EncodeRequestSerializer,
    EncodeResponseSerializer,
    DecodeRequestSerializer,
    DecodeResponseSerializer,
    ErrorResponseSerializer,
)
from .services import get_store
from .utils import (
    DEFAULT_MAPPING,
    decode,
    encode,
    first_error,
    mapping_from_preset,
    sequence_to_binary,
    to_binary_string,
    validate_mapping,
)

logger = logging.getLogger(__name__)

NOT_FOUND = {"message": "Simulation not found"}


def parse_id(pk):
    try:
        return int(pk)
    except (TypeError, ValueError):
        return None


def validation_error_response(errors):
    field, message = first_error(errors)
    payload = {"message": message}
    if field:
        payload["field"] = field
    return Response(payload, status=status.HTTP_400_BAD_REQUEST)


# GET & POST /api/simulations


class SimulationListView(APIView):

    @swagger_auto_schema(
        operation_summary="List saved simulations in creation order",
        responses={200: SimulationSerializer(many=True)},
        tags=['Simulations'],
    )
    def get(self, request):
        presets = get_store().list()
        return Response(SimulationSerializer(presets, many=True).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=SimulationCreateSerializer,
        operation_summary="Save a new simulation preset",
        responses={201: SimulationSerializer, 400: ErrorResponseSerializer},
        tags=['Simulations'],
    )
    def post(self, request):
        serializer = SimulationCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            preset = serializer.save()
        except Exception:
            logger.exception("Failed to store simulation %r", serializer.validated_data.get('name'))
            raise

        return Response(SimulationSerializer(preset).data, status=status.HTTP_201_CREATED)


# GET & DELETE /api/simulations/{id}


class SimulationDetailView(APIView):

    @swagger_auto_schema(
        operation_summary="Fetch one simulation by id",
        responses={200: SimulationSerializer, 404: ErrorResponseSerializer},
        tags=['Simulations'],
    )
    def get(self, request, pk):
        preset_id = parse_id(pk)
        preset = None if preset_id is None else get_store().get(preset_id)
        if preset is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(SimulationSerializer(preset).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Delete a simulation",
        responses={204: openapi.Response(description='Simulation deleted'), 404: ErrorResponseSerializer},
        tags=['Simulations'],
    )
    def delete(self, request, pk):
        preset_id = parse_id(pk)
        if preset_id is None or not get_store().delete(preset_id):
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


# POST /api/codec/encode


class EncodeView(APIView):
    """
    Text -> binary -> base sequence. A bad mapping is reported, not rejected.
    """

    @swagger_auto_schema(
        request_body=EncodeRequestSerializer,
        operation_summary="Encode text into a DNA base sequence",
        responses={200: EncodeResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['Codec'],
    )
    def post(self, request):
        serializer = EncodeRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        text = data.get('text')
        mapping = data.get('mapping')

        if 'simulationId' in data:
            preset = get_store().get(data['simulationId'])
            if preset is None:
                return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
            if text is None:
                text = preset.text_input
            if mapping is None:
                mapping = mapping_from_preset(preset)

        if mapping is None:
            mapping = dict(DEFAULT_MAPPING)

        errors = validate_mapping(mapping)
        sequence = encode(text, mapping)

        return Response({
            "text": text,
            "binary": to_binary_string(text),
            "sequence": [unit._asdict() for unit in sequence],
            "sequenceBinary": sequence_to_binary(sequence),
            "mapping": dict(mapping),
            "isValidMapping": not errors,
            "mappingErrors": errors,
        }, status=status.HTTP_200_OK)


# POST /api/codec/decode


class DecodeView(APIView):

    @swagger_auto_schema(
        request_body=DecodeRequestSerializer,
        operation_summary="Decode 8-bit binary chunks back into text",
        responses={200: DecodeResponseSerializer, 400: ErrorResponseSerializer},
        tags=['Codec'],
    )
    def post(self, request):
        serializer = DecodeRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        binary = serializer.validated_data['binary']
        return Response({"binary": binary, "text": decode(binary)}, status=status.HTTP_200_OK)
