from django.urls import path
from .views import SimulationListView, SimulationDetailView, EncodeView, DecodeView

urlpatterns = [
    path('simulations', SimulationListView.as_view(), name='simulation_list'),
    path('simulations/<str:pk>', SimulationDetailView.as_view(), name='simulation_detail'),
    path('codec/encode', EncodeView.as_view(), name='codec_encode'),
    path('codec/decode', DecodeView.as_view(), name='codec_decode'),
]
