from django.urls import path
from . import views

urlpatterns = [
    path('register/', views.register_agent, name='delivery-agent-register'),
    path('', views.list_agents, name='delivery-agent-list'),
    path('<int:agent_id>/', views.update_agent, name='delivery-agent-update'),
    path('<int:agent_id>/status/', views.update_agent_status, name='delivery-agent-status'),
]
