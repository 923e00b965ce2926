from django.urls import path
from . import views

urlpatterns = [
    # Subset construction and minimisation
    path('api/nfa-to-dfa/', views.convert_nfa_to_dfa, name='nfa_to_dfa'),
    path('api/minimise-dfa/', views.min_dfa, name='minimise_dfa'),

    # Helpers for stepping through an automaton
    path('api/epsilon-closure/', views.compute_epsilon_closure, name='epsilon_closure'),
    path('api/simulate/', views.simulate, name='simulate'),
    path('api/complete-dfa/', views.dfa_to_complete, name='complete_dfa'),
]
