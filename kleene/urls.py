from django.urls import path
from . import views

urlpatterns = [
    # Automaton to regular expression by state elimination
    path('api/fsa-to-regex/', views.fsa_to_regex, name='fsa_to_regex'),
    path('api/description-to-regex/', views.description_to_regex, name='description_to_regex'),

    # Canonical form of a regular expression
    path('api/simplify-regex/', views.simplify_regex, name='simplify_regex'),
]
