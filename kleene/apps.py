from django.apps import AppConfig


class KleeneConfig(AppConfig):
    name = 'kleene'
    verbose_name = 'Automaton to regular expression conversion'
