import json
import sys

from django.core.management.base import BaseCommand, CommandError

from kleene.conf import get_notation
from kleene.description import automaton_from_fsa, parse_description
from kleene.elimination import automaton_to_regex
from kleene.exceptions import KleeneError
from kleene.notation import Notation


class Command(BaseCommand):
    help = 'Convert a finite automaton description into an equivalent regular expression.'

    def add_arguments(self, parser):
        parser.add_argument('path', help="Description file, or '-' to read standard input")
        parser.add_argument('--format', choices=['lines', 'json'], default='lines',
                            help='lines: Q / q0 / F / transitions; json: FSA dictionary')
        parser.add_argument('--notation', choices=[notation.value for notation in Notation],
                            help='Notation for the printed expression (default: KLEENE_NOTATION)')
        parser.add_argument('--trace', action='store_true',
                            help='Print the edges rewritten in every elimination round')
        parser.add_argument('--no-skip', action='store_true',
                            help='Rewrite pairs even when no route passes through the removed vertex')

    def handle(self, *args, **options):
        text = self.read(options['path'])
        notation = Notation.from_name(options['notation']) if options['notation'] else get_notation()

        try:
            if options['format'] == 'json':
                automaton = automaton_from_fsa(json.loads(text))
            else:
                automaton = parse_description(text)
            result = automaton_to_regex(automaton, skip_empty_routes=not options['no_skip'])
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON: {e}")
        except KleeneError as e:
            raise CommandError(str(e))

        if options['trace']:
            for elimination_round in result.rounds:
                self.stdout.write(f"-------- {elimination_round.ripped} --------")
                for source, target, pattern in elimination_round.edges:
                    self.stdout.write(f"{source} {target} {pattern.render(notation)}")

        self.stdout.write(result.pattern.render(notation))

    def read(self, path):
        if path == '-':
            return sys.stdin.read()
        try:
            with open(path, encoding='utf-8') as handle:
                return handle.read()
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")
