from fixit.testing import add_lint_rule_tests_to_module

# imported under a private name so pytest does not collect the rule itself
from sqlprettify.fixit import SqlFormatRule as _SqlFormatRule

add_lint_rule_tests_to_module(globals(), rules=[_SqlFormatRule()])
