"""
Fixit rule for formatting SQL.
"""


import libcst as cst
from fixit import Invalid, LintRule, Valid
from libcst.helpers import get_full_name_for_node

from .formatter import format


class SqlFormatRule(LintRule):
    """
    Uses sqlprettify to format SQL queries assigned to a variable named sql.
    """

    MESSAGE = "SQL query is not formatted"

    VALID = [
        Valid(
            '''
            sql = """
                SELECT
                  a,
                  b
                FROM
                  t
                WHERE
                  x = 1
            """
            '''
        ),
        Valid(
            '''
            def load(cursor):
                sql = """
                    SELECT
                      COUNT(*)
                    FROM
                      users
                """
                cursor.execute(sql)

            class Report:
              def rows(self):
                 if self.ready:
                     sql = """
                         SELECT
                           id AS user_id
                         FROM
                           users
                     """
            '''
        ),
        Valid("query = 'select  * from x'"),
        Valid("sql = f'select {column} from x'"),
    ]

    INVALID = [
        Invalid(
            "sql = 'select a, b from t where x = 1'",
            expected_replacement='''
            sql = """
                SELECT
                  a,
                  b
                FROM
                  t
                WHERE
                  x = 1
            """''',
        ),
        Invalid(
            '''
            def load():
                sql = "select id uid from users"
            ''',
            expected_replacement='''
            def load():
                sql = """
                    SELECT
                      id AS uid
                    FROM
                      users
                """
            ''',
        ),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.current_indent = 0
        self.default_indent = 4

    def visit_Module(self, node: cst.Module) -> None:
        self.default_indent = len(node.default_indent.replace("\t", " " * 4))

    def visit_IndentedBlock(self, node: cst.IndentedBlock) -> None:
        self.current_indent += self._indent_of(node)

    def leave_IndentedBlock(self, original_node: cst.IndentedBlock) -> None:
        self.current_indent -= self._indent_of(original_node)

    def _indent_of(self, node: cst.IndentedBlock) -> int:
        if node.indent is not None:
            return len(node.indent.replace("\t", " " * 4))
        else:
            return self.default_indent

    def visit_Assign(self, node: cst.Assign) -> None:
        full_name = get_full_name_for_node(node.targets[0].target)
        if full_name == "sql" and isinstance(node.value, cst.SimpleString):
            query = node.value.evaluated_value
            if not isinstance(query, str):
                return
            replacement = self._as_literal(format(query))
            if replacement != node.value.value:
                new_str = node.value.with_changes(value=replacement)
                self.report(node.value, self.MESSAGE, replacement=new_str)

    def _as_literal(self, formatted: str) -> str:
        # TODO escaping, preserve prefix
        body_indent = " " * (self.current_indent + 4)
        closing_indent = " " * self.current_indent
        lines = [body_indent + line if line else line for line in formatted.split("\n")]
        body = "\n".join(lines)
        return f'"""\n{body}\n{closing_indent}"""'
