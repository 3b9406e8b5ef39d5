from pathlib import Path

from codereview.checkers.security import (
    SecurityChecker,
    check_input_validation,
    check_permission_validation,
    check_sql_injection,
    check_xss_protection,
)
from codereview.severity import Severity


def _run(heuristic, source, name="UserController.java"):
    return heuristic(Path(name), source, source.split("\n"))


def test_concatenated_sql_execution_is_critical():
    source = "\n".join([
        "public String find(String id) throws SQLException {",
        "    Statement stmt = connection.createStatement();",
        '    String sql = "SELECT * FROM t WHERE id=" + id; stmt.executeQuery(sql);',
        "}",
    ])

    issues = _run(check_sql_injection, source, name="UserDao.java")

    critical = [issue for issue in issues if issue.severity is Severity.CRITICAL]
    assert [(issue.type, issue.line, issue.rule_id) for issue in critical] == [
        ("SQL injection risk", 3, "sql-injection")
    ]


def test_plain_statement_followed_by_execute_is_major():
    source = "Statement statement = connection.createStatement();\nResultSet rs = statement.executeQuery(query);"

    issues = _run(check_sql_injection, source, name="UserDao.java")

    assert [(issue.rule_id, issue.line, issue.severity) for issue in issues] == [
        ("statement-execution", 1, Severity.MAJOR)
    ]


def test_request_parameter_echoed_without_escaping():
    source = "\n".join([
        "@RestController",
        "public class EchoController {",
        '    @GetMapping("/echo")',
        "    public String echo(@RequestParam String message) {",
        '        return "Hello " + message;',
        "    }",
        "}",
    ])

    issues = _run(check_xss_protection, source, name="EchoController.java")

    assert [(issue.rule_id, issue.line) for issue in issues] == [("xss-protection", 4)]


def test_escaped_parameter_is_not_xss():
    source = "\n".join([
        "@RestController",
        "public class EchoController {",
        "    public String echo(@RequestParam String message) {",
        "        return HtmlUtils.htmlEscape(message);",
        "    }",
        "}",
    ])

    assert _run(check_xss_protection, source, name="EchoController.java") == []


def test_jsp_parameter_without_escaping(tmp_path):
    page = tmp_path / "hello.jsp"
    page.write_text("<html>\n<p>Hello ${param.name}</p>\n</html>\n", encoding="utf-8")

    issues = SecurityChecker().check([page], tmp_path)

    assert [(issue.rule_id, issue.line, issue.severity) for issue in issues] == [
        ("jsp-xss", 2, Severity.CRITICAL)
    ]


def test_mutating_endpoint_without_authorization():
    lines = [
        "@RestController",
        "public class OrderController {",
        '    @PostMapping("/orders")',
        "    public ResponseEntity<Order> create(@Valid @RequestBody Order order) {",
    ]
    source = "\n".join(lines)

    issues = _run(check_permission_validation, source, name="OrderController.java")
    secured = _run(check_permission_validation, "@PreAuthorize(\"isAuthenticated()\")\n" + source, name="OrderController.java")

    assert [(issue.rule_id, issue.line) for issue in issues] == [("permission-validation", 3)]
    assert secured == []


def test_hardcoded_role_check():
    source = 'if (request.isUserInRole("ADMIN")) {'

    assert [issue.rule_id for issue in _run(check_permission_validation, source, name="Guard.java")] == [
        "hardcoded-roles"
    ]


def test_unvalidated_request_body_and_parameter():
    source = "\n".join([
        "@RestController",
        "public class UserController {",
        "    public User create(@RequestBody User user, @RequestParam String source) {",
        "        return service.save(user, source);",
        "    }",
        "}",
    ])

    issues = _run(check_input_validation, source)

    assert [(issue.rule_id, issue.severity) for issue in issues] == [
        ("input-validation", Severity.MAJOR),
        ("param-validation", Severity.MINOR),
    ]


def test_dto_without_constraints():
    source = "public class UserDTO {\n    private String name;\n}"

    issues = _run(check_input_validation, source, name="UserDTO.java")

    assert [(issue.rule_id, issue.line) for issue in issues] == [("dto-validation", None)]
