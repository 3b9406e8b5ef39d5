from pathlib import Path

from codereview.checkers.thread_safety import check_shared_state


def test_shared_state_in_service():
    source = "\n".join([
        "@Service",
        "public class ReportService {",
        "    private int counter;",
        "    @Autowired",
        "    private UserRepository userRepository;",
        "    private final Clock clock;",
        '    private SimpleDateFormat format = new SimpleDateFormat("yyyy");',
        "    private Map<String, String> cache = new HashMap<>();",
        "    private Map<String, String> safe = new ConcurrentHashMap<>();",
        "    private void helper() {",
        "    }",
        "}",
    ])

    issues = check_shared_state(Path("ReportService.java"), source, source.split("\n"))

    assert [(issue.line, issue.rule_id) for issue in issues] == [
        (3, "instance-variable"),
        (7, "instance-variable"),
        (7, "simpledateformat"),
        (8, "instance-variable"),
        (8, "hashmap-thread"),
        (9, "instance-variable"),
    ]


def test_plain_class_fields_are_not_bean_state():
    source = "public class Point {\n    private int x;\n}"

    assert check_shared_state(Path("Point.java"), source, source.split("\n")) == []


def test_thread_local_formatter_is_fine():
    source = '    private static final ThreadLocal<SimpleDateFormat> FORMAT = ThreadLocal.withInitial(() -> new SimpleDateFormat("yyyy"));'

    assert check_shared_state(Path("Dates.java"), source, source.split("\n")) == []
