from pathlib import Path

from codereview.checkers.performance import (
    check_api_call_frequency,
    check_cache_usage,
    check_loop_optimization,
    check_query_optimization,
)
from codereview.severity import Severity


def _run(heuristic, source, name="src/main/java/OrderService.java"):
    lines = source.split("\n")
    return heuristic(Path(name), source, lines)


def test_nested_loop_is_major():
    source = "\n".join([
        "for (Order order : orders) {",
        "    for (Item item : order.getItems()) {",
        "        total += item.getPrice();",
        "    }",
        "}",
        "return total;",
    ])

    issues = _run(check_loop_optimization, source)

    assert [(issue.rule_id, issue.line, issue.severity) for issue in issues] == [
        ("nested-loops", 1, Severity.MAJOR)
    ]


def test_database_call_inside_loop_is_critical():
    source = "for (User user : users) {\n    userRepository.save(user);\n}"

    issues = _run(check_loop_optimization, source)

    assert [(issue.rule_id, issue.severity) for issue in issues] == [("loop-db-operation", Severity.CRITICAL)]


def test_collection_modified_while_iterating():
    source = "\n".join([
        "for (String name : names) {",
        "    if (name.isEmpty()) {",
        "        names.remove(name);",
        "    }",
        "}",
    ])

    issues = _run(check_loop_optimization, source)

    assert [(issue.rule_id, issue.line) for issue in issues] == [("collection-modification", 3)]


def test_sequential_blocking_calls():
    source = "\n".join([
        "String a = restTemplate.getForObject(urlA, String.class);",
        "String b = restTemplate.getForObject(urlB, String.class);",
        "String c = restTemplate.getForObject(urlC, String.class);",
    ])

    rule_ids = [issue.rule_id for issue in _run(check_api_call_frequency, source)]

    assert rule_ids.count("sync-api-call") == 3
    assert rule_ids.count("sequential-api-calls") == 1


def test_missing_cache_skipped_for_test_sources():
    source = "List<User> users = userRepository.findAll();"

    assert [issue.rule_id for issue in _run(check_cache_usage, source)] == ["missing-cache"]
    assert _run(check_cache_usage, source, name="src/test/java/UserServiceTest.java") == []


def test_cacheable_nearby_suppresses_missing_cache():
    source = '@Cacheable(value = "users", key = "#id")\npublic User load(long id) {\n    return userRepository.findById(id);\n}'

    assert _run(check_cache_usage, source) == []


def test_cache_config_without_expiry():
    issues = _run(check_cache_usage, "public class CacheConfig {}", name="CacheConfig.java")

    assert [(issue.rule_id, issue.line) for issue in issues] == [("cache-expiration", None)]


def test_n_plus_one_query():
    source = "\n".join([
        "List<Order> orders = orderRepository.findAll();",
        "for (Order order : orders) {",
        "    Customer customer = customerRepository.findById(order.getCustomerId());",
        "}",
    ])

    issues = _run(check_query_optimization, source)

    assert [(issue.rule_id, issue.line) for issue in issues] == [("n-plus-one-query", 1)]


def _loop_with_call_at(offset):
    lines = ["public void sync() {", "    int count = 0;", "    for (Long id : ids) {"]
    lines += ["        count++;"] * (offset - 1)
    lines += ["        Order order = restTemplate.getForObject(url, Order.class, id);", "    }", "}"]
    return "\n".join(lines)


def test_http_call_within_loop_window_is_major():
    issues = [issue for issue in _run(check_api_call_frequency, _loop_with_call_at(1)) if issue.rule_id == "loop-api-call"]

    assert [(issue.rule_id, issue.line, issue.severity) for issue in issues] == [
        ("loop-api-call", 3, Severity.MAJOR)
    ]


def test_http_call_window_boundary():
    def loop_calls(offset):
        return [issue for issue in _run(check_api_call_frequency, _loop_with_call_at(offset)) if issue.rule_id == "loop-api-call"]

    assert [issue.line for issue in loop_calls(9)] == [3]
    assert loop_calls(10) == []
