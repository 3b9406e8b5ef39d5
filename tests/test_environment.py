from pathlib import Path

from codereview.checkers.environment import EnvironmentChecker, check_environment


def _run(source, name):
    return check_environment(Path(name), source, source.split("\n"))


def test_environment_lookup_without_default():
    source = "\n".join([
        'String home = System.getenv("APP_HOME");',
        'String port = System.getProperty("server.port", "8080");',
        'String region = Optional.ofNullable(System.getenv("REGION")).orElse("eu");',
    ])

    assert [(issue.line, issue.rule_id) for issue in _run(source, "Settings.java")] == [(1, "env-default")]


def test_production_profile_activated():
    source = "spring:\n  profiles:\n    active: prod\n"

    assert [(issue.line, issue.rule_id) for issue in _run(source, "application.yml")] == [(3, "prod-config")]


def test_dynamic_versions(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_text(
        "<dependency>\n  <artifactId>guava</artifactId>\n  <version>LATEST</version>\n</dependency>\n",
        encoding="utf-8",
    )
    gradle = tmp_path / "build.gradle"
    gradle.write_text("dependencies {\n    implementation 'com.google.guava:guava:31.+'\n}\n", encoding="utf-8")

    issues = EnvironmentChecker().check([pom, gradle], tmp_path)

    assert [(Path(issue.file).name, issue.line, issue.rule_id) for issue in issues] == [
        ("pom.xml", 3, "dependency-version"),
        ("build.gradle", 2, "dependency-version"),
    ]
