import pytest

from codereview.config import DEFAULT_INCLUDE_PATTERNS, ReviewConfig, load_config, parse_categories
from codereview.errors import ParameterError
from codereview.result import Category
from codereview.utils.code import discover_files, expand_braces, glob_match


def test_missing_config_yields_defaults(tmp_path):
    assert load_config(tmp_path / ".code-review.yml") == ReviewConfig()


def test_config_values(tmp_path):
    path = tmp_path / ".code-review.yml"
    path.write_text(
        "include:\n  - '**/*.java'\nexclude: []\ncategories: [security, database]\n"
        "disabled_rules: [magic-number]\nlog_level: debug\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.include_patterns == ("**/*.java",)
    assert config.exclude_patterns == ()
    assert config.categories == (Category.SECURITY, Category.DATABASE)
    assert config.disabled_rules == frozenset({"magic-number"})
    assert config.log_level == "debug"


def test_invalid_config(tmp_path):
    path = tmp_path / ".code-review.yml"
    path.write_text("categories: [nonsense]\n", encoding="utf-8")
    with pytest.raises(ParameterError):
        load_config(path)

    path.write_text("include: [unclosed\n", encoding="utf-8")
    with pytest.raises(ParameterError):
        load_config(path)


def test_parse_categories_deduplicates():
    assert parse_categories(["security", "SECURITY", "database"]) == (Category.SECURITY, Category.DATABASE)
    with pytest.raises(ParameterError):
        parse_categories([])


def test_glob_matching():
    assert glob_match("A.java", "**/*.java")
    assert glob_match("src/main/java/A.java", "**/*.java")
    assert not glob_match("A.java.bak", "**/*.java")
    assert not glob_match("src/A.java", "*.java")
    assert glob_match("src/main/resources/application-dev.yml", "**/application*.{properties,yml}")
    assert not glob_match("src/main/resources/bootstrap.yml", "**/application*.{properties,yml}")
    assert glob_match("target/", "**/target/**")
    assert glob_match("module/target/classes/A.class", "**/target/**")


def test_brace_expansion():
    assert expand_braces("a.{yml,yaml}") == ["a.yml", "a.yaml"]
    assert expand_braces("{src,test}/*.{java,kt}") == ["src/*.java", "src/*.kt", "test/*.java", "test/*.kt"]
    assert expand_braces("a{b") == ["a{b"]


def test_discover_files_deduplicates_in_pattern_order(tmp_path):
    (tmp_path / "pom.xml").write_text("<project/>", encoding="utf-8")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "A.java").write_text("class A {}", encoding="utf-8")

    files = discover_files(tmp_path, ("**/pom.xml",) + DEFAULT_INCLUDE_PATTERNS)

    assert [path.name for path in files] == ["pom.xml", "A.java"]
