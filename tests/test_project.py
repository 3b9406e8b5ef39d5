import pytest

from codereview.errors import ProjectNotFoundError
from codereview.utils.project import probe_project


def test_maven_project_info(sample_project):
    info = probe_project(sample_project)

    assert info.project_type == "maven"
    assert info.java_version == "17"
    assert info.dependencies == ("spring-boot-starter-web", "log4j-core", "commons-lang")
    assert info.source_files == ("src/main/java/com/example/demo/DemoApplication.java",)
    assert info.config_files == ("src/main/resources/application.properties",)
    assert info.test_files == ()


def test_gradle_project_info(tmp_path):
    (tmp_path / "build.gradle").write_text(
        "sourceCompatibility = '1.8'\n"
        "dependencies {\n"
        "    implementation 'org.springframework.boot:spring-boot-starter-web:2.7.0'\n"
        "    testImplementation 'junit:junit:4.13.2'\n"
        "}\n",
        encoding="utf-8",
    )
    test_source = tmp_path / "src" / "test" / "java" / "AppTest.java"
    test_source.parent.mkdir(parents=True)
    test_source.write_text("class AppTest {}\n", encoding="utf-8")

    info = probe_project(tmp_path)

    assert info.project_type == "gradle"
    assert info.java_version == "8"
    assert info.dependencies == ("spring-boot-starter-web", "junit")
    assert info.test_files == ("src/test/java/AppTest.java",)


def test_missing_descriptor(tmp_path):
    with pytest.raises(ProjectNotFoundError, match="Maven or Gradle"):
        probe_project(tmp_path)
