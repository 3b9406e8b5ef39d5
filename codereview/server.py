"""MCP server exposing the review tools over stdio."""

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from . import tools
from .logs import configure_logging

app = FastMCP("code-review")


@app.tool()
def scan_project(
    projectPath: str,
    includePatterns: Optional[List[str]] = None,
    excludePatterns: Optional[List[str]] = None,
    categories: Optional[List[str]] = None,
    outputFormat: str = "json",
) -> Dict[str, Any]:
    """Review a Java / Spring Boot project and return the issues found.

    Args:
        projectPath: Root directory of a Maven or Gradle project
        includePatterns: Glob patterns of files to review
        excludePatterns: Glob patterns of files to skip
        categories: Review categories to run (default: all)
        outputFormat: json, html or markdown
    """
    return tools.scan_project(
        projectPath,
        include_patterns=includePatterns,
        exclude_patterns=excludePatterns,
        categories=categories,
        output_format=outputFormat,
    )


@app.tool()
def generate_report(
    results: List[Dict[str, Any]],
    format: str,  # pylint: disable=redefined-builtin
    outputPath: str,
    projectName: Optional[str] = None,
) -> Dict[str, Any]:
    """Merge scan results into a scored report and write it to disk.

    Args:
        results: Results returned by scan_project
        format: json, html or markdown
        outputPath: File the report is written to
        projectName: Name shown in the report header
    """
    return tools.generate_report(results, format, outputPath, project_name=projectName)


def main(log_level: Optional[str] = None) -> None:
    configure_logging(log_level)
    app.run()


if __name__ == "__main__":  # pragma: no cover
    main()
