"""Tests for the operation-specific Rich renderers."""

from skelctl.output.renderers import render_result
from skelctl.services.result import ServiceResult


def _init_result(**answers: object) -> ServiceResult:
    return ServiceResult.success(
        "init_project",
        {
            "template": "python",
            "destination": "/tmp/demo",
            "answers": answers,
            "files_created": ["README.md", "LICENSE-MIT"],
        },
        meta={"passes": 2},
    )


class TestRenderInit:
    def test_answers_table(self) -> None:
        output = render_result(_init_result(name="demo", licenses=["MIT", "ISC"]))
        assert "init_project" in output
        assert "template: python" in output
        assert "demo" in output
        assert "MIT ISC" in output

    def test_blank_answer_marked(self) -> None:
        assert "(blank)" in render_result(_init_result(author_name=""))

    def test_files_listed(self) -> None:
        output = render_result(_init_result(name="demo"))
        assert "2 file(s) written" in output
        assert "LICENSE-MIT" in output

    def test_meta_only_when_verbose(self) -> None:
        assert "passes" not in render_result(_init_result(name="demo"))
        assert "passes: 2" in render_result(_init_result(name="demo"), verbose=True)


class TestRenderTemplates:
    def test_table(self) -> None:
        result = ServiceResult.success(
            "list_templates",
            {"count": 1, "items": [{"name": "python", "description": "Python package"}]},
        )
        output = render_result(result)
        assert "python" in output
        assert "Python package" in output

    def test_empty(self) -> None:
        result = ServiceResult.success("list_templates", {"count": 0, "items": []})
        assert "No templates found." in render_result(result)


class TestRenderError:
    def test_message_and_detail(self) -> None:
        result = ServiceResult.failure(
            "init_project", "DESTINATION_EXISTS", "Refusing [to] overwrite", files=["README.md"]
        )
        assert "Refusing [to] overwrite" in render_result(result)
        verbose = render_result(result, verbose=True)
        assert "detail:" in verbose
        assert "README.md" in verbose
