import pytest

from squix.prompts.loader import TEMPLATES_DIR, PromptLoader


def test_prompt_loader_strips_front_matter():
    loader = PromptLoader()
    content = loader.load("agents/classifier.md")
    assert not content.startswith("---")
    assert "categorizing a user's request" in content


def test_prompt_loader_reads_metadata():
    loader = PromptLoader()
    assert loader.get_metadata("agents/classifier.md")["temperature"] == 0.0
    assert loader.get_metadata("agents/analysis.md")["temperature"] == 0.3
    assert loader.get_metadata("responses/clarification.md")["name"] == "clarification"


def test_prompt_loader_renders_template():
    loader = PromptLoader()
    rendered = loader.render(
        "agents/sql_generator.md",
        user_query="Test query",
        schema_text='Table "users":',
        dialect="postgresql",
        dialect_label="PostgreSQL",
    )
    assert '"Test query"' in rendered
    assert 'Table "users":' in rendered
    assert not rendered.startswith("---")


def test_rendered_output_is_stripped():
    rendered = PromptLoader().render("responses/clarification.md", missing_info="your exam date")
    assert rendered == rendered.strip()
    assert rendered.endswith("tell me your exam date?")


def test_missing_prompt_raises():
    loader = PromptLoader()
    with pytest.raises(FileNotFoundError):
        loader.load("agents/does_not_exist.md")
    with pytest.raises(FileNotFoundError):
        loader.render("agents/does_not_exist.md")


def test_templates_ship_inside_package():
    assert (TEMPLATES_DIR / "agents" / "classifier.md").exists()


def test_custom_prompts_dir(tmp_path):
    (tmp_path / "hello.md").write_text("---\nname: hello\n---\nHello {{ name }}!\n")
    loader = PromptLoader(prompts_dir=tmp_path)
    assert loader.render("hello.md", name="Ace") == "Hello Ace!"
    assert loader.get_metadata("hello.md") == {"name": "hello"}
