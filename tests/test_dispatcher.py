"""Tests for tool dispatch and the two block tools."""

import pytest

from edsfix.context.assembler import CONTEXT_HEADER
from edsfix.llm.azure_openai import GenerationResult
from edsfix.tools.builtin_tools.fix_block import DEFAULT_FIX_PROMPT, FIX_CONTEXT_NOTE
from edsfix.tools.builtin_tools.match_block import DEFAULT_MATCH_PROMPT, MATCH_CONTEXT_NOTE

from conftest import StubGenerationClient, write


# ═══════════════════════════════════════════════════════════════════════════════
# Registry and routing
# ═══════════════════════════════════════════════════════════════════════════════

class TestRouting:

    def test_registry_exposes_both_tools(self, make_app, stub_llm):
        app = make_app(stub_llm)
        names = [s.name for s in app.tools.list_specs()]
        assert names == ["match_html_to_block", "fix_block_based_on_suggestion"]

    def test_duplicate_registration_rejected(self, make_app, stub_llm):
        app = make_app(stub_llm)
        tool = app.tools.get("match_html_to_block")
        with pytest.raises(ValueError):
            app.tools.register(tool)

    @pytest.mark.parametrize("args", [{}, {"message": "x"}, None, {"blockName": "hero", "suggestion": "s"}])
    def test_unknown_tool_is_an_error(self, make_app, stub_llm, args):
        result = make_app(stub_llm).dispatcher.invoke("delete_everything", args)

        assert result.is_error
        assert result.content == [{"type": "text", "text": "Unknown tool: delete_everything"}]
        assert stub_llm.calls == []

    def test_missing_required_rejected_before_scan(self, make_app, stub_llm, blocks_root):
        blocks_root.rmdir()  # a scan would fail with a directory error
        result = make_app(stub_llm).dispatcher.invoke("fix_block_based_on_suggestion", {"blockName": "hero"})

        assert result.is_error
        assert "Invalid arguments for fix_block_based_on_suggestion" in result.joined_text
        assert "suggestion" in result.joined_text
        assert stub_llm.calls == []

    def test_exception_inside_tool_becomes_envelope(self, make_app, stub_llm, monkeypatch):
        app = make_app(stub_llm)
        tool = app.tools.get("match_html_to_block")

        def boom(ctx, args):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(tool, "execute", boom)
        result = app.dispatcher.invoke("match_html_to_block", {"message": "hi"})

        assert result.is_error
        assert result.joined_text == "Error: kaboom"


# ═══════════════════════════════════════════════════════════════════════════════
# match_html_to_block
# ═══════════════════════════════════════════════════════════════════════════════

class TestMatchHtmlToBlock:

    def test_success_sends_context_and_prompt(self, make_app, stub_llm, blocks_root):
        write(blocks_root, "cards/cards.js", "export default function decorate(block) {}")
        write(blocks_root, "cards/cards.css", ".cards { display: grid; }")

        result = make_app(stub_llm).dispatcher.invoke(
            "match_html_to_block",
            {"message": "<div class='cards'></div>", "temperature": 0.5, "maxTokens": 300},
        )

        assert not result.is_error
        assert result.to_wire() == {"content": [{"type": "text", "text": "stub answer"}], "isError": False}

        call = stub_llm.calls[0]
        assert call["message"].startswith("<div class='cards'></div>\n" + CONTEXT_HEADER)
        assert "## File: cards/cards.js" in call["message"]
        assert "## File: cards/cards.css" in call["message"]
        assert call["system"] == DEFAULT_MATCH_PROMPT + MATCH_CONTEXT_NOTE
        assert call["options"] == {"temperature": 0.5, "max_tokens": 300}

    def test_custom_system_prompt(self, make_app, stub_llm):
        make_app(stub_llm).dispatcher.invoke("match_html_to_block", {"message": "m", "systemPrompt": "Be brief."})
        assert stub_llm.calls[0]["system"] == "Be brief." + MATCH_CONTEXT_NOTE
        assert stub_llm.calls[0]["options"] == {}

    def test_missing_root_does_not_call_model(self, make_app, stub_llm, blocks_root):
        blocks_root.rmdir()
        result = make_app(stub_llm).dispatcher.invoke("match_html_to_block", {"message": "m"})

        assert result.is_error
        assert result.joined_text.startswith(f"Error reading directory {blocks_root}:")
        assert stub_llm.calls == []

    def test_generation_failure(self, make_app):
        llm = StubGenerationClient(GenerationResult(success=False, error="401 Unauthorized"))
        result = make_app(llm).dispatcher.invoke("match_html_to_block", {"message": "m"})

        assert result.is_error
        assert result.joined_text == "Error calling Azure OpenAI: 401 Unauthorized"

    def test_client_exception_treated_like_failure(self, make_app):
        llm = StubGenerationClient(raises=ConnectionError("reset by peer"))
        result = make_app(llm).dispatcher.invoke("match_html_to_block", {"message": "m"})

        assert result.is_error
        assert result.joined_text == "Error calling Azure OpenAI: reset by peer"


# ═══════════════════════════════════════════════════════════════════════════════
# fix_block_based_on_suggestion
# ═══════════════════════════════════════════════════════════════════════════════

class TestFixBlockBasedOnSuggestion:

    def test_scans_only_the_named_block(self, make_app, stub_llm, blocks_root):
        write(blocks_root, "hero/hero.js", "const img = document.createElement('img');")
        write(blocks_root, "footer/footer.js", "// footer")

        result = make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion", {"blockName": "hero", "suggestion": "add alt text"},
        )

        assert not result.is_error
        message = stub_llm.calls[0]["message"]
        assert "## File: hero.js" in message
        assert "document.createElement('img')" in message
        assert "footer" not in message
        assert "```\nhero\n```" in message
        assert "Accessibility fix suggestion:\nadd alt text" in message
        assert stub_llm.calls[0]["system"] == DEFAULT_FIX_PROMPT + FIX_CONTEXT_NOTE

    def test_file_extensions_override(self, make_app, stub_llm, blocks_root):
        write(blocks_root, "hero/hero.js", "js")
        write(blocks_root, "hero/hero.css", "css")

        make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion",
            {"blockName": "hero", "suggestion": "s", "fileExtensions": [".css"]},
        )

        message = stub_llm.calls[0]["message"]
        assert "## File: hero.css" in message
        assert "## File: hero.js" not in message

    def test_configured_prompt_and_budget(self, make_app, stub_llm, blocks_root):
        write(blocks_root, "hero/hero.js", "x" * 500)
        app = make_app(stub_llm, fix_system_prompt="House rules.", max_context_chars=100)

        app.dispatcher.invoke("fix_block_based_on_suggestion", {"blockName": "hero", "suggestion": "s"})

        call = stub_llm.calls[0]
        assert call["system"] == "House rules." + FIX_CONTEXT_NOTE
        assert "Additional files truncated" in call["message"]
        assert "x" * 500 not in call["message"]

    def test_unknown_block(self, make_app, stub_llm, blocks_root):
        result = make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion", {"blockName": "ghost", "suggestion": "s"},
        )

        assert result.is_error
        assert result.joined_text.startswith(f"Error reading directory {blocks_root}/ghost:")
        assert "Directory does not exist" in result.joined_text
        assert stub_llm.calls == []

    def test_block_name_cannot_escape_root(self, make_app, stub_llm, blocks_root):
        write(blocks_root.parent, "secret.js", "token")
        result = make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion", {"blockName": "..", "suggestion": "s"},
        )

        assert result.is_error
        assert "escapes blocks root" in result.joined_text
        assert stub_llm.calls == []

    def test_generation_failure(self, make_app, blocks_root):
        write(blocks_root, "hero/hero.js", "x")
        llm = StubGenerationClient(GenerationResult(success=False, error="quota"))
        result = make_app(llm).dispatcher.invoke(
            "fix_block_based_on_suggestion", {"blockName": "hero", "suggestion": "s"},
        )

        assert result.is_error
        assert result.joined_text == "Error calling Azure OpenAI: quota"

    @pytest.mark.parametrize("block_name", [".", "./", "hero/..", "hero/sub"])
    def test_block_name_must_be_one_directory(self, make_app, stub_llm, blocks_root, block_name):
        write(blocks_root, "hero/sub/x.js", "x")
        write(blocks_root, "footer/footer.js", "// footer")
        result = make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion", {"blockName": block_name, "suggestion": "s"},
        )

        assert result.is_error
        assert result.joined_text.startswith("Error reading directory")
        assert "Not a block directory name" in result.joined_text
        assert stub_llm.calls == []

    @pytest.mark.parametrize("extensions", [[], [""]])
    def test_empty_extension_list_scans_nothing(self, make_app, stub_llm, blocks_root, extensions):
        write(blocks_root, "hero/hero.js", "const HERO = 1;")
        result = make_app(stub_llm).dispatcher.invoke(
            "fix_block_based_on_suggestion",
            {"blockName": "hero", "suggestion": "s", "fileExtensions": extensions},
        )

        assert not result.is_error
        assert "HERO" not in stub_llm.calls[0]["message"]
        assert "## File:" not in stub_llm.calls[0]["message"]

    def test_default_prompt_mentions_best_practices(self):
        assert "Ensure the fix follows WCAG guidelines and best practices" in DEFAULT_FIX_PROMPT
