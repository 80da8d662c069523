"""
Unit tests for core modules: Config, credentials, cost estimate, PromptBuilder.

Run with:
    pytest tests/test_core.py -v
"""

import json

import pytest

from autocommit.config import Config, ConfigManager, CredentialError, resolve_api_key
from autocommit.config.credentials import API_KEY_ENV, API_KEY_FILENAME
from autocommit.llm import cost
from autocommit.llm.cost import CostEstimate, COST_PER_1K_TOKENS, COST_THRESHOLD
from autocommit.prompts import PromptBuilder, PromptConfig


class WordEncoding:
    """Stand-in for a tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text, disallowed_special=()):
        return text.split()


@pytest.fixture
def word_tokens(monkeypatch):
    monkeypatch.setattr(cost, "_get_encoding", lambda model: WordEncoding())


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

class TestResolveApiKey:

    def test_env_preferred_over_file(self, tmp_path):
        (tmp_path / API_KEY_FILENAME).write_text("sk-from-file\n")
        key, source = resolve_api_key(environ={API_KEY_ENV: "sk-from-env"}, home=tmp_path)
        assert key == "sk-from-env"
        assert API_KEY_ENV in source

    def test_file_used_when_env_missing(self, tmp_path):
        (tmp_path / API_KEY_FILENAME).write_text("  sk-from-file \n\n")
        key, source = resolve_api_key(environ={}, home=tmp_path)
        assert key == "sk-from-file"
        assert API_KEY_FILENAME in source

    def test_blank_env_falls_through_to_file(self, tmp_path):
        (tmp_path / API_KEY_FILENAME).write_text("sk-from-file")
        key, _ = resolve_api_key(environ={API_KEY_ENV: "   "}, home=tmp_path)
        assert key == "sk-from-file"

    def test_missing_everywhere_raises(self, tmp_path):
        with pytest.raises(CredentialError) as exc_info:
            resolve_api_key(environ={}, home=tmp_path)
        message = str(exc_info.value)
        assert API_KEY_ENV in message
        assert API_KEY_FILENAME in message

    def test_empty_file_raises(self, tmp_path):
        (tmp_path / API_KEY_FILENAME).write_text("   \n")
        with pytest.raises(CredentialError, match="No OpenAI API key found"):
            resolve_api_key(environ={}, home=tmp_path)

    def test_source_never_contains_key(self, tmp_path):
        _, source = resolve_api_key(environ={API_KEY_ENV: "sk-secret-123"}, home=tmp_path)
        assert "sk-secret-123" not in source


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.model == "gpt-4o-mini"
        assert config.max_tokens == 200
        assert config.cost_threshold == 0.01
        assert config.context_lines is None

    def test_frozen(self):
        config = Config()
        with pytest.raises(AttributeError):
            config.model = "other"

    def test_repr_hides_api_key(self):
        config = Config(api_key="sk-secret-123")
        assert "sk-secret-123" not in repr(config)

    def test_to_dict_excludes_key_and_none(self):
        d = Config(api_key="sk-secret").to_dict()
        assert "api_key" not in d
        assert "context_lines" not in d
        assert d["model"] == "gpt-4o-mini"

    def test_from_dict_ignores_unknown_keys_and_api_key(self):
        config = Config.from_dict({"model": "gpt-4o", "api_key": "sk-file", "unknown_key": 1})
        assert config.model == "gpt-4o"
        assert config.api_key == ""
        assert not hasattr(config, "unknown_key")

    def test_with_overrides_skips_none(self):
        config = Config().with_overrides(model=None, max_tokens=50, context_lines=0)
        assert config.model == "gpt-4o-mini"
        assert config.max_tokens == 50
        assert config.context_lines == 0

    @pytest.mark.parametrize("key, value", [
        ("max_tokens", 0),
        ("max_tokens", "200"),
        ("temperature", 3),
        ("timeout", -1),
        ("cost_threshold", 0),
        ("include_body", "yes"),
        ("context_lines", -2),
        ("model", ""),
    ])
    def test_invalid_values_fall_back_to_defaults(self, key, value, capsys):
        config = Config.from_dict({key: value})
        assert getattr(config, key) == getattr(Config(), key)
        assert "Config warning" in capsys.readouterr().err

    def test_valid_values_no_warnings(self):
        clean, warnings = Config.validate({"max_tokens": 300, "temperature": 0, "context_lines": 5})
        assert warnings == []
        assert clean == {"max_tokens": 300, "temperature": 0, "context_lines": 5}


class TestConfigManager:

    def test_load_returns_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = ConfigManager().load()
        assert config == Config()

    def test_load_reads_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".autocommitrc").write_text(json.dumps({"model": "gpt-4o", "max_tokens": 120}))

        manager = ConfigManager()
        config = manager.load()
        assert config.model == "gpt-4o"
        assert config.max_tokens == 120
        assert manager.get_config_path() == tmp_path / ".autocommitrc"

    def test_local_file_wins_over_home(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        work = tmp_path / "work"
        work.mkdir()
        (home / ".autocommitrc").write_text(json.dumps({"model": "from-home"}))
        (work / ".autocommitrc").write_text(json.dumps({"model": "from-work"}))
        monkeypatch.chdir(work)
        monkeypatch.setattr("pathlib.Path.home", lambda: home)

        assert ConfigManager().load().model == "from-work"

    def test_malformed_json_returns_defaults(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".autocommitrc").write_text("not valid json {{{")

        config = ConfigManager().load()
        assert config == Config()
        assert "Could not load" in capsys.readouterr().err

    def test_non_object_json_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".autocommitrc").write_text("[1, 2]")
        assert ConfigManager().load() == Config()


# ---------------------------------------------------------------------------
# Cost estimate
# ---------------------------------------------------------------------------

class TestCostEstimate:

    def test_cost_from_token_count(self, word_tokens):
        estimate = cost.estimate_cost("word " * 2000, "gpt-4o-mini")
        assert estimate.tokens == 2000
        assert estimate.cost == pytest.approx(2 * COST_PER_1K_TOKENS)

    def test_empty_text_costs_nothing(self, word_tokens):
        assert cost.estimate_cost("", "gpt-4o-mini") == CostEstimate(tokens=0, cost=0.0)

    def test_monotonic_in_diff_length(self, word_tokens):
        line = "+    value = compute(value) + 1\n"
        estimates = [cost.estimate_cost(line * n, "gpt-4o-mini") for n in (0, 1, 10, 100, 1000)]
        tokens = [e.tokens for e in estimates]
        costs = [e.cost for e in estimates]
        assert tokens == sorted(tokens)
        assert costs == sorted(costs)

    def test_exceeds_threshold(self):
        assert not CostEstimate(tokens=1, cost=COST_THRESHOLD).exceeds()
        assert CostEstimate(tokens=1, cost=COST_THRESHOLD + 1e-9).exceeds()
        assert CostEstimate(tokens=1, cost=0.5).exceeds(1.0) is False

    def test_threshold_in_tokens(self, word_tokens):
        # 0.01 / 0.00015 * 1000 ~= 66,667 tokens
        assert not cost.estimate_cost("w " * 66_000, "gpt-4o-mini").exceeds()
        assert cost.estimate_cost("w " * 67_000, "gpt-4o-mini").exceeds()

    def test_unknown_model_falls_back(self, monkeypatch):
        sentinel = WordEncoding()

        def unknown(model):
            raise KeyError(model)

        monkeypatch.setattr(cost.tiktoken, "encoding_for_model", unknown)
        monkeypatch.setattr(cost.tiktoken, "get_encoding", lambda name: sentinel if name == cost.FALLBACK_ENCODING else None)
        assert cost._get_encoding.__wrapped__("some-new-model") is sentinel

    @pytest.mark.parametrize("failure", [
        ConnectionError("openaipublic.blob.core.windows.net unreachable"),
        OSError("cache dir not writable"),
        ValueError("unknown encoding"),
    ])
    def test_tokenizer_failure_is_wrapped(self, monkeypatch, failure):
        def broken(model):
            raise failure

        monkeypatch.setattr(cost, "_get_encoding", broken)
        with pytest.raises(cost.CostEstimateError, match="Could not load tokenizer for 'gpt-4o-mini'"):
            cost.estimate_cost("+added line", "gpt-4o-mini")


@pytest.fixture
def real_tokenizer():
    """The gpt-4o-mini encoding; skipped when tiktoken cannot load it (e.g. offline)."""
    try:
        cost._get_encoding("gpt-4o-mini")
    except Exception as e:
        pytest.skip(f"tiktoken encoding unavailable: {e}")


@pytest.mark.usefixtures("real_tokenizer")
class TestCostEstimateWithTiktoken:

    DIFF_LINE = "+    if not text:\n+        return []\n"

    def test_counts_tokens(self):
        assert cost.count_tokens("", "gpt-4o-mini") == 0
        assert cost.count_tokens(self.DIFF_LINE, "gpt-4o-mini") > 0

    def test_monotonic_in_diff_length(self):
        header = "diff --git a/parser.py b/parser.py\n@@ -1,2 +1,4 @@\n"
        estimates = [
            cost.estimate_cost(header + self.DIFF_LINE * n, "gpt-4o-mini")
            for n in (0, 1, 5, 50, 500)
        ]
        tokens = [e.tokens for e in estimates]
        assert tokens == sorted(tokens)
        assert tokens[0] < tokens[-1]
        assert [e.cost for e in estimates] == sorted(e.cost for e in estimates)

    def test_special_tokens_in_diff_are_plain_text(self):
        diff = "+MARKER = '<|endoftext|>'\n+PROMPT = '<|fim_prefix|>'\n"
        assert cost.count_tokens(diff, "gpt-4o-mini") > 2

    def test_unknown_model_uses_fallback_encoding(self):
        assert cost.count_tokens(self.DIFF_LINE, "not-a-real-model") > 0


# ---------------------------------------------------------------------------
# PromptBuilder
# ---------------------------------------------------------------------------

class TestPromptBuilder:

    DIFF = "diff --git a/app.py b/app.py\n+def parse(text):\n+    return text.split()\n"

    @pytest.fixture
    def builder(self):
        return PromptBuilder()

    def test_two_messages_system_then_user(self, builder):
        messages = builder.build(self.DIFF)
        assert [m["role"] for m in messages] == ["system", "user"]

    def test_user_message_embeds_literal_diff(self, builder):
        user = builder.build(self.DIFF)[1]["content"]
        assert user == f"Here is the git diff:\n\n{self.DIFF}"

    def test_system_message_format_rules(self, builder):
        system = builder.build(self.DIFF)[0]["content"]
        assert "type(scope): subject" in system
        assert "imperative present tense" in system
        assert "No trailing period" in system
        assert "72 characters" in system
        for commit_type in ("feat", "fix", "docs", "style", "refactor", "test", "chore"):
            assert f"- {commit_type}:" in system

    def test_subject_length_configurable(self, builder):
        system = builder.build(self.DIFF, PromptConfig(max_subject_length=50))[0]["content"]
        assert "50 characters" in system

    def test_hint_included_when_provided(self, builder):
        system = builder.build(self.DIFF, PromptConfig(hint="fixing the login bug"))[0]["content"]
        assert "fixing the login bug" in system

    def test_hint_excluded_when_none(self, builder):
        system = builder.build(self.DIFF, PromptConfig(hint=None))[0]["content"]
        assert "<context>" not in system

    def test_forced_type_in_prompt(self, builder):
        system = builder.build(self.DIFF, PromptConfig(forced_type="fix"))[0]["content"]
        assert "Use type 'fix'" in system
        assert "Choose the most appropriate type" not in system

    def test_no_body_instruction(self, builder):
        system = builder.build(self.DIFF, PromptConfig(include_body=False))[0]["content"]
        assert "Do NOT include a body" in system

    def test_diff_not_in_system_message(self, builder):
        system = builder.build(self.DIFF)[0]["content"]
        assert "diff --git" not in system
