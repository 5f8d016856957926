"""Tests for provider self-registration."""

import pytest

import hrvoice.ai.providers  # noqa: F401  (registers every provider)
from hrvoice.ai.providers.base import LLMProvider, ModerationProvider
from hrvoice.ai.providers.registry import (
    DuplicateProviderError,
    ProviderNotFoundError,
    ProviderRegistry,
    ProviderRegistryError,
    get_registered_llm_providers,
    get_registered_moderation_providers,
    get_registered_stt_providers,
    get_registered_tts_providers,
    llm_providers,
    register_moderation_provider,
)


def _moderation_provider(provider_name: str) -> type:
    class _Provider(ModerationProvider):
        @property
        def name(self) -> str:
            return provider_name

        async def moderate(self, text):
            raise NotImplementedError

    return _Provider


class TestBuiltInProviders:
    @pytest.mark.parametrize(
        "snapshot, expected",
        [
            (get_registered_llm_providers, {"stub", "openai", "groq"}),
            (get_registered_stt_providers, {"stub", "openai_whisper", "groq_whisper"}),
            (get_registered_tts_providers, {"stub", "openai"}),
            (get_registered_moderation_providers, {"stub", "openai"}),
        ],
    )
    def test_registered_on_import(self, snapshot, expected):
        assert expected <= set(snapshot())

    def test_snapshot_is_detached(self):
        snapshot = get_registered_llm_providers()
        snapshot["bogus"] = object
        assert "bogus" not in llm_providers


class TestProviderRegistry:
    def test_register_and_get(self):
        registry = ProviderRegistry("Moderation")
        provider_class = _moderation_provider("test_moderation")

        assert registry.register(provider_class) is provider_class
        assert registry.get("test_moderation") is provider_class
        assert "test_moderation" in registry

        registry.unregister("test_moderation")
        assert "test_moderation" not in registry

    def test_get_unknown_lists_registered_names(self):
        registry = ProviderRegistry("TTS")
        registry.register(_moderation_provider("alpha"))

        with pytest.raises(ProviderNotFoundError, match="Registered providers: alpha"):
            registry.get("beta")

    def test_duplicate_name_rejected(self):
        registry = ProviderRegistry("Moderation")
        registry.register(_moderation_provider("same"))

        with pytest.raises(DuplicateProviderError):
            registry.register(_moderation_provider("same"))

    def test_missing_name_rejected(self):
        class Nameless:
            pass

        with pytest.raises(ProviderRegistryError):
            ProviderRegistry("LLM").register(Nameless)


class TestModuleDecorators:
    def test_decorator_registers_globally(self):
        provider_class = register_moderation_provider(_moderation_provider("decorated"))
        try:
            assert get_registered_moderation_providers()["decorated"] is provider_class
        finally:
            from hrvoice.ai.providers.registry import moderation_providers

            moderation_providers.unregister("decorated")

    def test_builtin_name_cannot_be_reused(self):
        class AnotherStub(LLMProvider):
            @property
            def name(self) -> str:
                return "stub"

            async def generate(self, messages, **kwargs):
                raise NotImplementedError

        with pytest.raises(DuplicateProviderError):
            llm_providers.register(AnotherStub)
